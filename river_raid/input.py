"""
Input Handling
===============
Translates blessed keystrokes into game commands.

Terminals deliver key presses, not key state, so each press is one
discrete command: one press of an arrow moves the jet one column.
"""

from enum import Enum
from typing import List, Optional

from .errors import FrameError


class Command(Enum):
    MOVE_LEFT = 'move_left'
    MOVE_RIGHT = 'move_right'
    FIRE = 'fire'
    TOGGLE_PAUSE = 'toggle_pause'
    QUIT = 'quit'
    RESET = 'reset'


SEQUENCE_BINDINGS = {
    'KEY_LEFT': Command.MOVE_LEFT,
    'KEY_RIGHT': Command.MOVE_RIGHT,
    'KEY_ESCAPE': Command.QUIT,
}

CHAR_BINDINGS = {
    ' ': Command.FIRE,
    'a': Command.MOVE_LEFT,
    'd': Command.MOVE_RIGHT,
    'p': Command.TOGGLE_PAUSE,
    'q': Command.QUIT,
    'r': Command.RESET,
    '\x03': Command.QUIT,  # Ctrl+C when the terminal does not raise SIGINT
}


def key_to_command(key) -> Optional[Command]:
    """Map one keystroke from blessed's inkey() to a command, or None."""
    if key is None or not key:
        return None

    if key.is_sequence:
        return SEQUENCE_BINDINGS.get(key.name)

    return CHAR_BINDINGS.get(str(key).lower())


class InputHandler:
    """
    Non-blocking keyboard poller.

    Call poll() once per frame; it drains everything the terminal has
    buffered and never waits for a key.
    """

    def __init__(self, term, max_keys_per_frame: int = 64):
        self.term = term
        self.max_keys_per_frame = max_keys_per_frame

    def poll(self) -> List[Command]:
        """Return the commands typed since the last poll, oldest first."""
        commands = []
        try:
            for _ in range(self.max_keys_per_frame):
                key = self.term.inkey(timeout=0)
                if not key:
                    break
                command = key_to_command(key)
                if command is not None:
                    commands.append(command)
        except OSError as e:
            raise FrameError(f'failed to read keyboard input: {e}') from e
        return commands
