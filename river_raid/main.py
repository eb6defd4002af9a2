#!/usr/bin/env python3
"""
RIVER RAID - Terminal Arcade Shooter
=====================================
Fly up the river, shoot down enemy jets, stay off the banks.

Controls:
    LEFT/RIGHT  - Move
    SPACE       - Fire
    P           - Pause
    R           - Restart after game over
    Q/ESC       - Quit
    CTRL+C      - Quit
"""

import logging
import os
import signal
import sys
import time

from blessed import Terminal

from .config import GameConfig, MIN_WIDTH, MIN_HEIGHT, config_from_env
from .engine import DoubleBuffer
from .errors import RiverRaidError, StartupError, FrameError
from .input import InputHandler
from .render import render_frame
from .simulation import GameState, new_game, advance

logger = logging.getLogger(__name__)


# =============================================================================
# LOGGING
# =============================================================================

LOG_FORMAT = '%(asctime)s %(levelname)s %(name)s: %(message)s'
LOG_HANDLER_NAME = 'river_raid'


def configure_logging(environ=None) -> logging.Handler:
    """
    Log to the file named by RIVER_RAID_LOG. The terminal belongs to the
    game, so without that variable records are discarded.

    A handler left by an earlier call is replaced, never stacked.
    Returns the installed handler for shutdown_logging().
    """
    environ = os.environ if environ is None else environ
    root = logging.getLogger('river_raid')
    for old in [h for h in root.handlers if h.get_name() == LOG_HANDLER_NAME]:
        shutdown_logging(old)

    path = environ.get('RIVER_RAID_LOG')
    if not path:
        handler = logging.NullHandler()
    else:
        level_name = environ.get('RIVER_RAID_LOG_LEVEL', 'INFO').upper()
        handler = logging.FileHandler(path, encoding='utf-8')
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.setLevel(getattr(logging, level_name, logging.INFO))

    handler.set_name(LOG_HANDLER_NAME)
    root.addHandler(handler)
    return handler


def shutdown_logging(handler: logging.Handler):
    """Detach and close a handler installed by configure_logging()."""
    logging.getLogger('river_raid').removeHandler(handler)
    handler.close()


# =============================================================================
# STARTUP
# =============================================================================

def check_terminal(term: Terminal, stdin=None):
    """Raise StartupError unless the game can draw to and read from a terminal."""
    stdin = sys.stdin if stdin is None else stdin
    if not term.is_a_tty:
        raise StartupError('output is not a terminal')
    if stdin is None or not stdin.isatty():
        raise StartupError('keyboard input is not available (stdin is not a terminal)')
    if term.width < MIN_WIDTH or term.height < MIN_HEIGHT:
        raise StartupError(
            f'Terminal too small: {term.width}x{term.height}. '
            f'Minimum: {MIN_WIDTH}x{MIN_HEIGHT}'
        )


# =============================================================================
# MAIN LOOP
# =============================================================================

class GameLoop:
    """Fixed-timestep loop: poll input, advance, render, sleep."""

    def __init__(self, term: Terminal, state: GameState, clock=time.perf_counter,
                 sleep=time.sleep):
        self.term = term
        self.state = state
        self.input_handler = InputHandler(term)
        self.buffer = DoubleBuffer(term)
        self._clock = clock
        self._sleep = sleep
        self.interrupted = False

    def draw(self):
        try:
            sys.stdout.write(self.buffer.present(render_frame(self.state)))
            sys.stdout.flush()
        except OSError as e:
            raise FrameError(f'failed to draw frame: {e}') from e

    def run_frame(self, delta: float, accumulator: float) -> float:
        """
        One display frame. Returns the leftover accumulated time.

        Commands polled this frame go to the first tick; later catch-up
        ticks get none.
        """
        config = self.state.config
        frame_time = config.frame_time

        commands = self.input_handler.poll()

        accumulator += min(delta, frame_time * config.max_catchup_ticks)
        ticks = 0
        while accumulator >= frame_time and ticks < config.max_catchup_ticks:
            self.state = advance(self.state, commands, frame_time)
            commands = []
            accumulator -= frame_time
            ticks += 1

        # Quit and pause must not wait for the next tick boundary
        if commands:
            self.state = advance(self.state, commands, 0.0)

        self.draw()
        return accumulator

    def _on_interrupt(self, signum, frame):
        self.interrupted = True

    def run(self):
        """
        Play until quit. Ctrl+C stops the loop once the frame in progress
        has been drawn.
        """
        frame_time = self.state.config.frame_time
        last_time = self._clock()
        accumulator = 0.0

        self.interrupted = False
        previous = signal.signal(signal.SIGINT, self._on_interrupt)
        try:
            while self.state.running and not self.interrupted:
                now = self._clock()
                delta = now - last_time
                last_time = now

                accumulator = self.run_frame(delta, accumulator)

                elapsed = self._clock() - now
                sleep_time = frame_time - elapsed
                if sleep_time > 0.001 and not self.interrupted:
                    self._sleep(sleep_time)
        finally:
            signal.signal(signal.SIGINT, previous)

        if self.interrupted:
            logger.info('Interrupted')


def run(config: GameConfig = None) -> int:
    """Set up the terminal, play until quit, return the process exit code."""
    handler = configure_logging()
    try:
        return _play(config)
    finally:
        shutdown_logging(handler)


def _play(config: GameConfig = None) -> int:
    term = Terminal()

    try:
        check_terminal(term)
        config = config_from_env(config).fit_terminal(term.width, term.height)
    except RiverRaidError as e:
        logger.error('Startup failed: %s', e)
        print(f'river-raid: {e}', file=sys.stderr)
        return e.exit_code

    logger.info('Starting %dx%d play area at %.0f ticks/s',
                config.width, config.height, config.tick_rate)

    try:
        with term.fullscreen(), term.cbreak(), term.hidden_cursor():
            loop = GameLoop(term, new_game(config))
            # Initial clear (only time we clear the whole screen)
            print(term.home + term.clear, end='', flush=True)
            try:
                loop.run()
            except KeyboardInterrupt:
                logger.info('Interrupted')
            finally:
                print(term.normal, end='', flush=True)
    except FrameError as e:
        logger.exception('Terminal failure')
        print(f'river-raid: {e}', file=sys.stderr)
        return e.exit_code

    logger.info('Shut down with score %d', loop.state.score)
    return 0


def main():
    """Entry point."""
    sys.exit(run())


if __name__ == '__main__':
    main()
