"""
Rendering Engine
=================
Character-grid frames and a double-buffered terminal presenter.

A Frame is a plain grid that knows nothing about the terminal, so
frames can be built and compared in tests. DoubleBuffer turns a frame
into the escape sequences for the cells that changed since the last one.
"""

from dataclasses import dataclass
from typing import List, Optional


# ANSI 256 color constants
NEON_CYAN = 51
NEON_YELLOW = 226
NEON_RED = 196
NEON_ORANGE = 208

RIVER_BLUE = 19
LAND_GREEN = 28

GRAY_MED = 245
GRAY_DARK = 238

WHITE = 255
BLACK = 0

DEFAULT_FG = 7
TRANSPARENT = -1


@dataclass
class Cell:
    """A single cell in a frame."""
    char: str = ' '
    fg_color: int = DEFAULT_FG
    bg_color: int = TRANSPARENT

    def matches(self, other: 'Cell') -> bool:
        """Check if two cells are visually identical."""
        return (
            self.char == other.char and
            self.fg_color == other.fg_color and
            self.bg_color == other.bg_color
        )


class Frame:
    """A width x height grid of cells. Writes outside the grid are dropped."""

    def __init__(self, width: int, height: int):
        self.width = width
        self.height = height
        self.cells: List[List[Cell]] = [
            [Cell() for _ in range(width)]
            for _ in range(height)
        ]

    def put(self, x: int, y: int, char: str, fg_color: int = DEFAULT_FG,
            bg_color: Optional[int] = None):
        """
        Put a character at exact position. A bg_color of None keeps the
        background already in the cell, so sprites sit on the river.
        """
        if 0 <= x < self.width and 0 <= y < self.height:
            cell = self.cells[y][x]
            cell.char = char
            cell.fg_color = fg_color
            if bg_color is not None:
                cell.bg_color = bg_color

    def put_string(self, x: int, y: int, text: str, fg_color: int = DEFAULT_FG,
                   bg_color: Optional[int] = None):
        for i, char in enumerate(text):
            self.put(x + i, y, char, fg_color, bg_color)

    def put_centered(self, y: int, text: str, fg_color: int = DEFAULT_FG,
                     bg_color: Optional[int] = None):
        x = max(0, self.width // 2 - len(text) // 2)
        self.put_string(x, y, text, fg_color, bg_color)

    def char_at(self, x: int, y: int) -> str:
        return self.cells[y][x].char

    def row_text(self, y: int) -> str:
        return ''.join(cell.char for cell in self.cells[y])


class DoubleBuffer:
    """
    Double-buffered terminal presenter.

    Keeps the last presented frame and only emits output for cells
    that differ from it. No screen clears needed after the first frame.
    """

    def __init__(self, term):
        self.term = term
        self.front: Optional[Frame] = None
        self._normal = term.normal  # Cache reset sequence

    def present(self, frame: Frame) -> str:
        """Generate output for changed cells and make `frame` the front."""
        front = self.front
        if front is not None and (front.width != frame.width or front.height != frame.height):
            front = None

        output_parts = []
        normal = self._normal

        for y in range(frame.height):
            for x in range(frame.width):
                back_cell = frame.cells[y][x]
                if front is not None and back_cell.matches(front.cells[y][x]):
                    continue

                output_parts.append(self.term.move_xy(x, y))
                # Reset colors to prevent bleed
                output_parts.append(normal)
                if back_cell.bg_color >= 0:
                    output_parts.append(self.term.on_color(back_cell.bg_color))
                output_parts.append(self.term.color(back_cell.fg_color))
                output_parts.append(back_cell.char if back_cell.char else ' ')

        self.front = frame
        return ''.join(output_parts)
