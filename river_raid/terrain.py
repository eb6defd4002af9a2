"""
River Terrain
==============
The scrolling river strip. Sections are built from design rows and
stacked bottom-to-top into one looping strip; the visible window slides
one strip row per scroll step, so banks move down the screen.
"""

import math
from enum import Enum
from typing import List, Optional, Sequence, Tuple

from .config import DesignRow


class Ground(Enum):
    LAND = 'land'
    RIVER = 'river'


class StripRow:
    """One row of the strip: a cell per column plus whether enemies may spawn on it."""

    __slots__ = ('cells', 'allows_enemies')

    def __init__(self, cells: Tuple[Ground, ...], allows_enemies: bool):
        self.cells = cells
        self.allows_enemies = allows_enemies

    def river_columns(self) -> List[int]:
        return [x for x, ground in enumerate(self.cells) if ground is Ground.RIVER]


def _percent_to_cells(percent: float, width: int) -> int:
    return int(math.floor(percent * width / 100.0))


def build_row(design: DesignRow, width: int) -> Tuple[Ground, ...]:
    """
    Turn the five band percentages of a design row into exactly `width`
    cells. Any rounding remainder widens the last land band.
    """
    sizes = [_percent_to_cells(p, width) for p in design[:5]]
    shortfall = width - sum(sizes)
    if shortfall > 0:
        sizes[4] += shortfall

    bands = (Ground.LAND, Ground.RIVER, Ground.LAND, Ground.RIVER, Ground.LAND)
    cells: List[Ground] = []
    for ground, size in zip(bands, sizes):
        cells.extend([ground] * size)
    return tuple(cells[:width])


class Terrain:
    """
    Immutable looping river strip.

    Strip row 0 is under the bottom screen row when the scroll offset
    is 0. Deep copies share the instance since nothing mutates it.
    """

    def __init__(self, rows: Sequence[StripRow], width: int):
        if not rows:
            raise ValueError('terrain needs at least one row')
        self.rows: Tuple[StripRow, ...] = tuple(rows)
        self.width = width

    def __deepcopy__(self, memo):
        return self

    @classmethod
    def from_design(cls, design: Optional[Sequence[DesignRow]], width: int) -> 'Terrain':
        """Build the strip from design rows; None gives open water."""
        if design is None:
            return cls.open_water(width)

        rows: List[StripRow] = []
        for index, section in enumerate(design):
            cells = build_row(section, width)
            # The opening section is a safe run-up with no enemies
            allows_enemies = index > 0
            for _ in range(int(section[5])):
                rows.append(StripRow(cells, allows_enemies))
        return cls(rows, width)

    @classmethod
    def open_water(cls, width: int) -> 'Terrain':
        return cls([StripRow((Ground.RIVER,) * width, True)], width)

    def __len__(self) -> int:
        return len(self.rows)

    def row_at(self, screen_y: int, height: int, scroll: float) -> StripRow:
        """Strip row shown on screen row `screen_y` of a `height`-row window."""
        offset = int(scroll)
        index = (offset + (height - 1 - screen_y)) % len(self.rows)
        return self.rows[index]

    def ground_at(self, x: int, screen_y: int, height: int, scroll: float) -> Ground:
        if not 0 <= x < self.width:
            return Ground.LAND
        return self.row_at(screen_y, height, scroll).cells[x]
