"""
Game Configuration
===================
Tunable gameplay parameters. Spawn rate, fire cooldown and scroll speed
are product decisions, so they live here instead of in the systems.

Exports:
    GameConfig: frozen dataclass of all tunables.
    DEFAULT_SCENE_DESIGN: the river layout used by the real game.
    config_from_env: GameConfig with RIVER_RAID_* overrides applied.
"""

import math
import os
from dataclasses import dataclass, replace
from typing import Optional, Tuple

from .errors import ConfigError


# Minimum terminal size the HUD and overlays fit into
MIN_WIDTH = 40
MIN_HEIGHT = 16

# Each design row: land %, river %, land %, river %, land %, section height.
# Percentages are of the play width. The first section never holds enemies.
DesignRow = Tuple[float, float, float, float, float, int]

DEFAULT_SCENE_DESIGN: Tuple[DesignRow, ...] = (
    (20, 60, 0, 0, 20, 14),
    (25, 50, 0, 0, 25, 10),
    (15, 30, 10, 30, 15, 12),
    (30, 40, 0, 0, 30, 10),
    (10, 35, 10, 35, 10, 12),
    (20, 60, 0, 0, 20, 8),
    (35, 30, 0, 0, 35, 10),
)


_NUMERIC_FIELDS = (
    'width', 'height', 'hud_rows', 'tick_rate', 'fire_cooldown',
    'spawn_interval', 'missile_speed', 'enemy_speed', 'scroll_speed',
    'max_catchup_ticks',
)


@dataclass(frozen=True)
class GameConfig:
    """All gameplay tunables. Speeds are per second, sizes in cells."""
    width: int = 80
    height: int = 21  # Play area only; HUD rows are extra
    hud_rows: int = 3
    tick_rate: float = 30.0
    fire_cooldown: float = 0.25
    spawn_interval: float = 1.0
    missile_speed: float = 30.0
    enemy_speed: float = 6.0
    scroll_speed: float = 6.0
    max_catchup_ticks: int = 4
    scene_design: Optional[Tuple[DesignRow, ...]] = DEFAULT_SCENE_DESIGN

    def __post_init__(self):
        for name in _NUMERIC_FIELDS:
            value = getattr(self, name)
            if not math.isfinite(value):
                raise ConfigError(f'{name} must be a finite number, got {value!r}')
        if self.width < 1 or self.height < 2:
            raise ConfigError(
                f'play area must be at least 1x2, got {self.width}x{self.height}')
        if self.hud_rows < 0:
            raise ConfigError(f'hud_rows must not be negative: {self.hud_rows}')
        if self.tick_rate <= 0:
            raise ConfigError(f'tick_rate must be positive: {self.tick_rate}')
        if self.spawn_interval <= 0:
            raise ConfigError(f'spawn_interval must be positive: {self.spawn_interval}')
        if self.fire_cooldown < 0:
            raise ConfigError(f'fire_cooldown must not be negative: {self.fire_cooldown}')
        for name in ('missile_speed', 'enemy_speed', 'scroll_speed'):
            if getattr(self, name) < 0:
                raise ConfigError(f'{name} must not be negative: {getattr(self, name)}')
        if self.max_catchup_ticks < 1:
            raise ConfigError(f'max_catchup_ticks must be at least 1: {self.max_catchup_ticks}')
        if self.scene_design is not None:
            for row in self.scene_design:
                if len(row) != 6:
                    raise ConfigError(f'design row needs 6 values, got {row!r}')
                if not all(math.isfinite(value) for value in row):
                    raise ConfigError(f'design row values must be finite: {row!r}')
                if any(value < 0 for value in row):
                    raise ConfigError(f'design row values must not be negative: {row!r}')
                if sum(row[:5]) > 100:
                    raise ConfigError(f'design row spans more than 100%: {row!r}')
                if int(row[5]) < 1:
                    raise ConfigError(f'design section height must be at least 1: {row!r}')

    @property
    def frame_time(self) -> float:
        """Seconds per fixed simulation tick."""
        return 1.0 / self.tick_rate

    @property
    def screen_height(self) -> int:
        """Play area plus HUD."""
        return self.height + self.hud_rows

    def fit_terminal(self, term_width: int, term_height: int) -> 'GameConfig':
        """Return a copy sized to fill a terminal of the given size."""
        return replace(self, width=term_width, height=term_height - self.hud_rows)


_ENV_FLOATS = {
    'RIVER_RAID_TICK_RATE': 'tick_rate',
    'RIVER_RAID_FIRE_COOLDOWN': 'fire_cooldown',
    'RIVER_RAID_SPAWN_INTERVAL': 'spawn_interval',
}


def config_from_env(base: Optional[GameConfig] = None, environ=None) -> GameConfig:
    """Apply RIVER_RAID_* environment overrides to a config."""
    base = base or GameConfig()
    environ = os.environ if environ is None else environ

    overrides = {}
    for var, field_name in _ENV_FLOATS.items():
        raw = environ.get(var)
        if raw is None or raw == '':
            continue
        try:
            overrides[field_name] = float(raw)
        except ValueError:
            raise ConfigError(f'{var} must be a number, got {raw!r}') from None

    return replace(base, **overrides) if overrides else base
