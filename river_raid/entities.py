"""
Entity Factories
=================
Creation of the player jet, missiles and enemy jets.
"""

from .ecs import World
from .components import (
    Position, Velocity, CollisionBox, Renderable,
    EntityTag, Kind, Owner
)
from .engine import NEON_YELLOW, NEON_RED, WHITE


PLAYER_CHAR = 'A'
MISSILE_CHAR = '|'
ENEMY_CHAR = 'V'


def create_player(world: World, x: float, y: float) -> int:
    """Create the player jet. It has no Velocity; commands move it directly."""
    return world.spawn(
        Position(x, y),
        CollisionBox(1.0, 1.0),
        Renderable(char=PLAYER_CHAR, color=WHITE, layer=10),
        EntityTag(Kind.PLAYER),
    )


def create_missile(world: World, x: float, y: float, speed: float,
                   owner_id: int = -1) -> int:
    """Create a missile flying straight up at `speed` rows per second."""
    return world.spawn(
        Position(x, y),
        Velocity(0.0, -speed),
        CollisionBox(1.0, 1.0),
        Renderable(char=MISSILE_CHAR, color=NEON_YELLOW, layer=8),
        EntityTag(Kind.MISSILE),
        Owner(owner_id),
    )


def create_enemy(world: World, x: float, y: float, speed: float) -> int:
    """
    Create an enemy jet drifting down the river at `speed` rows per second.

    Visual: V (red)
    """
    return world.spawn(
        Position(x, y),
        Velocity(0.0, speed),
        CollisionBox(1.0, 1.0),
        Renderable(char=ENEMY_CHAR, color=NEON_RED, layer=5),
        EntityTag(Kind.ENEMY),
    )
