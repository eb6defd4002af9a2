"""
Component Definitions
======================
All components are plain dataclasses with no behavior.

Every entity carries exactly one EntityTag. Systems branch on its Kind
instead of on component presence, so each system handles every kind
explicitly.
"""

from dataclasses import dataclass
from enum import Enum, auto


class Kind(Enum):
    """The three entity variants."""
    PLAYER = auto()
    MISSILE = auto()
    ENEMY = auto()


class UnknownKindError(TypeError):
    """A system was handed a Kind it does not handle."""

    def __init__(self, kind):
        super().__init__(f'unhandled entity kind: {kind!r}')
        self.kind = kind


# =============================================================================
# PHYSICS COMPONENTS
# =============================================================================

@dataclass
class Position:
    """Cell position. x is the column, y the row (0 = top of play area)."""
    x: float = 0.0
    y: float = 0.0


@dataclass
class Velocity:
    """Movement velocity in cells per second."""
    x: float = 0.0
    y: float = 0.0


@dataclass
class CollisionBox:
    """Axis-aligned bounding box for collision detection."""
    width: float = 1.0
    height: float = 1.0
    offset_x: float = 0.0  # Offset from Position
    offset_y: float = 0.0


# =============================================================================
# RENDERING
# =============================================================================

@dataclass
class Renderable:
    """Visual representation of an entity."""
    char: str = '?'
    color: int = 7  # ANSI 256 color
    layer: int = 0  # Higher layers render on top


# =============================================================================
# TAGS
# =============================================================================

@dataclass
class EntityTag:
    """Which variant this entity is."""
    kind: Kind


@dataclass
class Owner:
    """Entity that created this one (missiles point at the player)."""
    entity_id: int = -1
