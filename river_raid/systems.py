"""
ECS Systems
============
Functions that update the world for one tick. Each system branches on
the entity Kind and raises UnknownKindError for anything it does not
handle.
"""

from typing import List, Optional, Tuple
import random

from .ecs import World
from .components import (
    Position, Velocity, CollisionBox, EntityTag, Kind, UnknownKindError
)
from .entities import create_enemy
from .terrain import Terrain, Ground


Box = Tuple[float, float, float, float]  # left, top, right, bottom


# =============================================================================
# PHYSICS
# =============================================================================

def movement_system(world: World, dt: float):
    """Integrate velocities. The player only moves through commands."""
    for entity_id, tag, pos in world.query(EntityTag, Position):
        kind = tag.kind
        if kind is Kind.PLAYER:
            continue
        elif kind is Kind.MISSILE or kind is Kind.ENEMY:
            vel = world.get_component(entity_id, Velocity)
            if vel:
                pos.x += vel.x * dt
                pos.y += vel.y * dt
        else:
            raise UnknownKindError(kind)


def clamp_column(x: float, width: int) -> float:
    return float(max(0, min(width - 1, int(round(x)))))


def out_of_bounds_system(world: World, width: int, height: int) -> List[int]:
    """
    Destroy missiles that left the top and enemies that left the bottom
    or sides of the play area. Returns the destroyed entity IDs.
    """
    removed = []
    for entity_id, tag, pos in world.query(EntityTag, Position):
        kind = tag.kind
        if kind is Kind.PLAYER:
            continue
        elif kind is Kind.MISSILE:
            gone = pos.y < 0 or pos.x < 0 or pos.x >= width
        elif kind is Kind.ENEMY:
            gone = pos.y >= height or pos.x < 0 or pos.x >= width
        else:
            raise UnknownKindError(kind)

        if gone:
            world.destroy_entity(entity_id)
            removed.append(entity_id)
    return removed


# =============================================================================
# COLLISION
# =============================================================================

def bounding_box(pos: Position, box: CollisionBox) -> Box:
    left = pos.x + box.offset_x
    top = pos.y + box.offset_y
    return (left, top, left + box.width, top + box.height)


def swept_box(world: World, entity_id: int, dt: float) -> Optional[Box]:
    """
    Bounding box covering everywhere the entity was during the last
    `dt` seconds, so fast missiles cannot skip over an enemy.
    """
    pos = world.get_component(entity_id, Position)
    box = world.get_component(entity_id, CollisionBox)
    if pos is None or box is None:
        return None

    left, top, right, bottom = bounding_box(pos, box)
    vel = world.get_component(entity_id, Velocity)
    if vel is None or dt <= 0:
        return (left, top, right, bottom)

    dx = vel.x * dt
    dy = vel.y * dt
    return (
        min(left, left - dx), min(top, top - dy),
        max(right, right - dx), max(bottom, bottom - dy),
    )


def boxes_overlap(a: Box, b: Box) -> bool:
    """Strict AABB overlap; boxes that only share an edge do not touch."""
    return a[0] < b[2] and b[0] < a[2] and a[1] < b[3] and b[1] < a[3]


def collision_system(world: World, dt: float) -> List[dict]:
    """
    Resolve missile/enemy and player/enemy overlaps.

    Every missile overlapping an enemy is destroyed along with it, and
    the enemy counts once however many missiles hit it. A missile that
    overlaps two enemies destroys both.

    Returns a list of event dicts:
        {'type': 'enemy_destroyed', 'enemy': id, 'missiles': [ids]}
        {'type': 'player_hit', 'player': id, 'enemy': id}
    """
    events = []

    players, missiles, enemies = [], [], []
    for entity_id, tag in world.query(EntityTag):
        kind = tag.kind
        if kind is Kind.PLAYER:
            players.append(entity_id)
        elif kind is Kind.MISSILE:
            missiles.append(entity_id)
        elif kind is Kind.ENEMY:
            enemies.append(entity_id)
        else:
            raise UnknownKindError(kind)

    boxes = {}
    for entity_id in players + missiles + enemies:
        box = swept_box(world, entity_id, dt)
        if box is not None:
            boxes[entity_id] = box

    destroyed_enemies = set()
    for enemy_id in enemies:
        enemy_box = boxes.get(enemy_id)
        if enemy_box is None:
            continue
        hits = [
            missile_id for missile_id in missiles
            if missile_id in boxes
            and boxes_overlap(boxes[missile_id], enemy_box)
        ]
        if not hits:
            continue
        destroyed_enemies.add(enemy_id)
        for missile_id in hits:
            world.destroy_entity(missile_id)
        world.destroy_entity(enemy_id)
        events.append({'type': 'enemy_destroyed', 'enemy': enemy_id, 'missiles': hits})

    for player_id in players:
        player_box = boxes.get(player_id)
        if player_box is None:
            continue
        for enemy_id in enemies:
            if enemy_id in destroyed_enemies or enemy_id not in boxes:
                continue
            if boxes_overlap(player_box, boxes[enemy_id]):
                world.destroy_entity(player_id)
                world.destroy_entity(enemy_id)
                destroyed_enemies.add(enemy_id)
                events.append({'type': 'player_hit', 'player': player_id, 'enemy': enemy_id})
                break

    return events


def terrain_crash_system(world: World, terrain: Terrain, height: int,
                         scroll: float) -> Optional[int]:
    """Destroy the player if it sits over land. Returns the player ID if so."""
    for player_id in world.of_kind(Kind.PLAYER):
        pos = world.get_component(player_id, Position)
        if pos is None:
            continue
        ground = terrain.ground_at(int(pos.x), int(pos.y), height, scroll)
        if ground is Ground.LAND:
            world.destroy_entity(player_id)
            return player_id
    return None


# =============================================================================
# SPAWNING
# =============================================================================

def spawn_enemy_system(world: World, terrain: Terrain, rng: random.Random,
                       height: int, scroll: float, speed: float) -> Optional[int]:
    """
    Spawn one enemy on a random river cell of the top screen row.
    Nothing spawns over the opening section or a row with no water.
    """
    row = terrain.row_at(0, height, scroll)
    if not row.allows_enemies:
        return None
    columns = row.river_columns()
    if not columns:
        return None
    return create_enemy(world, float(rng.choice(columns)), 0.0, speed)
