"""
Game State & Simulation
========================
GameState owns one game: the world, the terrain, timers and phase.
advance() is the only way time moves forward. It never touches the
state it is given; it returns the next state.

Phases:
    RUNNING  <-> PAUSED     (TOGGLE_PAUSE)
    RUNNING   -> GAME_OVER  (player hits an enemy or the river bank)
    GAME_OVER -> RUNNING    (RESET, fresh world)
"""

import copy
import logging
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional, Tuple

from .components import Position, Kind
from .config import GameConfig
from .ecs import World
from .entities import create_player, create_missile
from .input import Command
from .systems import (
    movement_system,
    out_of_bounds_system,
    collision_system,
    terrain_crash_system,
    spawn_enemy_system,
    clamp_column,
)
from .terrain import Terrain

logger = logging.getLogger(__name__)


class Phase(Enum):
    RUNNING = 'running'
    PAUSED = 'paused'
    GAME_OVER = 'game_over'


@dataclass
class GameState:
    config: GameConfig
    world: World
    terrain: Terrain
    rng: random.Random = field(default_factory=random.Random)
    player_id: Optional[int] = None
    phase: Phase = Phase.RUNNING
    running: bool = True  # Cleared by QUIT
    clock: float = 0.0  # Simulated seconds while RUNNING
    ticks: int = 0
    scroll: float = 0.0  # Terrain rows scrolled
    fire_cooldown: float = 0.0  # Seconds until the next missile may fire
    spawn_timer: float = 0.0
    score: int = 0
    crash_site: Optional[Tuple[int, int]] = None

    def player_position(self) -> Optional[Position]:
        if self.player_id is None or not self.world.is_alive(self.player_id):
            return None
        return self.world.get_component(self.player_id, Position)

    def count(self, kind: Kind) -> int:
        return sum(1 for _ in self.world.of_kind(kind))


def new_game(config: Optional[GameConfig] = None, seed=None,
             rng: Optional[random.Random] = None) -> GameState:
    """Fresh RUNNING state with the jet centred on the bottom row."""
    config = config or GameConfig()
    world = World()
    terrain = Terrain.from_design(config.scene_design, config.width)
    player_id = create_player(world, float(config.width // 2), float(config.height - 1))
    return GameState(
        config=config,
        world=world,
        terrain=terrain,
        rng=rng if rng is not None else random.Random(seed),
        player_id=player_id,
    )


def advance(state: GameState, commands: Iterable[Command], dt: float) -> GameState:
    """
    Return the state one tick of `dt` seconds after `state`.

    Commands are applied in order first. The world only moves if the
    game is still RUNNING once every command has been handled.
    """
    nxt = copy.deepcopy(state)

    for command in commands:
        nxt = _apply_command(nxt, command)

    if nxt.phase is Phase.RUNNING:
        _tick(nxt, dt)

    return nxt


# =============================================================================
# COMMANDS
# =============================================================================

def _apply_command(state: GameState, command: Command) -> GameState:
    if command is Command.QUIT:
        state.running = False
        return state

    if state.phase is Phase.GAME_OVER:
        if command is Command.RESET:
            logger.info('Game reset after score %d', state.score)
            return new_game(state.config, rng=state.rng)
        return state

    if command is Command.TOGGLE_PAUSE:
        state.phase = Phase.PAUSED if state.phase is Phase.RUNNING else Phase.RUNNING
        logger.debug('Phase -> %s at clock %.3f', state.phase.value, state.clock)
        return state

    if state.phase is Phase.PAUSED:
        return state

    if command is Command.MOVE_LEFT:
        _move_player(state, -1)
    elif command is Command.MOVE_RIGHT:
        _move_player(state, 1)
    elif command is Command.FIRE:
        _fire(state)
    elif command is Command.RESET:
        pass  # Only meaningful after game over
    else:
        raise ValueError(f'unhandled command: {command!r}')
    return state


def _move_player(state: GameState, step: int):
    pos = state.player_position()
    if pos is not None:
        pos.x = clamp_column(pos.x + step, state.config.width)


def _fire(state: GameState) -> Optional[int]:
    """Launch one missile from the jet if the cooldown has run out."""
    pos = state.player_position()
    if pos is None or state.fire_cooldown > 0:
        return None
    state.fire_cooldown = state.config.fire_cooldown
    return create_missile(state.world, pos.x, pos.y - 1,
                          state.config.missile_speed, owner_id=state.player_id)


# =============================================================================
# TICK
# =============================================================================

def _tick(state: GameState, dt: float):
    config = state.config
    world = state.world

    state.clock += dt
    state.ticks += 1
    state.fire_cooldown = max(0.0, state.fire_cooldown - dt)

    movement_system(world, dt)

    state.scroll += config.scroll_speed * dt
    state.spawn_timer += dt
    while state.spawn_timer >= config.spawn_interval:
        state.spawn_timer -= config.spawn_interval
        spawn_enemy_system(world, state.terrain, state.rng,
                           config.height, state.scroll, config.enemy_speed)

    for event in collision_system(world, dt):
        if event['type'] == 'enemy_destroyed':
            state.score += 1
        elif event['type'] == 'player_hit':
            _game_over(state, 'collided with an enemy')

    if state.phase is Phase.RUNNING:
        if terrain_crash_system(world, state.terrain, config.height, state.scroll) is not None:
            _game_over(state, 'crashed into the river bank')

    out_of_bounds_system(world, config.width, config.height)
    world.compact()


def _game_over(state: GameState, reason: str):
    pos = state.world.get_component(state.player_id, Position) if state.player_id is not None else None
    if pos is not None:
        state.crash_site = (int(pos.x), int(pos.y))
    state.phase = Phase.GAME_OVER
    logger.info('Game over: %s. Score %d after %.1fs', reason, state.score, state.clock)
