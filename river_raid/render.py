"""
Frame Rendering
================
Draws a GameState into a Frame. Reads the state only; the same state
always produces the same frame.
"""

from .components import Position, Renderable, EntityTag, Kind, UnknownKindError
from .engine import (
    Frame,
    RIVER_BLUE, LAND_GREEN, GRAY_DARK, GRAY_MED,
    NEON_CYAN, NEON_YELLOW, NEON_RED, NEON_ORANGE, WHITE, BLACK
)
from .simulation import GameState, Phase
from .terrain import Ground


LAND_CHAR = '█'
RIVER_CHAR = ' '
CRASH_CHAR = '*'

CONTROLS_TEXT = '← → move   SPACE fire   P pause   Q quit'


def render_frame(state: GameState) -> Frame:
    """Build the full frame: terrain, entities, overlays, HUD."""
    config = state.config
    frame = Frame(config.width, config.screen_height)

    render_terrain(frame, state)
    render_entities(frame, state)

    if state.crash_site is not None:
        cx, cy = state.crash_site
        frame.put(cx, cy, CRASH_CHAR, NEON_ORANGE)

    if state.phase is Phase.PAUSED:
        render_paused(frame, state)
    elif state.phase is Phase.GAME_OVER:
        render_game_over(frame, state)

    render_hud(frame, state)
    return frame


def render_terrain(frame: Frame, state: GameState):
    height = state.config.height
    for y in range(height):
        row = state.terrain.row_at(y, height, state.scroll)
        for x, ground in enumerate(row.cells):
            if ground is Ground.LAND:
                frame.put(x, y, LAND_CHAR, LAND_GREEN, RIVER_BLUE)
            else:
                frame.put(x, y, RIVER_CHAR, WHITE, RIVER_BLUE)


def render_entities(frame: Frame, state: GameState):
    """Draw entities sorted by layer so the player is always on top."""
    world = state.world
    height = state.config.height

    render_list = []
    for entity_id, tag, pos, rend in world.query(EntityTag, Position, Renderable):
        kind = tag.kind
        if kind is Kind.PLAYER or kind is Kind.MISSILE or kind is Kind.ENEMY:
            render_list.append((rend.layer, entity_id, pos, rend))
        else:
            raise UnknownKindError(kind)

    render_list.sort(key=lambda item: (item[0], item[1]))

    for _, _, pos, rend in render_list:
        x, y = int(round(pos.x)), int(pos.y)
        if 0 <= y < height:
            frame.put(x, y, rend.char, rend.color)


def render_paused(frame: Frame, state: GameState):
    frame.put_centered(state.config.height // 2, ' GAME PAUSED ', BLACK, WHITE)


def render_game_over(frame: Frame, state: GameState):
    mid = state.config.height // 2
    frame.put_centered(mid - 2, ' GAME OVER ', WHITE, NEON_RED)
    frame.put_centered(mid, f' SCORE: {state.score} ', NEON_YELLOW, BLACK)
    frame.put_centered(mid + 2, ' [ R - RESTART ]  [ Q - QUIT ] ', NEON_CYAN, BLACK)


def render_hud(frame: Frame, state: GameState):
    """Status bar in the rows under the play area."""
    config = state.config
    if config.hud_rows <= 0:
        return

    ui_y = config.height
    width = config.width

    frame.put_string(0, ui_y, '=' * width, GRAY_DARK)
    frame.put_string(2, ui_y, ' RIVER RAID ', NEON_CYAN)
    status = f' SCORE:{state.score}  {state.phase.value.upper().replace("_", " ")} '
    frame.put_string(max(0, width - len(status) - 1), ui_y, status, NEON_YELLOW)

    if config.hud_rows > 1:
        if state.fire_cooldown > 0:
            ready = 'MISSILE:[....]'
            color = GRAY_MED
        else:
            ready = 'MISSILE:[####]'
            color = NEON_CYAN
        frame.put_string(2, ui_y + 1, ready, color)
        frame.put_string(max(0, width - 12), ui_y + 1, f'T:{state.clock:7.1f}', GRAY_MED)

    if config.hud_rows > 2:
        frame.put_string(2, ui_y + 2, CONTROLS_TEXT[:max(0, width - 4)], GRAY_MED)


def frame_to_text(frame: Frame) -> str:
    """Plain characters of the frame, one line per row."""
    return '\n'.join(frame.row_text(y) for y in range(frame.height))
