# mapgen/themes/dungeon.py
"""
Rooms-and-corridors dungeon.

Rectangular rooms are carved straight into solid rock and chained into a loop
by L-shaped corridors. Wherever a corridor enters a room through a one-cell
opening a door is placed.
"""
from typing import List, Optional

import structlog

from mapgen.constants import DUNGEON_CORRIDOR, DUNGEON_FLOOR, DUNGEON_WALL, Theme
from mapgen.settings import DungeonSettings
from mapgen.themes.common import (
    DEFAULT_HEIGHT,
    DEFAULT_WIDTH,
    check_dimensions,
    check_min_floor,
    resolve_rng,
    stamp_rect,
)
from mapgen.world.carving import connect_rooms
from mapgen.world.game_map import GeneratedMap
from mapgen.world.grid import Door, Grid
from mapgen.world.labels import tag_regions
from mapgen.world.placement import place_rooms
from utils.game_rng import GameRNG

log = structlog.get_logger()

# (dx, dy, side the floor lies on)
_DOOR_DIRECTIONS = (
    (0, -1, "north"),
    (1, 0, "east"),
    (0, 1, "south"),
    (-1, 0, "west"),
)

REGIONS = (
    (DUNGEON_FLOOR, "room", "R"),
    (DUNGEON_CORRIDOR, "corridor", "C"),
)


def _is_blocked(grid: Grid, x: int, y: int) -> bool:
    """Wall, off-map, or an already placed door."""
    if not grid.in_bounds(x, y):
        return True
    cell = grid.cell(x, y)
    return cell.type == DUNGEON_WALL or cell.door is not None


def door_orientation(grid: Grid, x: int, y: int) -> Optional[str]:
    """
    Side of the room if the corridor cell at (x, y) is a doorway: exactly one
    orthogonal neighbour is floor and both cells flanking that opening are
    blocked. Otherwise None.
    """
    floors = [
        (dx, dy, side)
        for dx, dy, side in _DOOR_DIRECTIONS
        if grid.in_bounds(x + dx, y + dy) and grid.type_at(x + dx, y + dy) == DUNGEON_FLOOR
    ]
    if len(floors) != 1:
        return None
    dx, dy, side = floors[0]
    # Perpendicular to (dx, dy) is (dy, dx) and (-dy, -dx).
    if _is_blocked(grid, x + dy, y + dx) and _is_blocked(grid, x - dy, y - dx):
        return side
    return None


def place_doors(
    grid: Grid,
    rng: GameRNG,
    locked_chance: float = 1 / 3,
    trapped_chance: float = 1 / 8,
) -> List[tuple[int, int]]:
    """
    Scans corridor cells in row-major order and puts a door on every doorway.
    Doors placed earlier count as blocked for later candidates.
    """
    placed: List[tuple[int, int]] = []
    for x, y in grid.cells_of(DUNGEON_CORRIDOR):
        orientation = door_orientation(grid, x, y)
        if orientation is None:
            continue
        locked = rng.chance(locked_chance)
        trapped = rng.chance(trapped_chance)
        grid.cell(x, y).door = Door(orientation=orientation, locked=locked, trapped=trapped)
        placed.append((x, y))
    log.debug("Doors placed", count=len(placed))
    return placed


def generate_dungeon(
    width: int = DEFAULT_WIDTH,
    height: int = DEFAULT_HEIGHT,
    min_floor_tiles: Optional[int] = None,
    *,
    rng: Optional[GameRNG] = None,
    seed: Optional[int] = None,
    settings: Optional[DungeonSettings] = None,
) -> GeneratedMap:
    check_dimensions(Theme.DUNGEON, width, height)
    rng = resolve_rng(rng, seed)
    settings = settings or DungeonSettings()
    log.info("Generating dungeon", width=width, height=height, seed=rng.initial_seed)

    grid = Grid(width, height, DUNGEON_WALL)
    rooms = place_rooms(
        width,
        height,
        rng,
        settings.min_room_size,
        settings.max_room_size,
        settings.max_rooms,
        settings.max_attempts,
    )
    for room in rooms:
        stamp_rect(grid, room, DUNGEON_FLOOR, rng)
    corridors = connect_rooms(grid, rooms, DUNGEON_WALL, DUNGEON_CORRIDOR, rng)
    doors = place_doors(grid, rng, settings.locked_chance, settings.trapped_chance)
    grid.randomize_subtiles(rng, [DUNGEON_WALL])

    tag_regions(grid, REGIONS)
    walkable = check_min_floor(grid, Theme.DUNGEON, min_floor_tiles)
    log.info(
        "Dungeon generated",
        rooms=len(rooms),
        corridors=len(corridors),
        doors=len(doors),
        walkable=walkable,
    )
    return GeneratedMap(
        theme=Theme.DUNGEON,
        grid=grid,
        rooms=rooms,
        corridors=corridors,
        seed=rng.initial_seed,
    )
