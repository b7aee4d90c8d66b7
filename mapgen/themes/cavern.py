# mapgen/themes/cavern.py
"""
Natural caverns grown from a dungeon skeleton.

The corridor loop is carved first, then each room is dilated into an organic
chamber, passages are widened and chambers bulge outward. Some chambers flood
into lakes; two lakes may be joined by an underground river.
"""
from typing import List, Optional

import structlog

from mapgen.constants import (
    CAVERN_CORRIDOR,
    CAVERN_FLOOR,
    CAVERN_LAKE,
    CAVERN_RIVER,
    CAVERN_WALL,
    Theme,
    walkable_types,
)
from mapgen.settings import CavernSettings
from mapgen.themes.common import (
    DEFAULT_HEIGHT,
    DEFAULT_WIDTH,
    check_dimensions,
    check_min_floor,
    resolve_rng,
    stamp_cells,
)
from mapgen.world.carving import carve_river, connect_rooms, widen_corridors
from mapgen.world.cleanup import cleanup_generic_map
from mapgen.world.game_map import GeneratedMap
from mapgen.world.grid import Grid
from mapgen.world.labels import tag_regions
from mapgen.world.placement import Blob, blob_from_room, grow_blobs, place_rooms
from mapgen.world.topology import topology_for
from utils.game_rng import GameRNG

log = structlog.get_logger()

REGIONS = (
    (CAVERN_FLOOR, "chamber", "C"),
    (CAVERN_CORRIDOR, "corridor", "T"),
    (CAVERN_LAKE, "lake", "L"),
    (CAVERN_RIVER, "river", "V"),
)


def flood_chambers(
    grid: Grid, chambers: List[Blob], lake_chance: float, rng: GameRNG
) -> List[Blob]:
    """Turns each chamber into a lake with ``lake_chance``, every cell of it."""
    lakes = []
    for chamber in chambers:
        if rng.chance(lake_chance):
            stamp_cells(grid, chamber.cells, CAVERN_LAKE, rng)
            chamber.is_lake = True
            lakes.append(chamber)
    log.debug("Chambers flooded", lakes=len(lakes), chambers=len(chambers))
    return lakes


def join_lakes(grid: Grid, lakes: List[Blob], rng: GameRNG) -> List[tuple[int, int]]:
    """One river between two distinct random lakes, if there are two."""
    if len(lakes) < 2:
        log.debug("No river: fewer than two lakes", lakes=len(lakes))
        return []
    first, second = rng.sample(lakes, 2)
    return carve_river(grid, first.center, second.center, CAVERN_RIVER, (CAVERN_LAKE,), rng)


def generate_cavern(
    width: int = DEFAULT_WIDTH,
    height: int = DEFAULT_HEIGHT,
    min_floor_tiles: Optional[int] = None,
    *,
    hex_grid: bool = False,
    rng: Optional[GameRNG] = None,
    seed: Optional[int] = None,
    settings: Optional[CavernSettings] = None,
) -> GeneratedMap:
    check_dimensions(Theme.CAVERN, width, height)
    rng = resolve_rng(rng, seed)
    settings = settings or CavernSettings()
    topology = topology_for(hex_grid)
    log.info(
        "Generating cavern",
        width=width,
        height=height,
        topology=topology.name,
        seed=rng.initial_seed,
    )

    grid = Grid(width, height, CAVERN_WALL)
    rooms = place_rooms(
        width,
        height,
        rng,
        settings.min_room_size,
        settings.max_room_size,
        settings.max_rooms,
        settings.max_attempts,
    )
    corridors = connect_rooms(grid, rooms, CAVERN_WALL, CAVERN_CORRIDOR, rng)

    chambers = [
        blob_from_room(room, i + 1, width, height, rng, topology)
        for i, room in enumerate(rooms)
    ]
    for chamber in chambers:
        stamp_cells(grid, chamber.cells, CAVERN_FLOOR, rng)
    widen_corridors(grid, corridors, CAVERN_WALL, CAVERN_CORRIDOR, rng, topology)
    grow_blobs(grid, chambers, CAVERN_WALL, CAVERN_FLOOR, rng, topology)

    lakes = flood_chambers(grid, chambers, settings.lake_chance, rng)
    river = join_lakes(grid, lakes, rng)
    grid.randomize_subtiles(rng, [CAVERN_WALL])

    cleanup_generic_map(
        grid,
        walkable_types(Theme.CAVERN),
        CAVERN_WALL,
        CAVERN_CORRIDOR,
        rng,
        topology,
        settings.min_road_area,
    )
    tag_regions(grid, REGIONS, topology)
    walkable = check_min_floor(grid, Theme.CAVERN, min_floor_tiles)
    log.info(
        "Cavern generated",
        chambers=len(chambers),
        lakes=len(lakes),
        river_cells=len(river),
        walkable=walkable,
    )
    return GeneratedMap(
        theme=Theme.CAVERN,
        grid=grid,
        rooms=rooms,
        blobs=chambers,
        corridors=corridors,
        seed=rng.initial_seed,
        hex_grid=hex_grid,
    )
