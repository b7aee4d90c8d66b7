# mapgen/themes/city.py
"""
City blocks on a fixed street grid.

The map is tiled with equal blocks separated by two-wide roads. Blocks get a
walled building with a single door, and a short lane is cut from each door out
to the street.
"""
from typing import List, Optional

import structlog

from mapgen.constants import CITY_FLOOR, CITY_ROAD, CITY_SHRUB, CITY_WALL, Theme
from mapgen.settings import CitySettings
from mapgen.themes.common import (
    DEFAULT_HEIGHT,
    DEFAULT_WIDTH,
    check_dimensions,
    check_min_floor,
    resolve_rng,
)
from mapgen.world.game_map import Building, GeneratedMap
from mapgen.world.grid import Door, Grid
from mapgen.world.labels import tag_regions
from mapgen.world.placement import Rect
from mapgen.world.topology import ORTHOGONAL
from utils.game_rng import GameRNG

log = structlog.get_logger()

REGIONS = (
    (CITY_FLOOR, "building", "B"),
    (CITY_ROAD, "road", "R"),
)

# Outward step for a door on each side of a building.
_SIDE_STEPS = {
    "north": (0, -1),
    "south": (0, 1),
    "west": (-1, 0),
    "east": (1, 0),
}
_CARVABLE = frozenset({CITY_SHRUB, CITY_WALL})


def building_blocks(width: int, height: int, settings: CitySettings) -> List[Rect]:
    """Block rectangles of the street grid, column by column."""
    road = settings.road_width
    step_x = settings.block_width + road
    step_y = settings.block_height + road
    blocks_x = (width - road) // step_x
    blocks_y = (height - road) // step_y
    blocks = [
        Rect.from_size(
            bx * step_x + road,
            by * step_y + road,
            settings.block_width,
            settings.block_height,
        )
        for bx in range(blocks_x)
        for by in range(blocks_y)
    ]
    log.debug("City blocks laid out", columns=blocks_x, rows=blocks_y)
    return blocks


def carve_roads(grid: Grid, blocks: List[Rect], road_width: int, rng: GameRNG) -> int:
    """Two-wide streets along the map edge and around every block."""
    rows = {0}
    cols = {0}
    for block in blocks:
        rows.update((block.y1 - road_width, block.y2 + 1))
        cols.update((block.x1 - road_width, block.x2 + 1))
    carved = 0
    for start in sorted(y for y in rows if 0 <= y <= grid.height - road_width):
        for y in range(start, min(start + road_width, grid.height)):
            for x in range(grid.width):
                if grid.type_at(x, y) == CITY_SHRUB:
                    grid.set_type(x, y, CITY_ROAD, rng)
                    carved += 1
    for start in sorted(x for x in cols if 0 <= x <= grid.width - road_width):
        for x in range(start, min(start + road_width, grid.width)):
            for y in range(grid.height):
                if grid.type_at(x, y) == CITY_SHRUB:
                    grid.set_type(x, y, CITY_ROAD, rng)
                    carved += 1
    log.debug("Roads carved", cells=carved)
    return carved


def door_candidates(rect: Rect) -> List[tuple[int, int, str]]:
    """Perimeter cells excluding corners, with the side each one faces."""
    candidates = []
    for x in range(rect.x1 + 1, rect.x2):
        candidates.append((x, rect.y1, "north"))
        candidates.append((x, rect.y2, "south"))
    for y in range(rect.y1 + 1, rect.y2):
        candidates.append((rect.x1, y, "west"))
        candidates.append((rect.x2, y, "east"))
    return candidates


def perimeter(rect: Rect) -> List[tuple[int, int]]:
    return [
        (x, y)
        for x, y in rect.cells()
        if x in (rect.x1, rect.x2) or y in (rect.y1, rect.y2)
    ]


def carve_path_to_road(
    grid: Grid, door: tuple[int, int], side: str, rng: GameRNG
) -> List[tuple[int, int]]:
    """Straight lane from the door in its facing direction up to the first road."""
    dx, dy = _SIDE_STEPS[side]
    x, y = door[0] + dx, door[1] + dy
    path = []
    while grid.in_bounds(x, y) and grid.type_at(x, y) != CITY_ROAD:
        if grid.type_at(x, y) in _CARVABLE:
            grid.set_type(x, y, CITY_ROAD, rng)
        path.append((x, y))
        x, y = x + dx, y + dy
    return path


def place_building(
    grid: Grid, block: Rect, settings: CitySettings, rng: GameRNG
) -> Optional[Building]:
    """Maybe builds a centred, walled building with one door inside ``block``."""
    if rng.get_float() > settings.building_chance:
        return None
    w = rng.get_int(settings.min_building_size, block.width - 2)
    h = rng.get_int(settings.min_building_size, block.height - 2)
    rect = Rect.from_size(
        block.x1 + (block.width - w) // 2, block.y1 + (block.height - h) // 2, w, h
    )

    floor_cells = []
    for x, y in Rect(rect.x1 + 1, rect.y1 + 1, rect.x2 - 1, rect.y2 - 1).cells():
        if grid.type_at(x, y) in (CITY_SHRUB, CITY_ROAD, CITY_WALL):
            grid.set_type(x, y, CITY_FLOOR, rng)
            floor_cells.append((x, y))

    door_x, door_y, side = rng.choice(door_candidates(rect))
    if grid.type_at(door_x, door_y) in _CARVABLE:
        grid.set_type(door_x, door_y, CITY_ROAD, rng)
    grid.cell(door_x, door_y).door = Door(orientation=side)
    road_path = carve_path_to_road(grid, (door_x, door_y), side, rng)

    for x, y in perimeter(rect):
        if (x, y) != (door_x, door_y) and grid.type_at(x, y) != CITY_FLOOR:
            grid.set_type(x, y, CITY_WALL, rng)

    return Building(
        rect=rect,
        door=(door_x, door_y),
        door_side=side,
        floor_cells=floor_cells,
        road_path=road_path,
    )


def spread_roads(grid: Grid, chance: float, rng: GameRNG) -> int:
    """
    Roughens street edges: each shrub touching a road becomes road with
    ``chance``. Adjacency is read from the roads as they were before the pass.
    """
    roads = grid.type_mask([CITY_ROAD])
    converted = 0
    for x, y in grid.cells_of(CITY_SHRUB):
        touches_road = any(
            grid.in_bounds(x + dx, y + dy) and roads[y + dy, x + dx]
            for dx, dy in ORTHOGONAL
        )
        if touches_road and rng.chance(chance):
            grid.set_type(x, y, CITY_ROAD, rng)
            converted += 1
    log.debug("Road edges roughened", converted=converted)
    return converted


def generate_city(
    width: int = DEFAULT_WIDTH,
    height: int = DEFAULT_HEIGHT,
    min_floor_tiles: Optional[int] = None,
    *,
    rng: Optional[GameRNG] = None,
    seed: Optional[int] = None,
    settings: Optional[CitySettings] = None,
) -> GeneratedMap:
    check_dimensions(Theme.CITY, width, height)
    rng = resolve_rng(rng, seed)
    settings = settings or CitySettings()
    smallest_block = min(settings.block_width, settings.block_height) - 2
    if smallest_block < settings.min_building_size or settings.min_building_size < 3:
        log.error(
            "Buildings do not fit city blocks",
            block_width=settings.block_width,
            block_height=settings.block_height,
            min_building_size=settings.min_building_size,
        )
        raise ValueError("City blocks must fit a building of at least min_building_size.")
    log.info("Generating city", width=width, height=height, seed=rng.initial_seed)

    grid = Grid(width, height, CITY_SHRUB)
    blocks = building_blocks(width, height, settings)
    carve_roads(grid, blocks, settings.road_width, rng)
    buildings = []
    for block in blocks:
        building = place_building(grid, block, settings, rng)
        if building is not None:
            buildings.append(building)
    grid.randomize_subtiles(rng, [CITY_SHRUB])
    spread_roads(grid, settings.road_spread_chance, rng)

    tag_regions(grid, REGIONS)
    walkable = check_min_floor(grid, Theme.CITY, min_floor_tiles)
    log.info(
        "City generated",
        blocks=len(blocks),
        buildings=len(buildings),
        walkable=walkable,
    )
    return GeneratedMap(
        theme=Theme.CITY,
        grid=grid,
        buildings=buildings,
        seed=rng.initial_seed,
    )
