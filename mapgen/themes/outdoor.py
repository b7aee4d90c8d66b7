# mapgen/themes/outdoor.py
"""
Outdoor wilderness: clearings joined by dirt roads through scrub.

Built on the same room/corridor skeleton as caverns. Rooms become organic
clearings; at most one of them may rise into a mountain and some flood into
lakes. Rivers run downhill from the mountain, and a radioactive hot spot is
dropped on one of the clearings.
"""
from typing import List, Optional, Tuple

import structlog

from mapgen.constants import (
    OUTDOOR_AREA,
    OUTDOOR_LAKE,
    OUTDOOR_MOUNTAIN,
    OUTDOOR_RIVER,
    OUTDOOR_ROAD,
    OUTDOOR_SHRUB,
    Theme,
    walkable_types,
)
from mapgen.settings import OutdoorSettings
from mapgen.themes.common import (
    DEFAULT_HEIGHT,
    DEFAULT_WIDTH,
    check_dimensions,
    check_min_floor,
    resolve_rng,
)
from mapgen.world.carving import carve_river, connect_rooms, widen_corridors
from mapgen.world.cleanup import cleanup_generic_map
from mapgen.world.game_map import GeneratedMap, RadiationZone
from mapgen.world.grid import Grid
from mapgen.world.labels import tag_regions
from mapgen.world.placement import Blob, blob_from_room, grow_blobs, place_rooms
from mapgen.world.topology import SQUARE, HexTopology, SquareTopology, topology_for
from utils.game_rng import GameRNG

log = structlog.get_logger()

Point = Tuple[int, int]

REGIONS = (
    (OUTDOOR_AREA, "area", "A"),
    (OUTDOOR_ROAD, "road", "R"),
    (OUTDOOR_LAKE, "lake", "L"),
    (OUTDOOR_MOUNTAIN, "mountain", "M"),
    (OUTDOOR_RIVER, "river", "V"),
)

# Types each kind of area refuses to overwrite when stamped.
_MOUNTAIN_KEEPS = frozenset({OUTDOOR_MOUNTAIN, OUTDOOR_RIVER, OUTDOOR_LAKE})
_LAKE_KEEPS = frozenset({OUTDOOR_MOUNTAIN, OUTDOOR_RIVER})
_AREA_REPLACES = frozenset({OUTDOOR_SHRUB, OUTDOOR_ROAD})


def classify_areas(areas: List[Blob], settings: OutdoorSettings, rng: GameRNG) -> None:
    """Marks at most one full-size area as mountain and some others as lakes."""
    mountain_placed = False
    for area in areas:
        room = area.room
        full_size = (
            room is not None
            and room.width == settings.max_room_size
            and room.height == settings.max_room_size
        )
        if full_size and not mountain_placed and rng.chance(settings.mountain_chance):
            area.is_mountain = True
            mountain_placed = True
        if not area.is_mountain and rng.chance(settings.lake_chance):
            area.is_lake = True


def stamp_areas(grid: Grid, areas: List[Blob], rng: GameRNG) -> None:
    """Writes areas in order: mountains beat lakes, lakes beat plain ground."""
    for area in areas:
        for x, y in area.cells:
            if not grid.in_bounds(x, y):
                continue
            current = grid.type_at(x, y)
            if area.is_mountain:
                if current not in _MOUNTAIN_KEEPS:
                    grid.set_type(x, y, OUTDOOR_MOUNTAIN, rng)
            elif area.is_lake:
                if current not in _LAKE_KEEPS:
                    grid.set_type(x, y, OUTDOOR_LAKE, rng)
            elif current in _AREA_REPLACES:
                grid.set_type(x, y, OUTDOOR_AREA, rng)


def add_rivers(
    grid: Grid,
    areas: List[Blob],
    rng: GameRNG,
    topology: SquareTopology | HexTopology = SQUARE,
) -> List[Point]:
    """
    A river from the mountain to its nearest lake, or failing that, between two
    random lakes.
    """
    lakes = [a for a in areas if a.is_lake]
    mountains = [a for a in areas if a.is_mountain]
    blocked = (OUTDOOR_LAKE,)
    if mountains and lakes:
        source = mountains[0].center
        target = min(lakes, key=lambda lake: topology.distance(source, lake.center))
        return carve_river(grid, source, target.center, OUTDOOR_RIVER, blocked, rng)
    if len(lakes) >= 2:
        first, second = rng.sample(lakes, 2)
        return carve_river(grid, first.center, second.center, OUTDOOR_RIVER, blocked, rng)
    log.debug("No river: not enough water features", lakes=len(lakes), mountains=len(mountains))
    return []


def place_radiation_zone(
    grid: Grid,
    areas: List[Blob],
    rng: GameRNG,
    radius: int = 8,
    jitter: int = 2,
    topology: SquareTopology | HexTopology = SQUARE,
) -> Optional[RadiationZone]:
    """
    Flags every cell within ``radius`` of a jittered clearing center as
    radioactive. Terrain types are left unchanged.
    """
    candidates = [a for a in areas if a.cells and not a.is_lake and not a.is_mountain]
    if not candidates:
        log.debug("No radiation zone: no plain areas")
        return None
    target = rng.choice(candidates)
    ax, ay = target.center
    center = (ax + rng.get_int(-jitter, jitter), ay + rng.get_int(-jitter, jitter))
    cx, cy = center
    # Hex rows shift sideways, so scan a wider box there.
    reach = radius * 2 if topology.name == "hex" else radius
    cells: List[Point] = []
    for y in range(max(0, cy - reach), min(grid.height - 1, cy + reach) + 1):
        for x in range(max(0, cx - reach), min(grid.width - 1, cx + reach) + 1):
            if topology.distance((x, y), center) <= radius:
                grid.cell(x, y).radioactive = True
                cells.append((x, y))
    log.info("Radiation zone placed", center=center, radius=radius, cells=len(cells))
    return RadiationZone(center=center, radius=radius, cells=tuple(cells))


def generate_outdoor(
    width: int = DEFAULT_WIDTH,
    height: int = DEFAULT_HEIGHT,
    min_floor_tiles: Optional[int] = None,
    *,
    hex_grid: bool = False,
    rng: Optional[GameRNG] = None,
    seed: Optional[int] = None,
    settings: Optional[OutdoorSettings] = None,
) -> GeneratedMap:
    check_dimensions(Theme.OUTDOOR, width, height)
    rng = resolve_rng(rng, seed)
    settings = settings or OutdoorSettings()
    topology = topology_for(hex_grid)
    log.info(
        "Generating outdoor map",
        width=width,
        height=height,
        topology=topology.name,
        seed=rng.initial_seed,
    )

    grid = Grid(width, height, OUTDOOR_SHRUB)
    rooms = place_rooms(
        width,
        height,
        rng,
        settings.min_room_size,
        settings.max_room_size,
        settings.max_rooms,
        settings.max_attempts,
    )
    corridors = connect_rooms(grid, rooms, OUTDOOR_SHRUB, OUTDOOR_ROAD, rng)

    areas = [
        blob_from_room(room, i + 1, width, height, rng, topology)
        for i, room in enumerate(rooms)
    ]
    classify_areas(areas, settings, rng)
    stamp_areas(grid, areas, rng)
    widen_corridors(grid, corridors, OUTDOOR_SHRUB, OUTDOOR_ROAD, rng, topology)
    plain = [a for a in areas if not a.is_lake and not a.is_mountain]
    grow_blobs(grid, plain, OUTDOOR_SHRUB, OUTDOOR_AREA, rng, topology)
    grid.randomize_subtiles(rng, [OUTDOOR_SHRUB])

    river = add_rivers(grid, areas, rng, topology)
    zone = place_radiation_zone(
        grid,
        areas,
        rng,
        settings.radiation_radius,
        settings.radiation_jitter,
        topology,
    )

    cleanup_generic_map(
        grid,
        walkable_types(Theme.OUTDOOR),
        OUTDOOR_SHRUB,
        OUTDOOR_ROAD,
        rng,
        topology,
        settings.min_road_area,
    )
    tag_regions(grid, REGIONS, topology)
    walkable = check_min_floor(grid, Theme.OUTDOOR, min_floor_tiles)
    log.info(
        "Outdoor map generated",
        areas=len(areas),
        lakes=sum(a.is_lake for a in areas),
        mountains=sum(a.is_mountain for a in areas),
        river_cells=len(river),
        radiation=zone is not None,
        walkable=walkable,
    )
    return GeneratedMap(
        theme=Theme.OUTDOOR,
        grid=grid,
        rooms=rooms,
        blobs=areas,
        corridors=corridors,
        radiation_zone=zone,
        seed=rng.initial_seed,
        hex_grid=hex_grid,
    )
