# mapgen/world/carving.py
from dataclasses import dataclass, field
from typing import Collection, Iterable, List, Sequence, Tuple

import structlog

from mapgen.world.grid import Grid
from mapgen.world.placement import Rect
from mapgen.world.topology import SQUARE, HexTopology, SquareTopology
from utils.game_rng import GameRNG

log = structlog.get_logger()

Point = Tuple[int, int]

WIDEN_CHANCE = 0.5
RIVER_WIDE_CHANCE = 0.5


@dataclass
class Corridor:
    """A carved connector between two room centers."""
    number: int
    path: List[Point] = field(default_factory=list)


def _span(a: int, b: int) -> range:
    """Inclusive walk from ``a`` towards ``b``."""
    step = 1 if b >= a else -1
    return range(a, b + step, step)


def _l_path(start: Point, end: Point, horizontal_first: bool) -> List[Point]:
    """Two-leg axis-aligned path from ``start`` to ``end``; the bend appears once."""
    x1, y1 = start
    x2, y2 = end
    if horizontal_first:
        path = [(x, y1) for x in _span(x1, x2)]
        path += [(x2, y) for y in _span(y1, y2)][1:]
    else:
        path = [(x1, y) for y in _span(y1, y2)]
        path += [(x, y2) for x in _span(x1, x2)][1:]
    return path


def carve_corridor(
    grid: Grid,
    start: Point,
    end: Point,
    wall_type: str,
    corridor_type: str,
    rng: GameRNG,
) -> List[Point]:
    """
    Carves an L-shaped corridor between two points, bending horizontally first
    or vertically first with equal chance. Only ``wall_type`` cells are
    converted; everything else on the way is left as is. Returns the full
    traversed path.
    """
    horizontal_first = rng.coin_flip() == "heads"
    path = _l_path(start, end, horizontal_first)
    carved = 0
    for x, y in path:
        if not grid.in_bounds(x, y):
            log.error("Corridor left the grid", pos=(x, y), start=start, end=end)
            raise IndexError(f"Corridor position {(x, y)} out of bounds")
        if grid.type_at(x, y) == wall_type:
            grid.set_type(x, y, corridor_type, rng)
            carved += 1
    log.debug(
        "Carved corridor",
        start=start,
        end=end,
        horizontal_first=horizontal_first,
        length=len(path),
        carved=carved,
    )
    return path


def connect_rooms(
    grid: Grid,
    rooms: Sequence[Rect],
    wall_type: str,
    corridor_type: str,
    rng: GameRNG,
) -> List[Corridor]:
    """Connects room i to room i+1 and the last room back to the first."""
    if len(rooms) < 2:
        log.debug("Skipping connection: fewer than two rooms", rooms=len(rooms))
        return []
    corridors: List[Corridor] = []
    for i, room in enumerate(rooms):
        nxt = rooms[(i + 1) % len(rooms)]
        path = carve_corridor(grid, room.center, nxt.center, wall_type, corridor_type, rng)
        corridors.append(Corridor(number=i + 1, path=path))
    log.info("Rooms connected", corridors=len(corridors))
    return corridors


def widen_corridors(
    grid: Grid,
    corridors: Iterable[Corridor],
    shrub_type: str,
    corridor_type: str,
    rng: GameRNG,
    topology: SquareTopology | HexTopology = SQUARE,
) -> int:
    """
    Turns each background neighbour of a corridor cell into corridor with
    probability 0.5, giving irregular 1-3 cell wide passages.
    """
    widened = 0
    for corridor in corridors:
        for x, y in corridor.path:
            for nx, ny in topology.neighbors(x, y):
                if not grid.in_interior(nx, ny):
                    continue
                if not rng.chance(WIDEN_CHANCE):
                    continue
                if grid.type_at(nx, ny) == shrub_type:
                    grid.set_type(nx, ny, corridor_type, rng)
                    widened += 1
    log.debug("Corridors widened", widened=widened, corridor_type=corridor_type)
    return widened


def _overlay_river_cell(
    grid: Grid, x: int, y: int, river_type: str, blocked: Collection[str], rng: GameRNG
) -> bool:
    if not grid.in_bounds(x, y):
        return False
    cell = grid.cell(x, y)
    if cell.type in blocked:
        return False
    if cell.type != river_type:
        cell.original_type = cell.type
    grid.set_type(x, y, river_type, rng)
    return True


def carve_river(
    grid: Grid,
    start: Point,
    end: Point,
    river_type: str,
    blocked_types: Collection[str],
    rng: GameRNG,
) -> List[Point]:
    """
    Carves a 1-2 cell wide L-shaped river. Cells of ``blocked_types`` (lakes)
    are left alone; every overwritten cell keeps its previous type in
    ``original_type`` so connectivity still treats it as what it was.
    Returns the converted positions.
    """
    horizontal_first = rng.coin_flip() == "heads"
    x1, y1 = start
    x2, y2 = end
    if horizontal_first:
        legs = [
            ([(x, y1) for x in _span(x1, x2)], (0, 1)),
            ([(x2, y) for y in _span(y1, y2)], (1, 0)),
        ]
    else:
        legs = [
            ([(x1, y) for y in _span(y1, y2)], (1, 0)),
            ([(x, y2) for x in _span(x1, x2)], (0, 1)),
        ]

    converted: List[Point] = []
    for leg, (wx, wy) in legs:
        for x, y in leg:
            width = 1 if rng.chance(RIVER_WIDE_CHANCE) else 2
            for k in range(width):
                px, py = x + wx * k, y + wy * k
                if _overlay_river_cell(grid, px, py, river_type, blocked_types, rng):
                    converted.append((px, py))
    log.info(
        "Carved river",
        start=start,
        end=end,
        horizontal_first=horizontal_first,
        cells=len(converted),
    )
    return converted
