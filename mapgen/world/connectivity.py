# mapgen/world/connectivity.py
from collections import deque
from typing import Callable, Iterable, List, Tuple

import numpy as np
import structlog

from mapgen.world.grid import Cell, Grid
from mapgen.world.topology import SQUARE, SquareTopology, HexTopology

log = structlog.get_logger()

Point = Tuple[int, int]
CellPredicate = Callable[[Cell], bool]


def predicate_mask(grid: Grid, predicate: CellPredicate) -> np.ndarray:
    """Boolean (height, width) mask of the cells satisfying ``predicate``."""
    mask = np.zeros((grid.height, grid.width), dtype=bool)
    for y, row in enumerate(grid.rows):
        for x, cell in enumerate(row):
            if predicate(cell):
                mask[y, x] = True
    return mask


def matches_any(tiles: Iterable[str]) -> CellPredicate:
    """Predicate for cells whose type, or pre-river type, is one of ``tiles``."""
    wanted = frozenset(tiles)

    def _predicate(cell: Cell) -> bool:
        return cell.type in wanted or (
            cell.original_type is not None and cell.original_type in wanted
        )

    return _predicate


def flood_fill(
    mask: np.ndarray,
    start: Point,
    visited: np.ndarray,
    topology: SquareTopology | HexTopology = SQUARE,
) -> List[Point]:
    """Collects the component of ``mask`` containing ``start``, marking ``visited``."""
    height, width = mask.shape
    sx, sy = start
    queue = deque([(sx, sy)])
    visited[sy, sx] = True
    component: List[Point] = []
    while queue:
        cx, cy = queue.popleft()
        component.append((cx, cy))
        for nx, ny in topology.neighbors(cx, cy):
            if (
                0 <= nx < width
                and 0 <= ny < height
                and mask[ny, nx]
                and not visited[ny, nx]
            ):
                visited[ny, nx] = True
                queue.append((nx, ny))
    return component


def mask_components(
    mask: np.ndarray, topology: SquareTopology | HexTopology = SQUARE
) -> List[List[Point]]:
    """Connected components of ``mask``, discovered in row-major order."""
    visited = np.zeros_like(mask, dtype=bool)
    components: List[List[Point]] = []
    # argwhere yields (row, col) pairs in row-major order.
    for y, x in np.argwhere(mask):
        if visited[y, x]:
            continue
        components.append(flood_fill(mask, (int(x), int(y)), visited, topology))
    return components


def connected_components(
    grid: Grid,
    predicate: CellPredicate,
    topology: SquareTopology | HexTopology = SQUARE,
) -> List[List[Point]]:
    components = mask_components(predicate_mask(grid, predicate), topology)
    log.debug(
        "Connected components computed",
        count=len(components),
        sizes=sorted((len(c) for c in components), reverse=True)[:10],
        topology=topology.name,
    )
    return components


def count_neighbors(
    grid: Grid,
    x: int,
    y: int,
    predicate: CellPredicate,
    topology: SquareTopology | HexTopology = SQUARE,
) -> int:
    """Number of in-bounds neighbours of (x, y) satisfying ``predicate``."""
    return sum(
        1
        for nx, ny in topology.neighbors(x, y)
        if grid.in_bounds(nx, ny) and predicate(grid.cell(nx, ny))
    )


def is_reachable(
    grid: Grid,
    start: Point,
    goal: Point,
    predicate: CellPredicate,
    topology: SquareTopology | HexTopology = SQUARE,
) -> bool:
    """True if ``goal`` lies in the same ``predicate`` component as ``start``."""
    mask = predicate_mask(grid, predicate)
    if not mask[start[1], start[0]] or not mask[goal[1], goal[0]]:
        return False
    visited = np.zeros_like(mask, dtype=bool)
    flood_fill(mask, start, visited, topology)
    return bool(visited[goal[1], goal[0]])
