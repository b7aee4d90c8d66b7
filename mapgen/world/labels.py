# mapgen/world/labels.py
"""Area identifiers and human-readable labels for connected regions."""
from collections import OrderedDict
from typing import Dict, List, Optional, Sequence, Tuple

import structlog

from mapgen.world.connectivity import connected_components, matches_any
from mapgen.world.grid import Grid
from mapgen.world.placement import centroid
from mapgen.world.topology import SQUARE, HexTopology, SquareTopology

log = structlog.get_logger()

Point = Tuple[int, int]


def assign_area_ids(
    grid: Grid,
    tile_type: str,
    id_prefix: str,
    topology: SquareTopology | HexTopology = SQUARE,
) -> int:
    """
    Tags each connected component of ``tile_type`` cells (river-overlaid cells
    count as their original type) with ``"{id_prefix}-{n}"``, numbered from 1
    in row-major discovery order. Returns the number of areas.
    """
    components = connected_components(grid, matches_any([tile_type]), topology)
    for n, component in enumerate(components, start=1):
        area_id = f"{id_prefix}-{n}"
        for x, y in component:
            grid.cell(x, y).area_id = area_id
    log.debug("Assigned area ids", tile_type=tile_type, prefix=id_prefix, areas=len(components))
    return len(components)


def group_by_area_id(grid: Grid, id_prefix: str) -> Dict[str, List[Point]]:
    """Row-major cell lists keyed by area id, for ids from ``id_prefix``."""
    groups: Dict[str, List[Point]] = OrderedDict()
    marker = f"{id_prefix}-"
    for x, y in grid.positions():
        area_id = grid.cell(x, y).area_id
        if area_id is not None and area_id.startswith(marker):
            groups.setdefault(area_id, []).append((x, y))
    return groups


def label_position_for_type(
    grid: Grid, positions: Sequence[Point], required_type: str
) -> Optional[Point]:
    """
    The cell of exactly ``required_type`` closest to the centroid of
    ``positions``; overlaid cells (rivers crossing an area) never host a label.
    """
    candidates = [(x, y) for x, y in positions if grid.type_at(x, y) == required_type]
    if not candidates:
        return None
    cx, cy = centroid(positions)
    return min(candidates, key=lambda p: ((p[0] - cx) ** 2 + (p[1] - cy) ** 2, p[1], p[0]))


def add_labels(grid: Grid, id_prefix: str, tile_type: str, label_prefix: str) -> int:
    """
    Places ``"{label_prefix}{i}"`` on one representative cell of every area
    tagged with ``id_prefix``. Mutates ``grid`` in place; returns labels placed.
    """
    placed = 0
    for index, cells in enumerate(group_by_area_id(grid, id_prefix).values(), start=1):
        position = label_position_for_type(grid, cells, tile_type)
        if position is None:
            log.debug("No label position for area", prefix=id_prefix, index=index)
            continue
        x, y = position
        grid.cell(x, y).label = f"{label_prefix}{index}"
        placed += 1
    log.debug("Labels placed", prefix=label_prefix, placed=placed)
    return placed


def tag_regions(
    grid: Grid,
    categories: Sequence[Tuple[str, str, str]],
    topology: SquareTopology | HexTopology = SQUARE,
) -> Dict[str, int]:
    """
    Runs :func:`assign_area_ids` then :func:`add_labels` for each
    ``(tile_type, id_prefix, label_prefix)`` category. All ids are assigned
    before any label is placed.
    """
    counts: Dict[str, int] = {}
    for tile_type, id_prefix, _ in categories:
        counts[id_prefix] = assign_area_ids(grid, tile_type, id_prefix, topology)
    for tile_type, id_prefix, label_prefix in categories:
        add_labels(grid, id_prefix, tile_type, label_prefix)
    log.info("Regions tagged", **counts)
    return counts
