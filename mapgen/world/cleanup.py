# mapgen/world/cleanup.py
from dataclasses import dataclass
from typing import Collection

import structlog

from mapgen.world.connectivity import (
    CellPredicate,
    connected_components,
    count_neighbors,
    matches_any,
)
from mapgen.world.grid import Grid
from mapgen.world.topology import SQUARE, HexTopology, SquareTopology
from utils.game_rng import GameRNG

log = structlog.get_logger()

DEFAULT_MIN_ROAD_AREA = 3
MAX_CLEANUP_ROUNDS = 16


@dataclass
class CleanupReport:
    isolated_tiles: int = 0
    singleton_areas: int = 0
    isolated_roads: int = 0
    small_road_tiles: int = 0
    rounds: int = 0

    @property
    def total(self) -> int:
        return (
            self.isolated_tiles
            + self.singleton_areas
            + self.isolated_roads
            + self.small_road_tiles
        )


def _remove_isolated(
    grid: Grid,
    predicate: CellPredicate,
    shrub_type: str,
    rng: GameRNG,
    topology: SquareTopology | HexTopology,
) -> int:
    """Reverts matching cells that have no matching neighbour."""
    isolated = [
        (x, y)
        for x, y in grid.positions()
        if predicate(grid.cell(x, y))
        and count_neighbors(grid, x, y, predicate, topology) == 0
    ]
    for x, y in isolated:
        grid.revert(x, y, shrub_type, rng)
    return len(isolated)


def _remove_small_components(
    grid: Grid,
    predicate: CellPredicate,
    min_size: int,
    shrub_type: str,
    rng: GameRNG,
    topology: SquareTopology | HexTopology,
) -> int:
    """Reverts every matching component smaller than ``min_size``."""
    removed = 0
    for component in connected_components(grid, predicate, topology):
        if len(component) < min_size:
            for x, y in component:
                grid.revert(x, y, shrub_type, rng)
            removed += len(component)
    return removed


def cleanup_generic_map(
    grid: Grid,
    walkable_types: Collection[str],
    shrub_type: str,
    road_type: str,
    rng: GameRNG,
    topology: SquareTopology | HexTopology = SQUARE,
    min_road_area: int = DEFAULT_MIN_ROAD_AREA,
) -> CleanupReport:
    """
    Removes degenerate walkable fragments left by widening and growth.

    Four passes, in order: walkable cells without walkable neighbours, walkable
    components of a single cell, road cells without road neighbours, and road
    components smaller than ``min_road_area``. Removed cells revert to
    ``shrub_type``. Removing a road fragment can strand a walkable cell, so the
    passes repeat until a round changes nothing. This is best effort; global
    reachability between areas is not checked.
    """
    report = CleanupReport()
    is_walkable = matches_any(walkable_types)
    is_road = matches_any([road_type])

    while report.rounds < MAX_CLEANUP_ROUNDS:
        report.rounds += 1
        # 1. Isolated walkable tiles
        isolated = _remove_isolated(grid, is_walkable, shrub_type, rng, topology)
        # 2. Single-tile walkable areas
        singletons = _remove_small_components(
            grid, is_walkable, 2, shrub_type, rng, topology
        )
        # 3. Road tiles with no road neighbours
        lone_roads = _remove_isolated(grid, is_road, shrub_type, rng, topology)
        # 4. Small road areas
        small_roads = _remove_small_components(
            grid, is_road, min_road_area, shrub_type, rng, topology
        )

        report.isolated_tiles += isolated
        report.singleton_areas += singletons
        report.isolated_roads += lone_roads
        report.small_road_tiles += small_roads
        log.debug(
            "Cleanup round",
            round=report.rounds,
            isolated=isolated,
            singletons=singletons,
            lone_roads=lone_roads,
            small_roads=small_roads,
        )
        if isolated + singletons + lone_roads + small_roads == 0:
            break
    else:
        log.warning("Cleanup stopped before settling", rounds=report.rounds)

    log.info(
        "Map cleanup finished",
        removed=report.total,
        rounds=report.rounds,
        topology=topology.name,
    )
    return report
