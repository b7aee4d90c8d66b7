# mapgen/themes/common.py
"""Pieces shared by the theme generators."""
from typing import Iterable, Optional

import structlog

from mapgen.constants import walkable_types, Theme
from mapgen.world.grid import Grid
from mapgen.world.placement import Rect
from utils.game_rng import GameRNG

log = structlog.get_logger()

DEFAULT_WIDTH = 60
DEFAULT_HEIGHT = 60


def resolve_rng(rng: Optional[GameRNG], seed: Optional[int]) -> GameRNG:
    """Uses the injected generator, or builds one from ``seed``."""
    if rng is not None:
        return rng
    return GameRNG(seed=seed)


def check_dimensions(theme: Theme, width: int, height: int) -> None:
    if width <= 0 or height <= 0:
        log.error("Invalid map dimensions", theme=theme.value, width=width, height=height)
        raise ValueError("Map width and height must be positive integers.")


def stamp_rect(grid: Grid, room: Rect, tile: str, rng: GameRNG) -> None:
    for x, y in room.cells():
        if grid.in_bounds(x, y):
            grid.set_type(x, y, tile, rng)


def stamp_cells(
    grid: Grid, cells: Iterable[tuple[int, int]], tile: str, rng: GameRNG
) -> int:
    stamped = 0
    for x, y in cells:
        if grid.in_bounds(x, y):
            grid.set_type(x, y, tile, rng)
            stamped += 1
    return stamped


def check_min_floor(
    grid: Grid, theme: Theme, min_floor_tiles: Optional[int]
) -> int:
    """
    Counts walkable cells and warns when fewer than ``min_floor_tiles`` were
    produced. The threshold is advisory; generation is never retried.
    """
    walkable = grid.count(*walkable_types(theme))
    if min_floor_tiles is not None and walkable < min_floor_tiles:
        log.warning(
            "Map below requested walkable area",
            theme=theme.value,
            walkable=walkable,
            min_floor_tiles=min_floor_tiles,
        )
    return walkable
