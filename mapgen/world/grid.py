# mapgen/world/grid.py
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple

import numpy as np
import structlog

from utils.game_rng import GameRNG

log = structlog.get_logger()

Point = Tuple[int, int]

DOOR_ORIENTATIONS = ("north", "east", "south", "west")


@dataclass
class Door:
    """Door overlay on a cell. ``orientation`` names the side the room lies on."""
    orientation: str
    locked: bool = False
    trapped: bool = False

    def __post_init__(self) -> None:
        if self.orientation not in DOOR_ORIENTATIONS:
            raise ValueError(f"Invalid door orientation: {self.orientation}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "orientation": self.orientation,
            "locked": self.locked,
            "trapped": self.trapped,
        }


@dataclass
class Cell:
    type: str
    tile_x: int = 0
    tile_y: int = 0
    label: Optional[str] = None
    area_id: Optional[str] = None
    radioactive: bool = False
    door: Optional[Door] = None
    # Type held before a river overwrote this cell.
    original_type: Optional[str] = None

    def is_a(self, tile: str) -> bool:
        """True if the cell is ``tile`` now or was before a river overlay."""
        return self.type == tile or self.original_type == tile

    def to_dict(self) -> Dict[str, Any]:
        """Renderer-facing representation; unset optional fields are omitted."""
        out: Dict[str, Any] = {
            "type": self.type,
            "tileX": self.tile_x,
            "tileY": self.tile_y,
        }
        if self.label is not None:
            out["label"] = self.label
        if self.area_id is not None:
            out["areaId"] = self.area_id
        if self.radioactive:
            out["radioactive"] = True
        if self.door is not None:
            out["door"] = self.door.to_dict()
        if self.original_type is not None:
            out["originalType"] = self.original_type
        return out


class Grid:
    def __init__(self, width: int, height: int, fill_type: str):
        """
        Creates a width x height grid with every cell set to ``fill_type``.
        """
        if width <= 0 or height <= 0:
            log.error("Invalid grid dimensions", width=width, height=height)
            raise ValueError("Grid width and height must be positive integers.")
        self._width = width
        self._height = height
        self.rows: List[List[Cell]] = [
            [Cell(type=fill_type) for _ in range(width)] for _ in range(height)
        ]
        log.debug("Grid initialized", shape=(height, width), fill_type=fill_type)

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    def in_bounds(self, x: int, y: int) -> bool:
        """Checks if the given coordinates are within the grid boundaries."""
        return 0 <= x < self._width and 0 <= y < self._height

    def in_interior(self, x: int, y: int, border: int = 1) -> bool:
        """Checks that (x, y) lies inside the grid minus a ``border``-cell rim."""
        return (
            border <= x < self._width - border and border <= y < self._height - border
        )

    def cell(self, x: int, y: int) -> Cell:
        return self.rows[y][x]

    def type_at(self, x: int, y: int) -> str:
        return self.rows[y][x].type

    def set_type(self, x: int, y: int, tile: str, rng: GameRNG) -> Cell:
        """Writes ``tile`` at (x, y) with a fresh random sub-tile."""
        cell = self.rows[y][x]
        cell.type = tile
        cell.tile_x, cell.tile_y = rng.subtile()
        return cell

    def revert(self, x: int, y: int, tile: str, rng: GameRNG) -> None:
        """Resets a cell to background ``tile``, dropping any overlay memory."""
        cell = self.set_type(x, y, tile, rng)
        cell.original_type = None

    def positions(self) -> Iterator[Point]:
        """All coordinates in row-major order."""
        for y in range(self._height):
            for x in range(self._width):
                yield x, y

    def cells_of(self, *tiles: str) -> List[Point]:
        """Row-major positions whose current type is one of ``tiles``."""
        wanted = set(tiles)
        return [(x, y) for x, y in self.positions() if self.rows[y][x].type in wanted]

    def count(self, *tiles: str) -> int:
        return len(self.cells_of(*tiles))

    def type_mask(self, tiles: Iterable[str], include_original: bool = False) -> np.ndarray:
        """Boolean (height, width) mask of cells matching any of ``tiles``."""
        wanted = frozenset(tiles)
        mask = np.zeros((self._height, self._width), dtype=bool, order="C")
        for y, row in enumerate(self.rows):
            for x, cell in enumerate(row):
                if cell.type in wanted or (
                    include_original and cell.original_type in wanted
                ):
                    mask[y, x] = True
        return mask

    def randomize_subtiles(self, rng: GameRNG, tiles: Iterable[str]) -> None:
        """Gives every cell of the listed types a random sub-tile."""
        wanted = frozenset(tiles)
        for row in self.rows:
            for cell in row:
                if cell.type in wanted:
                    cell.tile_x, cell.tile_y = rng.subtile()

    def types(self) -> List[List[str]]:
        return [[cell.type for cell in row] for row in self.rows]

    def to_rows(self) -> List[List[Dict[str, Any]]]:
        return [[cell.to_dict() for cell in row] for row in self.rows]


def create_grid(width: int, height: int, fill_type: str) -> Grid:
    return Grid(width, height, fill_type)
