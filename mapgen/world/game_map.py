# mapgen/world/game_map.py
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

import structlog

from mapgen.constants import IMPASSABLE_TILE, Theme, walkable_types
from mapgen.world.carving import Corridor
from mapgen.world.connectivity import connected_components, matches_any
from mapgen.world.grid import Grid, create_grid
from mapgen.world.placement import Blob, Rect
from mapgen.world.topology import HexTopology, SquareTopology, topology_for

log = structlog.get_logger()

Point = Tuple[int, int]


@dataclass(frozen=True)
class RadiationZone:
    """Circular radioactive overlay on an outdoor map."""
    center: Point
    radius: int
    cells: Tuple[Point, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "center": {"x": self.center[0], "y": self.center[1]},
            "radius": self.radius,
            "cells": [{"x": x, "y": y} for x, y in self.cells],
        }


@dataclass
class Building:
    """A city building: walled rectangle with one door opening onto a road."""
    rect: Rect
    door: Point
    door_side: str
    floor_cells: List[Point] = field(default_factory=list)
    road_path: List[Point] = field(default_factory=list)


@dataclass
class GeneratedMap:
    theme: Theme
    grid: Grid
    rooms: List[Rect] = field(default_factory=list)
    blobs: List[Blob] = field(default_factory=list)
    corridors: List[Corridor] = field(default_factory=list)
    buildings: List[Building] = field(default_factory=list)
    radiation_zone: Optional[RadiationZone] = None
    seed: Optional[int] = None
    hex_grid: bool = False
    # Set only on fallback maps.
    error: Optional[str] = None

    @property
    def width(self) -> int:
        return self.grid.width

    @property
    def height(self) -> int:
        return self.grid.height

    @property
    def topology(self) -> SquareTopology | HexTopology:
        return topology_for(self.hex_grid)

    def walkable_components(self) -> List[List[Point]]:
        """Connected walkable regions; rivers count as the terrain beneath."""
        return connected_components(
            self.grid, matches_any(walkable_types(self.theme)), self.topology
        )

    def area_ids(self) -> Dict[str, int]:
        """Cell count per area id."""
        counts: Dict[str, int] = {}
        for row in self.grid.rows:
            for cell in row:
                if cell.area_id is not None:
                    counts[cell.area_id] = counts.get(cell.area_id, 0) + 1
        return counts

    def labels(self) -> Dict[str, Point]:
        found: Dict[str, Point] = {}
        for x, y in self.grid.positions():
            label = self.grid.cell(x, y).label
            if label is not None:
                found[label] = (x, y)
        return found

    def to_dict(self) -> Dict[str, Any]:
        """Renderer-facing payload: the grid plus outdoor radiation metadata."""
        out: Dict[str, Any] = {
            "theme": self.theme.value,
            "width": self.width,
            "height": self.height,
            "hex": self.hex_grid,
            "seed": self.seed,
            "grid": self.grid.to_rows(),
        }
        if self.radiation_zone is not None:
            out["radiationZone"] = self.radiation_zone.to_dict()
        if self.error is not None:
            out["error"] = self.error
        return out


def fallback_map(
    theme: Theme, width: int, height: int, error: str, seed: Optional[int] = None
) -> GeneratedMap:
    """A map uniformly filled with the theme's impassable tile."""
    grid = create_grid(width, height, IMPASSABLE_TILE[theme])
    log.warning("Returning fallback map", theme=theme.value, error=error)
    return GeneratedMap(theme=theme, grid=grid, seed=seed, error=error)
