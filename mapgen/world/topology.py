# mapgen/world/topology.py
"""Neighbourhood rules for square and hexagonal grids.

Hex maps are stored in the same rectangular ``Grid`` as square maps using
"odd-r" offset coordinates (odd rows shoved half a cell right). Adjacency and
distance are computed in axial ``(q, r)`` space and mapped back.
"""
import math
from typing import List, Tuple

Point = Tuple[int, int]

ORTHOGONAL: Tuple[Point, ...] = ((0, -1), (1, 0), (0, 1), (-1, 0))
EIGHT_WAY: Tuple[Point, ...] = (
    (-1, -1),
    (-1, 0),
    (-1, 1),
    (0, -1),
    (0, 1),
    (1, -1),
    (1, 0),
    (1, 1),
)
AXIAL_DIRECTIONS: Tuple[Point, ...] = (
    (1, 0),
    (1, -1),
    (0, -1),
    (-1, 0),
    (-1, 1),
    (0, 1),
)


def offset_to_axial(x: int, y: int) -> Point:
    """Odd-r offset (column, row) to axial (q, r)."""
    q = x - (y - (y & 1)) // 2
    return q, y


def axial_to_offset(q: int, r: int) -> Point:
    x = q + (r - (r & 1)) // 2
    return x, r


def hex_neighbors(q: int, r: int) -> List[Point]:
    return [(q + dq, r + dr) for dq, dr in AXIAL_DIRECTIONS]


def hex_distance(a: Point, b: Point) -> int:
    """Distance in hex steps between two offset positions."""
    aq, ar = offset_to_axial(*a)
    bq, br = offset_to_axial(*b)
    dq, dr = aq - bq, ar - br
    return (abs(dq) + abs(dq + dr) + abs(dr)) // 2


class SquareTopology:
    """4-neighbour adjacency, 8-neighbour growth, Euclidean distance."""

    name = "square"

    def neighbors(self, x: int, y: int) -> List[Point]:
        return [(x + dx, y + dy) for dx, dy in ORTHOGONAL]

    def growth_neighbors(self, x: int, y: int) -> List[Point]:
        return [(x + dx, y + dy) for dx, dy in EIGHT_WAY]

    def distance(self, a: Point, b: Point) -> float:
        return math.sqrt((a[0] - b[0]) ** 2 + (a[1] - b[1]) ** 2)


class HexTopology:
    """6-neighbour axial adjacency for every purpose, hex-step distance."""

    name = "hex"

    def neighbors(self, x: int, y: int) -> List[Point]:
        q, r = offset_to_axial(x, y)
        return [axial_to_offset(nq, nr) for nq, nr in hex_neighbors(q, r)]

    def growth_neighbors(self, x: int, y: int) -> List[Point]:
        return self.neighbors(x, y)

    def distance(self, a: Point, b: Point) -> float:
        return float(hex_distance(a, b))


SQUARE = SquareTopology()
HEX = HexTopology()


def topology_for(hex_grid: bool) -> SquareTopology | HexTopology:
    return HEX if hex_grid else SQUARE
