# mapgen/world/placement.py
import math
from dataclasses import dataclass
from typing import Iterable, Iterator, List, NamedTuple, Optional, Sequence, Tuple

import structlog

from mapgen.world.grid import Grid
from mapgen.world.topology import SQUARE, HexTopology, SquareTopology
from utils.game_rng import GameRNG

log = structlog.get_logger()

Point = Tuple[int, int]

# --- Configuration ---
ORGANIC_EXPANSION_CHANCE = 0.4
GROWTH_CHANCE = 0.6
GROWTH_ITERATIONS = 2
GROWTH_DIRECTIONS = 4
MAX_GROWTH_SEEDS = 3
CELLS_PER_GROWTH_SEED = 8


class Rect(NamedTuple):
    """A rectangle on the map, inclusive corners."""
    x1: int
    y1: int
    x2: int
    y2: int

    @classmethod
    def from_size(cls, x: int, y: int, width: int, height: int) -> "Rect":
        return cls(x, y, x + width - 1, y + height - 1)

    @property
    def width(self) -> int:
        return self.x2 - self.x1 + 1

    @property
    def height(self) -> int:
        return self.y2 - self.y1 + 1

    @property
    def center(self) -> Point:
        return self.x1 + self.width // 2, self.y1 + self.height // 2

    def padded(self, amount: int = 1) -> "Rect":
        return Rect(
            self.x1 - amount, self.y1 - amount, self.x2 + amount, self.y2 + amount
        )

    def intersects(self, other: "Rect") -> bool:
        """Returns True if this rectangle intersects with another one."""
        return (
            self.x1 <= other.x2
            and self.x2 >= other.x1
            and self.y1 <= other.y2
            and self.y2 >= other.y1
        )

    def contains(self, x: int, y: int) -> bool:
        return self.x1 <= x <= self.x2 and self.y1 <= y <= self.y2

    def cells(self) -> Iterator[Point]:
        for y in range(self.y1, self.y2 + 1):
            for x in range(self.x1, self.x2 + 1):
                yield x, y


@dataclass
class Blob:
    """Organic area derived from a room; the unit feature overlays act on."""
    cells: List[Point]
    number: int
    room: Optional[Rect] = None
    is_lake: bool = False
    is_mountain: bool = False

    @property
    def center(self) -> Point:
        return centroid(self.cells)


def centroid(cells: Sequence[Point]) -> Point:
    """Mean position, rounded half up."""
    if not cells:
        raise ValueError("centroid of an empty cell set")
    n = len(cells)
    sx = sum(x for x, _ in cells)
    sy = sum(y for _, y in cells)
    return math.floor(sx / n + 0.5), math.floor(sy / n + 0.5)


def rooms_overlap(candidate: Rect, rooms: Iterable[Rect], buffer: int = 1) -> bool:
    """True if ``candidate`` touches any room once both are padded by ``buffer``."""
    padded = candidate.padded(buffer)
    return any(padded.intersects(room.padded(buffer)) for room in rooms)


def place_rooms(
    width: int,
    height: int,
    rng: GameRNG,
    min_size: int,
    max_size: int,
    max_rooms: int,
    max_attempts: int,
) -> List[Rect]:
    """
    Proposes random rectangles until ``max_rooms`` fit without overlap or
    ``max_attempts`` proposals are spent. Rooms keep a 1-cell border to the
    grid edge and are returned in placement order.
    """
    if min_size < 1 or min_size > max_size:
        log.error("Invalid room size range", min_size=min_size, max_size=max_size)
        raise ValueError("Room sizes must satisfy 1 <= min_size <= max_size.")

    rooms: List[Rect] = []
    attempts = 0
    while len(rooms) < max_rooms and attempts < max_attempts:
        attempts += 1
        room_w = rng.get_int(min_size, max_size)
        room_h = rng.get_int(min_size, max_size)
        max_x = width - room_w - 2
        max_y = height - room_h - 2
        if max_x < 1 or max_y < 1:
            continue
        candidate = Rect.from_size(
            rng.get_int(1, max_x), rng.get_int(1, max_y), room_w, room_h
        )
        if rooms_overlap(candidate, rooms):
            continue
        rooms.append(candidate)
        log.debug("Placed room", room=candidate, attempt=attempts)

    if len(rooms) < max_rooms:
        log.debug(
            "Room placement exhausted attempts",
            placed=len(rooms),
            requested=max_rooms,
            attempts=attempts,
        )
    log.info("Room placement finished", placed=len(rooms), attempts=attempts)
    return rooms


def organicize(
    room: Rect,
    width: int,
    height: int,
    rng: GameRNG,
    topology: SquareTopology | HexTopology = SQUARE,
) -> List[Point]:
    """
    Dilates ``room`` into an organic footprint: every rectangle cell, plus each
    in-bounds neighbour of a rectangle cell with probability 0.4.
    """
    base = list(room.cells())
    seen = set(base)
    expanded = list(base)
    for x, y in base:
        for nx, ny in topology.neighbors(x, y):
            if not rng.chance(ORGANIC_EXPANSION_CHANCE):
                continue
            if 0 <= nx < width and 0 <= ny < height and (nx, ny) not in seen:
                seen.add((nx, ny))
                expanded.append((nx, ny))
    return expanded


def grow_blobs(
    grid: Grid,
    blobs: Iterable[Blob],
    shrub_type: str,
    target_type: str,
    rng: GameRNG,
    topology: SquareTopology | HexTopology = SQUARE,
) -> int:
    """
    Bounded random diffusion around each blob: a few seed cells push up to four
    random neighbours from ``shrub_type`` to ``target_type``. Returns the number
    of converted cells.
    """
    converted = 0
    for blob in blobs:
        seed_count = min(MAX_GROWTH_SEEDS, len(blob.cells) // CELLS_PER_GROWTH_SEED)
        seeds = rng.sample(blob.cells, seed_count)
        for _ in range(GROWTH_ITERATIONS):
            for sx, sy in seeds:
                candidates = topology.growth_neighbors(sx, sy)
                rng.shuffle(candidates)
                for nx, ny in candidates[:GROWTH_DIRECTIONS]:
                    if not grid.in_interior(nx, ny):
                        continue
                    if not rng.chance(GROWTH_CHANCE):
                        continue
                    if grid.type_at(nx, ny) == shrub_type:
                        grid.set_type(nx, ny, target_type, rng)
                        converted += 1
    log.debug("Organic growth applied", converted=converted, target=target_type)
    return converted


def blob_from_room(
    room: Rect,
    number: int,
    width: int,
    height: int,
    rng: GameRNG,
    topology: SquareTopology | HexTopology = SQUARE,
) -> Blob:
    return Blob(
        cells=organicize(room, width, height, rng, topology), number=number, room=room
    )
