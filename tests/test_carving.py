import pytest

from mapgen.constants import (
    DUNGEON_CORRIDOR,
    DUNGEON_FLOOR,
    DUNGEON_WALL,
    OUTDOOR_AREA,
    OUTDOOR_LAKE,
    OUTDOOR_RIVER,
    OUTDOOR_ROAD,
    OUTDOOR_SHRUB,
)
from mapgen.world.carving import (
    Corridor,
    carve_corridor,
    carve_river,
    connect_rooms,
    widen_corridors,
)
from mapgen.world.connectivity import is_reachable, matches_any
from mapgen.world.grid import Grid
from mapgen.world.placement import Rect
from utils.game_rng import GameRNG


class AlwaysRNG(GameRNG):
    def get_float(self, a=0.0, b=1.0):
        return a


class NeverRNG(GameRNG):
    def get_float(self, a=0.0, b=1.0):
        return b


def test_carve_corridor_horizontal_first():
    grid = Grid(10, 10, DUNGEON_WALL)
    path = carve_corridor(grid, (1, 1), (4, 3), DUNGEON_WALL, DUNGEON_CORRIDOR, AlwaysRNG(1))
    assert path == [(1, 1), (2, 1), (3, 1), (4, 1), (4, 2), (4, 3)]
    assert all(grid.type_at(x, y) == DUNGEON_CORRIDOR for x, y in path)
    assert grid.count(DUNGEON_CORRIDOR) == 6


def test_carve_corridor_vertical_first():
    grid = Grid(10, 10, DUNGEON_WALL)
    path = carve_corridor(grid, (4, 3), (1, 1), DUNGEON_WALL, DUNGEON_CORRIDOR, NeverRNG(1))
    assert path == [(4, 3), (4, 2), (4, 1), (3, 1), (2, 1), (1, 1)]


def test_carve_corridor_leaves_other_types_alone():
    rng = GameRNG(2)
    grid = Grid(10, 10, DUNGEON_WALL)
    floor = grid.set_type(3, 1, DUNGEON_FLOOR, rng)
    subtile = (floor.tile_x, floor.tile_y)
    path = carve_corridor(grid, (1, 1), (6, 1), DUNGEON_WALL, DUNGEON_CORRIDOR, rng)
    assert (3, 1) in path
    assert grid.type_at(3, 1) == DUNGEON_FLOOR
    assert (grid.cell(3, 1).tile_x, grid.cell(3, 1).tile_y) == subtile


def test_carve_corridor_out_of_bounds_raises():
    grid = Grid(5, 5, DUNGEON_WALL)
    with pytest.raises(IndexError):
        carve_corridor(grid, (1, 1), (7, 1), DUNGEON_WALL, DUNGEON_CORRIDOR, GameRNG(1))


def test_connect_rooms_needs_two_rooms():
    grid = Grid(20, 20, DUNGEON_WALL)
    assert connect_rooms(grid, [Rect.from_size(2, 2, 4, 4)], DUNGEON_WALL, DUNGEON_CORRIDOR, GameRNG(1)) == []
    assert grid.count(DUNGEON_CORRIDOR) == 0


def test_connect_rooms_links_every_room():
    rng = GameRNG(11)
    grid = Grid(30, 30, DUNGEON_WALL)
    rooms = [Rect.from_size(2, 2, 4, 4), Rect.from_size(20, 4, 5, 5), Rect.from_size(8, 20, 6, 4)]
    for room in rooms:
        for x, y in room.cells():
            grid.set_type(x, y, DUNGEON_FLOOR, rng)
    corridors = connect_rooms(grid, rooms, DUNGEON_WALL, DUNGEON_CORRIDOR, rng)
    assert [c.number for c in corridors] == [1, 2, 3]
    assert corridors[0].path[0] == rooms[0].center
    assert corridors[-1].path[-1] == rooms[0].center
    walkable = matches_any([DUNGEON_FLOOR, DUNGEON_CORRIDOR])
    for room in rooms[1:]:
        assert is_reachable(grid, rooms[0].center, room.center, walkable)


def test_widen_corridors_all_or_nothing():
    grid = Grid(12, 12, OUTDOOR_SHRUB)
    path = carve_corridor(grid, (2, 5), (8, 5), OUTDOOR_SHRUB, OUTDOOR_ROAD, AlwaysRNG(1))
    corridor = Corridor(number=1, path=path)

    assert widen_corridors(grid, [corridor], OUTDOOR_SHRUB, OUTDOOR_ROAD, NeverRNG(1)) == 0
    assert widen_corridors(grid, [corridor], OUTDOOR_SHRUB, OUTDOOR_ROAD, AlwaysRNG(1)) == 16
    for x in range(2, 9):
        assert grid.type_at(x, 4) == OUTDOOR_ROAD
        assert grid.type_at(x, 6) == OUTDOOR_ROAD
    assert grid.type_at(1, 5) == OUTDOOR_ROAD and grid.type_at(9, 5) == OUTDOOR_ROAD


def test_widen_corridors_keeps_border():
    grid = Grid(6, 6, OUTDOOR_SHRUB)
    corridor = Corridor(number=1, path=[(1, 1), (2, 1)])
    widen_corridors(grid, [corridor], OUTDOOR_SHRUB, OUTDOOR_ROAD, AlwaysRNG(1))
    assert all(grid.type_at(x, 0) == OUTDOOR_SHRUB for x in range(6))
    assert grid.type_at(0, 1) == OUTDOOR_SHRUB


def test_carve_river_skips_lakes_and_remembers_terrain():
    rng = AlwaysRNG(1)
    grid = Grid(8, 6, OUTDOOR_SHRUB)
    grid.set_type(3, 2, OUTDOOR_AREA, rng)
    grid.set_type(4, 2, OUTDOOR_LAKE, rng)

    converted = carve_river(grid, (1, 2), (5, 2), OUTDOOR_RIVER, (OUTDOOR_LAKE,), rng)
    assert set(converted) == {(1, 2), (2, 2), (3, 2), (5, 2)}
    assert grid.type_at(4, 2) == OUTDOOR_LAKE
    assert grid.cell(3, 2).original_type == OUTDOOR_AREA
    assert grid.cell(1, 2).original_type == OUTDOOR_SHRUB

    carve_river(grid, (1, 2), (5, 2), OUTDOOR_RIVER, (OUTDOOR_LAKE,), rng)
    assert grid.cell(3, 2).original_type == OUTDOOR_AREA


def test_carve_river_double_width():
    grid = Grid(8, 8, OUTDOOR_SHRUB)
    converted = carve_river(grid, (2, 1), (2, 3), OUTDOOR_RIVER, (OUTDOOR_LAKE,), NeverRNG(1))
    assert set(converted) == {(2, 1), (2, 2), (2, 3), (3, 1), (3, 2), (3, 3), (2, 4)}
