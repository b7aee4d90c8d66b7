import math

import pytest

from mapgen.constants import (
    CAVERN_CORRIDOR,
    CAVERN_FLOOR,
    CAVERN_LAKE,
    CAVERN_RIVER,
    OUTDOOR_AREA,
    OUTDOOR_LAKE,
    OUTDOOR_MOUNTAIN,
    OUTDOOR_RIVER,
    OUTDOOR_ROAD,
    OUTDOOR_SHRUB,
    Theme,
    theme_vocabulary,
    walkable_types,
)
from mapgen.settings import OutdoorSettings
from mapgen.themes import cavern, outdoor
from mapgen.world.connectivity import connected_components, count_neighbors, matches_any
from mapgen.world.grid import Grid
from mapgen.world.placement import Blob, Rect
from mapgen.world.topology import topology_for
from utils.game_rng import GameRNG

CAVERN_REGIONS = {
    CAVERN_FLOOR: "chamber-",
    CAVERN_CORRIDOR: "corridor-",
    CAVERN_LAKE: "lake-",
    CAVERN_RIVER: "river-",
}
OUTDOOR_REGIONS = {
    OUTDOOR_AREA: "area-",
    OUTDOOR_ROAD: "road-",
    OUTDOOR_LAKE: "lake-",
    OUTDOOR_MOUNTAIN: "mountain-",
    OUTDOOR_RIVER: "river-",
}


class AlwaysRNG(GameRNG):
    def get_float(self, a=0.0, b=1.0):
        return a


def _assert_cleaned(result, road_type):
    grid = result.grid
    topology = topology_for(result.hex_grid)
    walkable = matches_any(walkable_types(result.theme))
    for x, y in grid.positions():
        if walkable(grid.cell(x, y)):
            assert count_neighbors(grid, x, y, walkable, topology) > 0, (x, y)
    for component in connected_components(grid, walkable, topology):
        assert len(component) >= 2
    for component in connected_components(grid, matches_any([road_type]), topology):
        assert len(component) >= 3


def _assert_area_ids(result, regions):
    grid = result.grid
    walkable = walkable_types(result.theme)
    for row in grid.rows:
        for cell in row:
            if cell.type not in walkable:
                assert cell.area_id is None
                continue
            assert cell.area_id is not None
            if cell.original_type is None:
                assert cell.area_id.startswith(regions[cell.type])


@pytest.mark.parametrize("hex_grid", [False, True])
@pytest.mark.parametrize("seed", [1, 5, 23])
def test_cavern_invariants(seed, hex_grid):
    result = cavern.generate_cavern(60, 60, seed=seed, hex_grid=hex_grid)
    assert result.theme is Theme.CAVERN
    assert (result.width, result.height) == (60, 60)
    vocabulary = theme_vocabulary(Theme.CAVERN)
    assert all(cell.type in vocabulary for row in result.grid.rows for cell in row)
    _assert_cleaned(result, CAVERN_CORRIDOR)
    _assert_area_ids(result, CAVERN_REGIONS)

    lakes = [b for b in result.blobs if b.is_lake]
    if result.grid.count(CAVERN_RIVER):
        assert len(lakes) >= 2


@pytest.mark.parametrize("hex_grid", [False, True])
@pytest.mark.parametrize("seed", [2, 9, 31])
def test_outdoor_invariants(seed, hex_grid):
    result = outdoor.generate_outdoor(60, 60, seed=seed, hex_grid=hex_grid)
    assert result.theme is Theme.OUTDOOR
    vocabulary = theme_vocabulary(Theme.OUTDOOR)
    assert all(cell.type in vocabulary for row in result.grid.rows for cell in row)
    _assert_cleaned(result, OUTDOOR_ROAD)
    _assert_area_ids(result, OUTDOOR_REGIONS)

    mountains = [b for b in result.blobs if b.is_mountain]
    assert len(mountains) <= 1
    for blob in mountains:
        assert blob.room.width == blob.room.height == 9
        assert not blob.is_lake


@pytest.mark.parametrize("seed", [2, 9, 31, 44])
def test_radiation_zone_is_an_overlay(seed):
    result = outdoor.generate_outdoor(seed=seed)
    zone = result.radiation_zone
    flagged = {pos for pos in result.grid.positions() if result.grid.cell(*pos).radioactive}
    if zone is None:
        assert not flagged
        return
    assert flagged == set(zone.cells)
    assert zone.radius == 8
    for x, y in zone.cells:
        assert math.dist((x, y), zone.center) <= 8
    assert result.to_dict()["radiationZone"]["radius"] == 8


def test_hex_radiation_uses_hex_distance():
    grid = Grid(30, 30, OUTDOOR_SHRUB)
    blob = Blob(cells=list(Rect(13, 13, 15, 15).cells()), number=1)
    topology = topology_for(True)
    zone = outdoor.place_radiation_zone(grid, [blob], GameRNG(1), radius=3, topology=topology)
    assert zone is not None
    assert all(topology.distance(c, zone.center) <= 3 for c in zone.cells)
    # A hex disc of radius r has 3r(r+1)+1 cells.
    assert len(zone.cells) == 37


def test_no_radiation_without_plain_areas():
    grid = Grid(20, 20, OUTDOOR_SHRUB)
    lake = Blob(cells=[(5, 5)], number=1, is_lake=True)
    assert outdoor.place_radiation_zone(grid, [lake], GameRNG(1)) is None


def test_classify_areas_allows_one_mountain():
    settings = OutdoorSettings()
    areas = [
        Blob(cells=[(1, 1)], number=1, room=Rect.from_size(1, 1, 9, 9)),
        Blob(cells=[(20, 1)], number=2, room=Rect.from_size(20, 1, 9, 9)),
        Blob(cells=[(40, 1)], number=3, room=Rect.from_size(40, 1, 5, 5)),
    ]
    outdoor.classify_areas(areas, settings, AlwaysRNG(1))
    assert [a.is_mountain for a in areas] == [True, False, False]
    assert [a.is_lake for a in areas] == [False, True, True]


def test_stamp_priorities():
    rng = GameRNG(1)
    grid = Grid(6, 1, OUTDOOR_SHRUB)
    mountain = Blob(cells=[(0, 0), (1, 0), (2, 0)], number=1, is_mountain=True)
    lake = Blob(cells=[(2, 0), (3, 0)], number=2, is_lake=True)
    plain = Blob(cells=[(3, 0), (4, 0)], number=3)
    outdoor.stamp_areas(grid, [mountain, lake, plain], rng)
    assert grid.types()[0] == [
        OUTDOOR_MOUNTAIN,
        OUTDOOR_MOUNTAIN,
        OUTDOOR_MOUNTAIN,
        OUTDOOR_LAKE,
        OUTDOOR_AREA,
        OUTDOOR_SHRUB,
    ]


def test_river_runs_from_mountain_to_nearest_lake():
    rng = AlwaysRNG(1)
    grid = Grid(30, 10, OUTDOOR_SHRUB)
    mountain = Blob(cells=[(2, 2)], number=1, is_mountain=True)
    near = Blob(cells=[(8, 2)], number=2, is_lake=True)
    far = Blob(cells=[(25, 8)], number=3, is_lake=True)
    grid.set_type(2, 2, OUTDOOR_MOUNTAIN, rng)
    grid.set_type(8, 2, OUTDOOR_LAKE, rng)
    grid.set_type(25, 8, OUTDOOR_LAKE, rng)

    river = outdoor.add_rivers(grid, [mountain, near, far], rng)
    assert set(river) == {(x, 2) for x in range(2, 8)}
    assert grid.cell(2, 2).original_type == OUTDOOR_MOUNTAIN
    assert grid.type_at(8, 2) == OUTDOOR_LAKE


def test_cavern_river_joins_two_lakes():
    rng = GameRNG(4)
    grid = Grid(20, 10, CAVERN_FLOOR)
    lakes = [
        Blob(cells=[(2, 2)], number=1, is_lake=True),
        Blob(cells=[(12, 6)], number=2, is_lake=True),
    ]
    assert cavern.join_lakes(grid, lakes[:1], rng) == []
    river = cavern.join_lakes(grid, lakes, rng)
    assert river
    assert all(grid.cell(*pos).original_type == CAVERN_FLOOR for pos in river)


def test_same_seed_same_hex_map():
    a = cavern.generate_cavern(seed=8, hex_grid=True)
    b = cavern.generate_cavern(seed=8, hex_grid=True)
    assert a.to_dict() == b.to_dict()
    assert a.to_dict()["hex"] is True
