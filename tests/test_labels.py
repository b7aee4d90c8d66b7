from mapgen.constants import CAVERN_FLOOR, CAVERN_RIVER, CAVERN_WALL
from mapgen.world.grid import Grid
from mapgen.world.labels import (
    add_labels,
    assign_area_ids,
    group_by_area_id,
    tag_regions,
)
from mapgen.world.placement import Rect
from utils.game_rng import GameRNG


def _two_chambers():
    rng = GameRNG(1)
    grid = Grid(10, 6, CAVERN_WALL)
    for room in (Rect(1, 1, 3, 3), Rect(6, 1, 8, 3)):
        for x, y in room.cells():
            grid.set_type(x, y, CAVERN_FLOOR, rng)
    return grid


def test_assign_area_ids_numbers_in_row_major_order():
    grid = _two_chambers()
    assert assign_area_ids(grid, CAVERN_FLOOR, "chamber") == 2
    assert grid.cell(1, 1).area_id == "chamber-1"
    assert grid.cell(8, 3).area_id == "chamber-2"
    assert grid.cell(0, 0).area_id is None
    groups = group_by_area_id(grid, "chamber")
    assert list(groups) == ["chamber-1", "chamber-2"]
    assert all(len(cells) == 9 for cells in groups.values())


def test_add_labels_uses_area_centroid():
    grid = _two_chambers()
    assign_area_ids(grid, CAVERN_FLOOR, "chamber")
    assert add_labels(grid, "chamber", CAVERN_FLOOR, "C") == 2
    assert grid.cell(2, 2).label == "C1"
    assert grid.cell(7, 2).label == "C2"


def test_river_overlay_keeps_area_but_not_label():
    grid = _two_chambers()
    river = grid.cell(2, 2)
    river.type = CAVERN_RIVER
    river.original_type = CAVERN_FLOOR

    assign_area_ids(grid, CAVERN_FLOOR, "chamber")
    assert river.area_id == "chamber-1"
    add_labels(grid, "chamber", CAVERN_FLOOR, "C")
    assert river.label is None
    assert grid.cell(2, 1).label == "C1"


def test_tag_regions_assigns_every_category():
    grid = _two_chambers()
    river = grid.cell(4, 2)
    river.type = CAVERN_RIVER
    counts = tag_regions(
        grid, [(CAVERN_FLOOR, "chamber", "C"), (CAVERN_RIVER, "river", "V")]
    )
    assert counts == {"chamber": 2, "river": 1}
    assert river.area_id == "river-1"
    assert river.label == "V1"
