import math

from mapgen.world.topology import (
    HEX,
    SQUARE,
    axial_to_offset,
    hex_distance,
    offset_to_axial,
    topology_for,
)


def test_offset_axial_round_trip():
    for y in range(6):
        for x in range(6):
            assert axial_to_offset(*offset_to_axial(x, y)) == (x, y)


def test_hex_neighbors_even_row():
    assert set(HEX.neighbors(2, 2)) == {(3, 2), (1, 2), (1, 1), (2, 1), (1, 3), (2, 3)}


def test_hex_neighbors_odd_row():
    assert set(HEX.neighbors(2, 1)) == {(3, 1), (1, 1), (2, 0), (3, 0), (2, 2), (3, 2)}


def test_hex_neighbors_are_one_step_away_and_symmetric():
    for y in range(1, 5):
        for x in range(1, 5):
            neighbors = HEX.neighbors(x, y)
            assert len(set(neighbors)) == 6
            for n in neighbors:
                assert hex_distance((x, y), n) == 1
                assert (x, y) in HEX.neighbors(*n)


def test_hex_distance():
    assert hex_distance((0, 0), (0, 0)) == 0
    assert hex_distance((0, 0), (3, 0)) == 3
    assert hex_distance((0, 0), (0, 2)) == 2
    assert hex_distance((1, 4), (5, 0)) == hex_distance((5, 0), (1, 4))


def test_square_topology():
    assert set(SQUARE.neighbors(1, 1)) == {(1, 0), (2, 1), (1, 2), (0, 1)}
    assert len(set(SQUARE.growth_neighbors(1, 1))) == 8
    assert SQUARE.distance((0, 0), (3, 4)) == 5
    assert math.isclose(SQUARE.distance((0, 0), (1, 1)), math.sqrt(2))


def test_topology_for():
    assert topology_for(False) is SQUARE
    assert topology_for(True) is HEX
    assert HEX.growth_neighbors(3, 3) == HEX.neighbors(3, 3)
