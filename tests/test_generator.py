import pytest

from mapgen import generate_map, generate_map_safe
from mapgen import generator
from mapgen.constants import IMPASSABLE_TILE, Theme
from mapgen.settings import DungeonSettings, GenerationSettings
from utils.game_rng import GameRNG


@pytest.mark.parametrize("theme", list(Theme))
def test_dispatch_by_theme(theme):
    result = generate_map(theme, 40, 30, seed=5)
    assert result.theme is theme
    assert (result.width, result.height) == (40, 30)
    assert result.error is None
    assert result.seed == 5


def test_theme_names_are_case_insensitive():
    assert generate_map("Cavern", seed=1).theme is Theme.CAVERN


@pytest.mark.parametrize("theme", ["dungeon", "cavern", "outdoor", "city"])
def test_seeded_generation_is_reproducible(theme):
    first = generate_map(theme, seed=1234).to_dict()
    second = generate_map(theme, seed=1234).to_dict()
    assert first == second


def test_injected_rng_is_used():
    rng = GameRNG(seed=99)
    result = generate_map("outdoor", rng=rng)
    assert result.seed == 99


def test_unknown_theme():
    with pytest.raises(ValueError):
        generate_map("space", seed=1)
    with pytest.raises(ValueError):
        generate_map_safe("space", seed=1)


def test_hex_only_for_cavern_and_outdoor():
    assert generate_map("outdoor", seed=1, hex_grid=True).hex_grid
    with pytest.raises(ValueError):
        generate_map("dungeon", seed=1, hex_grid=True)
    with pytest.raises(ValueError):
        generate_map_safe("city", seed=1, hex_grid=True)


def test_bad_dimensions():
    with pytest.raises(ValueError):
        generate_map("city", 0, 10)
    with pytest.raises(ValueError):
        generate_map_safe("city", 10, -1)


def test_settings_are_routed_to_the_theme():
    settings = GenerationSettings(dungeon=DungeonSettings(max_rooms=1))
    result = generate_map("dungeon", seed=3, settings=settings)
    assert len(result.rooms) == 1
    assert result.corridors == []


def test_safe_generation_falls_back_on_failure(monkeypatch):
    def boom(*args, **kwargs):
        raise RuntimeError("boom")

    monkeypatch.setitem(generator.GENERATORS, Theme.CAVERN, boom)

    with pytest.raises(RuntimeError):
        generate_map("cavern", 20, 10, seed=1)

    result = generate_map_safe("cavern", 20, 10, seed=1)
    assert result.error == "boom"
    assert result.seed == 1
    assert (result.width, result.height) == (20, 10)
    assert result.grid.count(IMPASSABLE_TILE[Theme.CAVERN]) == 200
    assert result.to_dict()["error"] == "boom"
    assert result.walkable_components() == []


def test_safe_generation_passes_through_success():
    result = generate_map_safe("city", seed=4)
    assert result.error is None
    assert result.walkable_components()
