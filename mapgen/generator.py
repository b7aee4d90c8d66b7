# mapgen/generator.py
"""
Public entry points: theme dispatch and the recovery policy.

``generate_map`` lets errors propagate. ``generate_map_safe`` is for callers
that must always have something to draw: any failure during generation is
logged and replaced by a uniformly impassable map carrying the error text.
"""
from typing import Any, Dict, Optional

import structlog

from mapgen.constants import Theme
from mapgen.settings import GenerationSettings
from mapgen.themes import GENERATORS, HEX_THEMES
from mapgen.themes.common import DEFAULT_HEIGHT, DEFAULT_WIDTH, check_dimensions
from mapgen.world.game_map import GeneratedMap, fallback_map
from utils.game_rng import GameRNG

log = structlog.get_logger()


def parse_theme(theme: Theme | str) -> Theme:
    if isinstance(theme, Theme):
        return theme
    try:
        return Theme(str(theme).lower())
    except ValueError:
        log.error("Unknown theme", theme=theme, known=[t.value for t in Theme])
        raise ValueError(f"Unknown theme: {theme!r}") from None


def _theme_kwargs(
    theme: Theme, hex_grid: bool, settings: Optional[GenerationSettings]
) -> Dict[str, Any]:
    kwargs: Dict[str, Any] = {}
    if hex_grid:
        if theme not in HEX_THEMES:
            log.error("Theme has no hex variant", theme=theme.value)
            raise ValueError(f"Theme {theme.value!r} has no hexagonal variant.")
        kwargs["hex_grid"] = True
    if settings is not None:
        kwargs["settings"] = getattr(settings, theme.value)
    return kwargs


def generate_map(
    theme: Theme | str,
    width: int = DEFAULT_WIDTH,
    height: int = DEFAULT_HEIGHT,
    *,
    seed: Optional[int] = None,
    hex_grid: bool = False,
    min_floor_tiles: Optional[int] = None,
    settings: Optional[GenerationSettings] = None,
    rng: Optional[GameRNG] = None,
) -> GeneratedMap:
    """Generates one map of ``theme``. Invalid arguments raise ``ValueError``."""
    theme = parse_theme(theme)
    check_dimensions(theme, width, height)
    kwargs = _theme_kwargs(theme, hex_grid, settings)
    rng = rng if rng is not None else GameRNG(seed=seed)
    return GENERATORS[theme](width, height, min_floor_tiles, rng=rng, **kwargs)


def generate_map_safe(
    theme: Theme | str,
    width: int = DEFAULT_WIDTH,
    height: int = DEFAULT_HEIGHT,
    **kwargs: Any,
) -> GeneratedMap:
    """
    Like :func:`generate_map`, but never raises for a failure inside a
    generator. The replacement map has ``error`` set; nothing is retried.
    Arguments that cannot describe any map (unknown theme, bad dimensions)
    still raise.
    """
    theme = parse_theme(theme)
    check_dimensions(theme, width, height)
    _theme_kwargs(theme, kwargs.get("hex_grid", False), None)
    try:
        return generate_map(theme, width, height, **kwargs)
    except Exception as e:
        log.error(
            "Map generation failed",
            theme=theme.value,
            width=width,
            height=height,
            error=str(e),
            exc_info=True,
        )
        return fallback_map(theme, width, height, str(e) or type(e).__name__, kwargs.get("seed"))
