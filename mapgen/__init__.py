"""Procedural 2-D tile maps: dungeons, caverns, outdoor terrain and cities."""

from .constants import TILE_TYPES, Theme, is_walkable
from .generator import generate_map, generate_map_safe
from .settings import GenerationSettings, load_settings
from .themes import generate_cavern, generate_city, generate_dungeon, generate_outdoor
from .world.game_map import GeneratedMap

__all__ = [
    "TILE_TYPES",
    "Theme",
    "is_walkable",
    "generate_map",
    "generate_map_safe",
    "GenerationSettings",
    "load_settings",
    "generate_cavern",
    "generate_city",
    "generate_dungeon",
    "generate_outdoor",
    "GeneratedMap",
]
