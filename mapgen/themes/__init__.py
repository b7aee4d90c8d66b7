"""Theme generators: one pipeline per map style, selected by :class:`Theme`."""

from mapgen.constants import Theme

from .cavern import generate_cavern
from .city import generate_city
from .dungeon import generate_dungeon
from .outdoor import generate_outdoor

GENERATORS = {
    Theme.DUNGEON: generate_dungeon,
    Theme.CAVERN: generate_cavern,
    Theme.OUTDOOR: generate_outdoor,
    Theme.CITY: generate_city,
}

# Themes that offer a hexagonal variant.
HEX_THEMES = frozenset({Theme.CAVERN, Theme.OUTDOOR})

__all__ = [
    "GENERATORS",
    "HEX_THEMES",
    "generate_cavern",
    "generate_city",
    "generate_dungeon",
    "generate_outdoor",
]
