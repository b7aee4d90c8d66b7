# mapgen/constants.py
from enum import Enum
from typing import Final, FrozenSet, NamedTuple


class Theme(str, Enum):
    """Map themes, each with its own closed tile vocabulary."""

    DUNGEON = "dungeon"
    CAVERN = "cavern"
    OUTDOOR = "outdoor"
    CITY = "city"


class Terrain(str, Enum):
    """Base terrain category of a tile, independent of theme."""

    WALL = "wall"
    SHRUB = "shrub"
    FLOOR = "floor"
    CORRIDOR = "corridor"
    AREA = "area"
    ROAD = "road"
    LAKE = "lake"
    RIVER = "river"
    MOUNTAIN = "mountain"


class TileType(NamedTuple):
    theme: Theme
    terrain: Terrain
    walkable: bool
    glyph: str  # ASCII preview character


# Dungeon
DUNGEON_WALL: Final[str] = "dungeon_wall"
DUNGEON_FLOOR: Final[str] = "dungeon_floor"
DUNGEON_CORRIDOR: Final[str] = "dungeon_corridor"
# Cavern
CAVERN_WALL: Final[str] = "cavern_wall"
CAVERN_FLOOR: Final[str] = "cavern_floor"
CAVERN_CORRIDOR: Final[str] = "cavern_corridor"
CAVERN_LAKE: Final[str] = "cavern_lake"
CAVERN_RIVER: Final[str] = "cavern_river"
# Outdoor
OUTDOOR_SHRUB: Final[str] = "outdoor_shrub"
OUTDOOR_AREA: Final[str] = "outdoor_area"
OUTDOOR_ROAD: Final[str] = "outdoor_road"
OUTDOOR_LAKE: Final[str] = "outdoor_lake"
OUTDOOR_RIVER: Final[str] = "outdoor_river"
OUTDOOR_MOUNTAIN: Final[str] = "outdoor_mountain"
# City
CITY_SHRUB: Final[str] = "city_shrub"
CITY_ROAD: Final[str] = "city_road"
CITY_FLOOR: Final[str] = "city_floor"
CITY_WALL: Final[str] = "city_wall"


TILE_TYPES: Final[dict[str, TileType]] = {
    DUNGEON_FLOOR: TileType(Theme.DUNGEON, Terrain.FLOOR, True, "."),
    DUNGEON_CORRIDOR: TileType(Theme.DUNGEON, Terrain.CORRIDOR, True, ","),
    DUNGEON_WALL: TileType(Theme.DUNGEON, Terrain.WALL, False, "#"),
    CAVERN_FLOOR: TileType(Theme.CAVERN, Terrain.FLOOR, True, "."),
    CAVERN_CORRIDOR: TileType(Theme.CAVERN, Terrain.CORRIDOR, True, ","),
    CAVERN_WALL: TileType(Theme.CAVERN, Terrain.WALL, False, "#"),
    CAVERN_LAKE: TileType(Theme.CAVERN, Terrain.LAKE, True, "~"),
    CAVERN_RIVER: TileType(Theme.CAVERN, Terrain.RIVER, True, "="),
    OUTDOOR_AREA: TileType(Theme.OUTDOOR, Terrain.AREA, True, "."),
    OUTDOOR_ROAD: TileType(Theme.OUTDOOR, Terrain.ROAD, True, ","),
    OUTDOOR_SHRUB: TileType(Theme.OUTDOOR, Terrain.SHRUB, False, '"'),
    OUTDOOR_LAKE: TileType(Theme.OUTDOOR, Terrain.LAKE, True, "~"),
    OUTDOOR_RIVER: TileType(Theme.OUTDOOR, Terrain.RIVER, True, "="),
    OUTDOOR_MOUNTAIN: TileType(Theme.OUTDOOR, Terrain.MOUNTAIN, True, "^"),
    CITY_ROAD: TileType(Theme.CITY, Terrain.ROAD, True, ","),
    CITY_SHRUB: TileType(Theme.CITY, Terrain.SHRUB, False, '"'),
    CITY_FLOOR: TileType(Theme.CITY, Terrain.FLOOR, True, "."),
    CITY_WALL: TileType(Theme.CITY, Terrain.WALL, False, "#"),
}

# Tile every cell of a failed or freshly created map of that theme holds.
IMPASSABLE_TILE: Final[dict[Theme, str]] = {
    Theme.DUNGEON: DUNGEON_WALL,
    Theme.CAVERN: CAVERN_WALL,
    Theme.OUTDOOR: OUTDOOR_SHRUB,
    Theme.CITY: CITY_SHRUB,
}

DOOR_GLYPH: Final[str] = "+"
UNKNOWN_GLYPH: Final[str] = "?"

SUBTILE_COUNT: Final[int] = 4  # 4x4 sprite sheet per tile type
SUBTILE_SIZE_PX: Final[int] = 32


def is_walkable(tile: str) -> bool:
    tile_type = TILE_TYPES.get(tile)
    return tile_type.walkable if tile_type else False


def terrain_of(tile: str) -> Terrain | None:
    tile_type = TILE_TYPES.get(tile)
    return tile_type.terrain if tile_type else None


def theme_vocabulary(theme: Theme) -> FrozenSet[str]:
    """All tile keys that belong to ``theme``."""
    return frozenset(k for k, v in TILE_TYPES.items() if v.theme == theme)


def walkable_types(theme: Theme) -> FrozenSet[str]:
    return frozenset(
        k for k, v in TILE_TYPES.items() if v.theme == theme and v.walkable
    )


def subtile_offset(tile_x: int, tile_y: int) -> tuple[int, int]:
    """Pixel offset of a sub-tile inside its 128x128 sprite sheet."""
    return -tile_x * SUBTILE_SIZE_PX, -tile_y * SUBTILE_SIZE_PX


__all__ = [
    "Theme",
    "Terrain",
    "TileType",
    "TILE_TYPES",
    "IMPASSABLE_TILE",
    "is_walkable",
    "terrain_of",
    "theme_vocabulary",
    "walkable_types",
    "subtile_offset",
]
