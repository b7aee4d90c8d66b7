# mapgen/settings.py
"""
Per-theme generation parameters, loaded from ``config/generation.yaml``.

Every field has a default matching the built-in behaviour, so a missing file
or a missing section simply yields the defaults.
"""
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Type, TypeVar

import structlog
import yaml

log = structlog.get_logger()

PROJECT_DIR = Path(__file__).parent.parent.resolve()
CONFIG_DIR = PROJECT_DIR / "config"
DEFAULT_CONFIG_FILE = CONFIG_DIR / "generation.yaml"

S = TypeVar("S")


@dataclass(frozen=True)
class DungeonSettings:
    min_room_size: int = 4
    max_room_size: int = 8
    max_rooms: int = 8
    max_attempts: int = 50
    locked_chance: float = 1 / 3
    trapped_chance: float = 1 / 8


@dataclass(frozen=True)
class CavernSettings:
    min_room_size: int = 4
    max_room_size: int = 8
    max_rooms: int = 8
    max_attempts: int = 50
    lake_chance: float = 0.3
    min_road_area: int = 3


@dataclass(frozen=True)
class OutdoorSettings:
    min_room_size: int = 5
    max_room_size: int = 9
    max_rooms: int = 8
    max_attempts: int = 50
    mountain_chance: float = 0.5
    lake_chance: float = 0.125
    radiation_radius: int = 8
    radiation_jitter: int = 2
    min_road_area: int = 3


@dataclass(frozen=True)
class CitySettings:
    block_width: int = 12
    block_height: int = 10
    road_width: int = 2
    building_chance: float = 0.7
    min_building_size: int = 4
    road_spread_chance: float = 0.2


@dataclass(frozen=True)
class GenerationSettings:
    width: int = 60
    height: int = 60
    dungeon: DungeonSettings = field(default_factory=DungeonSettings)
    cavern: CavernSettings = field(default_factory=CavernSettings)
    outdoor: OutdoorSettings = field(default_factory=OutdoorSettings)
    city: CitySettings = field(default_factory=CitySettings)


_SECTIONS: Dict[str, Type[Any]] = {
    "dungeon": DungeonSettings,
    "cavern": CavernSettings,
    "outdoor": OutdoorSettings,
    "city": CitySettings,
}


def _validate(section: str, settings: Any) -> None:
    values = {f.name: getattr(settings, f.name) for f in fields(settings)}
    problems = []
    for name, value in values.items():
        if name.endswith("_chance") and not 0.0 <= value <= 1.0:
            problems.append(f"{name} must be within [0, 1]")
        elif not name.endswith("_chance") and value < 0:
            problems.append(f"{name} must not be negative")
    if "min_room_size" in values and not (
        1 <= values["min_room_size"] <= values["max_room_size"]
    ):
        problems.append("room sizes must satisfy 1 <= min_room_size <= max_room_size")
    if problems:
        log.error("Invalid generation settings", section=section, problems=problems)
        raise ValueError(f"Invalid [{section}] settings: {'; '.join(problems)}")


def _build_section(section: str, cls: Type[S], raw: Mapping[str, Any]) -> S:
    if not isinstance(raw, Mapping):
        log.error("Config section must be a mapping", section=section, got=type(raw).__name__)
        raise ValueError(f"Config section [{section}] must be a mapping.")
    known = {f.name: f for f in fields(cls)}
    values: Dict[str, Any] = {}
    for key, value in raw.items():
        if key not in known:
            log.warning("Ignoring unknown setting", section=section, key=key)
            continue
        field_type = type(getattr(cls(), key))
        try:
            values[key] = field_type(value)
        except (TypeError, ValueError) as e:
            log.error("Bad setting value", section=section, key=key, value=value)
            raise ValueError(f"Invalid value for {section}.{key}: {value!r}") from e
    settings = replace(cls(), **values)
    _validate(section, settings)
    return settings


def settings_from_dict(data: Mapping[str, Any] | None) -> GenerationSettings:
    """Builds :class:`GenerationSettings` from a parsed YAML mapping."""
    if not data:
        return GenerationSettings()
    if not isinstance(data, Mapping):
        log.error("Generation config must be a mapping", got=type(data).__name__)
        raise ValueError("Generation config must be a mapping at the top level.")

    top: Dict[str, Any] = {}
    for key, value in data.items():
        if key in _SECTIONS:
            top[key] = _build_section(key, _SECTIONS[key], value or {})
        elif key in ("width", "height"):
            top[key] = int(value)
        else:
            log.warning("Ignoring unknown config section", key=key)
    settings = replace(GenerationSettings(), **top)
    if settings.width <= 0 or settings.height <= 0:
        log.error("Invalid default dimensions", width=settings.width, height=settings.height)
        raise ValueError("Default width and height must be positive.")
    return settings


def load_settings(config_path: Path | str | None = None) -> GenerationSettings:
    """
    Loads generation settings from YAML. A missing file falls back to the
    defaults with a warning; a malformed file is logged and re-raised.
    """
    path = Path(config_path) if config_path is not None else DEFAULT_CONFIG_FILE
    if not path.is_file():
        log.warning("Generation config not found, using defaults", path=str(path))
        return GenerationSettings()
    try:
        with path.open("r") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        log.error("Error parsing generation config", path=str(path), error=str(e), exc_info=True)
        raise
    if data is None:
        log.warning("Generation config is empty", path=str(path))
        return GenerationSettings()
    settings = settings_from_dict(data)
    log.info("Generation config loaded", path=str(path))
    return settings
