# main.py
"""Command line front end: generate one map and print an ASCII preview."""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

import structlog

from mapgen.constants import DOOR_GLYPH, TILE_TYPES, UNKNOWN_GLYPH, Theme
from mapgen.generator import generate_map_safe
from mapgen.settings import DEFAULT_CONFIG_FILE, load_settings
from mapgen.world.game_map import GeneratedMap
from utils.logging_utils import LOG_FORMATS, parse_level, setup_logging

log = structlog.get_logger()


def glyph_for(map_: GeneratedMap, x: int, y: int) -> str:
    cell = map_.grid.cell(x, y)
    if cell.door is not None:
        return DOOR_GLYPH
    tile_type = TILE_TYPES.get(cell.type)
    return tile_type.glyph if tile_type else UNKNOWN_GLYPH


def render_ascii(map_: GeneratedMap, show_radiation: bool = True) -> List[str]:
    """One string per row. Hex maps indent odd rows by half a cell."""
    lines = []
    for y in range(map_.height):
        row = ""
        for x in range(map_.width):
            char = glyph_for(map_, x, y)
            if show_radiation and map_.grid.cell(x, y).radioactive and char == ".":
                char = "*"
            row += f"{char} "
        if map_.hex_grid and y % 2 == 1:
            row = " " + row
        lines.append(row.rstrip())
    return lines


def print_map(map_: GeneratedMap) -> None:
    print(f"\n--- {map_.theme.value} {map_.width}x{map_.height} (seed {map_.seed}) ---")
    for line in render_ascii(map_):
        print(line)
    print("------------------------------------")

    legend = sorted(
        {(t.glyph, t.terrain.value) for t in TILE_TYPES.values() if t.theme == map_.theme}
    )
    print("Legend: " + "  ".join(f"{g} {name}" for g, name in legend) + f"  {DOOR_GLYPH} door")
    if map_.radiation_zone is not None:
        zone = map_.radiation_zone
        print(f"Radiation: center={zone.center} radius={zone.radius} ({len(zone.cells)} cells, '*')")

    areas = map_.area_ids()
    if areas:
        print(f"Areas ({len(areas)}): " + ", ".join(f"{k}={v}" for k, v in areas.items()))
    labels = map_.labels()
    if labels:
        print("Labels: " + ", ".join(f"{k}@{x},{y}" for k, (x, y) in labels.items()))
    if map_.error:
        print(f"Generation failed: {map_.error}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate a procedural tile map and print it as ASCII."
    )
    parser.add_argument(
        "--theme",
        choices=[t.value for t in Theme],
        default=Theme.DUNGEON.value,
        help="Map theme (default: dungeon).",
    )
    parser.add_argument("--width", type=int, default=None, help="Grid width (default from config).")
    parser.add_argument("--height", type=int, default=None, help="Grid height (default from config).")
    parser.add_argument("--seed", type=int, default=None, help="Seed for the RNG (default: random).")
    parser.add_argument(
        "--hex", action="store_true", help="Hexagonal grid (cavern and outdoor only)."
    )
    parser.add_argument(
        "--min-floor-tiles",
        type=int,
        default=None,
        help="Warn if fewer walkable tiles are generated.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=DEFAULT_CONFIG_FILE,
        help=f"Generation settings YAML (default: {DEFAULT_CONFIG_FILE}).",
    )
    parser.add_argument("--json", type=Path, default=None, help="Also write the map as JSON.")
    parser.add_argument("--log-level", default="INFO", help="Logging level (default: INFO).")
    parser.add_argument(
        "--log-format",
        choices=LOG_FORMATS,
        default="console",
        help="Log renderer on stderr (default: console).",
    )
    parser.add_argument("--no-color", action="store_true", help="Plain console logs.")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        level = parse_level(args.log_level)
    except ValueError as e:
        print(e, file=sys.stderr)
        return 2
    setup_logging(level, colors=not args.no_color, log_format=args.log_format)

    try:
        settings = load_settings(args.config)
        width = args.width if args.width is not None else settings.width
        height = args.height if args.height is not None else settings.height
        map_ = generate_map_safe(
            args.theme,
            width,
            height,
            seed=args.seed,
            hex_grid=args.hex,
            min_floor_tiles=args.min_floor_tiles,
            settings=settings,
        )
    except ValueError as e:
        log.error("Cannot generate map", error=str(e))
        return 2

    print_map(map_)
    if args.json is not None:
        with args.json.open("w", encoding="utf-8") as f:
            json.dump(map_.to_dict(), f)
        log.info("Map written", path=str(args.json))
    return 1 if map_.error else 0


if __name__ == "__main__":
    sys.exit(main())
