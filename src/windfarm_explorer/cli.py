"""
Command-line interface for the application.

This module provides the main entry point for the CLI.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from windfarm_explorer import __version__
from windfarm_explorer.config import configure_logging, get_settings
from windfarm_explorer.datasources.regions import load_regions
from windfarm_explorer.errors import ConfigurationError
from windfarm_explorer.flows.explore import explore_dataset
from windfarm_explorer.reference import (
    BELGIAN_NORTH_SEA_BBOX,
    DEFAULT_MEASUREMENT_TYPE,
    DEFAULT_RANK_FIELDS,
)
from windfarm_explorer.schemas import AggregationOp, Bounds, ExplorationRequest


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="windfarm-explorer",
        description="Explore biodiversity measurements from offshore wind-farm monitoring",
    )
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("info", help="Show application info")

    explore_parser = subparsers.add_parser("explore", help="Fetch and summarize a dataset")
    explore_parser.add_argument("dataset_id", help="OBIS dataset UUID")
    explore_parser.add_argument(
        "--measurement-type",
        default=DEFAULT_MEASUREMENT_TYPE,
        help=f"Exact measurementType to aggregate (default: {DEFAULT_MEASUREMENT_TYPE})",
    )
    explore_parser.add_argument(
        "--group-key",
        default="eventID",
        help="Field to group measurements by (default: eventID)",
    )
    explore_parser.add_argument(
        "--op",
        choices=[op.value for op in AggregationOp],
        default=AggregationOp.SUM.value,
        help="Aggregation (default: sum)",
    )
    explore_parser.add_argument("--unit", default=None, help="Only aggregate this measurementUnit")
    explore_parser.add_argument(
        "--rank",
        nargs="+",
        default=list(DEFAULT_RANK_FIELDS),
        help="Rank fields for the taxonomy table (default: class order)",
    )
    explore_parser.add_argument(
        "--bbox",
        nargs=4,
        type=float,
        metavar=("MIN_LON", "MIN_LAT", "MAX_LON", "MAX_LAT"),
        default=None,
        help="Keep records inside this rectangle",
    )
    explore_parser.add_argument(
        "--bpns",
        action="store_true",
        help="Keep records inside the Belgian part of the North Sea (overrides --bbox)",
    )
    explore_parser.add_argument(
        "--regions",
        type=Path,
        default=None,
        help="GeoJSON file of region polygons (default: regions_path from settings)",
    )
    explore_parser.add_argument("--region", default=None, help="Keep records inside this region")
    explore_parser.add_argument(
        "--limit",
        type=int,
        default=20,
        help="Rows to print per table (default: 20)",
    )

    regions_parser = subparsers.add_parser("regions", help="List regions in a GeoJSON file")
    regions_parser.add_argument("path", type=Path, help="GeoJSON FeatureCollection")

    return parser


def format_table(rows: list[dict[str, Any]], limit: int | None = None) -> str:
    """Render rows as aligned plain-text columns."""
    if not rows:
        return "(no rows)"
    shown = rows[:limit] if limit is not None else rows
    columns: list[str] = []
    for row in shown:
        columns.extend(c for c in row if c not in columns)
    cells = [[("" if row.get(c) is None else str(row.get(c))) for c in columns] for row in shown]
    widths = [max(len(c), *(len(r[i]) for r in cells)) for i, c in enumerate(columns)]
    lines = ["  ".join(c.ljust(w) for c, w in zip(columns, widths, strict=True))]
    lines.extend("  ".join(v.ljust(w) for v, w in zip(r, widths, strict=True)) for r in cells)
    if len(rows) > len(shown):
        lines.append(f"... {len(rows) - len(shown)} more rows")
    return "\n".join(lines)


def _bounds_from_args(args: argparse.Namespace) -> Bounds | None:
    if args.bpns:
        box = BELGIAN_NORTH_SEA_BBOX
        return Bounds(
            min_lon=box.min_lon, min_lat=box.min_lat, max_lon=box.max_lon, max_lat=box.max_lat
        )
    if args.bbox:
        min_lon, min_lat, max_lon, max_lat = args.bbox
        return Bounds(min_lon=min_lon, min_lat=min_lat, max_lon=max_lon, max_lat=max_lat)
    return None


def cmd_info(_args: argparse.Namespace) -> int:
    """Handle the 'info' command."""
    settings = get_settings()
    print(f"Application: {settings.app_name}")
    print(f"Version: {__version__}")
    print(f"Environment: {settings.app_env}")
    print(f"OBIS API: {settings.obis_api_url}")
    print(f"Extension: {settings.extension} (join key: {settings.join_key})")
    print(f"Debug: {settings.debug}")
    return 0


def cmd_explore(args: argparse.Namespace) -> int:
    """Handle the 'explore' command: run the flow and print its tables."""
    settings = get_settings()
    try:
        request = ExplorationRequest(
            dataset_id=args.dataset_id,
            extension=settings.extension,
            join_key=settings.join_key,
            measurement_type=args.measurement_type,
            group_key=args.group_key,
            op=args.op,
            unit=args.unit,
            rank_fields=args.rank,
            bounds=_bounds_from_args(args),
            region_name=args.region,
        )
        report = explore_dataset(request, regions_path=args.regions or settings.regions_path)
    except (ConfigurationError, ValidationError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"\nDataset {report['dataset_id']}")
    print(
        f"  {report['core_count']} occurrences, {report['extension_count']} extension rows, "
        f"{report['measurement_count']} unnested measurements"
    )

    print("\nMeasurement types")
    print(format_table(report["measurement_types"], args.limit))

    print(f"\n{args.op} of {args.measurement_type!r} by {args.group_key}")
    print(format_table(report["aggregation"], args.limit))
    if report["unparseable"]:
        print(f"  ({report['unparseable']} values could not be parsed)")

    print(f"\nOccurrences by {', '.join(args.rank)}")
    print(format_table(report["taxonomy"], args.limit))

    print("\nDiagnostics")
    for step, counts in report["diagnostics"].items():
        flagged = {k: v for k, v in counts.items() if v}
        print(f"  {step}: {flagged or 'ok'}")
    return 0


def cmd_regions(args: argparse.Namespace) -> int:
    """Handle the 'regions' command: list region names and countries."""
    try:
        loaded = load_regions(args.path)
    except (ConfigurationError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    rows = [
        {"name": r.name, "country": r.country, "area_deg2": round(r.geometry.area, 6)}
        for r in loaded
    ]
    print(format_table(rows))
    return 0


def main() -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args()

    try:
        settings = get_settings()
    except ValidationError as e:
        print(f"Invalid settings: {e}", file=sys.stderr)
        return 1
    configure_logging("DEBUG" if args.debug or settings.debug else settings.log_level)

    if args.command is None:
        parser.print_help()
        return 0

    commands = {
        "info": cmd_info,
        "explore": cmd_explore,
        "regions": cmd_regions,
    }

    handler = commands.get(args.command)
    if handler:
        return handler(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
