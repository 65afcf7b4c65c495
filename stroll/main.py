"""Command line driver for the exploration engine.

Builds an engine from the sample catalog (or from encoded polylines given on
the command line), feeds it routes and prints the resulting progress.
"""

from __future__ import annotations

import argparse
from datetime import datetime, timezone
import json
import logging
from typing import List, Optional, Sequence

from .achievements import ordered_achievements
from .config import EXPLORATION_THRESHOLD_M, RECENT_ROUTES_LIMIT
from .errors import InvalidInputError
from .exploration import EngineConfig, ExplorationEngine
from .history import activity_breakdown, recent_routes, road_table
from .models import ExploredRoute, Road
from .sample_data import sample_catalog, sample_routes
from .utils import format_km, format_percentage


def _setup_logging(verbose: bool) -> None:
    if not logging.getLogger().hasHandlers():
        logging.basicConfig(
            level=logging.DEBUG if verbose else logging.INFO,
            format="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
        )


def _parse_road(value: str) -> Road:
    name, sep, encoded = value.rpartition("=")
    if not sep or not name.strip():
        raise argparse.ArgumentTypeError(f"expected NAME=POLYLINE, got {value!r}")
    try:
        return Road.from_polyline(name.strip(), encoded)
    except InvalidInputError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def _parse_route(value: str) -> ExploredRoute:
    activity, sep, encoded = value.partition("=")
    if not sep:
        raise argparse.ArgumentTypeError(f"expected TYPE=POLYLINE, got {value!r}")
    try:
        return ExploredRoute.from_polyline(
            encoded, activity, timestamp=datetime.now(timezone.utc)
        )
    except InvalidInputError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="stroll",
        description="Match recorded routes against a road catalog and report exploration progress.",
    )
    parser.add_argument(
        "--road",
        dest="roads",
        action="append",
        type=_parse_road,
        default=[],
        metavar="NAME=POLYLINE",
        help="Catalog road as an encoded polyline (repeatable). Defaults to the sample catalog.",
    )
    parser.add_argument(
        "--route",
        dest="routes",
        action="append",
        type=_parse_route,
        default=[],
        metavar="TYPE=POLYLINE",
        help="Recorded route, e.g. run=<polyline> (repeatable).",
    )
    parser.add_argument(
        "--sample-history",
        action="store_true",
        help="Replay the sample morning run before any --route.",
    )
    parser.add_argument(
        "--threshold",
        type=float,
        default=EXPLORATION_THRESHOLD_M,
        help="Matching tolerance in metres (default: %(default)s).",
    )
    parser.add_argument(
        "--json", action="store_true", help="Print a machine-readable summary."
    )
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def _summary(engine: ExplorationEngine) -> dict:
    stats = engine.stats
    return {
        "total_roads": stats.total_roads,
        "explored_roads": stats.explored_roads,
        "total_distance_m": round(stats.total_distance, 1),
        "explored_distance_m": round(stats.explored_distance, 1),
        "exploration_percentage": stats.exploration_percentage,
        "roads": road_table(engine.roads).to_dict(orient="records"),
        "activities": activity_breakdown(engine.routes).to_dict(orient="records"),
        "achievements": [
            a.title for a in ordered_achievements(stats, engine.route_count)
        ],
    }


def _print_report(engine: ExplorationEngine) -> None:
    stats = engine.stats
    print(
        f"Explored {format_percentage(stats.exploration_percentage)} "
        f"({stats.explored_roads} of {stats.total_roads} roads, "
        f"{format_km(stats.explored_distance)} of {format_km(stats.total_distance)})"
    )
    print()
    print(road_table(engine.roads).to_string(index=False))
    breakdown = activity_breakdown(engine.routes)
    if not breakdown.empty:
        print()
        print(breakdown.to_string(index=False))
    recent = recent_routes(engine.routes, RECENT_ROUTES_LIMIT)
    if recent:
        print()
        print("Recent exploration:")
        for route in recent:
            print(f"  {route.timestamp:%Y-%m-%d %H:%M}  {route.display_name}")
    earned = ordered_achievements(stats, engine.route_count)
    if earned:
        print()
        print("Achievements: " + ", ".join(a.title for a in earned))


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _setup_logging(args.verbose)

    try:
        config = EngineConfig(exploration_threshold_m=args.threshold)
    except ValueError as exc:
        parser.error(str(exc))
    roads: List[Road] = args.roads or sample_catalog()
    history: List[ExploredRoute] = sample_routes() if args.sample_history else []

    engine = ExplorationEngine(roads, history, config=config)
    for route in args.routes:
        engine.add_explored_route(route)

    if args.json:
        print(json.dumps(_summary(engine), indent=2))
    else:
        _print_report(engine)
    return 0


__all__ = ["main", "build_parser"]
