"""Run the Kingston Transit adapter over a GTFS feed and report the outcome.

Applies every agency hook to the routes, trips and stops of a feed the way
the shared parser would, checks stop ids for collisions, and prints a
summary. Nothing is written to disk.

Usage:
    kingston-transit-parse --feed data/google_transit.zip
    kingston-transit-parse --feed data/gtfs/ --verbose
    kingston-transit-parse --feed data/gtfs/ --list-stops
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from kingston_transit.agency_tools import (
    DefaultAgencyTools,
    FatalError,
    UnsupportedRouteShortNameError,
)
from kingston_transit.feed import Feed, FeedError, load_feed
from kingston_transit.kingston import KingstonTransitBusAgencyTools
from kingston_transit.stop_ids import StopIdCollisionError, collect_stop_id_collisions

logger: Final[logging.Logger] = logging.getLogger(__name__)


# ---- Result dataclasses -----------------------------------------------------


@dataclass(frozen=True, slots=True)
class MappedStop:
    """A stop as the parser would emit it.

    Attributes:
        stop_code: Rider-facing stop code.
        stop_id: Derived integer stop id.
        stop_name: Cleaned stop name.
    """

    stop_code: str
    stop_id: int
    stop_name: str


@dataclass(frozen=True, slots=True)
class FeedSummary:
    """Aggregate outcome of running the adapter over one feed.

    Attributes:
        routes_kept: Routes that passed the exclusion predicate.
        routes_excluded: Routes dropped by the exclusion predicate.
        trips_kept: Trips that passed the exclusion predicate.
        trips_excluded: Trips dropped by the exclusion predicate.
        route_ids: Route short name mapped to its derived route id.
        unsupported_routes: Short names with no route id mapping.
        headsigns: Distinct cleaned trip head-signs.
        stops: Stops with derived ids and cleaned names.
    """

    routes_kept: int
    routes_excluded: int
    trips_kept: int
    trips_excluded: int
    route_ids: dict[str, int]
    unsupported_routes: tuple[str, ...]
    headsigns: tuple[str, ...]
    stops: tuple[MappedStop, ...]

    @property
    def success(self) -> bool:
        return not self.unsupported_routes


# ---- Processing -------------------------------------------------------------


def process_feed(feed: Feed, tools: DefaultAgencyTools) -> FeedSummary:
    """Apply the agency hooks to every record of a feed.

    Unsupported route short names are collected so that one report lists
    all of them. Stop id failures are fatal and propagate.

    Raises:
        FatalError: If a stop code cannot be mapped or two stop codes
            share a stop id.
    """
    route_ids: dict[str, int] = {}
    unsupported: list[str] = []
    excluded_route_ids: set[str] = set()
    routes_excluded = 0

    for route in feed.routes:
        if tools.exclude_route(route):
            excluded_route_ids.add(route.route_id)
            routes_excluded += 1
            continue
        short_name = tools.get_route_short_name(route)
        try:
            route_ids[short_name] = tools.get_route_id(route)
        except UnsupportedRouteShortNameError as exc:
            logger.error("%s", exc)
            unsupported.append(short_name)

    headsigns: set[str] = set()
    trips_excluded = 0
    for trip in feed.trips:
        if trip.route_id in excluded_route_ids or tools.exclude_trip(trip):
            trips_excluded += 1
            continue
        headsign = tools.clean_trip_headsign(trip.trip_headsign_or_default)
        if headsign:
            headsigns.add(headsign)

    stops = tuple(
        MappedStop(
            stop_code=tools.get_stop_code(stop),
            stop_id=tools.get_stop_id(stop),
            stop_name=tools.clean_stop_name(stop.stop_name),
        )
        for stop in feed.stops
    )
    collisions = collect_stop_id_collisions((s.stop_code, s.stop_id) for s in stops)
    if collisions:
        raise StopIdCollisionError(collisions)

    return FeedSummary(
        routes_kept=len(feed.routes) - routes_excluded,
        routes_excluded=routes_excluded,
        trips_kept=len(feed.trips) - trips_excluded,
        trips_excluded=trips_excluded,
        route_ids=route_ids,
        unsupported_routes=tuple(unsupported),
        headsigns=tuple(sorted(headsigns)),
        stops=stops,
    )


# ---- CLI --------------------------------------------------------------------


def _build_arg_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the feed runner CLI."""
    parser = argparse.ArgumentParser(
        description="Run the Kingston Transit agency adapter over a GTFS feed.",
    )
    parser.add_argument(
        "--feed",
        type=Path,
        required=True,
        help="GTFS feed directory or .zip archive.",
    )
    parser.add_argument(
        "--list-stops",
        action="store_true",
        help="Print every stop code with its derived id and cleaned name.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug-level logging.",
    )
    return parser


def _print_summary(
    summary: FeedSummary,
    tools: DefaultAgencyTools,
    list_stops: bool = False,
) -> None:
    """Print structured run summary to stdout."""
    print(f"\n{'=' * 80}")
    print(f"{tools.get_agency_name()} Adapter Summary")
    print(f"{'=' * 80}")
    print(f"{'Record':<12} {'Kept':<10} {'Excluded':<10}")
    print("-" * 80)
    print(f"{'routes':<12} {summary.routes_kept:<10} {summary.routes_excluded:<10}")
    print(f"{'trips':<12} {summary.trips_kept:<10} {summary.trips_excluded:<10}")
    print(f"{'stops':<12} {len(summary.stops):<10} {0:<10}")
    print("-" * 80)

    for short_name, route_id in sorted(summary.route_ids.items(), key=lambda i: i[1]):
        print(f"route {short_name:<10} -> {route_id}")
    for short_name in summary.unsupported_routes:
        print(f"route {short_name:<10} -> UNSUPPORTED")

    if list_stops:
        print("-" * 80)
        print(f"{'Stop code':<16} {'Stop id':<10} {'Name'}")
        for stop in sorted(summary.stops, key=lambda s: s.stop_id):
            print(f"{stop.stop_code:<16} {stop.stop_id:<10} {stop.stop_name}")

    print("-" * 80)
    print(
        f"Head-signs: {len(summary.headsigns)}  "
        f"Result: {'SUCCESS' if summary.success else 'FAILED'}"
    )
    print(f"{'=' * 80}\n")


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for the feed runner.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:]).

    Returns:
        Exit code: 0 if every record maps cleanly, 1 otherwise.
    """
    parser = _build_arg_parser()
    args: argparse.Namespace = parser.parse_args(argv)

    level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        stream=sys.stderr,
    )

    tools = KingstonTransitBusAgencyTools()
    try:
        feed = load_feed(args.feed)
        summary = process_feed(feed, tools)
    except FeedError as exc:
        logger.error("Feed error: %s", exc)
        return 1
    except FatalError as exc:
        logger.error("FATAL: %s", exc)
        return 1

    _print_summary(summary, tools, list_stops=args.list_stops)
    return 0 if summary.success else 1


if __name__ == "__main__":
    sys.exit(main())
