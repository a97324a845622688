"""Kingston Transit bus adapter for the shared GTFS parser.

Overrides the default agency policy where the Kingston feed needs it:

- drops "out of service" routes and "not in service" trips;
- uses the raw route_id as route short name, since GTFS-realtime reports
  routes by that value, and maps the two non-numeric route codes;
- rewrites head-signs and stop names into rider-facing labels;
- derives integer stop ids from the agency stop codes (see stop_ids.py).
"""

from __future__ import annotations

import logging
import re
from types import MappingProxyType
from typing import Final

from kingston_transit import clean_utils
from kingston_transit.agency_tools import DefaultAgencyTools
from kingston_transit.config import KINGSTON_TRANSIT, AgencyConfig
from kingston_transit.records import RouteRecord, StopRecord, TripRecord
from kingston_transit.stop_ids import derive_stop_id

logger: Final = logging.getLogger(__name__)

_OUT_OF_SERVICE: Final[str] = "out of service"
_NOT_IN_SERVICE: Final[str] = "not in service"

# Route codes with no digits. Ids sit above every numeric route number.
_NAMED_ROUTE_IDS: Final = MappingProxyType(
    {
        "COV": 99_001,
        "XTRA": 99_002,
    }
)

# ---------------------------------------------------------------------------
# Head-sign patterns
# ---------------------------------------------------------------------------

_STARTS_WITH_SERVICE_MARKER: Final[re.Pattern[str]] = re.compile(
    r"^(?:express|extra bus) - ",
    re.IGNORECASE,
)

_KGH: Final[re.Pattern[str]] = clean_utils.clean_words(
    "kingston general hosp",
    "kingston general hospital",
)
_KGH_REPLACEMENT: Final[str] = clean_utils.clean_words_replacement("KGH")

# Direction head-signs taken from a stop name carry platform details.
# Everything from the first " (" to the last ")" goes.
_PARENTHESES_CLAUSE: Final[re.Pattern[str]] = re.compile(r" \(.*\)")
_TRANSFER_POINT: Final[re.Pattern[str]] = re.compile(
    r"\s+transfer\s+(?:point|pt)\s+(?:platform|p:)\s*\d+\s*$",
    re.IGNORECASE,
)

# ---------------------------------------------------------------------------
# Stop name patterns
# ---------------------------------------------------------------------------

_SIDE: Final[re.Pattern[str]] = clean_utils.clean_word("side")
_SIDE_REPLACEMENT: Final[str] = clean_utils.clean_words_replacement("")


class KingstonTransitBusAgencyTools(DefaultAgencyTools):
    """Agency hooks for the Kingston Transit bus feed."""

    def __init__(self, config: AgencyConfig = KINGSTON_TRANSIT) -> None:
        super().__init__(config)

    # ---- Exclusion ---------------------------------------------------------

    def exclude_route(self, route: RouteRecord) -> bool:
        if _OUT_OF_SERVICE in route.route_long_name_or_default.lower():
            logger.debug("Excluding route %s: out of service", route.route_id)
            return True
        return super().exclude_route(route)

    def exclude_trip(self, trip: TripRecord) -> bool:
        if _NOT_IN_SERVICE in trip.trip_headsign_or_default.lower():
            logger.debug("Excluding trip %s: not in service", trip.trip_id)
            return True
        return super().exclude_trip(trip)

    # ---- Routes ------------------------------------------------------------

    def get_route_short_name(self, route: RouteRecord) -> str:
        return route.route_id

    def convert_route_id_from_short_name_not_supported(
        self,
        route_short_name: str,
    ) -> int:
        route_id = _NAMED_ROUTE_IDS.get(route_short_name)
        if route_id is not None:
            logger.debug("Route '%s' -> %d (named route)", route_short_name, route_id)
            return route_id
        return super().convert_route_id_from_short_name_not_supported(route_short_name)

    # ---- Head-signs --------------------------------------------------------

    def clean_direction_headsign(
        self,
        direction_id: int,
        from_stop_name: bool,
        direction_headsign: str,
    ) -> str:
        if from_stop_name:
            direction_headsign = _PARENTHESES_CLAUSE.sub("", direction_headsign)
            direction_headsign = _TRANSFER_POINT.sub("", direction_headsign)
        return super().clean_direction_headsign(
            direction_id,
            from_stop_name,
            direction_headsign,
        )

    def clean_trip_headsign(self, trip_headsign: str) -> str:
        trip_headsign = _STARTS_WITH_SERVICE_MARKER.sub("", trip_headsign)
        trip_headsign = _KGH.sub(_KGH_REPLACEMENT, trip_headsign)
        trip_headsign = clean_utils.keep_to_and_remove_via(trip_headsign)
        trip_headsign = clean_utils.SAINT.sub(
            clean_utils.SAINT_REPLACEMENT, trip_headsign
        )
        trip_headsign = clean_utils.clean_slashes(trip_headsign)
        trip_headsign = clean_utils.clean_street_types(trip_headsign)
        return clean_utils.clean_label(trip_headsign)

    # ---- Stops -------------------------------------------------------------

    def clean_stop_name(self, stop_name: str) -> str:
        stop_name = _SIDE.sub(_SIDE_REPLACEMENT, stop_name)
        stop_name = clean_utils.clean_bounds(stop_name)
        stop_name = clean_utils.CLEAN_AT.sub(clean_utils.CLEAN_AT_REPLACEMENT, stop_name)
        stop_name = clean_utils.CLEAN_AND.sub(
            clean_utils.CLEAN_AND_REPLACEMENT, stop_name
        )
        stop_name = clean_utils.clean_street_types(stop_name)
        stop_name = clean_utils.clean_numbers(stop_name)
        return clean_utils.clean_label(stop_name)

    def get_stop_code(self, stop: StopRecord) -> str:
        return stop.stop_id

    def get_stop_id(self, stop: StopRecord) -> int:
        return derive_stop_id(stop.stop_id, stop)
