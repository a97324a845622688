"""Default agency policy that agency adapters override.

The shared parser calls one hook per record: exclusion predicates, name
cleanup, and id derivation. ``DefaultAgencyTools`` supplies the behavior
used when an agency has no special case, so an adapter overrides only the
hooks it needs and delegates to ``super()`` for everything else.

Fatal data errors are signaled by raising ``FatalError``. A fatal error
means the agency's hard-coded rules no longer match the live feed; the
parser aborts the run rather than guessing.
"""

from __future__ import annotations

import logging
import re
from typing import Final

from kingston_transit import clean_utils
from kingston_transit.config import AgencyConfig, RouteType
from kingston_transit.records import RouteRecord, StopRecord, TripRecord

logger: Final = logging.getLogger(__name__)

# Letter-suffixed route short names ("12A") map above every plain numeric
# id: 12A -> 10012, 12B -> 20012, ... 999Z -> 260999.
_LETTER_SUFFIX_ROUTE: Final[re.Pattern[str]] = re.compile(r"^(\d{1,3})([A-Za-z])$")
_LETTER_SUFFIX_STEP: Final[int] = 10_000

_DIGITS_ONLY: Final[re.Pattern[str]] = re.compile(r"^[0-9]+$")


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class FatalError(Exception):
    """Raised when a record cannot be processed and the run must stop."""


class UnsupportedRouteShortNameError(FatalError):
    """Raised when no route id can be derived from a route short name.

    Attributes:
        route_short_name: The short name that has no numeric mapping.
    """

    def __init__(self, route_short_name: str) -> None:
        self.route_short_name: Final[str] = route_short_name
        super().__init__(
            f"Unsupported route short name '{route_short_name}': "
            "cannot convert to a route id"
        )


# ---------------------------------------------------------------------------
# Default policy
# ---------------------------------------------------------------------------


def is_digits_only(value: str) -> bool:
    """Return True if value is non-empty and made of ASCII digits only."""
    return bool(_DIGITS_ONLY.match(value))


class DefaultAgencyTools:
    """Hooks invoked by the shared parser, with agency-neutral defaults."""

    def __init__(self, config: AgencyConfig) -> None:
        self.config = config

    # ---- Agency metadata ---------------------------------------------------

    def get_agency_name(self) -> str:
        return self.config.name

    def get_agency_color(self) -> str:
        return self.config.color

    def get_agency_route_type(self) -> RouteType:
        return self.config.route_type

    def get_supported_languages(self) -> tuple[str, ...]:
        return self.config.languages

    def direction_splitter_enabled(self, route_id: int) -> bool:
        """Return whether trips of the given route are split by direction."""
        return self.config.direction_splitter_enabled

    def direction_finder_enabled(self) -> bool:
        return self.config.direction_finder_enabled

    def default_exclude_enabled(self) -> bool:
        return self.config.default_exclude_enabled

    # ---- Exclusion ---------------------------------------------------------

    def exclude_route(self, route: RouteRecord) -> bool:
        """Return True to drop the route. The default keeps every route."""
        return False

    def exclude_trip(self, trip: TripRecord) -> bool:
        """Return True to drop the trip. The default keeps every trip."""
        return False

    # ---- Routes ------------------------------------------------------------

    def get_route_short_name(self, route: RouteRecord) -> str:
        return route.route_short_name

    def get_route_long_name(self, route: RouteRecord) -> str:
        if not self.config.default_route_long_name_enabled:
            return ""
        return clean_utils.clean_label(route.route_long_name_or_default)

    def get_route_id(self, route: RouteRecord) -> int:
        """Derive the numeric route id used by the intermediate form.

        Raises:
            FatalError: If the default strategy is disabled and route_id is
                not a plain number.
        """
        if not self.config.default_route_id_enabled:
            if not is_digits_only(route.route_id):
                raise FatalError(f"Unexpected route ID for {route!r}!")
            return int(route.route_id)
        if self.config.use_route_short_name_for_route_id:
            return self.convert_route_id_from_short_name(
                self.get_route_short_name(route)
            )
        return self.convert_route_id_from_short_name(route.route_id)

    def get_route_color(self, route: RouteRecord) -> str:
        """Return the route color, falling back to the agency color."""
        if route.route_color:
            return route.route_color.upper()
        if self.config.default_agency_color_enabled:
            return self.get_agency_color()
        return ""

    def convert_route_id_from_short_name(self, route_short_name: str) -> int:
        """Convert a route short name to a route id.

        Plain numbers are used as-is and a number of at most three digits
        followed by a single letter is offset by the letter's position.
        Anything else is handed to
        ``convert_route_id_from_short_name_not_supported``.
        """
        if is_digits_only(route_short_name):
            return int(route_short_name)
        match = _LETTER_SUFFIX_ROUTE.match(route_short_name)
        if match is not None:
            digits, letter = match.groups()
            letter_index = ord(letter.upper()) - ord("A") + 1
            route_id = int(digits) + letter_index * _LETTER_SUFFIX_STEP
            logger.debug("Route '%s' -> %d (letter suffix)", route_short_name, route_id)
            return route_id
        return self.convert_route_id_from_short_name_not_supported(route_short_name)

    def convert_route_id_from_short_name_not_supported(
        self,
        route_short_name: str,
    ) -> int:
        """Map a short name the default strategy cannot parse.

        Raises:
            UnsupportedRouteShortNameError: Always, unless overridden.
        """
        raise UnsupportedRouteShortNameError(route_short_name)

    # ---- Head-signs --------------------------------------------------------

    def clean_trip_headsign(self, trip_headsign: str) -> str:
        return clean_utils.clean_label(trip_headsign)

    def clean_direction_headsign(
        self,
        direction_id: int,
        from_stop_name: bool,
        direction_headsign: str,
    ) -> str:
        """Clean a direction head-sign with the trip head-sign rules."""
        return self.clean_trip_headsign(direction_headsign)

    # ---- Stops -------------------------------------------------------------

    def clean_stop_name(self, stop_name: str) -> str:
        return clean_utils.clean_label(stop_name)

    def get_stop_code(self, stop: StopRecord) -> str:
        return stop.stop_code

    def get_stop_id(self, stop: StopRecord) -> int:
        """Parse the numeric stop id.

        Raises:
            FatalError: If the stop id is not a plain number.
        """
        if not is_digits_only(stop.stop_id):
            raise FatalError(f"Unexpected stop ID for {stop!r}!")
        return int(stop.stop_id)
