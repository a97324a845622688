"""Agency configuration for the Kingston Transit bus adapter.

Defines the static, non-behavioral settings the shared parser reads from an
agency adapter: display name, brand color, route type, supported languages,
and the framework feature flags this agency opts into. Source dataset URLs
are kept for reference only; nothing in this package fetches them.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Final


class RouteType(Enum):
    """GTFS route_type values relevant to agency adapters."""

    LIGHT_RAIL = 0
    SUBWAY = 1
    RAIL = 2
    BUS = 3
    FERRY = 4


@dataclass(frozen=True, slots=True)
class AgencyConfig:
    """Immutable configuration for a single agency adapter.

    Attributes:
        name: Rider-facing agency display name.
        color: Brand color as a 6-digit hex string without '#'.
        route_type: GTFS route type shared by every route of the agency.
        languages: Supported display languages (ISO 639-1 codes).
        routes_dataset_url: Open data page for the GTFS routes.
        stops_dataset_url: Open data page for the GTFS stops.
        realtime_dataset_url: Open data page for the GTFS-realtime feed.
        default_exclude_enabled: Reported to the shared parser, which drops
            services outside the current calendar window. No hook here
            reads it; the feed runner loads no calendar files.
        default_route_id_enabled: Derive route ids from short names with the
            default strategy. When off, route_id must be a plain number.
        use_route_short_name_for_route_id: Route ids come from short names.
        default_route_long_name_enabled: Use the feed's route long names.
        default_agency_color_enabled: Routes without a color of their own
            take the agency color. When off, they stay uncolored.
        direction_finder_enabled: Let the framework compute directions.
        direction_splitter_enabled: Split routes into directions.
    """

    name: str
    color: str
    route_type: RouteType
    languages: tuple[str, ...]
    routes_dataset_url: str
    stops_dataset_url: str
    realtime_dataset_url: str
    default_exclude_enabled: bool = True
    default_route_id_enabled: bool = True
    use_route_short_name_for_route_id: bool = True
    default_route_long_name_enabled: bool = True
    default_agency_color_enabled: bool = True
    direction_finder_enabled: bool = True
    direction_splitter_enabled: bool = True


# City of Kingston open data portal
_OPEN_DATA_BASE: Final[str] = "https://openkingston.cityofkingston.ca/explore/dataset"

KINGSTON_TRANSIT: Final[AgencyConfig] = AgencyConfig(
    name="Kingston Transit",
    color="009BC9",
    route_type=RouteType.BUS,
    languages=("en",),
    routes_dataset_url=f"{_OPEN_DATA_BASE}/transit-gtfs-routes/",
    stops_dataset_url=f"{_OPEN_DATA_BASE}/transit-gtfs-stops/",
    realtime_dataset_url=f"{_OPEN_DATA_BASE}/transit-gtfs-realtime/",
)


def get_agency_config() -> AgencyConfig:
    """Return the Kingston Transit agency configuration."""
    return KINGSTON_TRANSIT
