"""Read-only GTFS records handed to the agency adapter.

The shared parser owns these records; the adapter only reads their fields
and returns derived values. Records are built from csv.DictReader rows via
``from_row`` so that missing optional columns default to empty strings.
"""

from __future__ import annotations

from dataclasses import dataclass


def _field(row: dict[str, str | None], name: str) -> str:
    """Return a stripped column value, or an empty string when absent."""
    value = row.get(name)
    return value.strip() if value is not None else ""


@dataclass(frozen=True, slots=True)
class RouteRecord:
    """A row of routes.txt."""

    route_id: str
    route_short_name: str = ""
    route_long_name: str = ""
    route_type: str = ""
    route_color: str = ""
    agency_id: str = ""

    @property
    def route_long_name_or_default(self) -> str:
        """Return the long name, or an empty string when the feed omits it."""
        return self.route_long_name or ""

    @classmethod
    def from_row(cls, row: dict[str, str | None]) -> RouteRecord:
        return cls(
            route_id=_field(row, "route_id"),
            route_short_name=_field(row, "route_short_name"),
            route_long_name=_field(row, "route_long_name"),
            route_type=_field(row, "route_type"),
            route_color=_field(row, "route_color"),
            agency_id=_field(row, "agency_id"),
        )


@dataclass(frozen=True, slots=True)
class TripRecord:
    """A row of trips.txt."""

    route_id: str
    service_id: str
    trip_id: str
    trip_headsign: str = ""
    direction_id: int | None = None

    @property
    def trip_headsign_or_default(self) -> str:
        """Return the head-sign, or an empty string when the feed omits it."""
        return self.trip_headsign or ""

    @classmethod
    def from_row(cls, row: dict[str, str | None]) -> TripRecord:
        direction = _field(row, "direction_id")
        return cls(
            route_id=_field(row, "route_id"),
            service_id=_field(row, "service_id"),
            trip_id=_field(row, "trip_id"),
            trip_headsign=_field(row, "trip_headsign"),
            direction_id=int(direction) if direction.isdigit() else None,
        )


@dataclass(frozen=True, slots=True)
class StopRecord:
    """A row of stops.txt.

    Kingston Transit reuses ``stop_id`` as the rider-facing stop code, and
    GTFS-realtime reports stops by that value, so ``stop_id`` is the code
    every id derivation starts from.
    """

    stop_id: str
    stop_name: str = ""
    stop_code: str = ""
    stop_lat: str = ""
    stop_lon: str = ""

    @classmethod
    def from_row(cls, row: dict[str, str | None]) -> StopRecord:
        return cls(
            stop_id=_field(row, "stop_id"),
            stop_name=_field(row, "stop_name"),
            stop_code=_field(row, "stop_code"),
            stop_lat=_field(row, "stop_lat"),
            stop_lon=_field(row, "stop_lon"),
        )
