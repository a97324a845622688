"""Column contracts for the GTFS files read by the feed harness.

Only the three files the adapter consumes are contracted: routes.txt,
trips.txt and stops.txt. Each contract lists the columns the records in
records.py are built from and whether a blank value is tolerated. Columns
present in a file but absent from its contract pass through untouched.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final


@dataclass(frozen=True, slots=True)
class ColumnContract:
    """Expectation for a single column of a GTFS file.

    Attributes:
        name: Exact column header as defined by the GTFS reference.
        required: Whether the column must appear in the header.
        nullable: Whether rows may leave the column blank.
    """

    name: str
    required: bool
    nullable: bool


@dataclass(frozen=True, slots=True)
class FeedFileContract:
    """Schema contract for one GTFS file.

    Attributes:
        file_name: File name inside the feed directory or archive.
        columns: Ordered tuple of column expectations.
    """

    file_name: str
    columns: tuple[ColumnContract, ...]

    @property
    def column_names(self) -> tuple[str, ...]:
        """Return ordered tuple of contracted column names."""
        return tuple(c.name for c in self.columns)

    @property
    def required_columns(self) -> frozenset[str]:
        """Return set of column names that must be present."""
        return frozenset(c.name for c in self.columns if c.required)

    @property
    def non_nullable_columns(self) -> frozenset[str]:
        """Return set of column names that must hold a value on every row."""
        return frozenset(c.name for c in self.columns if not c.nullable)


# ---------------------------------------------------------------------------
# routes.txt
# Kingston publishes route_short_name, but the adapter keys routes on
# route_id (the value GTFS-realtime reports), so only route_id is mandatory.
# ---------------------------------------------------------------------------
ROUTES_CONTRACT: Final[FeedFileContract] = FeedFileContract(
    file_name="routes.txt",
    columns=(
        ColumnContract(name="route_id", required=True, nullable=False),
        ColumnContract(name="agency_id", required=False, nullable=True),
        ColumnContract(name="route_short_name", required=False, nullable=True),
        ColumnContract(name="route_long_name", required=False, nullable=True),
        ColumnContract(name="route_type", required=True, nullable=False),
        ColumnContract(name="route_color", required=False, nullable=True),
    ),
)

# ---------------------------------------------------------------------------
# trips.txt
# ---------------------------------------------------------------------------
TRIPS_CONTRACT: Final[FeedFileContract] = FeedFileContract(
    file_name="trips.txt",
    columns=(
        ColumnContract(name="route_id", required=True, nullable=False),
        ColumnContract(name="service_id", required=True, nullable=False),
        ColumnContract(name="trip_id", required=True, nullable=False),
        ColumnContract(name="trip_headsign", required=False, nullable=True),
        ColumnContract(name="direction_id", required=False, nullable=True),
    ),
)

# ---------------------------------------------------------------------------
# stops.txt
# stop_id doubles as the agency stop code; stop_code is often blank.
# ---------------------------------------------------------------------------
STOPS_CONTRACT: Final[FeedFileContract] = FeedFileContract(
    file_name="stops.txt",
    columns=(
        ColumnContract(name="stop_id", required=True, nullable=False),
        ColumnContract(name="stop_code", required=False, nullable=True),
        ColumnContract(name="stop_name", required=True, nullable=True),
        ColumnContract(name="stop_lat", required=False, nullable=True),
        ColumnContract(name="stop_lon", required=False, nullable=True),
    ),
)

CONTRACTS: Final[dict[str, FeedFileContract]] = {
    ROUTES_CONTRACT.file_name: ROUTES_CONTRACT,
    TRIPS_CONTRACT.file_name: TRIPS_CONTRACT,
    STOPS_CONTRACT.file_name: STOPS_CONTRACT,
}
