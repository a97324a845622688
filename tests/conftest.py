"""Shared pytest fixtures for adapter and feed harness tests.

Generates GTFS feeds programmatically to avoid committing binary files.
Feed files are written with csv.writer; archive fixtures use zipfile;
encoding fixtures use explicit byte encoding.
"""

from __future__ import annotations

import csv
import io
import zipfile
from typing import TYPE_CHECKING

import pytest

from kingston_transit.kingston import KingstonTransitBusAgencyTools

if TYPE_CHECKING:
    from pathlib import Path

# ---------------------------------------------------------------------------
# Sample Kingston Transit feed
# ---------------------------------------------------------------------------

ROUTES_HEADERS: list[str] = [
    "route_id",
    "agency_id",
    "route_short_name",
    "route_long_name",
    "route_type",
    "route_color",
]

ROUTES_ROWS: list[list[str]] = [
    ["1", "KT", "1", "Montreal St - St Lawrence College", "3", "009BC9"],
    ["12A", "KT", "12A", "Kingston Centre - Cataraqui Centre", "3", ""],
    ["COV", "KT", "COV", "Cataraqui Woods Shuttle", "3", ""],
    ["XTRA", "KT", "XTRA", "Extra Bus", "3", ""],
    ["99", "KT", "99", "Out Of Service", "3", ""],
]

TRIPS_HEADERS: list[str] = [
    "route_id",
    "service_id",
    "trip_id",
    "trip_headsign",
    "direction_id",
]

TRIPS_ROWS: list[list[str]] = [
    ["1", "WKD", "t1", "Express - Princess St to KGH via Bath Rd", "0"],
    ["1", "WKD", "t2", "St Lawrence College", "1"],
    ["12A", "WKD", "t3", "Cataraqui Centre Transfer Point", "0"],
    ["COV", "WKD", "t4", "Not In Service", "0"],
    ["99", "WKD", "t5", "Downtown", ""],
]

STOPS_HEADERS: list[str] = [
    "stop_id",
    "stop_code",
    "stop_name",
    "stop_lat",
    "stop_lon",
]

STOPS_ROWS: list[list[str]] = [
    ["00850", "", "PRINCESS ST at DIVISION ST (north side)", "44.2334", "-76.4930"],
    ["place_kngc", "", "Kingston Centre Transfer Point", "44.2562", "-76.5699"],
    ["S42", "", "Cataraqui Centre Transfer Pt P:2", "44.2581", "-76.5571"],
    ["Smspr1", "", "Montreal St Park and Ride", "44.2672", "-76.4996"],
]


def _render_csv(headers: list[str], rows: list[list[str]]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(headers)
    writer.writerows(rows)
    return buffer.getvalue()


def feed_files(
    routes: list[list[str]] | None = None,
    trips: list[list[str]] | None = None,
    stops: list[list[str]] | None = None,
) -> dict[str, str]:
    """Render the sample feed as file name -> CSV text, with row overrides."""
    return {
        "routes.txt": _render_csv(ROUTES_HEADERS, ROUTES_ROWS if routes is None else routes),
        "trips.txt": _render_csv(TRIPS_HEADERS, TRIPS_ROWS if trips is None else trips),
        "stops.txt": _render_csv(STOPS_HEADERS, STOPS_ROWS if stops is None else stops),
    }


def write_feed_dir(directory: Path, files: dict[str, str]) -> Path:
    """Write feed files as UTF-8 into directory and return it."""
    directory.mkdir(parents=True, exist_ok=True)
    for name, text in files.items():
        (directory / name).write_text(text, encoding="utf-8")
    return directory


# ---------------------------------------------------------------------------
# Feed fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def gtfs_dir(tmp_path: Path) -> Path:
    """Create an unpacked GTFS feed directory."""
    return write_feed_dir(tmp_path / "gtfs", feed_files())


@pytest.fixture()
def gtfs_zip(tmp_path: Path) -> Path:
    """Create a GTFS zip with a subdirectory prefix and macOS metadata."""
    zip_path = tmp_path / "google_transit.zip"
    with zipfile.ZipFile(zip_path, "w") as zf:
        for name, text in feed_files().items():
            zf.writestr(f"google_transit/{name}", text)
        zf.writestr("__MACOSX/google_transit/._stops.txt", "metadata")
    return zip_path


@pytest.fixture()
def corrupt_zip(tmp_path: Path) -> Path:
    """Create a .zip file that is not a zip archive."""
    zip_path = tmp_path / "corrupt.zip"
    zip_path.write_bytes(b"this is not a zip archive")
    return zip_path


@pytest.fixture()
def unsupported_route_dir(tmp_path: Path) -> Path:
    """Create a feed whose only route code has no route id mapping."""
    files = feed_files(
        routes=[["ABC", "KT", "ABC", "Mystery Route", "3", ""]],
        trips=[["ABC", "WKD", "t1", "Downtown", "0"]],
    )
    return write_feed_dir(tmp_path / "unsupported_route", files)


@pytest.fixture()
def unmapped_stop_dir(tmp_path: Path) -> Path:
    """Create a feed containing a stop code no rule covers."""
    files = feed_files(stops=[["ABC", "", "Mystery Stop", "", ""]])
    return write_feed_dir(tmp_path / "unmapped_stop", files)


@pytest.fixture()
def colliding_stops_dir(tmp_path: Path) -> Path:
    """Create a feed where a numeric code and an S-code share a stop id."""
    files = feed_files(
        stops=[
            ["190042", "", "Bath Rd at Days Rd", "", ""],
            ["S42", "", "Cataraqui Centre Transfer Pt P:2", "", ""],
        ]
    )
    return write_feed_dir(tmp_path / "colliding_stops", files)


@pytest.fixture()
def missing_route_type_dir(tmp_path: Path) -> Path:
    """Create a feed whose routes.txt lacks the required route_type column."""
    files = feed_files()
    files["routes.txt"] = "route_id\n1\n"
    return write_feed_dir(tmp_path / "missing_route_type", files)


# ---------------------------------------------------------------------------
# Encoding fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def windows_1252_gtfs_dir(tmp_path: Path) -> Path:
    """Create a feed whose stops.txt is encoded in Windows-1252."""
    directory = write_feed_dir(tmp_path / "cp1252", feed_files())
    content = "stop_id,stop_name\n1001,Café Résumé\n1002,Naïve\n"
    (directory / "stops.txt").write_bytes(content.encode("windows-1252"))
    return directory


@pytest.fixture()
def utf8_bom_gtfs_dir(tmp_path: Path) -> Path:
    """Create a feed whose routes.txt starts with a UTF-8 BOM."""
    directory = write_feed_dir(tmp_path / "bom", feed_files())
    routes = directory / "routes.txt"
    routes.write_bytes(b"\xef\xbb\xbf" + routes.read_bytes())
    return directory


# ---------------------------------------------------------------------------
# Adapter fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def kingston() -> KingstonTransitBusAgencyTools:
    """Return a Kingston Transit adapter with the default configuration."""
    return KingstonTransitBusAgencyTools()
