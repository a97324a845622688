"""Read-only GTFS feed loader for running the adapter outside the parser.

Reads routes.txt, trips.txt and stops.txt from an unpacked feed directory
or a .zip archive, decodes each file to text, checks the header against
the contracts in contracts.py, and builds the records the adapter consumes.

Decoding follows the raw-file rules of the ingestion pipeline: a UTF-8 BOM
is stripped, anything else is detected with charset-normalizer and
transcoded, and a low-confidence detection is rejected rather than guessed.
"""

from __future__ import annotations

import csv
import io
import logging
import zipfile
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Final

from charset_normalizer import from_bytes

from kingston_transit.contracts import (
    ROUTES_CONTRACT,
    STOPS_CONTRACT,
    TRIPS_CONTRACT,
    FeedFileContract,
)
from kingston_transit.records import RouteRecord, StopRecord, TripRecord

logger: Final = logging.getLogger(__name__)

_ENCODING_CONFIDENCE_THRESHOLD: Final[float] = 0.7
_UTF8_BOM: Final[bytes] = b"\xef\xbb\xbf"


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class FeedError(Exception):
    """Raised when a GTFS feed cannot be read."""


class FeedNotFoundError(FeedError):
    """Raised when the feed path or one of its required files is missing."""


class FeedEncodingError(FeedError):
    """Raised when a feed file's encoding cannot be detected confidently."""


class FeedSchemaError(FeedError):
    """Raised when a feed file deviates from its column contract.

    Attributes:
        file_name: Name of the non-conforming feed file.
        expected_columns: Column names defined by the contract.
        actual_columns: Column names found in the file header.
        mismatches: Human-readable descriptions of each deviation.
    """

    def __init__(
        self,
        file_name: str,
        expected_columns: list[str],
        actual_columns: list[str],
        mismatches: list[str],
    ) -> None:
        self.file_name = file_name
        self.expected_columns = expected_columns
        self.actual_columns = actual_columns
        self.mismatches = mismatches
        detail = "; ".join(mismatches)
        super().__init__(f"Schema validation failed for '{file_name}': {detail}")


# ---------------------------------------------------------------------------
# Result dataclass
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Feed:
    """Records loaded from one GTFS feed."""

    routes: tuple[RouteRecord, ...]
    trips: tuple[TripRecord, ...]
    stops: tuple[StopRecord, ...]


# ---------------------------------------------------------------------------
# Raw file access
# ---------------------------------------------------------------------------


def _read_raw_files(
    feed_path: Path,
    file_names: tuple[str, ...],
) -> dict[str, bytes]:
    """Return the raw bytes of each named file from a directory or archive."""
    if not feed_path.exists():
        raise FeedNotFoundError(f"Feed not found: '{feed_path}'")

    if feed_path.is_dir():
        raw: dict[str, bytes] = {}
        for name in file_names:
            file_path = feed_path / name
            if not file_path.is_file():
                raise FeedNotFoundError(f"'{name}' not found in '{feed_path}'")
            raw[name] = file_path.read_bytes()
        return raw

    try:
        with zipfile.ZipFile(feed_path, "r") as zf:
            members = _index_members(zf)
            raw = {}
            for name in file_names:
                info = members.get(name)
                if info is None:
                    raise FeedNotFoundError(f"'{name}' not found in '{feed_path}'")
                raw[name] = zf.read(info)
            return raw
    except zipfile.BadZipFile as exc:
        raise FeedError(f"'{feed_path}' is not a valid GTFS zip archive: {exc}") from exc


def _index_members(zf: zipfile.ZipFile) -> dict[str, zipfile.ZipInfo]:
    """Map flat file names to archive members, ignoring macOS metadata."""
    members: dict[str, zipfile.ZipInfo] = {}
    for info in zf.infolist():
        if info.is_dir() or "__MACOSX" in info.filename:
            continue
        members.setdefault(PurePosixPath(info.filename).name, info)
    return members


def decode_feed_file(raw: bytes, file_name: str) -> str:
    """Decode raw feed file bytes to text.

    Raises:
        FeedEncodingError: If no encoding is detected with confidence >= 0.7.
    """
    if raw.startswith(_UTF8_BOM):
        raw = raw[len(_UTF8_BOM) :]
    if not raw:
        return ""

    best = from_bytes(raw).best()
    if best is None:
        raise FeedEncodingError(
            f"Cannot detect encoding for '{file_name}': no candidates returned"
        )

    # charset-normalizer uses chaos (0=perfect). Invert to confidence.
    confidence = 1.0 - best.chaos
    if confidence < _ENCODING_CONFIDENCE_THRESHOLD:
        raise FeedEncodingError(
            f"Low confidence ({confidence:.2f}) detecting encoding for '{file_name}'"
        )

    encoding = str(best.encoding)
    if encoding.lower().replace("-", "").replace("_", "") not in {"utf8", "ascii"}:
        logger.info("Transcoding %s: %s (%.2f) -> UTF-8", file_name, encoding, confidence)
    return raw.decode(encoding).lstrip("\ufeff")


# ---------------------------------------------------------------------------
# Contract checks
# ---------------------------------------------------------------------------


def read_feed_rows(text: str, contract: FeedFileContract) -> list[dict[str, str]]:
    """Parse a feed file and check it against its contract.

    Header names are matched case-insensitively and returned lower-cased.

    Raises:
        FeedSchemaError: On a missing header, a missing required column, or
            a blank value in a non-nullable column.
    """
    reader = csv.DictReader(io.StringIO(text))
    if reader.fieldnames is None:
        raise FeedSchemaError(
            file_name=contract.file_name,
            expected_columns=list(contract.column_names),
            actual_columns=[],
            mismatches=["File has no header row"],
        )

    actual_columns = [name.strip().lower() for name in reader.fieldnames]
    reader.fieldnames = actual_columns

    missing = [
        name for name in contract.column_names
        if name in contract.required_columns and name not in actual_columns
    ]
    if missing:
        raise FeedSchemaError(
            file_name=contract.file_name,
            expected_columns=list(contract.column_names),
            actual_columns=actual_columns,
            mismatches=[f"Missing required columns: {missing}"],
        )

    extra = [name for name in actual_columns if name not in contract.column_names]
    if extra:
        logger.debug("%s: columns not in contract (ignored): %s", contract.file_name, extra)

    rows: list[dict[str, str]] = []
    for row_number, row in enumerate(reader, start=2):
        blank = [
            name for name in sorted(contract.non_nullable_columns)
            if name in actual_columns and not (row.get(name) or "").strip()
        ]
        if blank:
            raise FeedSchemaError(
                file_name=contract.file_name,
                expected_columns=list(contract.column_names),
                actual_columns=actual_columns,
                mismatches=[f"Row {row_number}: empty non-nullable columns {blank}"],
            )
        rows.append(row)
    return rows


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def load_feed(feed_path: Path) -> Feed:
    """Load routes, trips and stops from a GTFS directory or zip archive.

    Raises:
        FeedNotFoundError: If the feed or a required file is missing.
        FeedEncodingError: If a file cannot be decoded.
        FeedSchemaError: If a file deviates from its contract.
        FeedError: If the archive is corrupt.
    """
    contracts = (ROUTES_CONTRACT, TRIPS_CONTRACT, STOPS_CONTRACT)
    raw = _read_raw_files(feed_path, tuple(c.file_name for c in contracts))

    rows = {
        contract.file_name: read_feed_rows(
            decode_feed_file(raw[contract.file_name], contract.file_name),
            contract,
        )
        for contract in contracts
    }

    feed = Feed(
        routes=tuple(RouteRecord.from_row(r) for r in rows[ROUTES_CONTRACT.file_name]),
        trips=tuple(TripRecord.from_row(r) for r in rows[TRIPS_CONTRACT.file_name]),
        stops=tuple(StopRecord.from_row(r) for r in rows[STOPS_CONTRACT.file_name]),
    )
    logger.info(
        "Loaded %s: %d routes, %d trips, %d stops",
        feed_path.name,
        len(feed.routes),
        len(feed.trips),
        len(feed.stops),
    )
    return feed
