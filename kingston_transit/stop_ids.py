"""Deterministic stop-code to stop-id derivation for Kingston Transit.

Kingston Transit publishes three kinds of stop codes:

- plain numbers ("1234"), reused directly as the stop id;
- named transfer hubs ("place_kngc"), mapped through a fixed table;
- "S"-prefixed platform codes ("S42"), shifted into the 190000 range so
  they cannot collide with plain numeric codes.

Any other code is a fatal data error: it means the feed introduced a code
shape these rules were never written for, and the table must be updated
rather than guessed at. A code with digits but a prefix other than "S" is
rejected on purpose even though the digits could be extracted.
"""

from __future__ import annotations

import logging
import re
from collections import defaultdict
from collections.abc import Iterable, Mapping
from types import MappingProxyType
from typing import Final

from kingston_transit.agency_tools import FatalError, is_digits_only
from kingston_transit.records import StopRecord

logger: Final = logging.getLogger(__name__)

_DIGITS: Final[re.Pattern[str]] = re.compile(r"[0-9]+")

_PLATFORM_PREFIX: Final[str] = "S"
_PLATFORM_ID_BASE: Final[int] = 190_000

# ---------------------------------------------------------------------------
# Fixed codes: transfer hubs on multiples of 10,000 from 900000, plus the
# one platform code that does not follow the S<digits> shape.
# ---------------------------------------------------------------------------
FIXED_STOP_IDS: Final[Mapping[str, int]] = MappingProxyType(
    {
        "place_catc": 900_000,
        "place_chca": 910_000,
        "place_dwnp": 920_000,
        "place_grdc": 930_000,
        "place_kngc": 940_000,
        "place_mspr": 950_000,
        "place_rail": 960_000,
        "Smspr1": 970_000,
    }
)


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class UnmappedStopCodeError(FatalError):
    """Raised when a stop code matches none of the derivation rules.

    Attributes:
        stop_code: The raw code that could not be mapped.
        stop: The stop record carrying the code, when known.
    """

    def __init__(self, stop_code: str, stop: StopRecord | None = None) -> None:
        self.stop_code: Final[str] = stop_code
        self.stop: Final[StopRecord | None] = stop
        subject = repr(stop) if stop is not None else f"'{stop_code}'"
        super().__init__(f"Unexpected stop ID for {subject}!")


class StopIdDerivationError(FatalError):
    """Raised when scanning a stop code for digits fails unexpectedly."""

    def __init__(self, stop_code: str, stop: StopRecord | None = None) -> None:
        self.stop_code: Final[str] = stop_code
        self.stop: Final[StopRecord | None] = stop
        subject = repr(stop) if stop is not None else f"'{stop_code}'"
        super().__init__(f"Error while finding stop ID for {subject}!")


class StopIdCollisionError(FatalError):
    """Raised when distinct stop codes derive the same stop id.

    Attributes:
        collisions: Stop id mapped to the sorted distinct codes claiming it.
    """

    def __init__(self, collisions: dict[int, list[str]]) -> None:
        self.collisions: Final[dict[int, list[str]]] = collisions
        detail = "; ".join(
            f"{stop_id}: {codes}" for stop_id, codes in sorted(collisions.items())
        )
        super().__init__(f"Stop ID collision for {len(collisions)} id(s): {detail}")


# ---------------------------------------------------------------------------
# Derivation
# ---------------------------------------------------------------------------


def derive_stop_id(stop_code: str, stop: StopRecord | None = None) -> int:
    """Derive the integer stop id for a raw stop code.

    Args:
        stop_code: Agency stop code (the GTFS stop_id for Kingston).
        stop: Record the code came from, used only in error messages.

    Returns:
        The stop id.

    Raises:
        UnmappedStopCodeError: If no rule covers the code.
        StopIdDerivationError: If the digit scan itself fails.
    """
    if is_digits_only(stop_code):
        return int(stop_code)

    fixed_id = FIXED_STOP_IDS.get(stop_code)
    if fixed_id is not None:
        return fixed_id

    try:
        match = _DIGITS.search(stop_code)
        digits = int(match.group()) if match is not None else None
    except (TypeError, ValueError) as exc:
        raise StopIdDerivationError(stop_code, stop) from exc

    if digits is not None and stop_code.startswith(_PLATFORM_PREFIX):
        stop_id = _PLATFORM_ID_BASE + digits
        logger.debug("Stop code '%s' -> %d (platform)", stop_code, stop_id)
        return stop_id

    raise UnmappedStopCodeError(stop_code, stop)


def collect_stop_id_collisions(
    mapped: Iterable[tuple[str, int]],
) -> dict[int, list[str]]:
    """Return every stop id claimed by more than one distinct stop code.

    Repeated occurrences of the same code are not collisions.

    Args:
        mapped: Pairs of stop code and the stop id already derived for it.
    """
    codes_by_id: dict[int, set[str]] = defaultdict(set)
    for stop_code, stop_id in mapped:
        codes_by_id[stop_id].add(stop_code)
    return {
        stop_id: sorted(codes)
        for stop_id, codes in codes_by_id.items()
        if len(codes) > 1
    }


def find_stop_id_collisions(stops: Iterable[StopRecord]) -> dict[int, list[str]]:
    """Derive the id of every stop and return the colliding ones."""
    return collect_stop_id_collisions(
        (stop.stop_id, derive_stop_id(stop.stop_id, stop)) for stop in stops
    )


def check_stop_id_collisions(stops: Iterable[StopRecord]) -> None:
    """Raise StopIdCollisionError if any two distinct codes share a stop id."""
    collisions = find_stop_id_collisions(stops)
    if collisions:
        raise StopIdCollisionError(collisions)
