"""Tests for the Kingston Transit adapter (kingston_transit/kingston.py)."""

from __future__ import annotations

import pytest

from kingston_transit.agency_tools import UnsupportedRouteShortNameError
from kingston_transit.config import RouteType
from kingston_transit.kingston import KingstonTransitBusAgencyTools
from kingston_transit.records import RouteRecord, StopRecord, TripRecord
from kingston_transit.stop_ids import UnmappedStopCodeError


def _trip(headsign: str) -> TripRecord:
    return TripRecord(route_id="1", service_id="WKD", trip_id="t1", trip_headsign=headsign)


class TestExclusion:
    """Route and trip exclusion predicates."""

    @pytest.mark.parametrize(
        "long_name",
        ["Out Of Service", "OUT OF SERVICE", "Route 99 - out of service"],
    )
    def test_excludes_out_of_service_route(
        self, kingston: KingstonTransitBusAgencyTools, long_name: str
    ) -> None:
        assert kingston.exclude_route(RouteRecord(route_id="99", route_long_name=long_name))

    def test_keeps_regular_route(self, kingston: KingstonTransitBusAgencyTools) -> None:
        route = RouteRecord(route_id="1", route_long_name="Montreal St - St Lawrence College")
        assert not kingston.exclude_route(route)

    def test_keeps_route_without_long_name(
        self, kingston: KingstonTransitBusAgencyTools
    ) -> None:
        assert not kingston.exclude_route(RouteRecord(route_id="1"))

    @pytest.mark.parametrize("headsign", ["Not In Service", "NOT IN SERVICE", "not in service"])
    def test_excludes_not_in_service_trip(
        self, kingston: KingstonTransitBusAgencyTools, headsign: str
    ) -> None:
        assert kingston.exclude_trip(_trip(headsign))

    def test_keeps_regular_trip(self, kingston: KingstonTransitBusAgencyTools) -> None:
        assert not kingston.exclude_trip(_trip("Downtown"))
        assert not kingston.exclude_trip(_trip(""))


class TestRoutes:
    """Route short names and route ids."""

    def test_short_name_is_route_id(self, kingston: KingstonTransitBusAgencyTools) -> None:
        route = RouteRecord(route_id="502", route_short_name="Express 502")
        assert kingston.get_route_short_name(route) == "502"

    @pytest.mark.parametrize(
        ("route_id", "expected"),
        [("1", 1), ("502", 502), ("12A", 10_012), ("COV", 99_001), ("XTRA", 99_002)],
    )
    def test_route_ids(
        self, kingston: KingstonTransitBusAgencyTools, route_id: str, expected: int
    ) -> None:
        route = RouteRecord(route_id=route_id, route_short_name="ignored")
        assert kingston.get_route_id(route) == expected

    @pytest.mark.parametrize("short_name", ["ABC", "cov", "Xtra"])
    def test_unknown_named_route_is_fatal(
        self, kingston: KingstonTransitBusAgencyTools, short_name: str
    ) -> None:
        with pytest.raises(UnsupportedRouteShortNameError):
            kingston.convert_route_id_from_short_name(short_name)


class TestTripHeadsign:
    """Trip head-sign cleanup."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("Express - Princess St to KGH via Bath Rd", "Princess Street to KGH"),
            ("EXTRA BUS - Downtown", "Downtown"),
            ("Kingston General Hospital", "KGH"),
            ("Kingston General Hosp via Brock St", "KGH"),
            ("St Lawrence College", "Saint Lawrence College"),
            ("Downtown to St. Lawrence College", "Downtown to Saint Lawrence College"),
            ("CATARAQUI CENTRE/DOWNTOWN", "Cataraqui Centre / Downtown"),
            ("Bath Rd & Gardiners Rd", "Bath Road & Gardiners Road"),
        ],
    )
    def test_cleans(
        self, kingston: KingstonTransitBusAgencyTools, raw: str, expected: str
    ) -> None:
        assert kingston.clean_trip_headsign(raw) == expected

    @pytest.mark.parametrize(
        "raw",
        [
            "Express - Princess St to KGH via Bath Rd",
            "St Lawrence College",
            "CATARAQUI CENTRE/DOWNTOWN",
        ],
    )
    def test_is_idempotent(
        self, kingston: KingstonTransitBusAgencyTools, raw: str
    ) -> None:
        once = kingston.clean_trip_headsign(raw)
        assert kingston.clean_trip_headsign(once) == once

    @pytest.mark.parametrize(
        "raw",
        ["Express-way Plaza", "Expressway Terminal", "Express -Downtown"],
    )
    def test_keeps_words_starting_with_express(
        self, kingston: KingstonTransitBusAgencyTools, raw: str
    ) -> None:
        assert kingston.clean_trip_headsign(raw) == raw

    def test_strips_one_service_marker(
        self, kingston: KingstonTransitBusAgencyTools
    ) -> None:
        result = kingston.clean_trip_headsign("Express - Express - Downtown")
        assert result == "Express - Downtown"


class TestDirectionHeadsign:
    """Direction head-sign cleanup."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("Cataraqui Centre Transfer Point Platform 3", "Cataraqui Centre"),
            ("Cataraqui Centre Transfer Pt P:2", "Cataraqui Centre"),
            ("Kingston Centre (Bay 2)", "Kingston Centre"),
            ("Downtown Transfer Point Platform 1 (North)", "Downtown"),
            ("Princess St (west)", "Princess Street"),
            ("Downtown (A) (B)", "Downtown"),
            ("Cataraqui Centre (Platform 3) Transfer Point Platform 2", "Cataraqui Centre"),
        ],
    )
    def test_strips_stop_details(
        self, kingston: KingstonTransitBusAgencyTools, raw: str, expected: str
    ) -> None:
        assert kingston.clean_direction_headsign(0, True, raw) == expected

    def test_keeps_details_when_not_from_stop_name(
        self, kingston: KingstonTransitBusAgencyTools
    ) -> None:
        raw = "Cataraqui Centre Transfer Point Platform 3"
        assert kingston.clean_direction_headsign(1, False, raw) == raw

    def test_applies_trip_rules(self, kingston: KingstonTransitBusAgencyTools) -> None:
        result = kingston.clean_direction_headsign(0, False, "Express - Bath Rd")
        assert result == "Bath Road"


class TestStopName:
    """Stop name cleanup."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            (
                "PRINCESS ST at DIVISION ST (north side)",
                "Princess Street / Division Street (north)",
            ),
            ("Montreal St and Princess St", "Montreal Street & Princess Street"),
            ("First Ave at Bath Rd", "1st Avenue / Bath Road"),
            ("[Downtown Transfer Point]", "(Downtown Transfer Point)"),
            ("- Bath Rd -", "Bath Road"),
        ],
    )
    def test_cleans(
        self, kingston: KingstonTransitBusAgencyTools, raw: str, expected: str
    ) -> None:
        assert kingston.clean_stop_name(raw) == expected

    @pytest.mark.parametrize(
        "raw",
        [
            "PRINCESS ST at DIVISION ST (north side)",
            "Montreal St and Princess St",
            "First Ave at Bath Rd",
            "King St at St Lawrence College",
        ],
    )
    def test_is_idempotent(
        self, kingston: KingstonTransitBusAgencyTools, raw: str
    ) -> None:
        once = kingston.clean_stop_name(raw)
        assert kingston.clean_stop_name(once) == once


class TestStops:
    """Stop codes and stop ids."""

    def test_stop_code_is_stop_id(self, kingston: KingstonTransitBusAgencyTools) -> None:
        stop = StopRecord(stop_id="S42", stop_code="9042")
        assert kingston.get_stop_code(stop) == "S42"

    @pytest.mark.parametrize(
        ("stop_id", "expected"),
        [
            ("00850", 850),
            ("place_kngc", 940_000),
            ("place_rail", 960_000),
            ("Smspr1", 970_000),
            ("S42", 190_042),
        ],
    )
    def test_stop_ids(
        self, kingston: KingstonTransitBusAgencyTools, stop_id: str, expected: int
    ) -> None:
        assert kingston.get_stop_id(StopRecord(stop_id=stop_id)) == expected

    def test_unmapped_stop_is_fatal(self, kingston: KingstonTransitBusAgencyTools) -> None:
        stop = StopRecord(stop_id="ABC", stop_name="Mystery Stop")
        with pytest.raises(UnmappedStopCodeError) as exc_info:
            kingston.get_stop_id(stop)

        assert exc_info.value.stop is stop


class TestMetadata:
    """Agency identity."""

    def test_identity(self, kingston: KingstonTransitBusAgencyTools) -> None:
        assert kingston.get_agency_name() == "Kingston Transit"
        assert kingston.get_agency_color() == "009BC9"
        assert kingston.get_agency_route_type() is RouteType.BUS
