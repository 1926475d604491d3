"""Unit tests for the place classifier."""

import pytest

from place_resolver.lib.resolver.base import PlaceCandidate
from place_resolver.lib.resolver.classifier import (
    is_acceptable_candidate,
    is_business_place_type,
    is_generic_place_type,
    name_rejection_reason,
    rejection_reason,
)

ADDRESS = "1950 Washington St, Grafton, WI 53024"


def _candidate(name: str, *types: str) -> PlaceCandidate:
    return PlaceCandidate(name=name, types=frozenset(types))


class TestPlaceTypes:
    """Tests for place type tag predicates."""

    def test_all_generic(self) -> None:
        assert is_generic_place_type(frozenset({"street_address", "geocode"})) is True

    def test_mixed_is_not_generic(self) -> None:
        assert is_generic_place_type(frozenset({"premise", "establishment"})) is False

    def test_empty_is_generic(self) -> None:
        assert is_generic_place_type(frozenset()) is True

    def test_business_type(self) -> None:
        assert is_business_place_type(frozenset({"school", "geocode"})) is True

    def test_non_business_type(self) -> None:
        assert is_business_place_type(frozenset({"restaurant", "food"})) is False


class TestNameRejection:
    """Tests for name-shape heuristics."""

    @pytest.mark.parametrize(
        "name",
        [
            "123 Main St",
            "1950 Washington Street",
            "N123W456 Oak Rd",
            "1200 N 5th",
            "WI-57",
            "US 41",
            "Hwy 60 Park and Ride",
        ],
    )
    def test_address_shaped_names_rejected(self, name: str) -> None:
        assert name_rejection_reason(name, ADDRESS) is not None

    def test_municipality_in_address_rejected(self) -> None:
        assert name_rejection_reason("Grafton", ADDRESS) == "generic municipality name"

    def test_municipality_not_in_address_allowed(self) -> None:
        assert name_rejection_reason("Mequon", ADDRESS) is None

    def test_same_as_address_rejected(self) -> None:
        assert name_rejection_reason("LIME KILN PARK", " Lime Kiln Park ") == "same as address"

    def test_empty_name_rejected(self) -> None:
        assert name_rejection_reason("  ", ADDRESS) == "empty name"

    def test_venue_name_accepted(self) -> None:
        assert name_rejection_reason("Grafton High School", ADDRESS) is None


class TestIsAcceptableCandidate:
    """Tests for the combined classifier decision."""

    def test_named_school_accepted(self) -> None:
        candidate = _candidate("Grafton High School", "secondary_school", "point_of_interest", "establishment")
        assert is_acceptable_candidate(candidate, ADDRESS) is True

    def test_street_address_rejected(self) -> None:
        candidate = _candidate("1950 Washington St", "street_address")
        assert is_acceptable_candidate(candidate, ADDRESS) is False
        assert rejection_reason(candidate, ADDRESS) == "generic place type"

    def test_no_types_rejected(self) -> None:
        assert is_acceptable_candidate(_candidate("Lime Kiln Park"), ADDRESS) is False

    def test_non_business_types_rejected(self) -> None:
        candidate = _candidate("Some Bistro", "restaurant", "food")
        assert rejection_reason(candidate, ADDRESS) == "not a business place type"

    def test_business_type_with_address_name_rejected(self) -> None:
        candidate = _candidate("1950 Washington St", "establishment", "point_of_interest")
        assert is_acceptable_candidate(candidate, ADDRESS) is False

    def test_municipality_locality_rejected(self) -> None:
        candidate = _candidate("Grafton", "locality", "political", "establishment")
        assert is_acceptable_candidate(candidate, ADDRESS) is False

    def test_park_accepted(self) -> None:
        candidate = _candidate("Lime Kiln Park", "park", "point_of_interest")
        assert is_acceptable_candidate(candidate, ADDRESS) is True
