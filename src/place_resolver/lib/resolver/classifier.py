"""Heuristic place classification.

Decides whether a places-API candidate is a usable named venue (school,
park, stadium, ...) or merely the input address restated as a street,
locality, or municipality.
"""

import re

from place_resolver.lib.resolver.base import PlaceCandidate

# Tags that only restate an address component
GENERIC_PLACE_TYPES: frozenset[str] = frozenset(
    {
        "street_address",
        "premise",
        "subpremise",
        "route",
        "neighborhood",
        "locality",
        "sublocality",
        "postal_code",
        "geocode",
    }
)

# At least one of these must be present for a candidate to be a venue
BUSINESS_PLACE_TYPES: frozenset[str] = frozenset(
    {
        "establishment",
        "point_of_interest",
        "stadium",
        "park",
        "gym",
        "school",
        "primary_school",
        "secondary_school",
        "university",
        "sports_complex",
        "recreation_center",
        "community_center",
        "playground",
        "athletic_field",
    }
)

# Names shaped like addresses rather than venues
ADDRESS_NAME_PATTERNS: tuple[re.Pattern[str], ...] = (
    # House number + street + suffix: "123 Main St"
    re.compile(
        r"^\d+[\s-]+\w+[\s-]+(?:st|street|rd|road|ave|avenue|ln|lane|dr|drive"
        r"|blvd|boulevard|way|ct|court|pl|place)",
        re.IGNORECASE,
    ),
    # Directional-quadrant grid addresses: "N123W456"
    re.compile(r"^[news]\d+[news]\d+", re.IGNORECASE),
    # "1200 N 5th"
    re.compile(r"^\d+\s*[news]\s*\d+(st|nd|rd|th)?", re.IGNORECASE),
    # Highway / route numbers: "WI-57", "US 41", "Hwy 60"
    re.compile(r"^(?:wi|us|state|county|highway|hwy|route|rt)[\s-]?\d+", re.IGNORECASE),
)

# Municipality names that places search returns for bare city addresses
GENERIC_MUNICIPALITY_NAMES: frozenset[str] = frozenset(
    {
        "grafton",
        "mequon",
        "milwaukee",
        "wisconsin",
        "port washington",
        "germantown",
        "brookfield",
        "brown deer",
    }
)


def is_generic_place_type(types: frozenset[str] | set[str]) -> bool:
    """True when every tag restates an address component.

    An empty tag set is vacuously generic.
    """
    return all(t in GENERIC_PLACE_TYPES for t in types)


def is_business_place_type(types: frozenset[str] | set[str]) -> bool:
    """True when at least one tag marks a named point of interest."""
    return any(t in BUSINESS_PLACE_TYPES for t in types)


def name_rejection_reason(name: str, original_address: str) -> str | None:
    """Return why ``name`` is not a usable venue name, or None if it is.

    Args:
        name: Candidate place name.
        original_address: The raw address the lookup started from.

    Returns:
        A short reason string, or None when the name passes every heuristic.
    """
    lower_name = name.strip().lower()
    lower_address = original_address.strip().lower()

    if not lower_name:
        return "empty name"

    for pattern in ADDRESS_NAME_PATTERNS:
        if pattern.search(lower_name):
            return f"address-shaped name ({pattern.pattern[:24]})"

    if lower_name in GENERIC_MUNICIPALITY_NAMES and lower_name in lower_address:
        return "generic municipality name"

    if lower_name == lower_address:
        return "same as address"

    return None


def rejection_reason(candidate: PlaceCandidate, original_address: str) -> str | None:
    """Return why ``candidate`` should be rejected, or None to accept it."""
    if is_generic_place_type(candidate.types):
        return "generic place type"
    if not is_business_place_type(candidate.types):
        return "not a business place type"
    return name_rejection_reason(candidate.name, original_address)


def is_acceptable_candidate(candidate: PlaceCandidate, original_address: str) -> bool:
    """Decide whether a candidate is a named venue rather than a bare address.

    The candidate must not be purely generic-typed, must carry a business
    type, and its name must survive the address-shape, municipality, and
    same-as-address checks. Distance bounds are applied by the caller.

    Args:
        candidate: Place returned by an upstream search.
        original_address: The raw address the lookup started from.

    Returns:
        True if the candidate is acceptable.
    """
    return rejection_reason(candidate, original_address) is None
