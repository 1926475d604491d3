"""Great-circle distance between coordinate pairs."""

import math

EARTH_RADIUS_METERS = 6_371_000


def haversine_meters(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Return the haversine distance between two WGS84 points in meters.

    Args:
        lat1: Latitude of the first point.
        lng1: Longitude of the first point.
        lat2: Latitude of the second point.
        lng2: Longitude of the second point.

    Returns:
        Great-circle distance in meters.
    """
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lng2 - lng1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    return 2 * EARTH_RADIUS_METERS * math.asin(min(1.0, math.sqrt(a)))


def within_radius(
    anchor: tuple[float, float] | None,
    lat: float | None,
    lng: float | None,
    radius_meters: float,
) -> bool:
    """Check that a point lies within ``radius_meters`` of an anchor.

    The bound only applies when both the anchor and the point are known;
    otherwise the check passes.
    """
    if anchor is None or lat is None or lng is None:
        return True
    return haversine_meters(anchor[0], anchor[1], lat, lng) <= radius_meters
