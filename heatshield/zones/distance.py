"""Great-circle distance helpers."""

import math

from heatshield.models.zones import Coordinate

EARTH_RADIUS_M = 6_371_008.8


def haversine_m(a: Coordinate, b: Coordinate) -> float:
    """Great-circle distance between two coordinates in meters."""
    lat1, lon1, lat2, lon2 = map(
        math.radians, [a.latitude, a.longitude, b.latitude, b.longitude]
    )
    dlat = lat2 - lat1
    dlon = lon2 - lon1
    h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    return 2 * EARTH_RADIUS_M * math.asin(min(1.0, math.sqrt(h)))


def format_distance(distance_m: float) -> str:
    """'850m' below one kilometer, '1.2km' from there up."""
    if distance_m < 1000:
        return f"{int(distance_m)}m"
    return f"{distance_m / 1000:.1f}km"
