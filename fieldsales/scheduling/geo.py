"""Great-circle distance between coordinates."""

from math import asin, cos, radians, sin, sqrt

from fieldsales.models import Coordinate

EARTH_RADIUS_KM = 6371.0


def distance_km(a: Coordinate, b: Coordinate) -> float:
    """Compute haversine distance in kilometres between two points."""
    if a == b:
        return 0.0

    lat1 = radians(a.latitude)
    lon1 = radians(a.longitude)
    lat2 = radians(b.latitude)
    lon2 = radians(b.longitude)

    dlat = lat2 - lat1
    dlon = lon2 - lon1

    h = sin(dlat / 2) ** 2 + cos(lat1) * cos(lat2) * sin(dlon / 2) ** 2
    # Rounding can push h a hair above 1 for antipodal points
    return 2 * EARTH_RADIUS_KM * asin(sqrt(min(1.0, h)))


def is_within_radius(office: Coordinate, point: Coordinate, max_radius_km: float) -> bool:
    """Whether `point` lies inside the service radius around `office` (inclusive)."""
    return distance_km(office, point) <= max_radius_km
