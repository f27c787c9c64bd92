"""Great-circle distances on a spherical Earth.

All distances in the package come from ``haversine_distance_m`` and its one
radius constant, so fares, matching and tracking never disagree about how far
apart two points are.
"""

from math import asin, cos, radians, sin, sqrt

from ridematch.geo.coordinate import Coordinate

EARTH_RADIUS_M = 6_371_000  # mean radius, metres


def haversine_distance_m(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Haversine distance in metres between two points given in degrees.

    Arguments are not range-checked; use ``distance`` for untrusted input.
    """
    phi1, phi2 = radians(lat1), radians(lat2)
    half_dphi = (phi2 - phi1) / 2
    half_dlambda = radians(lon2 - lon1) / 2

    h = sin(half_dphi) ** 2 + cos(phi1) * cos(phi2) * sin(half_dlambda) ** 2
    # Rounding can push h a hair above 1 for antipodal points
    return 2 * EARTH_RADIUS_M * asin(sqrt(min(1.0, h)))


def haversine_distance_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    return haversine_distance_m(lat1, lon1, lat2, lon2) / 1000.0


def distance(a: Coordinate, b: Coordinate) -> float:
    """Distance in metres between two coordinates, pairs or lat/lng mappings.

    Raises:
        InvalidCoordinate: if either argument cannot be read as a coordinate
    """
    a = Coordinate.parse(a)
    b = Coordinate.parse(b)
    return haversine_distance_m(a.lat, a.lng, b.lat, b.lng)


def distance_km(a: Coordinate, b: Coordinate) -> float:
    return distance(a, b) / 1000.0
