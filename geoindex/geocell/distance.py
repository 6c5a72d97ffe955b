"""
Great-circle distances.
"""

from math import asin, cos, radians, sin, sqrt

from geoindex.core.models import Point

EARTH_RADIUS_METERS = 6371000.0


def haversine_distance(a: Point, b: Point) -> float:
    """
    Distance between two points in meters using the Haversine formula.
    """
    lat1, lon1, lat2, lon2 = map(radians, [a.latitude, a.longitude, b.latitude, b.longitude])
    dlat = lat2 - lat1
    dlon = lon2 - lon1
    h = sin(dlat / 2) ** 2 + cos(lat1) * cos(lat2) * sin(dlon / 2) ** 2
    return 2 * EARTH_RADIUS_METERS * asin(min(1.0, sqrt(h)))
