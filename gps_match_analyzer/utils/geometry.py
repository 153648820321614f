"""
Geometry Utilities

Great-circle distances and local coordinate projections for GPS samples.
Every detector measures in meters through these helpers.
"""
import math
from typing import Iterable, NamedTuple, Tuple

import numpy as np

EARTH_RADIUS_M = 6371000.0

Vector2D = Tuple[float, float]


class GeoPoint(NamedTuple):
    """A GPS sample in decimal degrees."""
    lat: float
    lon: float


def haversine_distance(point1: GeoPoint, point2: GeoPoint) -> float:
    """
    Calculate the great-circle distance between two GPS samples.

    Args:
        point1: First sample (lat, lon) in degrees
        point2: Second sample (lat, lon) in degrees

    Returns:
        Distance in meters
    """
    lat1 = math.radians(point1[0])
    lat2 = math.radians(point2[0])
    delta_lat = math.radians(point2[0] - point1[0])
    delta_lon = math.radians(point2[1] - point1[1])

    a = (math.sin(delta_lat / 2) ** 2 +
         math.cos(lat1) * math.cos(lat2) * math.sin(delta_lon / 2) ** 2)
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_M * c


def _meters_per_degree(origin: GeoPoint) -> Tuple[float, float]:
    """Meters per degree of latitude and longitude around an origin."""
    lat_m = EARTH_RADIUS_M * math.pi / 180
    lon_m = lat_m * math.cos(math.radians(origin[0]))
    return lat_m, lon_m


def meters_to_geo(x: float, y: float, origin: GeoPoint) -> GeoPoint:
    """
    Project local pitch coordinates to GPS.

    Args:
        x: Meters east of the origin
        y: Meters north of the origin
        origin: Reference point of the local frame

    Returns:
        GeoPoint for the given offset
    """
    lat_m, lon_m = _meters_per_degree(origin)
    return GeoPoint(origin[0] + y / lat_m, origin[1] + x / lon_m)


def geo_to_meters(point: GeoPoint, origin: GeoPoint) -> Vector2D:
    """Inverse of meters_to_geo: (x east, y north) in meters."""
    lat_m, lon_m = _meters_per_degree(origin)
    return (point[1] - origin[1]) * lon_m, (point[0] - origin[0]) * lat_m


def movement_vector(start: GeoPoint, end: GeoPoint) -> Vector2D:
    """Displacement from start to end in local meters, projected at start."""
    return geo_to_meters(end, start)


def angle_between(v1: Vector2D, v2: Vector2D) -> float:
    """
    Angle between two vectors.

    Returns:
        Angle in radians, 0 when either vector has zero length
    """
    mag1 = np.hypot(v1[0], v1[1])
    mag2 = np.hypot(v2[0], v2[1])
    if mag1 == 0 or mag2 == 0:
        return 0.0

    cos_angle = (v1[0] * v2[0] + v1[1] * v2[1]) / (mag1 * mag2)
    return float(np.arccos(np.clip(cos_angle, -1.0, 1.0)))


def standard_deviation(values: Iterable[float]) -> float:
    """Population standard deviation, 0 for empty input."""
    data = np.asarray(list(values), dtype=float)
    if data.size == 0:
        return 0.0
    return float(np.std(data))
