"""Utility helpers."""
from .geometry import (
    GeoPoint,
    angle_between,
    geo_to_meters,
    haversine_distance,
    meters_to_geo,
    movement_vector,
    standard_deviation,
)
