"""Tests for the GPS geometry helpers."""
import math

import pytest

from gps_match_analyzer.utils.geometry import (
    GeoPoint,
    angle_between,
    geo_to_meters,
    haversine_distance,
    meters_to_geo,
    movement_vector,
    standard_deviation,
)

ORIGIN = GeoPoint(51.4975, -0.1357)


class TestHaversine:

    def test_same_point_is_zero(self):
        assert haversine_distance(ORIGIN, ORIGIN) == 0.0

    def test_projected_offset_matches_distance(self):
        """A 30m east / 40m north offset is 50m away."""
        point = meters_to_geo(30, 40, ORIGIN)
        assert haversine_distance(ORIGIN, point) == pytest.approx(50.0, abs=0.01)

    def test_one_degree_of_latitude(self):
        distance = haversine_distance(GeoPoint(0.0, 0.0), GeoPoint(1.0, 0.0))
        assert distance == pytest.approx(111195, rel=1e-3)


class TestProjection:

    def test_geo_to_meters_inverts_meters_to_geo(self):
        x, y = geo_to_meters(meters_to_geo(-12.5, 7.0, ORIGIN), ORIGIN)
        assert x == pytest.approx(-12.5, abs=1e-6)
        assert y == pytest.approx(7.0, abs=1e-6)

    def test_movement_vector_points_east(self):
        start = meters_to_geo(0, 0, ORIGIN)
        end = meters_to_geo(10, 0, ORIGIN)
        dx, dy = movement_vector(start, end)
        assert dx == pytest.approx(10.0, abs=1e-3)
        assert dy == pytest.approx(0.0, abs=1e-6)


class TestAngleBetween:

    def test_orthogonal(self):
        assert angle_between((1, 0), (0, 5)) == pytest.approx(math.pi / 2)

    def test_opposite(self):
        assert angle_between((1, 1), (-2, -2)) == pytest.approx(math.pi)

    def test_zero_vector_gives_zero(self):
        assert angle_between((0, 0), (1, 0)) == 0.0


class TestStandardDeviation:

    def test_empty(self):
        assert standard_deviation([]) == 0.0

    def test_population_deviation(self):
        assert standard_deviation([2, 4, 4, 4, 5, 5, 7, 9]) == pytest.approx(2.0)
