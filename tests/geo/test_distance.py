"""Tests for haversine distance and path length."""

from __future__ import annotations

import math

import pytest

from course_planner.geo.distance import EARTH_RADIUS_M, haversine_m, total_distance_km
from course_planner.geo.models import GeoPoint


def _path(*coords: tuple[float, float]) -> list[GeoPoint]:
    return [GeoPoint(lat, lon) for lat, lon in coords]


class TestHaversine:
    @pytest.mark.parametrize(
        "point",
        [GeoPoint(0.0, 0.0), GeoPoint(35.0, 126.0), GeoPoint(-89.9, 179.9), GeoPoint(90.0, 0.0)],
    )
    def test_identical_points_are_zero(self, point):
        assert haversine_m(point, point) == 0.0

    def test_symmetric(self):
        a, b = GeoPoint(35.0, 126.0), GeoPoint(35.2, 126.3)
        assert haversine_m(a, b) == pytest.approx(haversine_m(b, a))

    def test_one_degree_of_latitude(self):
        d = haversine_m(GeoPoint(0.0, 0.0), GeoPoint(1.0, 0.0))
        assert d == pytest.approx(EARTH_RADIUS_M * math.pi / 180, rel=1e-9)

    def test_hundredth_degree_longitude_at_35n(self):
        d = haversine_m(GeoPoint(35.0, 126.0), GeoPoint(35.0, 126.01))
        expected = EARTH_RADIUS_M * math.radians(0.01) * math.cos(math.radians(35.0))
        assert d == pytest.approx(expected, rel=1e-4)

    def test_antipodal_points_are_half_circumference(self):
        d = haversine_m(GeoPoint(0.0, 0.0), GeoPoint(0.0, 180.0))
        assert not math.isnan(d)
        assert d == pytest.approx(math.pi * EARTH_RADIUS_M)

    def test_near_duplicate_points_are_tiny_and_finite(self):
        d = haversine_m(GeoPoint(35.0, 126.0), GeoPoint(35.0, 126.0 + 1e-12))
        assert math.isfinite(d)
        assert d < 1e-3


class TestTotalDistance:
    def test_empty_path(self):
        assert total_distance_km([]) == 0.0

    def test_single_point(self):
        assert total_distance_km(_path((35.0, 126.0))) == 0.0

    def test_sum_of_legs_in_km(self):
        path = _path((0.0, 0.0), (1.0, 0.0), (2.0, 0.0))
        one_degree_km = EARTH_RADIUS_M * math.pi / 180 / 1000
        assert total_distance_km(path) == pytest.approx(2 * one_degree_km)

    def test_reversal_invariant(self):
        path = _path((35.0, 126.0), (35.01, 126.02), (34.99, 126.05), (35.03, 126.04))
        assert total_distance_km(path) == pytest.approx(total_distance_km(path[::-1]))

    def test_accepts_tuples(self):
        path = tuple(_path((35.0, 126.0), (35.0, 126.01)))
        assert total_distance_km(path) == pytest.approx(0.911, abs=0.01)
