import math
import random

import pytest

from ridematch.geo.coordinate import Coordinate
from ridematch.geo.distance import haversine_distance_m
from ridematch.geo.polyline import clamped, interpolate_points, offset_point, segment_count


@pytest.mark.unit
class TestSegmentCount:
    def test_short_legs_use_minimum(self):
        assert segment_count(0.0) == 15
        assert segment_count(1.4) == 15

    def test_long_legs_scale_with_distance(self):
        assert segment_count(3.27) == 32
        assert segment_count(10.0) == 100

    def test_custom_parameters(self):
        assert segment_count(2.0, min_segments=5, segments_per_km=1.0) == 5
        assert segment_count(20.0, min_segments=5, segments_per_km=1.0) == 20


@pytest.mark.unit
class TestInterpolatePoints:
    def test_straight_line_point_count_and_endpoints(self, pickup, destination):
        points = interpolate_points(pickup, destination, 16)

        assert len(points) == 17
        assert points[0] == pickup
        assert points[-1] == destination

    def test_straight_line_is_evenly_spaced(self, pickup, destination):
        points = interpolate_points(pickup, destination, 4)

        assert points[2].lat == pytest.approx((pickup.lat + destination.lat) / 2)
        assert points[2].lng == pytest.approx((pickup.lng + destination.lng) / 2)

    def test_noise_keeps_endpoints_exact(self, pickup, destination, rng):
        points = interpolate_points(pickup, destination, 20, rng, lateral_noise_degrees=0.001)

        assert points[0] == pickup
        assert points[-1] == destination

    def test_noise_is_bounded_by_half_amplitude(self, pickup, destination, rng):
        noisy = interpolate_points(pickup, destination, 20, rng, lateral_noise_degrees=0.001)
        straight = interpolate_points(pickup, destination, 20)

        for i, (n, s) in enumerate(zip(noisy, straight, strict=True)):
            envelope = math.sin(i / 20 * math.pi) * 0.001 / 2
            assert abs(n.lat - s.lat) <= envelope + 1e-12
            assert abs(n.lng - s.lng) <= envelope + 1e-12

    def test_same_seed_same_route(self, pickup, destination):
        a = interpolate_points(pickup, destination, 20, random.Random(7), 0.001)
        b = interpolate_points(pickup, destination, 20, random.Random(7), 0.001)

        assert a == b

    def test_rejects_zero_segments(self, pickup, destination):
        with pytest.raises(ValueError):
            interpolate_points(pickup, destination, 0)


@pytest.mark.unit
class TestOffsetPoint:
    def test_offset_within_bounds(self, pickup, rng):
        for _ in range(200):
            p = offset_point(pickup, 0.0075, rng)
            assert abs(p.lat - pickup.lat) <= 0.0075
            assert abs(p.lng - pickup.lng) <= 0.0075

    def test_offset_is_nearby(self, pickup, rng):
        p = offset_point(pickup, 0.0075, rng)
        # Diagonal of a 0.015 degree box is well under 1.2km
        assert haversine_distance_m(pickup.lat, pickup.lng, p.lat, p.lng) < 1_200

    def test_clamped_near_poles(self):
        assert clamped(90.5, 181.0) == Coordinate(90.0, 180.0)
        assert clamped(-95.0, -200.0) == Coordinate(-90.0, -180.0)
