"""Polyline construction between two coordinates."""

import math
import random

from ridematch.geo.coordinate import Coordinate


def segment_count(distance_km: float, min_segments: int = 15, segments_per_km: float = 10.0) -> int:
    """Number of route segments for a leg, scaled with its length."""
    return max(min_segments, math.floor(distance_km * segments_per_km))


def interpolate_points(
    start: Coordinate,
    end: Coordinate,
    segments: int,
    rng: random.Random | None = None,
    lateral_noise_degrees: float = 0.0,
) -> list[Coordinate]:
    """Return ``segments + 1`` points from start to end inclusive.

    With a generator and a non-zero noise amplitude each interior point is
    pushed sideways by ``sin(f * pi) * noise * (u - 0.5)`` so the path bows
    instead of running straight. The endpoints are always exact.
    """
    if segments < 1:
        raise ValueError("segments must be >= 1")

    points = [start]
    for i in range(1, segments):
        fraction = i / segments
        lat = start.lat + (end.lat - start.lat) * fraction
        lng = start.lng + (end.lng - start.lng) * fraction
        if rng is not None and lateral_noise_degrees:
            envelope = math.sin(fraction * math.pi) * lateral_noise_degrees
            lat += envelope * (rng.random() - 0.5)
            lng += envelope * (rng.random() - 0.5)
        points.append(clamped(lat, lng))
    points.append(end)
    return points


def offset_point(
    origin: Coordinate, max_offset_degrees: float, rng: random.Random
) -> Coordinate:
    """Uniformly perturb a point by up to ``max_offset_degrees`` on each axis."""
    lat = origin.lat + (rng.random() - 0.5) * 2 * max_offset_degrees
    lng = origin.lng + (rng.random() - 0.5) * 2 * max_offset_degrees
    return clamped(lat, lng)


def clamped(lat: float, lng: float) -> Coordinate:
    return Coordinate(min(90.0, max(-90.0, lat)), min(180.0, max(-180.0, lng)))
