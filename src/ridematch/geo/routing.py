"""Road distance providers used by fare estimation."""

from typing import Protocol

from pydantic import BaseModel, Field

from ridematch.geo.coordinate import Coordinate
from ridematch.geo.distance import haversine_distance_m
from ridematch.geo.polyline import interpolate_points


class RouteEstimate(BaseModel):
    distance_km: float = Field(ge=0, allow_inf_nan=False)
    duration_minutes: int | None = Field(default=None, ge=0)
    points: list[tuple[float, float]] = Field(default_factory=list)


class RouteProvider(Protocol):
    def route(self, origin: Coordinate, destination: Coordinate) -> RouteEstimate: ...


class StraightLineRouter:
    """Approximates road distance as the great-circle distance times a road factor.

    No duration is reported; callers derive one from an average speed.
    """

    def __init__(self, road_factor: float = 1.3, segments: int = 16):
        self.road_factor = road_factor
        self.segments = segments

    def route(self, origin: Coordinate, destination: Coordinate) -> RouteEstimate:
        straight_m = haversine_distance_m(origin.lat, origin.lng, destination.lat, destination.lng)
        points = interpolate_points(origin, destination, self.segments)
        return RouteEstimate(
            distance_km=straight_m / 1000.0 * self.road_factor,
            points=[p.as_tuple() for p in points],
        )
