import logging
import math
import time
from typing import Any

import httpx
import polyline

from ridematch.core.exceptions import NoRouteFound, RoutingServiceError, RoutingTimeout
from ridematch.geo.coordinate import Coordinate
from ridematch.geo.routing import RouteEstimate

logger = logging.getLogger(__name__)


def decode_polyline(encoded: str, precision: int = 5) -> list[tuple[float, float]]:
    """Decode polyline string to list of (lat, lon) tuples."""
    coords = polyline.decode(encoded, precision)
    return [(lat, lon) for lat, lon in coords]


class OSRMRouter:
    """Route provider backed by an OSRM ``/route/v1/driving`` endpoint."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 5.0,
        client: httpx.Client | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = client

    def route(self, origin: Coordinate, destination: Coordinate) -> RouteEstimate:
        url = (
            f"{self.base_url}/route/v1/driving/"
            f"{origin.lng},{origin.lat};{destination.lng},{destination.lat}"
        )
        params = {"overview": "full", "geometries": "polyline"}

        start_time = time.perf_counter()
        try:
            if self._client is not None:
                response = self._client.get(url, params=params, timeout=self.timeout)
            else:
                with httpx.Client(timeout=self.timeout) as client:
                    response = client.get(url, params=params)
        except httpx.TimeoutException as e:
            raise RoutingTimeout(f"Request timed out after {self.timeout}s") from e
        except httpx.HTTPError as e:
            raise RoutingServiceError(f"Network error: {e}") from e

        if response.status_code >= 500:
            raise RoutingServiceError(
                f"OSRM server error: {response.status_code}",
                details={"status_code": response.status_code},
            )

        try:
            data = response.json()
        except ValueError as e:
            raise RoutingServiceError("OSRM returned a non-JSON body") from e

        if not isinstance(data, dict):
            raise RoutingServiceError(
                "OSRM returned an unexpected body",
                details={"type": type(data).__name__},
            )

        code = data.get("code")
        if code == "NoRoute":
            raise NoRouteFound("No route found between coordinates")
        routes = data.get("routes")
        if code != "Ok" or not isinstance(routes, list) or not routes:
            raise RoutingServiceError(
                f"Unexpected OSRM response code: {code}",
                details={"code": code},
            )

        estimate = self._parse_route(routes[0])
        latency_ms = (time.perf_counter() - start_time) * 1000
        logger.debug(f"OSRM route resolved in {latency_ms:.1f}ms")
        return estimate

    @staticmethod
    def _parse_route(route: Any) -> RouteEstimate:
        try:
            distance_m = float(route["distance"])
            duration_s = float(route["duration"])
            return RouteEstimate(
                distance_km=distance_m / 1000.0,
                duration_minutes=math.ceil(duration_s / 60.0),
                points=decode_polyline(route["geometry"]),
            )
        except (KeyError, IndexError, TypeError, ValueError, OverflowError) as e:
            raise RoutingServiceError(f"Malformed OSRM route: {e!r}") from e
