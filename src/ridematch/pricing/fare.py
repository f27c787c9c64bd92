"""Fare estimation from pickup and destination coordinates."""

import logging
import math
from typing import Self

from pydantic import BaseModel, Field, model_validator

from ridematch.core.exceptions import (
    ConfigurationError,
    InvalidCoordinate,
    NoRouteFound,
    RoutingUnavailable,
)
from ridematch.geo.coordinate import Coordinate
from ridematch.geo.osrm_client import OSRMRouter
from ridematch.geo.routing import RouteEstimate, RouteProvider, StraightLineRouter
from ridematch.settings import FareSettings, RoutingSettings

logger = logging.getLogger(__name__)

DEFAULT_VEHICLE_CLASS = "economy"


class VehicleClassPricing(BaseModel):
    """Per-class rates in whole currency units."""

    class_id: str
    per_km_rate: float = Field(gt=0)
    minimum_fare: int = Field(gt=0)
    per_minute_rate: float = Field(ge=0)


PRICING_TABLE: dict[str, VehicleClassPricing] = {
    class_id: VehicleClassPricing(
        class_id=class_id, per_km_rate=per_km, minimum_fare=minimum, per_minute_rate=per_minute
    )
    for class_id, per_km, minimum, per_minute in (
        ("economy", 300, 800, 30),
        ("comfort", 450, 1200, 45),
        ("bike", 150, 400, 15),
        ("xl", 600, 1800, 60),
    )
}


class FareQuote(BaseModel):
    """Fare estimate for one booking request. Never persisted by this package."""

    distance_km: float = Field(ge=0)
    duration_minutes: int = Field(ge=0)
    base_fare: int = Field(ge=0)
    discounted_fare: int | None = Field(default=None, ge=0)
    currency: str
    vehicle_class: str = DEFAULT_VEHICLE_CLASS

    @model_validator(mode="after")
    def check_discount(self) -> Self:
        if self.discounted_fare is not None and self.discounted_fare > self.base_fare:
            raise ValueError("Discounted fare cannot exceed the base fare")
        return self

    @property
    def is_degraded(self) -> bool:
        """True for the minimum-fare fallback produced when routing failed."""
        return self.distance_km == 0 and self.duration_minutes == 0


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def round_to_unit(value: float, unit: int = 100) -> int:
    """Round to the nearest multiple of ``unit``, halves going up."""
    return round_half_up(value / unit) * unit


def format_fare(amount: int | float, currency: str = "RWF") -> str:
    return f"{currency} {amount:,}"


class FareEstimator:
    """Calculates ride fares from route distance, duration and vehicle class.

    The route provider defaults to a straight-line approximation. Any
    provider failure yields a minimum-fare quote with zero distance and
    duration instead of an exception, so booking is never blocked by a
    transient routing problem.
    """

    def __init__(
        self,
        route_provider: RouteProvider | None = None,
        pricing: dict[str, VehicleClassPricing] | None = None,
        average_speed_kmh: float = 25.0,
        ride_sharing_discount: float = 0.3,
        rounding_unit: int = 100,
        currency: str = "RWF",
    ):
        self.route_provider = route_provider if route_provider is not None else StraightLineRouter()
        self.pricing = pricing if pricing is not None else PRICING_TABLE
        if DEFAULT_VEHICLE_CLASS not in self.pricing:
            raise ConfigurationError(
                f"Pricing table has no {DEFAULT_VEHICLE_CLASS!r} class to fall back on",
                details={"classes": sorted(self.pricing)},
            )
        self.average_speed_kmh = average_speed_kmh
        self.ride_sharing_discount = ride_sharing_discount
        self.rounding_unit = rounding_unit
        self.currency = currency

    @classmethod
    def from_settings(cls, fare: FareSettings, routing: RoutingSettings) -> "FareEstimator":
        route_provider: RouteProvider
        if routing.provider == "osrm":
            route_provider = OSRMRouter(routing.osrm_base_url, timeout=routing.timeout_seconds)
        else:
            route_provider = StraightLineRouter(
                road_factor=fare.road_factor, segments=routing.polyline_segments
            )
        return cls(
            route_provider=route_provider,
            average_speed_kmh=fare.average_speed_kmh,
            ride_sharing_discount=fare.ride_sharing_discount,
            rounding_unit=fare.rounding_unit,
            currency=fare.currency,
        )

    def pricing_for(self, vehicle_class: str | None) -> VehicleClassPricing:
        if vehicle_class in self.pricing:
            return self.pricing[vehicle_class]
        logger.debug(f"Unknown vehicle class {vehicle_class!r}, using {DEFAULT_VEHICLE_CLASS}")
        return self.pricing[DEFAULT_VEHICLE_CLASS]

    def estimate_route(self, pickup: Coordinate, destination: Coordinate) -> RouteEstimate:
        """Road route between two points, with a duration filled in from average speed."""
        route = self.route_provider.route(pickup, destination)
        if route.duration_minutes is None:
            route = route.model_copy(
                update={"duration_minutes": self._duration_minutes(route.distance_km)}
            )
        return route

    def estimate(
        self,
        pickup: Coordinate,
        destination: Coordinate,
        vehicle_class: str = DEFAULT_VEHICLE_CLASS,
        ride_sharing: bool = False,
    ) -> FareQuote:
        pickup = Coordinate.parse(pickup)
        destination = Coordinate.parse(destination)
        pricing = self.pricing_for(vehicle_class)

        try:
            route = self.estimate_route(pickup, destination)
        except (RoutingUnavailable, NoRouteFound) as e:
            logger.warning(f"Fare estimation degraded to minimum fare: {e}")
            return self._minimum_quote(pricing, ride_sharing)
        except InvalidCoordinate:
            raise
        except Exception:
            logger.exception("Route provider failed; fare estimation degraded to minimum fare")
            return self._minimum_quote(pricing, ride_sharing)

        distance_km = route.distance_km
        duration_minutes = route.duration_minutes or 0

        raw_fare = distance_km * pricing.per_km_rate + duration_minutes * pricing.per_minute_rate
        fare = max(pricing.minimum_fare, round_half_up(raw_fare))

        return self._quote(
            pricing,
            distance_km=round_half_up(distance_km * 10) / 10,
            duration_minutes=duration_minutes,
            fare=fare,
            ride_sharing=ride_sharing,
        )

    def _duration_minutes(self, distance_km: float) -> int:
        return math.ceil(distance_km / self.average_speed_kmh * 60)

    def _minimum_quote(self, pricing: VehicleClassPricing, ride_sharing: bool) -> FareQuote:
        return self._quote(
            pricing,
            distance_km=0.0,
            duration_minutes=0,
            fare=pricing.minimum_fare,
            ride_sharing=ride_sharing,
        )

    def _quote(
        self,
        pricing: VehicleClassPricing,
        distance_km: float,
        duration_minutes: int,
        fare: int,
        ride_sharing: bool,
    ) -> FareQuote:
        base_fare = round_to_unit(fare, self.rounding_unit)
        discounted_fare = None
        if ride_sharing:
            shared = round_half_up(base_fare * (1 - self.ride_sharing_discount))
            discounted_fare = min(base_fare, round_to_unit(shared, self.rounding_unit))

        return FareQuote(
            distance_km=distance_km,
            duration_minutes=duration_minutes,
            base_fare=base_fare,
            discounted_fare=discounted_fare,
            currency=self.currency,
            vehicle_class=pricing.class_id,
        )
