"""FastAPI dependency injection providers."""

from typing import Annotated

from fastapi import Depends, Request

from ridematch.matching.ride_matcher import RideMatcher
from ridematch.pricing.fare import FareEstimator
from ridematch.settings import Settings
from ridematch.tracking.registry import TrackerRegistry


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_fare_estimator(request: Request) -> FareEstimator:
    """Retrieve FareEstimator from app state."""
    return request.app.state.fare_estimator


def get_ride_matcher(request: Request) -> RideMatcher:
    """Retrieve RideMatcher from app state."""
    return request.app.state.ride_matcher


def get_tracker_registry(request: Request) -> TrackerRegistry:
    """Retrieve TrackerRegistry from app state."""
    return request.app.state.tracker_registry


SettingsDep = Annotated[Settings, Depends(get_app_settings)]
FareEstimatorDep = Annotated[FareEstimator, Depends(get_fare_estimator)]
RideMatcherDep = Annotated[RideMatcher, Depends(get_ride_matcher)]
TrackerRegistryDep = Annotated[TrackerRegistry, Depends(get_tracker_registry)]
