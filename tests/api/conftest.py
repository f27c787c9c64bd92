import random

import pytest
from fastapi.testclient import TestClient

from ridematch.api.app import create_app
from ridematch.settings import APISettings, Settings, TrackingSettings
from ridematch.tracking import DriverTracker, TrackerRegistry


@pytest.fixture
def settings() -> Settings:
    return Settings(api=APISettings(key="test-api-key"))


@pytest.fixture
def tracker_registry() -> TrackerRegistry:
    # Long tick interval keeps polled snapshots stable during a test
    tracking = TrackingSettings(tick_interval_seconds=30)
    return TrackerRegistry(
        lambda ride_id: DriverTracker(settings=tracking, rng=random.Random(1), ride_id=ride_id)
    )


@pytest.fixture
def test_client(settings, tracker_registry):
    app = create_app(settings=settings, tracker_registry=tracker_registry)
    with TestClient(app) as client:
        yield client


@pytest.fixture
def auth_headers() -> dict[str, str]:
    return {"X-API-Key": "test-api-key"}


@pytest.fixture
def kigali_trip() -> dict:
    return {
        "pickup": {"lat": -1.9441, "lng": 30.0619},
        "destination": {"lat": -1.9500, "lng": 30.0700},
    }


@pytest.fixture
def driver_payload() -> list[dict]:
    return [
        {"id": "driver_far", "lat": -1.9700, "lng": 30.1000},
        {"id": "driver_near", "lat": -1.9445, "lng": 30.0625, "metadata": {"plate": "RAB 002B"}},
        {"id": "driver_offline", "lat": -1.9441, "lng": 30.0619, "active": False},
    ]
