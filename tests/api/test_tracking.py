from fastapi.testclient import TestClient

from ridematch.api.app import create_app
from ridematch.settings import APISettings, Settings, TrackingSettings


def test_start_pickup_tracking(test_client, kigali_trip, auth_headers):
    response = test_client.post(
        "/rides/ride_1/tracking/pickup", json=kigali_trip, headers=auth_headers
    )

    assert response.status_code == 200
    data = response.json()
    assert data["phase"] == "to_pickup"
    assert data["is_moving"] is True
    assert data["has_arrived"] is False
    assert data["current_index"] == 0
    assert data["route_length"] >= 16
    assert data["progress_percent"] == 0.0


def test_poll_tracking(test_client, kigali_trip, auth_headers):
    test_client.post("/rides/ride_1/tracking/pickup", json=kigali_trip, headers=auth_headers)

    response = test_client.get("/rides/ride_1/tracking", headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["phase"] == "to_pickup"
    assert len(response.json()["driver_location"]) == 2


def test_destination_leg(test_client, kigali_trip, auth_headers):
    test_client.post("/rides/ride_1/tracking/pickup", json=kigali_trip, headers=auth_headers)

    response = test_client.post(
        "/rides/ride_1/tracking/destination", json={}, headers=auth_headers
    )

    data = response.json()
    assert response.status_code == 200
    assert data["phase"] == "to_destination"
    assert data["driver_location"] == [-1.9441, 30.0619]
    assert data["route_length"] == 16
    assert data["eta_minutes"] == 3


def test_pickup_without_coordinates_stays_idle(test_client, auth_headers):
    response = test_client.post("/rides/ride_2/tracking/pickup", json={}, headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["phase"] == "idle"
    assert response.json()["is_moving"] is False


def test_rides_track_independently(test_client, kigali_trip, auth_headers):
    test_client.post("/rides/ride_a/tracking/pickup", json=kigali_trip, headers=auth_headers)
    test_client.post("/rides/ride_b/tracking/pickup", json=kigali_trip, headers=auth_headers)
    test_client.post("/rides/ride_b/tracking/destination", json={}, headers=auth_headers)

    a = test_client.get("/rides/ride_a/tracking", headers=auth_headers).json()
    b = test_client.get("/rides/ride_b/tracking", headers=auth_headers).json()

    assert a["phase"] == "to_pickup"
    assert b["phase"] == "to_destination"


def test_destination_for_unknown_ride(test_client, kigali_trip, auth_headers):
    response = test_client.post(
        "/rides/ghost/tracking/destination", json=kigali_trip, headers=auth_headers
    )

    assert response.status_code == 404


def test_poll_unknown_ride(test_client, auth_headers):
    assert test_client.get("/rides/ghost/tracking", headers=auth_headers).status_code == 404


def test_reset_tracking(test_client, kigali_trip, auth_headers, tracker_registry):
    test_client.post("/rides/ride_1/tracking/pickup", json=kigali_trip, headers=auth_headers)
    tracker = tracker_registry.get("ride_1")

    response = test_client.delete("/rides/ride_1/tracking", headers=auth_headers)

    assert response.status_code == 204
    assert tracker.phase.value == "idle"
    assert tracker.timer_running is False
    assert test_client.get("/rides/ride_1/tracking", headers=auth_headers).status_code == 404
    assert test_client.delete("/rides/ride_1/tracking", headers=auth_headers).status_code == 404


def test_shutdown_clears_trackers(settings, tracker_registry, kigali_trip, auth_headers):
    app = create_app(settings=settings, tracker_registry=tracker_registry)
    with TestClient(app) as client:
        client.post("/rides/ride_1/tracking/pickup", json=kigali_trip, headers=auth_headers)
        assert tracker_registry.get("ride_1").timer_running

    assert len(tracker_registry) == 0


def test_empty_registry_is_used_as_given(settings, tracker_registry):
    assert len(tracker_registry) == 0

    app = create_app(settings=settings, tracker_registry=tracker_registry)

    assert app.state.tracker_registry is tracker_registry


def test_default_registry_uses_tracking_settings():
    settings = Settings(
        api=APISettings(key="test-api-key"),
        tracking=TrackingSettings(max_tracked_rides=3, finished_ride_ttl_seconds=5),
    )

    registry = create_app(settings=settings).state.tracker_registry

    assert registry.max_rides == 3
    assert registry.finished_ttl_seconds == 5
