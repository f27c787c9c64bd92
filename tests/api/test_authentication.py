from fastapi.testclient import TestClient

from ridematch.api.app import create_app
from ridematch.settings import Settings


def test_health_needs_no_key(test_client):
    response = test_client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_missing_api_key_rejected(test_client, kigali_trip):
    response = test_client.post("/fares/estimate", json=kigali_trip)

    assert response.status_code == 422


def test_wrong_api_key_rejected(test_client, kigali_trip):
    response = test_client.post(
        "/fares/estimate", json=kigali_trip, headers={"X-API-Key": "wrong"}
    )

    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid API key"


def test_valid_api_key_accepted(test_client, kigali_trip, auth_headers):
    response = test_client.post("/fares/estimate", json=kigali_trip, headers=auth_headers)

    assert response.status_code == 200


def test_unconfigured_api_key_is_server_error(kigali_trip):
    with TestClient(create_app(settings=Settings())) as client:
        response = client.post(
            "/fares/estimate", json=kigali_trip, headers={"X-API-Key": "anything"}
        )

    assert response.status_code == 500


def test_tracking_routes_require_key(test_client):
    assert test_client.get("/rides/ride_1/tracking").status_code == 422
    assert (
        test_client.get("/rides/ride_1/tracking", headers={"X-API-Key": "nope"}).status_code
        == 401
    )


def test_rejection_is_logged_without_key(test_client, kigali_trip, caplog):
    with caplog.at_level("WARNING", logger="ridematch.api.auth"):
        test_client.post(
            "/fares/estimate", json=kigali_trip, headers={"X-API-Key": "leaked-guess"}
        )

    assert "invalid API key" in caplog.text
    assert "/fares/estimate" in caplog.text
    assert "leaked-guess" not in caplog.text
