"""Tests for location and check-in router endpoints."""

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from models.checkins import CheckinRecord
from models.location import Location
from models.user import User
from tests.conftest import create_jwt_token
from tests.fixtures.test_data import BRANDENBURG_GATE, point_north_of


def checkin_url(location: Location) -> str:
    return f"/api/locations/{location.id}/checkin"


class TestCheckinEndpoint:
    """Test POST /api/locations/{id}/checkin."""

    def test_accepted_checkin(self, client: TestClient, auth_headers: dict, landmark: Location):
        """Accepted check-ins return camelCase progression fields."""
        lat, lng = point_north_of(landmark.latitude, landmark.longitude, 50)

        response = client.post(
            checkin_url(landmark),
            json={"latitude": lat, "longitude": lng, "message": "Made it"},
            headers=auth_headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["accepted"] is True
        assert data["points"] == 1
        assert data["pointsAwarded"] == 1
        assert data["streakDays"] == 1
        assert data["newAchievements"] == ["FIRST_CHECKIN"]
        assert data["level"] == 1
        assert data["levelTitle"] == "Newcomer"
        assert len(data["missions"]) == 3
        assert {"id", "progress", "target", "completed"} <= set(data["missions"][0])
        assert "reason" not in data

    def test_out_of_range_returns_400(
        self, client: TestClient, db_session: Session, test_user: User, auth_headers: dict, landmark: Location
    ):
        """Positions outside the geofence are rejected without side effects."""
        lat, lng = point_north_of(landmark.latitude, landmark.longitude, 500)

        response = client.post(checkin_url(landmark), json={"latitude": lat, "longitude": lng}, headers=auth_headers)

        assert response.status_code == 400
        data = response.json()
        assert data["accepted"] is False
        assert data["reason"] == "OUT_OF_RANGE"
        assert data["distanceM"] > 400
        assert "points" not in data
        assert db_session.query(CheckinRecord).count() == 0

    def test_invalid_coordinates_rejected(
        self, client: TestClient, auth_headers: dict, landmark: Location
    ):
        response = client.post(
            checkin_url(landmark), json={"latitude": 120.0, "longitude": 13.4}, headers=auth_headers
        )

        assert response.status_code == 400
        assert response.json()["reason"] == "INVALID_COORDINATES"

    def test_missing_coordinates_returns_422(self, client: TestClient, auth_headers: dict, landmark: Location):
        response = client.post(checkin_url(landmark), json={"latitude": 52.5}, headers=auth_headers)

        assert response.status_code == 422

    def test_non_http_image_url_returns_422(self, client: TestClient, auth_headers: dict, landmark: Location):
        response = client.post(
            checkin_url(landmark),
            json={"latitude": landmark.latitude, "longitude": landmark.longitude, "imageUrl": "ftp://x/y.png"},
            headers=auth_headers,
        )

        assert response.status_code == 422

    def test_unknown_location_returns_404(self, client: TestClient, auth_headers: dict):
        response = client.post(
            "/api/locations/9999/checkin",
            json={"latitude": BRANDENBURG_GATE["latitude"], "longitude": BRANDENBURG_GATE["longitude"]},
            headers=auth_headers,
        )

        assert response.status_code == 404
        assert response.json()["detail"]["error"] == "LOCATION_NOT_FOUND"

    def test_returns_401_unauthenticated(self, client: TestClient, landmark: Location):
        response = client.post(
            checkin_url(landmark), json={"latitude": landmark.latitude, "longitude": landmark.longitude}
        )

        assert response.status_code == 401

    def test_invalidated_token_returns_401(self, client: TestClient, test_user: User, landmark: Location):
        """Tokens minted before a token_version bump are refused."""
        token = create_jwt_token(test_user, token_version=test_user.token_version - 1)

        response = client.post(
            checkin_url(landmark),
            json={"latitude": landmark.latitude, "longitude": landmark.longitude},
            headers={"Authorization": f"Bearer {token}"},
        )

        assert response.status_code == 401
        assert "invalidated" in response.json()["detail"]

    def test_garbage_token_returns_401(self, client: TestClient, landmark: Location):
        response = client.post(
            checkin_url(landmark),
            json={"latitude": landmark.latitude, "longitude": landmark.longitude},
            headers={"Authorization": "Bearer not-a-jwt"},
        )

        assert response.status_code == 401


class TestLocationListing:
    """Test GET /api/locations and /api/locations/nearest."""

    def test_list_marks_visited(self, client: TestClient, auth_headers: dict, landmark: Location):
        client.post(
            checkin_url(landmark),
            json={"latitude": landmark.latitude, "longitude": landmark.longitude},
            headers=auth_headers,
        )

        response = client.get("/api/locations", headers=auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 1
        assert data["locations"][0]["visited"] is True
        assert data["locations"][0]["checkin_count"] == 1

    def test_nearest(self, client: TestClient, auth_headers: dict, landmark: Location):
        lat, lng = point_north_of(landmark.latitude, landmark.longitude, 300)

        response = client.get(
            "/api/locations/nearest",
            params={"latitude": lat, "longitude": lng, "limit": 1},
            headers=auth_headers,
        )

        assert response.status_code == 200
        locations = response.json()["locations"]
        assert [loc["id"] for loc in locations] == [landmark.id]
        assert locations[0]["distance_m"] == 300.0

    def test_nearest_invalid_position(self, client: TestClient, auth_headers: dict):
        response = client.get(
            "/api/locations/nearest", params={"latitude": 91, "longitude": 0}, headers=auth_headers
        )

        assert response.status_code == 400
        assert response.json()["detail"]["error"] == "INVALID_COORDINATES"

    def test_nearest_limit_validated(self, client: TestClient, auth_headers: dict):
        response = client.get(
            "/api/locations/nearest", params={"latitude": 0, "longitude": 0, "limit": 0}, headers=auth_headers
        )

        assert response.status_code == 422
