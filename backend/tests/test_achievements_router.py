"""Tests for achievements router endpoints."""

from datetime import datetime, timezone

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from models.user import User
from services.achievement_service import ACHIEVEMENT_DEFINITIONS, AchievementService, Counters


class TestGetAllAchievements:
    """Test GET /api/achievements endpoint."""

    def test_returns_all_achievements_authenticated(
        self, client: TestClient, test_user: User, valid_jwt_token: str
    ):
        """Authenticated user should get all achievements with status."""
        response = client.get(
            "/api/achievements",
            headers={"Authorization": f"Bearer {valid_jwt_token}"}
        )

        assert response.status_code == 200
        data = response.json()

        assert data["total"] == len(ACHIEVEMENT_DEFINITIONS)
        assert data["unlocked_count"] == 0
        assert [a["code"] for a in data["achievements"]] == [d.code for d in ACHIEVEMENT_DEFINITIONS]

        # All should be locked for new user
        for achievement in data["achievements"]:
            assert achievement["unlocked"] is False
            assert achievement["unlocked_at"] is None

    def test_returns_401_unauthenticated(self, client: TestClient):
        """Unauthenticated request should return 401."""
        response = client.get("/api/achievements")

        assert response.status_code == 401


class TestGetUnlockedAchievements:
    """Test GET /api/achievements/unlocked endpoint."""

    def test_returns_empty_for_new_user(self, client: TestClient, test_user: User, valid_jwt_token: str):
        """New user should have no unlocked achievements."""
        response = client.get(
            "/api/achievements/unlocked",
            headers={"Authorization": f"Bearer {valid_jwt_token}"}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["achievements"] == []
        assert data["total"] == 0

    def test_returns_unlocked_achievements(
        self, client: TestClient, db_session: Session, test_user: User, valid_jwt_token: str
    ):
        """Should return achievements that user has unlocked."""
        AchievementService(db_session, test_user.id).evaluate_and_unlock(
            Counters(total_checkins=1, streak_days=1),
            datetime(2026, 3, 1, tzinfo=timezone.utc),
        )
        db_session.commit()

        response = client.get(
            "/api/achievements/unlocked",
            headers={"Authorization": f"Bearer {valid_jwt_token}"}
        )

        assert response.status_code == 200
        data = response.json()

        assert data["total"] == 1
        assert data["achievements"][0]["code"] == "FIRST_CHECKIN"
        assert data["achievements"][0]["unlocked"] is True
        assert data["achievements"][0]["unlocked_at"] is not None

    def test_returns_401_unauthenticated(self, client: TestClient):
        """Unauthenticated request should return 401."""
        response = client.get("/api/achievements/unlocked")

        assert response.status_code == 401
