"""Unit tests for request and response schemas."""

import pytest
from pydantic import ValidationError

from schemas.checkin import CheckinRequest, CheckinResponse
from schemas.friends import FriendRequestCreate
from schemas.profile import PrivacyUpdate


class TestCheckinRequest:
    """Test CheckinRequest validation."""

    def test_minimal_request(self):
        request = CheckinRequest(latitude=52.5, longitude=13.4)
        assert request.message is None
        assert request.image_url is None

    def test_image_url_alias(self):
        request = CheckinRequest.model_validate(
            {"latitude": 52.5, "longitude": 13.4, "imageUrl": "https://img.example.com/a.jpg"}
        )
        assert request.image_url == "https://img.example.com/a.jpg"

    def test_non_http_image_url_fails(self):
        with pytest.raises(ValidationError) as exc_info:
            CheckinRequest(latitude=52.5, longitude=13.4, image_url="file:///etc/passwd")
        assert "http(s)" in str(exc_info.value)

    def test_message_too_long_fails(self):
        with pytest.raises(ValidationError):
            CheckinRequest(latitude=52.5, longitude=13.4, message="x" * 1001)


class TestCheckinResponse:
    """Test CheckinResponse serialization."""

    def test_camel_case_keys(self):
        response = CheckinResponse(accepted=True, points=3, points_awarded=1, streak_days=2, level_title="Newcomer")
        data = response.model_dump(by_alias=True, exclude_none=True)
        assert data == {
            "accepted": True,
            "points": 3,
            "pointsAwarded": 1,
            "streakDays": 2,
            "levelTitle": "Newcomer",
        }

    def test_rejected_shape(self):
        data = CheckinResponse(accepted=False, reason="OUT_OF_RANGE").model_dump(by_alias=True, exclude_none=True)
        assert data == {"accepted": False, "reason": "OUT_OF_RANGE"}


class TestFriendRequestCreate:
    """Test FriendRequestCreate aliases."""

    @pytest.mark.parametrize("key", ["target_id", "friendId", "friend_id"])
    def test_accepted_keys(self, key):
        assert FriendRequestCreate.model_validate({key: 7}).target_id == 7

    def test_missing_target_fails(self):
        with pytest.raises(ValidationError):
            FriendRequestCreate.model_validate({})


class TestPrivacyUpdate:
    """Test PrivacyUpdate validation."""

    def test_single_flag(self):
        update = PrivacyUpdate(profile_public=False)
        assert update.profile_public is False
        assert update.feed_public is None

    def test_empty_update_fails(self):
        with pytest.raises(ValidationError) as exc_info:
            PrivacyUpdate()
        assert "At least one privacy flag" in str(exc_info.value)
