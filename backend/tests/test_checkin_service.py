"""Integration tests for the check-in orchestration."""

from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest
from sqlalchemy import text
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from models.achievements import UserAchievement
from models.checkins import CheckinRecord
from models.location import Location
from models.missions import UserMission
from models.user import User
from services.checkin_service import CheckinService
from services.errors import (
    INVALID_COORDINATES,
    INVALID_TIMESTAMP,
    LOCATION_INACTIVE,
    LOCATION_NOT_FOUND,
    OUT_OF_RANGE,
    ConcurrencyError,
    NotFoundError,
)
from services.location_service import register_location
from services.streaks import advance_streak
from tests.fixtures.test_data import BRANDENBURG_GATE, point_north_of

DAY_1 = datetime(2026, 3, 1, 10, 0, tzinfo=timezone.utc)


def make_locations(db: Session, count: int) -> list[Location]:
    """Locations spaced ~680 m apart along a line east of the gate."""
    return [
        register_location(
            db,
            name=f"Spot {i}",
            latitude=BRANDENBURG_GATE["latitude"],
            longitude=BRANDENBURG_GATE["longitude"] + 0.01 * (i + 1),
            radius_m=100,
        )
        for i in range(count)
    ]


def check_in_at(db: Session, user: User, location: Location, now: datetime, **kwargs):
    return CheckinService(db, user.id).checkin(
        location.id, location.latitude, location.longitude, now=now, **kwargs
    )


def assert_untouched(db: Session, user: User):
    db.refresh(user)
    assert user.points == 0
    assert user.checkin_streak_days == 0
    assert user.last_checkin_at is None
    assert db.query(CheckinRecord).filter_by(user_id=user.id).count() == 0
    assert db.query(UserAchievement).filter_by(user_id=user.id).count() == 0
    assert db.query(UserMission).filter_by(user_id=user.id).count() == 0


@pytest.mark.integration
class TestFirstCheckin:
    """Test the first accepted check-in for a new user."""

    def test_fifty_meters_inside_hundred_meter_fence(
        self, db_session: Session, test_user: User, landmark: Location
    ):
        lat, lng = point_north_of(landmark.latitude, landmark.longitude, 50)

        result = CheckinService(db_session, test_user.id).checkin(landmark.id, lat, lng, now=DAY_1)

        assert result.accepted is True
        assert result.points == 1
        assert result.points_awarded == 1
        assert result.streak_days == 1
        assert result.new_achievements == ["FIRST_CHECKIN"]
        assert result.first_visit is True
        assert result.level.level == 1
        assert result.distance_m == pytest.approx(50, abs=0.01)

        db_session.refresh(test_user)
        assert test_user.points == 1
        assert test_user.checkin_streak_days == 1
        assert db_session.query(CheckinRecord).filter_by(user_id=test_user.id).count() == 1

    def test_missions_advanced(self, db_session: Session, test_user: User, landmark: Location):
        result = check_in_at(db_session, test_user, landmark, DAY_1)

        assert len(result.missions) == 3
        assert all(m.progress == 1 for m in result.missions)
        assert not any(m.is_completed for m in result.missions)

    def test_note_and_image_stored(self, db_session: Session, test_user: User, landmark: Location):
        check_in_at(
            db_session, test_user, landmark, DAY_1,
            message="  Great view  ", image_url="https://img.example.com/a.jpg",
        )

        record = db_session.query(CheckinRecord).filter_by(user_id=test_user.id).one()
        assert record.message == "Great view"
        assert record.image_url == "https://img.example.com/a.jpg"

    def test_blank_note_stored_as_null(self, db_session: Session, test_user: User, landmark: Location):
        check_in_at(db_session, test_user, landmark, DAY_1, message="   ")

        record = db_session.query(CheckinRecord).filter_by(user_id=test_user.id).one()
        assert record.message is None


@pytest.mark.integration
class TestRejectedCheckin:
    """Rejected check-ins must leave every counter untouched."""

    def test_out_of_range(self, db_session: Session, test_user: User, landmark: Location):
        lat, lng = point_north_of(landmark.latitude, landmark.longitude, 150)

        result = CheckinService(db_session, test_user.id).checkin(landmark.id, lat, lng, now=DAY_1)

        assert result.accepted is False
        assert result.reason == OUT_OF_RANGE
        assert result.distance_m == pytest.approx(150, abs=0.01)
        assert_untouched(db_session, test_user)

    def test_invalid_coordinates(self, db_session: Session, test_user: User, landmark: Location):
        result = CheckinService(db_session, test_user.id).checkin(landmark.id, float("nan"), 13.4, now=DAY_1)

        assert result.accepted is False
        assert result.reason == INVALID_COORDINATES
        assert_untouched(db_session, test_user)

    def test_inactive_location(self, db_session: Session, test_user: User):
        closed = register_location(
            db_session, name="Closed", latitude=BRANDENBURG_GATE["latitude"],
            longitude=BRANDENBURG_GATE["longitude"], is_active=False,
        )

        result = check_in_at(db_session, test_user, closed, DAY_1)

        assert result.accepted is False
        assert result.reason == LOCATION_INACTIVE
        assert_untouched(db_session, test_user)

    def test_unknown_location(self, db_session: Session, test_user: User):
        with pytest.raises(NotFoundError) as exc_info:
            CheckinService(db_session, test_user.id).checkin(9999, 52.5, 13.4, now=DAY_1)
        assert exc_info.value.reason == LOCATION_NOT_FOUND
        assert_untouched(db_session, test_user)

    def test_time_earlier_than_last_checkin(self, db_session: Session, test_user: User):
        first, second = make_locations(db_session, 2)
        check_in_at(db_session, test_user, first, DAY_1 + timedelta(days=1))

        result = check_in_at(db_session, test_user, second, DAY_1)

        assert result.accepted is False
        assert result.reason == INVALID_TIMESTAMP
        db_session.refresh(test_user)
        assert test_user.points == 1
        assert db_session.query(CheckinRecord).filter_by(user_id=test_user.id).count() == 1


@pytest.mark.integration
class TestRepeatCheckins:
    """Test revisits, streaks and accumulated unlocks."""

    def test_revisit_awards_no_points_but_extends_streak(
        self, db_session: Session, test_user: User, landmark: Location
    ):
        check_in_at(db_session, test_user, landmark, DAY_1)

        result = check_in_at(db_session, test_user, landmark, DAY_1 + timedelta(days=1))

        assert result.accepted is True
        assert result.points == 1
        assert result.points_awarded == 0
        assert result.first_visit is False
        assert result.streak_days == 2
        assert result.new_achievements == []
        assert db_session.query(CheckinRecord).filter_by(user_id=test_user.id).count() == 1

    def test_revisit_keeps_original_note(self, db_session: Session, test_user: User, landmark: Location):
        check_in_at(db_session, test_user, landmark, DAY_1, message="first")
        check_in_at(db_session, test_user, landmark, DAY_1 + timedelta(hours=1), message="second")

        record = db_session.query(CheckinRecord).filter_by(user_id=test_user.id).one()
        assert record.message == "first"

    def test_same_day_checkins_count_once_for_streak(self, db_session: Session, test_user: User):
        for i, location in enumerate(make_locations(db_session, 3)):
            result = check_in_at(db_session, test_user, location, DAY_1 + timedelta(hours=i))

        assert result.points == 3
        assert result.streak_days == 1

    def test_gap_resets_streak(self, db_session: Session, test_user: User, landmark: Location):
        check_in_at(db_session, test_user, landmark, DAY_1)
        check_in_at(db_session, test_user, landmark, DAY_1 + timedelta(days=1))

        result = check_in_at(db_session, test_user, landmark, DAY_1 + timedelta(days=4))
        assert result.streak_days == 1

    def test_three_day_streak_unlocks(self, db_session: Session, test_user: User, landmark: Location):
        results = [check_in_at(db_session, test_user, landmark, DAY_1 + timedelta(days=d)) for d in range(3)]

        assert results[-1].streak_days == 3
        assert results[-1].new_achievements == ["STREAK_3"]

    def test_five_locations_unlock_explorer(self, db_session: Session, test_user: User):
        unlocked = []
        for i, location in enumerate(make_locations(db_session, 5)):
            unlocked.extend(check_in_at(db_session, test_user, location, DAY_1 + timedelta(minutes=i)).new_achievements)

        assert unlocked == ["FIRST_CHECKIN", "CHECKINS_5"]

    def test_mission_completes_once(self, db_session: Session, test_user: User):
        locations = make_locations(db_session, 4)
        results = [
            check_in_at(db_session, test_user, location, DAY_1 + timedelta(minutes=i))
            for i, location in enumerate(locations)
        ]

        third = {m.target: m for m in results[2].missions}[3]
        fourth = {m.target: m for m in results[3].missions}[3]
        assert third.is_completed is True
        assert third.completed_at is not None
        assert fourth.progress == 3
        assert fourth.is_completed is True
        assert fourth.completed_at.replace(tzinfo=None) == third.completed_at.replace(tzinfo=None)

    def test_points_match_distinct_locations(self, db_session: Session, test_user: User):
        locations = make_locations(db_session, 3)
        for day, location in enumerate(locations + locations):
            check_in_at(db_session, test_user, location, DAY_1 + timedelta(days=day))

        db_session.refresh(test_user)
        assert test_user.points == db_session.query(CheckinRecord).filter_by(user_id=test_user.id).count() == 3
        assert test_user.checkin_streak_days == 6


def bump_counters_version(db: Session, user_id: int):
    """Simulate another request committing to the same user row."""
    db.execute(
        text("UPDATE users SET counters_version = counters_version + 1 WHERE id = :id"),
        {"id": user_id},
    )


@pytest.mark.integration
class TestConcurrentCounters:
    """Test retry behavior when the user row changes underneath a check-in."""

    def test_retries_after_stale_user_row(self, db_session: Session, test_user: User, landmark: Location):
        calls = []

        def racing_streak(*args):
            calls.append(args)
            if len(calls) == 1:
                bump_counters_version(db_session, test_user.id)
            return advance_streak(*args)

        with patch("services.checkin_service.advance_streak", side_effect=racing_streak):
            result = check_in_at(db_session, test_user, landmark, DAY_1)

        assert len(calls) == 2
        assert result.accepted is True
        assert result.points == 1
        assert result.new_achievements == ["FIRST_CHECKIN"]
        assert db_session.query(CheckinRecord).filter_by(user_id=test_user.id).count() == 1

    def test_retries_after_stale_data_error(self, db_session: Session, test_user: User, landmark: Location):
        service = CheckinService(db_session, test_user.id)
        original = service._apply_checkin
        attempts = []

        def flaky(*args, **kwargs):
            attempts.append(1)
            if len(attempts) == 1:
                raise StaleDataError("users row changed")
            return original(*args, **kwargs)

        with patch.object(service, "_apply_checkin", side_effect=flaky):
            result = service.checkin(landmark.id, landmark.latitude, landmark.longitude, now=DAY_1)

        assert len(attempts) == 2
        assert result.accepted is True
        assert result.points == 1

    def test_exhausted_retries_raise_without_mutation(
        self, db_session: Session, test_user: User, landmark: Location
    ):
        def always_racing(*args):
            bump_counters_version(db_session, test_user.id)
            return advance_streak(*args)

        service = CheckinService(db_session, test_user.id, max_retries=3)
        with patch("services.checkin_service.advance_streak", side_effect=always_racing) as mock_streak:
            with pytest.raises(ConcurrencyError):
                service.checkin(landmark.id, landmark.latitude, landmark.longitude, now=DAY_1)

        assert mock_streak.call_count == 3
        assert_untouched(db_session, test_user)
