"""Check-in orchestration: the single write path for user progression.

A check-in runs:
1. location lookup and active check
2. geofence validation (no state change on rejection)
3. record creation, or a zero-point revisit if the location was seen before
4. point, streak, achievement and mission updates

Steps 3-4 commit as one transaction. The user row carries a version counter;
if a concurrent check-in for the same user commits first, the transaction is
rolled back and replayed against fresh counters.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from config import COUNTER_UPDATE_MAX_RETRIES
from models.checkins import CheckinRecord
from models.location import Location
from models.user import User
from services.achievement_service import AchievementService, Counters
from services.errors import (
    LOCATION_INACTIVE,
    LOCATION_NOT_FOUND,
    USER_NOT_FOUND,
    CheckinRejected,
    ConcurrencyError,
    NotFoundError,
)
from services.geo import validate_position
from services.mission_service import MissionService, MissionState
from services.progression import LevelInfo, level_info
from services.streaks import advance_streak


logger = logging.getLogger(__name__)


@dataclass
class CheckinResult:
    accepted: bool
    reason: Optional[str] = None
    points: Optional[int] = None
    points_awarded: int = 0
    streak_days: Optional[int] = None
    new_achievements: list[str] = field(default_factory=list)
    missions: list[MissionState] = field(default_factory=list)
    level: Optional[LevelInfo] = None
    checkin_id: Optional[int] = None
    first_visit: bool = False
    distance_m: Optional[float] = None

    @classmethod
    def rejected(cls, reason: str, distance_m: Optional[float] = None) -> "CheckinResult":
        return cls(accepted=False, reason=reason, distance_m=distance_m)


class CheckinService:
    """Records check-ins and advances one user's progression."""

    def __init__(self, db: Session, user_id: int, max_retries: int = COUNTER_UPDATE_MAX_RETRIES):
        self.db = db
        self.user_id = user_id
        self.max_retries = max_retries

    def checkin(
        self,
        location_id: int,
        latitude: float,
        longitude: float,
        now: Optional[datetime] = None,
        message: Optional[str] = None,
        image_url: Optional[str] = None,
    ) -> CheckinResult:
        """Validate and apply a check-in.

        Returns a rejected result for geofence/validation failures.
        Raises NotFoundError for unknown locations and ConcurrencyError when
        counter updates keep conflicting.
        """
        if now is None:
            now = datetime.now(timezone.utc)

        location = self.db.get(Location, location_id)
        if location is None:
            raise NotFoundError(LOCATION_NOT_FOUND, "Location not found")
        if not location.is_active:
            return CheckinResult.rejected(LOCATION_INACTIVE)

        geo = validate_position(latitude, longitude, location)
        if not geo.admitted:
            logger.info(
                "Check-in rejected for user %s at location %s: %s (distance=%s)",
                self.user_id, location_id, geo.reason, geo.distance_m,
            )
            return CheckinResult.rejected(geo.reason, geo.distance_m)

        for attempt in range(1, self.max_retries + 1):
            try:
                result = self._apply_checkin(location, now, message, image_url)
                self.db.commit()
            except CheckinRejected as e:
                self.db.rollback()
                logger.info("Check-in rejected for user %s: %s", self.user_id, e.reason)
                return CheckinResult.rejected(e.reason)
            except (StaleDataError, IntegrityError) as e:
                # Another request for this user committed first; replay on fresh state.
                self.db.rollback()
                logger.warning(
                    "Concurrent check-in for user %s (attempt %s/%s): %s",
                    self.user_id, attempt, self.max_retries, type(e).__name__,
                )
                continue
            except Exception:
                self.db.rollback()
                raise

            result.distance_m = geo.distance_m
            logger.info(
                "Check-in accepted: user=%s location=%s points=%s (+%s) streak=%s unlocked=%s",
                self.user_id, location_id, result.points, result.points_awarded,
                result.streak_days, result.new_achievements,
            )
            return result

        raise ConcurrencyError(context={"user_id": self.user_id, "location_id": location_id})

    def _apply_checkin(
        self,
        location: Location,
        now: datetime,
        message: Optional[str],
        image_url: Optional[str],
    ) -> CheckinResult:
        """Read counters, compute, and stage writes. Caller commits or rolls back."""
        user = (
            self.db.query(User)
            .filter(User.id == self.user_id)
            .populate_existing()
            .with_for_update()
            .first()
        )
        if user is None:
            raise NotFoundError(USER_NOT_FOUND, "User not found")

        # Raises before anything is staged when ``now`` predates the last check-in.
        new_streak = advance_streak(user.last_checkin_at, now, user.checkin_streak_days)

        record = (
            self.db.query(CheckinRecord)
            .filter(CheckinRecord.user_id == self.user_id, CheckinRecord.location_id == location.id)
            .first()
        )
        first_visit = record is None
        if first_visit:
            record = CheckinRecord(
                user_id=self.user_id,
                location_id=location.id,
                message=(message or "").strip() or None,
                image_url=(image_url or "").strip() or None,
                created_at=now,
            )
            self.db.add(record)
            user.points += 1

        user.checkin_streak_days = new_streak
        user.last_checkin_at = now
        self.db.flush()

        counters = Counters(total_checkins=user.points, streak_days=new_streak)
        new_achievements = AchievementService(self.db, self.user_id).evaluate_and_unlock(counters, now)
        missions = MissionService(self.db, self.user_id).advance_all(counters, now)

        return CheckinResult(
            accepted=True,
            points=user.points,
            points_awarded=1 if first_visit else 0,
            streak_days=new_streak,
            new_achievements=new_achievements,
            missions=missions,
            level=level_info(user.points),
            checkin_id=record.id,
            first_visit=first_visit,
        )


def current_counters(user: User) -> Counters:
    """Counters as currently persisted on the user row."""
    return Counters(total_checkins=user.points, streak_days=user.checkin_streak_days)

