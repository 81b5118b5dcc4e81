"""Profile and feed projections gated by the friend relation, plus privacy settings."""

from typing import Optional

from sqlalchemy import update
from sqlalchemy.orm import Session

from config import FEED_PAGE_SIZE
from models.checkins import CheckinRecord
from models.location import Location
from models.user import User
from services.achievement_service import AchievementService
from services.checkin_service import current_counters
from services.errors import USER_NOT_FOUND, NotFoundError
from services.friend_service import (
    FriendService,
    Relation,
    can_view_checkins,
    can_view_profile,
)
from services.mission_service import MissionService
from services.progression import level_info
from services.trip_service import TripService


class ProfileService:
    """Builds profile and feed views for a viewing user."""

    def __init__(self, db: Session, viewer_id: int):
        self.db = db
        self.viewer_id = viewer_id

    def _get_user(self, user_id: int) -> User:
        user = self.db.get(User, user_id)
        if user is None:
            raise NotFoundError(USER_NOT_FOUND, "User not found")
        return user

    def _checkins(self, user_ids: list[int], limit: int, offset: int = 0) -> list[dict]:
        rows = (
            self.db.query(CheckinRecord, Location, User)
            .join(Location, Location.id == CheckinRecord.location_id)
            .join(User, User.id == CheckinRecord.user_id)
            .filter(CheckinRecord.user_id.in_(user_ids))
            .order_by(CheckinRecord.created_at.desc(), CheckinRecord.id.desc())
            .limit(limit)
            .offset(offset)
            .all()
        )
        return [
            {
                "id": checkin.id,
                "user_id": user.id,
                "username": user.username,
                "location_id": location.id,
                "location_name": location.name,
                "category": location.category,
                "message": checkin.message,
                "image_url": checkin.image_url,
                "created_at": checkin.created_at,
            }
            for checkin, location, user in rows
        ]

    def _progress(self, user: User) -> dict:
        info = level_info(user.points)
        return {
            "points": user.points,
            "level": {
                "level": info.level,
                "title": info.title,
                "points_into_level": info.points_into_level,
                "points_required_for_level": info.points_required_for_level,
                "remaining_to_next_level": info.remaining_to_next_level,
                "progress_percent": info.progress_percent,
            },
            "streak_days": user.checkin_streak_days,
            "last_checkin_at": user.last_checkin_at,
            "achievements": AchievementService(self.db, user.id).list_with_status(only_unlocked=True),
        }

    def get_own_profile(self) -> dict:
        """Everything the viewer sees about themself."""
        user = self._get_user(self.viewer_id)
        profile = {
            "user": user,
            **self._progress(user),
            "missions": MissionService(self.db, user.id).list_progress(current_counters(user)),
        }
        return profile

    def get_user_profile(self, subject_id: int, checkin_limit: int = 20) -> dict:
        """Another user's profile as the viewer is allowed to see it."""
        subject = self._get_user(subject_id)
        relation = FriendService(self.db, self.viewer_id).relation_to(subject_id)

        can_see_profile = can_view_profile(self.viewer_id, subject, relation.relation)
        can_see_feed = can_view_checkins(self.viewer_id, subject, relation.relation)

        return {
            "user": subject,
            "relation": relation.relation.value,
            "request_id": relation.request_id,
            "is_self": relation.relation == Relation.SELF,
            "is_friend": relation.relation == Relation.FRIENDS,
            "can_see_profile": can_see_profile,
            "can_see_feed": can_see_feed,
            "progress": self._progress(subject) if can_see_profile else None,
            "checkins": self._checkins([subject.id], checkin_limit) if can_see_feed else [],
            "trips": TripService(self.db, self.viewer_id).list_visible_trips(subject.id) if can_see_profile else [],
        }

    def get_feed(self, limit: Optional[int] = None, offset: int = 0) -> list[dict]:
        """Viewer's own check-ins plus those of friends who share their feed."""
        friend_ids = FriendService(self.db, self.viewer_id).friend_ids()
        visible = [self.viewer_id]
        if friend_ids:
            sharing = (
                self.db.query(User.id)
                .filter(User.id.in_(friend_ids), User.feed_public.is_(True))
                .all()
            )
            visible.extend(row.id for row in sharing)
        return self._checkins(visible, limit or FEED_PAGE_SIZE, offset)

    def update_privacy(self, profile_public: Optional[bool] = None, feed_public: Optional[bool] = None) -> User:
        user = self._get_user(self.viewer_id)
        values = {}
        if profile_public is not None:
            values["profile_public"] = profile_public
        if feed_public is not None:
            values["feed_public"] = feed_public

        if values:
            # Flags are not counters; written without the counters_version check.
            self.db.execute(
                update(User)
                .where(User.id == user.id)
                .values(**values)
                .execution_options(synchronize_session=False)
            )
        self.db.commit()
        self.db.refresh(user)
        return user
