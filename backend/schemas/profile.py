"""Pydantic schemas for profile, feed and privacy endpoints."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, model_validator

from schemas.achievements import AchievementSchema
from schemas.friends import RelationLiteral
from schemas.missions import MissionSchema
from schemas.trips import TripSchema


class ProfileUser(BaseModel):
    """User fields shown on profiles."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    profile_public: bool
    feed_public: bool
    created_at: datetime


class LevelSchema(BaseModel):
    level: int
    title: str
    points_into_level: int
    points_required_for_level: int
    remaining_to_next_level: int
    progress_percent: int


class ProgressSchema(BaseModel):
    """Points, level, streak and unlocked achievements."""

    points: int
    level: LevelSchema
    streak_days: int
    last_checkin_at: Optional[datetime] = None
    achievements: list[AchievementSchema]


class OwnProfileResponse(ProgressSchema):
    """Response for GET /me."""

    user: ProfileUser
    missions: list[MissionSchema]


class CheckinItem(BaseModel):
    """A check-in as shown in feeds and profiles."""

    id: int
    user_id: int
    username: str
    location_id: int
    location_name: str
    category: Optional[str] = None
    message: Optional[str] = None
    image_url: Optional[str] = None
    created_at: datetime


class UserProfileResponse(BaseModel):
    """Response for GET /users/{id}/profile."""

    user: ProfileUser
    relation: RelationLiteral
    request_id: Optional[int] = None
    is_self: bool
    is_friend: bool
    can_see_profile: bool
    can_see_feed: bool
    progress: Optional[ProgressSchema] = None
    checkins: list[CheckinItem]
    trips: list[TripSchema] = []


class FeedResponse(BaseModel):
    """Response for GET /feed."""

    feed: list[CheckinItem]


class PrivacyUpdate(BaseModel):
    """Body for PATCH /me/privacy."""

    profile_public: Optional[bool] = None
    feed_public: Optional[bool] = None

    @model_validator(mode="after")
    def validate_not_empty(self) -> "PrivacyUpdate":
        if self.profile_public is None and self.feed_public is None:
            raise ValueError("At least one privacy flag must be provided")
        return self
