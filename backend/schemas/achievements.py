"""Pydantic schemas for achievements endpoints."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class AchievementSchema(BaseModel):
    """Achievement with user's unlock status."""

    model_config = ConfigDict(from_attributes=True)

    code: str
    name: str
    description: Optional[str] = None
    icon: Optional[str] = None
    unlocked: bool
    unlocked_at: Optional[datetime] = None


class AchievementsListResponse(BaseModel):
    """Response for GET /achievements endpoint."""

    achievements: list[AchievementSchema]
    total: int
    unlocked_count: int


class UnlockedAchievementsResponse(BaseModel):
    """Response for GET /achievements/unlocked endpoint."""

    achievements: list[AchievementSchema]
    total: int
