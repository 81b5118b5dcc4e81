"""Pydantic schemas for missions endpoints."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class MissionSchema(BaseModel):
    """Mission definition with the caller's progress."""

    id: int
    name: str
    description: Optional[str] = None
    goal_type: str
    progress: int
    target: int
    percent_complete: int
    completed: bool
    completed_at: Optional[datetime] = None


class MissionsResponse(BaseModel):
    """Response for GET /missions."""

    missions: list[MissionSchema]
    completed_count: int
