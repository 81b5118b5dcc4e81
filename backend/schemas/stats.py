"""Pydantic schemas for admin stats endpoints."""

from typing import Optional

from pydantic import BaseModel


class LocationCheckinCount(BaseModel):
    location_id: int
    name: str
    category: Optional[str] = None
    checkins: int


class StatsSummaryResponse(BaseModel):
    """Response for GET /admin/stats/summary."""

    user_count: int
    total_checkins: int
    checkins_per_location: list[LocationCheckinCount]
