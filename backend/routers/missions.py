"""Missions endpoint."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database import get_db
from models.user import User
from schemas.missions import MissionsResponse
from services.auth import get_current_user
from services.checkin_service import current_counters
from services.mission_service import MissionService


router = APIRouter()


@router.get("", response_model=MissionsResponse)
def get_missions(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Active missions with the caller's progress."""
    missions = MissionService(db, current_user.id).list_progress(current_counters(current_user))
    return MissionsResponse(
        missions=missions,
        completed_count=sum(1 for m in missions if m["completed"]),
    )
