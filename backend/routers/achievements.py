"""Achievements endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database import get_db
from models.user import User
from schemas.achievements import AchievementsListResponse, UnlockedAchievementsResponse
from services.achievement_service import AchievementService
from services.auth import get_current_user


router = APIRouter()


@router.get("", response_model=AchievementsListResponse)
def get_all_achievements(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Get all achievements with the caller's unlock status."""
    achievements = AchievementService(db, current_user.id).list_with_status()
    return AchievementsListResponse(
        achievements=achievements,
        total=len(achievements),
        unlocked_count=sum(1 for a in achievements if a["unlocked"]),
    )


@router.get("/unlocked", response_model=UnlockedAchievementsResponse)
def get_unlocked_achievements(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Get only the achievements the caller has unlocked."""
    achievements = AchievementService(db, current_user.id).list_with_status(only_unlocked=True)
    return UnlockedAchievementsResponse(achievements=achievements, total=len(achievements))
