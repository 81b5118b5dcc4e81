"""Profile, feed and privacy endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from database import get_db
from models.user import User
from schemas.profile import (
    FeedResponse,
    OwnProfileResponse,
    PrivacyUpdate,
    ProfileUser,
    UserProfileResponse,
)
from schemas.trips import TripSchema
from services.auth import get_current_user
from services.profile_service import ProfileService


router = APIRouter()


@router.get("/me", response_model=OwnProfileResponse)
def get_own_profile(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Get the caller's points, level, streak, achievements and missions."""
    profile = ProfileService(db, current_user.id).get_own_profile()
    profile["user"] = ProfileUser.model_validate(profile["user"])
    return profile


@router.patch("/me/privacy", response_model=ProfileUser)
def update_privacy(
    payload: PrivacyUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Update the caller's profile/feed visibility flags."""
    user = ProfileService(db, current_user.id).update_privacy(
        profile_public=payload.profile_public,
        feed_public=payload.feed_public,
    )
    return ProfileUser.model_validate(user)


@router.get("/users/{user_id}/profile", response_model=UserProfileResponse)
def get_user_profile(
    user_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Get another user's profile as the caller is allowed to see it.

    Includes the relation between caller and subject and, when a request is
    pending, its id.
    """
    profile = ProfileService(db, current_user.id).get_user_profile(user_id)
    profile["user"] = ProfileUser.model_validate(profile["user"])
    profile["trips"] = [TripSchema.model_validate(trip) for trip in profile["trips"]]
    return profile


@router.get("/feed", response_model=FeedResponse)
def get_feed(
    limit: Optional[int] = Query(None, ge=1, le=200),
    offset: int = Query(0, ge=0),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Caller's own check-ins plus those of friends sharing their feed."""
    feed = ProfileService(db, current_user.id).get_feed(limit=limit, offset=offset)
    return FeedResponse(feed=feed)
