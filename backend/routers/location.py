"""Location listing and check-in API endpoints."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.util import get_remote_address
from sqlalchemy.orm import Session

from config import CHECKIN_RATE_LIMIT, RATE_LIMIT_ENABLED
from database import get_db
from models.user import User
from schemas.checkin import CheckinRequest, CheckinResponse, MissionProgress
from schemas.locations import LocationsResponse, NearestLocationsResponse
from services.auth import get_current_user
from services.checkin_service import CheckinResult, CheckinService
from services.errors import ConcurrencyError
from services.location_service import LocationService


logger = logging.getLogger(__name__)


def get_user_id_from_request(request: Request) -> str:
    """Extract user ID for rate limiting key."""
    # During rate limit check, user may not be authenticated yet
    # Fall back to IP address if no user context
    if hasattr(request.state, "user_id"):
        return str(request.state.user_id)
    return get_remote_address(request)


limiter = Limiter(key_func=get_user_id_from_request, enabled=RATE_LIMIT_ENABLED)
router = APIRouter()


def to_response(result: CheckinResult) -> CheckinResponse:
    if not result.accepted:
        return CheckinResponse(accepted=False, reason=result.reason, distance_m=result.distance_m)

    return CheckinResponse(
        accepted=True,
        points=result.points,
        points_awarded=result.points_awarded,
        streak_days=result.streak_days,
        new_achievements=result.new_achievements,
        missions=[
            MissionProgress(
                id=mission.mission_id,
                progress=mission.progress,
                target=mission.target,
                completed=mission.is_completed,
            )
            for mission in result.missions
        ],
        level=result.level.level,
        level_title=result.level.title,
        distance_m=result.distance_m,
    )


@router.get("", response_model=LocationsResponse)
def list_locations(
    category: Optional[str] = Query(None, max_length=64),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """List active locations with a per-user visited flag."""
    locations = LocationService(db, current_user.id).list_locations(category=category)
    return LocationsResponse(locations=locations, total=len(locations))


@router.get("/nearest", response_model=NearestLocationsResponse)
def nearest_locations(
    latitude: float,
    longitude: float,
    limit: int = Query(3, ge=1, le=20),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Closest active locations the user has not visited yet."""
    locations = LocationService(db, current_user.id).nearest_unvisited(latitude, longitude, limit=limit)
    return NearestLocationsResponse(locations=locations)


@router.post(
    "/{location_id}/checkin",
    response_model=CheckinResponse,
    response_model_exclude_none=True,
)
@limiter.limit(CHECKIN_RATE_LIMIT)
def checkin(
    request: Request,
    location_id: int,
    payload: CheckinRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Check in at a location from the caller's claimed position.

    The server will:
    1. Reject inactive locations and positions outside the geofence
    2. Award a point for the first check-in at this location
    3. Advance the daily streak, achievements and missions

    Re-checking in at a visited location awards no points but still counts
    as activity for the streak.

    Rate limit: CHECKIN_RATE_LIMIT per user.
    """
    # Store user_id in request state for rate limiting
    request.state.user_id = current_user.id

    service = CheckinService(db, current_user.id)
    try:
        result = service.checkin(
            location_id=location_id,
            latitude=payload.latitude,
            longitude=payload.longitude,
            message=payload.message,
            image_url=payload.image_url,
        )
    except ConcurrencyError:
        logger.exception("Check-in retries exhausted for user %s", current_user.id)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service temporarily unavailable. Please try again later.",
        )

    response = to_response(result)
    if not result.accepted:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=response.model_dump(by_alias=True, exclude_none=True),
        )
    return response
