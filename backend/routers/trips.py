"""Trip endpoints."""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from database import get_db
from models.user import User
from schemas.trips import TripPayload, TripResponse, TripSchema, TripsResponse
from services.auth import get_current_user
from services.trip_service import TripService


router = APIRouter()


@router.get("", response_model=TripsResponse)
def list_trips(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """The caller's trips, newest first."""
    trips = TripService(db, current_user.id).list_trips()
    return TripsResponse(trips=[TripSchema.model_validate(trip) for trip in trips])


@router.post("", response_model=TripResponse, status_code=status.HTTP_201_CREATED)
def create_trip(
    payload: TripPayload,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    trip = TripService(db, current_user.id).create_trip(**payload.model_dump())
    return TripResponse(trip=TripSchema.model_validate(trip))


@router.put("/{trip_id}", response_model=TripResponse)
def update_trip(
    trip_id: int,
    payload: TripPayload,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Replace a trip's fields. Only the owner can edit it."""
    trip = TripService(db, current_user.id).update_trip(trip_id, **payload.model_dump())
    return TripResponse(trip=TripSchema.model_validate(trip))


@router.delete("/{trip_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_trip(
    trip_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    TripService(db, current_user.id).delete_trip(trip_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
