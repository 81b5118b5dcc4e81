"""Trips: named, optionally dated collections a user keeps on their profile."""

import logging
from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from models.trips import Trip
from services.errors import INVALID_TRIP_DATES, TRIP_NOT_FOUND, CoreError, NotFoundError


logger = logging.getLogger(__name__)


class TripService:
    """Owner-scoped trip CRUD for one user."""

    def __init__(self, db: Session, user_id: int):
        self.db = db
        self.user_id = user_id

    def list_trips(self) -> list[Trip]:
        return (
            self.db.query(Trip)
            .filter(Trip.user_id == self.user_id)
            .order_by(Trip.created_at.desc(), Trip.id.desc())
            .all()
        )

    def list_visible_trips(self, owner_id: int) -> list[Trip]:
        """Another user's public trips; all of them when the owner is the caller."""
        query = self.db.query(Trip).filter(Trip.user_id == owner_id)
        if owner_id != self.user_id:
            query = query.filter(Trip.is_public.is_(True))
        return query.order_by(Trip.created_at.desc(), Trip.id.desc()).all()

    def get_trip(self, trip_id: int) -> Trip:
        """Load one of the caller's trips; other users' trips are reported as missing."""
        trip = self.db.get(Trip, trip_id)
        if trip is None or trip.user_id != self.user_id:
            raise NotFoundError(TRIP_NOT_FOUND, "Trip not found")
        return trip

    @staticmethod
    def _check_dates(start_date: Optional[date], end_date: Optional[date]) -> None:
        if start_date and end_date and end_date < start_date:
            raise CoreError(INVALID_TRIP_DATES, "Trip end date is before its start date")

    def create_trip(
        self,
        name: str,
        description: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        is_public: bool = True,
        cover_image_url: Optional[str] = None,
    ) -> Trip:
        self._check_dates(start_date, end_date)
        trip = Trip(
            user_id=self.user_id,
            name=name.strip(),
            description=(description or "").strip() or None,
            start_date=start_date,
            end_date=end_date,
            is_public=is_public,
            cover_image_url=cover_image_url,
        )
        self.db.add(trip)
        self.db.commit()
        self.db.refresh(trip)

        logger.info("Trip %s created by user %s", trip.id, self.user_id)
        return trip

    def update_trip(
        self,
        trip_id: int,
        name: str,
        description: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        is_public: bool = True,
        cover_image_url: Optional[str] = None,
    ) -> Trip:
        """Replace every editable field of a trip."""
        trip = self.get_trip(trip_id)
        self._check_dates(start_date, end_date)

        trip.name = name.strip()
        trip.description = (description or "").strip() or None
        trip.start_date = start_date
        trip.end_date = end_date
        trip.is_public = is_public
        trip.cover_image_url = cover_image_url
        self.db.commit()
        self.db.refresh(trip)
        return trip

    def delete_trip(self, trip_id: int) -> None:
        trip = self.get_trip(trip_id)
        self.db.delete(trip)
        self.db.commit()
        logger.info("Trip %s deleted by user %s", trip_id, self.user_id)
