"""Stats service for aggregate check-in statistics."""

from sqlalchemy import func
from sqlalchemy.orm import Session

from models.checkins import CheckinRecord
from models.location import Location
from models.user import User


class StatsService:
    """Service for admin-facing aggregate queries."""

    def __init__(self, db: Session):
        self.db = db

    def get_summary(self, limit: int = 50) -> dict:
        """User and check-in totals plus the most visited locations.

        Returns:
            dict with keys: user_count, total_checkins, checkins_per_location
        """
        user_count = self.db.query(func.count(User.id)).scalar() or 0
        total_checkins = self.db.query(func.count(CheckinRecord.id)).scalar() or 0

        checkin_count = func.count(CheckinRecord.id).label("checkins")
        rows = (
            self.db.query(Location.id, Location.name, Location.category, checkin_count)
            .outerjoin(CheckinRecord, CheckinRecord.location_id == Location.id)
            .group_by(Location.id, Location.name, Location.category)
            .order_by(checkin_count.desc(), Location.name)
            .limit(limit)
            .all()
        )

        return {
            "user_count": user_count,
            "total_checkins": total_checkins,
            "checkins_per_location": [
                {
                    "location_id": row.id,
                    "name": row.name,
                    "category": row.category,
                    "checkins": row.checkins,
                }
                for row in rows
            ],
        }
