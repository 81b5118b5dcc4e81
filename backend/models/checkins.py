"""Immutable check-in records, one per (user, location)."""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import backref, relationship

from database import Base


class CheckinRecord(Base):
    """First successful check-in of a user at a location."""

    __tablename__ = "checkins"
    __table_args__ = (
        UniqueConstraint("user_id", "location_id", name="uq_user_location_checkin"),
        Index("ix_checkins_user_created", "user_id", "created_at"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    location_id = Column(
        Integer,
        ForeignKey("locations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    message = Column(Text, nullable=True)
    image_url = Column(String(1024), nullable=True)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False)

    user = relationship("User", backref=backref("checkins", passive_deletes=True))
    location = relationship("Location", backref=backref("checkins", passive_deletes=True))
