from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, Integer, String

from database import Base


class User(Base):
    """Identity plus the progression counters owned by the check-in engine."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    username = Column(String, unique=True, index=True, nullable=False)
    token_version = Column(Integer, default=1, nullable=False)

    # Counters; only CheckinService writes these.
    points = Column(Integer, default=0, nullable=False)
    checkin_streak_days = Column(Integer, default=0, nullable=False)
    last_checkin_at = Column(DateTime(timezone=True), nullable=True)

    # Privacy flags; only the user themself writes these.
    profile_public = Column(Boolean, default=True, nullable=False)
    feed_public = Column(Boolean, default=True, nullable=False)

    is_admin = Column(Boolean, default=False, nullable=False)

    # Optimistic concurrency guard for the counter row.
    counters_version = Column(Integer, nullable=False, default=1)

    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc), nullable=False)

    __mapper_args__ = {"version_id_col": counters_version}
