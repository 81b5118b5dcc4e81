"""Mission definitions and per-user progress."""

from datetime import datetime, timezone

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import backref, relationship

from database import Base


class Mission(Base):
    """A configurable goal such as reaching N check-ins or an N-day streak."""

    __tablename__ = "missions"
    __table_args__ = (
        CheckConstraint("target_value > 0", name="ck_missions_target_positive"),
        CheckConstraint("goal_type IN ('TOTAL_CHECKINS', 'STREAK_DAYS')", name="ck_missions_goal_type"),
    )

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(128), nullable=False)
    description = Column(String(512), nullable=True)
    goal_type = Column(String(32), nullable=False)  # TOTAL_CHECKINS | STREAK_DAYS
    target_value = Column(Integer, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True, index=True)
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc), nullable=False)

    user_progress = relationship("UserMission", back_populates="mission")


class UserMission(Base):
    """Derived progress of one user toward one mission."""

    __tablename__ = "user_missions"
    __table_args__ = (
        UniqueConstraint("user_id", "mission_id", name="uq_user_mission"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    mission_id = Column(
        Integer,
        ForeignKey("missions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    progress = Column(Integer, nullable=False, default=0)
    is_completed = Column(Boolean, nullable=False, default=False)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    updated_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    user = relationship("User", backref=backref("missions", passive_deletes=True))
    mission = relationship("Mission", back_populates="user_progress")
