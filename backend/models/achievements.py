"""Achievement catalog rows and per-user unlock records.

Unlock rules live in services.achievement_service and are keyed by ``code``;
these tables only hold display data and the unlock timestamps.
"""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import backref, relationship

from database import Base


class Achievement(Base):
    """Display data for an unlockable achievement, keyed by its stable code."""

    __tablename__ = "achievements"
    __table_args__ = (
        UniqueConstraint("code", name="uq_achievements_code"),
    )

    id = Column(Integer, primary_key=True, index=True)
    code = Column(String(64), nullable=False, index=True)
    name = Column(String(128), nullable=False)
    description = Column(String(512), nullable=True)
    icon = Column(String(64), nullable=True)
    # Catalog display order, rewritten on every catalog sync.
    sort_order = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc), nullable=False)

    unlocks = relationship("UserAchievement", back_populates="achievement", passive_deletes=True)


class UserAchievement(Base):
    """A user's unlock of one achievement; at most one row per pair."""

    __tablename__ = "user_achievements"
    __table_args__ = (
        UniqueConstraint("user_id", "achievement_id", name="uq_user_achievement"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    achievement_id = Column(Integer, ForeignKey("achievements.id", ondelete="CASCADE"), nullable=False, index=True)
    unlocked_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False)

    user = relationship("User", backref=backref("achievements", passive_deletes=True))
    achievement = relationship("Achievement", back_populates="unlocks")
