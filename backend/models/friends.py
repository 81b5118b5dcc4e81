"""Friend requests and the friendships they materialize."""

from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from database import Base


REQUEST_PENDING = "pending"
REQUEST_ACCEPTED = "accepted"
REQUEST_REJECTED = "rejected"
REQUEST_WITHDRAWN = "withdrawn"


def pair_key(user_a: int, user_b: int) -> str:
    """Order-independent key for an unordered pair of users."""
    low, high = sorted((user_a, user_b))
    return f"{low}:{high}"


class FriendRequest(Base):
    """A friend request. Resolved rows are kept for audit."""

    __tablename__ = "friend_requests"
    __table_args__ = (
        # Set while pending or accepted; NULL once rejected or withdrawn.
        UniqueConstraint("active_pair_key", name="uq_friend_request_active_pair"),
        CheckConstraint("requester_id <> target_id", name="ck_friend_request_not_self"),
    )

    id = Column(Integer, primary_key=True, index=True)
    requester_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    target_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    status = Column(String(16), nullable=False, default=REQUEST_PENDING, index=True)
    active_pair_key = Column(String(64), nullable=True)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False)
    resolved_at = Column(DateTime(timezone=True), nullable=True)

    requester = relationship("User", foreign_keys=[requester_id])
    target = relationship("User", foreign_keys=[target_id])


class Friendship(Base):
    """Symmetric friendship, stored once with the lower user id first."""

    __tablename__ = "friendships"
    __table_args__ = (
        UniqueConstraint("user_low_id", "user_high_id", name="uq_friendship_pair"),
        CheckConstraint("user_low_id < user_high_id", name="ck_friendship_ordered"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_low_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_high_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    request_id = Column(Integer, ForeignKey("friend_requests.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False)
