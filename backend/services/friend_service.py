"""Friend request lifecycle and the viewer/subject relation it derives.

Per pair of users:

    none --send--> pending --accept (target only)--> friends
                   pending --reject (target) / withdraw (requester)--> none

Concurrent transitions on one pair are serialized by the database. A pending
or accepted request occupies the unique ``active_pair_key`` slot, so a second
send on the same pair fails at insert time, and resolving a request is a
conditional update that only one writer can win.
"""

import enum
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import and_, or_, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from models.friends import (
    REQUEST_ACCEPTED,
    REQUEST_PENDING,
    REQUEST_REJECTED,
    REQUEST_WITHDRAWN,
    FriendRequest,
    Friendship,
    pair_key,
)
from models.user import User
from services.errors import (
    ALREADY_FRIENDS,
    DUPLICATE_REQUEST,
    NOT_AUTHORIZED,
    NOT_FOUND,
    SELF_REQUEST,
    USER_NOT_FOUND,
    FriendGraphError,
    NotFoundError,
)


logger = logging.getLogger(__name__)


class Relation(str, enum.Enum):
    NONE = "none"
    PENDING_OUTGOING = "pending_outgoing"
    PENDING_INCOMING = "pending_incoming"
    FRIENDS = "friends"
    SELF = "self"


@dataclass(frozen=True)
class RelationView:
    relation: Relation
    request_id: Optional[int] = None


def resolve_relation(
    viewer_id: int,
    subject_id: int,
    are_friends: bool,
    pending: Optional[FriendRequest],
) -> RelationView:
    """Relation of ``subject`` as seen by ``viewer``, from already-loaded state."""
    if viewer_id == subject_id:
        return RelationView(Relation.SELF)
    if are_friends:
        return RelationView(Relation.FRIENDS)
    if pending is not None:
        if pending.requester_id == viewer_id:
            return RelationView(Relation.PENDING_OUTGOING, pending.id)
        return RelationView(Relation.PENDING_INCOMING, pending.id)
    return RelationView(Relation.NONE)


def can_view_checkins(viewer_id: int, subject: User, relation: Relation) -> bool:
    """Check-ins are visible to the subject and, if feed_public, to friends."""
    if viewer_id == subject.id:
        return True
    return bool(subject.feed_public) and relation == Relation.FRIENDS


def can_view_profile(viewer_id: int, subject: User, relation: Relation) -> bool:
    """Progress details are visible to self, friends, or anyone when profile_public."""
    if viewer_id == subject.id or relation == Relation.FRIENDS:
        return True
    return bool(subject.profile_public)


def escape_like(text: str) -> str:
    """Escape LIKE wildcards so user input matches literally."""
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class FriendService:
    """Friend graph operations from one user's point of view."""

    def __init__(self, db: Session, user_id: int):
        self.db = db
        self.user_id = user_id

    # Queries

    def _friendship(self, other_id: int) -> Optional[Friendship]:
        low, high = sorted((self.user_id, other_id))
        return (
            self.db.query(Friendship)
            .filter(Friendship.user_low_id == low, Friendship.user_high_id == high)
            .first()
        )

    def _pending_between(self, other_id: int) -> Optional[FriendRequest]:
        return (
            self.db.query(FriendRequest)
            .filter(
                FriendRequest.active_pair_key == pair_key(self.user_id, other_id),
                FriendRequest.status == REQUEST_PENDING,
            )
            .first()
        )

    def relation_to(self, subject_id: int) -> RelationView:
        if subject_id == self.user_id:
            return RelationView(Relation.SELF)
        return resolve_relation(
            self.user_id,
            subject_id,
            self._friendship(subject_id) is not None,
            self._pending_between(subject_id),
        )

    def friend_ids(self) -> set[int]:
        rows = (
            self.db.query(Friendship.user_low_id, Friendship.user_high_id)
            .filter(or_(Friendship.user_low_id == self.user_id, Friendship.user_high_id == self.user_id))
            .all()
        )
        return {high if low == self.user_id else low for low, high in rows}

    def list_friends(self) -> list[User]:
        ids = self.friend_ids()
        if not ids:
            return []
        return self.db.query(User).filter(User.id.in_(ids)).order_by(User.username).all()

    def list_pending(self) -> dict[str, list[FriendRequest]]:
        """Pending requests split by direction, newest first."""
        rows = (
            self.db.query(FriendRequest)
            .filter(
                FriendRequest.status == REQUEST_PENDING,
                or_(FriendRequest.requester_id == self.user_id, FriendRequest.target_id == self.user_id),
            )
            .order_by(FriendRequest.created_at.desc(), FriendRequest.id.desc())
            .all()
        )
        return {
            "incoming": [r for r in rows if r.target_id == self.user_id],
            "outgoing": [r for r in rows if r.requester_id == self.user_id],
        }

    def search(self, query: str, limit: int = 20) -> list[tuple[User, RelationView]]:
        """Users whose username contains ``query``, each with its relation."""
        pattern = f"%{escape_like(query.strip())}%"
        users = (
            self.db.query(User)
            .filter(User.username.ilike(pattern, escape="\\"))
            .order_by(User.username)
            .limit(limit)
            .all()
        )
        if not users:
            return []

        candidate_ids = [u.id for u in users]
        friends = self.friend_ids()
        pending_rows = (
            self.db.query(FriendRequest)
            .filter(
                FriendRequest.status == REQUEST_PENDING,
                or_(
                    and_(FriendRequest.requester_id == self.user_id, FriendRequest.target_id.in_(candidate_ids)),
                    and_(FriendRequest.target_id == self.user_id, FriendRequest.requester_id.in_(candidate_ids)),
                ),
            )
            .all()
        )
        pending_by_other = {
            (r.target_id if r.requester_id == self.user_id else r.requester_id): r
            for r in pending_rows
        }

        return [
            (user, resolve_relation(self.user_id, user.id, user.id in friends, pending_by_other.get(user.id)))
            for user in users
        ]

    # Transitions

    def send_request(self, target_id: int) -> FriendRequest:
        if target_id == self.user_id:
            raise FriendGraphError(SELF_REQUEST, "You cannot send a friend request to yourself")

        if self.db.get(User, target_id) is None:
            raise NotFoundError(USER_NOT_FOUND, "User not found")

        if self._friendship(target_id) is not None:
            raise FriendGraphError(ALREADY_FRIENDS, "You are already friends")

        if self._pending_between(target_id) is not None:
            raise FriendGraphError(DUPLICATE_REQUEST, "A friend request between you is already pending")

        request = FriendRequest(
            requester_id=self.user_id,
            target_id=target_id,
            status=REQUEST_PENDING,
            active_pair_key=pair_key(self.user_id, target_id),
        )
        self.db.add(request)
        try:
            self.db.commit()
        except IntegrityError:
            # Lost the race against a concurrent send or accept on the same pair.
            self.db.rollback()
            if self._friendship(target_id) is not None:
                raise FriendGraphError(ALREADY_FRIENDS, "You are already friends")
            raise FriendGraphError(DUPLICATE_REQUEST, "A friend request between you is already pending")

        self.db.refresh(request)
        logger.info("Friend request %s sent: %s -> %s", request.id, self.user_id, target_id)
        return request

    def _load_pending(self, request_id: int) -> FriendRequest:
        request = self.db.get(FriendRequest, request_id)
        if request is None or request.status != REQUEST_PENDING:
            raise FriendGraphError(NOT_FOUND, "Friend request not found or already handled")
        return request

    def _resolve(self, request_id: int, status: str) -> bool:
        """Move a pending request to ``status``; False if another writer won.

        Accepted requests keep their pair slot so no new request can open
        between the two friends.
        """
        values = {"status": status, "resolved_at": datetime.now(timezone.utc)}
        if status != REQUEST_ACCEPTED:
            values["active_pair_key"] = None
        result = self.db.execute(
            update(FriendRequest)
            .where(FriendRequest.id == request_id, FriendRequest.status == REQUEST_PENDING)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    def accept(self, request_id: int) -> Friendship:
        request = self._load_pending(request_id)
        if request.target_id != self.user_id:
            raise FriendGraphError(NOT_AUTHORIZED, "Only the recipient can accept this request")

        try:
            if not self._resolve(request_id, REQUEST_ACCEPTED):
                self.db.rollback()
                raise FriendGraphError(NOT_FOUND, "Friend request not found or already handled")

            low, high = sorted((request.requester_id, request.target_id))
            friendship = Friendship(user_low_id=low, user_high_id=high, request_id=request.id)
            self.db.add(friendship)
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise FriendGraphError(ALREADY_FRIENDS, "You are already friends")

        logger.info("Friend request %s accepted: %s <-> %s", request_id, low, high)
        return friendship

    def reject(self, request_id: int) -> FriendRequest:
        """Reject (as recipient) or withdraw (as requester) a pending request."""
        request = self._load_pending(request_id)
        if self.user_id == request.target_id:
            status = REQUEST_REJECTED
        elif self.user_id == request.requester_id:
            status = REQUEST_WITHDRAWN
        else:
            raise FriendGraphError(NOT_AUTHORIZED, "You are not part of this friend request")

        if not self._resolve(request_id, status):
            self.db.rollback()
            raise FriendGraphError(NOT_FOUND, "Friend request not found or already handled")
        self.db.commit()

        self.db.refresh(request)
        logger.info("Friend request %s %s by user %s", request_id, status, self.user_id)
        return request
