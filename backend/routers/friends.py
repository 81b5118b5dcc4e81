"""Friend request and friend listing endpoints."""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from database import get_db
from models.user import User
from schemas.friends import (
    FriendRequestCreate,
    FriendRequestSchema,
    FriendsResponse,
    FriendshipResponse,
    PendingRequestsResponse,
    UserSearchResponse,
    UserSearchResult,
    UserSummary,
)
from services.auth import get_current_user
from services.friend_service import FriendService


router = APIRouter()


@router.get("", response_model=FriendsResponse)
def list_friends(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """List the caller's friends."""
    friends = FriendService(db, current_user.id).list_friends()
    return FriendsResponse(
        friends=[UserSummary.model_validate(friend) for friend in friends],
        total=len(friends),
    )


@router.get("/search", response_model=UserSearchResponse)
def search_users(
    q: str = Query(..., min_length=1, max_length=64),
    limit: int = Query(20, ge=1, le=50),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Search users by username; each hit carries the caller's relation to it.

    When a request is pending, its id is included so the caller can accept or
    reject it without another lookup.
    """
    results = FriendService(db, current_user.id).search(q, limit=limit)
    return UserSearchResponse(
        users=[
            UserSearchResult(
                id=user.id,
                username=user.username,
                relation=view.relation.value,
                request_id=view.request_id,
            )
            for user, view in results
        ]
    )


@router.get("/requests", response_model=PendingRequestsResponse)
def list_pending_requests(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Pending requests sent to and by the caller."""
    pending = FriendService(db, current_user.id).list_pending()
    return PendingRequestsResponse(
        incoming=[FriendRequestSchema.model_validate(r) for r in pending["incoming"]],
        outgoing=[FriendRequestSchema.model_validate(r) for r in pending["outgoing"]],
    )


@router.post("/requests", response_model=FriendRequestSchema, status_code=status.HTTP_201_CREATED)
def send_friend_request(
    payload: FriendRequestCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Send a friend request to another user."""
    request = FriendService(db, current_user.id).send_request(payload.target_id)
    return FriendRequestSchema.model_validate(request)


@router.post("/requests/{request_id}/accept", response_model=FriendshipResponse)
def accept_friend_request(
    request_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Accept a pending request addressed to the caller."""
    friendship = FriendService(db, current_user.id).accept(request_id)
    friend_id = (
        friendship.user_high_id if friendship.user_low_id == current_user.id else friendship.user_low_id
    )
    return FriendshipResponse(request_id=request_id, friend_id=friend_id, relation="friends")


@router.post("/requests/{request_id}/reject", response_model=FriendRequestSchema)
def reject_friend_request(
    request_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Reject an incoming request, or withdraw an outgoing one."""
    request = FriendService(db, current_user.id).reject(request_id)
    return FriendRequestSchema.model_validate(request)
