"""Pydantic schemas for friend endpoints."""

from datetime import datetime
from typing import Literal, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

RelationLiteral = Literal["none", "pending_outgoing", "pending_incoming", "friends", "self"]


class UserSummary(BaseModel):
    """Public identity of a user."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str


class FriendsResponse(BaseModel):
    """Response for GET /friends."""

    friends: list[UserSummary]
    total: int


class UserSearchResult(UserSummary):
    """Search hit annotated with the caller's relation to it."""

    relation: RelationLiteral
    request_id: Optional[int] = None


class UserSearchResponse(BaseModel):
    """Response for GET /friends/search."""

    users: list[UserSearchResult]


class FriendRequestCreate(BaseModel):
    """Body for POST /friends/requests."""

    target_id: int = Field(validation_alias=AliasChoices("target_id", "friendId", "friend_id"))


class FriendRequestSchema(BaseModel):
    """A friend request row."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    requester_id: int
    target_id: int
    status: str
    created_at: datetime
    resolved_at: Optional[datetime] = None


class PendingRequestsResponse(BaseModel):
    """Response for GET /friends/requests."""

    incoming: list[FriendRequestSchema]
    outgoing: list[FriendRequestSchema]


class FriendshipResponse(BaseModel):
    """Response after accepting a request."""

    request_id: int
    friend_id: int
    relation: RelationLiteral
