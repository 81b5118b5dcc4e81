"""Error taxonomy for the check-in and friend engines.

Every error carries a stable upper-case ``reason`` code that callers map to
user-facing messages. The engine never returns localized text.
"""

from typing import Any, Optional


# Validation
OUT_OF_RANGE = "OUT_OF_RANGE"
INVALID_COORDINATES = "INVALID_COORDINATES"
LOCATION_INACTIVE = "LOCATION_INACTIVE"
INVALID_TIMESTAMP = "INVALID_TIMESTAMP"
SELF_REQUEST = "SELF_REQUEST"
INVALID_TRIP_DATES = "INVALID_TRIP_DATES"

# Lookup
LOCATION_NOT_FOUND = "LOCATION_NOT_FOUND"
TRIP_NOT_FOUND = "TRIP_NOT_FOUND"
USER_NOT_FOUND = "USER_NOT_FOUND"
NOT_FOUND = "NOT_FOUND"

# Conflict
DUPLICATE_REQUEST = "DUPLICATE_REQUEST"
ALREADY_FRIENDS = "ALREADY_FRIENDS"
NOT_AUTHORIZED = "NOT_AUTHORIZED"

# Internal
CONCURRENT_UPDATE = "CONCURRENT_UPDATE"


class CoreError(Exception):
    """Base class for errors raised by the engine services."""

    def __init__(self, reason: str, message: Optional[str] = None, context: Optional[dict[str, Any]] = None):
        super().__init__(message or reason)
        self.reason = reason
        self.message = message or reason
        self.context = context or {}

    def to_detail(self) -> dict:
        return {"error": self.reason, "message": self.message}


class CheckinRejected(CoreError):
    """A check-in attempt was refused before any state changed."""


class FriendGraphError(CoreError):
    """A friend request transition was refused."""


class NotFoundError(CoreError):
    """A referenced user or location does not exist."""


class ConcurrencyError(CoreError):
    """Counter updates kept losing to concurrent writers."""

    def __init__(self, message: str = "Counter update retries exhausted", context: Optional[dict[str, Any]] = None):
        super().__init__(CONCURRENT_UPDATE, message, context)
