"""Model package exports for database initialization."""

from models.user import User
from models.location import Location
from models.checkins import CheckinRecord
from models.achievements import Achievement, UserAchievement
from models.missions import Mission, UserMission
from models.friends import FriendRequest, Friendship
from models.trips import Trip

__all__ = [
    "User",
    "Location",
    "CheckinRecord",
    "Achievement",
    "UserAchievement",
    "Mission",
    "UserMission",
    "FriendRequest",
    "Friendship",
    "Trip",
]
