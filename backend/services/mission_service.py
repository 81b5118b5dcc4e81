"""Mission progress tracking.

Progress is always derived from the user's counters and clamped at the
mission target. Completion is one-way: once a mission is completed it stays
completed with full progress, even if a streak later breaks.
"""

import logging
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from models.missions import Mission, UserMission
from services.achievement_service import Counters


logger = logging.getLogger(__name__)

GOAL_TOTAL_CHECKINS = "TOTAL_CHECKINS"
GOAL_STREAK_DAYS = "STREAK_DAYS"
GOAL_TYPES = (GOAL_TOTAL_CHECKINS, GOAL_STREAK_DAYS)

# Seeded on first database initialization.
DEFAULT_MISSIONS = (
    {"name": "Getting Started", "description": "Check in at 3 locations",
     "goal_type": GOAL_TOTAL_CHECKINS, "target_value": 3},
    {"name": "City Explorer", "description": "Check in at 15 locations",
     "goal_type": GOAL_TOTAL_CHECKINS, "target_value": 15},
    {"name": "Weekly Habit", "description": "Keep a 7-day check-in streak",
     "goal_type": GOAL_STREAK_DAYS, "target_value": 7},
)


@dataclass(frozen=True)
class MissionState:
    mission_id: int
    goal_type: str
    target: int
    progress: int = 0
    is_completed: bool = False
    completed_at: Optional[datetime] = None

    @property
    def percent_complete(self) -> int:
        return (100 * self.progress) // self.target


def counter_for_goal(goal_type: str, counters: Counters) -> int:
    if goal_type == GOAL_TOTAL_CHECKINS:
        return counters.total_checkins
    if goal_type == GOAL_STREAK_DAYS:
        return counters.streak_days
    raise ValueError(f"Unknown mission goal type: {goal_type}")


def advance_mission(state: MissionState, counters: Counters, now: Optional[datetime] = None) -> MissionState:
    """Apply the latest counters to a mission's progress."""
    if state.target <= 0:
        raise ValueError("Mission target must be positive")

    if state.is_completed:
        return replace(state, progress=state.target)

    progress = min(counter_for_goal(state.goal_type, counters), state.target)
    if progress >= state.target:
        return replace(state, progress=progress, is_completed=True, completed_at=now)
    return replace(state, progress=progress)


class MissionService:
    """Loads, advances and stores mission progress for one user."""

    def __init__(self, db: Session, user_id: int):
        self.db = db
        self.user_id = user_id

    def _active_missions(self) -> list[Mission]:
        return (
            self.db.query(Mission)
            .filter(Mission.is_active.is_(True))
            .order_by(Mission.id)
            .all()
        )

    def _progress_rows(self) -> dict[int, UserMission]:
        rows = self.db.query(UserMission).filter(UserMission.user_id == self.user_id).all()
        return {row.mission_id: row for row in rows}

    @staticmethod
    def _state(mission: Mission, row: Optional[UserMission]) -> MissionState:
        if row is None:
            return MissionState(mission.id, mission.goal_type, mission.target_value)
        return MissionState(
            mission_id=mission.id,
            goal_type=mission.goal_type,
            target=mission.target_value,
            progress=row.progress,
            is_completed=row.is_completed,
            completed_at=row.completed_at,
        )

    def advance_all(self, counters: Counters, now: datetime) -> list[MissionState]:
        """Advance every active mission and persist; caller owns the transaction."""
        rows = self._progress_rows()
        snapshots = []

        for mission in self._active_missions():
            row = rows.get(mission.id)
            before = self._state(mission, row)
            after = advance_mission(before, counters, now)

            if row is None:
                row = UserMission(user_id=self.user_id, mission_id=mission.id)
                self.db.add(row)
            row.progress = after.progress
            row.is_completed = after.is_completed
            row.completed_at = after.completed_at

            if after.is_completed and not before.is_completed:
                logger.info("User %s completed mission %s (%s)", self.user_id, mission.id, mission.name)
            snapshots.append(after)

        self.db.flush()
        return snapshots

    def list_progress(self, counters: Counters) -> list[dict]:
        """Read-only projection of active missions for display."""
        rows = self._progress_rows()
        missions = []
        for mission in self._active_missions():
            state = advance_mission(self._state(mission, rows.get(mission.id)), counters)
            missions.append({
                "id": mission.id,
                "name": mission.name,
                "description": mission.description,
                "goal_type": mission.goal_type,
                "progress": state.progress,
                "target": state.target,
                "percent_complete": state.percent_complete,
                "completed": state.is_completed,
                "completed_at": state.completed_at,
            })
        return missions


def seed_default_missions(db: Session) -> int:
    """Insert the default missions when the table is empty."""
    if db.query(Mission).count():
        return 0
    for data in DEFAULT_MISSIONS:
        db.add(Mission(**data))
    db.flush()
    return len(DEFAULT_MISSIONS)
