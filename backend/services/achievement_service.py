"""Achievement catalog, unlock evaluation and per-user unlock records."""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Iterable

from sqlalchemy.orm import Session

from models.achievements import Achievement, UserAchievement


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Counters:
    """Per-user counters the achievement and mission rules read."""

    total_checkins: int
    streak_days: int


@dataclass(frozen=True)
class AchievementDefinition:
    code: str
    name: str
    description: str
    icon: str
    predicate: Callable[[Counters], bool]


# Codes are stable identifiers persisted in user_achievements; never rename.
ACHIEVEMENT_DEFINITIONS: tuple[AchievementDefinition, ...] = (
    AchievementDefinition(
        "FIRST_CHECKIN", "First Steps", "Check in at your first location", "📍",
        lambda c: c.total_checkins >= 1,
    ),
    AchievementDefinition(
        "CHECKINS_5", "Explorer", "Check in at 5 different locations", "🧭",
        lambda c: c.total_checkins >= 5,
    ),
    AchievementDefinition(
        "CHECKINS_10", "Pathfinder", "Check in at 10 different locations", "🗺️",
        lambda c: c.total_checkins >= 10,
    ),
    AchievementDefinition(
        "STREAK_3", "On a Roll", "Check in on 3 consecutive days", "🔥",
        lambda c: c.streak_days >= 3,
    ),
    AchievementDefinition(
        "STREAK_7", "Unstoppable", "Check in on 7 consecutive days", "🏆",
        lambda c: c.streak_days >= 7,
    ),
)

ACHIEVEMENTS_BY_CODE = {definition.code: definition for definition in ACHIEVEMENT_DEFINITIONS}


def evaluate_achievements(counters: Counters, already_unlocked: Iterable[str]) -> list[str]:
    """Return codes whose predicate now holds and that are not yet unlocked.

    Counters only grow, so a code once unlocked stays unlocked and is never
    emitted twice.
    """
    unlocked = set(already_unlocked)
    return [
        definition.code
        for definition in ACHIEVEMENT_DEFINITIONS
        if definition.code not in unlocked and definition.predicate(counters)
    ]


def sync_achievement_catalog(db: Session) -> dict[str, Achievement]:
    """Ensure every catalog entry has a row; returns rows keyed by code."""
    rows = {row.code: row for row in db.query(Achievement).all()}
    for order, definition in enumerate(ACHIEVEMENT_DEFINITIONS):
        row = rows.get(definition.code)
        if row is None:
            row = Achievement(code=definition.code)
            db.add(row)
            rows[definition.code] = row
        row.name = definition.name
        row.description = definition.description
        row.icon = definition.icon
        row.sort_order = order
    db.flush()
    return rows


class AchievementService:
    """Reads and records achievement unlocks for a single user."""

    def __init__(self, db: Session, user_id: int):
        self.db = db
        self.user_id = user_id

    def unlocked_codes(self) -> set[str]:
        rows = (
            self.db.query(Achievement.code)
            .join(UserAchievement, UserAchievement.achievement_id == Achievement.id)
            .filter(UserAchievement.user_id == self.user_id)
            .all()
        )
        return {row.code for row in rows}

    def evaluate_and_unlock(self, counters: Counters, unlocked_at: datetime) -> list[str]:
        """Persist newly unlocked achievements; caller owns the transaction."""
        new_codes = evaluate_achievements(counters, self.unlocked_codes())
        if not new_codes:
            return []

        catalog = sync_achievement_catalog(self.db)
        for code in new_codes:
            self.db.add(
                UserAchievement(
                    user_id=self.user_id,
                    achievement_id=catalog[code].id,
                    unlocked_at=unlocked_at,
                )
            )
        self.db.flush()

        logger.info("User %s unlocked achievements %s", self.user_id, ", ".join(new_codes))
        return new_codes

    def list_with_status(self, only_unlocked: bool = False) -> list[dict]:
        """Catalog entries annotated with this user's unlock status."""
        rows = (
            self.db.query(Achievement, UserAchievement.unlocked_at)
            .outerjoin(
                UserAchievement,
                (UserAchievement.achievement_id == Achievement.id)
                & (UserAchievement.user_id == self.user_id),
            )
            .order_by(Achievement.sort_order, Achievement.id)
            .all()
        )

        achievements = []
        for achievement, unlocked_at in rows:
            unlocked = unlocked_at is not None
            if only_unlocked and not unlocked:
                continue
            achievements.append({
                "code": achievement.code,
                "name": achievement.name,
                "description": achievement.description,
                "icon": achievement.icon,
                "unlocked": unlocked,
                "unlocked_at": unlocked_at,
            })
        return achievements
