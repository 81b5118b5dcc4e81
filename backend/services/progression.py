"""Level progression derived from a user's point total.

Level n spans ``step * n`` points and starts at the triangular boundary
``step * n * (n - 1) / 2``. With the default step of 3:

    Level 1:  0-2   (3 points)
    Level 2:  3-8   (6 points)
    Level 3:  9-17  (9 points)
    Level 4: 18-29  (12 points)
"""

from dataclasses import dataclass
from math import isqrt

from config import LEVEL_POINTS_STEP

# (minimum level, title), highest first. Presentation only.
LEVEL_TITLES = (
    (10, "Legendary Explorer"),
    (6, "Veteran"),
    (3, "Seasoned Traveler"),
    (1, "Newcomer"),
)


@dataclass(frozen=True)
class LevelInfo:
    level: int
    title: str
    points_into_level: int
    points_required_for_level: int
    remaining_to_next_level: int

    @property
    def progress_percent(self) -> int:
        return (100 * self.points_into_level) // self.points_required_for_level


def level_boundary(level: int, step: int = LEVEL_POINTS_STEP) -> int:
    """Cumulative points at which ``level`` starts."""
    return step * level * (level - 1) // 2


def title_for_level(level: int) -> str:
    for min_level, title in LEVEL_TITLES:
        if level >= min_level:
            return title
    return LEVEL_TITLES[-1][1]


def level_info(total_points: int, step: int = LEVEL_POINTS_STEP) -> LevelInfo:
    """Resolve level, title and progress for a point total in O(1)."""
    if total_points < 0:
        raise ValueError("total_points must be non-negative")

    # Greatest n with step * n * (n - 1) / 2 <= total_points,
    # i.e. n * (n - 1) <= floor(2 * total_points / step).
    bound = 2 * total_points // step
    level = (isqrt(4 * bound + 1) + 1) // 2

    required = step * level
    into_level = total_points - level_boundary(level, step)

    return LevelInfo(
        level=level,
        title=title_for_level(level),
        points_into_level=into_level,
        points_required_for_level=required,
        remaining_to_next_level=required - into_level,
    )
