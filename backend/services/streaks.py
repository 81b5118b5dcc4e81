"""Daily check-in streak rules.

Days are compared as UTC calendar dates:
- same day as the last check-in: streak unchanged
- the following day: streak continues (+1)
- any larger gap, or no previous check-in: streak restarts at 1
"""

from datetime import datetime, timezone
from typing import Optional

from services.errors import INVALID_TIMESTAMP, CheckinRejected


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC; convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def advance_streak(last_checkin_at: Optional[datetime], now: datetime, current_streak: int) -> int:
    """Return the streak length after a successful check-in at ``now``."""
    if last_checkin_at is None:
        return 1

    last = as_utc(last_checkin_at)
    current = as_utc(now)
    if current < last:
        raise CheckinRejected(
            INVALID_TIMESTAMP,
            "Check-in time is earlier than the previous check-in",
            {"last_checkin_at": last.isoformat(), "now": current.isoformat()},
        )

    gap_days = (current.date() - last.date()).days
    if gap_days == 0:
        # Already counted today; a streak that was never started still counts today.
        return max(current_streak, 1)
    if gap_days == 1:
        return current_streak + 1
    return 1
