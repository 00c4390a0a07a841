"""Streak tracking: calendar-day and ISO-week arithmetic in UTC.

Days are truncated in UTC, not the learner's local timezone, so that the
same event stream always yields the same streak.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta, timezone
from typing import TYPE_CHECKING

from careerquest.gamification.enums import StreakType

if TYPE_CHECKING:
    from careerquest.gamification.schemas import StreakRecord

logger = logging.getLogger(__name__)


def utc_datetime(dt: datetime) -> datetime:
    """Normalise a timestamp to UTC. Naive timestamps are taken to be UTC already."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def utc_day(dt: datetime) -> date:
    """UTC calendar day of a timestamp."""
    return utc_datetime(dt).date()


def get_week_iso(dt: datetime) -> str:
    """Get ISO week string e.g. '2026-W09'. Uses %G-W%V (ISO year + ISO week)."""
    return utc_datetime(dt).strftime("%G-W%V")


def get_monday(dt: datetime | date) -> date:
    """Get the Monday of the ISO week containing dt."""
    d = utc_day(dt) if isinstance(dt, datetime) else dt
    return d - timedelta(days=d.weekday())


def days_between(earlier: datetime, later: datetime) -> int:
    """Whole UTC calendar days from earlier to later (negative if out of order)."""
    return (utc_day(later) - utc_day(earlier)).days


def weeks_between(earlier: datetime, later: datetime) -> int:
    """Whole ISO weeks from earlier to later (negative if out of order)."""
    return (get_monday(later) - get_monday(earlier)).days // 7


def update(streak: StreakRecord, activity_date: datetime) -> StreakRecord:
    """Advance a streak record for an activity completed at activity_date.

    Same period: unchanged. Next period: +1. Any other gap, including an
    out-of-order event: reset to 1. A streak that has never started begins
    at 1. The longest streak is recomputed on every advance.
    """
    if streak.last_activity_date is None or streak.current_streak == 0:
        current = 1
    else:
        if streak.streak_type == StreakType.WEEKLY:
            delta = weeks_between(streak.last_activity_date, activity_date)
        else:
            delta = days_between(streak.last_activity_date, activity_date)

        if delta == 0:
            return streak
        current = streak.current_streak + 1 if delta == 1 else 1
        if current == 1:
            logger.debug("Streak of %d reset (gap %d)", streak.current_streak, delta)

    return streak.model_copy(
        update={
            "current_streak": current,
            "longest_streak": max(streak.longest_streak, current),
            "last_activity_date": activity_date,
        }
    )
