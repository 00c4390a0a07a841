"""Streak boundary tests: UTC day truncation, ISO weeks, resets."""

from datetime import date, datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from careerquest.gamification.enums import StreakType
from careerquest.gamification.schemas import StreakRecord
from careerquest.gamification.streak_service import (
    days_between,
    get_monday,
    get_week_iso,
    update,
    weeks_between,
)

MONDAY = datetime(2026, 3, 2, 14, 0, 0, tzinfo=timezone.utc)


def _started(days: int = 1, longest: int | None = None, **kwargs) -> StreakRecord:
    return StreakRecord(
        current_streak=days,
        longest_streak=longest if longest is not None else days,
        last_activity_date=MONDAY,
        **kwargs,
    )


class TestWeekHelpers:
    def test_iso_week_string(self):
        assert get_week_iso(datetime(2026, 2, 25, 14, tzinfo=timezone.utc)) == "2026-W09"

    def test_monday_of_week(self):
        assert get_monday(datetime(2026, 2, 25, 14, tzinfo=timezone.utc)) == date(2026, 2, 23)

    def test_iso_year_boundary(self):
        """2027-01-01 belongs to ISO week 53 of 2026."""
        assert get_week_iso(datetime(2027, 1, 1, tzinfo=timezone.utc)) == "2026-W53"

    def test_naive_timestamps_are_utc(self):
        assert days_between(datetime(2026, 3, 2, 23, 59), datetime(2026, 3, 3, 0, 1)) == 1


class TestDailyStreak:
    def test_first_activity_starts_streak(self):
        result = update(StreakRecord(), MONDAY)
        assert result.current_streak == 1
        assert result.longest_streak == 1
        assert result.last_activity_date == MONDAY

    def test_zero_streak_with_stale_date_starts_at_one(self):
        stale = StreakRecord(current_streak=0, longest_streak=4, last_activity_date=MONDAY - timedelta(days=30))
        result = update(stale, MONDAY)
        assert result.current_streak == 1
        assert result.longest_streak == 4

    def test_same_day_is_unchanged(self):
        streak = _started(3)
        result = update(streak, MONDAY.replace(hour=22))
        assert result == streak

    def test_next_day_extends(self):
        result = update(_started(3), MONDAY + timedelta(days=1))
        assert result.current_streak == 4
        assert result.longest_streak == 4

    def test_gap_resets_but_keeps_longest(self):
        result = update(_started(5), MONDAY + timedelta(days=2))
        assert result.current_streak == 1
        assert result.longest_streak == 5

    def test_out_of_order_event_resets(self):
        result = update(_started(3), MONDAY - timedelta(days=1))
        assert result.current_streak == 1

    def test_utc_midnight_boundary(self):
        late = StreakRecord(
            current_streak=1,
            longest_streak=1,
            last_activity_date=datetime(2026, 3, 2, 23, 30, tzinfo=timezone.utc),
        )
        result = update(late, datetime(2026, 3, 3, 0, 10, tzinfo=timezone.utc))
        assert result.current_streak == 2

    def test_offset_timestamp_truncated_in_utc(self):
        """01:00 at +05:00 on the 3rd is 20:00 UTC on the 2nd: same day."""
        streak = _started(2)
        plus_five = timezone(timedelta(hours=5))
        result = update(streak, datetime(2026, 3, 3, 1, 0, tzinfo=plus_five))
        assert result == streak

    def test_input_record_is_not_mutated(self):
        streak = _started(2)
        update(streak, MONDAY + timedelta(days=1))
        assert streak.current_streak == 2


class TestWeeklyStreak:
    def test_same_iso_week_is_unchanged(self):
        streak = _started(2, streak_type=StreakType.WEEKLY)
        result = update(streak, MONDAY + timedelta(days=6))  # Sunday
        assert result == streak

    def test_next_week_extends(self):
        streak = _started(2, streak_type=StreakType.WEEKLY)
        result = update(streak, MONDAY + timedelta(days=7))
        assert result.current_streak == 3

    def test_skipped_week_resets(self):
        streak = _started(2, streak_type=StreakType.WEEKLY)
        result = update(streak, MONDAY + timedelta(days=14))
        assert result.current_streak == 1

    def test_consecutive_across_iso_year(self):
        thursday = datetime(2026, 12, 31, 12, tzinfo=timezone.utc)
        next_monday = datetime(2027, 1, 4, 12, tzinfo=timezone.utc)
        assert weeks_between(thursday, next_monday) == 1


class TestStreakRecord:
    def test_longest_must_cover_current(self):
        with pytest.raises(ValidationError):
            StreakRecord(current_streak=3, longest_streak=2)

    @pytest.mark.parametrize("field", ["current_streak", "longest_streak"])
    def test_negative_counts_rejected(self, field):
        with pytest.raises(ValidationError):
            StreakRecord(**{field: -1})
