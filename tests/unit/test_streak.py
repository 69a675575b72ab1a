"""
Unit tests for StreakTracker.

Tests cover:
- Consecutive days, gaps and same-day repeats
- Out-of-order rejection
- Local calendar dates across timezones
- Display streak and milestones

Run: pytest tests/unit/test_streak.py -v
"""

from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from study_engine.core.errors import InvalidInputError, OrderingViolationError
from study_engine.core.models import StreakState
from study_engine.learning.streak import StreakMilestone, StreakTracker, local_date

MONDAY = date(2024, 3, 4)
TUESDAY = date(2024, 3, 5)
WEDNESDAY = date(2024, 3, 6)


@pytest.fixture
def tracker():
    return StreakTracker()


class TestRecordActivity:
    """Tests for StreakTracker.record_activity()."""

    def test_first_activity_starts_streak(self, tracker):
        state = tracker.record_activity(StreakState(), MONDAY)
        assert state == StreakState(1, 1, 1, MONDAY)

    def test_next_day_extends_streak(self, tracker):
        state = tracker.record_activity(StreakState(3, 3, 10, MONDAY), TUESDAY)
        assert state.current_streak == 4
        assert state.longest_streak == 4
        assert state.total_active_days == 11
        assert state.last_active_date == TUESDAY

    def test_gap_resets_streak(self, tracker):
        """Monday then Wednesday: streak back to 1, longest kept."""
        state = tracker.record_activity(StreakState(3, 5, 12, MONDAY), WEDNESDAY)
        assert state.current_streak == 1
        assert state.longest_streak == 5
        assert state.total_active_days == 13

    def test_same_day_is_idempotent(self, tracker):
        once = tracker.record_activity(StreakState(2, 4, 6, MONDAY), TUESDAY)
        twice = tracker.record_activity(once, TUESDAY)
        assert twice == once

    def test_earlier_day_rejected_with_state_unchanged(self, tracker):
        state = StreakState(2, 2, 2, TUESDAY)
        with pytest.raises(OrderingViolationError) as exc_info:
            tracker.record_activity(state, MONDAY)
        assert exc_info.value.state is state
        assert exc_info.value.activity_date == MONDAY

    def test_datetime_rejected(self, tracker):
        with pytest.raises(InvalidInputError):
            tracker.record_activity(StreakState(), datetime(2024, 3, 4, 9, 0))

    def test_month_boundary_is_consecutive(self, tracker):
        state = tracker.record_activity(StreakState(1, 1, 1, date(2024, 2, 29)), date(2024, 3, 1))
        assert state.current_streak == 2


class TestLocalDate:
    """Tests for local_date()."""

    def test_utc_afternoon_is_next_day_in_seoul(self):
        """15:30 UTC on the 4th is already 00:30 on the 5th in Seoul."""
        seoul = ZoneInfo("Asia/Seoul")
        instant = datetime(2024, 3, 4, 15, 30, tzinfo=timezone.utc)
        assert local_date(instant, seoul) == TUESDAY
        assert local_date(instant, timezone.utc) == MONDAY

    def test_naive_instant_taken_as_local(self):
        assert local_date(datetime(2024, 3, 4, 23, 59), ZoneInfo("Asia/Seoul")) == MONDAY


class TestStreakAsOf:
    """Tests for the displayed streak."""

    def test_alive_today_and_yesterday(self):
        state = StreakState(4, 4, 4, MONDAY)
        assert StreakTracker.streak_as_of(state, MONDAY) == 4
        assert StreakTracker.streak_as_of(state, TUESDAY) == 4

    def test_broken_after_missed_day(self):
        assert StreakTracker.streak_as_of(StreakState(4, 4, 4, MONDAY), WEDNESDAY) == 0

    def test_no_activity(self):
        assert StreakTracker.streak_as_of(StreakState(), MONDAY) == 0


class TestStreakMilestone:
    @pytest.mark.parametrize(
        "streak,expected",
        [
            (0, StreakMilestone.SEEDLING),
            (2, StreakMilestone.SEEDLING),
            (3, StreakMilestone.SPARK),
            (7, StreakMilestone.FIRE),
            (14, StreakMilestone.STAR),
            (29, StreakMilestone.STAR),
            (30, StreakMilestone.TROPHY),
        ],
    )
    def test_for_streak(self, streak, expected):
        assert StreakMilestone.for_streak(streak) is expected

    def test_emoji(self):
        assert StreakMilestone.FIRE.emoji == "🔥"
        assert StreakMilestone.TROPHY.emoji == "🏆"
