"""
Daily Streak Tracker.

State machine over calendar days in the learner's own timezone:

    last_active_date -> activity_date
    (none)           -> any day        current = 1
    same day         -> same day       no-op
    day D            -> day D + 1      current += 1
    day D            -> day D + k>1    current = 1 (gap)
    day D            -> earlier day    rejected (OrderingViolationError)

Instants are converted to calendar dates by the caller via local_date(),
so a late-night session never lands on the wrong day.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, timedelta, tzinfo
from enum import Enum

from loguru import logger

from study_engine.core.errors import InvalidInputError, OrderingViolationError
from study_engine.core.models import StreakState


class StreakMilestone(str, Enum):
    """Badge earned by the length of the current streak."""

    SEEDLING = "seedling"
    SPARK = "spark"
    FIRE = "fire"
    STAR = "star"
    TROPHY = "trophy"

    @classmethod
    def for_streak(cls, streak: int) -> StreakMilestone:
        if streak >= 30:
            return cls.TROPHY
        if streak >= 14:
            return cls.STAR
        if streak >= 7:
            return cls.FIRE
        if streak >= 3:
            return cls.SPARK
        return cls.SEEDLING

    @property
    def emoji(self) -> str:
        return {
            StreakMilestone.SEEDLING: "🌱",
            StreakMilestone.SPARK: "✨",
            StreakMilestone.FIRE: "🔥",
            StreakMilestone.STAR: "⭐",
            StreakMilestone.TROPHY: "🏆",
        }[self]


def local_date(instant: datetime, tz: tzinfo) -> date:
    """
    Calendar date of `instant` in the learner's timezone.

    Naive instants are taken to already be local wall time.
    """
    if instant.tzinfo is None:
        return instant.date()
    return instant.astimezone(tz).date()


def _require_calendar_date(value: date) -> None:
    # datetime is a date subclass; reject it so instants never sneak in
    if isinstance(value, datetime) or not isinstance(value, date):
        raise InvalidInputError(
            f"activity_date must be a calendar date, got {type(value).__name__}; use local_date()"
        )


class StreakTracker:
    """Pure transitions over StreakState."""

    def record_activity(self, state: StreakState, activity_date: date) -> StreakState:
        """
        Record that the learner was active on `activity_date`.

        Recording the same day twice returns the state unchanged.

        Args:
            state: Current streak state
            activity_date: Local calendar date of the activity

        Returns:
            Next StreakState

        Raises:
            InvalidInputError: activity_date is not a plain date
            OrderingViolationError: activity_date precedes last_active_date
        """
        _require_calendar_date(activity_date)
        last = state.last_active_date

        if last is None:
            current = 1
        elif activity_date == last:
            return state
        elif activity_date < last:
            logger.warning(
                f"Rejected out-of-order activity on {activity_date.isoformat()} "
                f"(last active {last.isoformat()})"
            )
            raise OrderingViolationError(state, activity_date)
        elif activity_date - last == timedelta(days=1):
            current = state.current_streak + 1
        else:
            logger.debug(
                f"Streak of {state.current_streak} broken by a {(activity_date - last).days - 1}-day gap"
            )
            current = 1

        return replace(
            state,
            current_streak=current,
            longest_streak=max(state.longest_streak, current),
            total_active_days=state.total_active_days + 1,
            last_active_date=activity_date,
        )

    @staticmethod
    def streak_as_of(state: StreakState, today: date) -> int:
        """
        Streak to display on `today`.

        A streak stays alive until the end of the day after the last
        activity; after that it is shown as 0 even though the stored
        counter resets only when the next activity is recorded.
        """
        _require_calendar_date(today)
        last = state.last_active_date
        if last is None or today - last > timedelta(days=1):
            return 0
        return state.current_streak
