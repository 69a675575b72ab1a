"""
Study Reminder Scheduler.

Decides when the next daily reminder fires and what it says. Delivery
(push, email, browser notification) belongs to the caller.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, time, timedelta, timezone, tzinfo

from loguru import logger

from study_engine.core.errors import InvalidInputError
from study_engine.core.models import RoutineSettings
from study_engine.learning.streak import StreakMilestone

_REMINDER_TIME = re.compile(r"^(\d{1,2}):(\d{2})$")


def parse_reminder_time(value: str) -> time:
    """
    Parse a wall-clock "HH:MM" string.

    Raises:
        InvalidInputError: not HH:MM or out of range
    """
    match = _REMINDER_TIME.match(value.strip()) if isinstance(value, str) else None
    if not match:
        raise InvalidInputError(f"reminder time must be HH:MM, got {value!r}")
    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        raise InvalidInputError(f"reminder time out of range: {value!r}")
    return time(hour, minute)


def _before(a: datetime, b: datetime) -> bool:
    """Compare as instants; same-zone aware datetimes otherwise compare wall time and ignore fold."""
    if a.tzinfo is None:
        return a < b
    return a.astimezone(timezone.utc) < b.astimezone(timezone.utc)


@dataclass(frozen=True)
class ReminderMessage:
    """Content of a reminder notification."""

    title: str
    body: str

    def to_dict(self) -> dict[str, str]:
        return {"title": self.title, "body": self.body}


class ReminderScheduler:
    """Computes the single next reminder occurrence."""

    def __init__(self, tz: tzinfo | None = None):
        """
        Args:
            tz: Learner timezone used for aware instants (None keeps `now`'s own zone)
        """
        self.tz = tz

    def next_trigger(
        self,
        settings: RoutineSettings,
        now: datetime,
        tz: tzinfo | None = None,
    ) -> datetime | None:
        """
        Next instant on or after `now` at the configured reminder time.

        Args:
            settings: Routine settings
            now: Current instant; naive values are read as local wall time
            tz: Overrides the scheduler timezone for this call

        Returns:
            The next trigger (aware in the learner zone when `now` is aware),
            or None when reminders are disabled
        """
        if not settings.enabled:
            return None
        if not isinstance(now, datetime):
            raise InvalidInputError("now must be a datetime")

        zone = tz or self.tz
        local_now = now.astimezone(zone) if (now.tzinfo is not None and zone is not None) else now

        candidate = datetime.combine(
            local_now.date(), settings.reminder_time, tzinfo=local_now.tzinfo
        )
        if _before(candidate, local_now):
            # Wall time repeated when clocks fall back: the second occurrence may still be ahead
            repeated = candidate.replace(fold=1)
            if repeated.utcoffset() != candidate.utcoffset() and not _before(repeated, local_now):
                return repeated
            # Roll to tomorrow's wall-clock time, not 24 elapsed hours
            candidate = datetime.combine(
                local_now.date() + timedelta(days=1), settings.reminder_time, tzinfo=local_now.tzinfo
            )
            logger.debug(f"Reminder time {settings.reminder_time:%H:%M} passed; next trigger {candidate.isoformat()}")
        return candidate

    @staticmethod
    def build_message(settings: RoutineSettings, streak: int | None = None) -> ReminderMessage:
        """
        Reminder content for today's routine.

        Args:
            settings: Routine settings (goal and session length)
            streak: Current streak to mention, if any
        """
        body = (
            f"Today's goal: review {settings.daily_goal} "
            f"item{'s' if settings.daily_goal != 1 else ''}. "
            f"Just {settings.study_duration_minutes} minutes is enough!"
        )
        if streak:
            milestone = StreakMilestone.for_streak(streak)
            body += f" {milestone.emoji} Keep your {streak}-day streak going."
        return ReminderMessage(title="📚 Time to study!", body=body)
