"""Reminder timing and content."""

from study_engine.delivery.reminder import (
    ReminderMessage,
    ReminderScheduler,
    parse_reminder_time,
)

__all__ = ["ReminderScheduler", "ReminderMessage", "parse_reminder_time"]
