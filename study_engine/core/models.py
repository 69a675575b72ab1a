"""
Plain data records for the engine.

Every record is immutable and validated on construction. Operations take
the current record and return a new one; nothing here is persisted.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import Any

from study_engine.core.errors import InvalidInputError, UnknownReferenceError
from study_engine.core.tiers import Tier


def _coerce_tier(value: Tier | str, owner: str) -> Tier:
    if isinstance(value, Tier):
        return value
    try:
        return Tier(value)
    except ValueError:
        raise InvalidInputError(f"{owner}: unknown tier {value!r}") from None


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _iso(value: date | datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


# =============================================================================
# Assessment
# =============================================================================


@dataclass(frozen=True)
class AssessmentQuestion:
    """A catalog question worth `points` toward the tier it represents."""

    id: str
    tier: Tier
    points: int
    correct_option_index: int

    def __post_init__(self):
        object.__setattr__(self, "tier", _coerce_tier(self.tier, f"question {self.id}"))
        if not _is_int(self.points) or self.points <= 0:
            raise InvalidInputError(f"question {self.id}: points must be a positive integer")
        if not _is_int(self.correct_option_index) or self.correct_option_index < 0:
            raise InvalidInputError(
                f"question {self.id}: correct_option_index must be a non-negative integer"
            )

    def is_correct(self, selected_option_index: int) -> bool:
        return selected_option_index == self.correct_option_index


@dataclass(frozen=True)
class AssessmentResponse:
    """The option a learner picked for one question."""

    question_id: str
    selected_option_index: int

    def __post_init__(self):
        if not _is_int(self.selected_option_index):
            raise InvalidInputError(
                f"response to {self.question_id}: selected_option_index must be an integer"
            )


@dataclass(frozen=True)
class TierScore:
    """Points earned against points available for one tier's questions."""

    tier: Tier
    earned_points: int
    possible_points: int

    @property
    def percentage(self) -> float:
        if self.possible_points == 0:
            return 0.0
        return 100 * self.earned_points / self.possible_points

    def to_dict(self) -> dict[str, Any]:
        return {
            "tier": self.tier.value,
            "earned_points": self.earned_points,
            "possible_points": self.possible_points,
            "percentage": self.percentage,
        }


@dataclass(frozen=True)
class ProficiencyResult:
    """Derived assessment outcome; always recomputable from responses."""

    percentage: float
    tier: Tier
    earned_points: int = 0
    possible_points: int = 0
    ignored_question_ids: tuple[str, ...] = ()

    def raise_for_unknown(self) -> None:
        """Raise UnknownReferenceError if any response was ignored."""
        if self.ignored_question_ids:
            raise UnknownReferenceError("question", self.ignored_question_ids)

    def to_dict(self) -> dict[str, Any]:
        return {
            "percentage": self.percentage,
            "tier": self.tier.value,
            "earned_points": self.earned_points,
            "possible_points": self.possible_points,
            "ignored_question_ids": list(self.ignored_question_ids),
        }


# =============================================================================
# Concepts and Review
# =============================================================================


@dataclass(frozen=True)
class Concept:
    """A learnable topic with its latest practice snapshot."""

    id: str
    name: str
    category: str
    tier: Tier
    last_practiced_at: datetime | None = None
    success_rate: float = 0.0

    def __post_init__(self):
        object.__setattr__(self, "tier", _coerce_tier(self.tier, f"concept {self.id}"))
        rate = self.success_rate
        if isinstance(rate, bool) or not isinstance(rate, (int, float)) or math.isnan(rate):
            raise InvalidInputError(f"concept {self.id}: success_rate must be a number")
        if not 0 <= rate <= 100:
            raise InvalidInputError(f"concept {self.id}: success_rate {rate} outside 0-100")
        if self.last_practiced_at is not None and not isinstance(self.last_practiced_at, datetime):
            raise InvalidInputError(f"concept {self.id}: last_practiced_at must be a datetime")

    @property
    def never_practiced(self) -> bool:
        return self.last_practiced_at is None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "tier": self.tier.value,
            "last_practiced_at": _iso(self.last_practiced_at),
            "success_rate": self.success_rate,
        }


@dataclass(frozen=True)
class ReviewSchedule:
    """Position on the interval ladder and the instant the next review is due."""

    concept_id: str
    interval_index: int
    due_at: datetime

    def __post_init__(self):
        if not _is_int(self.interval_index) or self.interval_index < 0:
            raise InvalidInputError(
                f"schedule {self.concept_id}: interval_index must be a non-negative integer"
            )
        if not isinstance(self.due_at, datetime):
            raise InvalidInputError(f"schedule {self.concept_id}: due_at must be a datetime")

    def to_dict(self) -> dict[str, Any]:
        return {
            "concept_id": self.concept_id,
            "interval_index": self.interval_index,
            "due_at": _iso(self.due_at),
        }


# =============================================================================
# Missions
# =============================================================================


@dataclass(frozen=True)
class Mission:
    """Static practice mission tied to one concept and one tier."""

    id: str
    concept_id: str
    tier: Tier
    estimated_minutes: int = 0
    steps: tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, "tier", _coerce_tier(self.tier, f"mission {self.id}"))
        object.__setattr__(self, "steps", tuple(self.steps))
        if not _is_int(self.estimated_minutes) or self.estimated_minutes < 0:
            raise InvalidInputError(
                f"mission {self.id}: estimated_minutes must be a non-negative integer"
            )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "concept_id": self.concept_id,
            "tier": self.tier.value,
            "estimated_minutes": self.estimated_minutes,
            "steps": list(self.steps),
        }


# =============================================================================
# Routine and Streak
# =============================================================================


@dataclass(frozen=True)
class RoutineSettings:
    """User-configured study routine."""

    daily_goal: int = 5
    reminder_time: time = time(20, 0)
    enabled: bool = False
    study_duration_minutes: int = 15

    def __post_init__(self):
        if not _is_int(self.daily_goal) or self.daily_goal <= 0:
            raise InvalidInputError("daily_goal must be a positive integer")
        if not _is_int(self.study_duration_minutes) or self.study_duration_minutes <= 0:
            raise InvalidInputError("study_duration_minutes must be a positive integer")
        if not isinstance(self.reminder_time, time):
            raise InvalidInputError("reminder_time must be a datetime.time")
        if self.reminder_time.second or self.reminder_time.microsecond:
            raise InvalidInputError("reminder_time is hour and minute only")
        if self.reminder_time.tzinfo is not None:
            raise InvalidInputError("reminder_time is a local wall-clock time without tzinfo")

    def to_dict(self) -> dict[str, Any]:
        return {
            "daily_goal": self.daily_goal,
            "reminder_time": self.reminder_time.strftime("%H:%M"),
            "enabled": self.enabled,
            "study_duration_minutes": self.study_duration_minutes,
        }


@dataclass(frozen=True)
class StreakState:
    """Consecutive-day activity counters."""

    current_streak: int = 0
    longest_streak: int = 0
    total_active_days: int = 0
    last_active_date: date | None = None

    def __post_init__(self):
        for name in ("current_streak", "longest_streak", "total_active_days"):
            value = getattr(self, name)
            if not _is_int(value) or value < 0:
                raise InvalidInputError(f"{name} must be a non-negative integer")
        if self.longest_streak < self.current_streak:
            raise InvalidInputError("longest_streak must be >= current_streak")
        if self.total_active_days < self.current_streak:
            raise InvalidInputError("total_active_days must be >= current_streak")
        if isinstance(self.last_active_date, datetime):
            raise InvalidInputError("last_active_date must be a calendar date, not a datetime")

    def to_dict(self) -> dict[str, Any]:
        return {
            "current_streak": self.current_streak,
            "longest_streak": self.longest_streak,
            "total_active_days": self.total_active_days,
            "last_active_date": _iso(self.last_active_date),
        }
