"""
Interval-ladder Review Scheduler.

Each concept under review sits on a fixed ladder of day gaps:

    index:  0   1   2   3
    days:   1   3   7   14   (last entry repeats)

- pass: climb one rung (clamped at the top) and schedule that many days out
- fail: drop to rung 0 and schedule ladder[0] days out

A schedule is due when due_at <= now; overdue schedules are simply due.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import TYPE_CHECKING, Sequence

from loguru import logger

from study_engine.adaptive.weakness import WeaknessPrioritizer
from study_engine.core.errors import InvalidInputError
from study_engine.core.models import Concept, ReviewSchedule

if TYPE_CHECKING:
    from config import Settings

DEFAULT_LADDER_DAYS: tuple[int, ...] = (1, 3, 7, 14)


class ReviewOutcome(str, Enum):
    PASS = "pass"
    FAIL = "fail"

    @classmethod
    def parse(cls, value: ReviewOutcome | str) -> ReviewOutcome:
        if isinstance(value, ReviewOutcome):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise InvalidInputError(f"Unknown review outcome: {value!r}") from None


@dataclass(frozen=True)
class LadderConfig:
    """Configuration for the interval ladder."""

    ladder_days: tuple[int, ...] = DEFAULT_LADDER_DAYS

    def __post_init__(self):
        object.__setattr__(self, "ladder_days", tuple(self.ladder_days))
        if not self.ladder_days:
            raise InvalidInputError("Interval ladder must not be empty")
        if any(isinstance(d, bool) or not isinstance(d, int) or d <= 0 for d in self.ladder_days):
            raise InvalidInputError(f"Interval ladder entries must be positive integers: {self.ladder_days}")

    @property
    def top_index(self) -> int:
        return len(self.ladder_days) - 1

    def interval_for(self, index: int) -> int:
        """Days for a ladder index, repeating the last entry past the end."""
        return self.ladder_days[min(index, self.top_index)]


class ReviewScheduler:
    """
    Pure scheduler over ReviewSchedule records.

    Every call is a function of its arguments only; calling next_due twice
    with the same inputs yields equal schedules.
    """

    def __init__(
        self,
        config: LadderConfig | None = None,
        prioritizer: WeaknessPrioritizer | None = None,
    ):
        """
        Initialize scheduler.

        Args:
            config: Ladder configuration (uses 1/3/7/14 days if None)
            prioritizer: Orders due reviews when concepts are supplied
        """
        self.config = config or LadderConfig()
        self.prioritizer = prioritizer or WeaknessPrioritizer()

    @classmethod
    def from_settings(cls, settings: Settings) -> ReviewScheduler:
        return cls(
            LadderConfig(tuple(settings.review_ladder_days)),
            WeaknessPrioritizer.from_settings(settings),
        )

    def new_schedule(self, concept_id: str, now: datetime) -> ReviewSchedule:
        """Schedule for a concept entering review: bottom rung, due immediately."""
        return ReviewSchedule(concept_id=concept_id, interval_index=0, due_at=now)

    def next_due(
        self,
        schedule: ReviewSchedule,
        outcome: ReviewOutcome | str,
        now: datetime,
    ) -> ReviewSchedule:
        """
        Calculate the schedule after a completed review.

        Args:
            schedule: Current schedule for the concept
            outcome: "pass" or "fail"
            now: Instant the review was completed

        Returns:
            New ReviewSchedule; the input is left unchanged
        """
        result = ReviewOutcome.parse(outcome)
        if not isinstance(now, datetime):
            raise InvalidInputError("now must be a datetime")

        if result is ReviewOutcome.PASS:
            current = min(schedule.interval_index, self.config.top_index)
            new_index = min(current + 1, self.config.top_index)
        else:
            new_index = 0

        interval = self.config.interval_for(new_index)
        return ReviewSchedule(
            concept_id=schedule.concept_id,
            interval_index=new_index,
            due_at=now + timedelta(days=interval),
        )

    def due_today(
        self,
        schedules: Sequence[ReviewSchedule],
        now: datetime,
        concepts: Sequence[Concept] | None = None,
    ) -> list[ReviewSchedule]:
        """
        All schedules due at `now`, including overdue ones.

        Args:
            schedules: Schedules to filter
            now: Current instant
            concepts: When given, due schedules follow the weakness ranking
                of these concepts; schedules for other concepts come after,
                earliest due first

        Returns:
            Due schedules in review order
        """
        try:
            due = [s for s in schedules if s.due_at <= now]
        except TypeError:
            raise InvalidInputError("cannot compare naive and timezone-aware datetimes") from None

        by_due_at = sorted(due, key=lambda s: s.due_at)
        if concepts is None:
            return by_due_at

        position = {
            concept.id: rank
            for rank, concept in enumerate(self.prioritizer.rank(concepts, now))
        }
        ranked = sorted(
            (s for s in by_due_at if s.concept_id in position),
            key=lambda s: position[s.concept_id],
        )
        unranked = [s for s in by_due_at if s.concept_id not in position]
        if unranked:
            logger.debug(f"{len(unranked)} due schedule(s) have no matching concept; ordered by due date")
        return ranked + unranked
