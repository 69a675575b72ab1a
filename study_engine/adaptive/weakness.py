"""
Weakness Prioritizer (learning radar).

Classifies concepts by review urgency and ranks them most urgent first:
- Success rate: long-run accuracy on the concept (0-100)
- Recency: days since the concept was last practiced

Urgency rules (first match wins):
    high   - success rate < 50 OR >= 7 days since practice
    medium - success rate < 70 OR >= 3 days since practice
    low    - everything else

Ranking keys: urgency (high first), days since practice (descending),
success rate (ascending), then input order.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Sequence

from study_engine.core.errors import InvalidInputError
from study_engine.core.models import Concept
from study_engine.core.tiers import UrgencyClass

if TYPE_CHECKING:
    from config import Settings

SECONDS_PER_DAY = 86400.0


@dataclass(frozen=True)
class UrgencyThresholds:
    """Cut-offs for the urgency classes."""

    high_success_rate: float = 50.0
    high_days: float = 7.0
    medium_success_rate: float = 70.0
    medium_days: float = 3.0

    def __post_init__(self):
        for name in ("high_success_rate", "medium_success_rate"):
            if not 0 <= getattr(self, name) <= 100:
                raise InvalidInputError(f"{name} must be within 0-100")
        for name in ("high_days", "medium_days"):
            if getattr(self, name) < 0:
                raise InvalidInputError(f"{name} must be non-negative")
        if self.medium_success_rate < self.high_success_rate:
            raise InvalidInputError("medium_success_rate must be >= high_success_rate")
        if self.medium_days > self.high_days:
            raise InvalidInputError("medium_days must be <= high_days")


@dataclass(frozen=True)
class WeaknessReport:
    """A concept annotated with its urgency at query time."""

    concept: Concept
    urgency: UrgencyClass
    days_since_practice: float
    rank: int

    def to_dict(self) -> dict:
        return {
            "rank": self.rank,
            "concept": self.concept.to_dict(),
            "urgency": self.urgency.value,
            "days_since_practice": (
                None if math.isinf(self.days_since_practice) else round(self.days_since_practice, 2)
            ),
        }


def days_since_practice(concept: Concept, now: datetime) -> float:
    """
    Fractional days between the last practice and `now`.

    Returns +inf for concepts never practiced and 0 for practice
    timestamps later than `now`.

    Raises:
        InvalidInputError: `now` is not a datetime, or it mixes naive and
            aware datetimes with the practice timestamp
    """
    if not isinstance(now, datetime):
        raise InvalidInputError(f"now must be a datetime, got {type(now).__name__}")
    if concept.never_practiced:
        return math.inf
    try:
        elapsed = now - concept.last_practiced_at
    except TypeError:
        raise InvalidInputError(
            f"concept {concept.id}: cannot compare naive and timezone-aware datetimes"
        ) from None
    return max(elapsed.total_seconds() / SECONDS_PER_DAY, 0.0)


class WeaknessPrioritizer:
    """
    Urgency classification and ranking for review.

    Stateless apart from its thresholds; safe to share between learners.
    """

    def __init__(self, thresholds: UrgencyThresholds | None = None):
        """
        Initialize prioritizer with configurable thresholds.

        Args:
            thresholds: Urgency cut-offs (defaults: 50% / 7 days high, 70% / 3 days medium)
        """
        self.thresholds = thresholds or UrgencyThresholds()

    @classmethod
    def from_settings(cls, settings: Settings) -> WeaknessPrioritizer:
        return cls(UrgencyThresholds(**settings.get_urgency_config()))

    def classify(self, concept: Concept, now: datetime) -> UrgencyClass:
        """Urgency of a single concept at `now`."""
        return self._classify(concept, days_since_practice(concept, now))

    def _classify(self, concept: Concept, days: float) -> UrgencyClass:
        t = self.thresholds
        if concept.success_rate < t.high_success_rate or days >= t.high_days:
            return UrgencyClass.HIGH
        if concept.success_rate < t.medium_success_rate or days >= t.medium_days:
            return UrgencyClass.MEDIUM
        return UrgencyClass.LOW

    def priority_key(self, concept: Concept, now: datetime) -> tuple[int, float, float]:
        """
        Sort key placing the most urgent concept first under ascending sort.

        Returns:
            (negated urgency weight, negated days since practice, success rate)
        """
        days = days_since_practice(concept, now)
        urgency = self._classify(concept, days)
        return (-urgency.weight, -days, concept.success_rate)

    def rank(self, concepts: Sequence[Concept], now: datetime) -> list[Concept]:
        """
        Concepts ordered most urgent first.

        The sort is stable: concepts equal on every key keep their input
        order. The input sequence is not modified.
        """
        return sorted(concepts, key=lambda c: self.priority_key(c, now))

    def assess(self, concepts: Sequence[Concept], now: datetime) -> list[WeaknessReport]:
        """Ranked concepts with urgency and recency attached, rank starting at 1."""
        reports = []
        for position, concept in enumerate(self.rank(concepts, now), start=1):
            days = days_since_practice(concept, now)
            reports.append(
                WeaknessReport(
                    concept=concept,
                    urgency=self._classify(concept, days),
                    days_since_practice=days,
                    rank=position,
                )
            )
        return reports
