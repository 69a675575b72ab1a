"""
JSON document models for the CLI.

Pydantic handles shape and type checks; each model converts itself into
the engine's immutable records, which apply the domain validation.
Keys are accepted in snake_case or camelCase (dailyGoal, lastPracticedAt, ...).
"""

from __future__ import annotations

from datetime import date, datetime, tzinfo
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from study_engine.core.models import (
    AssessmentQuestion,
    AssessmentResponse,
    Concept,
    Mission,
    ReviewSchedule,
    RoutineSettings,
    StreakState,
)
from study_engine.core.tiers import Tier
from study_engine.delivery.reminder import parse_reminder_time


def _localize(value: datetime | None, tz: tzinfo | None) -> datetime | None:
    """Attach `tz` to naive timestamps; aware ones are kept as given."""
    if value is None or tz is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=tz)


class Document(BaseModel):
    """Base model: camelCase aliases, snake_case names, unknown keys ignored."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


# ========================================
# Records
# ========================================


class QuestionIn(Document):
    id: str
    tier: Tier
    points: int
    correct_option_index: int

    def to_domain(self) -> AssessmentQuestion:
        return AssessmentQuestion(
            id=self.id,
            tier=self.tier,
            points=self.points,
            correct_option_index=self.correct_option_index,
        )


class ResponseIn(Document):
    question_id: str
    selected_option_index: int

    def to_domain(self) -> AssessmentResponse:
        return AssessmentResponse(
            question_id=self.question_id,
            selected_option_index=self.selected_option_index,
        )


class ConceptIn(Document):
    id: str
    name: str = ""
    category: str = ""
    tier: Tier = Tier.NOVICE
    last_practiced_at: datetime | None = None
    success_rate: float = 0.0

    def to_domain(self, tz: tzinfo | None = None) -> Concept:
        return Concept(
            id=self.id,
            name=self.name or self.id,
            category=self.category,
            tier=self.tier,
            last_practiced_at=_localize(self.last_practiced_at, tz),
            success_rate=self.success_rate,
        )


class ScheduleIn(Document):
    concept_id: str
    interval_index: int = 0
    due_at: datetime

    def to_domain(self, tz: tzinfo | None = None) -> ReviewSchedule:
        return ReviewSchedule(
            concept_id=self.concept_id,
            interval_index=self.interval_index,
            due_at=_localize(self.due_at, tz),
        )


class MissionIn(Document):
    id: str
    concept_id: str
    tier: Tier
    estimated_minutes: int = 0
    steps: list[str] = Field(default_factory=list)

    def to_domain(self) -> Mission:
        return Mission(
            id=self.id,
            concept_id=self.concept_id,
            tier=self.tier,
            estimated_minutes=self.estimated_minutes,
            steps=tuple(self.steps),
        )


class RoutineIn(Document):
    """Routine fields; any left out fall back to the supplied defaults."""

    daily_goal: int | None = None
    reminder_time: str | None = None
    enabled: bool | None = None
    study_duration_minutes: int | None = None

    def to_domain(self, defaults: dict[str, Any] | None = None) -> RoutineSettings:
        values = dict(defaults or {})
        values.update(self.model_dump(exclude_none=True))
        if isinstance(values.get("reminder_time"), str):
            values["reminder_time"] = parse_reminder_time(values["reminder_time"])
        return RoutineSettings(**values)


class StreakIn(Document):
    current_streak: int = 0
    longest_streak: int = 0
    total_active_days: int = 0
    last_active_date: date | None = None

    def to_domain(self) -> StreakState:
        return StreakState(
            current_streak=self.current_streak,
            longest_streak=self.longest_streak,
            total_active_days=self.total_active_days,
            last_active_date=self.last_active_date,
        )


# ========================================
# Command Documents
# ========================================


class AssessmentDocument(Document):
    catalog: list[QuestionIn]
    responses: list[ResponseIn] = Field(default_factory=list)

    def questions(self) -> list[AssessmentQuestion]:
        return [q.to_domain() for q in self.catalog]

    def answers(self) -> list[AssessmentResponse]:
        return [r.to_domain() for r in self.responses]


class ConceptsDocument(Document):
    concepts: list[ConceptIn] = Field(default_factory=list)

    def to_domain(self, tz: tzinfo | None = None) -> list[Concept]:
        return [c.to_domain(tz) for c in self.concepts]


class SchedulesDocument(ConceptsDocument):
    schedules: list[ScheduleIn] = Field(default_factory=list)

    def schedule_records(self, tz: tzinfo | None = None) -> list[ReviewSchedule]:
        return [s.to_domain(tz) for s in self.schedules]


class MissionsDocument(ConceptsDocument):
    missions: list[MissionIn] = Field(default_factory=list)

    def mission_records(self) -> list[Mission]:
        return [m.to_domain() for m in self.missions]


class PlanDocument(Document):
    routine: RoutineIn = Field(default_factory=RoutineIn)
    concepts: list[ConceptIn] = Field(default_factory=list)
    schedules: list[ScheduleIn] = Field(default_factory=list)
    missions: list[MissionIn] = Field(default_factory=list)
    tier: Tier | None = None
    catalog: list[QuestionIn] | None = None
    responses: list[ResponseIn] | None = None
    streak: StreakIn | None = None
