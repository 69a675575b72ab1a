"""
Daily Planner.

Composes the engine for one learner and one instant:
- Proficiency tier (scored from an assessment, or supplied)
- Weakness radar over the learner's concepts
- Reviews due now, ordered by weakness, capped at the daily goal
- Tier-matched missions fitted into the study session length
- Streak display and the next reminder
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, tzinfo
from typing import TYPE_CHECKING, Any, Sequence

from loguru import logger

from study_engine.adaptive.mission_ranker import MissionRanker
from study_engine.adaptive.weakness import WeaknessPrioritizer, WeaknessReport
from study_engine.core.errors import InvalidInputError
from study_engine.core.models import (
    AssessmentQuestion,
    AssessmentResponse,
    Concept,
    Mission,
    ProficiencyResult,
    ReviewSchedule,
    RoutineSettings,
    StreakState,
)
from study_engine.core.tiers import Tier
from study_engine.delivery.reminder import ReminderMessage, ReminderScheduler
from study_engine.learning.streak import StreakMilestone, StreakTracker, local_date
from study_engine.study.proficiency import ProficiencyScorer
from study_engine.study.review_scheduler import ReviewScheduler

if TYPE_CHECKING:
    from config import Settings


@dataclass
class DailyPlan:
    """Everything the learner should see for today."""

    date: date
    tier: Tier
    proficiency: ProficiencyResult | None
    weak_concepts: list[WeaknessReport] = field(default_factory=list)
    due_reviews: list[ReviewSchedule] = field(default_factory=list)
    goal_reviews: list[ReviewSchedule] = field(default_factory=list)
    missions: list[Mission] = field(default_factory=list)
    estimated_minutes: int = 0
    streak_days: int = 0
    streak_milestone: StreakMilestone = StreakMilestone.SEEDLING
    next_reminder: datetime | None = None
    reminder: ReminderMessage | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "tier": self.tier.value,
            "proficiency": self.proficiency.to_dict() if self.proficiency else None,
            "weak_concepts": [r.to_dict() for r in self.weak_concepts],
            "due_reviews": [s.to_dict() for s in self.due_reviews],
            "goal_reviews": [s.to_dict() for s in self.goal_reviews],
            "missions": [m.to_dict() for m in self.missions],
            "estimated_minutes": self.estimated_minutes,
            "streak_days": self.streak_days,
            "streak_milestone": self.streak_milestone.value,
            "next_reminder": self.next_reminder.isoformat() if self.next_reminder else None,
            "reminder": self.reminder.to_dict() if self.reminder else None,
        }


def fit_missions(missions: Sequence[Mission], budget_minutes: int) -> list[Mission]:
    """
    Take missions in rank order while they fit the remaining minutes.

    A mission that does not fit is skipped; later, shorter missions may
    still be taken.
    """
    remaining = budget_minutes
    fitted = []
    for mission in missions:
        if mission.estimated_minutes <= remaining:
            fitted.append(mission)
            remaining -= mission.estimated_minutes
    return fitted


class DailyPlanner:
    """
    Builds a DailyPlan from the learner's current records.

    Holds only component configuration; every plan is computed from the
    arguments of build_plan.
    """

    def __init__(
        self,
        scorer: ProficiencyScorer | None = None,
        prioritizer: WeaknessPrioritizer | None = None,
        scheduler: ReviewScheduler | None = None,
        ranker: MissionRanker | None = None,
        streaks: StreakTracker | None = None,
        reminders: ReminderScheduler | None = None,
        tz: tzinfo | None = None,
    ):
        self.scorer = scorer or ProficiencyScorer()
        self.prioritizer = prioritizer or WeaknessPrioritizer()
        self.scheduler = scheduler or ReviewScheduler(prioritizer=self.prioritizer)
        self.ranker = ranker or MissionRanker()
        self.streaks = streaks or StreakTracker()
        self.reminders = reminders or ReminderScheduler(tz)
        self.tz = tz

    @classmethod
    def from_settings(cls, settings: Settings) -> DailyPlanner:
        prioritizer = WeaknessPrioritizer.from_settings(settings)
        return cls(
            prioritizer=prioritizer,
            scheduler=ReviewScheduler.from_settings(settings),
            ranker=MissionRanker.from_settings(settings),
            reminders=ReminderScheduler(settings.zone),
            tz=settings.zone,
        )

    def build_plan(
        self,
        now: datetime,
        routine: RoutineSettings,
        concepts: Sequence[Concept] = (),
        schedules: Sequence[ReviewSchedule] = (),
        missions: Sequence[Mission] = (),
        tier: Tier | str | None = None,
        responses: Sequence[AssessmentResponse] | None = None,
        catalog: Sequence[AssessmentQuestion] | None = None,
        streak: StreakState | None = None,
    ) -> DailyPlan:
        """
        Compute today's plan.

        Args:
            now: Current instant
            routine: Learner routine settings
            concepts: Concept snapshots for the weakness radar
            schedules: Review schedules
            missions: Mission catalog
            tier: Known learner tier (ignored when an assessment is given)
            responses: Assessment attempt to score for the tier
            catalog: Question catalog for `responses`
            streak: Stored streak state, for display

        Returns:
            DailyPlan

        Raises:
            InvalidInputError: neither a tier nor a full assessment was given
        """
        proficiency = None
        if responses is not None or catalog is not None:
            if responses is None or catalog is None:
                raise InvalidInputError("responses and catalog must be supplied together")
            proficiency = self.scorer.score(responses, catalog)
            tier = proficiency.tier
        elif tier is None:
            raise InvalidInputError("either a tier or an assessment (responses + catalog) is required")
        else:
            try:
                tier = Tier(tier)
            except ValueError:
                raise InvalidInputError(f"Unknown tier: {tier!r}") from None

        today = local_date(now, self.tz) if self.tz else now.date()

        reports = self.prioritizer.assess(concepts, now)
        ranking = [r.concept for r in reports]
        due = self.scheduler.due_today(schedules, now, concepts=ranking)
        ranked_missions = self.ranker.rank(missions, ranking, tier)
        planned = fit_missions(ranked_missions, routine.study_duration_minutes)

        streak_days = self.streaks.streak_as_of(streak, today) if streak else 0
        next_reminder = self.reminders.next_trigger(routine, now)

        logger.debug(
            f"Plan for {today.isoformat()}: tier={tier.value} due={len(due)} "
            f"missions={len(planned)}/{len(ranked_missions)}"
        )

        return DailyPlan(
            date=today,
            tier=tier,
            proficiency=proficiency,
            weak_concepts=reports,
            due_reviews=due,
            goal_reviews=due[: routine.daily_goal],
            missions=planned,
            estimated_minutes=sum(m.estimated_minutes for m in planned),
            streak_days=streak_days,
            streak_milestone=StreakMilestone.for_streak(streak_days),
            next_reminder=next_reminder,
            reminder=self.reminders.build_message(routine, streak_days) if next_reminder else None,
        )
