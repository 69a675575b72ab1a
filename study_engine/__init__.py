"""
study-engine: adaptive proficiency and review scheduling.

Pure, synchronous components over immutable records:
- ProficiencyScorer: assessment answers -> percentage + tier
- WeaknessPrioritizer: practice history -> urgency + ranking
- ReviewScheduler: interval ladder -> next due date, due-now list
- MissionRanker: mission catalog -> recommended queue
- StreakTracker: daily activity -> streak counters
- ReminderScheduler: routine settings -> next reminder instant

Callers own persistence; every operation takes the current state and
returns the next one.
"""

__version__ = "1.0.0"

from study_engine.adaptive import MissionRanker, WeaknessPrioritizer
from study_engine.core import (
    AssessmentQuestion,
    AssessmentResponse,
    Concept,
    EngineError,
    InvalidInputError,
    Mission,
    OrderingViolationError,
    ProficiencyResult,
    ReviewSchedule,
    RoutineSettings,
    StreakState,
    Tier,
    UnknownReferenceError,
    UrgencyClass,
)
from study_engine.delivery import ReminderScheduler
from study_engine.learning import StreakTracker
from study_engine.study import DailyPlanner, ProficiencyScorer, ReviewOutcome, ReviewScheduler

__all__ = [
    "ProficiencyScorer",
    "WeaknessPrioritizer",
    "ReviewScheduler",
    "ReviewOutcome",
    "MissionRanker",
    "StreakTracker",
    "ReminderScheduler",
    "DailyPlanner",
    "AssessmentQuestion",
    "AssessmentResponse",
    "ProficiencyResult",
    "Concept",
    "ReviewSchedule",
    "Mission",
    "RoutineSettings",
    "StreakState",
    "Tier",
    "UrgencyClass",
    "EngineError",
    "InvalidInputError",
    "OrderingViolationError",
    "UnknownReferenceError",
]
