"""
Core Module - Shared domain records, enums and errors.

Components:
- tiers: Tier and UrgencyClass enums
- models: Immutable data records passed between components
- errors: Engine error taxonomy

All other modules (study/, adaptive/, learning/, delivery/) import their
records from here rather than defining their own.
"""

from study_engine.core.errors import (
    EngineError,
    InvalidInputError,
    OrderingViolationError,
    UnknownReferenceError,
)
from study_engine.core.models import (
    AssessmentQuestion,
    AssessmentResponse,
    Concept,
    Mission,
    ProficiencyResult,
    ReviewSchedule,
    RoutineSettings,
    StreakState,
    TierScore,
)
from study_engine.core.tiers import Tier, UrgencyClass

__all__ = [
    # Enums
    "Tier",
    "UrgencyClass",
    # Records
    "AssessmentQuestion",
    "AssessmentResponse",
    "ProficiencyResult",
    "TierScore",
    "Concept",
    "ReviewSchedule",
    "Mission",
    "RoutineSettings",
    "StreakState",
    # Errors
    "EngineError",
    "InvalidInputError",
    "OrderingViolationError",
    "UnknownReferenceError",
]
