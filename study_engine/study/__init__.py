"""
Study Module.

Provides:
- Level assessment scoring (ProficiencyScorer)
- Interval-ladder review scheduling (ReviewScheduler)
- Daily plan composition (DailyPlanner)
"""

from study_engine.study.proficiency import ProficiencyScorer
from study_engine.study.review_scheduler import (
    LadderConfig,
    ReviewOutcome,
    ReviewScheduler,
)
from study_engine.study.daily_plan import DailyPlan, DailyPlanner

__all__ = [
    "ProficiencyScorer",
    "ReviewScheduler",
    "ReviewOutcome",
    "LadderConfig",
    "DailyPlanner",
    "DailyPlan",
]
