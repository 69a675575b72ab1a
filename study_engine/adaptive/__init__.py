"""
Adaptive Prioritization.

Components:
- WeaknessPrioritizer: Urgency classification and ranking of concepts
- MissionRanker: Orders tier-matched missions by concept urgency
"""
from study_engine.adaptive.weakness import (
    UrgencyThresholds,
    WeaknessPrioritizer,
    WeaknessReport,
    days_since_practice,
)
from study_engine.adaptive.mission_ranker import MissionRanker

__all__ = [
    "WeaknessPrioritizer",
    "UrgencyThresholds",
    "WeaknessReport",
    "days_since_practice",
    "MissionRanker",
]
