"""Daily activity tracking."""

from study_engine.learning.streak import StreakMilestone, StreakTracker, local_date

__all__ = ["StreakTracker", "StreakMilestone", "local_date"]
