"""
Proficiency tiers and review urgency classes.

Both are str enums so they serialize as their plain values.
"""

from __future__ import annotations

from enum import Enum


class Tier(str, Enum):
    """
    Learner proficiency tier.

    Ordered novice < elementary < intermediate < advanced < professional.
    """

    NOVICE = "novice"
    ELEMENTARY = "elementary"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    PROFESSIONAL = "professional"

    @classmethod
    def ordered(cls) -> list[Tier]:
        """All tiers from lowest to highest."""
        return list(cls)

    @classmethod
    def from_percentage(cls, percentage: float) -> Tier:
        """
        Convert a 0-100 assessment percentage to a tier.

        Breakpoints are inclusive lower bounds, checked top-down.

        Args:
            percentage: Assessment score between 0 and 100

        Returns:
            Corresponding Tier
        """
        for lower_bound, tier in TIER_BREAKPOINTS:
            if percentage >= lower_bound:
                return tier
        return cls.NOVICE

    @property
    def rank(self) -> int:
        """Position in the tier ordering (novice = 0)."""
        return _TIER_RANK[self]

    @property
    def display_name(self) -> str:
        """Human-readable name."""
        return self.value.title()

    @property
    def emoji(self) -> str:
        """Status emoji for CLI display."""
        return {
            Tier.NOVICE: "🌱",
            Tier.ELEMENTARY: "🌿",
            Tier.INTERMEDIATE: "🌳",
            Tier.ADVANCED: "🎓",
            Tier.PROFESSIONAL: "💼",
        }[self]

    @property
    def color(self) -> str:
        """Rich color for CLI display."""
        return {
            Tier.NOVICE: "green",
            Tier.ELEMENTARY: "bright_green",
            Tier.INTERMEDIATE: "blue",
            Tier.ADVANCED: "magenta",
            Tier.PROFESSIONAL: "red",
        }[self]

    def __lt__(self, other):
        if not isinstance(other, Tier):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other):
        if not isinstance(other, Tier):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other):
        if not isinstance(other, Tier):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other):
        if not isinstance(other, Tier):
            return NotImplemented
        return self.rank >= other.rank


_TIER_RANK = {tier: position for position, tier in enumerate(Tier)}

# Highest bound first
TIER_BREAKPOINTS: tuple[tuple[float, Tier], ...] = (
    (80.0, Tier.PROFESSIONAL),
    (60.0, Tier.ADVANCED),
    (40.0, Tier.INTERMEDIATE),
    (20.0, Tier.ELEMENTARY),
)


class UrgencyClass(str, Enum):
    """How soon a concept should be reviewed."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def weight(self) -> int:
        """Larger is more urgent."""
        return {
            UrgencyClass.HIGH: 3,
            UrgencyClass.MEDIUM: 2,
            UrgencyClass.LOW: 1,
        }[self]

    @property
    def color(self) -> str:
        """Rich color for CLI display."""
        return {
            UrgencyClass.HIGH: "red",
            UrgencyClass.MEDIUM: "yellow",
            UrgencyClass.LOW: "green",
        }[self]
