"""
Mission Ranker.

Builds the recommended work queue from a static mission catalog:
1. Keep only missions for the learner's exact tier
2. Order by the weakness rank of each mission's concept
3. Missions whose concept is not ranked go last, in catalog order
4. Optionally truncate to the top N
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

from loguru import logger

from study_engine.core.errors import InvalidInputError, UnknownReferenceError
from study_engine.core.models import Concept, Mission
from study_engine.core.tiers import Tier

if TYPE_CHECKING:
    from config import Settings


def _check_limit(limit: int | None) -> None:
    if limit is None:
        return
    if isinstance(limit, bool) or not isinstance(limit, int) or limit < 0:
        raise InvalidInputError(f"limit must be a non-negative integer or None, got {limit!r}")


class MissionRanker:
    """Orders missions against a weakness ranking."""

    def __init__(self, default_limit: int | None = None):
        """
        Args:
            default_limit: Cap applied when rank() is called without a limit
                (None keeps every matching mission)
        """
        _check_limit(default_limit)
        self.default_limit = default_limit

    @classmethod
    def from_settings(cls, settings: Settings) -> MissionRanker:
        return cls(default_limit=settings.mission_limit)

    def rank(
        self,
        missions: Sequence[Mission],
        weak_ranking: Sequence[Concept],
        tier: Tier | str,
        limit: int | None = None,
    ) -> list[Mission]:
        """
        Recommended missions, most urgent concept first.

        Args:
            missions: Mission catalog in catalog order
            weak_ranking: Concepts ordered most urgent first
            tier: Learner tier; only missions of exactly this tier are kept
            limit: Maximum missions to return (falls back to default_limit)

        Returns:
            New list of missions
        """
        _check_limit(limit)
        try:
            tier = Tier(tier)
        except ValueError:
            raise InvalidInputError(f"Unknown tier: {tier!r}") from None
        limit = self.default_limit if limit is None else limit

        position: dict[str, int] = {}
        for rank, concept in enumerate(weak_ranking):
            position.setdefault(concept.id, rank)

        eligible = [m for m in missions if m.tier == tier]
        unranked = len(position)
        ordered = sorted(eligible, key=lambda m: position.get(m.concept_id, unranked))

        orphaned = [m.id for m in ordered if m.concept_id not in position]
        if orphaned:
            logger.debug(f"{len(orphaned)} mission(s) reference unranked concepts and sort last: {orphaned}")

        return ordered if limit is None else ordered[:limit]

    @staticmethod
    def unknown_concepts(missions: Sequence[Mission], weak_ranking: Sequence[Concept]) -> list[str]:
        """Ids of missions whose concept is absent from the ranking, in catalog order."""
        known = {concept.id for concept in weak_ranking}
        return [m.id for m in missions if m.concept_id not in known]

    def check_references(self, missions: Sequence[Mission], weak_ranking: Sequence[Concept]) -> None:
        """
        Strict variant for callers validating catalogs.

        Raises:
            UnknownReferenceError: some mission references an unknown concept
        """
        unknown = self.unknown_concepts(missions, weak_ranking)
        if unknown:
            raise UnknownReferenceError("mission concept", unknown)
