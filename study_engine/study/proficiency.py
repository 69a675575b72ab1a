"""
Proficiency Scorer for the level assessment.

Turns one assessment attempt into a weighted percentage and a tier:
- Each catalog question carries a point weight
- Correct answers earn the question's points
- Unanswered questions count as zero, but their points stay in the denominator

Tier breakpoints: 80 professional, 60 advanced, 40 intermediate, 20 elementary.
"""

from __future__ import annotations

from typing import Iterable, Sequence

from loguru import logger

from study_engine.core.errors import InvalidInputError
from study_engine.core.models import (
    AssessmentQuestion,
    AssessmentResponse,
    ProficiencyResult,
    TierScore,
)
from study_engine.core.tiers import Tier


def _index_catalog(catalog: Iterable[AssessmentQuestion]) -> dict[str, AssessmentQuestion]:
    index: dict[str, AssessmentQuestion] = {}
    for question in catalog:
        if question.id in index:
            raise InvalidInputError(f"Duplicate question id in catalog: {question.id}")
        index[question.id] = question
    return index


def _index_responses(responses: Iterable[AssessmentResponse]) -> dict[str, AssessmentResponse]:
    index: dict[str, AssessmentResponse] = {}
    for response in responses:
        if response.question_id in index:
            raise InvalidInputError(
                f"Question {response.question_id} answered more than once in one attempt"
            )
        index[response.question_id] = response
    return index


class ProficiencyScorer:
    """
    Scores assessment attempts against a question catalog.

    Responses to question ids missing from the catalog are ignored rather
    than failing the attempt, so stale or partial catalogs still score.
    """

    def score(
        self,
        responses: Sequence[AssessmentResponse],
        catalog: Sequence[AssessmentQuestion],
    ) -> ProficiencyResult:
        """
        Score one attempt.

        Args:
            responses: At most one response per question
            catalog: Questions the attempt was drawn from

        Returns:
            ProficiencyResult with percentage (0-100) and tier

        Raises:
            InvalidInputError: duplicate catalog ids or duplicate responses
        """
        questions = _index_catalog(catalog)
        answers = _index_responses(responses)

        possible = sum(q.points for q in questions.values())
        earned = 0
        ignored: list[str] = []

        for question_id, response in answers.items():
            question = questions.get(question_id)
            if question is None:
                ignored.append(question_id)
                continue
            if question.is_correct(response.selected_option_index):
                earned += question.points

        if ignored:
            logger.debug(f"Ignored {len(ignored)} response(s) to unknown questions: {sorted(ignored)}")

        percentage = (100 * earned / possible) if possible else 0.0

        return ProficiencyResult(
            percentage=percentage,
            tier=self.tier_of(percentage),
            earned_points=earned,
            possible_points=possible,
            ignored_question_ids=tuple(sorted(ignored)),
        )

    @staticmethod
    def tier_of(percentage: float) -> Tier:
        """
        Map a percentage to exactly one tier.

        Raises:
            InvalidInputError: percentage outside 0-100
        """
        if not 0 <= percentage <= 100:
            raise InvalidInputError(f"percentage {percentage} outside 0-100")
        return Tier.from_percentage(percentage)

    def breakdown(
        self,
        responses: Sequence[AssessmentResponse],
        catalog: Sequence[AssessmentQuestion],
    ) -> dict[Tier, TierScore]:
        """
        Earned vs. possible points per tier present in the catalog.

        Useful for showing which tier's questions the learner missed.
        Tiers are returned in ascending order.
        """
        questions = _index_catalog(catalog)
        answers = _index_responses(responses)

        earned: dict[Tier, int] = {}
        possible: dict[Tier, int] = {}
        for question in questions.values():
            possible[question.tier] = possible.get(question.tier, 0) + question.points
            response = answers.get(question.id)
            if response is not None and question.is_correct(response.selected_option_index):
                earned[question.tier] = earned.get(question.tier, 0) + question.points

        return {
            tier: TierScore(
                tier=tier,
                earned_points=earned.get(tier, 0),
                possible_points=possible[tier],
            )
            for tier in Tier.ordered()
            if tier in possible
        }
