"""
Unit tests for ProficiencyScorer.

Tests cover:
- Weighted percentage over the whole catalog
- Tier breakpoints and monotonicity
- Unknown and duplicate responses
- Per-tier breakdown

Run: pytest tests/unit/test_proficiency.py -v
"""

import random

import pytest

from study_engine.core.errors import InvalidInputError, UnknownReferenceError
from study_engine.core.models import AssessmentQuestion, AssessmentResponse
from study_engine.core.tiers import Tier
from study_engine.study.proficiency import ProficiencyScorer


@pytest.fixture
def scorer():
    return ProficiencyScorer()


class TestScore:
    """Tests for ProficiencyScorer.score()."""

    def test_two_of_three_equal_questions_is_advanced(self, scorer):
        """10/10/10 catalog with Q1 and Q3 correct scores 66.67% -> advanced."""
        catalog = [
            AssessmentQuestion("Q1", Tier.NOVICE, 10, 0),
            AssessmentQuestion("Q2", Tier.INTERMEDIATE, 10, 1),
            AssessmentQuestion("Q3", Tier.ADVANCED, 10, 2),
        ]
        responses = [
            AssessmentResponse("Q1", 0),
            AssessmentResponse("Q2", 3),
            AssessmentResponse("Q3", 2),
        ]

        result = scorer.score(responses, catalog)

        assert round(result.percentage, 2) == 66.67
        assert result.tier is Tier.ADVANCED
        assert result.earned_points == 20
        assert result.possible_points == 30

    def test_all_correct_is_professional(self, scorer, sample_catalog, all_correct):
        result = scorer.score(all_correct, sample_catalog)
        assert result.percentage == 100.0
        assert result.tier is Tier.PROFESSIONAL

    def test_unanswered_questions_stay_in_denominator(self, scorer, sample_catalog):
        """Only q1 (10) and q2 (15) answered correctly out of 100 points."""
        responses = [AssessmentResponse("q1", 0), AssessmentResponse("q2", 1)]
        result = scorer.score(responses, sample_catalog)
        assert result.percentage == 25.0
        assert result.tier is Tier.ELEMENTARY

    def test_no_responses_is_novice(self, scorer, sample_catalog):
        result = scorer.score([], sample_catalog)
        assert result.percentage == 0.0
        assert result.tier is Tier.NOVICE

    def test_empty_catalog_scores_zero(self, scorer):
        result = scorer.score([AssessmentResponse("q1", 0)], [])
        assert result.percentage == 0.0
        assert result.tier is Tier.NOVICE
        assert result.ignored_question_ids == ("q1",)

    def test_unknown_question_ids_are_ignored(self, scorer, sample_catalog, all_correct):
        responses = all_correct + [AssessmentResponse("retired-question", 0)]
        result = scorer.score(responses, sample_catalog)
        assert result.percentage == 100.0
        assert result.possible_points == 100
        assert result.ignored_question_ids == ("retired-question",)

    def test_raise_for_unknown_is_opt_in(self, scorer, sample_catalog):
        result = scorer.score([AssessmentResponse("ghost", 1)], sample_catalog)
        with pytest.raises(UnknownReferenceError) as exc_info:
            result.raise_for_unknown()
        assert exc_info.value.ids == ("ghost",)
        assert exc_info.value.kind == "question"

    def test_duplicate_response_rejected(self, scorer, sample_catalog):
        responses = [AssessmentResponse("q1", 0), AssessmentResponse("q1", 1)]
        with pytest.raises(InvalidInputError):
            scorer.score(responses, sample_catalog)

    def test_duplicate_catalog_id_rejected(self, scorer):
        catalog = [
            AssessmentQuestion("q1", Tier.NOVICE, 10, 0),
            AssessmentQuestion("q1", Tier.ADVANCED, 25, 1),
        ]
        with pytest.raises(InvalidInputError):
            scorer.score([], catalog)

    def test_result_independent_of_ordering(self, scorer, sample_catalog):
        """Shuffling responses and catalog never changes the result."""
        responses = [
            AssessmentResponse("q1", 0),
            AssessmentResponse("q3", 2),
            AssessmentResponse("q4", 0),
            AssessmentResponse("q5", 0),
        ]
        expected = scorer.score(responses, sample_catalog)

        rng = random.Random(7)
        for _ in range(20):
            shuffled_responses = responses[:]
            shuffled_catalog = sample_catalog[:]
            rng.shuffle(shuffled_responses)
            rng.shuffle(shuffled_catalog)
            assert scorer.score(shuffled_responses, shuffled_catalog) == expected


class TestTierOf:
    """Tests for the percentage -> tier mapping."""

    @pytest.mark.parametrize(
        "percentage,expected",
        [
            (0, Tier.NOVICE),
            (19.99, Tier.NOVICE),
            (20, Tier.ELEMENTARY),
            (39.99, Tier.ELEMENTARY),
            (40, Tier.INTERMEDIATE),
            (60, Tier.ADVANCED),
            (79.99, Tier.ADVANCED),
            (80, Tier.PROFESSIONAL),
            (100, Tier.PROFESSIONAL),
        ],
    )
    def test_breakpoints_are_inclusive_lower_bounds(self, percentage, expected):
        assert ProficiencyScorer.tier_of(percentage) is expected

    def test_monotonic(self):
        """For p1 < p2, tier_of(p1) <= tier_of(p2)."""
        samples = [x / 4 for x in range(0, 401)]
        tiers = [ProficiencyScorer.tier_of(p) for p in samples]
        assert all(a <= b for a, b in zip(tiers, tiers[1:]))

    @pytest.mark.parametrize("percentage", [-0.1, 100.1])
    def test_out_of_range_rejected(self, percentage):
        with pytest.raises(InvalidInputError):
            ProficiencyScorer.tier_of(percentage)


class TestBreakdown:
    """Tests for per-tier points."""

    def test_breakdown_by_tier(self, scorer, sample_catalog):
        responses = [AssessmentResponse("q1", 0), AssessmentResponse("q4", 0)]
        breakdown = scorer.breakdown(responses, sample_catalog)

        assert list(breakdown) == Tier.ordered()
        assert breakdown[Tier.NOVICE].earned_points == 10
        assert breakdown[Tier.NOVICE].percentage == 100.0
        assert breakdown[Tier.ADVANCED].earned_points == 0
        assert breakdown[Tier.ADVANCED].possible_points == 25

    def test_breakdown_omits_tiers_without_questions(self, scorer):
        catalog = [
            AssessmentQuestion("a", Tier.ADVANCED, 10, 0),
            AssessmentQuestion("b", Tier.NOVICE, 10, 0),
        ]
        breakdown = scorer.breakdown([], catalog)
        assert list(breakdown) == [Tier.NOVICE, Tier.ADVANCED]
