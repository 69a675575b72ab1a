"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import json
import os
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from config import get_settings  # noqa: E402
from study_engine.core.models import (  # noqa: E402
    AssessmentQuestion,
    AssessmentResponse,
    Concept,
    Mission,
)


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests (components and CLI together)")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path):
    """Keep tests independent of the developer's environment and .env file."""
    for name in list(os.environ):
        if name.startswith("STUDY_ENGINE_"):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def now():
    """A fixed aware instant: 2024-03-10 12:00 UTC."""
    return datetime(2024, 3, 10, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def sample_catalog():
    """Five questions, one per tier, worth 10/15/20/25/30 points."""
    return [
        AssessmentQuestion(id="q1", tier="novice", points=10, correct_option_index=0),
        AssessmentQuestion(id="q2", tier="elementary", points=15, correct_option_index=1),
        AssessmentQuestion(id="q3", tier="intermediate", points=20, correct_option_index=2),
        AssessmentQuestion(id="q4", tier="advanced", points=25, correct_option_index=3),
        AssessmentQuestion(id="q5", tier="professional", points=30, correct_option_index=0),
    ]


@pytest.fixture
def all_correct(sample_catalog):
    """Responses answering every sample question correctly."""
    return [AssessmentResponse(q.id, q.correct_option_index) for q in sample_catalog]


@pytest.fixture
def make_concept(now):
    """Factory for concepts practiced `days_ago` days before `now`."""

    def _make(concept_id, success_rate=80.0, days_ago=1.0, tier="intermediate", category="grammar"):
        last = None if days_ago is None else now - timedelta(days=days_ago)
        return Concept(
            id=concept_id,
            name=concept_id.replace("-", " ").title(),
            category=category,
            tier=tier,
            last_practiced_at=last,
            success_rate=success_rate,
        )

    return _make


@pytest.fixture
def sample_concepts(make_concept):
    """Concepts spanning every urgency class."""
    return [
        make_concept("articles", success_rate=90.0, days_ago=1),       # low
        make_concept("past-tense", success_rate=40.0, days_ago=2),     # high (rate)
        make_concept("idioms", success_rate=80.0, days_ago=4),         # medium (days)
        make_concept("prepositions", success_rate=85.0, days_ago=10),  # high (days)
    ]


@pytest.fixture
def sample_missions():
    """Mission catalog across two tiers."""
    return [
        Mission(id="m-articles", concept_id="articles", tier="intermediate", estimated_minutes=5),
        Mission(id="m-past", concept_id="past-tense", tier="intermediate", estimated_minutes=10),
        Mission(id="m-idioms", concept_id="idioms", tier="intermediate", estimated_minutes=8),
        Mission(id="m-prep-adv", concept_id="prepositions", tier="advanced", estimated_minutes=12),
        Mission(id="m-prep", concept_id="prepositions", tier="intermediate", estimated_minutes=6),
    ]


@pytest.fixture
def write_json(tmp_path):
    """Write a payload to a JSON file under tmp_path and return its path."""

    def _write(name, payload):
        path = tmp_path / name
        path.write_text(json.dumps(payload), encoding="utf-8")
        return path

    return _write
