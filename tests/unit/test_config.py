"""
Unit tests for Settings.

Run: pytest tests/unit/test_config.py -v
"""

from datetime import time
from zoneinfo import ZoneInfo

import pytest
from pydantic import ValidationError

from config import Settings, get_settings
from study_engine.study.daily_plan import DailyPlanner
from study_engine.study.review_scheduler import ReviewScheduler


class TestSettings:
    def test_defaults(self):
        settings = Settings()
        assert settings.log_level == "WARNING"
        assert settings.zone == ZoneInfo("UTC")
        assert settings.review_ladder_days == [1, 3, 7, 14]
        assert settings.get_urgency_config() == {
            "high_success_rate": 50.0,
            "high_days": 7.0,
            "medium_success_rate": 70.0,
            "medium_days": 3.0,
        }
        assert settings.mission_limit is None

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("STUDY_ENGINE_TIMEZONE", "Asia/Seoul")
        monkeypatch.setenv("STUDY_ENGINE_REVIEW_LADDER_DAYS", "[1, 2, 4, 8, 16]")
        monkeypatch.setenv("STUDY_ENGINE_ROUTINE_REMINDER_TIME", "07:30")
        settings = Settings()
        assert settings.zone == ZoneInfo("Asia/Seoul")
        assert settings.review_ladder_days == [1, 2, 4, 8, 16]
        assert settings.get_routine_config()["reminder_time"] == time(7, 30)

    def test_env_file(self, tmp_path):
        (tmp_path / ".env").write_text("STUDY_ENGINE_MISSION_LIMIT=3\n", encoding="utf-8")
        assert Settings().mission_limit == 3

    def test_unknown_timezone_rejected(self, monkeypatch):
        monkeypatch.setenv("STUDY_ENGINE_TIMEZONE", "Mars/Olympus_Mons")
        with pytest.raises(ValidationError):
            Settings()

    @pytest.mark.parametrize("ladder", ["[]", "[1, 0, 7]"])
    def test_invalid_ladder_rejected(self, monkeypatch, ladder):
        monkeypatch.setenv("STUDY_ENGINE_REVIEW_LADDER_DAYS", ladder)
        with pytest.raises(ValidationError):
            Settings()

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()

    def test_components_built_from_settings(self, monkeypatch):
        monkeypatch.setenv("STUDY_ENGINE_REVIEW_LADDER_DAYS", "[2, 4]")
        monkeypatch.setenv("STUDY_ENGINE_TIMEZONE", "Asia/Seoul")
        settings = Settings()

        assert ReviewScheduler.from_settings(settings).config.ladder_days == (2, 4)
        planner = DailyPlanner.from_settings(settings)
        assert planner.tz == ZoneInfo("Asia/Seoul")
        assert planner.reminders.tz == ZoneInfo("Asia/Seoul")
