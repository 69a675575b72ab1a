"""
Configuration settings for the study-engine library and CLI.

Uses Pydantic Settings for environment variable management with .env file support.
Every variable is prefixed with STUDY_ENGINE_ (e.g. STUDY_ENGINE_TIMEZONE=Asia/Seoul).
"""
from __future__ import annotations

from datetime import time
from functools import lru_cache
from typing import Literal
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="STUDY_ENGINE_",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING",
        description="Logging verbosity level for the CLI sink",
    )

    # ========================================
    # Calendar
    # ========================================
    timezone: str = Field(
        default="UTC",
        description="IANA zone used to derive learner calendar dates and reminder instants",
    )

    # ========================================
    # Review Scheduling
    # ========================================
    review_ladder_days: list[int] = Field(
        default=[1, 3, 7, 14],
        description="Spaced repetition interval ladder in days (last entry repeats)",
    )

    # ========================================
    # Weakness Radar Thresholds
    # ========================================
    high_urgency_success_rate: float = Field(
        default=50.0,
        description="Success rate strictly below this marks a concept high urgency",
    )
    high_urgency_days: float = Field(
        default=7.0,
        description="Days since practice at or above this marks a concept high urgency",
    )
    medium_urgency_success_rate: float = Field(
        default=70.0,
        description="Success rate strictly below this marks a concept medium urgency",
    )
    medium_urgency_days: float = Field(
        default=3.0,
        description="Days since practice at or above this marks a concept medium urgency",
    )

    # ========================================
    # Missions
    # ========================================
    mission_limit: int | None = Field(
        default=None,
        description="Default cap on recommended missions (None for unlimited)",
    )

    # ========================================
    # Routine Defaults
    # ========================================
    routine_daily_goal: int = Field(
        default=5,
        description="Default number of reviews per day",
    )
    routine_reminder_time: time = Field(
        default=time(20, 0),
        description="Default local reminder time (HH:MM)",
    )
    routine_enabled: bool = Field(
        default=False,
        description="Whether reminders are enabled by default",
    )
    routine_study_duration_minutes: int = Field(
        default=15,
        description="Default study session length in minutes",
    )

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone: {value}") from e
        return value

    @field_validator("review_ladder_days")
    @classmethod
    def _positive_ladder(cls, value: list[int]) -> list[int]:
        if not value:
            raise ValueError("review_ladder_days must not be empty")
        if any(days <= 0 for days in value):
            raise ValueError("review_ladder_days entries must be positive")
        return value

    @property
    def zone(self) -> ZoneInfo:
        """The configured timezone as a tzinfo."""
        return ZoneInfo(self.timezone)

    def get_urgency_config(self) -> dict[str, float]:
        """Urgency thresholds keyed by UrgencyThresholds field name."""
        return {
            "high_success_rate": self.high_urgency_success_rate,
            "high_days": self.high_urgency_days,
            "medium_success_rate": self.medium_urgency_success_rate,
            "medium_days": self.medium_urgency_days,
        }

    def get_routine_config(self) -> dict:
        """Routine defaults keyed by RoutineSettings field name."""
        return {
            "daily_goal": self.routine_daily_goal,
            "reminder_time": self.routine_reminder_time,
            "enabled": self.routine_enabled,
            "study_duration_minutes": self.routine_study_duration_minutes,
        }


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
