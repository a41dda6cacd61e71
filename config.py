"""
Configuration settings for the questcore learning engine.

Uses Pydantic Settings for environment variable management with .env file support.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables (QUESTCORE_*)."""

    model_config = SettingsConfigDict(
        env_prefix="QUESTCORE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Database
    # ========================================
    database_url: str = Field(
        default="sqlite:///data/questcore.db",
        description="SQLAlchemy URL holding subject/skill progress and curriculum state",
    )

    # ========================================
    # Mastery Model
    # ========================================
    mastery_threshold: float = Field(
        default=1.0,
        description="Proficiency at or above which a skill counts as mastered",
    )
    elo_k_factor: float = Field(
        default=0.2,
        description="Elo K-factor for proficiency updates (child-friendly pacing)",
    )

    # ========================================
    # Practice Sessions
    # ========================================
    daily_free_sessions: int = Field(
        default=1,
        ge=0,
        description="Free exercise sessions per subject per calendar day",
    )
    session_problem_count: int = Field(
        default=5,
        ge=1,
        description="Problems generated per exercise session",
    )
    dedup_max_attempts: int = Field(
        default=15,
        ge=1,
        description="Retries per problem when rejecting recently seen prompts",
    )
    recent_prompt_limit: int = Field(
        default=50,
        ge=1,
        description="Prompts remembered per skill for deduplication (process lifetime only)",
    )

    # ========================================
    # Curriculum
    # ========================================
    assisted_unlock_min_attempts: int = Field(
        default=3,
        ge=1,
        description="Attempts (including the pending one) before an assisted unlock is offered",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging verbosity level",
    )
    log_file: str | None = Field(
        default="logs/questcore.log",
        description="Log file path (None for stderr only)",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
