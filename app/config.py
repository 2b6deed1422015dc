# =============================================================================
# app/config.py - Application Settings
# =============================================================================
# This module loads configuration from environment variables using pydantic-settings.
# It provides a single Settings class with all configuration values.
#
# Usage:
#   from app.config import settings
#   print(settings.SUPABASE_URL)
#
# Environment variables are loaded from:
# 1. System environment variables
# 2. .env file in project root (if exists)
#
# Enumerated value sets (subjects, assess, stages, phases, types) are read
# once here and handed to models and services as one immutable
# AssessmentOptions object (see `settings.assessment_options`).
# =============================================================================

import os
from functools import cached_property, lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.models.options import (
    ASSESS,
    PHASES,
    QUESTION_TYPES,
    STAGES,
    SUBJECTS,
    AssessmentOptions,
)


def _split(value: str) -> list[str]:
    """Parse a comma-separated string into a list of trimmed, non-empty items."""
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Uses pydantic-settings to:
    - Automatically load from .env file
    - Validate types and constraints
    - Provide sensible defaults for development

    All settings are accessed via the global `settings` instance.
    """

    # -------------------------------------------------------------------------
    # Supabase Configuration
    # -------------------------------------------------------------------------
    # These are required - app won't start without them

    SUPABASE_URL: str = Field(
        ...,
        description="Supabase project URL (e.g., https://xxx.supabase.co)"
    )

    SUPABASE_SERVICE_KEY: str = Field(
        ...,
        description="Supabase service_role key (bypasses RLS)"
    )

    # -------------------------------------------------------------------------
    # Application Settings
    # -------------------------------------------------------------------------

    ENVIRONMENT: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Current environment"
    )

    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode (verbose logging, auto-reload)"
    )

    API_HOST: str = Field(
        default="0.0.0.0",
        description="Host to bind the API server to"
    )

    API_PORT: int = Field(
        default=8000,
        ge=1,
        le=65535,
        description="Port for the API server"
    )

    API_VERSION: str = Field(
        default="1.0.0",
        description="API version reported by the root endpoint"
    )

    API_PREFIX: str = Field(
        default="",
        description="Prefix resource routers are mounted under (e.g. /v1)"
    )

    # CORS origins (comma-separated string that gets parsed)
    CORS_ORIGINS: str = Field(
        default="*",
        description="Allowed CORS origins (comma-separated)"
    )

    # -------------------------------------------------------------------------
    # Assessment Value Sets
    # -------------------------------------------------------------------------
    # Comma-separated overrides of the enumerated values accepted by models

    ASSESSMENT_INDICATOR_SUBJECTS: str = Field(
        default=",".join(SUBJECTS),
        description="Allowed indicator subjects (comma-separated)"
    )

    ASSESSMENT_QUESTION_TYPES: str = Field(
        default=",".join(QUESTION_TYPES),
        description="Allowed question entry types (comma-separated)"
    )

    ASSESSMENT_ASSESS: str = Field(
        default=",".join(ASSESS),
        description="Allowed assessment kinds (comma-separated)"
    )

    ASSESSMENT_STAGES: str = Field(
        default=",".join(STAGES),
        description="Allowed assessment stages (comma-separated)"
    )

    DISASTER_PHASES: str = Field(
        default=",".join(PHASES),
        description="Allowed disaster management phases (comma-separated)"
    )

    # -------------------------------------------------------------------------
    # Collections
    # -------------------------------------------------------------------------

    INDICATOR_COLLECTION_NAME: str = Field(default="indicators")
    QUESTION_COLLECTION_NAME: str = Field(default="questions")
    QUESTIONNAIRE_COLLECTION_NAME: str = Field(default="questionnaires")

    # -------------------------------------------------------------------------
    # Seeding
    # -------------------------------------------------------------------------

    BASE_PATH: str = Field(
        default_factory=os.getcwd,
        description="Base directory used to resolve SEEDS_PATH"
    )

    SEEDS_PATH: str | None = Field(
        default=None,
        description="Directory holding <seed name>.json fixtures (default: BASE_PATH/seeds)"
    )

    INDICATOR_SEED: str = Field(default="indicators")
    QUESTION_SEED: str = Field(default="questions")
    QUESTIONNAIRE_SEED: str = Field(default="questionnaires")

    SEED_ON_STARTUP: bool = Field(
        default=True,
        description="Seed fixtures when the API starts"
    )

    # -------------------------------------------------------------------------
    # Pydantic Settings Configuration
    # -------------------------------------------------------------------------

    model_config = SettingsConfigDict(
        # Load from .env file in project root
        env_file=".env",
        env_file_encoding="utf-8",
        # Don't fail if .env doesn't exist (useful for production where
        # env vars are set directly)
        env_ignore_empty=True,
        # Case-sensitive environment variable names
        case_sensitive=True,
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------

    @property
    def cors_origins_list(self) -> list[str]:
        """
        Parse CORS_ORIGINS string into a list.

        Example: "http://localhost:3000, https://myapp.com" -> ["http://localhost:3000", "https://myapp.com"]
        """
        return _split(self.CORS_ORIGINS) or ["*"]

    @property
    def seeds_dir(self) -> Path:
        """Directory seed fixtures are loaded from."""
        if self.SEEDS_PATH:
            return Path(self.SEEDS_PATH)
        return Path(self.BASE_PATH) / "seeds"

    @cached_property
    def assessment_options(self) -> AssessmentOptions:
        """
        Immutable value sets shared by all models and services.

        Subjects are sorted and de-duplicated; other sets keep their order.
        """
        return AssessmentOptions(
            subjects=tuple(sorted(set(_split(self.ASSESSMENT_INDICATOR_SUBJECTS)))),
            assess=tuple(dict.fromkeys(_split(self.ASSESSMENT_ASSESS))),
            stages=tuple(dict.fromkeys(_split(self.ASSESSMENT_STAGES))),
            phases=tuple(dict.fromkeys(_split(self.DISASTER_PHASES))),
            types=tuple(dict.fromkeys(_split(self.ASSESSMENT_QUESTION_TYPES))),
        )

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached Settings instance.

    Using lru_cache ensures we only parse .env and validate once,
    not on every access.

    Returns:
        Settings: The application settings instance
    """
    return Settings()


# Global settings instance for easy importing
# Usage: from app.config import settings
settings = get_settings()
