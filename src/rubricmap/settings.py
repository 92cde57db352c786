# src/rubricmap/settings.py
from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class RubricMapSettings(BaseSettings):
    """
    Centralized configuration for rubricmap.

    Convention:
      - All rubricmap-specific vars use the RUBRICMAP_ prefix.
      - Values may also come from a local `.env` file; the environment wins.
    """

    model_config = SettingsConfigDict(
        env_prefix="RUBRICMAP_",
        env_file=".env",
        extra="ignore",
    )

    # General
    log_level: str = "INFO"

    # Default rubric document used by the CLI when no path is given.
    rubric_path: str | None = None

    # Decimal places of the normalized 0-100 score.
    score_precision: int = Field(default=2, ge=0, le=10)

    # Tag legacy label-matched sections with their scoring rule at load time.
    legacy_rules: bool = True


@lru_cache(maxsize=1)
def get_settings() -> RubricMapSettings:
    """
    Load settings once (env/.env) and cache.
    """
    return RubricMapSettings()


def reload_settings() -> RubricMapSettings:
    """
    Clear cache and reload; useful in tests.
    """
    get_settings.cache_clear()
    return get_settings()
