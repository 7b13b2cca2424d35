"""
Configuration settings for Visual DeX.

Uses Pydantic Settings for environment variable management with .env file support.
Every field can be overridden with a VISUAL_DEX_<FIELD> environment variable.
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="VISUAL_DEX_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Storage
    # ========================================
    data_dir: Path = Field(
        default=Path.home() / ".visual_dex",
        description="Directory holding the JSON blob store",
    )
    store_backend: Literal["json", "sql"] = Field(
        default="json",
        description="Key-value backend: one JSON file per key, or a SQL table",
    )
    database_url: str | None = Field(
        default=None,
        description="SQLAlchemy URL for the sql backend (defaults to <data_dir>/state.db)",
    )

    # ========================================
    # Translation
    # ========================================
    translation_endpoint: str = Field(
        default="https://libretranslate.de/translate",
        description="LibreTranslate-compatible endpoint",
    )
    translation_timeout_seconds: float = Field(
        default=10.0,
        description="Timeout for a single remote translation call",
    )
    translation_delay_seconds: float = Field(
        default=0.8,
        description="Pause between sentences in a batch (rate-limit courtesy)",
    )

    # ─── Vision labeling ────────────────────────────────────────────────────────
    vision_endpoint: str = Field(
        default="https://vision.googleapis.com/v1/images:annotate",
        description="Google Vision annotate endpoint",
    )
    vision_api_key: str = Field(
        default="",
        description="Google Vision API key",
    )
    vision_timeout_seconds: float = Field(
        default=15.0,
        description="Timeout for a single labeling call",
    )

    # ========================================
    # Missions & Quota
    # ========================================
    daily_photo_limit: int = Field(
        default=10,
        description="Captures allowed before the cooldown starts",
    )
    cooldown_hours: int = Field(
        default=12,
        description="Length of the healthy-break cooldown",
    )
    missions_per_day: int = Field(
        default=3,
        description="Missions generated per calendar day",
    )
    mission_points: int = Field(
        default=50,
        description="Points awarded for a completed mission",
    )

    # ========================================
    # Languages
    # ========================================
    default_language: Literal["en", "es"] = Field(
        default="en",
        description="UI language used until the user picks one",
    )
    target_language: str = Field(
        default="es",
        description="Language example sentences are translated into",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING",
        description="Logging verbosity level",
    )
    log_file: str | None = Field(
        default=None,
        description="Log file path (None for stderr only)",
    )

    # ========================================
    # Helper Methods
    # ========================================
    def get_database_url(self) -> str:
        """Return the configured SQL URL, falling back to a SQLite file in data_dir."""
        if self.database_url:
            return self.database_url
        return f"sqlite:///{self.data_dir / 'state.db'}"

    def has_vision_configured(self) -> bool:
        """Check if the remote labeler can be called."""
        return bool(self.vision_api_key)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
