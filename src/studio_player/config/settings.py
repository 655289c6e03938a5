"""Application Settings and Configuration

Pydantic-based settings management using environment variables.
Settings are loaded from environment variables with support for .env files,
type validation, and sensible defaults. All settings are frozen and immutable
after initialization.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..domain.playback.value_objects import NavigationPolicy
from ..domain.shared.messages import ErrorMessages


class PlayerSettings(BaseModel):
    """Playback controller and primitive configuration."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    default_volume: float = Field(
        default=0.8, ge=0.0, le=1.0, validation_alias=AliasChoices("default_volume", "volume")
    )
    navigation_policy: NavigationPolicy = Field(
        default=NavigationPolicy.CLAMP,
        validation_alias=AliasChoices("navigation_policy", "navigation"),
    )
    auto_advance: bool = True
    simulate_missing_audio: bool = Field(
        default=False, validation_alias=AliasChoices("simulate_missing_audio", "simulate")
    )
    simulated_tick_interval: float = Field(default=0.25, gt=0.0, le=5.0)
    simulated_ready_delay: float = Field(default=0.05, ge=0.0, le=5.0)
    backend: Literal["vlc", "simulated"] = "vlc"


class CatalogSettings(BaseModel):
    """Beat store API configuration."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    api_url: str = Field(
        default="http://localhost:3000/api",
        validation_alias=AliasChoices("api_url", "url"),
    )
    timeout_seconds: float = Field(
        default=10.0,
        gt=0.0,
        le=120.0,
        validation_alias=AliasChoices("timeout_seconds", "timeout"),
    )
    retries: int = Field(default=3, ge=0, le=10)
    fallback_to_demo: bool = True

    @field_validator("api_url")
    @classmethod
    def validate_api_url(cls, v: str) -> str:
        """Validate API URL format."""
        if not v.startswith(("http://", "https://")):
            raise ValueError(ErrorMessages.INVALID_API_URL)
        return v.rstrip("/")


class Settings(BaseSettings):
    """Application settings container.

    Automatically loads configuration from environment variables.

    Environment variable naming:
    - ENVIRONMENT, DEBUG, LOG_LEVEL (top-level)
    - PLAYER__DEFAULT_VOLUME, PLAYER__NAVIGATION_POLICY, PLAYER__BACKEND, etc.
    - CATALOG__API_URL, CATALOG__TIMEOUT_SECONDS, CATALOG__RETRIES, etc.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    environment: Literal["development", "production", "test"] = "development"
    debug: bool = False
    log_level: str = "INFO"

    player: PlayerSettings = Field(default_factory=PlayerSettings)
    catalog: CatalogSettings = Field(default_factory=CatalogSettings)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(
                ErrorMessages.INVALID_LOG_LEVEL.format(level=v, valid_levels=valid_levels)
            )
        return v_upper


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached application settings.

    Settings are automatically loaded from:
    1. .env file (if present)
    2. Environment variables
    3. Default values
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing)."""
    get_settings.cache_clear()
