"""Player configuration.

Nested groups (player, catalog, backend) are read from the environment or a
.env file and validated on load. Group models are frozen.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import AliasChoices, BaseModel, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..domain.music.value_objects import AudioQuality
from ..domain.shared.messages import ErrorMessages


class PlayerSettings(BaseModel):
    """Player engine configuration."""

    model_config = SettingsConfigDict(frozen=True, populate_by_name=True)

    command_bus_capacity: int = Field(
        default=10,
        ge=1,
        le=1000,
        validation_alias=AliasChoices("command_bus_capacity", "bus_capacity"),
    )
    jump_seconds: int = Field(default=15, ge=1, le=600)
    subscriber_buffer: int = Field(default=256, ge=1, le=10_000)
    audio_quality: AudioQuality = Field(
        default=AudioQuality.HIFI96,
        validation_alias=AliasChoices("audio_quality", "quality"),
    )
    search_limit: int = Field(default=10, ge=1, le=500)
    query_cache_ttl_seconds: float = Field(
        default=300.0,
        ge=0.0,
        validation_alias=AliasChoices("query_cache_ttl_seconds", "cache_ttl"),
    )

    @field_validator("audio_quality", mode="before")
    @classmethod
    def parse_audio_quality(cls, v: object) -> object:
        """Accept format ids (``7``) as well as names (``hifi96``)."""
        if isinstance(v, str):
            v = v.strip()
            if v.isdigit():
                return int(v)
            try:
                return AudioQuality[v.upper()]
            except KeyError:
                raise ValueError(f"Unknown audio quality: {v}") from None
        return v


class CatalogSettings(BaseModel):
    """Streaming catalog configuration."""

    model_config = SettingsConfigDict(frozen=True, populate_by_name=True)

    library_path: Path | None = Field(
        default=None, validation_alias=AliasChoices("library_path", "library")
    )
    app_id: str = ""
    user_token: SecretStr = Field(
        default=SecretStr(""), validation_alias=AliasChoices("user_token", "token")
    )
    latency_ms: int = Field(default=0, ge=0, le=60_000)
    page_size: int = Field(default=50, ge=1, le=500)


class BackendSettings(BaseModel):
    """Simulated audio backend configuration."""

    model_config = SettingsConfigDict(frozen=True)

    tick_seconds: float = Field(default=1.0, gt=0.0, le=60.0)
    buffer_steps: int = Field(default=4, ge=1, le=100)
    time_scale: float = Field(default=1.0, gt=0.0, le=1000.0)


class Settings(BaseSettings):
    """Root settings object.

    Variables:
    - ENVIRONMENT, DEBUG, LOG_LEVEL
    - PLAYER__JUMP_SECONDS, PLAYER__AUDIO_QUALITY, etc. (nested with prefix)
    - CATALOG__LIBRARY_PATH, CATALOG__USER_TOKEN, etc.
    - BACKEND__TICK_SECONDS, BACKEND__BUFFER_STEPS
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
    backend: BackendSettings = Field(default_factory=BackendSettings)

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
    """Return the process-wide settings, loading them on first call."""
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing)."""
    get_settings.cache_clear()
