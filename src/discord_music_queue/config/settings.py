"""Application Settings and Configuration

Pydantic-based settings management using environment variables.
Settings are loaded from environment variables with support for .env files,
type validation, and sensible defaults. All settings are frozen and immutable
after initialization.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, BaseModel, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..domain.shared.messages import ErrorMessages
from ..domain.shared.types import CommandPrefixStr, MaxQueueSize, PositiveFloat, VolumeFloat

_MAX_SNOWFLAKE = 2**64


class DiscordSettings(BaseModel):
    """Discord bot configuration."""

    model_config = SettingsConfigDict(frozen=True, populate_by_name=True)

    token: SecretStr = Field(
        default=SecretStr(""), validation_alias=AliasChoices("token", "bot_token", "discord_token")
    )
    command_prefix: CommandPrefixStr = Field(
        default="!",
        validation_alias=AliasChoices("command_prefix", "prefix"),
    )
    music_command: str = Field(
        default="music",
        min_length=1,
        max_length=32,
        pattern=r"^\S+$",
        validation_alias=AliasChoices("music_command", "command_name"),
    )
    owner_ids: tuple[int, ...] = Field(
        default_factory=tuple, validation_alias=AliasChoices("owner_ids", "owners")
    )

    @field_validator("owner_ids", mode="before")
    @classmethod
    def validate_snowflake_ids(cls, v: tuple[int, ...] | list[int]) -> tuple[int, ...]:
        """Validate Discord snowflake IDs and convert lists to tuples."""
        if isinstance(v, list):
            v = tuple(v)
        for snowflake in v:
            if not 0 < snowflake < _MAX_SNOWFLAKE:
                raise ValueError(f"Invalid Discord snowflake: {snowflake}")
        return v

    @property
    def queue_command(self) -> str:
        """Full command text that lists the queue, used in user hints."""
        return f"{self.command_prefix}{self.music_command} queue"


class MusicSettings(BaseModel):
    """Queue and session behaviour."""

    model_config = SettingsConfigDict(frozen=True, populate_by_name=True)

    dj_role: str = Field(
        default="*", min_length=1, validation_alias=AliasChoices("dj_role", "dj_role_name")
    )
    work_queue_interval_seconds: float = Field(
        default=0.5,
        gt=0.0,
        le=60.0,
        validation_alias=AliasChoices("work_queue_interval_seconds", "work_queue_interval"),
    )
    max_queue_size: MaxQueueSize = 200
    leave_on_empty: bool = False
    search_limit: int = Field(default=5, ge=1, le=25)


class AudioSettings(BaseModel):
    """Audio playback configuration."""

    model_config = SettingsConfigDict(frozen=True, populate_by_name=True)

    default_volume: VolumeFloat = 0.5
    ffmpeg_options: dict[str, str] = Field(
        default_factory=lambda: {
            "before_options": "-reconnect 1 -reconnect_streamed 1 -reconnect_delay_max 5",
            "options": "-vn",
        }
    )
    ytdlp_format: str = "bestaudio/best"
    connect_timeout_seconds: float = Field(default=10.0, gt=0.0, le=120.0)


class Settings(BaseSettings):
    """Application settings container.

    Automatically loads configuration from environment variables.

    Environment variable naming:
    - ENVIRONMENT, DEBUG, LOG_LEVEL, SHUTDOWN_TIMEOUT_SECONDS (top-level)
    - DISCORD__TOKEN, DISCORD__COMMAND_PREFIX, DISCORD__MUSIC_COMMAND
    - MUSIC__DJ_ROLE, MUSIC__MAX_QUEUE_SIZE, MUSIC__LEAVE_ON_EMPTY, ...
    - AUDIO__DEFAULT_VOLUME, AUDIO__YTDLP_FORMAT, ...
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
    shutdown_timeout_seconds: PositiveFloat = 30.0

    discord: DiscordSettings = Field(default_factory=DiscordSettings)
    music: MusicSettings = Field(default_factory=MusicSettings)
    audio: AudioSettings = Field(default_factory=AudioSettings)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(ErrorMessages.INVALID_LOG_LEVEL.format(level=v, valid_levels=valid_levels))
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
