"""Configuration management using pydantic-settings.

Settings are read from environment variables (and an optional ``.env``
file). A JSON config file may be layered on top with
``ArchiveSettings.from_json``.
"""

from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_USER_AGENT = "DiscordBot (https://github.com/starboard-archive, 0.1.0)"


class ArchiveSettings(BaseSettings):
    """Archiver settings with validation."""

    channel_id: str = Field(
        validation_alias=AliasChoices("channel_id", "STARBOARD_CHANNEL_SNOWFLAKE"),
    )
    starting_message_id: str = Field(
        validation_alias=AliasChoices(
            "starting_message_id", "STARBOARD_STARTING_MESSAGE_SNOWFLAKE"
        ),
    )
    output_dir: Path = Field(
        default=Path("./output"),
        validation_alias=AliasChoices("output_dir", "OUTPUT_DIR"),
    )
    downloads_subdir: str = Field(
        default="downloads",
        validation_alias=AliasChoices("downloads_subdir", "DOWNLOADS_SUBDIR"),
    )
    downloads_delay_ms: int = Field(
        default=10,
        ge=0,
        validation_alias=AliasChoices("downloads_delay_ms", "DOWNLOADS_DELAY_MS"),
    )
    discord_token: str = Field(
        validation_alias=AliasChoices("discord_token", "DISCORD_TOKEN"),
    )
    bot_token: bool = Field(
        default=True,
        validation_alias=AliasChoices("bot_token", "DISCORD_BOT_TOKEN"),
    )
    user_agent: str = Field(
        default=DEFAULT_USER_AGENT,
        validation_alias=AliasChoices("user_agent", "DISCORD_USER_AGENT"),
    )
    page_size: int = Field(
        default=100,
        ge=1,
        le=100,
        validation_alias=AliasChoices("page_size", "STARBOARD_PAGE_SIZE"),
    )
    resume_from_archive: bool = Field(
        default=True,
        validation_alias=AliasChoices("resume_from_archive", "STARBOARD_RESUME"),
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )

    @field_validator("channel_id", "starting_message_id", mode="before")
    @classmethod
    def ensure_snowflake(cls, v: Any) -> str:
        """Accept ints or digit strings; snowflakes are stored as text."""
        value = str(v).strip()
        if not value.isdigit():
            raise ValueError(f"expected a numeric snowflake, got {v!r}")
        return value

    @field_validator("downloads_subdir")
    @classmethod
    def ensure_relative_subdir(cls, v: str) -> str:
        if not v or Path(v).is_absolute():
            raise ValueError("downloads_subdir must be a relative directory name")
        return v

    @property
    def authorization(self) -> str:
        """Value for the Authorization header."""
        return f"Bot {self.discord_token}" if self.bot_token else self.discord_token

    @property
    def downloads_dir(self) -> Path:
        return self.output_dir / self.downloads_subdir

    @classmethod
    def from_json(cls, path: str | Path) -> "ArchiveSettings":
        """Load settings from a JSON file, falling back to the environment.

        Values present in the file take precedence over environment variables.

        Args:
            path: Path to the JSON config file

        Returns:
            ArchiveSettings instance with validated configuration
        """
        config_path = Path(path)
        if config_path.exists():
            with open(config_path, "r", encoding="utf-8") as f:
                data = json.load(f)
            return cls(**data)
        return cls()


@lru_cache
def get_settings(config_path: str | None = None) -> ArchiveSettings:
    """Get cached archiver settings.

    Args:
        config_path: Optional JSON config file layered over the environment

    Returns:
        Cached ArchiveSettings instance
    """
    if config_path:
        return ArchiveSettings.from_json(config_path)
    return ArchiveSettings()
