"""Configuration management for BMail.

This module handles application configuration using Pydantic settings.
Configuration can be loaded from environment variables or .env files.
"""

import logging
from datetime import datetime
from functools import lru_cache
from pathlib import Path

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from bmail.exceptions import ConfigurationError
from bmail.models import UserIdentity, to_logical_time

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    """Application settings with environment variable support.

    All settings can be overridden via environment variables with
    the BMAIL_ prefix (e.g., BMAIL_LOG_LEVEL).
    """

    model_config = SettingsConfigDict(
        env_prefix="BMAIL_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Seed data
    fixture_path: Path | None = Field(
        default=None,
        description="Optional JSON seed file; the built-in sample mailbox is used when unset",
    )

    # Signed-in identity overrides (fall back to the fixture's user)
    user_name: str | None = Field(
        default=None,
        description="Display name of the signed-in user",
    )
    user_email: str | None = Field(
        default=None,
        description="Address used as the sender of composed mail",
    )
    user_avatar: str | None = Field(
        default=None,
        description="Initials shown as the user's avatar",
    )

    # Logical clock
    frozen_time: datetime = Field(
        default=datetime(2030, 3, 14, 15, 14),
        description=(
            "Logical 'now' used for new mail timestamps and relative time labels. "
            "The system clock is never read."
        ),
    )

    # Application Configuration
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(_LOG_LEVELS)}")
        return level

    @field_validator("frozen_time")
    @classmethod
    def _naive_frozen_time(cls, value: datetime) -> datetime:
        return to_logical_time(value)

    @property
    def log_level_number(self) -> int:
        """Numeric logging level for structlog's filtering logger."""
        return getattr(logging, self.log_level)

    def resolve_identity(self, default: UserIdentity) -> UserIdentity:
        """Apply identity overrides on top of the fixture's user.

        Args:
            default: Identity supplied by the seed fixture.

        Returns:
            UserIdentity: The identity composed mail is sent from.
        """
        overrides = {
            "name": self.user_name,
            "email": self.user_email,
            "avatar": self.user_avatar,
        }
        return default.model_copy(update={k: v for k, v in overrides.items() if v})


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Returns:
        Settings: Application settings instance.

    Raises:
        ConfigurationError: If the environment holds an invalid value.
    """
    try:
        return Settings()
    except ValidationError as e:
        raise ConfigurationError(f"Invalid settings: {e}") from e
