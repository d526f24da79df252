"""Application configuration using Pydantic Settings.

This module centralizes runtime configuration for the scheduling engine. Values
can be provided via environment variables (preferred) or fall back to the
defaults below. A ``Settings`` instance is intended to be retrieved via
``get_settings`` which caches the object for reuse across the process.

Environment variable prefix: ``SURGERY_AGENDA_`` (e.g. ``SURGERY_AGENDA_LOG_LEVEL``).
"""

from functools import lru_cache
from typing import Literal

import arrow
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime settings.

    Attributes map directly to environment variables using the ``SURGERY_AGENDA_``
    prefix (case-insensitive). For example, ``display_timezone`` <-
    ``SURGERY_AGENDA_DISPLAY_TIMEZONE``.
    """

    log_level: Literal["TRACE", "DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Application log level",
    )
    display_timezone: str = Field(
        default="America/Sao_Paulo",
        description="Timezone used to bucket surgeries into calendar days",
    )  # fmt: skip

    # Storage settings
    database_url: str | None = Field(
        default=None,
        description="Database connection string for the SQL surgery store",
    )  # fmt: skip
    sql_log: bool = Field(
        default=False,
        description="Enable SQL query logging",
    )  # fmt: skip
    attachments_dir: str = Field(
        default="attachments",
        description="Base directory for locally stored attachments",
    )  # fmt: skip
    write_retry_attempts: int = Field(
        default=3,
        ge=1,
        description="Attempts for a store write before reporting failure",
    )  # fmt: skip

    notification_ttl_seconds: float = Field(
        default=5.0,
        gt=0,
        description="Seconds a notification stays visible",
    )  # fmt: skip

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: str | None) -> str:
        """Normalize and validate log level."""
        if v is None:
            return "INFO"

        v_upper = str(v).upper()

        allowed = {"TRACE", "DEBUG", "INFO", "WARNING", "ERROR"}
        if v_upper not in allowed:
            raise ValueError(f"Invalid log level: {v}. Must be one of: {', '.join(sorted(allowed))}")

        return v_upper

    @field_validator("display_timezone")
    @classmethod
    def validate_display_timezone(cls, v: str) -> str:
        """Reject timezone names arrow cannot resolve."""
        try:
            arrow.now(v)
        except ValueError as e:  # arrow's ParserError is a ValueError
            raise ValueError(f"Unknown timezone: {v}") from e
        return v

    model_config = SettingsConfigDict(
        env_prefix="SURGERY_AGENDA_",
        case_sensitive=False,
        extra="ignore",
        env_file=".env",
        env_file_encoding="utf-8",
    )


@lru_cache
def get_settings() -> Settings:
    """Return the cached ``Settings`` instance.

    The first invocation reads environment variables / .env file; subsequent
    calls reuse the same object to ensure consistent config.
    """

    return Settings()


__all__ = ["Settings", "get_settings"]
