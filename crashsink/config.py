"""Configuration models using Pydantic.

This module defines the configuration schema for the console logger and
the Sentry sink. All settings can be loaded from environment variables.

Rules Applied:
    - #11 Pydantic Modeling: Settings management, strict types
    - #15 Logging Standards: Configurable sinks
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from crashsink import __version__

LevelName = Literal["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"]


class LoggingConfig(BaseSettings):
    """Configuration for the console logger.

    Loaded from environment variables with LOG_ prefix.

    Attributes:
        console_level: Minimum level for console output
        diagnose: Enable variable values in tracebacks (disable in prod)
        backtrace: Enable full traceback
    """

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    console_level: LevelName = Field(
        default="INFO",
        description="Minimum level for console output",
    )
    diagnose: bool = Field(
        default=False,
        description="Enable diagnostic info in tracebacks (disable in prod)",
    )
    backtrace: bool = Field(
        default=True,
        description="Enable full traceback",
    )


class SentryConfig(BaseSettings):
    """Configuration for the Sentry sink.

    Loaded from environment variables with SENTRY_ prefix.

    Attributes:
        dsn: Sentry DSN (sink disabled when unset)
        release: Release identifier attached to every report
        production: Report under "prod" instead of "dev"
        min_level: Minimum level forwarded to the sink (breadcrumbs included)
        max_breadcrumbs: Size of the rolling breadcrumb trail
    """

    model_config = SettingsConfigDict(
        env_prefix="SENTRY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    dsn: str | None = Field(
        default=None,
        description="Sentry DSN",
    )
    release: str = Field(
        default=__version__,
        description="Application version reported as the Sentry release",
    )
    production: bool = Field(
        default=False,
        description="Production build flag",
    )
    min_level: LevelName = Field(
        default="DEBUG",
        description="Minimum level for the Sentry sink",
    )
    max_breadcrumbs: int = Field(
        default=100,
        ge=1,
        le=1000,
        description="Breadcrumbs kept for the next report",
    )

    @property
    def environment(self) -> str:
        """Sentry environment label."""
        return "prod" if self.production else "dev"

    @property
    def is_enabled(self) -> bool:
        """Whether a DSN is configured."""
        return bool(self.dsn)


def get_logging_config() -> LoggingConfig:
    """Load logging configuration from environment.

    Returns:
        LoggingConfig instance with values from env vars
    """
    return LoggingConfig()


def get_sentry_config() -> SentryConfig:
    """Load Sentry configuration from environment.

    Returns:
        SentryConfig instance with values from env vars
    """
    return SentryConfig()
