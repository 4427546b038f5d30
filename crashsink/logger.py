"""Loguru logging setup with the Sentry sink.

Features:
    - Console sink (human-readable, stderr)
    - Sentry sink: breadcrumbs for every admitted record, reports for ERROR+

Rules Applied:
    - #15 Logging Standards: Loguru, console + alerting sinks
    - #23 Exception Handling: Sentry reports for errors
"""

from __future__ import annotations

import sys

from loguru import logger

from crashsink.config import (
    LoggingConfig,
    SentryConfig,
    get_logging_config,
    get_sentry_config,
)
from crashsink.exceptions import SinkConfigurationError
from crashsink.sinks.sentry import SentrySink

CONSOLE_FORMAT_DEFAULT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)


# =============================================================================
# Sink Manager (encapsulates global state)
# =============================================================================


class _SinkManager:
    """Keeps the active Sentry sink so re-setup can stop it."""

    def __init__(self) -> None:
        self.sentry_sink: SentrySink | None = None
        self.handler_id: int | None = None

    def set_sentry_sink(self, sink: SentrySink, handler_id: int) -> None:
        self.sentry_sink = sink
        self.handler_id = handler_id

    def cleanup(self) -> None:
        """Detach and stop the active Sentry sink."""
        if self.handler_id is not None:
            try:
                logger.remove(self.handler_id)
            except ValueError:
                pass  # already removed by logger.remove()
            self.handler_id = None

        if self.sentry_sink is not None:
            self.sentry_sink.stop()
            self.sentry_sink = None


_sink_manager = _SinkManager()


# =============================================================================
# Setup Functions
# =============================================================================


def setup_logger_from_config(
    logging_config: LoggingConfig | None = None,
    sentry_config: SentryConfig | None = None,
) -> None:
    """Initialize loguru from Pydantic config models.

    Loads both configs from environment variables if not provided. The
    Sentry sink is only added when a DSN is configured.

    Example:
        >>> from crashsink.logger import setup_logger_from_config
        >>> setup_logger_from_config()  # Loads from LOG_* / SENTRY_* env vars
    """
    if logging_config is None:
        logging_config = get_logging_config()
    if sentry_config is None:
        sentry_config = get_sentry_config()

    logger.remove()
    _sink_manager.cleanup()

    logger.add(
        sys.stderr,
        format=CONSOLE_FORMAT_DEFAULT,
        level=logging_config.console_level,
        colorize=True,
        backtrace=logging_config.backtrace,
        diagnose=logging_config.diagnose,
    )

    if sentry_config.is_enabled:
        setup_sentry_sink(sentry_config)

    logger.info(
        "Logger initialized",
        console_level=logging_config.console_level,
        sentry_enabled=sentry_config.is_enabled,
        environment=sentry_config.environment,
    )


def setup_logger(
    dsn: str | None = None,
    console_level: str = "INFO",
    *,
    production: bool = False,
) -> None:
    """Initialize the logger with minimal configuration.

    Args:
        dsn: Sentry DSN (Sentry sink disabled when None)
        console_level: Console output level (default: "INFO")
        production: Report under the "prod" environment

    Example:
        >>> from crashsink.logger import setup_logger
        >>> setup_logger("https://key@o0.ingest.sentry.io/1", production=True)
    """
    setup_logger_from_config(
        LoggingConfig(console_level=console_level),  # type: ignore[arg-type]
        SentryConfig(dsn=dsn, production=production),
    )


def setup_sentry_sink(config: SentryConfig) -> SentrySink:
    """Create a SentrySink from config and register it with loguru.

    Replaces any sink previously registered through this module.

    Raises:
        SinkConfigurationError: If no DSN is configured
    """
    if not config.dsn:
        msg = "Sentry DSN is not configured"
        raise SinkConfigurationError(msg, context={"env": "SENTRY_DSN"})

    _sink_manager.cleanup()

    sink = SentrySink(
        config.dsn,
        release=config.release,
        production=config.production,
        max_breadcrumbs=config.max_breadcrumbs,
    )
    handler_id = logger.add(sink.write, level=config.min_level, format="{message}")
    _sink_manager.set_sentry_sink(sink, handler_id)
    return sink


def get_sentry_sink() -> SentrySink | None:
    """Return the Sentry sink registered by the last setup, if any."""
    return _sink_manager.sentry_sink


__all__ = [
    "get_sentry_sink",
    "logger",
    "setup_logger",
    "setup_logger_from_config",
    "setup_sentry_sink",
]
