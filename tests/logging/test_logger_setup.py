"""Tests for loguru setup with the Sentry sink."""

from __future__ import annotations

import sys
from collections.abc import Iterator

import pytest
from loguru import logger

from crashsink.config import LoggingConfig, SentryConfig
from crashsink.exceptions import SinkConfigurationError
from crashsink.logger import (
    _sink_manager,
    get_sentry_sink,
    setup_logger_from_config,
    setup_sentry_sink,
)
from crashsink.sinks.sentry import SentrySink

DSN = "https://public@example.com/1"


@pytest.fixture(autouse=True)
def restore_logger() -> Iterator[None]:
    yield
    _sink_manager.cleanup()
    logger.remove()
    logger.add(sys.stderr)


def _logging_config() -> LoggingConfig:
    return LoggingConfig(console_level="WARNING", _env_file=None)  # type: ignore[call-arg]


def _sentry_config(dsn: str | None) -> SentryConfig:
    return SentryConfig(dsn=dsn, _env_file=None)  # type: ignore[call-arg]


def test_without_dsn_no_sentry_sink() -> None:
    setup_logger_from_config(_logging_config(), _sentry_config(None))
    assert get_sentry_sink() is None


def test_with_dsn_registers_sink() -> None:
    setup_logger_from_config(_logging_config(), _sentry_config(DSN))

    sink = get_sentry_sink()
    assert isinstance(sink, SentrySink)
    # the setup message itself is the first breadcrumb
    assert [c.message for c in sink.client.trail] == ["Logger initialized"]


def test_setup_again_stops_previous_sink() -> None:
    setup_logger_from_config(_logging_config(), _sentry_config(DSN))
    first = get_sentry_sink()
    setup_logger_from_config(_logging_config(), _sentry_config(DSN))

    assert first is not None
    assert get_sentry_sink() is not first
    assert first._running is False


def test_setup_sentry_sink_requires_dsn() -> None:
    with pytest.raises(SinkConfigurationError, match="DSN"):
        setup_sentry_sink(_sentry_config(None))
