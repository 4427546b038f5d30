"""Shared fixtures for tests.

Rules Applied:
    - #17 Testing Standards: Pytest fixtures
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import TYPE_CHECKING

import pytest
from loguru import logger

from crashsink.client import DEFAULT_LOGGER, Breadcrumb, ErrorReport
from crashsink.sinks.sentry import SentrySink

if TYPE_CHECKING:
    from loguru import Logger

# ---------------------------------------------------------------------------
# Directory path -> pytest marker
# ---------------------------------------------------------------------------
_DIR_MARKER_MAP: dict[str, str] = {
    "/cli/": "integration",
    "/core/": "unit",
    "/config/": "unit",
    "/logging/": "unit",
}


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    """Add markers based on the test file's directory."""
    for item in items:
        fspath = str(item.fspath)
        for dir_pattern, marker_name in _DIR_MARKER_MAP.items():
            if dir_pattern in fspath:
                item.add_marker(getattr(pytest.mark, marker_name))
                break


class FakeReportClient:
    """In-memory stand-in for ReportClient.

    Records every captured report together with the logger name that was
    active during the capture.
    """

    def __init__(self, event_id: str | None = "a1b2c3d4", error: Exception | None = None) -> None:
        self.tags: dict[str, str] = {}
        self.logger = DEFAULT_LOGGER
        self.on_error = None
        self.trail: list[Breadcrumb] = []
        self.captured: list[tuple[ErrorReport, str]] = []
        self.event_id = event_id
        self.error = error
        self.closed = False

    def add_trail(self, breadcrumb: Breadcrumb) -> None:
        self.trail.append(breadcrumb)

    def capture(self, report: ErrorReport) -> str | None:
        self.captured.append((report, self.logger))
        if self.error is not None:
            raise self.error
        return self.event_id

    def flush(self, timeout: float | None = None) -> None:
        pass

    def close(self, timeout: float | None = None) -> None:
        self.closed = True


@pytest.fixture(autouse=True)
def isolated_tags(monkeypatch: pytest.MonkeyPatch) -> None:
    """Each test starts with an empty process-wide tag set."""
    monkeypatch.setattr(SentrySink, "_tags", {})


@pytest.fixture
def fake_client() -> FakeReportClient:
    return FakeReportClient()


@pytest.fixture
def sentry_sink(fake_client: FakeReportClient) -> SentrySink:
    return SentrySink(client=fake_client)  # type: ignore[arg-type]


@pytest.fixture
def sink_logger(sentry_sink: SentrySink) -> Iterator[Logger]:
    """loguru logger with the Sentry sink attached at TRACE."""
    handler_id = logger.add(sentry_sink.write, level="TRACE", format="{message}")
    yield logger
    logger.remove(handler_id)
