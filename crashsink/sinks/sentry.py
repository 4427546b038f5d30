"""Sentry Sink for loguru.

This module provides a loguru sink that forwards records to Sentry. Every
record with a message is appended to a rolling breadcrumb trail; ERROR and
CRITICAL records are escalated into full error reports carrying the
exception, structured extras, process arguments and global tags.

After a successful send the reported exception is marked (``S_REPORTED``,
``SENTRY_ID`` in its context) so downstream code can tell it has already
been reported.

Rules Applied:
    - #15 Logging Standards: A sink never raises into the application
    - #23 Exception Handling: Exception context forwarded as extras
"""

from __future__ import annotations

import atexit
import sys
import threading
from typing import TYPE_CHECKING, ClassVar

from crashsink.client import DEFAULT_LOGGER, Breadcrumb, ErrorReport, ReportClient
from crashsink.environment import collect_host_info
from crashsink.exceptions import (
    SinkConfigurationError,
    flatten_exception,
    get_exception_data,
    mark_reported,
)
from crashsink.levels import breadcrumb_level, is_reportable, report_level

if TYPE_CHECKING:
    from loguru import Message, Record


class SentrySink:
    """Loguru sink reporting ERROR+ records to Sentry.

    Tags added with ``add_tag`` are shared by every sink instance in the
    process. Each instance owns its own Sentry client.

    Args:
        dsn: Sentry DSN (ignored when ``client`` is given)
        release: Application version string
        production: Report under the "prod" environment instead of "dev"
        max_breadcrumbs: Size of the rolling breadcrumb trail
        client: Pre-built ReportClient (mostly for tests)

    Example:
        >>> from loguru import logger
        >>> sink = SentrySink("https://key@o0.ingest.sentry.io/1", release="1.4.2")
        >>> SentrySink.add_tag("region", "eu-west-1")
        >>> logger.add(sink.write, level="DEBUG", format="{message}")
    """

    _tags: ClassVar[dict[str, str]] = {}
    _tags_lock: ClassVar[threading.Lock] = threading.Lock()

    def __init__(
        self,
        dsn: str | None = None,
        *,
        release: str | None = None,
        production: bool = False,
        max_breadcrumbs: int = 100,
        client: ReportClient | None = None,
    ) -> None:
        if client is None:
            if not dsn:
                msg = "Sentry DSN is required to build a SentrySink"
                raise SinkConfigurationError(msg, context={"release": release})
            client = ReportClient(
                dsn,
                release=release,
                environment="prod" if production else "dev",
                max_breadcrumbs=max_breadcrumbs,
                on_error=self._on_error,
            )
        elif client.on_error is None:
            client.on_error = self._on_error

        self._client = client
        self._client_lock = threading.Lock()
        self._running = True

        self._client.tags.update(collect_host_info().as_tags())

        atexit.register(self.stop)

    @classmethod
    def add_tag(cls, key: str, value: str) -> None:
        """Add or overwrite a tag sent with every future report of every sink."""
        with cls._tags_lock:
            cls._tags[key] = value

    @property
    def client(self) -> ReportClient:
        return self._client

    def write(self, message: Message) -> None:
        """Handle one loguru message.

        This method is called by loguru. It never raises: any failure is
        written to stderr and swallowed.

        Args:
            message: Formatted loguru message (record in ``message.record``)
        """
        if not self._running:
            return

        try:
            self._write(message.record)
        except Exception as e:
            self._on_error(e)

    def _write(self, record: Record) -> None:
        level = record["level"]
        logger_name = record["name"] or DEFAULT_LOGGER
        text = record["message"]

        with self._client_lock:
            with self._tags_lock:
                self._client.tags.update(self._tags)

            if text:
                self._client.add_trail(
                    Breadcrumb(
                        category=logger_name,
                        level=breadcrumb_level(level.name, level.no),
                        message=text,
                    )
                )

        if not is_reportable(level.no):
            return

        extras: dict[str, str | None] = {str(k): str(v) for k, v in record["extra"].items()}
        extras["args"] = " ".join(sys.argv[1:])

        exception = record["exception"]
        original = exception.value if exception is not None else None
        if original is not None:
            for key, value in get_exception_data(original).items():
                extras[str(key)] = None if value is None else str(value)

        report = ErrorReport(
            level=report_level(level.name, level.no),
            message=text if text.strip() else None,
            exception=flatten_exception(original),
            extra=extras,
        )

        with self._client_lock:
            self._client.logger = logger_name
            try:
                event_id = self._client.capture(report)
            finally:
                self._client.logger = DEFAULT_LOGGER

            if event_id and original is not None:
                mark_reported(original, event_id)

    def _on_error(self, error: BaseException) -> None:
        # stderr only: logging through loguru would feed this sink again
        print(f"[SentrySink] Unable to send error to Sentry: {error!r}", file=sys.stderr)

    def stop(self, timeout: float = 2.0) -> None:
        """Flush pending reports and close the client.

        Called automatically at interpreter shutdown via atexit; stopping
        earlier drops the exit hook.
        """
        if not self._running:
            return
        self._running = False
        atexit.unregister(self.stop)
        self._client.close(timeout=timeout)
