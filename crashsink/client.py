"""Sentry client owned by a single sink.

Wraps a dedicated ``sentry_sdk.Client`` instead of the global SDK hub so a
sink never touches (or is touched by) the application's own Sentry setup.
The wrapper keeps the client-side state the sink mutates between events:

- tag collection copied into every event
- transient logger name of the event being captured
- rolling breadcrumb trail (bounded)
- failure callback for capture errors

Events are delivered synchronously by ``DeliveryTransport`` so a capture
only returns an event id once Sentry accepted the envelope. Delivery
failures (network, HTTP status) surface as exceptions from ``capture``.

Rules Applied:
    - #15 Logging Standards: Sink failures never reach the caller
    - #10 Python Standards: Type hints, dataclasses
"""

from __future__ import annotations

import gzip
from collections import deque
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

import httpx
import sentry_sdk
from sentry_sdk.transport import Transport
from sentry_sdk.utils import event_from_exception

from crashsink import __version__
from crashsink.exceptions import add_context_note

if TYPE_CHECKING:
    from collections.abc import Callable

    from sentry_sdk.envelope import Envelope

    from crashsink.levels import BreadcrumbLevel, ReportLevel

DEFAULT_LOGGER = "root"
DEFAULT_MAX_BREADCRUMBS = 100
DEFAULT_DELIVERY_TIMEOUT = 5.0
USER_AGENT = f"crashsink/{__version__}"


@dataclass(frozen=True)
class Breadcrumb:
    """One entry of the rolling context trail."""

    category: str
    level: BreadcrumbLevel
    message: str
    type: str = "navigation"
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    def as_payload(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "category": self.category,
            "level": str(self.level),
            "message": self.message,
            "timestamp": self.timestamp,
        }


@dataclass
class ErrorReport:
    """An ERROR+ record translated for Sentry.

    Attributes:
        level: Sentry event level
        message: Formatted message, None when blank
        exception: Exception to attach (already flattened), if any
        extra: String-keyed extras (properties, args, exception context)
    """

    level: ReportLevel
    message: str | None = None
    exception: BaseException | None = None
    extra: dict[str, str | None] = field(default_factory=dict)


class DeliveryTransport(Transport):
    """Synchronous sentry-sdk transport that raises when delivery fails.

    The stock HTTP transport queues envelopes on a background worker and
    only logs send errors there. Here the envelope is posted (gzip
    compressed) before ``capture_envelope`` returns, and a connection error
    or non-2xx response propagates to the caller.

    Args:
        options: sentry-sdk client options (supplies the DSN)
        http: Optional preconfigured httpx client
    """

    def __init__(
        self,
        options: dict[str, Any] | None = None,
        *,
        http: httpx.Client | None = None,
    ) -> None:
        super().__init__(options)
        self.http = http or httpx.Client(timeout=httpx.Timeout(DEFAULT_DELIVERY_TIMEOUT))

    def capture_envelope(self, envelope: Envelope) -> None:
        if self.parsed_dsn is None:
            msg = "Sentry transport has no DSN"
            raise ValueError(msg)

        auth = self.parsed_dsn.to_auth(USER_AGENT)
        response = self.http.post(
            auth.get_api_url(),
            content=gzip.compress(envelope.serialize()),
            headers={
                "User-Agent": USER_AGENT,
                "X-Sentry-Auth": auth.to_header(),
                "Content-Type": "application/x-sentry-envelope",
                "Content-Encoding": "gzip",
            },
        )
        response.raise_for_status()

    def kill(self) -> None:
        self.http.close()


class ReportClient:
    """Sentry client with sink-local tags, logger name and breadcrumb trail.

    Not thread-safe: the owning sink serializes access.

    Args:
        dsn: Sentry DSN
        release: Application version string
        environment: Environment label ("prod" / "dev")
        max_breadcrumbs: Size of the rolling trail
        on_error: Called with the exception when building or sending an
            event fails; without it the exception propagates
        transport: sentry-sdk transport instance or class; defaults to
            ``DeliveryTransport``

    Example:
        >>> from crashsink.levels import ReportLevel
        >>> client = ReportClient("https://key@o0.ingest.sentry.io/1", release="1.2.0")
        >>> client.tags["region"] = "eu"
        >>> event_id = client.capture(ErrorReport(level=ReportLevel.ERROR, message="boom"))
    """

    def __init__(
        self,
        dsn: str,
        *,
        release: str | None = None,
        environment: str | None = None,
        max_breadcrumbs: int = DEFAULT_MAX_BREADCRUMBS,
        on_error: Callable[[BaseException], None] | None = None,
        transport: Transport | type[Transport] | None = None,
    ) -> None:
        self.tags: dict[str, str] = {}
        self.logger = DEFAULT_LOGGER
        self.on_error = on_error
        self._trail: deque[Breadcrumb] = deque(maxlen=max_breadcrumbs)
        self._client = sentry_sdk.Client(
            dsn,
            release=release,
            environment=environment,
            default_integrations=False,
            auto_enabling_integrations=False,
            transport=transport or DeliveryTransport,
        )

    @property
    def trail(self) -> list[Breadcrumb]:
        """Snapshot of the breadcrumb trail, oldest first."""
        return list(self._trail)

    def add_trail(self, breadcrumb: Breadcrumb) -> None:
        """Append a breadcrumb, dropping the oldest when the trail is full."""
        self._trail.append(breadcrumb)

    def capture(self, report: ErrorReport) -> str | None:
        """Send one report.

        Returns:
            Sentry event id once delivered, or None if the event was
            dropped or its delivery failed
        """
        try:
            event, hint = self._build_event(report)
            return self._client.capture_event(event, hint=hint)
        except Exception as e:
            if self.on_error is None:
                raise
            add_context_note(e, f"while capturing Sentry event for logger {self.logger!r}")
            self.on_error(e)
            return None

    def _build_event(self, report: ErrorReport) -> tuple[dict[str, Any], dict[str, Any] | None]:
        hint: dict[str, Any] | None = None
        event: dict[str, Any] = {}
        if report.exception is not None:
            event, hint = event_from_exception(report.exception, client_options=self._client.options)

        event["level"] = str(report.level)
        if report.message is not None:
            event["message"] = report.message
        event["logger"] = self.logger
        event["tags"] = dict(self.tags)
        event["extra"] = dict(report.extra)
        event["breadcrumbs"] = {"values": [crumb.as_payload() for crumb in self._trail]}
        return event, hint

    def flush(self, timeout: float | None = None) -> None:
        """Block until queued events are delivered or ``timeout`` expires."""
        self._client.flush(timeout=timeout)

    def close(self, timeout: float | None = None) -> None:
        """Flush and shut down the transport."""
        self._client.close(timeout=timeout)
