"""Exception context helpers and the package's exception hierarchy.

Every exception can carry a data collection: a ``dict`` stored on the
instance under the private ``__crashsink_data__`` attribute, so it never
collides with attributes a library already defines on its exceptions
(``context``, ``data``, ...). ``ReportableError`` exposes the same dict as
``context``; for any other exception it is attached on first write. The
Sentry sink copies this collection into report extras and writes the
reported markers back into it after a successful send.

Rules Applied:
    - #23 Exception Handling: Domain-driven hierarchy, context, add_note()
"""

from __future__ import annotations

from collections.abc import Iterator

DATA_ATTR = "__crashsink_data__"
REPORTED_KEY = "S_REPORTED"
REPORT_ID_KEY = "SENTRY_ID"


class ReportableError(Exception):
    """Base class for errors raised by this package.

    Attributes:
        message: Error message
        context: Data collection forwarded to Sentry as report extras
    """

    def __init__(self, message: str, *, context: dict[object, object] | None = None) -> None:
        super().__init__(message)
        self.message = message
        setattr(self, DATA_ATTR, context or {})

    @property
    def context(self) -> dict[object, object]:
        return ensure_exception_data(self)

    def __str__(self) -> str:
        if self.context:
            ctx_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} [{ctx_str}]"
        return self.message


class SinkConfigurationError(ReportableError):
    """Sentry sink requested without a usable configuration (e.g. missing DSN).

    Example:
        >>> raise SinkConfigurationError(
        ...     "Sentry DSN is not configured",
        ...     context={"env": "SENTRY_DSN"}
        ... )
    """


# =============================================================================
# Exception Data Collection
# =============================================================================


def get_exception_data(exc: BaseException) -> dict[object, object]:
    """Return the exception's data collection without attaching one.

    Args:
        exc: Any exception instance

    Returns:
        The attached dict, or an empty dict when the exception has none
    """
    data = getattr(exc, DATA_ATTR, None)
    if isinstance(data, dict):
        return data
    return {}


def ensure_exception_data(exc: BaseException) -> dict[object, object]:
    """Return the exception's data collection, attaching an empty one if missing.

    Only the private data attribute is touched; the exception's own
    attributes are left as they are.
    """
    data = getattr(exc, DATA_ATTR, None)
    if not isinstance(data, dict):
        data = {}
        setattr(exc, DATA_ATTR, data)
    return data


def mark_reported(exc: BaseException, event_id: str) -> None:
    """Record that ``exc`` was sent to Sentry under ``event_id``."""
    data = ensure_exception_data(exc)
    data[REPORTED_KEY] = True
    data[REPORT_ID_KEY] = event_id


def is_reported(exc: BaseException) -> bool:
    """Whether ``exc`` has already been reported to Sentry."""
    return bool(get_exception_data(exc).get(REPORTED_KEY, False))


def get_report_id(exc: BaseException) -> str | None:
    """Sentry event id of the report that carried ``exc``, if any."""
    event_id = get_exception_data(exc).get(REPORT_ID_KEY)
    return str(event_id) if event_id else None


# =============================================================================
# Exception Groups
# =============================================================================


def _iter_leaves(group: BaseExceptionGroup) -> Iterator[BaseException]:
    for exc in group.exceptions:
        if isinstance(exc, BaseExceptionGroup):
            yield from _iter_leaves(exc)
        else:
            yield exc


def flatten_exception(exc: BaseException | None) -> BaseException | None:
    """Flatten nested exception groups into a single group of leaf exceptions.

    Non-group exceptions (and None) are returned unchanged.

    Example:
        >>> inner = ExceptionGroup("inner", [KeyError("a")])
        >>> flat = flatten_exception(ExceptionGroup("outer", [inner, ValueError("b")]))
        >>> [type(e).__name__ for e in flat.exceptions]
        ['KeyError', 'ValueError']
    """
    if not isinstance(exc, BaseExceptionGroup):
        return exc

    # BaseExceptionGroup returns an ExceptionGroup when every leaf is an Exception
    flat = BaseExceptionGroup(exc.message, list(_iter_leaves(exc)))
    return flat.with_traceback(exc.__traceback__)


def add_context_note(exc: BaseException, note: str) -> None:
    """Attach a context note to an exception (Python 3.11+ add_note).

    Example:
        >>> try:
        ...     raise ValueError("bad payload")
        ... except ValueError as e:
        ...     add_context_note(e, "while building Sentry extras")
        ...     raise
    """
    exc.add_note(note)
