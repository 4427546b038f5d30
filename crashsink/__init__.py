"""Sentry error reporting sink for loguru.

This package forwards loguru records to Sentry:
- Every record with a message becomes a breadcrumb
- ERROR+ records become full error reports (exception, extras, tags)
- Reported exceptions are marked so callers can detect duplicates

Rules Applied:
    - #15 Logging Standards: Loguru sinks, never raise from a sink
    - #23 Exception Handling: Exception context, reported markers
"""

__version__ = "0.1.0"

from crashsink.exceptions import get_report_id, is_reported
from crashsink.sinks.sentry import SentrySink

__all__ = [
    "SentrySink",
    "__version__",
    "get_report_id",
    "is_reported",
]
