"""Custom sink implementations for loguru.

- SentrySink: breadcrumbs for every record, error reports for ERROR+
"""

from crashsink.sinks.sentry import SentrySink

__all__ = ["SentrySink"]
