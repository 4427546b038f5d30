"""Severity mapping between loguru levels and Sentry levels.

Two tables:
    - REPORT_LEVELS: total mapping used when an ERROR+ record becomes a report
    - breadcrumb_level(): coarser mapping used for the breadcrumb trail

Custom loguru levels are mapped by their number so both mappings stay total.
"""

from __future__ import annotations

from enum import StrEnum

# loguru numeric severities
INFO_NO = 20
WARNING_NO = 30
ERROR_NO = 40
CRITICAL_NO = 50


class ReportLevel(StrEnum):
    """Sentry event levels."""

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    FATAL = "fatal"


class BreadcrumbLevel(StrEnum):
    """Sentry breadcrumb levels.

    Sentry has no ``critical`` breadcrumb level; CRITICAL is sent as ``fatal``.
    """

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "fatal"


REPORT_LEVELS: dict[str, ReportLevel] = {
    "TRACE": ReportLevel.DEBUG,
    "DEBUG": ReportLevel.DEBUG,
    "INFO": ReportLevel.INFO,
    "SUCCESS": ReportLevel.INFO,
    "WARNING": ReportLevel.WARNING,
    "ERROR": ReportLevel.ERROR,
    "CRITICAL": ReportLevel.FATAL,
}


def report_level(name: str, no: int) -> ReportLevel:
    """Map a loguru level to the Sentry event level.

    Args:
        name: loguru level name (e.g. "ERROR")
        no: loguru level number, used for custom levels

    Returns:
        Sentry event level
    """
    level = REPORT_LEVELS.get(name.upper())
    if level is not None:
        return level
    if no >= CRITICAL_NO:
        return ReportLevel.FATAL
    if no >= ERROR_NO:
        return ReportLevel.ERROR
    if no >= WARNING_NO:
        return ReportLevel.WARNING
    if no >= INFO_NO:
        return ReportLevel.INFO
    return ReportLevel.DEBUG


def breadcrumb_level(name: str, no: int) -> BreadcrumbLevel:
    """Map a loguru level to the breadcrumb level."""
    name = name.upper()
    if name in ("TRACE", "DEBUG") or (name not in REPORT_LEVELS and no < INFO_NO):
        return BreadcrumbLevel.DEBUG
    if name in ("INFO", "SUCCESS") or (name not in REPORT_LEVELS and no < WARNING_NO):
        return BreadcrumbLevel.INFO
    if name == "WARNING" or (name not in REPORT_LEVELS and no < ERROR_NO):
        return BreadcrumbLevel.WARNING
    if name == "ERROR" or (name not in REPORT_LEVELS and no < CRITICAL_NO):
        return BreadcrumbLevel.ERROR
    return BreadcrumbLevel.CRITICAL


def is_reportable(no: int) -> bool:
    """Whether a record of this level number escalates into an error report."""
    return no >= ERROR_NO
