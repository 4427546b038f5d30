"""Tests for exception context helpers."""

from __future__ import annotations

from crashsink.exceptions import (
    DATA_ATTR,
    REPORT_ID_KEY,
    REPORTED_KEY,
    ReportableError,
    SinkConfigurationError,
    add_context_note,
    ensure_exception_data,
    flatten_exception,
    get_exception_data,
    get_report_id,
    is_reported,
    mark_reported,
)


class TestReportableError:
    def test_str_without_context(self) -> None:
        assert str(ReportableError("boom")) == "boom"

    def test_str_with_context(self) -> None:
        error = SinkConfigurationError("missing dsn", context={"env": "SENTRY_DSN"})
        assert str(error) == "missing dsn [env=SENTRY_DSN]"
        assert isinstance(error, ReportableError)


class TestExceptionData:
    def test_read_does_not_attach(self) -> None:
        error = ValueError("x")
        assert get_exception_data(error) == {}
        assert not hasattr(error, DATA_ATTR)

    def test_ensure_attaches_once(self) -> None:
        error = ValueError("x")
        data = ensure_exception_data(error)
        data["k"] = "v"
        assert ensure_exception_data(error) is data
        assert get_exception_data(error) == {"k": "v"}

    def test_ensure_leaves_own_context_alone(self) -> None:
        error = ValueError("x")
        error.context = "while parsing a flow mapping"  # type: ignore[attr-defined]

        ensure_exception_data(error)["k"] = "v"

        assert error.context == "while parsing a flow mapping"  # type: ignore[attr-defined]
        assert get_exception_data(error) == {"k": "v"}

    def test_context_is_the_data_collection(self) -> None:
        error = ReportableError("x", context={"user": "42"})
        assert error.context is get_exception_data(error)


class TestReportedMarkers:
    def test_mark_reported(self) -> None:
        error = OSError("disk")
        assert not is_reported(error)
        assert get_report_id(error) is None

        mark_reported(error, "abc123")

        assert is_reported(error)
        assert get_report_id(error) == "abc123"
        assert get_exception_data(error) == {REPORTED_KEY: True, REPORT_ID_KEY: "abc123"}

    def test_markers_keep_existing_context(self) -> None:
        error = ReportableError("x", context={"user": "42"})
        mark_reported(error, "def456")
        assert error.context["user"] == "42"
        assert error.context[REPORTED_KEY] is True

    def test_markers_with_library_context(self) -> None:
        error = RuntimeError("x")
        error.context = None  # type: ignore[attr-defined]

        mark_reported(error, "fed789")

        assert error.context is None  # type: ignore[attr-defined]
        assert get_report_id(error) == "fed789"


class TestFlatten:
    def test_plain_exception_unchanged(self) -> None:
        error = KeyError("a")
        assert flatten_exception(error) is error
        assert flatten_exception(None) is None

    def test_nested_groups_become_one_level(self) -> None:
        inner = ExceptionGroup("inner", [KeyError("a"), ValueError("b")])
        outer = ExceptionGroup("outer", [inner, TimeoutError("c")])

        flat = flatten_exception(outer)

        assert isinstance(flat, ExceptionGroup)
        assert flat.message == "outer"
        assert [type(e) for e in flat.exceptions] == [KeyError, ValueError, TimeoutError]

    def test_base_exceptions_keep_base_group(self) -> None:
        group = BaseExceptionGroup("stop", [KeyboardInterrupt(), ValueError("b")])
        flat = flatten_exception(group)
        assert type(flat) is BaseExceptionGroup


def test_add_context_note() -> None:
    error = ValueError("bad payload")
    add_context_note(error, "while building extras")
    assert error.__notes__ == ["while building extras"]
