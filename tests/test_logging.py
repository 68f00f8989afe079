"""Tests for the structured logging system (eventflow_kernel/logging_config.py)."""

import json
import logging
from datetime import date
from decimal import Decimal
from io import StringIO

import pytest

from eventflow_kernel.domain.event_request import EventRequestStatus
from eventflow_kernel.exceptions import RecordNotFoundError
from eventflow_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    get_logger,
    reset_logging,
)


@pytest.fixture(autouse=True)
def _clean_logging():
    """Reset logging state between tests."""
    reset_logging()
    LogContext.clear()
    yield
    LogContext.clear()
    reset_logging()


def _make_handler() -> tuple[logging.Handler, StringIO]:
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    return handler, stream


def _parse_log(stream: StringIO) -> dict:
    """Parse the first JSON log line from a stream."""
    line = stream.getvalue().strip().split("\n")[0]
    return json.loads(line)


def _parse_all_logs(stream: StringIO) -> list[dict]:
    lines = stream.getvalue().strip().split("\n")
    return [json.loads(line) for line in lines if line]


# ---------------------------------------------------------------------------
# StructuredFormatter tests
# ---------------------------------------------------------------------------


class TestStructuredFormatter:
    """Tests for JSON log output format."""

    def test_basic_json_output(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        get_logger("test").info("hello")

        record = _parse_log(stream)
        assert record["level"] == "INFO"
        assert record["message"] == "hello"
        assert record["logger"] == "eventflow.test"
        assert "ts" in record

    def test_domain_values_serialized(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        get_logger("test").info(
            "transition",
            extra={
                "status": EventRequestStatus.APPROVED,
                "budget": Decimal("1300.00"),
                "deadline": date(2024, 6, 10),
                "assignees": ("John Doe", "Jane Smith"),
            },
        )

        record = _parse_log(stream)
        assert record["status"] == "APPROVED"
        assert record["budget"] == "1300.00"
        assert record["deadline"] == "2024-06-10"
        assert record["assignees"] == ["John Doe", "Jane Smith"]

    def test_context_fields_included(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        LogContext.set(correlation_id="abc-123", record_id="EVT-000001")
        get_logger("test").info("test_msg")

        record = _parse_log(stream)
        assert record["correlation_id"] == "abc-123"
        assert record["record_id"] == "EVT-000001"

    def test_eventflow_exception_code_extracted(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        try:
            raise RecordNotFoundError("EVT-000404")
        except RecordNotFoundError:
            get_logger("test").error("store_error", exc_info=True)

        record = _parse_log(stream)
        assert record["exc_type"] == "RecordNotFoundError"
        assert record["exc_code"] == "RECORD_NOT_FOUND"
        assert record["exc_record_id"] == "EVT-000404"
        assert "traceback" in record

    def test_no_context_fields_when_empty(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        get_logger("test").info("bare_message")

        record = _parse_log(stream)
        assert "correlation_id" not in record
        assert "workflow" not in record

    def test_debug_filtered_at_info(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        logger = get_logger("test")
        logger.info("first")
        logger.warning("second", extra={"k": "v"})
        logger.debug("third")

        assert [r["message"] for r in _parse_all_logs(stream)] == ["first", "second"]


# ---------------------------------------------------------------------------
# LogContext tests
# ---------------------------------------------------------------------------


class TestLogContext:

    def test_set_and_get(self):
        LogContext.set(actor="PM", workflow="sub_team_task")
        assert LogContext.get_all() == {"actor": "PM", "workflow": "sub_team_task"}

    def test_clear(self):
        LogContext.set(correlation_id="x")
        LogContext.clear()
        assert LogContext.get_all() == {}

    def test_bind_restores_previous_value(self):
        LogContext.set(record_id="outer")
        with LogContext.bind(record_id="inner"):
            assert LogContext.get_all()["record_id"] == "inner"
        assert LogContext.get_all()["record_id"] == "outer"

    def test_bind_restores_absence(self):
        with LogContext.bind(workflow="event_request"):
            assert LogContext.get_all()["workflow"] == "event_request"
        assert "workflow" not in LogContext.get_all()


# ---------------------------------------------------------------------------
# configure_logging tests
# ---------------------------------------------------------------------------


class TestConfigureLogging:

    def test_idempotent(self):
        h1, _ = _make_handler()
        configure_logging(handler=h1)
        h2, _ = _make_handler()
        configure_logging(handler=h2)
        assert logging.getLogger("eventflow").handlers == [h1]

    def test_level_by_name(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler, level="DEBUG")
        get_logger("deep.nested").debug("hierarchy_test")

        record = _parse_log(stream)
        assert record["logger"] == "eventflow.deep.nested"

    def test_reset_restores_propagation(self):
        configure_logging(handler=_make_handler()[0])
        reset_logging()
        root = logging.getLogger("eventflow")
        assert root.handlers == []
        assert root.propagate is True
