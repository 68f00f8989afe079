"""
Pytest fixtures for the eventflow test suite.

Provides:
- Structured-logging setup and a JSON log capture fixture
- A deterministic clock
- In-memory and SQLite-backed record stores
- The two workflows, the query service, and the WorkflowEngine facade
- Sample payloads shaped like the customer and task-distribution forms
"""

import json
import logging
from io import StringIO

import pytest

from eventflow_kernel.db.memory import InMemoryRecordStore
from eventflow_kernel.db.serialization import EVENT_REQUEST_CODEC, TASK_DISTRIBUTION_CODEC
from eventflow_kernel.db.sql import SqlRecordStore, create_session_factory, init_engine_from_url
from eventflow_kernel.domain.clock import DeterministicClock
from eventflow_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)
from eventflow_kernel.services.event_request_service import EventRequestWorkflow
from eventflow_kernel.services.query_service import QueryService
from eventflow_kernel.services.task_distribution_service import TaskDistributionWorkflow
from eventflow_services.workflow_engine import WorkflowEngine
from tests.factories import make_event_request_payload, make_task_distribution_payload


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture eventflow logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs, event_requests):
            event_requests.forward_to_senior_cs("EVT-000001", "CS")
            logs = captured_logs()
            assert any(r["message"] == "workflow_transition" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("eventflow")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Clock fixtures
# =============================================================================


@pytest.fixture
def deterministic_clock():
    """Clock fixed at 2024-01-01T12:00:00Z."""
    return DeterministicClock()


# =============================================================================
# Store fixtures
# =============================================================================


@pytest.fixture
def event_request_store():
    return InMemoryRecordStore("EVT")


@pytest.fixture
def task_distribution_store():
    return InMemoryRecordStore("TD")


@pytest.fixture
def session_factory():
    """Session factory over a private in-memory SQLite database."""
    engine = init_engine_from_url("sqlite+pysqlite:///:memory:")
    yield create_session_factory(engine)
    engine.dispose()


@pytest.fixture
def sql_event_request_store(session_factory):
    return SqlRecordStore(session_factory, EVENT_REQUEST_CODEC, "EVT")


@pytest.fixture
def sql_task_distribution_store(session_factory):
    return SqlRecordStore(session_factory, TASK_DISTRIBUTION_CODEC, "TD")


# =============================================================================
# Workflow fixtures
# =============================================================================


@pytest.fixture
def event_requests(event_request_store, deterministic_clock):
    return EventRequestWorkflow(event_request_store, deterministic_clock)


@pytest.fixture
def task_distributions(task_distribution_store, deterministic_clock):
    return TaskDistributionWorkflow(task_distribution_store, deterministic_clock)


@pytest.fixture
def query_service(event_request_store, task_distribution_store):
    return QueryService(event_request_store, task_distribution_store)


@pytest.fixture
def engine(deterministic_clock):
    return WorkflowEngine(
        InMemoryRecordStore("EVT"),
        InMemoryRecordStore("TD"),
        deterministic_clock,
    )


# =============================================================================
# Sample payloads
# =============================================================================


@pytest.fixture
def event_request_payload():
    return make_event_request_payload()


@pytest.fixture
def task_distribution_payload():
    return make_task_distribution_payload()
