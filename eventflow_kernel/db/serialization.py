"""
Module: eventflow_kernel.db.serialization
Responsibility: Convert record snapshots to and from JSON-compatible dicts
    for stores that persist outside the process.
Architecture position: Kernel > DB.  May import from domain/.

Invariants enforced:
    - Decimal amounts travel as strings, never floats, so a round trip is
      exact.
    - Dates and datetimes travel as ISO-8601 strings.
"""

from __future__ import annotations

from dataclasses import asdict
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, Generic, TypeVar

from eventflow_kernel.domain.event_request import (
    AdministrationReview,
    EventPreferences,
    EventRequest,
    EventRequestStatus,
    FinancialReview,
    Recommendation,
)
from eventflow_kernel.domain.roles import Role
from eventflow_kernel.domain.task_distribution import (
    SubTeamFeedback,
    SubTeamTask,
    TaskDistribution,
    TaskDistributionStatus,
    TaskStatus,
)

R = TypeVar("R")


def _jsonable(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, dict):
        return {k: _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    return value


def to_payload(record: Any) -> dict[str, Any]:
    """Flatten a frozen record into a JSON-compatible dict."""
    return _jsonable(asdict(record))


def _opt(value: Any, parse: Callable[[Any], Any]) -> Any:
    return None if value is None else parse(value)


# ---------------------------------------------------------------------------
# Event requests
# ---------------------------------------------------------------------------


def event_request_from_payload(data: dict[str, Any]) -> EventRequest:
    financial = data.get("financial_review")
    administration = data.get("administration_review")
    return EventRequest(
        id=data["id"],
        client_name=data["client_name"],
        client_email=data["client_email"],
        client_phone=data["client_phone"],
        event_type=data["event_type"],
        start_date=date.fromisoformat(data["start_date"]),
        end_date=date.fromisoformat(data["end_date"]),
        expected_number=data["expected_number"],
        budget=Decimal(data["budget"]),
        preferences=EventPreferences(**data["preferences"]),
        created_by=Role(data["created_by"]),
        status=EventRequestStatus(data["status"]),
        record_number=data.get("record_number"),
        created_at=_opt(data.get("created_at"), datetime.fromisoformat),
        updated_at=_opt(data.get("updated_at"), datetime.fromisoformat),
        financial_review=None if financial is None else FinancialReview(
            reviewed_by=financial["reviewed_by"],
            comments=financial["comments"],
            recommendation=Recommendation(financial["recommendation"]),
            budget_comments=financial.get("budget_comments"),
            reviewed_at=_opt(financial.get("reviewed_at"), datetime.fromisoformat),
        ),
        administration_review=None if administration is None else AdministrationReview(
            reviewed_by=administration["reviewed_by"],
            comments=administration["comments"],
            recommendation=Recommendation(administration["recommendation"]),
            reviewed_at=_opt(administration.get("reviewed_at"), datetime.fromisoformat),
        ),
        rejection_reason=data.get("rejection_reason"),
    )


# ---------------------------------------------------------------------------
# Task distributions
# ---------------------------------------------------------------------------


def _feedback_from_payload(data: dict[str, Any]) -> SubTeamFeedback:
    return SubTeamFeedback(
        comments=data["comments"],
        suggestions=data["suggestions"],
        budget_increase=_opt(data.get("budget_increase"), Decimal),
        submitted_by=data.get("submitted_by"),
        submitted_at=_opt(data.get("submitted_at"), datetime.fromisoformat),
    )


def _task_from_payload(data: dict[str, Any]) -> SubTeamTask:
    return SubTeamTask(
        id=data["id"],
        sub_team=data["sub_team"],
        assigned_to=tuple(data["assigned_to"]),
        requirements=data["requirements"],
        allocated_budget=Decimal(data["allocated_budget"]),
        deadline=date.fromisoformat(data["deadline"]),
        status=TaskStatus(data["status"]),
        feedback=_opt(data.get("feedback"), _feedback_from_payload),
    )


def task_distribution_from_payload(data: dict[str, Any]) -> TaskDistribution:
    return TaskDistribution(
        id=data["id"],
        event_request_id=data["event_request_id"],
        title=data["title"],
        description=data["description"],
        total_budget=Decimal(data["total_budget"]),
        event_date=date.fromisoformat(data["event_date"]),
        created_by=Role(data["created_by"]),
        tasks=tuple(_task_from_payload(t) for t in data["tasks"]),
        status=TaskDistributionStatus(data["status"]),
        created_at=_opt(data.get("created_at"), datetime.fromisoformat),
        updated_at=_opt(data.get("updated_at"), datetime.fromisoformat),
    )


class RecordCodec(Generic[R]):
    """Pairs a record kind name with its payload decoder."""

    def __init__(self, kind: str, decode: Callable[[dict[str, Any]], R]) -> None:
        self.kind = kind
        self._decode = decode

    def encode(self, record: R) -> dict[str, Any]:
        return to_payload(record)

    def decode(self, payload: dict[str, Any]) -> R:
        return self._decode(payload)


EVENT_REQUEST_CODEC: RecordCodec[EventRequest] = RecordCodec(
    "event_request", event_request_from_payload
)
TASK_DISTRIBUTION_CODEC: RecordCodec[TaskDistribution] = RecordCodec(
    "task_distribution", task_distribution_from_payload
)
