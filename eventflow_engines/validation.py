"""
eventflow_engines.validation -- Payload parsing for workflow operations.

Responsibility:
    Turn the plain structured payloads submitted by forms and dashboards
    into typed domain values, failing fast on malformed input.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import eventflow_kernel/domain/ types and exceptions.

Invariants enforced:
    - Malformed input raises a ``WorkflowInputError`` subclass; it is never
      turned into a refusal or silently defaulted.
    - Keys are accepted in snake_case or in the camelCase the forms send
      (``client_name`` / ``clientName``).
    - Dates must be ISO ``YYYY-MM-DD``; monetary amounts become ``Decimal``.
    - Already-typed domain values get the same checks as mappings; a
      typed payload is never trusted as-is.

Failure modes:
    - InvalidPayloadError for missing or mistyped fields.
    - InvalidRecommendationError / InvalidReviewDecisionError for verdicts
      outside the closed set.
    - UnknownStatusError / UnknownRoleError for strings outside the enums.
    - DuplicateTaskIdError when two tasks share an id.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import fields
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any

from eventflow_kernel.domain.event_request import (
    AdministrationReview,
    EventPreferences,
    EventRequestData,
    EventRequestStatus,
    FinancialReview,
    Recommendation,
)
from eventflow_kernel.domain.roles import Role
from eventflow_kernel.domain.task_distribution import (
    REVIEW_DECISIONS,
    SubTeamFeedback,
    SubTeamTask,
    TaskDistributionData,
    TaskStatus,
)
from eventflow_kernel.exceptions import (
    DuplicateTaskIdError,
    InvalidPayloadError,
    InvalidRecommendationError,
    InvalidReviewDecisionError,
    UnknownRoleError,
    UnknownStatusError,
)

_MISSING = object()
_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

PREFERENCE_FLAGS = ("decoration", "food", "drinks", "photo", "parties")


# ---------------------------------------------------------------------------
# Field helpers
# ---------------------------------------------------------------------------


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def _lookup(payload: Mapping[str, Any], name: str) -> Any:
    if name in payload:
        return payload[name]
    return payload.get(_camel(name), _MISSING)


def _as_fields(value: Any) -> dict[str, Any]:
    """Shallow field map of a dataclass instance, for re-validation."""
    return {f.name: getattr(value, f.name) for f in fields(value)}


def _require_mapping(payload: Any, field: str) -> Mapping[str, Any]:
    if not isinstance(payload, Mapping):
        raise InvalidPayloadError(field, "expected a mapping", payload)
    return payload


def _string(payload: Mapping[str, Any], name: str, *, required: bool = True) -> str | None:
    value = _lookup(payload, name)
    if value is _MISSING or value is None:
        if required:
            raise InvalidPayloadError(name, "is required")
        return None
    if not isinstance(value, str):
        raise InvalidPayloadError(name, "expected a string", value)
    if required and not value.strip():
        raise InvalidPayloadError(name, "must not be blank", value)
    return value


def _positive_int(payload: Mapping[str, Any], name: str) -> int:
    value = _lookup(payload, name)
    if value is _MISSING:
        raise InvalidPayloadError(name, "is required")
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidPayloadError(name, "expected an integer", value)
    if value <= 0:
        raise InvalidPayloadError(name, "must be positive", value)
    return value


def to_decimal(value: Any, name: str) -> Decimal:
    """Coerce a monetary amount to Decimal (never via binary float)."""
    if isinstance(value, bool) or value is None:
        raise InvalidPayloadError(name, "expected a number", value)
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (int, float, str)):
        try:
            result = Decimal(str(value))
        except InvalidOperation:
            raise InvalidPayloadError(name, "expected a number", value) from None
    else:
        raise InvalidPayloadError(name, "expected a number", value)
    if not result.is_finite():
        raise InvalidPayloadError(name, "must be finite", value)
    return result


def _amount(
    payload: Mapping[str, Any],
    name: str,
    *,
    required: bool = True,
    allow_zero: bool = False,
) -> Decimal | None:
    value = _lookup(payload, name)
    if value is _MISSING or value is None:
        if required:
            raise InvalidPayloadError(name, "is required")
        return None
    amount = to_decimal(value, name)
    if amount < 0 or (amount == 0 and not allow_zero):
        raise InvalidPayloadError(name, "must be positive", value)
    return amount


def parse_iso_date(value: Any, name: str) -> date:
    """Parse a ``date`` or a strict ``YYYY-MM-DD`` string."""
    if isinstance(value, date):
        return value
    if isinstance(value, str) and _ISO_DATE.match(value):
        try:
            return date.fromisoformat(value)
        except ValueError:
            pass
    raise InvalidPayloadError(name, "expected an ISO date (YYYY-MM-DD)", value)


def _date(payload: Mapping[str, Any], name: str) -> date:
    value = _lookup(payload, name)
    if value is _MISSING:
        raise InvalidPayloadError(name, "is required")
    return parse_iso_date(value, name)


def _flag(payload: Mapping[str, Any], name: str) -> bool:
    value = _lookup(payload, name)
    if value is _MISSING:
        return False
    if not isinstance(value, bool):
        raise InvalidPayloadError(name, "expected a boolean", value)
    return value


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


def require_role(value: Any) -> Role:
    """Parse a creator role; unknown strings are a caller bug."""
    role = Role.parse(value)
    if role is None:
        raise UnknownRoleError(value)
    return role


def parse_event_request_status(value: Any) -> EventRequestStatus:
    try:
        return EventRequestStatus(value)
    except ValueError:
        raise UnknownStatusError(
            value, tuple(s.value for s in EventRequestStatus)
        ) from None


def parse_recommendation(value: Any) -> Recommendation:
    try:
        return Recommendation(value)
    except ValueError:
        raise InvalidRecommendationError(value) from None


def parse_review_decision(value: Any) -> TaskStatus:
    try:
        decision = TaskStatus(value)
    except ValueError:
        raise InvalidReviewDecisionError(value) from None
    if decision not in REVIEW_DECISIONS:
        raise InvalidReviewDecisionError(value)
    return decision


# ---------------------------------------------------------------------------
# Event requests
# ---------------------------------------------------------------------------


def parse_preferences(payload: Mapping[str, Any]) -> EventPreferences:
    """Read flags from a nested ``preferences`` mapping or from top level."""
    nested = _lookup(payload, "preferences")
    if isinstance(nested, EventPreferences):
        nested = _as_fields(nested)
    source = payload if nested is _MISSING else _require_mapping(nested, "preferences")
    return EventPreferences(**{flag: _flag(source, flag) for flag in PREFERENCE_FLAGS})


def parse_event_request_data(payload: Any) -> EventRequestData:
    if isinstance(payload, EventRequestData):
        payload = _as_fields(payload)
    payload = _require_mapping(payload, "event_request")

    start_date = _date(payload, "start_date")
    end_date = _date(payload, "end_date")
    if end_date < start_date:
        raise InvalidPayloadError("end_date", "must not precede start_date", end_date)

    return EventRequestData(
        client_name=_string(payload, "client_name"),
        client_email=_string(payload, "client_email"),
        client_phone=_string(payload, "client_phone"),
        event_type=_string(payload, "event_type"),
        start_date=start_date,
        end_date=end_date,
        expected_number=_positive_int(payload, "expected_number"),
        budget=_amount(payload, "budget"),
        preferences=parse_preferences(payload),
        record_number=_string(payload, "record_number", required=False),
    )


def parse_financial_review(payload: Any) -> FinancialReview:
    if isinstance(payload, FinancialReview):
        payload = _as_fields(payload)
    payload = _require_mapping(payload, "financial_review")
    return FinancialReview(
        reviewed_by=_string(payload, "reviewed_by"),
        comments=_string(payload, "comments", required=False) or "",
        recommendation=parse_recommendation(_lookup(payload, "recommendation")),
        budget_comments=_string(payload, "budget_comments", required=False),
    )


def parse_administration_review(payload: Any) -> AdministrationReview:
    if isinstance(payload, AdministrationReview):
        payload = _as_fields(payload)
    payload = _require_mapping(payload, "administration_review")
    return AdministrationReview(
        reviewed_by=_string(payload, "reviewed_by"),
        comments=_string(payload, "comments", required=False) or "",
        recommendation=parse_recommendation(_lookup(payload, "recommendation")),
    )


# ---------------------------------------------------------------------------
# Task distributions
# ---------------------------------------------------------------------------


def _assignees(payload: Mapping[str, Any]) -> tuple[str, ...]:
    value = _lookup(payload, "assigned_to")
    if value is _MISSING or isinstance(value, (str, bytes)) or not isinstance(
        value, (list, tuple, set, frozenset)
    ):
        raise InvalidPayloadError("assigned_to", "expected a list of member names", value)
    members: list[str] = []
    for member in value:
        if not isinstance(member, str) or not member.strip():
            raise InvalidPayloadError("assigned_to", "member names must be strings", member)
        if member not in members:
            members.append(member)
    return tuple(members)


def parse_sub_team_task(payload: Any, position: int) -> SubTeamTask:
    """Parse one task; ``position`` (1-based) names tasks that omit an id."""
    if isinstance(payload, SubTeamTask):
        payload = _as_fields(payload)
    payload = _require_mapping(payload, "tasks")
    task_id = _string(payload, "id", required=False) or f"TASK-{position:03d}"
    return SubTeamTask(
        id=task_id,
        sub_team=_string(payload, "sub_team"),
        assigned_to=_assignees(payload),
        requirements=_string(payload, "requirements", required=False) or "",
        allocated_budget=_amount(payload, "allocated_budget", allow_zero=True),
        deadline=_date(payload, "deadline"),
    )


def parse_task_distribution_data(payload: Any) -> TaskDistributionData:
    if isinstance(payload, TaskDistributionData):
        payload = _as_fields(payload)
    payload = _require_mapping(payload, "task_distribution")

    raw_tasks = _lookup(payload, "tasks")
    if raw_tasks is _MISSING or not isinstance(raw_tasks, (list, tuple)):
        raise InvalidPayloadError("tasks", "expected a list of tasks", raw_tasks)

    tasks = tuple(
        parse_sub_team_task(raw, position)
        for position, raw in enumerate(raw_tasks, start=1)
    )
    seen: set[str] = set()
    for task in tasks:
        if task.id in seen:
            raise DuplicateTaskIdError(task.id)
        seen.add(task.id)

    return TaskDistributionData(
        event_request_id=_string(payload, "event_request_id"),
        title=_string(payload, "title"),
        description=_string(payload, "description", required=False) or "",
        total_budget=_amount(payload, "total_budget", allow_zero=True),
        event_date=_date(payload, "event_date"),
        tasks=tasks,
    )


def parse_feedback(payload: Any) -> SubTeamFeedback:
    if isinstance(payload, SubTeamFeedback):
        payload = _as_fields(payload)
    payload = _require_mapping(payload, "feedback")
    return SubTeamFeedback(
        comments=_string(payload, "comments", required=False) or "",
        suggestions=_string(payload, "suggestions", required=False) or "",
        budget_increase=_amount(payload, "budget_increase", required=False),
    )
