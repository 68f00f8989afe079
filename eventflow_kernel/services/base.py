"""
BaseWorkflowService -- shared plumbing for the record workflows.

Responsibility:
    Holds the injected record store, role authorizer, and clock, and emits
    the one structured ``workflow_transition`` log record every transition
    attempt produces, whether applied or refused.

Architecture position:
    Kernel > Services.  May import from domain/, db/, and eventflow_engines.

Invariants enforced:
    - Refusal is a return value: ``_refuse`` logs the reason and returns
      None, it never raises.
    - Transition records always carry workflow, action, record_id,
      from_state, outcome, reason, and duration_ms.
"""

from __future__ import annotations

import time
from abc import ABC
from enum import Enum
from typing import Any, Generic, TypeVar

from eventflow_engines.authorizer import RoleAuthorizer
from eventflow_kernel.db.store import RecordStore
from eventflow_kernel.domain.clock import Clock, SystemClock
from eventflow_kernel.domain.workflow import Workflow
from eventflow_kernel.logging_config import get_logger

logger = get_logger("services.workflow")

RecordType = TypeVar("RecordType")

# Trace message and outcome codes for structured logging
TRACE_TYPE_WORKFLOW_TRANSITION = "WORKFLOW_TRANSITION"
OUTCOME_APPLIED = "applied"
OUTCOME_REFUSED = "refused"

REASON_RECORD_NOT_FOUND = "record_not_found"
REASON_TASK_NOT_FOUND = "task_not_found"


def _state_value(state: Any) -> Any:
    return state.value if isinstance(state, Enum) else state


class BaseWorkflowService(ABC, Generic[RecordType]):
    """
    Abstract base for the event-request and task-distribution workflows.

    Contract:
        The store, authorizer, and clock are injected; the service owns no
        process-wide state.
    """

    def __init__(
        self,
        store: RecordStore[RecordType],
        workflow: Workflow,
        clock: Clock | None = None,
    ) -> None:
        self._store = store
        self._workflow = workflow
        self._authorizer = RoleAuthorizer(workflow)
        self._clock = clock or SystemClock()

    @property
    def store(self) -> RecordStore[RecordType]:
        return self._store

    @property
    def workflow(self) -> Workflow:
        return self._workflow

    def _emit_transition_trace(
        self,
        *,
        action: str,
        record_id: str,
        actor: Any,
        from_state: Any,
        outcome: str,
        started: float,
        reason: str = "",
        to_state: Any = None,
        task_id: str | None = None,
    ) -> None:
        record: dict[str, Any] = {
            "trace_type": TRACE_TYPE_WORKFLOW_TRANSITION,
            "workflow": self._workflow.name,
            "action": action,
            "record_id": record_id,
            "actor": _state_value(actor),
            "from_state": _state_value(from_state),
            "outcome": outcome,
            "reason": reason,
            "duration_ms": round((time.monotonic() - started) * 1000, 3),
        }
        if to_state is not None:
            record["to_state"] = _state_value(to_state)
        if task_id is not None:
            record["task_id"] = task_id
        logger.info("workflow_transition", extra=record)

    def _refuse(
        self,
        *,
        action: str,
        record_id: str,
        actor: Any,
        from_state: Any,
        reason: str,
        started: float,
        task_id: str | None = None,
    ) -> None:
        self._emit_transition_trace(
            action=action,
            record_id=record_id,
            actor=actor,
            from_state=from_state,
            outcome=OUTCOME_REFUSED,
            reason=reason,
            started=started,
            task_id=task_id,
        )
        return None

    def clear(self) -> None:
        """Reset the underlying store. FOR TESTING ONLY."""
        self._store.clear()
