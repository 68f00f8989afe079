"""
eventflow_kernel.services.task_distribution_service -- Sub-team task cycle.

Responsibility:
    Manages task distributions: a parent record whose sub-team tasks each
    run PENDING -> ASSIGNED -> FEEDBACK_SUBMITTED -> APPROVED |
    NEEDS_REVISION on their own track.  Applies approved budget increases
    to a task's allocation.

Architecture position:
    Kernel > Services.  May import from domain/, db/, and eventflow_engines.

Invariants enforced:
    - Task independence: every transition is scoped to one task id; the
      other tasks in the distribution are carried over unchanged.
    - Feedback requires assignment: feedback on a task that is not
      ASSIGNED is refused, and only the task's assignees may submit it.
    - Budget additivity: an approved increase adds exactly the requested
      amount, once; the requested amount itself is never altered.
    - Refusal, not error: wrong role, wrong state, unknown distribution or
      task id, or a repeated call returns None without mutating anything.

Failure modes:
    - InvalidPayloadError / UnknownRoleError / DuplicateTaskIdError on a
      malformed create payload.
    - InvalidPayloadError on malformed feedback.
    - InvalidReviewDecisionError when the decision is not APPROVED or
      NEEDS_REVISION.
"""

from __future__ import annotations

import time
from dataclasses import replace
from datetime import datetime
from typing import Any, Callable

from eventflow_engines.validation import (
    parse_feedback,
    parse_review_decision,
    parse_task_distribution_data,
    require_role,
)
from eventflow_kernel.db.store import RecordStore
from eventflow_kernel.domain.clock import Clock
from eventflow_kernel.domain.roles import Role
from eventflow_kernel.domain.task_distribution import (
    SubTeamTask,
    TaskDistribution,
    TaskStatus,
    distributions_visible_to,
)
from eventflow_kernel.domain.workflow import (
    ACTION_FORWARD_TO_SUB_TEAM,
    ACTION_REVIEW_FEEDBACK,
    ACTION_SUBMIT_FEEDBACK,
    SUB_TEAM_TASK_WORKFLOW,
)
from eventflow_kernel.exceptions import InvalidPayloadError
from eventflow_kernel.logging_config import LogContext, get_logger
from eventflow_kernel.services.base import (
    OUTCOME_APPLIED,
    REASON_RECORD_NOT_FOUND,
    REASON_TASK_NOT_FOUND,
    BaseWorkflowService,
)

logger = get_logger("services.task_distribution")


def _actor_name(actor: Any) -> str:
    return actor.value if isinstance(actor, Role) else str(actor)


class TaskDistributionWorkflow(BaseWorkflowService[TaskDistribution]):
    """Per-task state machines nested in a task distribution."""

    def __init__(
        self,
        store: RecordStore[TaskDistribution],
        clock: Clock | None = None,
    ) -> None:
        super().__init__(store, SUB_TEAM_TASK_WORKFLOW, clock)

    def create(self, data: Any, actor_role: Any) -> TaskDistribution:
        """Create a DRAFT distribution; every task starts PENDING."""
        parsed = parse_task_distribution_data(data)
        role = require_role(actor_role)
        distribution = self._store.insert(
            TaskDistribution.from_data(parsed, created_by=role, created_at=self._clock.now())
        )
        logger.info(
            "task_distribution_created",
            extra={
                "record_id": distribution.id,
                "created_by": role.value,
                "event_request_id": distribution.event_request_id,
                "task_count": len(distribution.tasks),
                "total_budget": distribution.total_budget,
            },
        )
        return distribution

    # ------------------------------------------------------------------
    # Task transitions
    # ------------------------------------------------------------------

    def _task_transition(
        self,
        distribution_id: str,
        task_id: str,
        action: str,
        actor: Any,
        target_state: TaskStatus,
        apply: Callable[[SubTeamTask, datetime], SubTeamTask],
    ) -> TaskDistribution | None:
        started = time.monotonic()
        with LogContext.bind(record_id=distribution_id, workflow=self._workflow.name), \
                self._store.locked(distribution_id):
            current = self._store.get(distribution_id)
            if current is None:
                return self._refuse(
                    action=action, record_id=distribution_id, actor=actor,
                    from_state=None, reason=REASON_RECORD_NOT_FOUND,
                    started=started, task_id=task_id,
                )

            task = current.find_task(task_id)
            if task is None:
                return self._refuse(
                    action=action, record_id=distribution_id, actor=actor,
                    from_state=None, reason=REASON_TASK_NOT_FOUND,
                    started=started, task_id=task_id,
                )

            reason = self._authorizer.explain_refusal(
                task.status, action, actor,
                target_state=target_state, assignees=task.assigned_to,
            )
            if reason is not None:
                return self._refuse(
                    action=action, record_id=distribution_id, actor=actor,
                    from_state=task.status, reason=reason,
                    started=started, task_id=task_id,
                )

            now = self._clock.now()
            updated = self._store.update(current.with_task(apply(task, now), updated_at=now))

        self._emit_transition_trace(
            action=action,
            record_id=distribution_id,
            actor=actor,
            from_state=task.status,
            to_state=target_state,
            outcome=OUTCOME_APPLIED,
            started=started,
            task_id=task_id,
        )
        return updated

    def forward_task_to_sub_team(
        self,
        distribution_id: str,
        task_id: str,
        actor_role: Any,
    ) -> TaskDistribution | None:
        """PENDING -> ASSIGNED for one task. Re-forwarding is refused."""
        return self._task_transition(
            distribution_id,
            task_id,
            ACTION_FORWARD_TO_SUB_TEAM,
            actor_role,
            TaskStatus.ASSIGNED,
            lambda task, now: replace(task, status=TaskStatus.ASSIGNED),
        )

    def submit_sub_team_feedback(
        self,
        distribution_id: str,
        task_id: str,
        feedback: Any,
        actor: Any,
    ) -> TaskDistribution | None:
        """Attach an assignee's feedback: ASSIGNED -> FEEDBACK_SUBMITTED.

        A requested ``budget_increase`` is recorded but not applied; the
        allocation changes only when a reviewer approves it.
        """
        parsed = parse_feedback(feedback)
        return self._task_transition(
            distribution_id,
            task_id,
            ACTION_SUBMIT_FEEDBACK,
            actor,
            TaskStatus.FEEDBACK_SUBMITTED,
            lambda task, now: replace(
                task,
                status=TaskStatus.FEEDBACK_SUBMITTED,
                feedback=replace(parsed, submitted_by=_actor_name(actor), submitted_at=now),
            ),
        )

    def review_sub_team_feedback(
        self,
        distribution_id: str,
        task_id: str,
        decision: Any,
        actor_role: Any,
        approve_budget_increase: bool = False,
    ) -> TaskDistribution | None:
        """Settle submitted feedback as APPROVED or NEEDS_REVISION.

        With ``approve_budget_increase`` and a requested increase present,
        the task's allocation grows by exactly that amount.

        Raises:
            InvalidReviewDecisionError: for any other decision.
            InvalidPayloadError: if ``approve_budget_increase`` is not a bool.
        """
        outcome = parse_review_decision(decision)
        if not isinstance(approve_budget_increase, bool):
            raise InvalidPayloadError(
                "approve_budget_increase", "expected a boolean", approve_budget_increase,
            )

        def apply(task: SubTeamTask, now: datetime) -> SubTeamTask:
            allocated = task.allocated_budget
            increase = task.feedback.budget_increase if task.feedback else None
            if approve_budget_increase and increase is not None:
                allocated = allocated + increase
                logger.info(
                    "budget_increase_approved",
                    extra={
                        "record_id": distribution_id,
                        "task_id": task.id,
                        "previous_budget": task.allocated_budget,
                        "budget_increase": increase,
                        "allocated_budget": allocated,
                    },
                )
            return replace(task, status=outcome, allocated_budget=allocated)

        return self._task_transition(
            distribution_id, task_id, ACTION_REVIEW_FEEDBACK, actor_role, outcome, apply,
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_by_id(self, distribution_id: str) -> TaskDistribution | None:
        return self._store.get(distribution_id)

    def get_all(self) -> list[TaskDistribution]:
        return self._store.list_all()

    def get_for_user(self, identifier: Any) -> list[TaskDistribution]:
        """Distributions a role created or a member is assigned a task in."""
        return distributions_visible_to(self._store.list_all(), identifier)
