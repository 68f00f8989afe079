"""
eventflow_kernel.services.query_service -- Per-role work items for dashboards.

Responsibility:
    Derives, for a role or a sub-team member, the records currently
    waiting on that party's action, and summary counts for a dashboard.

Architecture position:
    Kernel > Services (read side).  Reads store snapshots; NEVER mutates.

Invariants enforced:
    - Event-request work items are exactly the records whose status is the
      role's designated pending status (``ROLE_PENDING_STATUS``).
    - Task work items are the tasks the role authorizer would let the
      party act on right now, within the distributions visible to it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from eventflow_engines.authorizer import can_transition
from eventflow_kernel.db.store import RecordStore
from eventflow_kernel.domain.event_request import EventRequest, EventRequestStatus
from eventflow_kernel.domain.roles import Role
from eventflow_kernel.domain.task_distribution import (
    SubTeamTask,
    TaskDistribution,
    distributions_visible_to,
)
from eventflow_kernel.domain.workflow import (
    ROLE_PENDING_STATUS,
    SUB_TEAM_TASK_WORKFLOW,
)


@dataclass(frozen=True)
class TaskWorkItem:
    """One task awaiting action, with the actions the party may take."""

    distribution_id: str
    distribution_title: str
    task: SubTeamTask
    actions: tuple[str, ...]


@dataclass(frozen=True)
class WorkItems:
    """Everything currently waiting on one party."""

    identifier: str
    event_requests: tuple[EventRequest, ...] = ()
    tasks: tuple[TaskWorkItem, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.event_requests and not self.tasks


@dataclass(frozen=True)
class DashboardSummary:
    identifier: str
    role: Role | None
    event_request_counts: dict[EventRequestStatus, int] = field(default_factory=dict)
    pending_event_requests: int = 0
    pending_tasks: int = 0


class QueryService:
    """Read-only queries over both record stores."""

    def __init__(
        self,
        event_requests: RecordStore[EventRequest],
        task_distributions: RecordStore[TaskDistribution],
    ) -> None:
        self._event_requests = event_requests
        self._task_distributions = task_distributions

    @staticmethod
    def pending_status_for(role: Any) -> EventRequestStatus | None:
        """The single event-request status ``role`` is expected to act on."""
        parsed = Role.parse(role)
        if parsed is None:
            return None
        return ROLE_PENDING_STATUS.get(parsed)

    def event_requests_for(self, role: Any) -> list[EventRequest]:
        status = self.pending_status_for(role)
        if status is None:
            return []
        return [r for r in self._event_requests.list_all() if r.status == status]

    def visible_distributions(self, identifier: Any) -> list[TaskDistribution]:
        """Distributions created by a role, or listing a member as assignee."""
        return distributions_visible_to(self._task_distributions.list_all(), identifier)

    def task_work_items_for(self, identifier: Any) -> list[TaskWorkItem]:
        items: list[TaskWorkItem] = []
        actions = sorted(SUB_TEAM_TASK_WORKFLOW.actions())
        for distribution in self.visible_distributions(identifier):
            for task in distribution.tasks:
                allowed = tuple(
                    action for action in actions
                    if can_transition(
                        SUB_TEAM_TASK_WORKFLOW,
                        task.status,
                        action,
                        identifier,
                        assignees=task.assigned_to,
                    )
                )
                if allowed:
                    items.append(TaskWorkItem(
                        distribution_id=distribution.id,
                        distribution_title=distribution.title,
                        task=task,
                        actions=allowed,
                    ))
        return items

    def work_items_for(self, identifier: Any) -> WorkItems:
        return WorkItems(
            identifier=str(identifier),
            event_requests=tuple(self.event_requests_for(identifier)),
            tasks=tuple(self.task_work_items_for(identifier)),
        )

    def dashboard_summary(self, identifier: Any) -> DashboardSummary:
        counts = {status: 0 for status in EventRequestStatus}
        for request in self._event_requests.list_all():
            counts[request.status] += 1
        work = self.work_items_for(identifier)
        return DashboardSummary(
            identifier=str(identifier),
            role=Role.parse(identifier),
            event_request_counts=counts,
            pending_event_requests=len(work.event_requests),
            pending_tasks=len(work.tasks),
        )
