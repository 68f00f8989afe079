"""
Task distribution domain types (``eventflow_kernel.domain.task_distribution``).

Responsibility
--------------
Pure value objects for a task distribution: a parent record holding an
ordered sequence of sub-team tasks, each running its own
assignment / feedback / review cycle.

Architecture position
---------------------
**Kernel domain layer** -- pure value objects.  ZERO I/O.

Invariants enforced
-------------------
* Sibling tasks progress independently; every task-level change replaces
  exactly one element of ``tasks`` (``TaskDistribution.with_task``).
* ``allocated_budget`` only grows, and only by an approved
  ``SubTeamFeedback.budget_increase``.
* The parent status is derived from the task statuses
  (``aggregate_distribution_status``), never set directly.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, replace
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from eventflow_kernel.domain.roles import Role


class TaskStatus(str, Enum):
    """Sub-team task lifecycle states."""

    PENDING = "PENDING"
    ASSIGNED = "ASSIGNED"
    FEEDBACK_SUBMITTED = "FEEDBACK_SUBMITTED"
    APPROVED = "APPROVED"
    NEEDS_REVISION = "NEEDS_REVISION"


# Decisions a reviewer may hand down on submitted feedback.
REVIEW_DECISIONS: frozenset[TaskStatus] = frozenset({
    TaskStatus.APPROVED,
    TaskStatus.NEEDS_REVISION,
})


class TaskDistributionStatus(str, Enum):
    """Parent record status, aggregated from its tasks."""

    DRAFT = "DRAFT"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"


@dataclass(frozen=True)
class SubTeamFeedback:
    """Feedback a sub-team returns on an assigned task."""

    comments: str
    suggestions: str
    budget_increase: Decimal | None = None
    submitted_by: str | None = None
    submitted_at: datetime | None = None


@dataclass(frozen=True)
class SubTeamTask:
    """One independently tracked unit of work within a distribution."""

    id: str
    sub_team: str
    assigned_to: tuple[str, ...]
    requirements: str
    allocated_budget: Decimal
    deadline: date
    status: TaskStatus = TaskStatus.PENDING
    feedback: SubTeamFeedback | None = None

    def is_assignee(self, member: str) -> bool:
        return member in self.assigned_to


@dataclass(frozen=True)
class TaskDistributionData:
    """Validated creation payload for a task distribution."""

    event_request_id: str
    title: str
    description: str
    total_budget: Decimal
    event_date: date
    tasks: tuple[SubTeamTask, ...]


@dataclass(frozen=True)
class TaskDistribution:
    """Immutable snapshot of a task distribution."""

    id: str
    event_request_id: str
    title: str
    description: str
    total_budget: Decimal
    event_date: date
    created_by: Role
    tasks: tuple[SubTeamTask, ...] = ()
    status: TaskDistributionStatus = TaskDistributionStatus.DRAFT
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_data(
        cls,
        data: TaskDistributionData,
        created_by: Role,
        created_at: datetime | None = None,
    ) -> TaskDistribution:
        tasks = tuple(
            replace(t, status=TaskStatus.PENDING, feedback=None) for t in data.tasks
        )
        return cls(
            id="",
            event_request_id=data.event_request_id,
            title=data.title,
            description=data.description,
            total_budget=data.total_budget,
            event_date=data.event_date,
            created_by=created_by,
            tasks=tasks,
            status=aggregate_distribution_status(tasks),
            created_at=created_at,
            updated_at=created_at,
        )

    def find_task(self, task_id: str) -> SubTeamTask | None:
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None

    def with_task(
        self,
        task: SubTeamTask,
        updated_at: datetime | None = None,
    ) -> TaskDistribution:
        """Return a copy with the same-id task replaced and status re-derived."""
        tasks = tuple(task if t.id == task.id else t for t in self.tasks)
        return replace(
            self,
            tasks=tasks,
            status=aggregate_distribution_status(tasks),
            updated_at=updated_at or self.updated_at,
        )

    def involves_member(self, member: str) -> bool:
        return any(t.is_assignee(member) for t in self.tasks)

    @property
    def allocated_total(self) -> Decimal:
        return sum((t.allocated_budget for t in self.tasks), Decimal("0"))


def aggregate_distribution_status(
    tasks: tuple[SubTeamTask, ...],
) -> TaskDistributionStatus:
    """DRAFT until any task moves, COMPLETED once every task is APPROVED."""
    if all(t.status == TaskStatus.PENDING for t in tasks):
        return TaskDistributionStatus.DRAFT
    if all(t.status == TaskStatus.APPROVED for t in tasks):
        return TaskDistributionStatus.COMPLETED
    return TaskDistributionStatus.IN_PROGRESS


def distributions_visible_to(
    distributions: Iterable[TaskDistribution],
    identifier: Any,
) -> list[TaskDistribution]:
    """Distributions relevant to a role or to a sub-team member.

    Two identifier namespaces share this lookup: a Role matches the
    distributions that role created, and any name matches the
    distributions in which some task lists it in ``assigned_to``.
    Non-string identifiers match nothing.
    """
    if not isinstance(identifier, str):
        return []
    role = Role.parse(identifier)
    return [
        d for d in distributions
        if (role is not None and d.created_by == role) or d.involves_member(identifier)
    ]
