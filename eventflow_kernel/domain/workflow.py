"""
Canonical workflow types (``eventflow_kernel.domain.workflow``).

Responsibility
--------------
Pure value objects for workflow state machines, and the two workflow
definitions the engine runs: the event-request review chain and the
per-task sub-team cycle.  The role authorizer evaluates these tables; the
workflows never hard-code who may do what.

Architecture position
---------------------
**Kernel domain layer** -- pure value objects.  ZERO I/O.

Invariants enforced
-------------------
* Transitions reference only states in ``Workflow.states``.
* ``initial_state`` is a member of ``states``.
* Terminal states have no outgoing transitions.
"""

from __future__ import annotations

from dataclasses import dataclass

from eventflow_kernel.domain.event_request import EventRequestStatus
from eventflow_kernel.domain.roles import Role
from eventflow_kernel.domain.task_distribution import TaskStatus


@dataclass(frozen=True)
class Transition:
    """A valid state transition in a workflow.

    Contract: frozen.  An actor may fire the transition when its role is in
    ``allowed_roles``, or, when ``allow_assignees`` is set, when it is named
    in the record's assignee list.
    """

    from_state: str
    to_state: str
    action: str
    allowed_roles: tuple[Role, ...] = ()
    allow_assignees: bool = False


@dataclass(frozen=True)
class Workflow:
    """A state machine definition for a record lifecycle.

    Contract: frozen; ``transitions`` reference only states in ``states``.
    """

    name: str
    description: str
    initial_state: str
    states: tuple[str, ...]
    transitions: tuple[Transition, ...]
    terminal_states: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.initial_state not in self.states:
            raise ValueError(
                f"Workflow '{self.name}': initial state "
                f"'{self.initial_state}' not in states"
            )
        for t in self.transitions:
            if t.from_state not in self.states or t.to_state not in self.states:
                raise ValueError(
                    f"Workflow '{self.name}': transition '{t.action}' "
                    f"references unknown state ({t.from_state} -> {t.to_state})"
                )
            if t.from_state in self.terminal_states:
                raise ValueError(
                    f"Workflow '{self.name}': terminal state "
                    f"'{t.from_state}' has outgoing transition '{t.action}'"
                )

    def transitions_for(self, from_state: str, action: str) -> tuple[Transition, ...]:
        """All transitions named ``action`` leaving ``from_state``."""
        return tuple(
            t for t in self.transitions
            if t.from_state == from_state and t.action == action
        )

    def actions(self) -> frozenset[str]:
        return frozenset(t.action for t in self.transitions)


# -----------------------------------------------------------------------------
# Event request workflow
# -----------------------------------------------------------------------------

ACTION_FORWARD_TO_SENIOR_CS = "forward_to_senior_cs"
ACTION_UPDATE_STATUS = "update_status"
ACTION_SUBMIT_FINANCIAL_REVIEW = "submit_financial_review"
ACTION_SUBMIT_ADMINISTRATION_REVIEW = "submit_administration_review"

_ER = EventRequestStatus

EVENT_REQUEST_WORKFLOW = Workflow(
    name="event_request",
    description="Customer event request review chain",
    initial_state=_ER.DRAFT.value,
    states=tuple(s.value for s in EventRequestStatus),
    transitions=(
        Transition(
            from_state=_ER.DRAFT.value,
            to_state=_ER.PENDING_SCS_REVIEW.value,
            action=ACTION_FORWARD_TO_SENIOR_CS,
            allowed_roles=(Role.CS,),
        ),
        Transition(
            from_state=_ER.PENDING_SCS_REVIEW.value,
            to_state=_ER.PENDING_FINANCIAL_REVIEW.value,
            action=ACTION_UPDATE_STATUS,
            allowed_roles=(Role.SCS,),
        ),
        Transition(
            from_state=_ER.PENDING_FINANCIAL_REVIEW.value,
            to_state=_ER.PENDING_ADMINISTRATION_REVIEW.value,
            action=ACTION_SUBMIT_FINANCIAL_REVIEW,
            allowed_roles=(Role.FM,),
        ),
        Transition(
            from_state=_ER.PENDING_FINANCIAL_REVIEW.value,
            to_state=_ER.REJECTED.value,
            action=ACTION_SUBMIT_FINANCIAL_REVIEW,
            allowed_roles=(Role.FM,),
        ),
        Transition(
            from_state=_ER.PENDING_ADMINISTRATION_REVIEW.value,
            to_state=_ER.APPROVED.value,
            action=ACTION_SUBMIT_ADMINISTRATION_REVIEW,
            allowed_roles=(Role.AM,),
        ),
        Transition(
            from_state=_ER.PENDING_ADMINISTRATION_REVIEW.value,
            to_state=_ER.REJECTED.value,
            action=ACTION_SUBMIT_ADMINISTRATION_REVIEW,
            allowed_roles=(Role.AM,),
        ),
    ),
    terminal_states=(_ER.APPROVED.value, _ER.REJECTED.value),
)

# Status each role is expected to act on (drives per-role dashboards).
ROLE_PENDING_STATUS: dict[Role, EventRequestStatus] = {
    Role.CS: _ER.DRAFT,
    Role.SCS: _ER.PENDING_SCS_REVIEW,
    Role.FM: _ER.PENDING_FINANCIAL_REVIEW,
    Role.AM: _ER.PENDING_ADMINISTRATION_REVIEW,
}


# -----------------------------------------------------------------------------
# Sub-team task workflow
# -----------------------------------------------------------------------------

ACTION_FORWARD_TO_SUB_TEAM = "forward_to_sub_team"
ACTION_SUBMIT_FEEDBACK = "submit_feedback"
ACTION_REVIEW_FEEDBACK = "review_feedback"

_TASK_MANAGERS = (Role.PM, Role.SM)

SUB_TEAM_TASK_WORKFLOW = Workflow(
    name="sub_team_task",
    description="Per-task assignment, feedback, and review cycle",
    initial_state=TaskStatus.PENDING.value,
    states=tuple(s.value for s in TaskStatus),
    transitions=(
        Transition(
            from_state=TaskStatus.PENDING.value,
            to_state=TaskStatus.ASSIGNED.value,
            action=ACTION_FORWARD_TO_SUB_TEAM,
            allowed_roles=_TASK_MANAGERS,
        ),
        Transition(
            from_state=TaskStatus.ASSIGNED.value,
            to_state=TaskStatus.FEEDBACK_SUBMITTED.value,
            action=ACTION_SUBMIT_FEEDBACK,
            allow_assignees=True,
        ),
        Transition(
            from_state=TaskStatus.FEEDBACK_SUBMITTED.value,
            to_state=TaskStatus.APPROVED.value,
            action=ACTION_REVIEW_FEEDBACK,
            allowed_roles=_TASK_MANAGERS,
        ),
        Transition(
            from_state=TaskStatus.FEEDBACK_SUBMITTED.value,
            to_state=TaskStatus.NEEDS_REVISION.value,
            action=ACTION_REVIEW_FEEDBACK,
            allowed_roles=_TASK_MANAGERS,
        ),
    ),
    terminal_states=(TaskStatus.APPROVED.value, TaskStatus.NEEDS_REVISION.value),
)
