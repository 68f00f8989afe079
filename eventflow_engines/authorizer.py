"""
eventflow_engines.authorizer -- Pure role authorization for workflow transitions.

Responsibility:
    Decide whether an actor may fire a named action on a record in its
    current state, by evaluating the declarative transition tables in
    ``eventflow_kernel.domain.workflow``.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import eventflow_kernel/domain/ types.

Invariants enforced:
    - Refusal, not error: every unknown action, wrong source state, wrong
      role, or unknown actor string yields ``False``.  Nothing here raises.
    - Assignee gating: transitions flagged ``allow_assignees`` accept only
      actors named in the record's assignee list.
    - Purity: no clock access, no I/O, no store access.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from eventflow_kernel.domain.roles import Role
from eventflow_kernel.domain.workflow import Transition, Workflow

# Refusal reason codes, used in structured transition logs
REASON_UNKNOWN_ACTION = "unknown_action"
REASON_INVALID_SOURCE_STATE = "invalid_source_state"
REASON_INVALID_TARGET_STATE = "invalid_target_state"
REASON_ACTOR_NOT_AUTHORIZED = "actor_not_authorized"


def _state_value(state: Any) -> Any:
    return state.value if isinstance(state, Enum) else state


def select_transition(
    workflow: Workflow,
    current_state: Any,
    action: str,
    target_state: Any = None,
) -> Transition | None:
    """Select the transition for ``action`` from ``current_state``.

    When the action has several outcomes (approve / reject), ``target_state``
    picks one; without it the first declared outcome is returned.

    Returns:
        The matching transition, or None if the action is not defined for
        the current state (or not toward the requested target).
    """
    candidates = workflow.transitions_for(_state_value(current_state), action)
    if target_state is None:
        return candidates[0] if candidates else None

    target = _state_value(target_state)
    for transition in candidates:
        if transition.to_state == target:
            return transition
    return None


def validate_actor_authority(
    transition: Transition,
    actor: Any,
    assignees: Iterable[str] = (),
) -> bool:
    """Check if ``actor`` may fire ``transition``.

    Args:
        transition: The transition being attempted.
        actor: A Role (or role string), or a sub-team member name.
        assignees: Member names assigned to the record, for transitions
            that admit assignees.

    Returns:
        True if the actor's role is in ``allowed_roles``, or the transition
        admits assignees and the actor is one of them.
    """
    role = Role.parse(actor)
    if role is not None and role in transition.allowed_roles:
        return True
    if transition.allow_assignees and isinstance(actor, str):
        return actor in tuple(assignees)
    return False


def explain_refusal(
    workflow: Workflow,
    current_state: Any,
    action: str,
    actor: Any,
    *,
    target_state: Any = None,
    assignees: Iterable[str] = (),
) -> str | None:
    """Return the reason a transition would be refused, or None if allowed."""
    if action not in workflow.actions():
        return REASON_UNKNOWN_ACTION

    if not workflow.transitions_for(_state_value(current_state), action):
        return REASON_INVALID_SOURCE_STATE

    transition = select_transition(workflow, current_state, action, target_state)
    if transition is None:
        return REASON_INVALID_TARGET_STATE

    if not validate_actor_authority(transition, actor, assignees):
        return REASON_ACTOR_NOT_AUTHORIZED

    return None


def can_transition(
    workflow: Workflow,
    current_state: Any,
    action: str,
    actor: Any,
    *,
    target_state: Any = None,
    assignees: Iterable[str] = (),
) -> bool:
    """Pure predicate: may ``actor`` fire ``action`` from ``current_state``?"""
    return explain_refusal(
        workflow,
        current_state,
        action,
        actor,
        target_state=target_state,
        assignees=assignees,
    ) is None


@dataclass(frozen=True)
class RoleAuthorizer:
    """A workflow-bound view of the authorization functions.

    Contract: frozen, stateless.  Workflows hold one of these so the
    transition table they consult is fixed at construction.
    """

    workflow: Workflow

    def can_transition(
        self,
        current_state: Any,
        action: str,
        actor: Any,
        *,
        target_state: Any = None,
        assignees: Iterable[str] = (),
    ) -> bool:
        return can_transition(
            self.workflow,
            current_state,
            action,
            actor,
            target_state=target_state,
            assignees=assignees,
        )

    def explain_refusal(
        self,
        current_state: Any,
        action: str,
        actor: Any,
        *,
        target_state: Any = None,
        assignees: Iterable[str] = (),
    ) -> str | None:
        return explain_refusal(
            self.workflow,
            current_state,
            action,
            actor,
            target_state=target_state,
            assignees=assignees,
        )
