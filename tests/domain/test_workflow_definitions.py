"""
Tests for the workflow value objects and the two shipped definitions.

Covers:
- Workflow construction checks (unknown states, outgoing terminal edges)
- The event-request chain and the sub-team task cycle tables
- The role -> pending status map
"""

import pytest

from eventflow_kernel.domain.event_request import EventRequestStatus
from eventflow_kernel.domain.roles import Role
from eventflow_kernel.domain.task_distribution import TaskStatus
from eventflow_kernel.domain.workflow import (
    ACTION_FORWARD_TO_SENIOR_CS,
    ACTION_FORWARD_TO_SUB_TEAM,
    ACTION_REVIEW_FEEDBACK,
    ACTION_SUBMIT_FEEDBACK,
    ACTION_SUBMIT_FINANCIAL_REVIEW,
    ACTION_UPDATE_STATUS,
    EVENT_REQUEST_WORKFLOW,
    ROLE_PENDING_STATUS,
    SUB_TEAM_TASK_WORKFLOW,
    Transition,
    Workflow,
)


class TestWorkflowConstruction:

    def test_initial_state_must_be_a_state(self):
        with pytest.raises(ValueError, match="initial state"):
            Workflow(
                name="w", description="", initial_state="X",
                states=("A",), transitions=(),
            )

    def test_transition_must_reference_known_states(self):
        with pytest.raises(ValueError, match="unknown state"):
            Workflow(
                name="w", description="", initial_state="A", states=("A",),
                transitions=(Transition("A", "B", "go"),),
            )

    def test_terminal_state_has_no_outgoing_transition(self):
        with pytest.raises(ValueError, match="terminal state"):
            Workflow(
                name="w", description="", initial_state="A", states=("A", "B"),
                transitions=(Transition("B", "A", "back"),),
                terminal_states=("B",),
            )

    def test_transitions_for_filters_by_state_and_action(self):
        found = EVENT_REQUEST_WORKFLOW.transitions_for(
            "PENDING_FINANCIAL_REVIEW", ACTION_SUBMIT_FINANCIAL_REVIEW,
        )
        assert {t.to_state for t in found} == {
            "PENDING_ADMINISTRATION_REVIEW", "REJECTED",
        }


class TestEventRequestWorkflow:

    def test_initial_state_is_draft(self):
        assert EVENT_REQUEST_WORKFLOW.initial_state == EventRequestStatus.DRAFT.value

    def test_forward_is_customer_service_only(self):
        (transition,) = EVENT_REQUEST_WORKFLOW.transitions_for("DRAFT", ACTION_FORWARD_TO_SENIOR_CS)
        assert transition.allowed_roles == (Role.CS,)
        assert transition.to_state == "PENDING_SCS_REVIEW"

    def test_senior_cs_hands_off_to_finance(self):
        (transition,) = EVENT_REQUEST_WORKFLOW.transitions_for(
            "PENDING_SCS_REVIEW", ACTION_UPDATE_STATUS,
        )
        assert transition.allowed_roles == (Role.SCS,)
        assert transition.to_state == "PENDING_FINANCIAL_REVIEW"

    @pytest.mark.parametrize("state", ["APPROVED", "REJECTED"])
    def test_terminal_states_have_no_exits(self, state):
        assert not [t for t in EVENT_REQUEST_WORKFLOW.transitions if t.from_state == state]


class TestSubTeamTaskWorkflow:

    def test_states_mirror_task_status(self):
        assert set(SUB_TEAM_TASK_WORKFLOW.states) == {s.value for s in TaskStatus}

    def test_feedback_admits_assignees_only(self):
        (transition,) = SUB_TEAM_TASK_WORKFLOW.transitions_for("ASSIGNED", ACTION_SUBMIT_FEEDBACK)
        assert transition.allow_assignees is True
        assert transition.allowed_roles == ()

    def test_managers_forward_and_review(self):
        (forward,) = SUB_TEAM_TASK_WORKFLOW.transitions_for("PENDING", ACTION_FORWARD_TO_SUB_TEAM)
        reviews = SUB_TEAM_TASK_WORKFLOW.transitions_for(
            "FEEDBACK_SUBMITTED", ACTION_REVIEW_FEEDBACK,
        )
        assert set(forward.allowed_roles) == {Role.PM, Role.SM}
        assert all(set(t.allowed_roles) == {Role.PM, Role.SM} for t in reviews)

    def test_needs_revision_is_terminal(self):
        assert "NEEDS_REVISION" in SUB_TEAM_TASK_WORKFLOW.terminal_states


class TestRolePendingStatus:

    def test_mapping(self):
        assert ROLE_PENDING_STATUS == {
            Role.CS: EventRequestStatus.DRAFT,
            Role.SCS: EventRequestStatus.PENDING_SCS_REVIEW,
            Role.FM: EventRequestStatus.PENDING_FINANCIAL_REVIEW,
            Role.AM: EventRequestStatus.PENDING_ADMINISTRATION_REVIEW,
        }

    @pytest.mark.parametrize("role", [Role.PM, Role.SM, Role.HR])
    def test_task_roles_have_no_event_request_queue(self, role):
        assert role not in ROLE_PENDING_STATUS
