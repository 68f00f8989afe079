"""Tests for per-role work items and dashboard summaries."""

import pytest

from eventflow_kernel.domain.event_request import EventRequestStatus
from eventflow_kernel.domain.roles import Role
from eventflow_kernel.domain.workflow import (
    ACTION_FORWARD_TO_SUB_TEAM,
    ACTION_REVIEW_FEEDBACK,
    ACTION_SUBMIT_FEEDBACK,
)
from tests.factories import make_event_request_payload, make_task_distribution_payload


@pytest.fixture
def populated(event_requests, task_distributions):
    """Two drafts, one request at Senior CS, and a distribution mid-cycle."""
    first = event_requests.create(make_event_request_payload(), "CS")
    event_requests.create(make_event_request_payload(), "CS")
    event_requests.create(make_event_request_payload(), "CS")
    event_requests.forward_to_senior_cs(first.id, "CS")

    distribution = task_distributions.create(make_task_distribution_payload(), "PM")
    task_distributions.forward_task_to_sub_team(distribution.id, "TASK-001", "PM")
    return distribution


class TestPendingStatusFor:

    @pytest.mark.parametrize("role, status", [
        ("CS", EventRequestStatus.DRAFT),
        (Role.SCS, EventRequestStatus.PENDING_SCS_REVIEW),
        ("FM", EventRequestStatus.PENDING_FINANCIAL_REVIEW),
        ("AM", EventRequestStatus.PENDING_ADMINISTRATION_REVIEW),
    ])
    def test_mapped_roles(self, query_service, role, status):
        assert query_service.pending_status_for(role) == status

    @pytest.mark.parametrize("role", ["PM", "HR", "John Doe", None])
    def test_unmapped(self, query_service, role):
        assert query_service.pending_status_for(role) is None


class TestWorkItems:

    def test_customer_service_sees_drafts(self, query_service, populated):
        items = query_service.work_items_for("CS")
        assert len(items.event_requests) == 2
        assert items.tasks == ()

    def test_senior_cs_sees_forwarded(self, query_service, populated):
        items = query_service.work_items_for("SCS")
        assert [r.status for r in items.event_requests] == [EventRequestStatus.PENDING_SCS_REVIEW]

    def test_manager_sees_tasks_to_forward(self, query_service, populated):
        items = query_service.work_items_for("PM")
        assert items.event_requests == ()
        assert [(i.task.id, i.actions) for i in items.tasks] == [
            ("TASK-002", (ACTION_FORWARD_TO_SUB_TEAM,)),
        ]

    def test_assignee_sees_assigned_task(self, query_service, populated):
        items = query_service.work_items_for("Jane Smith")
        assert [(i.distribution_id, i.task.id, i.actions) for i in items.tasks] == [
            (populated.id, "TASK-001", (ACTION_SUBMIT_FEEDBACK,)),
        ]

    def test_assignee_of_pending_task_has_nothing(self, query_service, populated):
        assert query_service.work_items_for("Chef Mike").is_empty

    def test_manager_sees_feedback_to_review(self, query_service, task_distributions, populated):
        task_distributions.submit_sub_team_feedback(
            populated.id, "TASK-001", {"comments": "ok", "suggestions": ""}, "John Doe",
        )
        items = query_service.work_items_for("PM")
        actions = {i.task.id: i.actions for i in items.tasks}
        assert actions["TASK-001"] == (ACTION_REVIEW_FEEDBACK,)

    def test_manager_without_distributions(self, query_service, populated):
        assert query_service.work_items_for("SM").tasks == ()

    def test_queries_do_not_mutate(self, query_service, event_requests, task_distributions, populated):
        before = (event_requests.get_all(), task_distributions.get_all())
        query_service.work_items_for("PM")
        query_service.dashboard_summary("CS")
        assert (event_requests.get_all(), task_distributions.get_all()) == before


class TestDashboardSummary:

    def test_counts_by_status(self, query_service, populated):
        summary = query_service.dashboard_summary("CS")
        assert summary.role == Role.CS
        assert summary.event_request_counts[EventRequestStatus.DRAFT] == 2
        assert summary.event_request_counts[EventRequestStatus.PENDING_SCS_REVIEW] == 1
        assert summary.event_request_counts[EventRequestStatus.APPROVED] == 0
        assert summary.pending_event_requests == 2
        assert summary.pending_tasks == 0

    def test_member_summary(self, query_service, populated):
        summary = query_service.dashboard_summary("John Doe")
        assert summary.role is None
        assert summary.pending_event_requests == 0
        assert summary.pending_tasks == 1
