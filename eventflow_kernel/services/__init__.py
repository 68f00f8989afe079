"""Workflow services for the eventflow kernel (write side plus read queries)."""

from eventflow_kernel.services.event_request_service import EventRequestWorkflow
from eventflow_kernel.services.query_service import (
    DashboardSummary,
    QueryService,
    TaskWorkItem,
    WorkItems,
)
from eventflow_kernel.services.task_distribution_service import TaskDistributionWorkflow

__all__ = [
    "DashboardSummary",
    "EventRequestWorkflow",
    "QueryService",
    "TaskDistributionWorkflow",
    "TaskWorkItem",
    "WorkItems",
]
