"""
Module: eventflow_engines
Responsibility:
    Package entrypoint re-exporting the pure engines: role authorization
    over workflow transition tables, and payload validation.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import eventflow_kernel/domain/ and eventflow_kernel.exceptions.
    MUST NOT import eventflow_kernel.services or eventflow_services.
"""

from eventflow_engines.authorizer import (
    RoleAuthorizer,
    can_transition,
    explain_refusal,
    select_transition,
    validate_actor_authority,
)
from eventflow_engines.validation import (
    parse_administration_review,
    parse_event_request_data,
    parse_event_request_status,
    parse_feedback,
    parse_financial_review,
    parse_review_decision,
    parse_task_distribution_data,
    require_role,
)

__all__ = [
    "RoleAuthorizer",
    "can_transition",
    "explain_refusal",
    "select_transition",
    "validate_actor_authority",
    "parse_administration_review",
    "parse_event_request_data",
    "parse_event_request_status",
    "parse_feedback",
    "parse_financial_review",
    "parse_review_decision",
    "parse_task_distribution_data",
    "require_role",
]
