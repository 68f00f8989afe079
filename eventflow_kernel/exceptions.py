"""
Typed Exception Hierarchy for the EventFlow Kernel.

===============================================================================
REFUSAL vs. ERROR
===============================================================================

The workflow engine distinguishes two failure kinds:

  - REFUSAL: an illegal transition, a wrong role, an unknown record id, or a
    repeated call.  These are expected client noise (out-of-order UI actions)
    and are NEVER raised.  Every mutating operation returns ``None`` instead.

  - ERROR: malformed input (wrong payload shape, unknown recommendation,
    unknown status string).  That is a programming bug in the caller and
    fails fast with one of the exceptions below.

Example - handling both:
    try:
        request = workflow.submit_financial_review(request_id, review, "FM")
    except InvalidRecommendationError as e:   # caller bug
        api_response(code=e.code, value=e.value)
    else:
        if request is None:                   # refusal
            api_response(code="REFUSED")

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

All exceptions inherit from EventFlowError:

    EventFlowError (base)
    |
    +-- WorkflowInputError
    |   +-- InvalidPayloadError
    |   +-- InvalidRecommendationError
    |   +-- InvalidReviewDecisionError
    |   +-- UnknownStatusError
    |   +-- UnknownRoleError
    |   +-- DuplicateTaskIdError
    |
    +-- StoreError
    |   +-- RecordNotFoundError
    |
    +-- ConfigurationError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                        | When Raised
----------------|-----------------------------|-----------------------------------------
Input           | INVALID_PAYLOAD             | Missing field or wrong type/format
                | INVALID_RECOMMENDATION      | Review recommendation not APPROVE/REJECT
                | INVALID_REVIEW_DECISION     | Task decision not APPROVED/NEEDS_REVISION
                | UNKNOWN_STATUS              | Status string outside the status enum
                | UNKNOWN_ROLE                | Creator role outside the role enum
                | DUPLICATE_TASK_ID           | Two tasks share an id in one distribution
----------------|-----------------------------|-----------------------------------------
Store           | RECORD_NOT_FOUND            | update() on an id the store never issued
----------------|-----------------------------|-----------------------------------------
Config          | CONFIGURATION_ERROR         | Bad key or value in a settings file

===============================================================================
"""

from typing import Any


class EventFlowError(Exception):
    """
    Base exception for all eventflow errors.

    All subclasses carry a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "EVENTFLOW_ERROR"


# Input (caller contract) exceptions


class WorkflowInputError(EventFlowError):
    """Base exception for malformed workflow input."""

    code: str = "WORKFLOW_INPUT_ERROR"


class InvalidPayloadError(WorkflowInputError):
    """A payload field is missing or has the wrong type or format."""

    code: str = "INVALID_PAYLOAD"

    def __init__(self, field: str, reason: str, value: Any = None):
        self.field = field
        self.reason = reason
        self.value = value
        super().__init__(f"Invalid payload field '{field}': {reason}")


class InvalidRecommendationError(WorkflowInputError):
    """Review recommendation is not one of APPROVE / REJECT."""

    code: str = "INVALID_RECOMMENDATION"

    def __init__(self, value: Any):
        self.value = value
        super().__init__(
            f"Invalid recommendation {value!r}; expected 'APPROVE' or 'REJECT'"
        )


class InvalidReviewDecisionError(WorkflowInputError):
    """Sub-team feedback review decision is not APPROVED / NEEDS_REVISION."""

    code: str = "INVALID_REVIEW_DECISION"

    def __init__(self, value: Any):
        self.value = value
        super().__init__(
            f"Invalid review decision {value!r}; "
            f"expected 'APPROVED' or 'NEEDS_REVISION'"
        )


class UnknownStatusError(WorkflowInputError):
    """Status string is not a member of the workflow's status enum."""

    code: str = "UNKNOWN_STATUS"

    def __init__(self, status: Any, valid: tuple[str, ...] = ()):
        self.status = status
        self.valid = valid
        super().__init__(
            f"Unknown status {status!r}. Valid statuses: {sorted(valid)}"
        )


class UnknownRoleError(WorkflowInputError):
    """Role string is not a member of the Role enum."""

    code: str = "UNKNOWN_ROLE"

    def __init__(self, role: Any):
        self.role = role
        super().__init__(f"Unknown role: {role!r}")


class DuplicateTaskIdError(WorkflowInputError):
    """Two sub-team tasks in one distribution share the same id."""

    code: str = "DUPLICATE_TASK_ID"

    def __init__(self, task_id: str):
        self.task_id = task_id
        super().__init__(f"Duplicate task id in distribution: {task_id}")


# Store exceptions


class StoreError(EventFlowError):
    """Base exception for record store misuse."""

    code: str = "STORE_ERROR"


class RecordNotFoundError(StoreError):
    """Record id was never issued by this store."""

    code: str = "RECORD_NOT_FOUND"

    def __init__(self, record_id: str):
        self.record_id = record_id
        super().__init__(f"Record not found: {record_id}")


# Configuration exceptions


class ConfigurationError(EventFlowError):
    """Settings file is missing a key or holds an invalid value."""

    code: str = "CONFIGURATION_ERROR"

    def __init__(self, key: str, reason: str):
        self.key = key
        self.reason = reason
        super().__init__(f"Invalid configuration '{key}': {reason}")
