"""
Event request domain types (``eventflow_kernel.domain.event_request``).

Responsibility
--------------
Pure value objects for a customer event request and the reviews attached to
it while it moves through the approval chain.

Architecture position
---------------------
**Kernel domain layer** -- pure value objects.  ZERO I/O.

Invariants enforced
-------------------
* All records are ``frozen=True``; a workflow step produces a new snapshot
  via ``dataclasses.replace`` rather than mutating in place.
* ``financial_review`` set implies status is one of
  ``FINANCIAL_REVIEW_STATUSES``; ``administration_review`` set implies status
  is one of ``ADMINISTRATION_REVIEW_STATUSES`` (checked by
  ``EventRequest.review_invariants_hold``).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum

from eventflow_kernel.domain.roles import Role


class EventRequestStatus(str, Enum):
    """Event request lifecycle states."""

    DRAFT = "DRAFT"
    PENDING_SCS_REVIEW = "PENDING_SCS_REVIEW"
    PENDING_FINANCIAL_REVIEW = "PENDING_FINANCIAL_REVIEW"
    PENDING_ADMINISTRATION_REVIEW = "PENDING_ADMINISTRATION_REVIEW"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


TERMINAL_EVENT_REQUEST_STATUSES: frozenset[EventRequestStatus] = frozenset({
    EventRequestStatus.APPROVED,
    EventRequestStatus.REJECTED,
})

FINANCIAL_REVIEW_STATUSES: frozenset[EventRequestStatus] = frozenset({
    EventRequestStatus.PENDING_ADMINISTRATION_REVIEW,
    EventRequestStatus.APPROVED,
    EventRequestStatus.REJECTED,
})

ADMINISTRATION_REVIEW_STATUSES: frozenset[EventRequestStatus] = frozenset({
    EventRequestStatus.APPROVED,
    EventRequestStatus.REJECTED,
})


class Recommendation(str, Enum):
    """A reviewer's verdict."""

    APPROVE = "APPROVE"
    REJECT = "REJECT"


@dataclass(frozen=True)
class EventPreferences:
    """Services the client asked for."""

    decoration: bool = False
    food: bool = False
    drinks: bool = False
    photo: bool = False
    parties: bool = False


@dataclass(frozen=True)
class FinancialReview:
    """Financial Manager's review. Attached once, then immutable."""

    reviewed_by: str
    comments: str
    recommendation: Recommendation
    budget_comments: str | None = None
    reviewed_at: datetime | None = None


@dataclass(frozen=True)
class AdministrationReview:
    """Administration Manager's review. Attached once, then immutable."""

    reviewed_by: str
    comments: str
    recommendation: Recommendation
    reviewed_at: datetime | None = None


@dataclass(frozen=True)
class EventRequestData:
    """Validated creation payload for an event request."""

    client_name: str
    client_email: str
    client_phone: str
    event_type: str
    start_date: date
    end_date: date
    expected_number: int
    budget: Decimal
    preferences: EventPreferences
    record_number: str | None = None


@dataclass(frozen=True)
class EventRequest:
    """Immutable snapshot of an event request.

    ``id`` is empty until the record store assigns one on insert.
    """

    id: str
    client_name: str
    client_email: str
    client_phone: str
    event_type: str
    start_date: date
    end_date: date
    expected_number: int
    budget: Decimal
    preferences: EventPreferences
    created_by: Role
    status: EventRequestStatus = EventRequestStatus.DRAFT
    record_number: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    financial_review: FinancialReview | None = None
    administration_review: AdministrationReview | None = None
    rejection_reason: str | None = None

    @classmethod
    def from_data(
        cls,
        data: EventRequestData,
        created_by: Role,
        created_at: datetime | None = None,
    ) -> EventRequest:
        return cls(
            id="",
            client_name=data.client_name,
            client_email=data.client_email,
            client_phone=data.client_phone,
            event_type=data.event_type,
            start_date=data.start_date,
            end_date=data.end_date,
            expected_number=data.expected_number,
            budget=data.budget,
            preferences=data.preferences,
            created_by=created_by,
            record_number=data.record_number,
            created_at=created_at,
            updated_at=created_at,
        )

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_EVENT_REQUEST_STATUSES

    def review_invariants_hold(self) -> bool:
        """True when attached reviews are consistent with the status."""
        if self.financial_review is not None:
            if self.status not in FINANCIAL_REVIEW_STATUSES:
                return False
        if self.administration_review is not None:
            if self.status not in ADMINISTRATION_REVIEW_STATUSES:
                return False
            if self.financial_review is None:
                return False
        return True
