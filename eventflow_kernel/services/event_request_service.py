"""
eventflow_kernel.services.event_request_service -- Event request approval chain.

Responsibility:
    Drives one customer event request from creation through the Senior
    CS, Financial Manager, and Administration Manager reviews to approval
    or rejection.  Delegates "who may do what from where" to the pure role
    authorizer and persistence to the injected record store.

Architecture position:
    Kernel > Services.  May import from domain/, db/, and eventflow_engines.

Invariants enforced:
    - Review chain: DRAFT -> PENDING_SCS_REVIEW -> PENDING_FINANCIAL_REVIEW
      -> PENDING_ADMINISTRATION_REVIEW -> APPROVED | REJECTED.
    - Append-once reviews: each review is attached by the only transition
      leaving its review state, so a second submission is refused by the
      source-state check.
    - Refusal, not error: wrong role, wrong state, unknown id, or a
      repeated call returns None without mutating anything.
    - Atomic transitions: read-check-write happens under the store's
      per-record lock.

Failure modes:
    - InvalidPayloadError / UnknownRoleError on a malformed create payload.
    - UnknownStatusError when ``update_status`` names a status outside the enum.
    - InvalidRecommendationError when a review verdict is not APPROVE/REJECT.
"""

from __future__ import annotations

import time
from dataclasses import replace
from typing import Any, Callable

from eventflow_engines.validation import (
    parse_administration_review,
    parse_event_request_data,
    parse_event_request_status,
    parse_financial_review,
    require_role,
)
from eventflow_kernel.db.store import RecordStore
from eventflow_kernel.domain.clock import Clock
from eventflow_kernel.domain.event_request import (
    EventRequest,
    EventRequestStatus,
    Recommendation,
)
from eventflow_kernel.domain.roles import Role
from eventflow_kernel.domain.workflow import (
    ACTION_FORWARD_TO_SENIOR_CS,
    ACTION_SUBMIT_ADMINISTRATION_REVIEW,
    ACTION_SUBMIT_FINANCIAL_REVIEW,
    ACTION_UPDATE_STATUS,
    EVENT_REQUEST_WORKFLOW,
    ROLE_PENDING_STATUS,
)
from eventflow_kernel.logging_config import LogContext, get_logger
from eventflow_kernel.services.base import (
    OUTCOME_APPLIED,
    REASON_RECORD_NOT_FOUND,
    BaseWorkflowService,
)

logger = get_logger("services.event_request")


class EventRequestWorkflow(BaseWorkflowService[EventRequest]):
    """State machine for customer event requests."""

    def __init__(
        self,
        store: RecordStore[EventRequest],
        clock: Clock | None = None,
    ) -> None:
        super().__init__(store, EVENT_REQUEST_WORKFLOW, clock)

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    def create(self, data: Any, actor_role: Any) -> EventRequest:
        """Create a DRAFT request owned by ``actor_role``.

        Raises:
            InvalidPayloadError: if ``data`` is malformed.
            UnknownRoleError: if ``actor_role`` is not a Role.
        """
        parsed = parse_event_request_data(data)
        role = require_role(actor_role)
        request = self._store.insert(
            EventRequest.from_data(parsed, created_by=role, created_at=self._clock.now())
        )
        logger.info(
            "event_request_created",
            extra={
                "record_id": request.id,
                "created_by": role.value,
                "event_type": request.event_type,
                "budget": request.budget,
            },
        )
        return request

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def _transition(
        self,
        record_id: str,
        action: str,
        actor: Any,
        target_state: EventRequestStatus,
        apply: Callable[[EventRequest], EventRequest],
    ) -> EventRequest | None:
        started = time.monotonic()
        with LogContext.bind(record_id=record_id, workflow=self._workflow.name), \
                self._store.locked(record_id):
            current = self._store.get(record_id)
            if current is None:
                return self._refuse(
                    action=action, record_id=record_id, actor=actor,
                    from_state=None, reason=REASON_RECORD_NOT_FOUND, started=started,
                )

            reason = self._authorizer.explain_refusal(
                current.status, action, actor, target_state=target_state,
            )
            if reason is not None:
                return self._refuse(
                    action=action, record_id=record_id, actor=actor,
                    from_state=current.status, reason=reason, started=started,
                )

            updated = self._store.update(apply(current))

        self._emit_transition_trace(
            action=action,
            record_id=record_id,
            actor=actor,
            from_state=current.status,
            to_state=updated.status,
            outcome=OUTCOME_APPLIED,
            started=started,
        )
        return updated

    def forward_to_senior_cs(self, record_id: str, actor_role: Any) -> EventRequest | None:
        """DRAFT -> PENDING_SCS_REVIEW. A second call is refused."""
        target = EventRequestStatus.PENDING_SCS_REVIEW
        return self._transition(
            record_id,
            ACTION_FORWARD_TO_SENIOR_CS,
            actor_role,
            target,
            lambda r: replace(r, status=target, updated_at=self._clock.now()),
        )

    def update_status(
        self,
        record_id: str,
        new_status: Any,
        actor_role: Any,
    ) -> EventRequest | None:
        """Generic advance; Senior CS uses it to hand a request to finance.

        Raises:
            UnknownStatusError: if ``new_status`` is not an EventRequestStatus.
        """
        target = parse_event_request_status(new_status)
        return self._transition(
            record_id,
            ACTION_UPDATE_STATUS,
            actor_role,
            target,
            lambda r: replace(r, status=target, updated_at=self._clock.now()),
        )

    def submit_financial_review(
        self,
        record_id: str,
        review: Any,
        actor_role: Any,
    ) -> EventRequest | None:
        """Attach the Financial Manager's review and advance or reject.

        APPROVE -> PENDING_ADMINISTRATION_REVIEW; REJECT -> REJECTED with
        ``rejection_reason`` set to the review comments.

        Raises:
            InvalidRecommendationError: for any other recommendation.
        """
        parsed = parse_financial_review(review)
        rejected = parsed.recommendation == Recommendation.REJECT
        target = (
            EventRequestStatus.REJECTED if rejected
            else EventRequestStatus.PENDING_ADMINISTRATION_REVIEW
        )

        def apply(current: EventRequest) -> EventRequest:
            now = self._clock.now()
            return replace(
                current,
                status=target,
                financial_review=replace(parsed, reviewed_at=now),
                rejection_reason=parsed.comments if rejected else None,
                updated_at=now,
            )

        return self._transition(
            record_id, ACTION_SUBMIT_FINANCIAL_REVIEW, actor_role, target, apply,
        )

    def submit_administration_review(
        self,
        record_id: str,
        review: Any,
        actor_role: Any,
    ) -> EventRequest | None:
        """Attach the Administration Manager's review: APPROVED or REJECTED.

        Raises:
            InvalidRecommendationError: for a recommendation other than
                APPROVE / REJECT.
        """
        parsed = parse_administration_review(review)
        rejected = parsed.recommendation == Recommendation.REJECT
        target = EventRequestStatus.REJECTED if rejected else EventRequestStatus.APPROVED

        def apply(current: EventRequest) -> EventRequest:
            now = self._clock.now()
            return replace(
                current,
                status=target,
                administration_review=replace(parsed, reviewed_at=now),
                rejection_reason=parsed.comments if rejected else None,
                updated_at=now,
            )

        return self._transition(
            record_id, ACTION_SUBMIT_ADMINISTRATION_REVIEW, actor_role, target, apply,
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_by_id(self, record_id: str) -> EventRequest | None:
        return self._store.get(record_id)

    def get_all(self) -> list[EventRequest]:
        return self._store.list_all()

    def get_by_status(self, status: Any) -> list[EventRequest]:
        """Requests currently in ``status``.

        Raises:
            UnknownStatusError: if ``status`` is not an EventRequestStatus.
        """
        wanted = parse_event_request_status(status)
        return [r for r in self._store.list_all() if r.status == wanted]

    def get_for_user(self, role: Any) -> list[EventRequest]:
        """Requests awaiting ``role``'s action; unmapped roles get []."""
        parsed = Role.parse(role)
        if parsed is None:
            return []
        status = ROLE_PENDING_STATUS.get(parsed)
        if status is None:
            return []
        return self.get_by_status(status)
