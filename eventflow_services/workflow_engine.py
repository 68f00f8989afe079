"""
eventflow_services.workflow_engine -- Public facade over both workflows.

Responsibility:
    Creates each workflow service and its store exactly once, wires them
    together, and exposes the complete public operation set under one
    object.  Holds no workflow logic of its own.

Architecture position:
    Services -- orchestration over kernel + config.  The only place where
    stores, workflows, and the query service are constructed and composed.

Invariants enforced:
    - DI transparency: all wiring is visible in ``__init__`` and
      ``from_config``.
    - Both workflows share one Clock instance.

Failure modes:
    - ConfigurationError from ``from_config`` if settings are invalid.
    - SQLAlchemy errors from ``from_config`` if the database is unreachable.

Usage:
    from eventflow_config import get_active_config
    from eventflow_services import WorkflowEngine

    engine = WorkflowEngine.from_config(get_active_config())
    request = engine.create_event_request(payload, "CS")
    engine.forward_to_senior_cs(request.id, "CS")
"""

from __future__ import annotations

from typing import Any

from eventflow_config.schema import EngineSettings
from eventflow_kernel.db.memory import InMemoryRecordStore
from eventflow_kernel.db.serialization import EVENT_REQUEST_CODEC, TASK_DISTRIBUTION_CODEC
from eventflow_kernel.db.sql import (
    SqlRecordStore,
    create_session_factory,
    init_engine_from_url,
)
from eventflow_kernel.db.store import RecordStore
from eventflow_kernel.domain.clock import Clock, SystemClock
from eventflow_kernel.domain.event_request import EventRequest, EventRequestStatus
from eventflow_kernel.domain.identity import Authenticator, UserIdentity
from eventflow_kernel.domain.task_distribution import TaskDistribution
from eventflow_kernel.logging_config import LogContext, configure_logging, get_logger
from eventflow_kernel.services.event_request_service import EventRequestWorkflow
from eventflow_kernel.services.query_service import (
    DashboardSummary,
    QueryService,
    WorkItems,
)
from eventflow_kernel.services.task_distribution_service import TaskDistributionWorkflow

logger = get_logger("services.engine")


class WorkflowEngine:
    """Single entry point for event requests and task distributions.

    Contract:
        Receives the two record stores and an optional Clock.  Callers that
        want settings-driven wiring use ``from_config``.

    Non-goals:
        - Does NOT check credentials itself; ``authenticate`` defers to
          the injected collaborator.  Operations take the acting role or
          member name explicitly.
    """

    def __init__(
        self,
        event_request_store: RecordStore[EventRequest] | None = None,
        task_distribution_store: RecordStore[TaskDistribution] | None = None,
        clock: Clock | None = None,
        authenticator: Authenticator | None = None,
    ) -> None:
        self._clock = clock or SystemClock()
        self._authenticator = authenticator
        # Stores define __len__, so an empty injected store is falsy.
        self._event_request_store = (
            event_request_store if event_request_store is not None
            else InMemoryRecordStore("EVT")
        )
        self._task_distribution_store = (
            task_distribution_store if task_distribution_store is not None
            else InMemoryRecordStore("TD")
        )

        self.event_requests = EventRequestWorkflow(self._event_request_store, self._clock)
        self.task_distributions = TaskDistributionWorkflow(
            self._task_distribution_store, self._clock,
        )
        self.queries = QueryService(self._event_request_store, self._task_distribution_store)

    @classmethod
    def from_config(
        cls,
        settings: EngineSettings,
        clock: Clock | None = None,
        authenticator: Authenticator | None = None,
    ) -> WorkflowEngine:
        """Build an engine whose stores and logging follow ``settings``."""
        configure_logging(level=settings.log_level)

        if settings.uses_sql:
            session_factory = create_session_factory(
                init_engine_from_url(settings.database_url)
            )
            event_store: RecordStore[EventRequest] = SqlRecordStore(
                session_factory, EVENT_REQUEST_CODEC, settings.event_request_id_prefix,
            )
            task_store: RecordStore[TaskDistribution] = SqlRecordStore(
                session_factory, TASK_DISTRIBUTION_CODEC, settings.task_distribution_id_prefix,
            )
        else:
            event_store = InMemoryRecordStore(settings.event_request_id_prefix)
            task_store = InMemoryRecordStore(settings.task_distribution_id_prefix)

        logger.info(
            "workflow_engine_built",
            extra={"store_backend": settings.store_backend},
        )
        return cls(event_store, task_store, clock, authenticator)

    # ------------------------------------------------------------------
    # Identity
    # ------------------------------------------------------------------

    def authenticate(self, username: str, password: str) -> UserIdentity | None:
        """Resolve credentials through the injected collaborator.

        The returned identity's ``role`` is what callers pass as the actor.
        Without an authenticator every login fails.
        """
        if self._authenticator is None:
            return None
        identity = self._authenticator.authenticate(username, password)
        if identity is None:
            logger.info("authentication_failed", extra={"username": username})
            return None
        LogContext.set(actor=identity.role.value)
        logger.info(
            "user_authenticated",
            extra={"username": username, "role": identity.role},
        )
        return identity

    # ------------------------------------------------------------------
    # Event requests
    # ------------------------------------------------------------------

    def create_event_request(self, data: Any, created_by: Any) -> EventRequest:
        return self.event_requests.create(data, created_by)

    def get_event_request_by_id(self, record_id: str) -> EventRequest | None:
        return self.event_requests.get_by_id(record_id)

    def get_all_event_requests(self) -> list[EventRequest]:
        return self.event_requests.get_all()

    def get_event_requests_by_status(self, status: Any) -> list[EventRequest]:
        return self.event_requests.get_by_status(status)

    def forward_to_senior_cs(self, record_id: str, actor_role: Any) -> EventRequest | None:
        return self.event_requests.forward_to_senior_cs(record_id, actor_role)

    def update_event_request_status(
        self,
        record_id: str,
        new_status: Any,
        actor_role: Any,
    ) -> EventRequest | None:
        return self.event_requests.update_status(record_id, new_status, actor_role)

    def submit_financial_review(
        self,
        record_id: str,
        review: Any,
        actor_role: Any,
    ) -> EventRequest | None:
        return self.event_requests.submit_financial_review(record_id, review, actor_role)

    def submit_administration_review(
        self,
        record_id: str,
        review: Any,
        actor_role: Any,
    ) -> EventRequest | None:
        return self.event_requests.submit_administration_review(record_id, review, actor_role)

    def get_event_requests_for_user(self, role: Any) -> list[EventRequest]:
        return self.event_requests.get_for_user(role)

    def clear_event_requests(self) -> None:
        """FOR TESTING ONLY."""
        self.event_requests.clear()

    # ------------------------------------------------------------------
    # Task distributions
    # ------------------------------------------------------------------

    def create_task_distribution(self, data: Any, created_by: Any) -> TaskDistribution:
        return self.task_distributions.create(data, created_by)

    def get_task_distribution_by_id(self, distribution_id: str) -> TaskDistribution | None:
        return self.task_distributions.get_by_id(distribution_id)

    def get_all_task_distributions(self) -> list[TaskDistribution]:
        return self.task_distributions.get_all()

    def forward_task_to_sub_team(
        self,
        distribution_id: str,
        task_id: str,
        actor_role: Any,
    ) -> TaskDistribution | None:
        return self.task_distributions.forward_task_to_sub_team(
            distribution_id, task_id, actor_role,
        )

    def submit_sub_team_feedback(
        self,
        distribution_id: str,
        task_id: str,
        feedback: Any,
        actor: Any,
    ) -> TaskDistribution | None:
        return self.task_distributions.submit_sub_team_feedback(
            distribution_id, task_id, feedback, actor,
        )

    def review_sub_team_feedback(
        self,
        distribution_id: str,
        task_id: str,
        decision: Any,
        actor_role: Any,
        approve_budget_increase: bool = False,
    ) -> TaskDistribution | None:
        return self.task_distributions.review_sub_team_feedback(
            distribution_id, task_id, decision, actor_role, approve_budget_increase,
        )

    def get_task_distributions_for_user(self, identifier: Any) -> list[TaskDistribution]:
        return self.task_distributions.get_for_user(identifier)

    def clear_task_distributions(self) -> None:
        """FOR TESTING ONLY."""
        self.task_distributions.clear()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def pending_status_for(self, role: Any) -> EventRequestStatus | None:
        return self.queries.pending_status_for(role)

    def work_items_for(self, identifier: Any) -> WorkItems:
        return self.queries.work_items_for(identifier)

    def dashboard_summary(self, identifier: Any) -> DashboardSummary:
        return self.queries.dashboard_summary(identifier)
