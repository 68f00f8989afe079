"""
Module: eventflow_kernel.db.base
Responsibility: Declarative base and the single ORM table used by the SQL
    record store.  Each row is one record snapshot, keyed by record kind and
    store-issued id, with the snapshot held as JSON.
Architecture position: Kernel > DB.  This is the lowest-level import target
    within the db package.  MUST NOT import from services/ or outer layers.

Invariants enforced:
    - (kind, record_id) is unique: one current snapshot per record.
    - ``sequence`` preserves creation order within a kind.
"""

from typing import Any

from sqlalchemy import JSON, Integer, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Declarative base for eventflow ORM models."""


class RecordRow(Base):
    """One stored record snapshot."""

    __tablename__ = "workflow_records"

    kind: Mapped[str] = mapped_column(String(64), primary_key=True)
    record_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    sequence: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    payload: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
