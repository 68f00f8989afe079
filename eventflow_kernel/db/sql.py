"""
Module: eventflow_kernel.db.sql
Responsibility: RecordStore backed by SQLAlchemy.  Snapshots are encoded
    with a ``RecordCodec`` and written as JSON rows in ``workflow_records``.
Architecture position: Kernel > DB.  May import from db/base.py,
    db/serialization.py, and db/store.py.

Invariants enforced:
    - Every write runs in its own ``session.begin()`` block (commit or
      rollback as a unit).
    - Sequence assignment happens under the store's write lock, so ids stay
      unique for concurrent callers in one process.

Failure modes:
    - RecordNotFoundError from ``update`` for an id with no row.
    - SQLAlchemy errors (OperationalError, IntegrityError) propagate.
"""

from __future__ import annotations

import threading
from typing import Generic

from sqlalchemy import create_engine, delete, func, select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from eventflow_kernel.db.base import Base, RecordRow
from eventflow_kernel.db.serialization import RecordCodec
from eventflow_kernel.db.store import RecordStore, T
from eventflow_kernel.exceptions import RecordNotFoundError
from eventflow_kernel.logging_config import get_logger

logger = get_logger("db.sql")

DEFAULT_DATABASE_URL = "sqlite+pysqlite:///:memory:"


def init_engine_from_url(database_url: str = DEFAULT_DATABASE_URL, echo: bool = False) -> Engine:
    """
    Create an engine and make sure the record table exists.

    In-memory SQLite uses a StaticPool so every session sees the same
    database.
    """
    if database_url.startswith("sqlite") and ":memory:" in database_url:
        engine = create_engine(
            database_url,
            echo=echo,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    else:
        engine = create_engine(database_url, echo=echo, pool_pre_ping=True)

    Base.metadata.create_all(engine)
    logger.info(
        "engine_initialized",
        extra={"dialect": engine.dialect.name, "echo": echo},
    )
    return engine


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, expire_on_commit=False)


class SqlRecordStore(RecordStore[T], Generic[T]):
    """RecordStore persisting JSON snapshots through SQLAlchemy."""

    def __init__(
        self,
        session_factory: sessionmaker[Session],
        codec: RecordCodec[T],
        id_prefix: str,
    ) -> None:
        super().__init__(id_prefix)
        self._session_factory = session_factory
        self._codec = codec
        self._write_lock = threading.Lock()

    @property
    def kind(self) -> str:
        return self._codec.kind

    def insert(self, record: T) -> T:
        with self._write_lock, self._session_factory() as session, session.begin():
            last = session.execute(
                select(func.max(RecordRow.sequence)).where(RecordRow.kind == self.kind)
            ).scalar_one_or_none()
            sequence = (last or 0) + 1
            stored = self._assign_id(record, sequence)
            session.add(RecordRow(
                kind=self.kind,
                record_id=stored.id,
                sequence=sequence,
                payload=self._codec.encode(stored),
            ))
        logger.debug("record_inserted", extra={"record_id": stored.id, "kind": self.kind})
        return stored

    def get(self, record_id: str) -> T | None:
        with self._session_factory() as session:
            row = session.get(RecordRow, (self.kind, record_id))
            if row is None:
                return None
            return self._codec.decode(row.payload)

    def list_all(self) -> list[T]:
        with self._session_factory() as session:
            rows = session.execute(
                select(RecordRow)
                .where(RecordRow.kind == self.kind)
                .order_by(RecordRow.sequence)
            ).scalars().all()
            return [self._codec.decode(row.payload) for row in rows]

    def update(self, record: T) -> T:
        with self._write_lock, self._session_factory() as session, session.begin():
            row = session.get(RecordRow, (self.kind, record.id))
            if row is None:
                raise RecordNotFoundError(record.id)
            row.payload = self._codec.encode(record)
        return record

    def clear(self) -> None:
        with self._write_lock, self._session_factory() as session, session.begin():
            session.execute(delete(RecordRow).where(RecordRow.kind == self.kind))
        logger.debug("store_cleared", extra={"kind": self.kind})

    def __len__(self) -> int:
        with self._session_factory() as session:
            return session.execute(
                select(func.count()).select_from(RecordRow).where(RecordRow.kind == self.kind)
            ).scalar_one()
