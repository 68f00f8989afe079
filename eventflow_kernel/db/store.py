"""
Module: eventflow_kernel.db.store
Responsibility: The RecordStore contract shared by every backing store.
    A store owns one kind of record exclusively, assigns identifiers, and
    hands out per-record locks so a workflow's read-check-write is atomic.
Architecture position: Kernel > DB.  May import from domain/ and exceptions.
    MUST NOT import from services/ or outer layers.

Invariants enforced:
    - Identifiers are issued by the store, never by callers, as
      ``<prefix>-<sequence>``; a sequence number is never reused until
      ``clear()``.
    - Records are frozen dataclasses; ``get``/``list_all`` return the stored
      snapshot, which callers cannot mutate.
    - ``locked(record_id)`` serializes transitions on the same record.  A
      lock lives only while some caller holds or waits on it, so lookups of
      unknown ids leave nothing behind.

Failure modes:
    - RecordNotFoundError from ``update`` for an id this store never issued.
    - ``get`` returns None (never raises) for unknown ids.
"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import replace
from typing import Generic, TypeVar


T = TypeVar("T")


def format_record_id(prefix: str, sequence: int) -> str:
    return f"{prefix}-{sequence:06d}"


class _RecordLock:
    """A re-entrant lock plus the number of callers holding or awaiting it."""

    __slots__ = ("lock", "holders")

    def __init__(self) -> None:
        self.lock = threading.RLock()
        self.holders = 0


class RecordStore(ABC, Generic[T]):
    """
    Keyed collection of records of one kind.

    Contract:
        Workflows receive a store by constructor injection; the process or
        test harness that builds the store owns its lifecycle.

    Guarantees:
        - ``insert`` returns the stored record with its fresh id.
        - ``list_all`` returns records in creation order.
    """

    def __init__(self, id_prefix: str) -> None:
        self._id_prefix = id_prefix
        self._locks: dict[str, _RecordLock] = {}
        self._locks_guard = threading.Lock()

    @property
    def id_prefix(self) -> str:
        return self._id_prefix

    def _assign_id(self, record: T, sequence: int) -> T:
        return replace(record, id=format_record_id(self._id_prefix, sequence))

    @contextmanager
    def locked(self, record_id: str) -> Iterator[None]:
        """Hold the per-record lock for the duration of the block."""
        with self._locks_guard:
            entry = self._locks.get(record_id)
            if entry is None:
                entry = self._locks[record_id] = _RecordLock()
            entry.holders += 1
        try:
            with entry.lock:
                yield
        finally:
            with self._locks_guard:
                entry.holders -= 1
                if entry.holders == 0:
                    del self._locks[record_id]

    @abstractmethod
    def insert(self, record: T) -> T:
        """Assign a fresh id, append, and return the stored record."""
        ...

    @abstractmethod
    def get(self, record_id: str) -> T | None:
        """Return the record, or None for an unknown id."""
        ...

    @abstractmethod
    def list_all(self) -> list[T]:
        """Return every record in creation order."""
        ...

    @abstractmethod
    def update(self, record: T) -> T:
        """Replace the stored snapshot for ``record.id``."""
        ...

    @abstractmethod
    def clear(self) -> None:
        """Drop every record and restart the id sequence. FOR TESTING ONLY."""
        ...

    def __len__(self) -> int:
        return len(self.list_all())
