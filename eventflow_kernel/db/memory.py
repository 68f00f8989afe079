"""
Module: eventflow_kernel.db.memory
Responsibility: Process-local RecordStore backed by an insertion-ordered dict.
    The default store; durability is out of scope for the engine.
Architecture position: Kernel > DB.
"""

from __future__ import annotations

import threading
from typing import Generic

from eventflow_kernel.db.store import RecordStore, T
from eventflow_kernel.exceptions import RecordNotFoundError
from eventflow_kernel.logging_config import get_logger

logger = get_logger("db.memory")


class InMemoryRecordStore(RecordStore[T], Generic[T]):
    """RecordStore holding frozen snapshots in memory."""

    def __init__(self, id_prefix: str) -> None:
        super().__init__(id_prefix)
        self._records: dict[str, T] = {}
        self._sequence = 0
        self._write_lock = threading.Lock()

    def insert(self, record: T) -> T:
        with self._write_lock:
            self._sequence += 1
            stored = self._assign_id(record, self._sequence)
            self._records[stored.id] = stored
        logger.debug("record_inserted", extra={"record_id": stored.id})
        return stored

    def get(self, record_id: str) -> T | None:
        return self._records.get(record_id)

    def list_all(self) -> list[T]:
        return list(self._records.values())

    def update(self, record: T) -> T:
        with self._write_lock:
            if record.id not in self._records:
                raise RecordNotFoundError(record.id)
            self._records[record.id] = record
        return record

    def clear(self) -> None:
        with self._write_lock:
            self._records.clear()
            self._sequence = 0
        logger.debug("store_cleared", extra={"id_prefix": self.id_prefix})

    def __len__(self) -> int:
        return len(self._records)
