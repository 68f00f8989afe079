"""Record stores: the RecordStore contract and its in-memory and SQL backings."""

from eventflow_kernel.db.memory import InMemoryRecordStore
from eventflow_kernel.db.store import RecordStore, format_record_id

__all__ = ["InMemoryRecordStore", "RecordStore", "format_record_id"]
