"""
EngineSettings schema.

The typed, frozen form of one configuration set.  YAML files are parsed
into this by the loader; the facade builder consumes it.
"""

from __future__ import annotations

from dataclasses import dataclass, fields

STORE_BACKEND_MEMORY = "memory"
STORE_BACKEND_SQL = "sql"
STORE_BACKENDS = frozenset({STORE_BACKEND_MEMORY, STORE_BACKEND_SQL})

LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})


@dataclass(frozen=True)
class EngineSettings:
    """Runtime settings for a WorkflowEngine."""

    store_backend: str = STORE_BACKEND_MEMORY
    database_url: str = "sqlite+pysqlite:///:memory:"
    event_request_id_prefix: str = "EVT"
    task_distribution_id_prefix: str = "TD"
    log_level: str = "INFO"

    @property
    def uses_sql(self) -> bool:
        return self.store_backend == STORE_BACKEND_SQL

    @classmethod
    def field_names(cls) -> frozenset[str]:
        return frozenset(f.name for f in fields(cls))
