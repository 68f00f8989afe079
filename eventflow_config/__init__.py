"""
eventflow_config -- single public entrypoint for engine configuration.

Responsibility:
    Provides the ONLY way to obtain configuration at runtime through
    ``get_active_config()``.  Returns a frozen ``EngineSettings``.

Architecture position:
    Configuration.  Sits beside ``eventflow_kernel`` and below
    ``eventflow_services``.  The kernel MUST NEVER import from
    ``eventflow_config``.

Failure modes:
    - ``ConfigurationError`` -- missing set, malformed YAML, unknown key,
      or a value outside its allowed range.

Audit relevance:
    Every successful ``get_active_config()`` call emits an
    ``EVENTFLOW_CONFIG_TRACE`` log entry naming the set and its values.
"""

from __future__ import annotations

from pathlib import Path

from eventflow_config.loader import load_yaml_file, parse_settings
from eventflow_config.schema import EngineSettings
from eventflow_kernel.logging_config import get_logger

_logger = get_logger("config")

# Default configuration sets directory
_DEFAULT_CONFIG_DIR = Path(__file__).parent / "sets"


def get_active_config(
    config_dir: Path | None = None,
    name: str = "default",
) -> EngineSettings:
    """Load the configuration set ``<config_dir>/<name>.yaml``.

    Args:
        config_dir: Override path to the configuration sets directory.
            Defaults to eventflow_config/sets/.
        name: Configuration set name, without the ``.yaml`` suffix.

    Raises:
        ConfigurationError: If the set is missing or invalid.
    """
    sets_dir = Path(config_dir) if config_dir is not None else _DEFAULT_CONFIG_DIR
    path = sets_dir / f"{name}.yaml"
    settings = parse_settings(load_yaml_file(path))

    _logger.info(
        "EVENTFLOW_CONFIG_TRACE",
        extra={
            "trace_type": "EVENTFLOW_CONFIG_TRACE",
            "config_set": name,
            "store_backend": settings.store_backend,
            "event_request_id_prefix": settings.event_request_id_prefix,
            "task_distribution_id_prefix": settings.task_distribution_id_prefix,
            "log_level": settings.log_level,
        },
    )
    return settings


__all__ = ["EngineSettings", "get_active_config"]
