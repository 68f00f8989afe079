"""
Configuration Loader (``eventflow_config.loader``).

Responsibility
--------------
Reads one YAML configuration set and parses it into a frozen
``EngineSettings``.  Runtime callers go through
``eventflow_config.get_active_config()`` instead of calling this.

Invariants enforced
-------------------
* Unknown keys are rejected; a typo never silently falls back to a default.
* Every value is type-checked before the settings object is built.

Failure modes
-------------
* Missing YAML file  -> ``ConfigurationError`` (key ``"<file>"``).
* Malformed YAML  -> ``ConfigurationError`` wrapping the parser message.
* Unknown key or bad value  -> ``ConfigurationError`` naming the key.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from eventflow_config.schema import LOG_LEVELS, STORE_BACKENDS, EngineSettings
from eventflow_kernel.exceptions import ConfigurationError


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its top-level mapping.

    Raises:
        ConfigurationError: if the file is missing, unparsable, or its
            top level is not a mapping.
    """
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except FileNotFoundError as exc:
        raise ConfigurationError("<file>", f"configuration file not found: {path}") from exc
    except yaml.YAMLError as exc:
        raise ConfigurationError("<file>", f"invalid YAML in {path}: {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError("<file>", f"top level of {path} must be a mapping")
    return data


def _non_empty_string(data: dict[str, Any], key: str) -> str:
    value = data[key]
    if not isinstance(value, str) or not value.strip():
        raise ConfigurationError(key, f"expected a non-empty string, got {value!r}")
    return value.strip()


def parse_settings(data: dict[str, Any]) -> EngineSettings:
    """Parse an ``EngineSettings`` from a dict; absent keys keep their defaults."""
    unknown = sorted(set(data) - EngineSettings.field_names())
    if unknown:
        raise ConfigurationError(unknown[0], "unknown configuration key")

    values: dict[str, Any] = {}
    for key in data:
        values[key] = _non_empty_string(data, key)

    backend = values.get("store_backend")
    if backend is not None:
        backend = backend.lower()
        if backend not in STORE_BACKENDS:
            raise ConfigurationError(
                "store_backend", f"expected one of {sorted(STORE_BACKENDS)}, got {backend!r}"
            )
        values["store_backend"] = backend

    level = values.get("log_level")
    if level is not None:
        level = level.upper()
        if level not in LOG_LEVELS:
            raise ConfigurationError(
                "log_level", f"expected one of {sorted(LOG_LEVELS)}, got {level!r}"
            )
        values["log_level"] = level

    return EngineSettings(**values)
