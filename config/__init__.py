# config/__init__.py
"""Expose graph engine configuration as stable module-level constants.

This package provides a facade over the underlying Pydantic settings model defined
in [`config.settings`](config/settings.py:1). The primary API is the `settings`
singleton plus a set of module-level constants mirroring its fields.

Configuration precedence and lifecycle:
- On initial import, configuration is loaded by importing [`config.settings`](config/settings.py:1),
  which constructs the `settings` singleton.
- Values come from the process environment and may be sourced from a `.env` file.
- [`reload()`](config/__init__.py:66) re-reads `.env` with override enabled, then
  replaces this module's exported values (see [`config.loader.reload_settings()`](config/loader.py:27)).

Notes:
    New code should prefer the `settings` object; the constants are snapshots taken
    at import or reload time.
"""

from typing import Any

from .settings import (
    GraphEngineSettings as GraphEngineSettings,
)
from .settings import (
    settings as settings,
)
from .settings import (
    simple_formatter as simple_formatter,
)

CREATE_BIDIRECTIONAL = settings.CREATE_BIDIRECTIONAL
MIN_EDGE_WEIGHT = settings.MIN_EDGE_WEIGHT
DEFAULT_CONNECTION_DEPTH = settings.DEFAULT_CONNECTION_DEPTH
MAX_CONNECTION_DEPTH = settings.MAX_CONNECTION_DEPTH
DEFAULT_VISIBILITY_MODE = settings.DEFAULT_VISIBILITY_MODE
RESPECT_FILTERS = settings.RESPECT_FILTERS
LOG_LEVEL_STR = settings.LOG_LEVEL_STR
LOG_FILE = settings.LOG_FILE
SIMPLE_LOGGING_MODE = settings.SIMPLE_LOGGING_MODE


def get(key: str) -> Any:
    """Return the value of a configuration attribute from `settings`.

    Raises:
        AttributeError: If `key` is not a valid attribute on `settings`.
    """
    return getattr(settings, key)


def set(key: str, value: Any) -> None:
    """Set a configuration attribute on `settings` at runtime.

    This mutates the in-memory settings instance and does not persist to `.env`.

    Raises:
        AttributeError: If `key` is not a valid attribute on `settings`.
    """
    if key not in type(settings).model_fields:
        raise AttributeError(f"Unknown configuration key: {key}")
    setattr(settings, key, value)
    globals()[key] = value


def reload() -> bool:
    """Reload configuration and refresh this package's exported constants.

    Returns:
        `True` when the settings were rebuilt, `False` when validation failed.
    """
    from .loader import reload_settings

    return reload_settings()
