# config/loader.py
"""
Configuration reload utilities for the graph engine.

The main public function is ``reload_settings()`` which:
1. Reloads environment variables from ``.env`` (via ``dotenv.load_dotenv``).
2. Re‑creates the ``GraphEngineSettings`` instance so that any changed values are applied.
3. Updates the symbols exported by ``config.__init__`` to reflect the new values.
"""

from __future__ import annotations

import importlib

import structlog
from dotenv import load_dotenv
from pydantic import ValidationError

logger = structlog.get_logger(__name__)


# Import lazily so that reloading works when the function is called repeatedly.
def _import_settings_module():
    return importlib.import_module("config.settings")


def reload_settings() -> bool:
    """
    Reload configuration from the environment and refresh the ``config`` package.

    Returns ``True`` on success, ``False`` when the environment holds invalid values
    (the previous settings stay in effect).
    """
    load_dotenv(override=True)

    settings_mod = _import_settings_module()
    try:
        new_settings = settings_mod.GraphEngineSettings()
    except ValidationError as exc:
        logger.error("Configuration reload failed; keeping previous settings.", errors=exc.errors())
        return False

    import config as config_pkg

    settings_mod.settings = new_settings
    config_pkg.settings = new_settings
    for field_name in type(new_settings).model_fields:
        value = getattr(new_settings, field_name)
        setattr(settings_mod, field_name, value)
        setattr(config_pkg, field_name, value)

    logger.info("Configuration reloaded.")
    return True
