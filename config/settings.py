# config/settings.py
"""
Configuration settings for the entity-relationship graph engine.
Uses Pydantic BaseSettings for automatic environment variable loading.
"""

from __future__ import annotations

from collections.abc import MutableMapping
from typing import Any

import structlog
from dotenv import load_dotenv
from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()

logger = structlog.get_logger()


class GraphEngineSettings(BaseSettings):
    """Full configuration for the graph engine."""

    # Relationship processing
    CREATE_BIDIRECTIONAL: bool = True
    MIN_EDGE_WEIGHT: float = Field(default=0.0, ge=0.0)

    # Visibility defaults
    DEFAULT_CONNECTION_DEPTH: int = Field(default=2, ge=0)
    MAX_CONNECTION_DEPTH: int = Field(default=10, ge=0)
    DEFAULT_VISIBILITY_MODE: str = "connected"
    RESPECT_FILTERS: bool = True

    # Logging
    LOG_LEVEL_STR: str = "INFO"
    LOG_FILE: str | None = None
    # Console only, no rotating file handler
    SIMPLE_LOGGING_MODE: bool = False

    @model_validator(mode="after")
    def clamp_default_depth(self) -> GraphEngineSettings:
        if self.DEFAULT_CONNECTION_DEPTH > self.MAX_CONNECTION_DEPTH:
            logger.warning(
                "DEFAULT_CONNECTION_DEPTH exceeds MAX_CONNECTION_DEPTH; clamping.",
                default_depth=self.DEFAULT_CONNECTION_DEPTH,
                max_depth=self.MAX_CONNECTION_DEPTH,
            )
            object.__setattr__(self, "DEFAULT_CONNECTION_DEPTH", self.MAX_CONNECTION_DEPTH)
        return self

    model_config = SettingsConfigDict(env_prefix="", env_file=".env", extra="ignore")


settings = GraphEngineSettings()


# Update module level variables for backward compatibility
for _field in GraphEngineSettings.model_fields:
    globals()[_field] = getattr(settings, _field)


# Configure structlog to integrate with standard logging and output human‑readable messages
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="%m/%d/%Y, %H:%M:%S"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
    ],
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    wrapper_class=structlog.stdlib.BoundLogger,
    cache_logger_on_first_use=True,
)


# Filter internal structlog fields
def filter_internal_keys(
    logger: Any, name: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """Remove internal structlog fields from event dict."""
    keys_to_remove = [k for k in event_dict.keys() if k.startswith("_")]
    for key in keys_to_remove:
        event_dict.pop(key, None)
    return event_dict


def simple_log_format_plain(
    logger: Any, name: str, event_dict: MutableMapping[str, Any]
) -> str:
    """Simple human-readable log formatter without markup."""
    level = event_dict.pop("level", "INFO")
    timestamp = event_dict.pop("timestamp", "")
    logger_name = event_dict.pop("logger", "")
    event = event_dict.pop("event", "")

    parts = []
    if timestamp:
        parts.append(f"{timestamp}")
    if logger_name:
        # Shorten logger names for readability
        short_name = logger_name.split(".")[-1] if "." in logger_name else logger_name
        parts.append(f"[{short_name}]")
    parts.append(str(level).upper())
    parts.append(event if event else "")

    # Remaining key-value pairs become compact context
    if event_dict:
        context_parts = []
        for key, value in event_dict.items():
            if key.startswith("_"):
                continue
            if isinstance(value, str) and len(value) > 50:
                value_str = f"{value[:47]}..."
            else:
                value_str = str(value)
            context_parts.append(f"{key}={value_str}")
        if context_parts:
            parts.append(f"({', '.join(context_parts)})")

    return " ".join(parts)


# Formatter for console and file output
simple_formatter = structlog.stdlib.ProcessorFormatter(
    foreign_pre_chain=[
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="%m/%d/%Y, %H:%M:%S"),
    ],
    processors=[
        structlog.stdlib.ProcessorFormatter.remove_processors_meta,
        filter_internal_keys,
        simple_log_format_plain,
    ],
)
