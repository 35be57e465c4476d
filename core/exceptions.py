# core/exceptions.py
"""Define standardized exception types for the graph engine core.

This module provides a small exception hierarchy and helpers used across `core/`
and `processing/` to propagate actionable error details.

Notes:
    Dangling entity references are not errors: relationship and node processing
    skip them silently. The exceptions below cover programming and configuration
    mistakes only.
"""

from typing import Any


class GraphEngineError(Exception):
    """Base exception for all graph engine errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} (Details: {self.details})"
        return self.message


class ProcessingSessionClosedError(GraphEngineError):
    """Raised when relationships are registered on a session whose pass has ended.

    Policy:
        - A processing session belongs to exactly one pass.
        - Reprocessing must start from a fresh session so that no registry state
          leaks from an earlier pass.
    """


class ConfigurationError(GraphEngineError):
    """Errors related to invalid graph engine configuration."""


def create_error_context(**kwargs: Any) -> dict[str, Any]:
    """Build a context dictionary for structured errors.

    Args:
        **kwargs: Key-value pairs to include.

    Returns:
        A dictionary containing only keys whose values are not `None`.
    """
    return {k: v for k, v in kwargs.items() if v is not None}
