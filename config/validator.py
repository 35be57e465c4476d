# config/validator.py
"""
Configuration validation utilities for the graph engine.

This module provides a single public function `validate_all()` that performs
cross‑field sanity checks that cannot be expressed purely with Pydantic field
validators and returns a structured health report:

{
    "overall_health": "healthy" | "warning" | "error",
    "issues": {
        "errors":   [{ "field": "<field>", "message": "<msg>" }, ...],
        "warnings": [{ "field": "<field>", "message": "<msg>" }, ...],
        "info":     [{ "field": "<field>", "message": "<msg>" }, ...],
    }
}
"""

from __future__ import annotations

import logging as stdlib_logging

from models.kg_constants import RELATIONSHIP_WEIGHTS, VisibilityMode

from .settings import GraphEngineSettings


def _add_issue(
    issues: dict[str, list[dict[str, str]]],
    severity: str,
    field: str,
    message: str,
) -> None:
    """Utility to append an issue entry to the report."""
    issues.setdefault(severity, []).append({"field": field, "message": message})


def validate_all(current_settings: GraphEngineSettings | None = None) -> dict:
    """
    Validate the given (or current) configuration state.

    Returns a health‑report dict with overall status and detailed issue lists.
    """
    if current_settings is None:
        import config

        current_settings = config.settings

    issues: dict[str, list[dict[str, str]]] = {"errors": [], "warnings": [], "info": []}

    valid_modes = {mode.value for mode in VisibilityMode}
    if current_settings.DEFAULT_VISIBILITY_MODE not in valid_modes:
        _add_issue(
            issues,
            "errors",
            "DEFAULT_VISIBILITY_MODE",
            (
                f"DEFAULT_VISIBILITY_MODE '{current_settings.DEFAULT_VISIBILITY_MODE}' "
                f"must be one of {sorted(valid_modes)}."
            ),
        )

    max_weight = max(RELATIONSHIP_WEIGHTS.values())
    if current_settings.MIN_EDGE_WEIGHT > max_weight:
        _add_issue(
            issues,
            "warnings",
            "MIN_EDGE_WEIGHT",
            (
                f"MIN_EDGE_WEIGHT ({current_settings.MIN_EDGE_WEIGHT}) exceeds the largest "
                f"relationship weight ({max_weight}); every edge will be dropped."
            ),
        )

    if current_settings.MAX_CONNECTION_DEPTH == 0:
        _add_issue(
            issues,
            "info",
            "MAX_CONNECTION_DEPTH",
            "MAX_CONNECTION_DEPTH is 0; depth-based visibility is disabled.",
        )

    if not isinstance(stdlib_logging.getLevelName(current_settings.LOG_LEVEL_STR.upper()), int):
        _add_issue(
            issues,
            "errors",
            "LOG_LEVEL_STR",
            f"LOG_LEVEL_STR '{current_settings.LOG_LEVEL_STR}' is not a logging level name.",
        )

    overall = "healthy"
    if issues["errors"]:
        overall = "error"
    elif issues["warnings"]:
        overall = "warning"

    return {
        "overall_health": overall,
        "issues": issues,
    }
