# core/logging_config.py
"""Configure graph engine logging sinks and formatting.

This module configures:
- Standard library logging handlers (console and optional rotating file).
- Baseline log level for the root logger.

Notes:
    This module intentionally performs side-effectful logger configuration and should be
    called once at process startup via [`setup_logging()`](core/logging_config.py:23).
"""

import logging as stdlib_logging
import logging.handlers
import os

import structlog

import config
from config import simple_formatter


def setup_logging() -> None:
    """Set up graph engine logging handlers and formatting.

    This configures:
    - Console logging in simple mode or when no log file is configured.
    - Rotating file logging when a log file is configured.

    Notes:
        This function replaces the root logger handler list and is intended to be called
        once during application startup.
    """
    level = config.settings.LOG_LEVEL_STR.upper()
    root_logger = stdlib_logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    root_logger.setLevel(level)

    log_file = config.settings.LOG_FILE
    if log_file and not config.settings.SIMPLE_LOGGING_MODE:
        try:
            os.makedirs(os.path.dirname(log_file) or ".", exist_ok=True)
            file_handler = stdlib_logging.handlers.RotatingFileHandler(
                log_file,
                maxBytes=10 * 1024 * 1024,
                backupCount=5,
                mode="a",
                encoding="utf-8",
            )
            file_handler.setLevel(level)
            file_handler.setFormatter(simple_formatter)
            root_logger.addHandler(file_handler)
            root_logger.info(f"File logging enabled. Log file: {log_file}")
        except OSError as e:
            console_handler_fallback = stdlib_logging.StreamHandler()
            console_handler_fallback.setFormatter(simple_formatter)
            root_logger.addHandler(console_handler_fallback)
            root_logger.error(
                f"Failed to configure file logging: {e}. Logging to console instead.",
                exc_info=True,
            )

    if not root_logger.handlers:
        stream_handler = stdlib_logging.StreamHandler()
        stream_handler.setLevel(level)
        stream_handler.setFormatter(simple_formatter)
        root_logger.addHandler(stream_handler)

    structlog.get_logger().info(f"Graph engine logging setup complete. Application Log Level: {level}.")
