"""Logging setup for hosts that embed the library."""

import logging
from typing import Optional

from ..config import Settings, get_settings
from .log_sanitizer import install_log_sanitizer

PACKAGE_LOGGER = "catcher_coach"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(settings: Optional[Settings] = None) -> logging.Logger:
    """
    Configure the package logger.

    Adds a single stream handler (repeated calls reuse it), applies the
    configured level and installs the log sanitizer when enabled.

    Returns:
        The configured package logger
    """
    settings = settings or get_settings()
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(settings.log_level.upper())

    if not any(getattr(h, "_catcher_coach", False) for h in package_logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._catcher_coach = True  # type: ignore[attr-defined]
        package_logger.addHandler(handler)

    if settings.sanitize_logs:
        install_log_sanitizer(PACKAGE_LOGGER)

    return package_logger
