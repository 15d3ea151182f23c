"""Utility modules for catcher coach."""

from .log_sanitizer import (
    LogSanitizationFilter,
    install_log_sanitizer,
    get_sanitization_filter,
    sanitize_string,
)
from .logs import configure_logging

__all__ = [
    "LogSanitizationFilter",
    "install_log_sanitizer",
    "get_sanitization_filter",
    "sanitize_string",
    "configure_logging",
]
