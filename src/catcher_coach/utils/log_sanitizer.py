"""Log sanitization filter to keep athlete PII out of logs.

Session feedback, notes and progress videos are free text supplied by the
host application. This filter redacts the parts of them that should never
reach a log file:
- Email addresses
- Phone numbers
- Signed query strings on video URLs
- Bearer tokens

Usage:
    from catcher_coach.utils.log_sanitizer import install_log_sanitizer

    # Apply to the package logger at startup
    install_log_sanitizer()
"""

import logging
import re
from typing import Any, Optional


class LogSanitizationFilter(logging.Filter):
    """Logging filter that redacts sensitive information from log messages."""

    # Order matters - more specific patterns should come before general ones
    PATTERNS: list[tuple[re.Pattern, str]] = [
        # Signed URLs (storage providers put credentials in the query string)
        (re.compile(r'(https?://[^\s?"\']+)\?[^\s"\']+'), r'\1?[REDACTED_QUERY]'),

        # Bearer tokens
        (re.compile(r'Bearer\s+[a-zA-Z0-9_\-\.]+', re.IGNORECASE), 'Bearer [REDACTED_TOKEN]'),

        # Email addresses
        (re.compile(r'\b[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}\b'), '[REDACTED_EMAIL]'),

        # Phone numbers (parents often leave them in session notes)
        (re.compile(r'(?<!\d)(?:\+?1[ .-]?)?\(?\d{3}\)?[ .-]?\d{3}[ .-]?\d{4}(?!\d)'), '[REDACTED_PHONE]'),
    ]

    def filter(self, record: logging.LogRecord) -> bool:
        """Sanitize the record in place. Always lets the record through."""
        if record.msg:
            record.msg = self._sanitize(str(record.msg))
        if record.args:
            record.args = self._sanitize_args(record.args)
        return True

    def _sanitize(self, text: str) -> str:
        for pattern, replacement in self.PATTERNS:
            text = pattern.sub(replacement, text)
        return text

    def _sanitize_args(self, args: Any) -> Any:
        if isinstance(args, dict):
            return {k: self._sanitize(v) if isinstance(v, str) else v for k, v in args.items()}
        if isinstance(args, tuple):
            return tuple(self._sanitize(a) if isinstance(a, str) else a for a in args)
        return args


_sanitization_filter: Optional[LogSanitizationFilter] = None


def get_sanitization_filter() -> LogSanitizationFilter:
    """Get the shared filter instance."""
    global _sanitization_filter
    if _sanitization_filter is None:
        _sanitization_filter = LogSanitizationFilter()
    return _sanitization_filter


def sanitize_string(text: str) -> str:
    """Redact sensitive data from a single string."""
    return get_sanitization_filter()._sanitize(text)


def install_log_sanitizer(logger_name: str = "catcher_coach") -> None:
    """Attach the sanitization filter to a logger and its handlers.

    Installing twice is a no-op.
    """
    target = logging.getLogger(logger_name)
    sanitizer = get_sanitization_filter()
    if sanitizer not in target.filters:
        target.addFilter(sanitizer)
    for handler in target.handlers:
        if sanitizer not in handler.filters:
            handler.addFilter(sanitizer)
