"""
Base service classes.

Defines the shared logger handling and the structured result type returned
by operations whose failure is an expected control-flow outcome.
"""

from abc import ABC
from typing import Any, Dict, Optional
import logging

from pydantic import BaseModel

from ..config import Settings, get_settings


class BaseService(ABC):
    """
    Abstract base class for all services.

    Provides common functionality:
    - Logging setup
    - Settings access
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._logger = logger or logging.getLogger(
            f"{self.__class__.__module__}.{self.__class__.__name__}"
        )

    @property
    def logger(self) -> logging.Logger:
        """Get the logger instance."""
        return self._logger

    @property
    def settings(self) -> Settings:
        """Get the settings instance."""
        return self._settings


class ServiceResult(BaseModel):
    """
    Wrapper for operation results that fail softly.

    Pause, resume, feedback and video operations report a wrong state
    through ``success=False`` instead of raising.
    """

    success: bool
    message: str = ""
    data: Optional[Dict[str, Any]] = None
    error_code: Optional[str] = None

    @classmethod
    def ok(cls, message: str = "", data: Optional[Dict[str, Any]] = None) -> "ServiceResult":
        """Create a successful result."""
        return cls(success=True, message=message, data=data)

    @classmethod
    def fail(cls, message: str, error_code: Optional[str] = None) -> "ServiceResult":
        """Create a failed result."""
        return cls(success=False, message=message, error_code=error_code)
