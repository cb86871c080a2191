"""
Error handling for nest-cli.

Provides the exception types raised by the collaborators of the CLI
commands, plus a handler that records each failure as a structured log
entry before the caller raises or recovers.
"""

import logging
import sys
import traceback
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from .structured_logging import StructuredFormatter


class NestCliError(Exception):
    """Base class for errors reported to the CLI user."""


class ManifestError(NestCliError):
    """The project package.json is missing or unreadable."""


class PackageManagerError(NestCliError):
    """A package manager could not be found or failed."""


class SchematicsError(NestCliError):
    """The schematics runner could not be started or failed."""


class ErrorLevel(Enum):
    """Severity of a handled error."""

    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR


class ErrorCategory(Enum):
    """Area of the CLI an error comes from."""

    MANIFEST = "MANIFEST"
    PACKAGE_MANAGER = "PACKAGE_MANAGER"
    SCHEMATICS = "SCHEMATICS"
    PROMPT = "PROMPT"
    CONFIGURATION = "CONFIGURATION"


@dataclass
class ErrorContext:
    """Structured error context information."""

    level: ErrorLevel
    category: ErrorCategory
    message: str
    module: str
    function: str
    details: Dict[str, Any] = field(default_factory=dict)
    exception: Optional[Exception] = None
    traceback_info: Optional[str] = None
    suggestions: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert error context to dictionary for logging."""
        return {
            "level": self.level.name,
            "category": self.category.value,
            "module": self.module,
            "function": self.function,
            "details": self.details,
            "exception_type": type(self.exception).__name__ if self.exception else None,
            "exception_message": str(self.exception) if self.exception else None,
            "traceback": self.traceback_info,
            "suggestions": self.suggestions,
        }


class ErrorHandler:
    """
    Logs handled errors of the CLI collaborators.

    Each call produces one JSON record on the ``nest_cli`` logger, whose
    ``error`` field carries the full context. The file handler installed by
    ``configure_logging`` receives the same records.
    """

    def __init__(self, logger_name: str = "nest_cli", log_level: int = logging.WARNING):
        self.logger = logging.getLogger(logger_name)
        self.logger.setLevel(log_level)
        if not self.logger.handlers:
            handler = logging.StreamHandler(sys.stderr)
            handler.setFormatter(StructuredFormatter())
            self.logger.addHandler(handler)

    def handle_error(
        self,
        level: ErrorLevel,
        category: ErrorCategory,
        message: str,
        module: str,
        function: str,
        exception: Optional[Exception] = None,
        details: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
    ) -> ErrorContext:
        """
        Log an error with its context.

        Returns:
            ErrorContext: The created error context
        """
        context = ErrorContext(
            level=level,
            category=category,
            message=message,
            module=module,
            function=function,
            details=details or {},
            exception=exception,
            traceback_info=traceback.format_exc() if exception else None,
            suggestions=suggestions or [],
        )
        self.logger.log(level.value, message, extra={"error": context.to_dict()})
        return context

    def warning(
        self, category: ErrorCategory, message: str, module: str, function: str, **kwargs
    ) -> ErrorContext:
        return self.handle_error(
            ErrorLevel.WARNING, category, message, module, function, **kwargs
        )

    def error(
        self, category: ErrorCategory, message: str, module: str, function: str, **kwargs
    ) -> ErrorContext:
        return self.handle_error(
            ErrorLevel.ERROR, category, message, module, function, **kwargs
        )


_error_handler = ErrorHandler()


def get_error_handler() -> ErrorHandler:
    """Get the global error handler instance."""
    return _error_handler
