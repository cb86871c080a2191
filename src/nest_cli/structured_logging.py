"""
Structured logging configuration for nest-cli.

Emits machine-readable JSON records for command runs, external tool
invocations and version-skew detection. Records go to stderr so they never
mix with the command output on stdout.
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

_RESERVED_ATTRIBUTES = frozenset(
    [
        "name",
        "msg",
        "args",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "taskName",
        "getMessage",
        "exc_info",
        "exc_text",
        "stack_info",
    ]
)


class StructuredFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "component": getattr(record, "component", record.name),
            "message": record.getMessage(),
        }

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRIBUTES:
                log_entry[key] = value

        return json.dumps(log_entry, default=str)


class EventLogger:
    """Structured logger for CLI events."""

    def __init__(self, name: str):
        self.logger = logging.getLogger(f"nest_cli.{name}")
        self._setup_logger()
        self.command_context: Dict[str, Any] = {}

    def _setup_logger(self) -> None:
        """Setup logger with structured formatting."""
        if not self.logger.handlers:
            handler = logging.StreamHandler(sys.stderr)
            handler.setFormatter(StructuredFormatter())
            self.logger.addHandler(handler)
            self.logger.setLevel(logging.WARNING)
            self.logger.propagate = False

    def set_command_context(
        self, command: Optional[str] = None, cwd: Optional[str] = None
    ) -> None:
        """Set command context for logging."""
        self.command_context = {}
        if command:
            self.command_context["command"] = command
        if cwd:
            self.command_context["cwd"] = cwd

    def clear_command_context(self) -> None:
        self.command_context.clear()

    def _log(self, level: str, event_type: str, **kwargs) -> None:
        log_data = {"event_type": event_type, **self.command_context, **kwargs}
        getattr(self.logger, level)(event_type, extra=log_data)

    def info(self, event_type: str, **kwargs) -> None:
        self._log("info", event_type, **kwargs)

    def warning(self, event_type: str, **kwargs) -> None:
        self._log("warning", event_type, **kwargs)

    def error(self, event_type: str, **kwargs) -> None:
        self._log("error", event_type, **kwargs)

    def debug(self, event_type: str, **kwargs) -> None:
        self._log("debug", event_type, **kwargs)


# Global logger instances
_info_logger = EventLogger("info")
_new_logger = EventLogger("new")
_package_manager_logger = EventLogger("package_manager")
_schematics_logger = EventLogger("schematics")

_ALL_LOGGERS = [_info_logger, _new_logger, _package_manager_logger, _schematics_logger]


def get_info_logger() -> EventLogger:
    """Get info command logger."""
    return _info_logger


def get_new_logger() -> EventLogger:
    """Get new command logger."""
    return _new_logger


def get_package_manager_logger() -> EventLogger:
    return _package_manager_logger


def get_schematics_logger() -> EventLogger:
    return _schematics_logger


def log_command_start(command: str, cwd: str, **kwargs) -> None:
    """Log command start event and set the context on every logger."""
    for event_logger in _ALL_LOGGERS:
        event_logger.set_command_context(command, cwd)
    logger = get_new_logger() if command == "new" else get_info_logger()
    logger.info("command_started", **kwargs)


def log_command_complete(command: str, duration_ms: int, **kwargs) -> None:
    """Log command completion and clear the context."""
    logger = get_new_logger() if command == "new" else get_info_logger()
    logger.info("command_completed", duration_ms=duration_ms, **kwargs)
    for event_logger in _ALL_LOGGERS:
        event_logger.clear_command_context()


def log_version_skew(minor_versions: List[str], packages: int) -> None:
    """Log that framework packages disagree on their minor version."""
    get_info_logger().info(
        "minor_version_skew_detected",
        minor_versions=minor_versions,
        package_count=packages,
    )


def log_subprocess_call(
    tool: str,
    args: List[str],
    cwd: Optional[str] = None,
    returncode: Optional[int] = None,
) -> None:
    """Log an invocation of an external tool."""
    logger = (
        get_schematics_logger() if tool == "schematics" else get_package_manager_logger()
    )

    log_data: Dict[str, Any] = {"tool": tool, "command_args": args}
    if cwd is not None:
        log_data["cwd"] = cwd
    if returncode is not None:
        log_data["returncode"] = returncode

    if returncode:
        logger.error("subprocess_failed", **log_data)
    else:
        logger.debug("subprocess_completed", **log_data)


def _has_file_handler(logger: logging.Logger, path: str) -> bool:
    return any(
        isinstance(handler, logging.FileHandler) and handler.baseFilename == path
        for handler in logger.handlers
    )


def configure_logging(
    log_level: str = "WARNING",
    log_file_path: Optional[str] = None,
    log_format: Optional[str] = None,
) -> None:
    """
    Configure logging for the application.

    Sets the level of the ``nest_cli`` logger and of every event logger.
    When ``log_file_path`` is given, one file handler is shared by all of
    them; records are JSON unless ``log_format`` asks for a plain layout.
    Calling this again with the same file does not add another handler.
    """
    level = getattr(logging, log_level.upper(), logging.WARNING)

    root_logger = logging.getLogger("nest_cli")
    loggers = [root_logger] + [event_logger.logger for event_logger in _ALL_LOGGERS]
    for logger in loggers:
        logger.setLevel(level)

    if not log_file_path:
        return

    path = os.path.abspath(log_file_path)
    missing = [logger for logger in loggers if not _has_file_handler(logger, path)]
    if not missing:
        return

    file_handler = logging.FileHandler(path, encoding="utf-8")
    if log_format:
        file_handler.setFormatter(logging.Formatter(log_format))
    else:
        file_handler.setFormatter(StructuredFormatter())
    for logger in missing:
        logger.addHandler(file_handler)
