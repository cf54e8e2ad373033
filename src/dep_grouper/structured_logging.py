"""
Structured logging configuration for dep-grouper.

Provides consistent, machine-readable logging of grouping runs for
update pipelines and operational monitoring.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

_RESERVED_RECORD_KEYS = {
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
    "getMessage",
    "exc_info",
    "exc_text",
    "stack_info",
    "taskName",
}


class StructuredFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "component": getattr(record, "component", "dep_grouper"),
            "message": record.getMessage(),
        }

        for key, value in record.__dict__.items():
            if key not in _RESERVED_RECORD_KEYS:
                log_entry[key] = value

        return json.dumps(log_entry, default=str)


class GroupingLogger:
    """Structured logger for grouping events."""

    def __init__(self, name: str = "dep_grouper.grouping"):
        self.logger = logging.getLogger(name)
        self._setup_logger()
        self.job_context: Dict[str, Any] = {}

    def _setup_logger(self) -> None:
        """Setup logger with structured formatting."""
        if not self.logger.handlers:
            handler = logging.StreamHandler(sys.stdout)
            handler.setFormatter(StructuredFormatter())
            self.logger.addHandler(handler)
            self.logger.setLevel(logging.WARNING)
            # Keep JSON events out of the human-readable "dep_grouper" stream
            self.logger.propagate = False

    def set_job_context(self, file_path: Optional[str] = None) -> None:
        """Set job context for logging."""
        self.job_context = {}
        if file_path:
            self.job_context["file_path"] = file_path

    def clear_job_context(self) -> None:
        self.job_context.clear()

    def _log(self, level: str, event_type: str, **kwargs) -> None:
        log_data = {"event_type": event_type, **self.job_context, **kwargs}
        getattr(self.logger, level.lower())(event_type, extra=log_data)

    def info(self, event_type: str, **kwargs) -> None:
        """Log info level event."""
        self._log("info", event_type, **kwargs)

    def debug(self, event_type: str, **kwargs) -> None:
        """Log debug level event."""
        self._log("debug", event_type, **kwargs)


_grouping_logger = GroupingLogger()


def get_grouping_logger() -> GroupingLogger:
    """Get grouping operations logger."""
    return _grouping_logger


def log_grouping_start(group_count: int, dependency_count: int) -> None:
    get_grouping_logger().info(
        "grouping_started",
        group_count=group_count,
        dependency_count=dependency_count,
    )


def log_group_assignment(dependency_name: str, group_names) -> None:
    """Log which groups a single dependency was recorded in."""
    logger = get_grouping_logger()
    if group_names:
        logger.debug(
            "dependency_grouped",
            dependency=dependency_name,
            groups=list(group_names),
        )
    else:
        logger.debug("dependency_ungrouped", dependency=dependency_name)


def log_grouping_complete(
    grouped_count: int, ungrouped_count: int, empty_groups: int = 0
) -> None:
    get_grouping_logger().info(
        "grouping_completed",
        grouped_dependencies=grouped_count,
        ungrouped_dependencies=ungrouped_count,
        empty_groups=empty_groups,
    )


def configure_logging(log_level: str = "WARNING", enable_json: bool = False) -> None:
    """Configure logging for the application."""
    level = getattr(logging, log_level.upper(), logging.WARNING)

    logging.getLogger("dep_grouper").setLevel(level)

    # JSON events are only emitted when explicitly asked for
    _grouping_logger.logger.setLevel(level if enable_json else logging.CRITICAL + 1)
