"""
Log formatters for molt_logging.

Provides a JSON formatter for log shipping and a console formatter for the
container's stdout.
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any


# Standard LogRecord attributes, excluded from "extra"
_STANDARD_ATTRS = {
    "name",
    "msg",
    "args",
    "created",
    "filename",
    "funcName",
    "levelname",
    "levelno",
    "lineno",
    "module",
    "msecs",
    "pathname",
    "process",
    "processName",
    "relativeCreated",
    "stack_info",
    "exc_info",
    "exc_text",
    "thread",
    "threadName",
    "message",
    "taskName",
    "run_id",
    "phase",
}


def extract_extra(record: logging.LogRecord) -> dict[str, Any]:
    """Extract extra fields that were passed to the log call."""
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in _STANDARD_ATTRS and not key.startswith("_")
    }


class JsonFormatter(logging.Formatter):
    """JSON formatter, one object per line.

    Output format:
        {
            "timestamp": "2026-01-28T12:34:56.789Z",
            "severity": "INFO",
            "message": "Mounted bucket",
            "service": "moltbot-bootstrap",
            "run_id": "4f0c2a9e1b7d3c55",
            "phase": "mount",
            "extra": {"bucket": "moltbot-data"}
        }
    """

    SEVERITY_MAP = {
        logging.DEBUG: "DEBUG",
        logging.INFO: "INFO",
        logging.WARNING: "WARNING",
        logging.ERROR: "ERROR",
        logging.CRITICAL: "CRITICAL",
    }

    def __init__(
        self,
        service: str = "moltbot",
        environment: str | None = None,
        include_extra: bool = True,
    ):
        """Initialize the JSON formatter.

        Args:
            service: Service name for all logs
            environment: Environment name (e.g., "container", "host")
            include_extra: Whether to include extra fields from log records
        """
        super().__init__()
        self.service = service
        self.environment = environment
        self.include_extra = include_extra

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record as JSON."""
        log_entry: dict[str, Any] = {
            "timestamp": self._format_timestamp(record),
            "severity": self.SEVERITY_MAP.get(record.levelno, "DEFAULT"),
            "message": record.getMessage(),
            "service": self.service,
        }

        if self.environment:
            log_entry["environment"] = self.environment

        if record.name and record.name != self.service:
            log_entry["logger"] = record.name

        if getattr(record, "run_id", None):
            log_entry["run_id"] = record.run_id
        if getattr(record, "phase", None):
            log_entry["phase"] = record.phase

        if self.include_extra:
            extra = extract_extra(record)
            if extra:
                log_entry["extra"] = extra

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        if record.levelno >= logging.WARNING:
            log_entry["sourceLocation"] = {
                "file": record.pathname,
                "line": record.lineno,
                "function": record.funcName,
            }

        return json.dumps(log_entry, default=str, ensure_ascii=False)

    def _format_timestamp(self, record: logging.LogRecord) -> str:
        """Format timestamp in ISO 8601 format with UTC timezone."""
        dt = datetime.fromtimestamp(record.created, tz=timezone.utc)
        return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{int(dt.microsecond / 1000):03d}Z"


class ConsoleFormatter(logging.Formatter):
    """Human-readable console formatter.

    Output format:
        2026-01-28 12:34:56 [INFO    ] moltbot-bootstrap [mount]: Mounted bucket (bucket=moltbot-data)
    """

    COLORS = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def __init__(
        self,
        service: str = "moltbot",
        use_colors: bool | None = None,
        show_extra: bool = True,
    ):
        """Initialize the console formatter.

        Args:
            service: Service name for logs
            use_colors: Whether to use ANSI colors (auto-detected if None)
            show_extra: Whether to append structured fields to the message
        """
        super().__init__()
        self.service = service
        self.use_colors = use_colors if use_colors is not None else self._detect_color_support()
        self.show_extra = show_extra

    def _detect_color_support(self) -> bool:
        """Detect if the terminal supports colors."""
        if not hasattr(sys.stderr, "isatty") or not sys.stderr.isatty():
            return False

        if os.environ.get("NO_COLOR"):
            return False

        return True

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record for console output."""
        dt = datetime.fromtimestamp(record.created)
        timestamp = dt.strftime("%Y-%m-%d %H:%M:%S")

        level = record.levelname
        if self.use_colors:
            color = self.COLORS.get(level, "")
            level = f"{color}{level:8}{self.RESET}"
        else:
            level = f"{level:8}"

        parts = [f"{timestamp} [{level}] {self.service}"]

        phase = getattr(record, "phase", None)
        if phase:
            parts.append(f" [{phase}]")

        parts.append(f": {record.getMessage()}")

        if self.show_extra:
            extra = extract_extra(record)
            if extra:
                fields = " ".join(f"{key}={value}" for key, value in extra.items())
                if self.use_colors:
                    parts.append(f" \033[90m({fields})\033[0m")
                else:
                    parts.append(f" ({fields})")

        message = "".join(parts)

        if record.exc_info:
            message += "\n" + self.formatException(record.exc_info)

        return message
