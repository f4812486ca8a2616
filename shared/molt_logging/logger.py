"""
MoltLogger - Structured logging for the moltbot bootstrap.

Wraps stdlib logging with keyword-field structured logging and run/phase
context propagation.
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

from .context import get_current_context
from .formatters import ConsoleFormatter, JsonFormatter


class _StderrHandler(logging.StreamHandler):
    """StreamHandler bound to whatever sys.stderr is at emit time."""

    def __init__(self) -> None:
        super().__init__()

    @property
    def stream(self):  # type: ignore[override]
        return sys.stderr

    @stream.setter
    def stream(self, value) -> None:
        pass


class MoltLogger:
    """Structured logger for moltbot components.

    Usage:
        from molt_logging import get_logger

        logger = get_logger("moltbot-bootstrap")
        logger.info("Mounted bucket", bucket="moltbot-data", attempts=2)
    """

    def __init__(self, name: str, level: int | str = logging.INFO):
        """Initialize the logger.

        Args:
            name: Logger name (typically service name)
            level: Log level (default INFO)
        """
        self.name = name
        self._logger = logging.getLogger(name)
        self._logger.propagate = False
        self.set_level(level)
        self._environment = self._detect_environment()
        self._json = os.environ.get("MOLTBOT_LOG_FORMAT", "").lower() == "json"

    def _detect_environment(self) -> str:
        """Detect the running environment."""
        if Path("/.dockerenv").exists() or os.environ.get("MOLTBOT_CONTAINER"):
            return "container"
        return "host"

    def set_level(self, level: int | str) -> None:
        """Change the level of this logger."""
        self._logger.setLevel(level if isinstance(level, int) else getattr(logging, level.upper()))

    def use_json(self, enabled: bool = True) -> None:
        """Switch the console handler between JSON and human-readable output."""
        self._json = enabled
        for handler in self._logger.handlers:
            if isinstance(handler, _StderrHandler):
                handler.setFormatter(self._console_formatter())

    def _console_formatter(self) -> logging.Formatter:
        if self._json:
            return JsonFormatter(service=self.name, environment=self._environment)
        return ConsoleFormatter(service=self.name, use_colors=None)

    def _ensure_handlers(self) -> None:
        """Ensure handlers are configured (lazy initialization)."""
        if any(isinstance(h, _StderrHandler) for h in self._logger.handlers):
            return

        console_handler = _StderrHandler()
        console_handler.setLevel(logging.DEBUG)
        console_handler.setFormatter(self._console_formatter())
        self._logger.addHandler(console_handler)

    def _get_extra(self, extra: dict[str, Any] | None = None) -> dict[str, Any]:
        """Get extra fields including context."""
        result: dict[str, Any] = {}

        ctx = get_current_context()
        if ctx:
            if ctx.run_id:
                result["run_id"] = ctx.run_id
            if ctx.phase:
                result["phase"] = ctx.phase
            if ctx.extra:
                result.update(ctx.extra)

        if extra:
            result.update(extra)

        return result

    def _log(
        self,
        level: int,
        msg: str,
        *args: Any,
        exc_info: Any = None,
        **kwargs: Any,
    ) -> None:
        self._ensure_handlers()
        self._logger.log(level, msg, *args, exc_info=exc_info, extra=self._get_extra(kwargs))

    def debug(self, msg: str, *args: Any, **kwargs: Any) -> None:
        """Log a debug message."""
        self._log(logging.DEBUG, msg, *args, **kwargs)

    def info(self, msg: str, *args: Any, **kwargs: Any) -> None:
        """Log an info message."""
        self._log(logging.INFO, msg, *args, **kwargs)

    def warning(self, msg: str, *args: Any, **kwargs: Any) -> None:
        """Log a warning message."""
        self._log(logging.WARNING, msg, *args, **kwargs)

    def error(self, msg: str, *args: Any, exc_info: Any = None, **kwargs: Any) -> None:
        """Log an error message."""
        self._log(logging.ERROR, msg, *args, exc_info=exc_info, **kwargs)

    def exception(self, msg: str, *args: Any, **kwargs: Any) -> None:
        """Log an exception (includes stack trace)."""
        self._log(logging.ERROR, msg, *args, exc_info=True, **kwargs)

    def add_file_handler(
        self,
        log_file: str | Path,
        level: int = logging.DEBUG,
        max_bytes: int = 10 * 1024 * 1024,  # 10 MB
        backup_count: int = 5,
    ) -> None:
        """Add a rotating file handler with JSON formatting.

        Args:
            log_file: Path to the log file
            level: Log level for file handler
            max_bytes: Max file size before rotation
            backup_count: Number of backup files to keep
        """
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)

        self._ensure_handlers()
        file_handler = RotatingFileHandler(log_file, maxBytes=max_bytes, backupCount=backup_count)
        file_handler.setLevel(level)
        file_handler.setFormatter(JsonFormatter(service=self.name, environment=self._environment))
        self._logger.addHandler(file_handler)

    def with_context(self, **kwargs: Any) -> "BoundLogger":
        """Create a bound logger with additional fields.

        Usage:
            bound = logger.with_context(target="skills")
            bound.info("Migrating")  # Includes target in all logs
        """
        return BoundLogger(self, kwargs)


class BoundLogger:
    """Logger bound to specific context fields."""

    def __init__(self, parent: MoltLogger, bound_fields: dict[str, Any]):
        self._parent = parent
        self._bound_fields = bound_fields

    def _merge_kwargs(self, kwargs: dict[str, Any]) -> dict[str, Any]:
        result = dict(self._bound_fields)
        result.update(kwargs)
        return result

    def debug(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._parent.debug(msg, *args, **self._merge_kwargs(kwargs))

    def info(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._parent.info(msg, *args, **self._merge_kwargs(kwargs))

    def warning(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._parent.warning(msg, *args, **self._merge_kwargs(kwargs))

    def error(self, msg: str, *args: Any, exc_info: Any = None, **kwargs: Any) -> None:
        self._parent.error(msg, *args, exc_info=exc_info, **self._merge_kwargs(kwargs))

    def exception(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._parent.exception(msg, *args, **self._merge_kwargs(kwargs))

    def with_context(self, **kwargs: Any) -> "BoundLogger":
        """Create a new bound logger with additional context."""
        merged = dict(self._bound_fields)
        merged.update(kwargs)
        return BoundLogger(self._parent, merged)


_loggers: dict[str, MoltLogger] = {}


def get_logger(name: str, level: int | str = logging.INFO) -> MoltLogger:
    """Get or create a logger by name.

    Loggers are cached by name, so calling get_logger with the same name
    returns the same instance.
    """
    if name not in _loggers:
        _loggers[name] = MoltLogger(name, level)
    return _loggers[name]


def configure_logging(
    name: str,
    *,
    verbose: bool = False,
    quiet: bool = False,
    json_format: bool | None = None,
    log_file: str | Path | None = None,
) -> MoltLogger:
    """Configure the named logger for a command-line run.

    Args:
        name: Logger name
        verbose: Enable DEBUG level
        quiet: Only show warnings and errors (ignored when verbose)
        json_format: Force JSON console output (None keeps MOLTBOT_LOG_FORMAT)
        log_file: Optional path for an additional rotating JSON log

    Returns:
        The configured MoltLogger
    """
    logger = get_logger(name)

    if verbose:
        logger.set_level(logging.DEBUG)
    elif quiet:
        logger.set_level(logging.WARNING)
    else:
        logger.set_level(logging.INFO)

    if json_format is not None:
        logger.use_json(json_format)

    if log_file:
        logger.add_file_handler(log_file)

    return logger
