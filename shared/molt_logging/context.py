"""
Context management for molt_logging.

Provides a per-startup run ID and the current bootstrap phase so every log
line emitted during one container start can be correlated.
"""

import os
import secrets
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any


_current_context: ContextVar["LogContext | None"] = ContextVar("molt_log_context", default=None)


@dataclass
class LogContext:
    """Context for log correlation.

    Attributes:
        run_id: Identifier of one bootstrap run (16 hex chars)
        phase: Current bootstrap phase (e.g. "mount", "merge")
        extra: Additional context fields to include in logs
    """

    run_id: str | None = None
    phase: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if self.run_id is None:
            self.run_id = secrets.token_hex(8)


def get_current_context() -> LogContext | None:
    """Get the current logging context."""
    return _current_context.get()


def set_current_context(ctx: LogContext | None) -> None:
    """Set the current logging context."""
    _current_context.set(ctx)


class ContextScope:
    """Context manager for scoped logging context.

    Usage:
        with ContextScope(phase="mount"):
            logger.info("Mounting bucket")
            # All logs in this scope include run_id and phase
    """

    def __init__(self, run_id: str | None = None, phase: str | None = None, **extra: Any):
        self._run_id = run_id
        self._phase = phase
        self._extra = extra
        self._token: Any = None

    def __enter__(self) -> LogContext:
        previous = get_current_context()

        # Inherit run_id from the enclosing scope
        run_id = self._run_id
        if run_id is None and previous:
            run_id = previous.run_id

        extra = dict(previous.extra) if previous else {}
        extra.update(self._extra)

        ctx = LogContext(run_id=run_id, phase=self._phase, extra=extra)
        self._token = _current_context.set(ctx)
        return ctx

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        _current_context.reset(self._token)


def context_from_env() -> LogContext:
    """Create a context from environment variables.

    Looks for MOLTBOT_RUN_ID so a supervisor can pass its own correlation ID.
    """
    return LogContext(run_id=os.environ.get("MOLTBOT_RUN_ID") or None)
