"""
molt_logging - Structured logging for the moltbot sandbox.

Usage:
    from molt_logging import get_logger, ContextScope

    logger = get_logger("moltbot-bootstrap")
    logger.info("Config written", path="/root/.clawdbot/clawdbot.json")

    # All logs in the scope carry the run ID and phase
    with ContextScope(phase="mount"):
        logger.info("Mounting bucket")

Console output is human-readable by default; set MOLTBOT_LOG_FORMAT=json for
one JSON object per line.
"""

from .context import (
    ContextScope,
    LogContext,
    context_from_env,
    get_current_context,
    set_current_context,
)
from .formatters import ConsoleFormatter, JsonFormatter
from .logger import BoundLogger, MoltLogger, configure_logging, get_logger


__all__ = [
    "BoundLogger",
    "ConsoleFormatter",
    "ContextScope",
    "JsonFormatter",
    "LogContext",
    "MoltLogger",
    "configure_logging",
    "context_from_env",
    "get_current_context",
    "get_logger",
    "set_current_context",
]

__version__ = "0.1.0"
