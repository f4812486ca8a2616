"""
Reusable validation functions for configuration values.

This module provides validators for common configuration patterns:
- URLs (HTTP/HTTPS)
- Token formats (Slack, Telegram)
- Ports
- Secret masking utilities
"""

import re
from typing import Any
from urllib.parse import urlparse


# Config document keys whose values are credentials
SECRET_KEYS = frozenset({"token", "botToken", "appToken", "apiKey"})

# Replaces the hidden part of a secret, whatever its length
MASK = "********"

_TELEGRAM_TOKEN_RE = re.compile(r"^\d+:[A-Za-z0-9_-]{20,}$")


def validate_url(url: str, *, require_https: bool = True) -> tuple[bool, str | None]:
    """Validate a URL.

    Args:
        url: The URL to validate
        require_https: If True, only HTTPS URLs are valid (default: True)

    Returns:
        Tuple of (is_valid, error_message). error_message is None if valid.
    """
    if not url:
        return False, "URL is empty"

    try:
        parsed = urlparse(url)
    except ValueError as e:
        return False, f"Invalid URL format: {e}"

    if not parsed.scheme:
        return False, "URL missing scheme (http:// or https://)"

    if not parsed.netloc:
        return False, "URL missing host"

    if require_https and parsed.scheme != "https":
        return False, f"URL must use HTTPS, got {parsed.scheme}://"

    if parsed.scheme not in ("http", "https"):
        return False, f"URL scheme must be http or https, got {parsed.scheme}"

    return True, None


def validate_slack_token(token: str, *, prefixes: tuple[str, ...] = ("xoxb-",)) -> tuple[bool, str | None]:
    """Validate a Slack token format.

    Args:
        token: The Slack token to validate
        prefixes: Accepted prefixes ("xoxb-" for bot tokens, "xapp-" for
                  app-level Socket Mode tokens)

    Returns:
        Tuple of (is_valid, error_message). error_message is None if valid.
    """
    if not token:
        return False, "Slack token is empty"

    if not token.startswith(prefixes):
        return False, f"Slack token must start with one of: {', '.join(prefixes)}"

    if len(token) < 20:
        return False, "Slack token appears too short"

    return True, None


def validate_telegram_token(token: str) -> tuple[bool, str | None]:
    """Validate a Telegram bot token (``<bot id>:<secret>``)."""
    if not token:
        return False, "Telegram token is empty"

    if not _TELEGRAM_TOKEN_RE.match(token):
        return False, "Telegram token must look like '<bot id>:<secret>'"

    return True, None


def validate_port(port: int | str) -> tuple[bool, str | None]:
    """Validate a port number.

    Args:
        port: The port number to validate (can be int or string)

    Returns:
        Tuple of (is_valid, error_message). error_message is None if valid.
    """
    try:
        port_int = int(port)
    except (ValueError, TypeError):
        return False, f"Port must be a number, got: {port}"

    if port_int < 1 or port_int > 65535:
        return False, f"Port must be between 1 and 65535, got: {port_int}"

    return True, None


def mask_secret(value: str | None, *, visible_chars: int = 4) -> str:
    """Mask a secret value for safe display.

    Shows the first few characters followed by a fixed-width mask.

    Args:
        value: The secret value to mask (can be None)
        visible_chars: Number of characters to show at the start (default: 4)

    Returns:
        Masked string like "xoxb********" or "[EMPTY]" if value is empty/None
    """
    if value is None or not value:
        return "[EMPTY]"

    if len(value) <= visible_chars:
        return MASK

    return value[:visible_chars] + MASK


def redact_secrets(document: Any) -> Any:
    """Return a copy of a JSON-like document with credential values masked.

    Any string stored under a key in SECRET_KEYS is passed through
    mask_secret(), at any depth. The input is not modified.
    """
    if isinstance(document, dict):
        return {
            key: mask_secret(value) if key in SECRET_KEYS and isinstance(value, str)
            else redact_secrets(value)
            for key, value in document.items()
        }
    if isinstance(document, list):
        return [redact_secrets(item) for item in document]
    return document
