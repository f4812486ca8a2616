"""
Utility functions for configuration loading.

This module provides common utilities used by the settings classes:
- load_environment: Process environment layered over the baked env file
- get_env: Read a variable, treating empty strings as unset
"""

import os
from collections.abc import Mapping
from pathlib import Path

from dotenv import dotenv_values


# dotenv-format defaults baked into the image next to the config template
DEFAULT_ENV_FILE = Path("/root/.clawdbot-templates/moltbot.env")


def load_env_file(path: Path) -> dict[str, str]:
    """Load a dotenv-format file into a dictionary.

    Keys declared without a value are dropped. A missing or unreadable file
    yields an empty dictionary.

    Args:
        path: Path to the .env file

    Returns:
        Dictionary of key-value pairs
    """
    if not path.is_file():
        return {}

    try:
        values = dotenv_values(path)
    except (OSError, UnicodeDecodeError):
        return {}

    return {key: value for key, value in values.items() if value is not None}


def load_environment(
    env_file: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> dict[str, str]:
    """Build the environment mapping the bootstrap reads its settings from.

    Priority:
    1. Process environment (or the ``environ`` mapping when given)
    2. The dotenv file baked into the image

    Args:
        env_file: Path to the dotenv file (default: DEFAULT_ENV_FILE)
        environ: Mapping used instead of os.environ

    Returns:
        Merged dictionary, process environment winning
    """
    merged = load_env_file(env_file or DEFAULT_ENV_FILE)
    merged.update(os.environ if environ is None else environ)
    return merged


def get_env(env: Mapping[str, str], key: str) -> str | None:
    """Return a variable's value, or None when it is unset or empty."""
    value = env.get(key)
    return value if value else None
