"""Make sure a baseline config document exists before merging."""

import copy
from enum import Enum
from typing import Any

from molt_config.configs.gateway import GATEWAY_MODE, GATEWAY_PORT
from molt_logging import get_logger

from .config import DEFAULT_PRIMARY_MODEL, SERVICE_NAME, Paths
from .document import copy_document, write_document


logger = get_logger(SERVICE_NAME)


DEFAULT_DOCUMENT: dict[str, Any] = {
    "agents": {
        "defaults": {
            "workspace": "/root/clawd",
            "model": {
                "primary": DEFAULT_PRIMARY_MODEL,
            },
        },
    },
    "gateway": {
        "port": GATEWAY_PORT,
        "mode": GATEWAY_MODE,
    },
}


class ConfigSource(Enum):
    """Where the baseline document came from."""

    EXISTING = "existing"
    TEMPLATE = "template"
    DEFAULT = "default"


def default_document() -> dict[str, Any]:
    """Return a fresh copy of the minimal default document."""
    return copy.deepcopy(DEFAULT_DOCUMENT)


def ensure_config_file(paths: Paths) -> ConfigSource:
    """Create the config file from the template or the default if missing.

    An existing file is never touched, so state persisted in the bucket
    survives restarts.

    Raises:
        OSError: If the config directory or file cannot be created
    """
    paths.config_dir.mkdir(parents=True, exist_ok=True)

    if paths.config_file.exists():
        logger.info("Using existing config", path=str(paths.config_file))
        return ConfigSource.EXISTING

    logger.info("No existing config found, initializing", path=str(paths.config_file))

    if paths.template_file.is_file():
        copy_document(paths.template_file, paths.config_file)
        logger.info("Config initialized from template", template=str(paths.template_file))
        return ConfigSource.TEMPLATE

    write_document(paths.config_file, default_document())
    logger.info("Config initialized with built-in defaults")
    return ConfigSource.DEFAULT
