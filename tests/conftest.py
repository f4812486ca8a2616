"""
Pytest configuration and shared fixtures for moltbot sandbox tests.
"""

import sys
import tempfile
from logging.handlers import RotatingFileHandler
from pathlib import Path

import pytest


# Add project paths to sys.path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT / "moltbot-container"))
sys.path.insert(0, str(PROJECT_ROOT / "shared"))

from molt_logging import get_logger  # noqa: E402
from moltbot_lib.config import SERVICE_NAME, Paths  # noqa: E402
from moltbot_lib.probe import SystemProbe  # noqa: E402


# Every variable the bootstrap reads
BOOTSTRAP_ENV_VARS = (
    "AWS_ACCESS_KEY_ID",
    "AWS_SECRET_ACCESS_KEY",
    "R2_ACCOUNT_ID",
    "R2_BUCKET_NAME",
    "CLAWDBOT_GATEWAY_TOKEN",
    "CLAWDBOT_DEV_MODE",
    "TELEGRAM_BOT_TOKEN",
    "TELEGRAM_DM_POLICY",
    "DISCORD_BOT_TOKEN",
    "DISCORD_DM_POLICY",
    "SLACK_BOT_TOKEN",
    "SLACK_APP_TOKEN",
    "SLACK_DM_POLICY",
    "ANTHROPIC_BASE_URL",
    "ANTHROPIC_API_KEY",
    "MOLTBOT_LOG_FORMAT",
    "MOLTBOT_LOG_FILE",
    "MOLTBOT_QUIET",
    "MOLTBOT_RUN_ID",
)


class FakeProbe(SystemProbe):
    """SystemProbe with scripted mount table and process state."""

    def __init__(self, mounted=(), gateway_running=False):
        self.mounted = {Path(p) for p in mounted}
        self.gateway_running = gateway_running
        self.mount_checks = 0

    def is_mounted(self, path):
        self.mount_checks += 1
        return Path(path) in self.mounted

    def is_gateway_running(self):
        return self.gateway_running


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def paths(tmp_path):
    """Container layout rooted in a temporary directory."""
    return Paths.under(tmp_path)


@pytest.fixture
def probe():
    """A probe reporting nothing mounted and no gateway running."""
    return FakeProbe()


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every bootstrap variable from the process environment."""
    for var in BOOTSTRAP_ENV_VARS:
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def storage_env():
    """Complete R2 credentials."""
    return {
        "AWS_ACCESS_KEY_ID": "AKIAEXAMPLE123",
        "AWS_SECRET_ACCESS_KEY": "secret-access-key-example",
        "R2_ACCOUNT_ID": "0123456789abcdef0123456789abcdef",
        "R2_BUCKET_NAME": "moltbot-data",
    }


@pytest.fixture(autouse=True)
def reset_bootstrap_logger():
    """Undo CLI logging configuration on the cached bootstrap logger."""
    yield
    logger = get_logger(SERVICE_NAME)
    logger.set_level("INFO")
    logger.use_json(False)
    for handler in list(logger._logger.handlers):
        if isinstance(handler, RotatingFileHandler):
            logger._logger.removeHandler(handler)
            handler.close()
