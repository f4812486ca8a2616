"""Paths and constants for the moltbot bootstrap.

The container layout is fixed. Paths is a dataclass so tests can point every
location at a temporary directory.
"""

from dataclasses import dataclass
from pathlib import Path

from molt_config import DEFAULT_ENV_FILE


SERVICE_NAME = "moltbot-bootstrap"

# The gateway CLI is still named "clawdbot" upstream
GATEWAY_BINARY = "clawdbot"
GATEWAY_PROCESS_PATTERN = "clawdbot gateway"
MOUNT_BINARY = "/usr/local/bin/tigrisfs"

DEFAULT_PRIMARY_MODEL = "anthropic/claude-opus-4-5-20251101"

# Bucket subdirectories the local directories are redirected into
BUCKET_CONFIG_SUBDIR = "clawdbot"
BUCKET_SKILLS_SUBDIR = "skills"


@dataclass
class Paths:
    """Filesystem locations used during bootstrap."""

    config_dir: Path = Path("/root/.clawdbot")
    template_dir: Path = Path("/root/.clawdbot-templates")
    workspace_dir: Path = Path("/root/clawd")
    mount_path: Path = Path("/data/moltbot")
    env_file: Path = DEFAULT_ENV_FILE
    mount_log: Path = Path("/tmp/tigrisfs.log")
    global_lock: Path = Path("/tmp/clawdbot-gateway.lock")

    @property
    def config_file(self) -> Path:
        return self.config_dir / "clawdbot.json"

    @property
    def template_file(self) -> Path:
        return self.template_dir / "moltbot.json.template"

    @property
    def skills_dir(self) -> Path:
        return self.workspace_dir / "skills"

    @property
    def lock_files(self) -> list[Path]:
        """Stale lock files removed before launch."""
        return [self.global_lock, self.config_dir / "gateway.lock"]

    def redirects(self) -> list[tuple[Path, Path]]:
        """(local directory, bucket destination) pairs to persist."""
        return [
            (self.config_dir, self.mount_path / BUCKET_CONFIG_SUBDIR),
            (self.skills_dir, self.mount_path / BUCKET_SKILLS_SUBDIR),
        ]

    @classmethod
    def under(cls, root: Path) -> "Paths":
        """Mirror the container layout below ``root`` (used by tests)."""
        return cls(
            config_dir=root / "root" / ".clawdbot",
            template_dir=root / "root" / ".clawdbot-templates",
            workspace_dir=root / "root" / "clawd",
            mount_path=root / "data" / "moltbot",
            env_file=root / "root" / ".clawdbot-templates" / "moltbot.env",
            mount_log=root / "tmp" / "tigrisfs.log",
            global_lock=root / "tmp" / "clawdbot-gateway.lock",
        )
