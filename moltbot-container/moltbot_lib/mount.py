"""Mount the R2 bucket with tigrisfs.

The mount is best-effort: without credentials, or if the mount never
appears, the gateway still starts on ephemeral local storage.
"""

import os
import subprocess
from collections.abc import Callable
from enum import Enum
from pathlib import Path

from molt_config.configs import StorageConfig
from molt_logging import get_logger

from .config import MOUNT_BINARY, SERVICE_NAME, Paths
from .errors import MountError
from .polling import PollResult, wait_until
from .probe import SystemProbe


logger = get_logger(SERVICE_NAME)


class MountOutcome(Enum):
    """Result of reconcile_mount()."""

    SKIPPED = "skipped"  # No credentials
    ALREADY_MOUNTED = "already_mounted"
    MOUNTED = "mounted"
    FAILED = "failed"

    @property
    def is_mounted(self) -> bool:
        return self in (MountOutcome.ALREADY_MOUNTED, MountOutcome.MOUNTED)


def build_mount_command(storage: StorageConfig, mount_path: Path, binary: str = MOUNT_BINARY) -> list[str]:
    """Build the tigrisfs invocation (foreground mode, backgrounded by the caller)."""
    return [binary, "--endpoint", storage.endpoint, "-f", storage.bucket_name, str(mount_path)]


def start_mount_process(
    storage: StorageConfig,
    paths: Paths,
    popen: Callable[..., subprocess.Popen] = subprocess.Popen,
) -> subprocess.Popen:
    """Start tigrisfs detached from the bootstrap.

    The process runs in its own session so it survives the exec into the
    gateway. Its output is appended to ``paths.mount_log``.

    Raises:
        MountError: If the mount tool could not be started
    """
    cmd = build_mount_command(storage, paths.mount_path)
    env = os.environ.copy()
    env.update(storage.mount_environment())

    try:
        paths.mount_log.parent.mkdir(parents=True, exist_ok=True)
        with open(paths.mount_log, "a") as log_file:
            return popen(
                cmd,
                stdin=subprocess.DEVNULL,
                stdout=log_file,
                stderr=subprocess.STDOUT,
                env=env,
                start_new_session=True,
            )
    except OSError as e:
        raise MountError(f"could not start {cmd[0]}: {e}") from e


def log_mount_contents(mount_path: Path) -> None:
    """Log the top-level entries of the mounted bucket."""
    try:
        entries = sorted(entry.name for entry in mount_path.iterdir())
    except OSError as e:
        logger.debug("Bucket mount not listable", mount_path=str(mount_path), error=str(e))
        return
    logger.debug("Bucket contents", mount_path=str(mount_path), entries=entries or "(empty)")


def reconcile_mount(
    storage: StorageConfig,
    paths: Paths,
    probe: SystemProbe,
    *,
    popen: Callable[..., subprocess.Popen] = subprocess.Popen,
    wait: Callable[[Callable[[], bool]], PollResult] = wait_until,
) -> MountOutcome:
    """Ensure the bucket is mounted at ``paths.mount_path``.

    Args:
        storage: R2 credentials
        paths: Container paths
        probe: Source of truth for the mount table
        popen: Process spawner (injectable for tests)
        wait: Readiness poller (injectable for tests)

    Returns:
        MountOutcome; FAILED means startup continues without persistence
    """
    if not storage.is_configured:
        logger.warning(
            "R2 credentials not configured, using local storage (not persistent)",
            missing=", ".join(storage.missing()),
        )
        logger.info(
            "To enable persistence, set: AWS_ACCESS_KEY_ID, AWS_SECRET_ACCESS_KEY, "
            "R2_ACCOUNT_ID, R2_BUCKET_NAME"
        )
        return MountOutcome.SKIPPED

    logger.info("R2 credentials found", endpoint=storage.endpoint, bucket=storage.bucket_name)

    if probe.is_mounted(paths.mount_path):
        logger.info("R2 bucket already mounted", mount_path=str(paths.mount_path))
        log_mount_contents(paths.mount_path)
        return MountOutcome.ALREADY_MOUNTED

    try:
        paths.mount_path.mkdir(parents=True, exist_ok=True)
        proc = start_mount_process(storage, paths, popen=popen)
    except (OSError, MountError) as e:
        logger.error("Failed to start bucket mount", error=str(e))
        return MountOutcome.FAILED

    logger.info("Mounting R2 bucket", mount_path=str(paths.mount_path), pid=proc.pid)

    result = wait(lambda: probe.is_mounted(paths.mount_path))
    if not result.ready:
        logger.warning(
            "R2 bucket did not mount, continuing with local storage (not persistent)",
            attempts=result.attempts,
            waited_seconds=result.waited,
            mount_log=str(paths.mount_log),
        )
        return MountOutcome.FAILED

    logger.info("R2 bucket mounted", mount_path=str(paths.mount_path), attempts=result.attempts)
    log_mount_contents(paths.mount_path)
    return MountOutcome.MOUNTED
