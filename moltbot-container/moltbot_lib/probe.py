"""Observations of host state (mount table, filesystem, process table).

The bootstrap never tracks these facts itself; it asks a SystemProbe each
time. HostProbe reads the real host, tests substitute a fake.
"""

import os
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path

from molt_logging import get_logger

from .config import GATEWAY_PROCESS_PATTERN, SERVICE_NAME


logger = get_logger(SERVICE_NAME)

PROC_MOUNTS = Path("/proc/mounts")


class SystemProbe(ABC):
    """Read-only view of the host the bootstrap reconciles against."""

    @abstractmethod
    def is_mounted(self, path: Path) -> bool:
        """Return True if a filesystem is mounted at ``path``."""
        ...

    @abstractmethod
    def is_gateway_running(self) -> bool:
        """Return True if a gateway process is already running."""
        ...

    def path_exists(self, path: Path) -> bool:
        return path.exists()

    def is_symlink(self, path: Path) -> bool:
        return path.is_symlink()


def parse_mount_points(mount_table: str) -> list[str]:
    """Extract mount points from /proc/mounts formatted text.

    Spaces inside mount points are encoded as ``\\040`` in the table.
    """
    points = []
    for line in mount_table.splitlines():
        parts = line.split()
        if len(parts) >= 2:
            points.append(parts[1].replace("\\040", " "))
    return points


class HostProbe(SystemProbe):
    """SystemProbe backed by /proc and pgrep."""

    def __init__(self, mounts_file: Path = PROC_MOUNTS, process_pattern: str = GATEWAY_PROCESS_PATTERN):
        self.mounts_file = mounts_file
        self.process_pattern = process_pattern

    def is_mounted(self, path: Path) -> bool:
        target = os.path.normpath(str(path))

        if self.mounts_file.exists():
            try:
                return target in parse_mount_points(self.mounts_file.read_text())
            except OSError as e:
                logger.debug("Could not read mount table", mounts_file=str(self.mounts_file), error=str(e))

        # Non-Linux hosts: fall back to the mount command
        try:
            result = subprocess.run(["mount"], capture_output=True, text=True, timeout=5, check=False)
        except (OSError, subprocess.SubprocessError):
            return False
        return f" on {target} " in result.stdout

    def is_gateway_running(self) -> bool:
        try:
            result = subprocess.run(
                ["pgrep", "-f", self.process_pattern],
                capture_output=True,
                text=True,
                timeout=5,
                check=False,
            )
        except (OSError, subprocess.SubprocessError) as e:
            logger.debug("Could not query process table", error=str(e))
            return False

        own_pid = str(os.getpid())
        pids = [pid for pid in result.stdout.split() if pid != own_pid]
        return result.returncode == 0 and bool(pids)
