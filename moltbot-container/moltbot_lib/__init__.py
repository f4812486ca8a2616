"""moltbot_lib - Startup reconciliation for the moltbot sandbox container.

Mounts the R2 bucket, redirects gateway state into it, reconciles the
gateway's JSON config with the environment and execs the gateway.
"""

# Config module exports
from .config import (
    DEFAULT_PRIMARY_MODEL,
    GATEWAY_BINARY,
    GATEWAY_PROCESS_PATTERN,
    MOUNT_BINARY,
    SERVICE_NAME,
    Paths,
)

# Error exports
from .errors import BootstrapError, LaunchError, MigrationError, MountError

# Host observation exports
from .probe import HostProbe, SystemProbe, parse_mount_points

# Polling and timing exports
from .polling import PollResult, backoff_delays, wait_until
from .timing import StartupTimer

# Stage exports
from .mount import MountOutcome, build_mount_command, reconcile_mount
from .persistence import RedirectOutcome, redirect_directory, redirect_persistent_dirs
from .document import dump_document, load_document, write_document
from .synthesizer import ConfigSource, default_document, ensure_config_file
from .merger import merge_config, reconcile_config
from .launcher import build_gateway_command, exec_gateway, remove_stale_locks

# Orchestration exports
from .startup import StartupReport, reconcile
from .cli import main


__all__ = [
    "BootstrapError",
    "ConfigSource",
    "DEFAULT_PRIMARY_MODEL",
    "GATEWAY_BINARY",
    "GATEWAY_PROCESS_PATTERN",
    "HostProbe",
    "LaunchError",
    "MOUNT_BINARY",
    "MigrationError",
    "MountError",
    "MountOutcome",
    "Paths",
    "PollResult",
    "RedirectOutcome",
    "SERVICE_NAME",
    "StartupReport",
    "StartupTimer",
    "SystemProbe",
    "backoff_delays",
    "build_gateway_command",
    "build_mount_command",
    "default_document",
    "dump_document",
    "ensure_config_file",
    "exec_gateway",
    "load_document",
    "main",
    "merge_config",
    "parse_mount_points",
    "reconcile",
    "reconcile_config",
    "reconcile_mount",
    "redirect_directory",
    "redirect_persistent_dirs",
    "remove_stale_locks",
    "wait_until",
    "write_document",
]

__version__ = "0.1.0"
