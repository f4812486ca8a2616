"""Hand the container over to the gateway process.

exec_gateway() replaces the current process image; it only returns by
raising LaunchError.
"""

import os
import sys
from collections.abc import Callable
from pathlib import Path
from typing import NoReturn

from molt_config.configs import GatewayConfig
from molt_logging import get_logger

from .config import GATEWAY_BINARY, SERVICE_NAME
from .errors import LaunchError


logger = get_logger(SERVICE_NAME)


def remove_stale_locks(lock_files: list[Path]) -> list[Path]:
    """Delete lock files left behind by a previous gateway.

    Absent files and removal errors are ignored.

    Returns:
        The lock files that were removed
    """
    removed = []
    for lock_file in lock_files:
        try:
            lock_file.unlink()
        except FileNotFoundError:
            continue
        except OSError as e:
            logger.debug("Could not remove lock file", lock_file=str(lock_file), error=str(e))
            continue
        removed.append(lock_file)
        logger.info("Removed stale lock file", lock_file=str(lock_file))
    return removed


def build_gateway_command(gateway: GatewayConfig, binary: str = GATEWAY_BINARY) -> list[str]:
    """Build the gateway argv.

    The token flag is only added when a static token is configured;
    otherwise the gateway falls back to device pairing.
    """
    cmd = [
        binary,
        "gateway",
        "--port",
        str(gateway.port),
        "--verbose",
        "--allow-unconfigured",
        "--bind",
        gateway.bind_mode,
    ]
    if gateway.token:
        cmd.extend(["--token", gateway.token])
    return cmd


def exec_gateway(
    gateway: GatewayConfig,
    *,
    execvp: Callable[[str, list[str]], None] = os.execvp,
) -> NoReturn:
    """Replace this process with the gateway.

    Raises:
        LaunchError: If the gateway binary could not be exec'd
    """
    cmd = build_gateway_command(gateway)

    logger.info(
        "Starting Moltbot Gateway",
        port=gateway.port,
        bind_mode=gateway.bind_mode,
        dev_mode=gateway.dev_mode,
    )
    if gateway.token:
        logger.info("Starting gateway with token auth")
    else:
        logger.info("Starting gateway with device pairing (no token)")

    # exec does not flush Python-level buffers
    sys.stdout.flush()
    sys.stderr.flush()

    try:
        execvp(cmd[0], cmd)
    except OSError as e:
        raise LaunchError(f"could not exec {cmd[0]}: {e}") from e

    # Only reachable when execvp is substituted
    raise LaunchError(f"{cmd[0]} returned without replacing the process")
