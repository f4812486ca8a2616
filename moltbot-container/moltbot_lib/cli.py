"""CLI argument parsing and entry point for the moltbot bootstrap.

This module contains the main() function and argument parser setup.
"""

import argparse
import os
from collections.abc import Callable, Mapping

from molt_config import get_env, load_environment
from molt_config.configs import GatewayConfig
from molt_logging import ContextScope, configure_logging, context_from_env

from .config import SERVICE_NAME, Paths
from .errors import LaunchError
from .launcher import exec_gateway, remove_stale_locks
from .probe import HostProbe, SystemProbe
from .startup import reconcile
from .timing import StartupTimer


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="start-moltbot",
        description="Prepare the sandbox container and start the moltbot gateway",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  start-moltbot                  # Mount storage, reconcile config, exec the gateway
  start-moltbot -v               # Include debug output (redacted config dump)
  start-moltbot --time           # Log a startup timing breakdown before launch

Environment:
  MOLTBOT_LOG_FORMAT=json        # One JSON object per log line
  MOLTBOT_LOG_FILE=<path>        # Also write a rotating JSON log
  MOLTBOT_QUIET=1                # Only warnings and errors
        """,
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )
    parser.add_argument(
        "--time", action="store_true", help="Show startup timing breakdown"
    )
    return parser


def run(
    args: argparse.Namespace,
    env: Mapping[str, str],
    *,
    paths: Paths,
    probe: SystemProbe,
    execvp: Callable[[str, list[str]], None] | None = None,
) -> int:
    """Reconcile the container and hand over to the gateway.

    Returns:
        Exit code; only returned when the gateway is not exec'd
    """
    logger = configure_logging(
        SERVICE_NAME,
        verbose=args.verbose,
        quiet=env.get("MOLTBOT_QUIET") == "1",
        json_format=True if env.get("MOLTBOT_LOG_FORMAT", "").lower() == "json" else None,
    )
    timer = StartupTimer(enabled=args.time)

    with ContextScope(run_id=context_from_env().run_id):
        # Nothing may touch the filesystem while a gateway is running
        if probe.is_gateway_running():
            logger.info("Moltbot gateway is already running, exiting.")
            return 0

        log_file = get_env(env, "MOLTBOT_LOG_FILE")
        if log_file:
            logger.add_file_handler(log_file)

        report = reconcile(paths, env, probe, timer=timer)
        if report.already_running:
            return 0

        with ContextScope(phase="launch"):
            remove_stale_locks(paths.lock_files)

            for line in timer.summary_lines():
                logger.info(line)

            try:
                exec_gateway(GatewayConfig.from_env(env), execvp=execvp or os.execvp)
            except LaunchError as e:
                logger.error("Gateway failed to start", error=str(e))
                return 1


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    paths = Paths()
    env = load_environment(paths.env_file)
    return run(args, env, paths=paths, probe=HostProbe())
