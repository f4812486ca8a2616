"""Run the reconciliation stages in order.

mount -> persist -> config -> merge. Each stage checks current state and
acts only when needed; failures degrade persistence but never stop the
gateway from starting.
"""

from collections.abc import Callable, Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any

from molt_config import ConfigRegistry
from molt_config.configs import CHANNEL_CONFIGS, AnthropicProviderConfig, GatewayConfig, StorageConfig
from molt_logging import ContextScope, get_logger

from .config import SERVICE_NAME, Paths
from .merger import reconcile_config
from .mount import MountOutcome, reconcile_mount
from .persistence import RedirectOutcome, redirect_persistent_dirs
from .polling import wait_until
from .probe import SystemProbe
from .synthesizer import ConfigSource, ensure_config_file
from .timing import StartupTimer


logger = get_logger(SERVICE_NAME)


@dataclass
class StartupReport:
    """What a reconciliation pass did."""

    already_running: bool = False
    mount: MountOutcome = MountOutcome.SKIPPED
    redirects: dict[str, RedirectOutcome] = field(default_factory=dict)
    config_source: ConfigSource | None = None
    document: dict[str, Any] | None = None

    @property
    def persistent(self) -> bool:
        """True if gateway state will survive a container restart."""
        if not self.mount.is_mounted:
            return False
        return all(outcome != RedirectOutcome.FAILED for outcome in self.redirects.values())


def build_registry(env: Mapping[str, str]) -> ConfigRegistry:
    """Read every settings object from ``env`` into a registry."""
    registry = ConfigRegistry()
    registry.register(StorageConfig.from_env(env))
    registry.register(GatewayConfig.from_env(env))
    for channel_cls in CHANNEL_CONFIGS:
        registry.register(channel_cls.from_env(env))
    registry.register(AnthropicProviderConfig.from_env(env))
    return registry


def log_validation(registry: ConfigRegistry) -> None:
    """Log configuration problems. They never stop startup."""
    result = registry.validate_all()
    for warning in result.warnings:
        logger.warning(f"Config warning: {warning}")
    for error in result.errors:
        logger.error(f"Config error: {error}")
    logger.debug("Settings", settings=registry.to_dict())


@contextmanager
def _phase(timer: StartupTimer, name: str) -> Iterator[None]:
    with ContextScope(phase=name), timer.phase(name):
        yield


def reconcile(
    paths: Paths,
    env: Mapping[str, str],
    probe: SystemProbe,
    *,
    timer: StartupTimer | None = None,
    wait: Callable[..., Any] = wait_until,
    **mount_kwargs: Any,
) -> StartupReport:
    """Bring mount, symlinks and config document in line with ``env``.

    Does nothing at all when a gateway is already running.

    Args:
        paths: Container paths
        env: Environment mapping (see molt_config.load_environment)
        probe: Host state observer
        timer: Optional phase timer
        wait: Mount readiness poller
        **mount_kwargs: Passed through to reconcile_mount (e.g. popen)

    Returns:
        StartupReport describing every stage's outcome
    """
    timer = timer or StartupTimer(enabled=False)

    if probe.is_gateway_running():
        logger.info("Moltbot gateway is already running, exiting.")
        return StartupReport(already_running=True)

    logger.info("Config directory", config_dir=str(paths.config_dir))
    logger.info("R2 mount path", mount_path=str(paths.mount_path))

    registry = build_registry(env)
    log_validation(registry)
    storage = registry.get("storage")

    report = StartupReport()

    with _phase(timer, "mount"):
        report.mount = reconcile_mount(storage, paths, probe, wait=wait, **mount_kwargs)

    with _phase(timer, "persist"):
        report.redirects = redirect_persistent_dirs(paths, report.mount, probe)

    with _phase(timer, "config"):
        try:
            report.config_source = ensure_config_file(paths)
        except OSError as e:
            logger.error("Could not initialize config file", path=str(paths.config_file), error=str(e))

    with _phase(timer, "merge"):
        try:
            report.document = reconcile_config(paths.config_file, env)
        except OSError as e:
            logger.error("Could not write config file", path=str(paths.config_file), error=str(e))

    if storage.is_configured and not report.persistent:
        logger.warning(
            "Gateway will run WITHOUT persistent storage; state written this session is lost on restart",
            mount=report.mount.value,
        )

    return report
