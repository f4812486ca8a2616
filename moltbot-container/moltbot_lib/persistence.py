"""Redirect local state directories into the mounted bucket.

Each managed directory becomes a symlink into the bucket. Existing local
content is migrated once; later runs find the symlink and do nothing.
"""

import os
import shutil
import uuid
from enum import Enum
from pathlib import Path

from molt_logging import get_logger

from .config import SERVICE_NAME, Paths
from .errors import MigrationError
from .mount import MountOutcome
from .probe import SystemProbe


logger = get_logger(SERVICE_NAME)


class RedirectOutcome(Enum):
    """Result of redirecting one directory."""

    SKIPPED = "skipped"  # Bucket not mounted
    ALREADY_LINKED = "already_linked"
    LINKED = "linked"  # Nothing to migrate
    MIGRATED = "migrated"
    FAILED = "failed"


def copy_into(src: Path, dest: Path) -> None:
    """Copy the contents of ``src`` into ``dest``, keeping attributes and symlinks.

    Files already in ``dest`` are overwritten; other bucket content is kept.
    """
    shutil.copytree(src, dest, symlinks=True, dirs_exist_ok=True)


def verify_copy(src: Path, dest: Path) -> list[str]:
    """Compare a migrated tree against its source.

    Returns:
        Relative paths that are missing at ``dest`` or differ in size
    """
    mismatches = []
    for root, _dirs, files in os.walk(src):
        for name in files:
            source = Path(root) / name
            relative = source.relative_to(src)
            target = dest / relative

            if source.is_symlink():
                if not target.is_symlink():
                    mismatches.append(str(relative))
                continue

            try:
                if target.stat().st_size != source.stat().st_size:
                    mismatches.append(str(relative))
            except OSError:
                mismatches.append(str(relative))
    return mismatches


def _remove(path: Path) -> None:
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    else:
        path.unlink()


def replace_with_symlink(local: Path, dest: Path) -> None:
    """Swap ``local`` for a symlink to ``dest``.

    The original is renamed aside first and only deleted once the symlink
    exists; if the symlink cannot be created the original is put back.
    """
    local.parent.mkdir(parents=True, exist_ok=True)

    aside = None
    if local.exists():
        aside = local.with_name(f".{local.name}.pre-redirect-{uuid.uuid4().hex[:8]}")
        local.rename(aside)

    try:
        local.symlink_to(dest, target_is_directory=True)
    except OSError:
        if aside is not None:
            aside.rename(local)
        raise

    if aside is not None:
        try:
            _remove(aside)
        except OSError as e:
            logger.warning("Could not remove previous local copy", path=str(aside), error=str(e))


def redirect_directory(local: Path, dest: Path, probe: SystemProbe) -> RedirectOutcome:
    """Make ``local`` a symlink to ``dest`` without losing local data.

    Args:
        local: Local directory (e.g. /root/.clawdbot)
        dest: Destination inside the bucket mount
        probe: Filesystem view

    Returns:
        RedirectOutcome; FAILED leaves the local directory in place
    """
    log = logger.with_context(local=str(local), dest=str(dest))

    try:
        dest.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        log.error("Could not create bucket directory", error=str(e))
        return RedirectOutcome.FAILED

    if probe.is_symlink(local):
        log.debug("Already redirected to bucket")
        return RedirectOutcome.ALREADY_LINKED

    migrated = False
    try:
        if probe.path_exists(local) and local.is_dir() and any(local.iterdir()):
            log.info("Migrating existing local content to R2")
            copy_into(local, dest)
            mismatches = verify_copy(local, dest)
            if mismatches:
                raise MigrationError(
                    f"{len(mismatches)} file(s) missing or truncated in bucket: "
                    + ", ".join(mismatches[:5])
                )
            migrated = True

        replace_with_symlink(local, dest)
    except MigrationError as e:
        log.error("Migration to R2 failed verification, keeping local directory", error=str(e))
        return RedirectOutcome.FAILED
    except (OSError, shutil.Error) as e:
        log.error("Could not redirect directory to R2", error=str(e))
        return RedirectOutcome.FAILED

    log.info("Directory symlinked to R2")
    return RedirectOutcome.MIGRATED if migrated else RedirectOutcome.LINKED


def redirect_persistent_dirs(
    paths: Paths,
    mount: MountOutcome,
    probe: SystemProbe,
) -> dict[str, RedirectOutcome]:
    """Redirect the config and skills directories into the bucket.

    Returns:
        Outcome per local directory path
    """
    outcomes: dict[str, RedirectOutcome] = {}
    for local, dest in paths.redirects():
        if not mount.is_mounted:
            outcomes[str(local)] = RedirectOutcome.SKIPPED
            continue
        outcomes[str(local)] = redirect_directory(local, dest, probe)
    return outcomes
