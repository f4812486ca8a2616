"""Reading and writing the gateway's JSON config document."""

import json
import os
import shutil
from collections.abc import Callable
from pathlib import Path
from typing import Any

from molt_logging import get_logger

from .config import SERVICE_NAME


logger = get_logger(SERVICE_NAME)


def dump_document(document: dict[str, Any]) -> str:
    """Serialize a config document: 2-space indent, UTF-8, trailing newline."""
    return json.dumps(document, indent=2, ensure_ascii=False) + "\n"


def load_document(path: Path) -> dict[str, Any]:
    """Read the config document, substituting an empty object when unusable.

    A missing file, unreadable file, invalid JSON or a non-object top level
    all yield ``{}`` so the merge can rebuild the document.
    """
    try:
        document = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        logger.info("No config document, starting with empty config", path=str(path))
        return {}
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.warning("Could not parse config document, starting with empty config", path=str(path), error=str(e))
        return {}

    if not isinstance(document, dict):
        logger.warning(
            "Config document is not a JSON object, starting with empty config",
            path=str(path),
            found=type(document).__name__,
        )
        return {}

    return document


def _replace_atomically(path: Path, fill: Callable[[Path], None]) -> None:
    """Fill a temp file beside ``path``, sync it, then rename it over ``path``."""
    path.parent.mkdir(parents=True, exist_ok=True)
    temp_file = path.with_name(f".{path.name}.tmp")

    try:
        fill(temp_file)
        with open(temp_file, "rb+") as f:
            os.fsync(f.fileno())
        os.chmod(temp_file, 0o600)
        temp_file.replace(path)
    except OSError:
        if temp_file.exists():
            temp_file.unlink()
        raise


def write_document(path: Path, document: dict[str, Any]) -> None:
    """Write the config document atomically.

    The content goes to a temp file in the same directory, is flushed to
    disk, then renamed over the target, so readers never see a truncated
    file.

    Raises:
        OSError: If the document could not be written
    """
    _replace_atomically(path, lambda temp_file: temp_file.write_text(dump_document(document), encoding="utf-8"))


def copy_document(source: Path, path: Path) -> None:
    """Copy a document file into place atomically (see write_document).

    Raises:
        OSError: If the source cannot be read or the target written
    """
    _replace_atomically(path, lambda temp_file: shutil.copyfile(source, temp_file))
