#!/usr/bin/env python3
"""
Moltbot Container Startup

Mounts the R2 bucket, redirects gateway state into it, reconciles the
gateway config with the environment and execs `clawdbot gateway`.

Converted from start-moltbot.sh for better maintainability.
"""

import sys
from pathlib import Path


# Add shared modules to path (relative to moltbot-container directory)
_SCRIPT_DIR = Path(__file__).parent.resolve()
_SHARED_DIR = _SCRIPT_DIR.parent / "shared"
for _path in (_SHARED_DIR, _SCRIPT_DIR):
    if _path.exists() and str(_path) not in sys.path:
        sys.path.insert(0, str(_path))

from moltbot_lib.cli import main  # noqa: E402


if __name__ == "__main__":
    sys.exit(main())
