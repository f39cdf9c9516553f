"""
procfs.config
AUTHOR: carter-vin

Well-known /proc locations

- default root is /proc
- LSPROC_PROC_ROOT overrides the root (tests, containers with a bind-mounted host /proc)
- paths are resolved at call time, never at import time
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

PROC_ROOT = Path("/proc")
PROC_ROOT_ENV = "LSPROC_PROC_ROOT"

STAT_FILE = "stat"
DISKSTATS_FILE = "diskstats"
UPTIME_FILE = "uptime"


def proc_root() -> Path:
    """
    Resolve the proc root

    Precedence:
    1) LSPROC_PROC_ROOT env var (when non-empty)
    2) /proc
    """
    override = os.getenv(PROC_ROOT_ENV)
    if override:
        return Path(override)
    return PROC_ROOT


def proc_path(name: str, root: Optional[Path] = None) -> Path:
    if root is None:
        root = proc_root()
    return Path(root) / name
