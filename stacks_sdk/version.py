"""
Package version. ``version()`` appends ``git describe`` output when running
from a source checkout.
"""

from __future__ import annotations

import os
import subprocess
from dataclasses import dataclass
from typing import Optional

__version__ = "0.1.0"


@dataclass(frozen=True)
class VersionInfo:
    base: str
    git: Optional[str] = None

    def __str__(self) -> str:
        return self.base if not self.git else f"{self.base} ({self.git})"


def _find_checkout(start: str, max_depth: int = 4) -> Optional[str]:
    path = start
    for _ in range(max_depth):
        if os.path.isdir(os.path.join(path, ".git")):
            return path
        parent = os.path.dirname(path)
        if parent == path:
            return None
        path = parent
    return None


def _git_describe() -> Optional[str]:
    root = _find_checkout(os.path.dirname(os.path.abspath(__file__)))
    if root is None:
        return None
    try:
        out = subprocess.run(
            ["git", "describe", "--tags", "--dirty", "--always"],
            cwd=root,
            check=True,
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
            text=True,
            timeout=5,
        )
    except (OSError, subprocess.SubprocessError):
        return None
    return out.stdout.strip() or None


def version_info() -> VersionInfo:
    return VersionInfo(base=__version__, git=_git_describe())


def version() -> str:
    """E.g. ``'0.1.0'`` or ``'0.1.0 (v0.1.0-4-g1a2b3c4)'``."""
    return str(version_info())


__all__ = ["__version__", "VersionInfo", "version_info", "version"]
