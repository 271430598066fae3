"""Platform compatibility utilities."""

from __future__ import annotations

import sys

IS_WIN = sys.platform == "win32"


def bin_dir_name() -> str:
    return "Scripts" if IS_WIN else "bin"


__all__ = [
    "IS_WIN",
    "bin_dir_name",
]
