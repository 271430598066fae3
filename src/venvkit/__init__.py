from __future__ import annotations

from .create import VenvPaths, create_bare_venv
from .interpreter import InterpreterInfo, from_exe
from .run import cli_run, create_venv
from .version import __version__

__all__ = [
    "InterpreterInfo",
    "VenvPaths",
    "__version__",
    "cli_run",
    "create_bare_venv",
    "create_venv",
    "from_exe",
]
