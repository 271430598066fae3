"""Interpreter discovery, interrogation and the persistent cache of its results."""

from __future__ import annotations

from ._builtin import Builtin, get_interpreter
from ._cache import DiskCache, InterpreterInfoCache, NoOpCache
from ._cached_info import from_exe
from ._discover import Discover, Interpreter
from ._info import InterpreterInfo
from ._probe import query_interpreter

__all__ = [
    "Builtin",
    "Discover",
    "DiskCache",
    "Interpreter",
    "InterpreterInfo",
    "InterpreterInfoCache",
    "NoOpCache",
    "from_exe",
    "get_interpreter",
    "query_interpreter",
]
