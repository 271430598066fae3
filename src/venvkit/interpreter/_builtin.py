from __future__ import annotations

import logging
import os
import re
import sys
from contextlib import suppress
from pathlib import Path
from typing import TYPE_CHECKING

from venvkit.errors import InterpreterNotFound
from venvkit.info import IS_WIN

from ._cached_info import from_exe
from ._discover import Discover, Interpreter

if TYPE_CHECKING:
    from collections.abc import Generator, Mapping, Sequence

    from ._cache import InterpreterInfoCache

LOGGER = logging.getLogger(__name__)

_VERSION = re.compile(r"\d+(\.\d+)?")


class Builtin(Discover):
    python_spec: Sequence[str]
    cache: InterpreterInfoCache

    def __init__(
        self,
        cache: InterpreterInfoCache,
        python_spec: Sequence[str] | None = None,
        env: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(env=env)
        self.python_spec = python_spec or [sys.executable]
        self.cache = cache

    def run(self) -> Interpreter:
        for python_spec in self.python_spec:
            try:
                return get_interpreter(python_spec, self.cache, self._env)
            except InterpreterNotFound:
                LOGGER.debug("no interpreter for %r, trying next", python_spec)
        raise InterpreterNotFound(", ".join(self.python_spec))

    def __repr__(self) -> str:
        spec = self.python_spec[0] if len(self.python_spec) == 1 else self.python_spec
        return f"{self.__class__.__name__} discover of python_spec={spec!r}"


def get_interpreter(key: str, cache: InterpreterInfoCache, env: Mapping[str, str] | None = None) -> Interpreter:
    """Resolve ``key`` (a path, an executable name or a version like ``3.11``) and query it through the cache."""
    env = os.environ if env is None else env
    exe = find_executable(key, env)
    LOGGER.info("found interpreter for %r at %s", key, exe)
    return Interpreter(exe, from_exe(str(exe), cache, env))


def find_executable(key: str, env: Mapping[str, str]) -> Path:
    if os.path.isabs(key) or any(sep in key for sep in (os.sep, os.altsep) if sep):
        try:
            os.lstat(key)
        except OSError:
            raise InterpreterNotFound(key) from None
        return Path(os.path.abspath(key))

    name = f"python{key}" if _VERSION.fullmatch(key) else key
    if IS_WIN and not name.lower().endswith(".exe"):
        name = f"{name}.exe"
    for pos, path in enumerate(get_paths(env)):
        LOGGER.debug("discover PATH[%d]=%s", pos, path)
        candidate = path / name
        if candidate.is_file() and os.access(candidate, os.X_OK):
            return candidate.absolute()
    raise InterpreterNotFound(key)


def get_paths(env: Mapping[str, str]) -> Generator[Path, None, None]:
    path = env.get("PATH", None)
    if path is None:
        try:
            path = os.confstr("CS_PATH")
        except (AttributeError, ValueError):
            path = os.defpath
    if path:
        for p in map(Path, path.split(os.pathsep)):
            with suppress(OSError):
                if p.is_dir() and next(p.iterdir(), None):
                    yield p


__all__ = [
    "Builtin",
    "find_executable",
    "get_interpreter",
    "get_paths",
]
