"""Cache Protocol and built-in implementations for interpreter information."""

from __future__ import annotations

import json
import logging
from contextlib import contextmanager, suppress
from hashlib import sha256
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from venvkit.errors import CacheIOError

if TYPE_CHECKING:
    from collections.abc import Generator
    from pathlib import Path

LOGGER = logging.getLogger(__name__)


@runtime_checkable
class ContentStore(Protocol):
    """A store for reading and writing cached content."""

    def exists(self) -> bool: ...

    def read(self) -> dict | None: ...

    def write(self, content: dict) -> None: ...

    def remove(self) -> None: ...

    @contextmanager
    def locked(self) -> Generator[None]: ...


@runtime_checkable
class InterpreterInfoCache(Protocol):
    """Cache interface for interpreter information."""

    def interpreter_info(self, path: str) -> ContentStore: ...

    def clear(self) -> None: ...


class DiskContentStore:
    """JSON file-based content store with file locking."""

    def __init__(self, folder: Path, key: str) -> None:
        self._folder = folder
        self._key = key

    @property
    def file(self) -> Path:
        return self._folder / f"{self._key}.json"

    @property
    def lock_file(self) -> Path:
        return self._folder / f"{self._key}.lock"

    def exists(self) -> bool:
        return self.file.exists()

    def read(self) -> dict | None:
        """:returns: the stored object, ``None`` when missing or broken (a broken file is removed)"""
        if not self.file.exists():
            return None
        try:
            data = json.loads(self.file.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exception:
            LOGGER.debug("removing broken cache entry %s (%s)", self.file, exception)
            self._remove_broken(exception)
            return None
        if not isinstance(data, dict):
            LOGGER.debug("removing broken cache entry %s (not an object)", self.file)
            self._remove_broken(None)
            return None
        LOGGER.debug("got interpreter info from %s", self.file)
        return data

    def _remove_broken(self, cause: Exception | None) -> None:
        try:
            self.file.unlink()
        except OSError as exception:
            LOGGER.warning(
                "failed to remove broken cache file at %s: %s (original error: %s)", self.file, exception, cause
            )

    def write(self, content: dict) -> None:
        try:
            self._folder.mkdir(parents=True, exist_ok=True)
        except OSError as exception:
            raise CacheIOError("create cache dir", self._folder) from exception
        try:
            self.file.write_text(json.dumps(content, sort_keys=True, indent=2), encoding="utf-8")
        except OSError as exception:
            raise CacheIOError("write cache file", self.file) from exception
        LOGGER.debug("wrote interpreter info at %s", self.file)

    def remove(self) -> None:
        with suppress(OSError):
            self.file.unlink()
        LOGGER.debug("removed interpreter info at %s", self.file)

    @contextmanager
    def locked(self) -> Generator[None]:
        from filelock import FileLock  # noqa: PLC0415

        lock_path = self.lock_file
        try:
            lock_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exception:
            raise CacheIOError("create cache dir", self._folder) from exception
        lock = FileLock(str(lock_path))
        try:
            lock.acquire()
        except OSError as exception:
            raise CacheIOError("lock cache entry", lock_path) from exception
        try:
            yield
        finally:
            lock.release()


class DiskCache:
    """File-system based interpreter info cache.

    Layout: ``<root>/interpreter_info/<sha256(str(path))>.json``. The full path is stored inside each entry and
    compared on read, so two paths sharing a hash never share an entry.

    """

    def __init__(self, root: Path) -> None:
        self._root = root

    @property
    def folder(self) -> Path:
        return self._root / "interpreter_info"

    def interpreter_info(self, path: str) -> DiskContentStore:
        key = sha256(str(path).encode("utf-8")).hexdigest()
        return DiskContentStore(self.folder, key)

    def clear(self) -> None:
        folder = self.folder
        if folder.exists():
            for f in folder.iterdir():
                if f.suffix == ".json":
                    with suppress(OSError):
                        f.unlink()


class NoOpContentStore:
    """Content store that does nothing."""

    def exists(self) -> bool:
        return False

    def read(self) -> dict | None:
        return None

    def write(self, content: dict) -> None:
        pass

    def remove(self) -> None:
        pass

    @contextmanager
    def locked(self) -> Generator[None]:
        yield


class NoOpCache:
    """Cache that does nothing -- used when caching is disabled."""

    def interpreter_info(self, _path: str) -> NoOpContentStore:
        return NoOpContentStore()

    def clear(self) -> None:
        pass


__all__ = [
    "ContentStore",
    "DiskCache",
    "DiskContentStore",
    "InterpreterInfoCache",
    "NoOpCache",
    "NoOpContentStore",
]
