"""Local cache of downloaded package archives, keyed by their upstream filename."""

from __future__ import annotations

import logging
import os
from contextlib import suppress
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import IO, TYPE_CHECKING

import requests

from venvkit.errors import DownloadFailed

if TYPE_CHECKING:
    from collections.abc import Callable

LOGGER = logging.getLogger(__name__)

CHUNK_SIZE = 1 << 16
ARCHIVE_MODE = 0o644


class ArchiveCache:
    """Download each archive at most once.

    The body is streamed into a temporary file next to the final location and renamed into place, so the cache never
    holds a partially written archive under its real name. Concurrent fetches of the same file are not coordinated:
    both download and the last rename wins.

    """

    def __init__(self, folder: Path, session_factory: Callable[[], requests.Session] = requests.Session) -> None:
        self.folder = folder
        self._session_factory = session_factory

    def path(self, filename: str) -> Path:
        return self.folder / filename

    def fetch(self, filename: str, url: str) -> Path:
        """:returns: the local path of ``filename``, downloading it from ``url`` when not cached yet"""
        cached = self.path(filename)
        if cached.is_file():
            LOGGER.info("using cached wheel at %s", cached)
            return cached

        LOGGER.info("downloading wheel from %s to %s", url, cached)
        try:
            self.folder.mkdir(parents=True, exist_ok=True)
        except OSError as exception:
            raise DownloadFailed(url, cached) from exception
        try:
            with NamedTemporaryFile(dir=self.folder, prefix=f".{filename}.", suffix=".tmp", delete=False) as tmp:
                tmp_path = Path(tmp.name)
                try:
                    self._download(url, tmp)
                except BaseException:
                    tmp.close()
                    with suppress(OSError):
                        tmp_path.unlink()
                    raise
            try:
                # temporary files are created owner only
                tmp_path.chmod(ARCHIVE_MODE)
                os.replace(tmp_path, cached)
            except OSError:
                with suppress(OSError):
                    tmp_path.unlink()
                raise
        except (OSError, requests.RequestException) as exception:
            raise DownloadFailed(url, cached) from exception
        return cached

    def _download(self, url: str, into: IO[bytes]) -> None:
        with self._session_factory() as session, session.get(url, stream=True) as response:
            response.raise_for_status()
            for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                into.write(chunk)


__all__ = [
    "ArchiveCache",
]
