"""Acquire interpreter information, reusing a persisted result until the interpreter file changes.

Entries are keyed by the absolute interpreter path and validated against the interpreter's modification time, so
replacing or touching the interpreter forces a fresh probe. A corrupt entry is dropped and treated as a miss; every
other failure is reported to the caller.

"""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING

from venvkit.errors import CacheIOError

from . import _probe
from ._info import InterpreterInfo

if TYPE_CHECKING:
    from collections.abc import Mapping

    from ._cache import ContentStore, InterpreterInfoCache

LOGGER = logging.getLogger(__name__)


def from_exe(exe: str, cache: InterpreterInfoCache, env: Mapping[str, str] | None = None) -> InterpreterInfo:
    exe = os.path.abspath(exe)
    modified = modified_timestamp_millis(exe)
    store = cache.interpreter_info(exe)
    with store.locked():
        cached = _read_entry(store, exe, modified)
        if cached is not None:
            LOGGER.debug("using cached interpreter info for %s", exe)
            return cached
        info = _probe.query_interpreter(exe, env)
        store.write(
            {
                "interpreter_path": exe,
                "modified_timestamp_millis": modified,
                "interpreter_info": info.to_dict(),
            },
        )
    return info


def modified_timestamp_millis(exe: str) -> int:
    """:returns: the modification time of ``exe`` as whole milliseconds since the epoch"""
    try:
        stat = os.stat(exe)
    except OSError as exception:
        raise CacheIOError("read metadata of interpreter", exe) from exception
    return stat.st_mtime_ns // 1_000_000


def _read_entry(store: ContentStore, exe: str, modified: int) -> InterpreterInfo | None:
    data = store.read()
    if data is None:
        return None
    try:
        path, stamp = data["interpreter_path"], data["modified_timestamp_millis"]
        info = InterpreterInfo.from_dict(data["interpreter_info"])
    except (KeyError, ValueError) as exception:
        LOGGER.debug("removing malformed cache entry for %s (%r)", exe, exception)
        store.remove()
        return None
    if path != exe or stamp != modified:
        LOGGER.debug("cache entry for %s is stale (%s@%s != %s@%s)", exe, path, stamp, exe, modified)
        return None
    return info


__all__ = [
    "from_exe",
    "modified_timestamp_millis",
]
