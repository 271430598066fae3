from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator

LEVELS = {
    0: logging.CRITICAL,
    1: logging.ERROR,
    2: logging.WARNING,
    3: logging.INFO,
    4: logging.DEBUG,
    5: logging.NOTSET,
}

MAX_LEVEL = max(LEVELS.keys())
LOGGER = logging.getLogger()


def setup_report(verbosity: int, level_name: str | None = None) -> int:
    _clean_handlers(LOGGER)
    verbosity = max(min(verbosity, MAX_LEVEL), 0)
    level = LEVELS[verbosity]
    if level_name is not None:
        named = logging.getLevelName(level_name.upper())
        if isinstance(named, int):
            level = named
    msg_format = "%(message)s"
    if level <= logging.DEBUG:
        msg_format = f"%(relativeCreated)d {msg_format} [%(levelname)s %(module)s:%(lineno)d]"
    formatter = logging.Formatter(msg_format)
    stream_handler = logging.StreamHandler(stream=sys.stderr)
    stream_handler.setLevel(level)
    LOGGER.setLevel(logging.NOTSET)
    stream_handler.setFormatter(formatter)
    LOGGER.addHandler(stream_handler)
    LOGGER.debug("setup logging to %s", logging.getLevelName(level))
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("filelock").setLevel(logging.WARNING)
    return verbosity


def _clean_handlers(log: logging.Logger) -> None:
    for log_handler in list(log.handlers):  # remove handlers of libraries
        log.removeHandler(log_handler)


def error_chain(exception: BaseException) -> Iterator[str]:
    """:returns: the messages of ``exception`` and its explicit causes, outermost first"""
    seen: set[int] = set()
    current: BaseException | None = exception
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield str(current) or type(current).__name__
        current = current.__cause__


def report_failure(exception: BaseException, header: str = "venvkit failed") -> None:
    lines = [header, *(f"  caused by: {message}" for message in error_chain(exception))]
    sys.stderr.write("\n".join(lines) + "\n")


__all__ = [
    "LEVELS",
    "MAX_LEVEL",
    "error_chain",
    "report_failure",
    "setup_report",
]
