"""Read ``console_scripts`` declarations and generate the launchers for them."""

from __future__ import annotations

import logging
import os
from configparser import ConfigParser, Error
from typing import TYPE_CHECKING, NamedTuple

from venvkit.errors import EntryPointsMissing, FilesystemError, MalformedEntryPoint
from venvkit.info import IS_WIN

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

LOGGER = logging.getLogger(__name__)

LAUNCHER_MODE = 0o755

LAUNCHER_TEMPLATE = """#!{python}
# -*- coding: utf-8 -*-
import re
import sys
from {module} import {attr}
if __name__ == '__main__':
    sys.argv[0] = re.sub(r'(-script\\.pyw|\\.exe)?$', '', sys.argv[0])
    sys.exit({attr}())
"""


class EntryPoint(NamedTuple):
    name: str
    module: str
    attr: str


def read_console_scripts(package: str, dist_info: Path) -> list[EntryPoint]:
    """:returns: the console scripts declared in ``<dist_info>/entry_points.txt``"""
    entry_points_txt = dist_info / "entry_points.txt"
    try:
        text = entry_points_txt.read_text(encoding="utf-8")
    except OSError as exception:
        raise EntryPointsMissing(package, entry_points_txt) from exception
    return parse_console_scripts(package, text)


def parse_console_scripts(package: str, text: str) -> list[EntryPoint]:
    parser = ConfigParser(delimiters=("=",), allow_no_value=True, interpolation=None)
    parser.optionxform = str  # script names are case-sensitive
    try:
        parser.read_string(text)
    except Error as exception:
        raise MalformedEntryPoint(package, None, str(exception)) from exception
    if not parser.has_section("console_scripts"):
        return []
    result = []
    for key, value in parser.items("console_scripts"):
        if value is None or ":" not in value:
            raise MalformedEntryPoint(package, key, value)
        module, attr = value.split(":", maxsplit=1)
        result.append(EntryPoint(key, module.strip(), attr.strip()))
    return result


def launcher_script(python: Path, module: str, attr: str) -> str:
    return LAUNCHER_TEMPLATE.format(python=python, module=module, attr=attr)


def write_launchers(bin_dir: Path, python: Path, entry_points: Iterable[EntryPoint]) -> list[Path]:
    written = []
    for entry_point in entry_points:
        launcher = bin_dir / entry_point.name
        try:
            launcher.write_text(launcher_script(python, entry_point.module, entry_point.attr), encoding="utf-8")
            if not IS_WIN:
                os.chmod(launcher, LAUNCHER_MODE)
        except OSError as exception:
            raise FilesystemError("write launcher", launcher) from exception
        LOGGER.debug("generated launcher %s for %s:%s", launcher, entry_point.module, entry_point.attr)
        written.append(launcher)
    return written


__all__ = [
    "EntryPoint",
    "launcher_script",
    "parse_console_scripts",
    "read_console_scripts",
    "write_launchers",
]
