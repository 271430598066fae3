"""Seed a freshly laid out environment with the bootstrap packages."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ._archive_cache import ArchiveCache
from ._entry_points import EntryPoint, launcher_script, parse_console_scripts, read_console_scripts, write_launchers
from ._installer import PipWheelInstaller, WheelInstaller
from ._packages import BOOTSTRAP_PACKAGES, BootstrapPackage
from ._source import LocalUnpacked, PackageSource, RemoteArchive, copy_dir_all

if TYPE_CHECKING:
    from collections.abc import Sequence

    from venvkit.create import VenvPaths
    from venvkit.interpreter import InterpreterInfo

LOGGER = logging.getLogger(__name__)


def install_base_packages(
    paths: VenvPaths,
    info: InterpreterInfo,
    source: PackageSource,
    packages: Sequence[BootstrapPackage] = BOOTSTRAP_PACKAGES,
) -> None:
    LOGGER.info("seed %s via %r", ", ".join(str(p) for p in packages), source)
    source.materialize(packages, paths, info)


__all__ = [
    "BOOTSTRAP_PACKAGES",
    "ArchiveCache",
    "BootstrapPackage",
    "EntryPoint",
    "LocalUnpacked",
    "PackageSource",
    "PipWheelInstaller",
    "RemoteArchive",
    "WheelInstaller",
    "copy_dir_all",
    "install_base_packages",
    "launcher_script",
    "parse_console_scripts",
    "read_console_scripts",
    "write_launchers",
]
