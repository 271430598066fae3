"""Where the unpacked contents of the bootstrap packages come from."""

from __future__ import annotations

import logging
import shutil
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from venvkit.errors import CopyFailed, VenvError

from ._entry_points import read_console_scripts, write_launchers
from ._installer import PipWheelInstaller

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from venvkit.create import VenvPaths
    from venvkit.interpreter import InterpreterInfo

    from ._archive_cache import ArchiveCache
    from ._installer import WheelInstaller
    from ._packages import BootstrapPackage

LOGGER = logging.getLogger(__name__)


class PackageSource(ABC):
    """Materialize bootstrap packages into an environment's site-packages and binaries directory."""

    @abstractmethod
    def materialize(self, packages: Sequence[BootstrapPackage], paths: VenvPaths, info: InterpreterInfo) -> None:
        raise NotImplementedError


class LocalUnpacked(PackageSource):
    """Copy already unpacked wheels from a local store, then generate the console script launchers."""

    def __init__(self, store: Path) -> None:
        self.store = store

    def materialize(self, packages: Sequence[BootstrapPackage], paths: VenvPaths, info: InterpreterInfo) -> None:  # noqa: ARG002
        for package in packages:
            unpacked = self.store / package.unpacked_dir_name
            LOGGER.debug("installing %s by copying from %s", package.name, unpacked)
            copy_dir_all(unpacked, paths.site_packages)
            entry_points = read_console_scripts(package.name, paths.site_packages / package.dist_info)
            write_launchers(paths.bin_dir, paths.interpreter, entry_points)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(store={self.store})"


class RemoteArchive(PackageSource):
    """Ensure the archives are downloaded, then delegate unpacking to a wheel installer."""

    def __init__(self, archive_cache: ArchiveCache, installer: WheelInstaller | None = None) -> None:
        self.archive_cache = archive_cache
        self.installer = installer

    def materialize(self, packages: Sequence[BootstrapPackage], paths: VenvPaths, info: InterpreterInfo) -> None:
        archives = [(package, self.archive_cache.fetch(package.filename, package.url)) for package in packages]
        installer = self.installer if self.installer is not None else self._pip_installer(archives)
        for package, archive in archives:
            LOGGER.debug("installing %s from %s", package.name, archive)
            installer.install(archive, paths.root, paths.interpreter, info.major, info.minor)

    @staticmethod
    def _pip_installer(archives: Sequence[tuple[BootstrapPackage, Path]]) -> WheelInstaller:
        for package, archive in archives:
            if package.name == "pip":
                return PipWheelInstaller(archive)
        msg = "no wheel installer given and pip is not one of the packages to install"
        raise VenvError(msg)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(cache={self.archive_cache.folder})"


def copy_dir_all(src: Path, dst: Path) -> None:
    """Recreate the directory tree of ``src`` under ``dst`` and copy the regular files byte for byte.

    Stops at the first failing entry.

    """
    try:
        _copy_tree(src, dst)
    except OSError as exception:
        raise CopyFailed(src, dst) from exception


def _copy_tree(src: Path, dst: Path) -> None:
    entries = sorted(src.iterdir())
    dst.mkdir(parents=True, exist_ok=True)
    for entry in entries:
        target = dst / entry.name
        if entry.is_dir():
            _copy_tree(entry, target)
        else:
            shutil.copyfile(entry, target)


__all__ = [
    "LocalUnpacked",
    "PackageSource",
    "RemoteArchive",
    "copy_dir_all",
]
