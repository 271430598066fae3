"""Write all the files that belong to a virtual environment, without any packages installed."""

from __future__ import annotations

import logging
import os
import shutil
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING, NamedTuple

from venvkit.errors import FilesystemError, InvalidRoot, SymlinkFailed
from venvkit.info import bin_dir_name
from venvkit.version import __version__

if TYPE_CHECKING:
    from collections.abc import Generator, Iterable

    from venvkit.interpreter import InterpreterInfo

LOGGER = logging.getLogger(__name__)

HERE = Path(__file__).parent
ACTIVATION_DIR = HERE / "activation"
ACTIVATE_TEMPLATES = (
    "activate",
    "activate.csh",
    "activate.fish",
    "activate.nu",
    "activate.ps1",
    "activate_this.py",
)
VIRTUALENV_PATCH = HERE / "_virtualenv.py"

ENV_DIR_KEY = "{{ VIRTUAL_ENV_DIR }}"
SITE_PACKAGES_KEY = "{{ RELATIVE_SITE_PACKAGES }}"


class VenvPaths(NamedTuple):
    """Absolute paths of a virtual environment."""

    #: the location of the environment, e.g. ``.venv``
    root: Path
    #: the interpreter inside the environment, on POSIX ``.venv/bin/python``
    interpreter: Path
    #: the directory holding the scripts, on POSIX ``.venv/bin``
    bin_dir: Path
    #: where packages get installed, e.g. ``.venv/lib/python3.11/site-packages``
    site_packages: Path


def create_bare_venv(
    root: str | os.PathLike[str],
    base_python: str | os.PathLike[str],
    info: InterpreterInfo,
) -> VenvPaths:
    """Build a fresh environment at ``root``, replacing whatever was there.

    :param root: where to create the environment, its parent directory must exist
    :param base_python: the interpreter the environment links to
    :param info: the identity of ``base_python``
    :raises InvalidRoot: ``root`` cannot be resolved
    :raises SymlinkFailed: an interpreter link could not be created
    :raises FilesystemError: any other filesystem operation failed

    """
    location = _canonicalize(root)
    base_python = Path(os.path.abspath(base_python))
    if base_python.parent == base_python:
        raise FilesystemError("determine parent directory of interpreter", base_python)
    LOGGER.info("create virtual environment at %s", location)

    with _fs("remove existing environment", location):
        if location.is_symlink() or location.is_file():
            location.unlink()
        elif location.exists():
            shutil.rmtree(location)
    with _fs("create environment directory", location):
        location.mkdir(parents=True)

    bin_dir = location / bin_dir_name()
    with _fs("create binaries directory", bin_dir):
        bin_dir.mkdir()

    venv_python = bin_dir / "python"
    _symlink(base_python, venv_python)
    # the aliases point at the first link so redirecting it redirects all of them
    _symlink("python", bin_dir / f"python{info.major}")
    _symlink("python", bin_dir / f"python{info.major}.{info.minor}")

    relative_site_packages = f"../lib/{info.version_dir}/site-packages"
    for name in ACTIVATE_TEMPLATES:
        template = _read_text(ACTIVATION_DIR / name)
        activator = template.replace(ENV_DIR_KEY, str(location)).replace(SITE_PACKAGES_KEY, relative_site_packages)
        _write_text(bin_dir / name, activator)

    _write_text(location / ".gitignore", "*")

    pyvenv_cfg = (
        ("home", str(base_python.parent)),
        ("implementation", "CPython"),
        ("version_info", info.python_version),
        ("venvkit", __version__),
        ("include-system-site-packages", "false"),
        ("base-prefix", info.base_prefix),
        ("base-exec-prefix", info.base_exec_prefix),
        ("base-executable", str(base_python)),
    )
    _write_text(location / "pyvenv.cfg", render_cfg(pyvenv_cfg))

    site_packages = location / "lib" / info.version_dir / "site-packages"
    with _fs("create site-packages directory", site_packages):
        site_packages.mkdir(parents=True)
    _write_text(site_packages / "_virtualenv.py", _read_text(VIRTUALENV_PATCH))
    _write_text(site_packages / "_virtualenv.pth", "import _virtualenv")

    return VenvPaths(root=location, interpreter=venv_python, bin_dir=bin_dir, site_packages=site_packages)


def render_cfg(data: Iterable[tuple[str, str]]) -> str:
    """Very basic ``.cfg`` writer -- one ``key = value`` line per entry, in order, nothing quoted."""
    return "".join(f"{key} = {value}\n" for key, value in data)


def _canonicalize(root: str | os.PathLike[str]) -> Path:
    location = Path(root).resolve()
    if not location.parent.is_dir() or location == location.parent:
        raise InvalidRoot(root)
    return location


def _symlink(source: str | Path, link: Path) -> None:
    try:
        link.symlink_to(source)
    except OSError as exception:
        raise SymlinkFailed(source, link) from exception
    LOGGER.debug("symlink %s -> %s", link, source)


def _read_text(path: Path) -> str:
    with _fs("read", path):
        return path.read_text(encoding="utf-8")


def _write_text(path: Path, content: str) -> None:
    with _fs("write", path):
        path.write_text(content, encoding="utf-8")
    LOGGER.debug("wrote %s", path)


@contextmanager
def _fs(action: str, path: Path) -> Generator[None]:
    try:
        yield
    except OSError as exception:
        raise FilesystemError(action, path) from exception


__all__ = [
    "ACTIVATE_TEMPLATES",
    "VenvPaths",
    "create_bare_venv",
    "render_cfg",
]
