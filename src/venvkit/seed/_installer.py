"""Wheel installation capability used when bootstrap packages are seeded from downloaded archives."""

from __future__ import annotations

import logging
import os
from subprocess import PIPE, Popen
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from venvkit.errors import InstallFailed
from venvkit.interpreter._probe import LogCmd

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path

LOGGER = logging.getLogger(__name__)


@runtime_checkable
class WheelInstaller(Protocol):
    """Unpack a wheel archive into an environment."""

    def install(self, archive: Path, root: Path, interpreter: Path, major: int, minor: int) -> None: ...


class PipWheelInstaller:
    """Install with the environment's own interpreter, importing pip straight from its wheel.

    A wheel is a valid ``sys.path`` entry, so pip can install the bootstrap packages (itself included) into an
    environment that has no pip yet.

    """

    def __init__(self, pip_wheel: Path, env: Mapping[str, str] | None = None) -> None:
        self.pip_wheel = pip_wheel
        self._env = os.environ if env is None else env

    def install(self, archive: Path, root: Path, interpreter: Path, major: int, minor: int) -> None:
        cmd = [
            str(interpreter),
            "-m",
            "pip",
            "install",
            "--no-deps",
            "--no-index",
            "--no-cache-dir",
            "--disable-pip-version-check",
            "--quiet",
            str(archive),
        ]
        env = dict(self._env)
        env["PYTHONPATH"] = str(self.pip_wheel)
        env.pop("PIP_REQUIRE_VIRTUALENV", None)
        env["VIRTUAL_ENV"] = str(root)
        LOGGER.debug("install %s into python %s.%s via cmd: %s", archive.name, major, minor, LogCmd(cmd))
        try:
            process = Popen(cmd, stdout=PIPE, stderr=PIPE, env=env, encoding="utf-8", errors="replace")  # noqa: S603
            out, err = process.communicate()
            code = process.returncode
        except OSError as os_error:
            out, err, code = "", os_error.strerror or str(os_error), os_error.errno or 1
        if code != 0:
            raise InstallFailed(archive, code, out, err)


__all__ = [
    "PipWheelInstaller",
    "WheelInstaller",
]
