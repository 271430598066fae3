from __future__ import annotations

import json
import os
import tempfile
from typing import TYPE_CHECKING

import pytest

from venvkit.info import IS_WIN
from venvkit.interpreter import DiskCache, InterpreterInfo

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path


@pytest.fixture
def cache(tmp_path_factory: pytest.TempPathFactory) -> DiskCache:
    return DiskCache(tmp_path_factory.mktemp("venvkit-cache"))


@pytest.fixture
def interpreter_info() -> InterpreterInfo:
    return InterpreterInfo(
        base_exec_prefix="/opt/python",
        base_prefix="/opt/python",
        major=3,
        minor=11,
        python_version="3.11.4.final.0",
    )


@pytest.fixture
def base_python(tmp_path: Path) -> Path:
    exe = tmp_path / "base" / "bin" / "python3.11"
    exe.parent.mkdir(parents=True)
    exe.write_text("", encoding="utf-8")
    return exe


@pytest.fixture
def fake_python(tmp_path: Path, interpreter_info: InterpreterInfo) -> Callable[..., Path]:
    """Create a shell script standing in for an interpreter that answers the interrogation with canned output."""
    if IS_WIN:
        pytest.skip("fake interpreters are shell scripts")
    counter = iter(range(1_000))

    def _create(
        out: str | None = None,
        err: str = "",
        code: int = 0,
        raw_out: str | None = None,
    ) -> Path:
        if out is None:
            out = json.dumps(interpreter_info._asdict())
        exe = tmp_path / "fake" / f"python-{next(counter)}"
        exe.parent.mkdir(parents=True, exist_ok=True)
        body = ["#!/bin/sh", "while read -r line; do :; done"]
        body.append(f"printf '%s' {_sh_quote(out)}" if raw_out is None else f"printf '{raw_out}'")
        if err:
            body.append(f"printf '%s' {_sh_quote(err)} >&2")
        body.append(f"exit {code}")
        exe.write_text("\n".join(body) + "\n", encoding="utf-8")
        exe.chmod(0o755)
        return exe

    return _create


def _sh_quote(value: str) -> str:
    return "'" + value.replace("'", "'\"'\"'") + "'"


@pytest.fixture(scope="session")
def fs_supports_symlink() -> bool:
    if not hasattr(os, "symlink"):
        return False
    with tempfile.TemporaryDirectory(prefix="TmP") as folder:
        try:
            os.symlink(os.path.join(folder, "target"), os.path.join(folder, "link"))
        except OSError:
            return False
    return True


@pytest.fixture
def _require_symlink(fs_supports_symlink: bool) -> None:
    if not fs_supports_symlink:
        pytest.skip("symlink is not supported")


@pytest.fixture
def clean_env() -> dict[str, str]:
    return {k: v for k, v in os.environ.items() if not k.startswith("VENVKIT_")}
