"""Run an interpreter with the interrogation script and parse what it reports."""

from __future__ import annotations

import copy
import json
import logging
import os
from pathlib import Path
from shlex import quote
from subprocess import PIPE, Popen
from typing import TYPE_CHECKING, NamedTuple

from venvkit.errors import ProbeFailed, ProbeOutputInvalid

from ._info import InterpreterInfo

if TYPE_CHECKING:
    from collections.abc import Mapping

LOGGER = logging.getLogger(__name__)

QUERY_SCRIPT = Path(__file__).parent / "_query.py"


class ProbeOutput(NamedTuple):
    code: int
    out: str
    err: str


def query_interpreter(exe: str, env: Mapping[str, str] | None = None) -> InterpreterInfo:
    """Spawn ``exe`` once and return its identity.

    :raises ProbeFailed: the interpreter exited with an error or wrote to stderr
    :raises ProbeOutputInvalid: stdout is not the expected JSON record

    """
    env = os.environ if env is None else env
    code, out, err = _run_subprocess(exe, env)
    # nothing legitimate writes to stderr during the query, if something does we want to know
    if code != 0 or err.strip():
        raise ProbeFailed(exe, code, out, err)
    try:
        return InterpreterInfo.from_dict(json.loads(out))
    except ValueError as exception:
        raise ProbeOutputInvalid(exe, out, err) from exception


def _run_subprocess(exe: str, env: Mapping[str, str]) -> ProbeOutput:
    cmd = [exe, "-"]
    # prevent sys.prefix from leaking into the child process - see https://bugs.python.org/issue22490
    env = dict(copy.copy(env))
    env.pop("__PYVENV_LAUNCHER__", None)
    LOGGER.debug("get interpreter info via cmd: %s", LogCmd(cmd))
    script = QUERY_SCRIPT.read_bytes()
    try:
        process = Popen(cmd, stdin=PIPE, stdout=PIPE, stderr=PIPE, env=env)  # noqa: S603
        raw_out, raw_err = process.communicate(input=script)
        code = process.returncode
    except OSError as os_error:
        return ProbeOutput(os_error.errno or 1, "", os_error.strerror or str(os_error))
    return ProbeOutput(code, _decode(raw_out, "stdout", exe), _decode(raw_err, "stderr", exe))


def _decode(raw: bytes, stream: str, exe: str) -> str:
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        LOGGER.error("the %s of the call to %s contains non-utf8 characters", stream, exe)  # noqa: TRY400
        return raw.decode("utf-8", errors="replace")


class LogCmd:
    def __init__(self, cmd: list[str], env: Mapping[str, str] | None = None) -> None:
        self.cmd = cmd
        self.env = env

    def __repr__(self) -> str:
        cmd_repr = " ".join(quote(str(c)) for c in self.cmd)
        if self.env is not None:
            cmd_repr = f"{cmd_repr} env of {self.env!r}"
        return cmd_repr


__all__ = [
    "QUERY_SCRIPT",
    "LogCmd",
    "ProbeOutput",
    "query_interpreter",
]
