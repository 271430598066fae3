"""Abstract base class for interpreter discovery mechanisms."""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, NamedTuple

if TYPE_CHECKING:
    from collections.abc import Mapping

    from ._info import InterpreterInfo


class Interpreter(NamedTuple):
    executable: Path
    info: InterpreterInfo


class Discover(ABC):
    """Discover and provide the requested interpreter."""

    def __init__(self, env: Mapping[str, str] | None = None) -> None:
        self._interpreter: Interpreter | None = None
        self._env = env if env is not None else os.environ

    @abstractmethod
    def run(self) -> Interpreter:
        """Discover an interpreter.

        :returns: the interpreter ready to use
        :raises InterpreterNotFound: if none of the candidates resolve

        """
        raise NotImplementedError

    @property
    def interpreter(self) -> Interpreter:
        """:returns: the interpreter as returned by :meth:`run`, cached"""
        if self._interpreter is None:
            self._interpreter = self.run()
        return self._interpreter


__all__ = [
    "Discover",
    "Interpreter",
]
