"""Identity of a Python interpreter as reported by the interrogation script."""

from __future__ import annotations

from typing import Any, NamedTuple

_FIELD_TYPES: dict[str, type] = {
    "base_exec_prefix": str,
    "base_prefix": str,
    "major": int,
    "minor": int,
    "python_version": str,
}


class InterpreterInfo(NamedTuple):
    base_exec_prefix: str
    base_prefix: str
    major: int
    minor: int
    python_version: str

    @property
    def version_dir(self) -> str:
        """:returns: the version qualified library folder name, e.g. ``python3.11``"""
        return f"python{self.major}.{self.minor}"

    def to_dict(self) -> dict[str, Any]:
        return self._asdict()

    @classmethod
    def from_dict(cls, data: Any) -> InterpreterInfo:
        """Build from decoded JSON.

        :raises ValueError: if ``data`` is not an object with exactly the expected keys and types

        """
        if not isinstance(data, dict):
            msg = f"expected an object, got {type(data).__name__}"
            raise ValueError(msg)  # noqa: TRY004
        if set(data) != set(_FIELD_TYPES):
            msg = f"expected keys {sorted(_FIELD_TYPES)}, got {sorted(data)}"
            raise ValueError(msg)
        for key, of_type in _FIELD_TYPES.items():
            value = data[key]
            # bool is an int subclass, a version part is never a boolean
            if not isinstance(value, of_type) or isinstance(value, bool):
                msg = f"{key} must be {of_type.__name__}, got {value!r}"
                raise ValueError(msg)
        return cls(**data)


__all__ = [
    "InterpreterInfo",
]
