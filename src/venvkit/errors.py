"""Errors raised while building an environment, each carrying the paths, urls or packages involved."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path


class VenvError(RuntimeError):
    """Base class for all errors raised while building an environment."""


class BuildFailed(VenvError):
    def __init__(self, root: str | Path) -> None:
        self.root = root
        super().__init__(f"failed to build environment at {root}")


class InvalidRoot(VenvError):
    def __init__(self, root: str | Path) -> None:
        self.root = root
        super().__init__(f"failed to canonicalize environment root {root}, does its parent directory exist?")


class FilesystemError(VenvError):
    def __init__(self, action: str, path: str | Path) -> None:
        self.action = action
        self.path = path
        super().__init__(f"failed to {action} {path}")


class SymlinkFailed(VenvError):
    def __init__(self, source: str | Path, link: str | Path) -> None:
        self.source = source
        self.link = link
        super().__init__(f"failed to create symlink, original: {source}, link: {link}")


class InterpreterNotFound(VenvError):
    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"could not find a python interpreter for {key!r}")


class ProbeFailed(VenvError):
    def __init__(self, exe: str, code: int, out: str, err: str) -> None:
        self.exe = exe
        self.code = code
        self.out = out
        self.err = err
        super().__init__(
            f"querying python at {exe} failed with code {code}:\n--- stdout:\n{out.strip()}\n--- stderr:\n{err.strip()}",
        )


class ProbeOutputInvalid(VenvError):
    def __init__(self, exe: str, out: str, err: str) -> None:
        self.exe = exe
        self.out = out
        self.err = err
        super().__init__(
            f"querying python at {exe} did not return the expected data:\n--- stdout:\n{out.strip()}"
            f"\n--- stderr:\n{err.strip()}",
        )


class CacheIOError(VenvError):
    def __init__(self, action: str, path: str | Path) -> None:
        self.action = action
        self.path = path
        super().__init__(f"failed to {action} {path}")


class CopyFailed(VenvError):
    def __init__(self, source: str | Path, destination: str | Path) -> None:
        self.source = source
        self.destination = destination
        super().__init__(f"failed to copy {source} to {destination}")


class EntryPointsMissing(VenvError):
    def __init__(self, package: str, path: str | Path) -> None:
        self.package = package
        self.path = path
        super().__init__(f"{package} should have an entry_points.txt at {path}")


class MalformedEntryPoint(VenvError):
    def __init__(self, package: str, key: str | None, value: str | None) -> None:
        self.package = package
        self.key = key
        self.value = value
        if key is None:
            msg = f"{package} entry_points.txt is invalid: {value}"
        else:
            msg = f"{package} entry_points.txt {key} has an invalid value {value!r}"
        super().__init__(msg)


class DownloadFailed(VenvError):
    def __init__(self, url: str, path: str | Path) -> None:
        self.url = url
        self.path = path
        super().__init__(f"failed to download {url} to {path}")


class InstallFailed(VenvError):
    def __init__(self, archive: str | Path, code: int, out: str, err: str) -> None:
        self.archive = archive
        self.code = code
        self.out = out
        self.err = err
        super().__init__(
            f"installing {archive} failed with code {code}:\n--- stdout:\n{out.strip()}\n--- stderr:\n{err.strip()}",
        )


__all__ = [
    "BuildFailed",
    "CacheIOError",
    "CopyFailed",
    "DownloadFailed",
    "EntryPointsMissing",
    "FilesystemError",
    "InstallFailed",
    "InterpreterNotFound",
    "InvalidRoot",
    "MalformedEntryPoint",
    "ProbeFailed",
    "ProbeOutputInvalid",
    "SymlinkFailed",
    "VenvError",
]
