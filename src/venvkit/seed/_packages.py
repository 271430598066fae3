from __future__ import annotations

from typing import NamedTuple

WHEEL_TAG = "py3-none-any"
PYPI_FILES = "https://files.pythonhosted.org/packages"


class BootstrapPackage(NamedTuple):
    name: str
    version: str

    @property
    def filename(self) -> str:
        return f"{self.name}-{self.version}-{WHEEL_TAG}.whl"

    @property
    def url(self) -> str:
        python_tag = WHEEL_TAG.split("-", maxsplit=1)[0]
        return f"{PYPI_FILES}/{python_tag}/{self.name[0]}/{self.name}/{self.filename}"

    @property
    def unpacked_dir_name(self) -> str:
        """:returns: the folder name of the unpacked wheel inside a local store"""
        return f"{self.name}-{self.version}-{WHEEL_TAG}"

    @property
    def dist_info(self) -> str:
        return f"{self.name}-{self.version}.dist-info"

    def __str__(self) -> str:
        return f"{self.name}=={self.version}"


BOOTSTRAP_PACKAGES: tuple[BootstrapPackage, ...] = (
    BootstrapPackage("pip", "23.2.1"),
    BootstrapPackage("setuptools", "68.2.0"),
    BootstrapPackage("wheel", "0.41.2"),
)

__all__ = [
    "BOOTSTRAP_PACKAGES",
    "WHEEL_TAG",
    "BootstrapPackage",
]
