"""Lay out the directory tree, interpreter links and generated files of an environment."""

from __future__ import annotations

from .layout import VenvPaths, create_bare_venv

__all__ = [
    "VenvPaths",
    "create_bare_venv",
]
