"""Process wide settings, resolved once from the environment and passed explicitly to the components."""

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING, NamedTuple

from platformdirs import user_cache_path, user_data_path

if TYPE_CHECKING:
    from collections.abc import Mapping

APP_NAME = "venvkit"
ENV_PREFIX = "VENVKIT_"

#: where virtualenv keeps the unpacked wheels it copies into new environments
APP_DATA_IMAGE = Path("wheel", "3.11", "image", "1", "CopyPipInstall")

SEEDERS = ("download", "app-data")


class AppDirs(NamedTuple):
    cache_dir: Path
    app_data_dir: Path

    @property
    def wheels_dir(self) -> Path:
        return self.cache_dir / "wheels"

    @property
    def unpacked_store(self) -> Path:
        return self.app_data_dir / APP_DATA_IMAGE

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> AppDirs:
        env = os.environ if env is None else env
        if cache_dir := env_value("cache_dir", env):
            cache = Path(cache_dir).expanduser()
        else:
            cache = user_cache_path(APP_NAME)
        if app_data := env_value("app_data", env):
            data = Path(app_data).expanduser()
        else:
            data = user_data_path("virtualenv")
        return cls(cache_dir=cache, app_data_dir=data)


def env_key(name: str) -> str:
    return f"{ENV_PREFIX}{name.upper()}"


def env_value(name: str, env: Mapping[str, str] | None = None) -> str | None:
    """:returns: the value of ``VENVKIT_<NAME>``, ``None`` when not set or empty"""
    env = os.environ if env is None else env
    return env.get(env_key(name)) or None


def env_flag(name: str, env: Mapping[str, str] | None = None) -> bool:
    value = env_value(name, env)
    if value is None:
        return False
    return value.strip().lower() in {"1", "true", "yes", "on"}


__all__ = [
    "APP_NAME",
    "SEEDERS",
    "AppDirs",
    "env_flag",
    "env_key",
    "env_value",
]
