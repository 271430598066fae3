from __future__ import annotations

import logging
import os
from argparse import ArgumentParser
from typing import TYPE_CHECKING

from venvkit.config import SEEDERS, AppDirs, env_flag, env_key, env_value
from venvkit.create import create_bare_venv
from venvkit.errors import BuildFailed, VenvError
from venvkit.interpreter import Builtin, DiskCache, NoOpCache
from venvkit.report import MAX_LEVEL, setup_report
from venvkit.seed import ArchiveCache, LocalUnpacked, RemoteArchive, install_base_packages
from venvkit.version import __version__

if TYPE_CHECKING:
    from argparse import Namespace
    from collections.abc import Mapping, Sequence

    from venvkit.create import VenvPaths
    from venvkit.interpreter import InterpreterInfo, InterpreterInfoCache
    from venvkit.seed import PackageSource

LOGGER = logging.getLogger(__name__)

DEFAULT_ROOT = ".venv"


def create_venv(
    root: str | os.PathLike[str],
    base_python: str | os.PathLike[str],
    info: InterpreterInfo,
    source: PackageSource | None = None,
    *,
    bare: bool = False,
) -> VenvPaths:
    """Create a virtual environment and, unless ``bare``, seed it with the bootstrap packages."""
    paths = create_bare_venv(root, base_python, info)
    if not bare:
        if source is None:
            msg = "a package source is required unless the environment is bare"
            raise ValueError(msg)
        install_base_packages(paths, info, source)
    return paths


def make_source(seeder: str, app_dirs: AppDirs) -> PackageSource:
    if seeder == "app-data":
        return LocalUnpacked(app_dirs.unpacked_store)
    if seeder == "download":
        return RemoteArchive(ArchiveCache(app_dirs.wheels_dir))
    msg = f"seeder {seeder!r} is not available, choose one of {', '.join(SEEDERS)}"
    raise ValueError(msg)


def make_cache(app_dirs: AppDirs, *, no_cache: bool) -> InterpreterInfoCache:
    return NoOpCache() if no_cache else DiskCache(app_dirs.cache_dir)


def build_parser(env: Mapping[str, str]) -> ArgumentParser:
    parser = ArgumentParser(prog="venvkit", description="create a python virtual environment")
    parser.add_argument(
        "dest",
        nargs="?",
        default=DEFAULT_ROOT,
        help="directory to create the virtual environment at (default: %(default)s)",
    )
    parser.add_argument(
        "-p",
        "--python",
        action="append",
        default=None,
        help="interpreter to base the environment on: a path, an executable name or a version such as 3.11; "
        f"may be given multiple times, the first one found is used (default: ${env_key('python')} or this python)",
    )
    parser.add_argument(
        "--bare",
        action="store_true",
        default=env_flag("bare", env),
        help="do not install the bootstrap packages (pip, setuptools, wheel)",
    )
    parser.add_argument(
        "--seeder",
        choices=SEEDERS,
        default=env_value("seeder", env) or SEEDERS[0],
        help="where to take the bootstrap packages from (default: %(default)s)",
    )
    parser.add_argument(
        "--no-cache",
        action="store_true",
        default=env_flag("no_cache", env),
        help="do not reuse or persist interpreter information",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="count", default=2, help="increase verbosity")
    verbosity.add_argument("-q", "--quiet", action="count", default=0, help="decrease verbosity")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def parse_args(args: Sequence[str], env: Mapping[str, str]) -> Namespace:
    options = build_parser(env).parse_args(args)
    if options.python is None:
        from_env = env_value("python", env)
        options.python = [from_env] if from_env else None
    options.verbosity = min(max(options.verbose - options.quiet, 0), MAX_LEVEL)
    return options


def cli_run(
    args: Sequence[str],
    env: Mapping[str, str] | None = None,
    *,
    setup_logging: bool = True,
    app_dirs: AppDirs | None = None,
) -> VenvPaths:
    """Create a virtual environment given some command line interface arguments.

    :raises BuildFailed: wrapping the error that aborted the build

    """
    env = os.environ if env is None else env
    options = parse_args(args, env)
    if setup_logging:
        setup_report(options.verbosity, env_value("log_level", env))
    app_dirs = AppDirs.from_env(env) if app_dirs is None else app_dirs
    LOGGER.debug("using %r", app_dirs)
    try:
        discover = Builtin(make_cache(app_dirs, no_cache=options.no_cache), options.python, env)
        interpreter = discover.interpreter
        source = None if options.bare else make_source(options.seeder, app_dirs)
        return create_venv(options.dest, interpreter.executable, interpreter.info, source, bare=options.bare)
    except VenvError as exception:
        raise BuildFailed(options.dest) from exception


__all__ = [
    "DEFAULT_ROOT",
    "build_parser",
    "cli_run",
    "create_venv",
    "make_cache",
    "make_source",
]
