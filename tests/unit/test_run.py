from __future__ import annotations

import logging
import os

import pytest

from venvkit.__main__ import run_with_catch
from venvkit.config import AppDirs, env_flag
from venvkit.errors import BuildFailed, InvalidRoot, VenvError
from venvkit.interpreter import DiskCache, NoOpCache
from venvkit.report import error_chain, report_failure, setup_report
from venvkit.run import cli_run, create_venv, make_cache, make_source, parse_args
from venvkit.seed import ArchiveCache, LocalUnpacked, RemoteArchive
from venvkit.version import __version__


@pytest.fixture
def app_dirs(tmp_path):
    return AppDirs(cache_dir=tmp_path / "cache", app_data_dir=tmp_path / "data")


def test_parse_defaults(clean_env):
    options = parse_args([], clean_env)
    assert options.dest == ".venv"
    assert options.python is None
    assert options.bare is False
    assert options.seeder == "download"
    assert options.no_cache is False
    assert options.verbosity == 2


def test_parse_python_from_env(clean_env):
    env = {**clean_env, "VENVKIT_PYTHON": "3.11"}
    assert parse_args([], env).python == ["3.11"]
    assert parse_args(["-p", "3.12", "-p", "3.11"], env).python == ["3.12", "3.11"]


def test_parse_flags_from_env(clean_env):
    env = {**clean_env, "VENVKIT_BARE": "yes", "VENVKIT_SEEDER": "app-data", "VENVKIT_NO_CACHE": "1"}
    options = parse_args(["env"], env)
    assert options.dest == "env"
    assert options.bare is True
    assert options.seeder == "app-data"
    assert options.no_cache is True


@pytest.mark.parametrize(("args", "verbosity"), [(["-vv"], 4), (["-vvvvvv"], 5), (["-q"], 1), (["-qqqq"], 0)])
def test_parse_verbosity(clean_env, args, verbosity):
    assert parse_args(args, clean_env).verbosity == verbosity


def test_parse_verbose_and_quiet_exclusive(clean_env):
    with pytest.raises(SystemExit):
        parse_args(["-v", "-q"], clean_env)


def test_version(clean_env, capsys):
    with pytest.raises(SystemExit) as context:
        parse_args(["--version"], clean_env)
    assert context.value.code == 0
    assert capsys.readouterr().out.strip() == f"venvkit {__version__}"


@pytest.mark.parametrize(("value", "expected"), [("1", True), ("True", True), ("off", False), ("", False)])
def test_env_flag(value, expected):
    assert env_flag("bare", {"VENVKIT_BARE": value}) is expected


def test_app_dirs_from_env(tmp_path):
    env = {"VENVKIT_CACHE_DIR": str(tmp_path / "c"), "VENVKIT_APP_DATA": str(tmp_path / "d")}
    app_dirs = AppDirs.from_env(env)
    assert app_dirs.cache_dir == tmp_path / "c"
    assert app_dirs.wheels_dir == tmp_path / "c" / "wheels"
    assert app_dirs.unpacked_store == tmp_path / "d" / "wheel" / "3.11" / "image" / "1" / "CopyPipInstall"


def test_app_dirs_default(mocker, tmp_path):
    mocker.patch("venvkit.config.user_cache_path", return_value=tmp_path / "cache")
    mocker.patch("venvkit.config.user_data_path", return_value=tmp_path / "data")
    assert AppDirs.from_env({}) == AppDirs(tmp_path / "cache", tmp_path / "data")


def test_make_source(app_dirs):
    local = make_source("app-data", app_dirs)
    assert isinstance(local, LocalUnpacked)
    assert local.store == app_dirs.unpacked_store
    remote = make_source("download", app_dirs)
    assert isinstance(remote, RemoteArchive)
    assert isinstance(remote.archive_cache, ArchiveCache)
    assert remote.archive_cache.folder == app_dirs.wheels_dir
    with pytest.raises(ValueError, match="seeder 'magic' is not available"):
        make_source("magic", app_dirs)


def test_make_cache(app_dirs):
    assert isinstance(make_cache(app_dirs, no_cache=True), NoOpCache)
    assert isinstance(make_cache(app_dirs, no_cache=False), DiskCache)


def test_create_venv_needs_source(tmp_path, base_python, interpreter_info):
    with pytest.raises(ValueError, match="package source is required"):
        create_venv(tmp_path / "venv", base_python, interpreter_info)


@pytest.mark.usefixtures("_require_symlink")
def test_create_venv_seeds(mocker, tmp_path, base_python, interpreter_info):
    source = mocker.MagicMock()
    paths = create_venv(tmp_path / "venv", base_python, interpreter_info, source)
    source.materialize.assert_called_once()
    assert source.materialize.call_args.args[1] == paths


@pytest.mark.usefixtures("_require_symlink")
def test_cli_run_bare(tmp_path, fake_python, app_dirs, clean_env):
    exe = fake_python()
    args = ["--bare", "-p", str(exe), str(tmp_path / "venv")]
    paths = cli_run(args, clean_env, setup_logging=False, app_dirs=app_dirs)
    assert paths.root == (tmp_path / "venv").resolve()
    assert (paths.root / "pyvenv.cfg").read_text(encoding="utf-8").startswith(f"home = {exe.parent}\n")
    assert os.readlink(paths.interpreter) == str(exe)
    assert list((app_dirs.cache_dir / "interpreter_info").glob("*.json"))


@pytest.mark.usefixtures("_require_symlink")
def test_cli_run_no_cache(tmp_path, fake_python, app_dirs, clean_env):
    args = ["--bare", "--no-cache", "-p", str(fake_python()), str(tmp_path / "venv")]
    cli_run(args, clean_env, setup_logging=False, app_dirs=app_dirs)
    assert not (app_dirs.cache_dir / "interpreter_info").exists()


def test_cli_run_wraps_failure(tmp_path, fake_python, app_dirs, clean_env):
    dest = str(tmp_path / "missing" / "venv")
    with pytest.raises(BuildFailed) as context:
        cli_run(["--bare", "-p", str(fake_python()), dest], clean_env, setup_logging=False, app_dirs=app_dirs)
    assert context.value.root == dest
    assert isinstance(context.value.__cause__, InvalidRoot)


def test_run_with_catch_reports_chain(mocker, tmp_path, fake_python, app_dirs, clean_env, capsys):
    mocker.patch("venvkit.run.setup_report")
    mocker.patch("venvkit.run.AppDirs.from_env", return_value=app_dirs)
    dest = tmp_path / "missing" / "venv"
    with pytest.raises(SystemExit) as context:
        run_with_catch(["--bare", "-p", str(fake_python()), str(dest)], clean_env)
    assert context.value.code == 1
    err = capsys.readouterr().err.splitlines()
    assert err == [
        "venvkit failed",
        f"  caused by: failed to build environment at {dest}",
        f"  caused by: failed to canonicalize environment root {dest}, does its parent directory exist?",
    ]


def test_run_with_catch_reports_lock_failure(mocker, tmp_path, fake_python, app_dirs, clean_env, capsys):
    mocker.patch("venvkit.run.setup_report")
    mocker.patch("venvkit.run.AppDirs.from_env", return_value=app_dirs)
    exe = str(fake_python())
    lock_file = DiskCache(app_dirs.cache_dir).interpreter_info(exe).lock_file
    lock_file.mkdir(parents=True)
    with pytest.raises(SystemExit) as context:
        run_with_catch(["--bare", "-p", exe, str(tmp_path / "venv")], clean_env)
    assert context.value.code == 1
    err = capsys.readouterr().err.splitlines()
    assert err[0] == "venvkit failed"
    assert err[2] == f"  caused by: failed to lock cache entry {lock_file}"


def test_error_chain_follows_causes():
    try:
        try:
            raise OSError("disk on fire")  # noqa: EM101, TRY301
        except OSError as exception:
            raise VenvError("outer") from exception  # noqa: EM101
    except VenvError as exception:
        assert list(error_chain(exception)) == ["outer", "disk on fire"]  # noqa: PT017


def test_report_failure_custom_header(capsys):
    report_failure(VenvError("boom"), header="oops")
    assert capsys.readouterr().err == "oops\n  caused by: boom\n"


def test_setup_report_level():
    root = logging.getLogger()
    handlers = list(root.handlers)
    try:
        assert setup_report(7) == 5
        assert root.handlers[-1].level == logging.NOTSET
        setup_report(2, "debug")
        assert len(root.handlers) == 1
        assert root.handlers[0].level == logging.DEBUG
    finally:
        for handler in list(root.handlers):
            root.removeHandler(handler)
        for handler in handlers:
            root.addHandler(handler)
