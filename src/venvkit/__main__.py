from __future__ import annotations

import logging
import sys
from time import perf_counter
from typing import TYPE_CHECKING

from venvkit.errors import VenvError
from venvkit.report import report_failure
from venvkit.run import cli_run

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

LOGGER = logging.getLogger(__name__)


def run(args: Sequence[str] | None = None, env: Mapping[str, str] | None = None) -> None:
    start = perf_counter()
    args = sys.argv[1:] if args is None else args
    try:
        paths = cli_run(args, env)
    finally:
        LOGGER.info("took %dms", (perf_counter() - start) * 1000)
    LOGGER.info("created virtual environment at %s", paths.root)


def run_with_catch(args: Sequence[str] | None = None, env: Mapping[str, str] | None = None) -> None:
    try:
        run(args, env)
    except VenvError as exception:
        report_failure(exception)
        raise SystemExit(1) from exception


if __name__ == "__main__":  # pragma: no cov
    run_with_catch()  # pragma: no cov
