"""
Helpers for hosts: working-directory scoping and duration formatting
"""

import inspect
import logging
import os
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import timedelta
from pathlib import Path
from typing import Any

import humanize

logger = logging.getLogger(__name__)


@contextmanager
def with_dir(path: str | Path) -> Iterator[Path]:
    """
    Run a block from `path`, then return to the original directory

    The original directory is restored even if the block raises.

    Example:
        with with_dir("/some/path"):
            await do_something()
    """
    original = Path.cwd()
    os.chdir(path)
    try:
        yield Path(path)
    finally:
        os.chdir(original)


def format_duration(milliseconds: float) -> str:
    """
    Human-readable duration, rounded to whole milliseconds

    Example:
        format_duration(125000) -> "2 minutes, 5 seconds"
        format_duration(1500)   -> "1 second, 500 milliseconds"
    """
    delta = timedelta(milliseconds=round(milliseconds))
    text = humanize.precisedelta(delta, minimum_unit="milliseconds")
    return text.replace(" and ", ", ")


async def run_and_measure(
    label: str,
    func: Callable[[], Any],
    log: logging.Logger | logging.LoggerAdapter | None = None,
) -> Any:
    """Await func() and log how long it took"""
    start = time.perf_counter()
    result = func()
    if inspect.isawaitable(result):
        result = await result
    elapsed = (time.perf_counter() - start) * 1000
    (log or logger).info(f"run_and_measure: {label} took {format_duration(elapsed)}")
    return result
