"""Progress reporting shared by all scan workers.

The completion counter is bumped without a lock; only the act of writing a
line is serialized, through the ``StatusChannel`` gate that error lines use
as well.
"""

from __future__ import annotations

from collections.abc import Callable
import itertools
import logging
import sys
import threading


status_logger = logging.getLogger("filesearch.status")
diagnostics_logger = logging.getLogger("filesearch.diagnostics")

DEFAULT_PROGRESS_INTERVAL = 50


def print_status(line: str) -> None:
    print(line, file=sys.stdout, flush=True)  # noqa: T201


class StatusChannel:
    """Single gate for everything written while workers are running.

    Status lines go to ``emit`` (the ``filesearch.status`` logger unless the
    caller passes ``print_status`` or similar). Diagnostics are logged on the
    caller's ``source`` logger, or ``filesearch.diagnostics`` when none is
    given. Both take the same lock so no two lines ever interleave.
    """

    def __init__(self, emit: Callable[[str], None] | None = None, *, log: logging.Logger | None = None):
        self._emit = emit or status_logger.info
        self._log = log or diagnostics_logger
        self._gate = threading.Lock()

    def status(self, line: str) -> None:
        with self._gate:
            self._emit(line)

    def error(self, message: str, *args: object, source: logging.Logger | None = None) -> None:
        with self._gate:
            (source or self._log).error(message, *args)

    def warning(self, message: str, *args: object, source: logging.Logger | None = None) -> None:
        with self._gate:
            (source or self._log).warning(message, *args)


class ProgressReporter:
    """Count finished files and report every ``interval`` completions."""

    def __init__(
        self,
        total: int,
        *,
        interval: int = DEFAULT_PROGRESS_INTERVAL,
        channel: StatusChannel | None = None,
    ):
        if interval < 1:
            raise ValueError("interval must be >= 1")
        self.total = total
        self.interval = interval
        self.channel = channel or StatusChannel()
        # next() on itertools.count is a single atomic step under the GIL.
        self._counter = itertools.count(1)

    def record_completion(self) -> int:
        """Increment the completed count and return the post-increment value.

        The reporting decision uses the returned value, never a re-read of the
        counter, so each multiple of ``interval`` is reported exactly once.
        """
        completed = next(self._counter)
        if completed % self.interval == 0:
            self.channel.status(format_progress(completed, self.total))
        return completed


def format_progress(completed: int, total: int) -> str:
    return f"Files scanned: {completed}/{total}"
