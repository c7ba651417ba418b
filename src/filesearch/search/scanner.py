"""Line-by-line keyword scanning of a single file."""

from __future__ import annotations

from collections.abc import Callable, Iterator
import logging
import os
from pathlib import Path
from typing import TextIO

from filesearch.domain.model import MatchRecord, ScanOutcome


logger = logging.getLogger(__name__)

DEFAULT_MAX_FILE_SIZE = 200 * 1024 * 1024

SKIP_UNREADABLE = "unreadable"
SKIP_OVERSIZED = "oversized"


def is_readable(path: Path) -> bool:
    return os.access(path, os.R_OK)


def file_size(path: Path) -> int:
    return path.stat().st_size


class LineScanner:
    """Find every line of a file that contains the search term.

    Two skip predicates run before the file is opened, in order: readability,
    then size. Either one excludes the file silently. Failing to read the size
    is not a skip; the read is attempted and any error surfaces there.
    """

    def __init__(
        self,
        *,
        max_file_size: int = DEFAULT_MAX_FILE_SIZE,
        encoding: str = "utf-8",
        readable: Callable[[Path], bool] = is_readable,
        size_of: Callable[[Path], int] = file_size,
    ):
        self.max_file_size = max_file_size
        self.encoding = encoding
        self._readable = readable
        self._size_of = size_of

    def scan(self, file_path: Path | str, normalized_term: str, case_insensitive: bool) -> ScanOutcome:
        path = Path(file_path)
        key = str(file_path)

        skip_reason = self.skip_reason(path)
        if skip_reason is not None:
            return ScanOutcome.skip(key, skip_reason)

        matches: list[MatchRecord] = []
        try:
            with self._open(path) as handle:
                for line_number, line in enumerate(_lines(handle), start=1):
                    haystack = line.lower() if case_insensitive else line
                    if normalized_term in haystack:
                        matches.append(MatchRecord(file_path=key, line_number=line_number, line_text=line))
        except (OSError, UnicodeDecodeError) as exc:
            logger.debug("Read of %s failed after %d match(es): %s", key, len(matches), exc)
            return ScanOutcome.failed(key, exc)

        return ScanOutcome(file_path=key, matches=tuple(matches))

    def skip_reason(self, path: Path) -> str | None:
        """Return why ``path`` is excluded from scanning, or None to scan it."""
        if not self._readable(path):
            return SKIP_UNREADABLE
        try:
            if self._size_of(path) > self.max_file_size:
                return SKIP_OVERSIZED
        except OSError:
            pass
        return None

    def _open(self, path: Path) -> TextIO:
        return open(path, encoding=self.encoding, errors="strict", newline=None)  # noqa: SIM115


def _lines(handle: TextIO) -> Iterator[str]:
    # Universal newlines leave a single "\n" on every line but possibly the last.
    for line in handle:
        yield line[:-1] if line.endswith("\n") else line
