"""Eager enumeration of every regular file beneath a root directory."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
import os
from pathlib import Path

from filesearch.domain.errors import EnumerationError


logger = logging.getLogger(__name__)


@dataclass(slots=True)
class EnumerationResult:
    """Files found by a walk plus the error raised if the walk went wrong."""

    files: list[Path] = field(default_factory=list)
    error: EnumerationError | None = None


class FileEnumerator:
    """Walk a directory tree into a flat, finite list of regular-file paths.

    The walk completes before anything is dispatched, so the total file count
    is known up front. Directory symlinks are not followed; file symlinks are
    included when they point at a regular file.
    """

    def __init__(self, *, follow_links: bool = False):
        self.follow_links = follow_links

    def enumerate(self, root: Path) -> EnumerationResult:
        errors: list[OSError] = []
        files: list[Path] = []

        for dirpath, _dirnames, filenames in os.walk(root, onerror=errors.append, followlinks=self.follow_links):
            for name in filenames:
                candidate = Path(dirpath, name)
                if candidate.is_file():
                    files.append(candidate)

        result = EnumerationResult(files=files)
        if errors:
            first = errors[0]
            location = first.filename or root
            result.error = EnumerationError(
                f"Directory walk failed at {location}: {first.strerror or first}"
                + (f" (+{len(errors) - 1} more)" if len(errors) > 1 else ""),
                failures=len(errors),
            )
            logger.debug("Enumeration of %s hit %d error(s); %d files kept", root, len(errors), len(files))
        return result
