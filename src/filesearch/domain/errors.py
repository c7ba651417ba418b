"""Error taxonomy for a search invocation.

Every error here is caught at its local boundary and turned into a
``SearchIssue`` on the response; none of them escape ``SearchService.search``.
"""

from __future__ import annotations


class SearchError(Exception):
    """Base error for the search domain."""


class ConfigurationError(SearchError):
    """Raised when the search cannot start (root is not a directory, bad term)."""


class EnumerationError(SearchError):
    """Raised when walking the directory tree fails part way or entirely."""

    def __init__(self, message: str, *, failures: int = 1):
        super().__init__(message)
        self.failures = failures


class PerFileScanError(SearchError):
    """Raised when a file passes the skip pre-check but cannot be read."""

    def __init__(self, file_path: str, cause: BaseException):
        super().__init__(f"{file_path}: {cause}")
        self.file_path = file_path
        self.cause = cause


class PoolShutdownTimeoutError(SearchError):
    """Raised when worker teardown exceeds the grace period."""

    def __init__(self, grace_seconds: float, abandoned: int):
        super().__init__(
            f"Executor did not terminate within {grace_seconds:g}s; forcing shutdown ({abandoned} task(s) abandoned)"
        )
        self.grace_seconds = grace_seconds
        self.abandoned = abandoned
