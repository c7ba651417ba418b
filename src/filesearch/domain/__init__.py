"""Domain layer - value objects and errors with no infrastructure dependencies.

This layer contains:
- Value objects: immutable records produced and consumed by the search engine
- Errors: the taxonomy of conditions a search may report
"""

from filesearch.domain.errors import (
    ConfigurationError,
    EnumerationError,
    PerFileScanError,
    PoolShutdownTimeoutError,
    SearchError,
)
from filesearch.domain.model import (
    DispatchResult,
    IssueKind,
    MatchRecord,
    ProgressState,
    ScanFailure,
    ScanOutcome,
    SearchConfiguration,
    SearchIssue,
    SearchResponse,
    SearchStats,
)


__all__ = [
    "ConfigurationError",
    "DispatchResult",
    "EnumerationError",
    "IssueKind",
    "MatchRecord",
    "PerFileScanError",
    "PoolShutdownTimeoutError",
    "ProgressState",
    "ScanFailure",
    "ScanOutcome",
    "SearchConfiguration",
    "SearchError",
    "SearchIssue",
    "SearchResponse",
    "SearchStats",
]
