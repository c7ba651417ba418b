"""Domain models for a keyword search invocation.

Value objects are immutable (frozen) and carry no infrastructure
dependencies. Everything here is scoped to one search call; nothing is kept
between calls.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, PositiveInt, field_validator


class MatchRecord(BaseModel):
    """One matching line with the file it came from.

    ``line_text`` is the raw line without its terminator; it is only trimmed
    when formatted for display.
    """

    model_config = ConfigDict(frozen=True)

    file_path: str
    line_number: PositiveInt
    line_text: str

    def format(self) -> str:
        return f"{self.file_path}:{self.line_number}: {self.line_text.strip()}"

    def __str__(self) -> str:
        return self.format()


@dataclass(slots=True, frozen=True)
class ScanFailure:
    """Details for a file that could not be read."""

    file_path: str
    error_type: str
    error_message: str

    @classmethod
    def from_exception(cls, file_path: str, exc: BaseException) -> ScanFailure:
        return cls(file_path=file_path, error_type=type(exc).__name__, error_message=str(exc))

    def describe(self) -> str:
        return f"Failed reading: {self.file_path} - {self.error_message}"


@dataclass(slots=True, frozen=True)
class ScanOutcome:
    """Per-file result: a (possibly empty) tuple of matches or a failure."""

    file_path: str
    matches: tuple[MatchRecord, ...] = ()
    failure: ScanFailure | None = None
    skipped: str | None = None

    @property
    def ok(self) -> bool:
        return self.failure is None

    @classmethod
    def skip(cls, file_path: str, reason: str) -> ScanOutcome:
        return cls(file_path=file_path, skipped=reason)

    @classmethod
    def failed(cls, file_path: str, exc: BaseException) -> ScanOutcome:
        return cls(file_path=file_path, failure=ScanFailure.from_exception(file_path, exc))


class SearchConfiguration(BaseModel):
    """Immutable input for a single search invocation."""

    model_config = ConfigDict(frozen=True)

    root_path: Path
    search_term: str
    worker_count: int = 1
    case_insensitive: bool = False

    @field_validator("worker_count", mode="before")
    @classmethod
    def _coerce_worker_count(cls, value: object) -> int:
        # Zero or negative never rejects the call; it runs single-threaded.
        return max(1, int(value))  # type: ignore[call-overload]

    @property
    def normalized_term(self) -> str:
        return self.search_term.lower() if self.case_insensitive else self.search_term


@dataclass(slots=True, frozen=True)
class ProgressState:
    """Completed/total file counters for one dispatch."""

    completed_count: int = 0
    total_count: int = 0

    def __post_init__(self) -> None:
        if not 0 <= self.completed_count <= self.total_count:
            raise ValueError(f"completed_count {self.completed_count} outside 0..{self.total_count}")

    def advance_to(self, completed_count: int) -> ProgressState:
        """Return a state whose count never moves backwards."""
        return ProgressState(
            completed_count=max(self.completed_count, min(completed_count, self.total_count)),
            total_count=self.total_count,
        )

    @property
    def is_complete(self) -> bool:
        return self.completed_count == self.total_count


class IssueKind(str, Enum):
    """Kinds of conditions reported alongside a search result."""

    CONFIGURATION = "configuration"
    ENUMERATION = "enumeration"
    FILE = "file"
    SHUTDOWN = "shutdown"


class SearchIssue(BaseModel):
    """A reported, non-fatal condition raised during a search."""

    model_config = ConfigDict(frozen=True)

    kind: IssueKind
    message: str
    file_path: str | None = None


class SearchStats(BaseModel):
    """Counters and timing for one search invocation."""

    model_config = ConfigDict(frozen=True)

    files_found: int = 0
    files_scanned: int = 0
    files_skipped: int = 0
    files_failed: int = 0
    matches_found: int = 0
    worker_count: int = 1
    search_time: float = 0.0
    forced_shutdown: bool = False


class SearchResponse(BaseModel):
    """Ordered matches plus every condition reported while producing them."""

    model_config = ConfigDict(frozen=True)

    matches: list[MatchRecord] = Field(default_factory=list)
    issues: list[SearchIssue] = Field(default_factory=list)
    stats: SearchStats = Field(default_factory=SearchStats)

    @property
    def failures(self) -> list[SearchIssue]:
        return [issue for issue in self.issues if issue.kind is IssueKind.FILE]

    def has_issue(self, kind: IssueKind) -> bool:
        return any(issue.kind is kind for issue in self.issues)


@dataclass(slots=True)
class DispatchResult:
    """What the dispatcher hands back after the join and teardown."""

    matches: list[MatchRecord] = field(default_factory=list)
    failures: list[ScanFailure] = field(default_factory=list)
    progress: ProgressState = field(default_factory=ProgressState)
    skipped: int = 0
    forced_shutdown: bool = False
    abandoned: int = 0
