"""Search service orchestration layer.

Validates the request, enumerates the tree, dispatches the scan and orders
the result. Every condition met on the way is reported on the response
rather than raised to the caller.
"""

from __future__ import annotations

import logging
from pathlib import Path
import time

from pydantic import ValidationError

from filesearch.config import Settings, get_settings
from filesearch.domain.errors import ConfigurationError
from filesearch.domain.model import (
    IssueKind,
    MatchRecord,
    SearchConfiguration,
    SearchIssue,
    SearchResponse,
    SearchStats,
)
from filesearch.observability.metrics import MATCHES_FOUND, SEARCH_ISSUES, SEARCH_LATENCY, track_latency
from filesearch.observability.tracing import create_span
from filesearch.search.dispatcher import Dispatcher
from filesearch.search.enumerator import FileEnumerator
from filesearch.search.ordering import ResultOrderer
from filesearch.search.progress import StatusChannel
from filesearch.search.scanner import LineScanner


logger = logging.getLogger(__name__)


class SearchService:
    """High-level keyword search over a directory tree.

    Collaborators are injectable so tests can swap the enumerator or scanner;
    by default they are built from ``Settings``.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        channel: StatusChannel | None = None,
        enumerator: FileEnumerator | None = None,
        scanner: LineScanner | None = None,
        orderer: ResultOrderer | None = None,
    ):
        self.settings = settings or get_settings()
        self.channel = channel or StatusChannel()
        self.enumerator = enumerator or FileEnumerator()
        self.scanner = scanner or LineScanner(
            max_file_size=self.settings.max_file_size_bytes,
            encoding=self.settings.encoding,
        )
        self.orderer = orderer or ResultOrderer()
        self.dispatcher = Dispatcher(
            self.scanner,
            channel=self.channel,
            progress_interval=self.settings.progress_interval,
            shutdown_grace_seconds=self.settings.shutdown_grace_seconds,
            join_timeout=self.settings.join_timeout_seconds,
        )

    def search(
        self,
        root_path: Path | str,
        search_term: str,
        worker_count: int | None = None,
        case_insensitive: bool = False,
    ) -> SearchResponse:
        """Search ``root_path`` for ``search_term``.

        Args:
            root_path: Directory whose files are scanned recursively
            search_term: Substring to look for in every line
            worker_count: Worker threads; ``None`` uses the configured default,
                values below 1 run with a single worker
            case_insensitive: Compare lowercased lines against the lowercased term

        Returns:
            SearchResponse with ordered matches, reported issues and stats
        """
        try:
            config = SearchConfiguration(
                root_path=Path(root_path),
                search_term=search_term,
                worker_count=self.settings.default_workers if worker_count is None else worker_count,
                case_insensitive=case_insensitive,
            )
        except ValidationError as exc:
            messages = "; ".join(f"{'.'.join(map(str, err['loc']))}: {err['msg']}" for err in exc.errors())
            return self._rejected(ConfigurationError(f"Invalid search request: {messages}"))

        return self.run(config)

    def run(self, config: SearchConfiguration) -> SearchResponse:
        """Execute a validated search configuration."""
        case_mode = "insensitive" if config.case_insensitive else "sensitive"
        started = time.perf_counter()

        span_attributes = {
            "search.root": str(config.root_path),
            "search.term_length": len(config.search_term),
            "search.workers": config.worker_count,
            "search.case_insensitive": config.case_insensitive,
        }
        with track_latency(SEARCH_LATENCY, case_mode=case_mode), create_span(
            "filesearch.search", attributes=span_attributes
        ) as span:
            if not config.root_path.is_dir():
                return self._rejected(ConfigurationError(f"Provided root is not a directory: {config.root_path}"))

            issues: list[SearchIssue] = []
            enumeration = self.enumerator.enumerate(config.root_path)
            if enumeration.error is not None:
                self.channel.warning("%s", enumeration.error, source=logger)
                issues.append(self._issue(IssueKind.ENUMERATION, str(enumeration.error)))

            files = enumeration.files
            self.channel.status(f"Files to scan: {len(files)}")

            dispatched = self.dispatcher.run(files, config)
            for failure in dispatched.failures:
                issues.append(self._issue(IssueKind.FILE, failure.describe(), file_path=failure.file_path))
            if dispatched.forced_shutdown:
                issues.append(
                    self._issue(
                        IssueKind.SHUTDOWN,
                        f"Forced shutdown after {self.settings.shutdown_grace_seconds:g}s; "
                        f"{dispatched.abandoned} task(s) abandoned",
                    )
                )

            matches = self.orderer.order(dispatched.matches)
            MATCHES_FOUND.labels(case_mode=case_mode).inc(len(matches))
            span.set_attribute("search.matches", len(matches))
            span.set_attribute("search.files", len(files))

            stats = SearchStats(
                files_found=len(files),
                files_scanned=dispatched.progress.completed_count,
                files_skipped=dispatched.skipped,
                files_failed=len(dispatched.failures),
                matches_found=len(matches),
                worker_count=config.worker_count,
                search_time=time.perf_counter() - started,
                forced_shutdown=dispatched.forced_shutdown,
            )

        logger.debug(
            "Search for %d-char term under %s: %d match(es) in %d file(s), %d issue(s), %.3fs",
            len(config.search_term),
            config.root_path,
            stats.matches_found,
            stats.files_found,
            len(issues),
            stats.search_time,
        )
        return SearchResponse(matches=matches, issues=issues, stats=stats)

    def _rejected(self, error: ConfigurationError) -> SearchResponse:
        self.channel.error("%s", error, source=logger)
        return SearchResponse(issues=[self._issue(IssueKind.CONFIGURATION, str(error))])

    @staticmethod
    def _issue(kind: IssueKind, message: str, *, file_path: str | None = None) -> SearchIssue:
        SEARCH_ISSUES.labels(kind=kind.value).inc()
        return SearchIssue(kind=kind, message=message, file_path=file_path)


def search_files(
    root_path: Path | str,
    search_term: str,
    worker_count: int | None = None,
    case_insensitive: bool = False,
    *,
    settings: Settings | None = None,
) -> list[MatchRecord]:
    """Return every matching line under ``root_path``, ordered by path then line.

    Conditions such as a non-directory root are logged and yield an empty
    list; use ``SearchService.search`` to inspect them.
    """
    return SearchService(settings).search(root_path, search_term, worker_count, case_insensitive).matches
