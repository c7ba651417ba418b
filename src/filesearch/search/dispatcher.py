"""Fixed-size worker pool that fans one scan task out per file."""

from __future__ import annotations

from collections.abc import Sequence
from concurrent.futures import Future, ThreadPoolExecutor, as_completed, wait
from concurrent.futures import TimeoutError as FuturesTimeoutError
import logging
from pathlib import Path

from filesearch.domain.errors import PerFileScanError, PoolShutdownTimeoutError
from filesearch.domain.model import DispatchResult, ProgressState, ScanFailure, ScanOutcome, SearchConfiguration
from filesearch.observability.context import bind_current_context
from filesearch.observability.metrics import ACTIVE_WORKERS, FILES_SCANNED, FILES_SKIPPED
from filesearch.search.progress import DEFAULT_PROGRESS_INTERVAL, ProgressReporter, StatusChannel
from filesearch.search.scanner import LineScanner
from filesearch.search.sink import ResultSink


logger = logging.getLogger(__name__)

DEFAULT_SHUTDOWN_GRACE_SECONDS = 60.0


class Dispatcher:
    """Run a ``LineScanner`` over every file on a bounded thread pool.

    The pool is created before any task is submitted and sized to
    ``max(1, worker_count)``. Each task is its own failure boundary. ``run``
    blocks until every task has finished (or ``join_timeout`` elapses), then
    tears the pool down, forcing the shutdown if it outlasts the grace
    period. Matches already in the sink always survive.
    """

    def __init__(
        self,
        scanner: LineScanner | None = None,
        *,
        channel: StatusChannel | None = None,
        progress_interval: int = DEFAULT_PROGRESS_INTERVAL,
        shutdown_grace_seconds: float = DEFAULT_SHUTDOWN_GRACE_SECONDS,
        join_timeout: float | None = None,
    ):
        self.scanner = scanner or LineScanner()
        self.channel = channel or StatusChannel()
        self.progress_interval = progress_interval
        self.shutdown_grace_seconds = shutdown_grace_seconds
        self.join_timeout = join_timeout

    def run(self, files: Sequence[Path | str], config: SearchConfiguration) -> DispatchResult:
        total = len(files)
        result = DispatchResult(progress=ProgressState(total_count=total))
        if total == 0:
            return result

        sink = ResultSink()
        reporter = ProgressReporter(total, interval=self.progress_interval, channel=self.channel)
        workers = max(1, config.worker_count)
        task = bind_current_context(self._scan_task)

        executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="filesearch-worker")
        ACTIVE_WORKERS.labels(pool="scan").inc(workers)
        futures: dict[Future[ScanOutcome], str] = {}
        collected: set[Future[ScanOutcome]] = set()
        try:
            for path in files:
                future = executor.submit(task, path, config, sink, reporter)
                futures[future] = str(path)
            self._join(futures, collected, result)
        finally:
            self._teardown(executor, futures, collected, result)
            ACTIVE_WORKERS.labels(pool="scan").inc(-workers)

        result.matches = sink.drain_all()
        return result

    def _scan_task(
        self,
        path: Path | str,
        config: SearchConfiguration,
        sink: ResultSink,
        reporter: ProgressReporter,
    ) -> ScanOutcome:
        try:
            outcome = self.scanner.scan(path, config.normalized_term, config.case_insensitive)
        except Exception as exc:
            logger.debug("Scan task for %s raised", path, exc_info=True)
            outcome = ScanOutcome.failed(str(path), exc)

        sink.extend(outcome.matches)
        if outcome.failure is not None:
            self.channel.warning("%s", outcome.failure.describe(), source=logger)

        reporter.record_completion()
        return outcome

    def _join(
        self,
        futures: dict[Future[ScanOutcome], str],
        collected: set[Future[ScanOutcome]],
        result: DispatchResult,
    ) -> None:
        try:
            for future in as_completed(futures, timeout=self.join_timeout):
                self._collect(future, futures[future], collected, result)
        except FuturesTimeoutError:
            pending = sum(1 for future in futures if not future.done())
            self.channel.warning(
                "Scan tasks still running after %ss; %d task(s) outstanding",
                self.join_timeout,
                pending,
                source=logger,
            )

    def _collect(
        self,
        future: Future[ScanOutcome],
        path: str,
        collected: set[Future[ScanOutcome]],
        result: DispatchResult,
    ) -> None:
        collected.add(future)
        result.progress = result.progress.advance_to(result.progress.completed_count + 1)
        try:
            outcome = future.result()
        except Exception as exc:
            # Only the bookkeeping around the scan can get here.
            error = PerFileScanError(path, exc)
            self.channel.error("Task failed: %s", error, source=logger)
            result.failures.append(ScanFailure.from_exception(path, exc))
            FILES_SCANNED.labels(outcome="failed").inc()
            return

        if outcome.failure is not None:
            result.failures.append(outcome.failure)
            FILES_SCANNED.labels(outcome="failed").inc()
        elif outcome.skipped is not None:
            result.skipped += 1
            FILES_SKIPPED.labels(reason=outcome.skipped).inc()
            FILES_SCANNED.labels(outcome="skipped").inc()
        else:
            FILES_SCANNED.labels(outcome="ok").inc()

    def _teardown(
        self,
        executor: ThreadPoolExecutor,
        futures: dict[Future[ScanOutcome], str],
        collected: set[Future[ScanOutcome]],
        result: DispatchResult,
    ) -> None:
        executor.shutdown(wait=False)
        outstanding = [future for future in futures if future not in collected]
        if not outstanding:
            return

        _done, not_done = wait(outstanding, timeout=self.shutdown_grace_seconds)
        if not_done:
            executor.shutdown(wait=False, cancel_futures=True)
            error = PoolShutdownTimeoutError(self.shutdown_grace_seconds, len(not_done))
            self.channel.error("%s", error, source=logger)
            result.forced_shutdown = True
            result.abandoned = len(not_done)

        for future in outstanding:
            if future.done() and not future.cancelled():
                self._collect(future, futures[future], collected, result)
