"""Concurrency-safe, append-only accumulation of match records."""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable
import logging
import threading

from filesearch.domain.model import MatchRecord


logger = logging.getLogger(__name__)


class ResultSink:
    """Unordered multiset of matches appended to by many worker threads.

    Synchronization is internal: callers never take a lock. Records are
    neither reordered on purpose nor deduplicated. The sink is drained once,
    after the join; the drained flag and the stored records change under the
    same lock, so a record from an abandoned worker is either part of the
    drain or counted in ``late_appends``, never lost silently.
    """

    def __init__(self) -> None:
        self._items: deque[MatchRecord] = deque()
        self._lock = threading.Lock()
        self._drained = False
        self._late_appends = 0

    def append(self, record: MatchRecord) -> None:
        with self._lock:
            if self._drained:
                self._late_appends += 1
                return
            self._items.append(record)

    def extend(self, records: Iterable[MatchRecord]) -> None:
        records = list(records)
        if not records:
            return
        with self._lock:
            if self._drained:
                self._late_appends += len(records)
                return
            self._items.extend(records)

    def drain_all(self) -> list[MatchRecord]:
        with self._lock:
            if self._drained:
                raise RuntimeError("ResultSink.drain_all() may only be called once")
            self._drained = True
            drained = list(self._items)
            self._items.clear()
        logger.debug("Drained %d match record(s)", len(drained))
        return drained

    @property
    def late_appends(self) -> int:
        return self._late_appends

    @property
    def drained(self) -> bool:
        return self._drained

    def __len__(self) -> int:
        return len(self._items)
