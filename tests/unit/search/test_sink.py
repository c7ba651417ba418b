"""Tests for the concurrent result sink."""

import threading

import pytest

from filesearch.domain.model import MatchRecord
from filesearch.search.sink import ResultSink


def _record(path: str = "a.txt", line: int = 1, text: str = "x") -> MatchRecord:
    return MatchRecord(file_path=path, line_number=line, line_text=text)


def test_drain_returns_everything_appended():
    sink = ResultSink()
    sink.append(_record(line=1))
    sink.extend([_record(line=2), _record(line=3)])

    assert [r.line_number for r in sink.drain_all()] == [1, 2, 3]


def test_identical_records_are_not_deduplicated():
    sink = ResultSink()
    sink.append(_record())
    sink.append(_record())

    assert len(sink.drain_all()) == 2


def test_concurrent_appends_lose_nothing():
    sink = ResultSink()
    threads_count = 16
    per_thread = 2000
    barrier = threading.Barrier(threads_count)

    def worker(index: int) -> None:
        barrier.wait()
        for line in range(1, per_thread + 1):
            sink.append(_record(path=f"f{index}", line=line))

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(threads_count)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    drained = sink.drain_all()
    assert len(drained) == threads_count * per_thread
    assert len({(r.file_path, r.line_number) for r in drained}) == threads_count * per_thread


def test_drain_is_single_use():
    sink = ResultSink()
    sink.drain_all()

    with pytest.raises(RuntimeError):
        sink.drain_all()


def test_appends_after_drain_are_dropped_and_counted():
    sink = ResultSink()
    sink.append(_record(line=1))
    drained = sink.drain_all()

    sink.append(_record(line=2))

    assert len(drained) == 1
    assert sink.late_appends == 1
    assert len(sink) == 0
    assert sink.drained is True


def test_appends_racing_the_drain_are_either_drained_or_counted():
    sink = ResultSink()
    threads_count = 8
    per_thread = 5000
    barrier = threading.Barrier(threads_count + 1)

    def worker(index: int) -> None:
        barrier.wait()
        for line in range(1, per_thread + 1):
            sink.append(_record(path=f"f{index}", line=line))

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(threads_count)]
    for thread in threads:
        thread.start()
    barrier.wait()
    drained = sink.drain_all()
    for thread in threads:
        thread.join()

    assert len(drained) + sink.late_appends == threads_count * per_thread


def test_extend_after_drain_counts_every_record():
    sink = ResultSink()
    sink.drain_all()

    sink.extend([_record(line=1), _record(line=2)])
    sink.extend([])

    assert sink.late_appends == 2
