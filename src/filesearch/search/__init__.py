"""Concurrent search engine: enumeration, scanning, accumulation, ordering."""

from filesearch.search.dispatcher import Dispatcher
from filesearch.search.enumerator import EnumerationResult, FileEnumerator
from filesearch.search.ordering import ResultOrderer, format_matches
from filesearch.search.progress import ProgressReporter, StatusChannel
from filesearch.search.scanner import LineScanner
from filesearch.search.sink import ResultSink


__all__ = [
    "Dispatcher",
    "EnumerationResult",
    "FileEnumerator",
    "LineScanner",
    "ProgressReporter",
    "ResultOrderer",
    "ResultSink",
    "StatusChannel",
    "format_matches",
]
