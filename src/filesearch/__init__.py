"""Concurrent keyword search over all regular files beneath a directory."""

from filesearch.domain.model import MatchRecord, SearchConfiguration, SearchResponse
from filesearch.service_layer.search_service import SearchService, search_files


__all__ = [
    "MatchRecord",
    "SearchConfiguration",
    "SearchResponse",
    "SearchService",
    "search_files",
]
