"""Service layer - orchestrates the search engine for callers."""

from filesearch.service_layer.search_service import SearchService, search_files


__all__ = [
    "SearchService",
    "search_files",
]
