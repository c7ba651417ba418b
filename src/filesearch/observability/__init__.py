"""Observability module for OpenTelemetry-aligned tracing, metrics, and logging."""

from filesearch.observability.context import bind_current_context, get_trace_context, set_trace_context, trace_context
from filesearch.observability.logging import JsonFormatter, configure_logging
from filesearch.observability.metrics import (
    ACTIVE_WORKERS,
    FILES_SCANNED,
    FILES_SKIPPED,
    MATCHES_FOUND,
    SEARCH_ISSUES,
    SEARCH_LATENCY,
    get_metrics,
    init_metrics,
    track_latency,
)
from filesearch.observability.tracing import create_span, get_tracer, init_tracing


__all__ = [
    "ACTIVE_WORKERS",
    "FILES_SCANNED",
    "FILES_SKIPPED",
    "MATCHES_FOUND",
    "SEARCH_ISSUES",
    "SEARCH_LATENCY",
    "JsonFormatter",
    "bind_current_context",
    "configure_logging",
    "create_span",
    "get_metrics",
    "get_trace_context",
    "get_tracer",
    "init_metrics",
    "init_tracing",
    "set_trace_context",
    "trace_context",
    "track_latency",
]
