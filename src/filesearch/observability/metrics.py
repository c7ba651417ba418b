"""Prometheus metrics for search runs, mirrored into OpenTelemetry instruments."""

from __future__ import annotations

from contextlib import contextmanager
import time
from typing import TYPE_CHECKING, Any

from opentelemetry import metrics as otel_metrics
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import MetricReader
from opentelemetry.sdk.resources import Resource
from prometheus_client import Counter, Gauge, Histogram, generate_latest


if TYPE_CHECKING:
    from collections.abc import Generator


_meter_holder: dict[str, Any] = {"meter": None, "provider": None}


def init_metrics(
    service_name: str = "filesearch",
    resource_attributes: dict[str, str] | None = None,
    metric_readers: list[MetricReader] | None = None,
) -> MeterProvider:
    """Initialize the OpenTelemetry meter used by every ``MetricBridge``."""
    provider = _meter_holder.get("provider")
    if isinstance(provider, MeterProvider):
        return provider

    attributes = {"service.name": service_name}
    if resource_attributes:
        attributes.update(resource_attributes)
    provider = MeterProvider(resource=Resource.create(attributes), metric_readers=metric_readers or [])
    _meter_holder["provider"] = provider
    _meter_holder["meter"] = provider.get_meter(__name__)
    return provider


def _get_meter():
    meter = _meter_holder.get("meter")
    if meter is None:
        meter = otel_metrics.get_meter(__name__)
        _meter_holder["meter"] = meter
    return meter


class _BoundMetric:
    def __init__(self, wrapper: MetricBridge, labels: dict[str, str]) -> None:
        self._wrapper = wrapper
        self._labels = labels

    def inc(self, amount: float = 1.0) -> None:
        self._wrapper.inc(self._labels, amount)

    def observe(self, value: float) -> None:
        self._wrapper.observe(self._labels, value)


class MetricBridge:
    """Bridge Prometheus metrics to optional OTel instruments."""

    def __init__(
        self,
        prom_metric: Counter | Histogram | Gauge,
        *,
        otel_name: str,
        otel_description: str,
        otel_kind: str,
    ) -> None:
        self._prom_metric = prom_metric
        self._otel_name = otel_name
        self._otel_description = otel_description
        self._otel_kind = otel_kind
        self._otel_instrument = None

    @property
    def prometheus(self) -> Counter | Histogram | Gauge:
        return self._prom_metric

    def labels(self, **labels: str) -> _BoundMetric:
        return _BoundMetric(self, labels)

    def _ensure_otel_instrument(self):
        if self._otel_instrument is not None:
            return self._otel_instrument
        meter = _get_meter()
        if self._otel_kind == "counter":
            self._otel_instrument = meter.create_counter(self._otel_name, description=self._otel_description)
        elif self._otel_kind == "histogram":
            self._otel_instrument = meter.create_histogram(self._otel_name, description=self._otel_description)
        elif self._otel_kind == "gauge":
            self._otel_instrument = meter.create_up_down_counter(self._otel_name, description=self._otel_description)
        else:
            raise ValueError(f"Unknown metric kind: {self._otel_kind}")
        return self._otel_instrument

    def inc(self, labels: dict[str, str], amount: float) -> None:
        self._prom_metric.labels(**labels).inc(amount)
        self._ensure_otel_instrument().add(amount, labels)

    def observe(self, labels: dict[str, str], value: float) -> None:
        self._prom_metric.labels(**labels).observe(value)
        self._ensure_otel_instrument().record(value, labels)


_FILES_SCANNED_PROM = Counter(
    "filesearch_files_scanned_total",
    "Files whose scan task completed",
    ["outcome"],
)

_FILES_SKIPPED_PROM = Counter(
    "filesearch_files_skipped_total",
    "Files excluded by the skip policy",
    ["reason"],
)

_MATCHES_FOUND_PROM = Counter(
    "filesearch_matches_total",
    "Matching lines collected",
    ["case_mode"],
)

_SEARCH_ISSUES_PROM = Counter(
    "filesearch_issues_total",
    "Conditions reported during a search",
    ["kind"],
)

_SEARCH_LATENCY_PROM = Histogram(
    "filesearch_search_latency_seconds",
    "Wall time of one search invocation",
    ["case_mode"],
    buckets=(0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 5.0, 30.0, 120.0),
)

_ACTIVE_WORKERS_PROM = Gauge(
    "filesearch_active_workers",
    "Worker threads in the current pool",
    ["pool"],
)

FILES_SCANNED = MetricBridge(
    _FILES_SCANNED_PROM,
    otel_name="filesearch_files_scanned_total",
    otel_description="Files whose scan task completed",
    otel_kind="counter",
)

FILES_SKIPPED = MetricBridge(
    _FILES_SKIPPED_PROM,
    otel_name="filesearch_files_skipped_total",
    otel_description="Files excluded by the skip policy",
    otel_kind="counter",
)

MATCHES_FOUND = MetricBridge(
    _MATCHES_FOUND_PROM,
    otel_name="filesearch_matches_total",
    otel_description="Matching lines collected",
    otel_kind="counter",
)

SEARCH_ISSUES = MetricBridge(
    _SEARCH_ISSUES_PROM,
    otel_name="filesearch_issues_total",
    otel_description="Conditions reported during a search",
    otel_kind="counter",
)

SEARCH_LATENCY = MetricBridge(
    _SEARCH_LATENCY_PROM,
    otel_name="filesearch_search_latency_seconds",
    otel_description="Wall time of one search invocation",
    otel_kind="histogram",
)

ACTIVE_WORKERS = MetricBridge(
    _ACTIVE_WORKERS_PROM,
    otel_name="filesearch_active_workers",
    otel_description="Worker threads in the current pool",
    otel_kind="gauge",
)


@contextmanager
def track_latency(histogram: MetricBridge, **labels: str) -> Generator[None, None, None]:
    """Context manager to track operation latency."""
    start = time.perf_counter()
    try:
        yield
    finally:
        histogram.labels(**labels).observe(time.perf_counter() - start)


def get_metrics() -> bytes:
    """Generate Prometheus metrics output."""
    return generate_latest()

