"""Search every file under a directory for a keyword and print the matching lines."""

# ruff: noqa: T201  # CLI intentionally prints the report

from __future__ import annotations

import argparse
from collections.abc import Sequence
import logging
from pathlib import Path
import sys

from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import ConsoleSpanExporter, SimpleSpanProcessor

from filesearch.config import Settings, get_settings
from filesearch.domain.model import IssueKind
from filesearch.observability.logging import configure_logging
from filesearch.observability.metrics import get_metrics, init_metrics
from filesearch.observability.tracing import init_tracing
from filesearch.search.ordering import format_matches
from filesearch.search.progress import StatusChannel, print_status
from filesearch.service_layer.search_service import SearchService


logger = logging.getLogger(__name__)

TRUNCATION_NOTICE = "(truncated output - use the results collection programmatically for full data)"


def parse_bool(value: str) -> bool:
    """Only ``true`` (any case) is true; anything else is false."""
    return value.strip().lower() == "true"


def build_argument_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="filesearch", description=__doc__)
    parser.add_argument("root", type=Path, metavar="root-directory", help="Directory to search recursively")
    parser.add_argument("keyword", help="Substring to look for in every line")
    parser.add_argument(
        "threads",
        type=int,
        nargs="?",
        default=settings.default_workers,
        help=f"Worker threads (default: {settings.default_workers})",
    )
    parser.add_argument(
        "case_insensitive",
        type=parse_bool,
        nargs="?",
        default=False,
        metavar="case-insensitive",
        help="'true' for case-insensitive matching (default: false)",
    )
    return parser


def init_telemetry(settings: Settings) -> TracerProvider:
    """Install the local meter and tracer providers for this process."""
    span_processors = []
    if settings.trace_console:
        span_processors.append(SimpleSpanProcessor(ConsoleSpanExporter(out=sys.stderr)))
    init_metrics(service_name=settings.service_name)
    return init_tracing(service_name=settings.service_name, span_processors=span_processors)


def write_metrics(path: Path) -> None:
    try:
        path.write_bytes(get_metrics())
    except OSError as exc:
        logger.warning("Could not write metrics to %s: %s", path, exc)
    else:
        logger.debug("Metrics written to %s", path)


def main(argv: Sequence[str] | None = None) -> int:
    settings = get_settings()
    parser = build_argument_parser(settings)
    args = parser.parse_args(argv)

    configure_logging(settings.log_level, settings.log_json, stream=sys.stderr)
    tracer_provider = init_telemetry(settings)

    print("Starting search")
    print(f"Root: {args.root.absolute()}")
    print(f"Keyword: '{args.keyword}' (case-insensitive={str(args.case_insensitive).lower()})")
    print(f"Threads: {args.threads}")

    service = SearchService(settings, channel=StatusChannel(print_status))
    try:
        response = service.search(args.root, args.keyword, args.threads, args.case_insensitive)
    finally:
        tracer_provider.shutdown()
    matches = response.matches

    print()
    print(f"Search completed in {round(response.stats.search_time * 1000)} ms")
    print(f"Total matches: {len(matches)}")
    print()

    for line in format_matches(matches, settings.display_limit):
        print(line)
    if len(matches) > settings.display_limit:
        print(TRUNCATION_NOTICE)

    if settings.metrics_file is not None:
        write_metrics(settings.metrics_file)

    if response.has_issue(IssueKind.CONFIGURATION):
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
