"""Deterministic ordering and display formatting of collected matches."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from filesearch.domain.model import MatchRecord


def order_key(record: MatchRecord) -> tuple[str, int]:
    return record.file_path, record.line_number


class ResultOrderer:
    """Total order over matches: file path string first, then line number.

    ``sorted`` is stable, so records equal on both keys keep their relative
    order. Applying the orderer to its own output returns the same sequence.
    """

    def order(self, matches: Iterable[MatchRecord]) -> list[MatchRecord]:
        return sorted(matches, key=order_key)

    @staticmethod
    def is_ordered(matches: Sequence[MatchRecord]) -> bool:
        return all(order_key(a) <= order_key(b) for a, b in zip(matches, matches[1:]))


def format_matches(matches: Sequence[MatchRecord], limit: int | None = None) -> list[str]:
    """Render ``path:line: text`` lines, at most ``limit`` of them."""
    shown = matches if limit is None else matches[:limit]
    return [record.format() for record in shown]
