"""Trace identifiers carried alongside a search run.

The ids live in a ``ContextVar`` so log records can be correlated with the
active span. Pool threads do not inherit the submitting thread's context, so
scan tasks are wrapped with ``bind_current_context`` before submission.
"""

from __future__ import annotations

import contextvars
from contextvars import ContextVar
from typing import TYPE_CHECKING, Any
from uuid import uuid4


if TYPE_CHECKING:
    from collections.abc import Callable

trace_context: ContextVar[dict | None] = ContextVar("trace_context", default=None)


def get_trace_context() -> dict:
    """Return the active ids, minting a fresh pair when none are set."""
    ctx = trace_context.get()
    if ctx is None or not ctx.get("trace_id"):
        ctx = {"trace_id": uuid4().hex, "span_id": uuid4().hex[:16]}
        trace_context.set(ctx)
    return ctx


def set_trace_context(trace_id: str, span_id: str, **extra: object) -> None:
    trace_context.set({"trace_id": trace_id, "span_id": span_id, **extra})


def bind_current_context(func: Callable[..., Any]) -> Callable[..., Any]:
    """Wrap ``func`` so every call runs inside a copy of the caller's context."""
    ctx = contextvars.copy_context()

    def _runner(*args: Any, **kwargs: Any) -> Any:
        return ctx.copy().run(func, *args, **kwargs)

    return _runner
