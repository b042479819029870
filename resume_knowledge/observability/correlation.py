"""
Request correlation ids.

A correlation id ties together the log lines of one HTTP request or one
search, including the concurrent lexical and vector sub-searches, which
inherit the context of the task that spawned them.

Dependencies: contextvars
System role: Log correlation across async boundaries
"""

import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator

_correlation_id: ContextVar[str] = ContextVar("resume_knowledge_correlation_id", default="")


def new_correlation_id() -> str:
    return uuid.uuid4().hex[:16]


def set_correlation_id(correlation_id: str | None = None) -> str:
    """
    Bind a correlation id to the current context.

    Args:
        correlation_id: Id supplied by the caller; a fresh one if empty

    Returns:
        str: The id now in effect
    """
    value = (correlation_id or "").strip() or new_correlation_id()
    _correlation_id.set(value)
    return value


def get_correlation_id() -> str:
    """Current correlation id, empty string when none is bound."""
    return _correlation_id.get()


def clear_correlation_id() -> None:
    _correlation_id.set("")


@contextmanager
def correlation_scope(correlation_id: str | None = None) -> Iterator[str]:
    """
    Ensure a correlation id for the duration of a block.

    An id already bound by an outer scope (e.g. the HTTP middleware) is
    kept; otherwise one is bound and removed again on exit.

    Yields:
        str: The id in effect inside the block
    """
    current = _correlation_id.get()
    if current and correlation_id is None:
        yield current
        return

    token = _correlation_id.set((correlation_id or "").strip() or new_correlation_id())
    try:
        yield _correlation_id.get()
    finally:
        _correlation_id.reset(token)
