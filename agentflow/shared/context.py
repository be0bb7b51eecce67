"""Request-scoped context using contextvars.

Holds the correlation id of the current request (or job) so log records
and enqueued jobs can carry it without threading it through every call.

Usage:
    set_correlation_id("abc")
    get_correlation_id()
"""

from contextvars import ContextVar

_correlation_id: ContextVar[str | None] = ContextVar("correlation_id", default=None)


def set_correlation_id(value: str | None) -> None:
    """Set the correlation id for the current async context."""
    _correlation_id.set(value)


def get_correlation_id() -> str | None:
    """Return the correlation id for the current async context, if any."""
    return _correlation_id.get()
