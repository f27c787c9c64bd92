"""Per-request and per-ride fields attached to every log record.

Fields live in a ``ContextVar`` rather than thread-local storage: request
handlers and tracker timer tasks share one event loop thread, and each task
must keep its own ride id. A timer task started inside ``log_ride_context``
inherits that ride's fields for its whole lifetime.
"""

import logging
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from contextvars import ContextVar
from types import MappingProxyType
from typing import Any

_EMPTY: Mapping[str, Any] = MappingProxyType({})
_fields: ContextVar[Mapping[str, Any]] = ContextVar("ridematch_log_fields", default=_EMPTY)


class LogContext:
    """Read and reset the fields bound for the current context."""

    @staticmethod
    def get() -> dict[str, Any]:
        return dict(_fields.get())

    @staticmethod
    def clear() -> None:
        _fields.set(_EMPTY)


class ContextFilter(logging.Filter):
    """Copies bound fields onto records that do not already carry them."""

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in _fields.get().items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return True


@contextmanager
def log_context(**fields: Any) -> Iterator[None]:
    """Bind fields for the duration of the block; enclosing fields come back on exit."""
    token = _fields.set(MappingProxyType({**_fields.get(), **fields}))
    try:
        yield
    finally:
        _fields.reset(token)


@contextmanager
def log_ride_context(ride_id: str, **fields: Any) -> Iterator[None]:
    """Bind ``ride_id``, using it as the correlation id unless one is given."""
    fields.setdefault("correlation_id", ride_id)
    with log_context(ride_id=ride_id, **fields):
        yield
