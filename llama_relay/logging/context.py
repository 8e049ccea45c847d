"""Per-task log fields for relay requests and socket connections.

The user, the generation request and the WebSocket connection a log line
belongs to live together in one immutable ``LogFields`` value held by a
single ContextVar. Binding a field produces a new value layered over the
current one, so nested blocks (a relay task inside a request, a user
authenticating on a connection) see the union of what their callers bound.

Every record created after ``install_log_context()`` carries ``user_id``,
``request_id`` and ``connection_id`` attributes for the log format.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar, Token

UNSET = "-"


@dataclasses.dataclass(frozen=True, slots=True)
class LogFields:
    user_id: str = UNSET
    request_id: str = UNSET
    connection_id: str = UNSET

    def bind(
        self,
        *,
        user_id: int | str | None = None,
        request_id: str | None = None,
        connection_id: str | None = None,
    ) -> LogFields:
        """Copy with the given fields replaced; None leaves a field as is."""
        changes = {
            name: str(value)
            for name, value in (
                ("user_id", user_id),
                ("request_id", request_id),
                ("connection_id", connection_id),
            )
            if value is not None
        }
        return dataclasses.replace(self, **changes) if changes else self


_FIELDS: ContextVar[LogFields] = ContextVar("llama_relay_log_fields", default=LogFields())


def set_log_context(
    *,
    user_id: int | str | None = None,
    request_id: str | None = None,
    connection_id: str | None = None,
) -> Token[LogFields]:
    """Bind fields for the rest of the current task; returns a reset token."""
    fields = _FIELDS.get().bind(user_id=user_id, request_id=request_id, connection_id=connection_id)
    return _FIELDS.set(fields)


def reset_log_context(token: Token[LogFields]) -> None:
    _FIELDS.reset(token)


@contextmanager
def log_context(
    *,
    user_id: int | str | None = None,
    request_id: str | None = None,
    connection_id: str | None = None,
) -> Iterator[LogFields]:
    """Bind fields within a block and restore the previous ones on exit."""
    token = set_log_context(user_id=user_id, request_id=request_id, connection_id=connection_id)
    try:
        yield _FIELDS.get()
    finally:
        reset_log_context(token)


def current_log_context() -> dict[str, str]:
    return dataclasses.asdict(_FIELDS.get())


_installed = False


def install_log_context() -> None:
    """Make every new LogRecord carry the current fields. Idempotent."""
    global _installed  # noqa: PLW0603
    if _installed:
        return

    base_factory = logging.getLogRecordFactory()

    def record_factory(*args, **kwargs) -> logging.LogRecord:
        record = base_factory(*args, **kwargs)
        fields = _FIELDS.get()
        record.user_id = fields.user_id
        record.request_id = fields.request_id
        record.connection_id = fields.connection_id
        return record

    logging.setLogRecordFactory(record_factory)
    _installed = True


__all__ = [
    "UNSET",
    "LogFields",
    "current_log_context",
    "install_log_context",
    "log_context",
    "reset_log_context",
    "set_log_context",
]
