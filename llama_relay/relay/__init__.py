"""Upstream-to-client streaming relay."""

from .service import RelayResult, RelayService
from .sinks import QueueSink, ResponseSink
from .messages import stream_end_message, stream_error_message, stream_message

__all__ = [
    "RelayResult",
    "RelayService",
    "QueueSink",
    "ResponseSink",
    "stream_message",
    "stream_end_message",
    "stream_error_message",
]
