"""Newline-delimited JSON decoding for upstream byte streams.

The backend writes one JSON object per line, but transport reads split
those lines at arbitrary byte offsets (including inside multi-byte UTF-8
sequences). ``NdjsonLineDecoder`` buffers partial lines across reads and
hands back only complete, non-blank lines as raw bytes. ``parse_line`` turns
one line into a ``StreamFragment`` and is shared by the relay and the Python
client so both sides agree on which lines count as fragments.
"""

from __future__ import annotations

import json
import logging

from .types import StreamFragment, UpstreamLine

logger = logging.getLogger(__name__)


class NdjsonLineDecoder:
    """Incremental splitter for newline-delimited byte streams."""

    def __init__(self) -> None:
        self._buffer = bytearray()

    def feed(self, chunk: bytes) -> list[bytes]:
        """Add a chunk and return every line it completed."""
        if not chunk:
            return []
        self._buffer.extend(chunk)
        *complete, rest = bytes(self._buffer).split(b"\n")
        self._buffer = bytearray(rest)
        return [line for line in (_strip_line(item) for item in complete) if line]

    def flush(self) -> list[bytes]:
        """Return the trailing unterminated line, if any, and reset."""
        line = _strip_line(bytes(self._buffer))
        self._buffer.clear()
        return [line] if line else []

    @property
    def pending(self) -> int:
        return len(self._buffer)


def _strip_line(line: bytes) -> bytes:
    line = line.rstrip(b"\r")
    return line if line.strip() else b""


def parse_line(line: bytes) -> StreamFragment | None:
    """Parse one line into a fragment, returning None when it is malformed."""
    try:
        payload = json.loads(line)
    except ValueError:
        logger.warning("skipping malformed fragment (%d bytes): %r", len(line), line[:120])
        return None
    if not isinstance(payload, dict):
        logger.warning("skipping non-object fragment: %r", line[:120])
        return None
    return StreamFragment.from_payload(payload)


def decode_line(line: bytes) -> UpstreamLine:
    return UpstreamLine(raw=line, fragment=parse_line(line))


__all__ = ["NdjsonLineDecoder", "parse_line", "decode_line"]
