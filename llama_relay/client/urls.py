"""URL normalization for the relay's HTTP and WebSocket endpoints."""

from __future__ import annotations

from urllib.parse import urlsplit, urlunsplit

from ..config.client import CLIENT_DEFAULT_WS_PATH

_HTTP_TO_WS = {"http": "ws", "https": "wss"}


def to_ws_url(url: str, default_path: str = CLIENT_DEFAULT_WS_PATH) -> str:
    """Turn ``http(s)://host`` or ``host:port`` into the ``ws(s)://host/ws`` endpoint.

    An explicit non-root path is kept as given.
    """
    # Bare "host:port" would otherwise parse "host" as the scheme
    if "://" not in url:
        url = f"ws://{url}"
    parts = urlsplit(url)
    scheme = parts.scheme
    netloc = parts.netloc
    path = parts.path or ""

    if not netloc:
        raise ValueError(f"Invalid relay URL '{url}'. Expected http(s)://host[:port] or ws(s)://host[:port]/ws")

    scheme = _HTTP_TO_WS.get(scheme, scheme)
    if not path.strip("/"):
        path = default_path if default_path.startswith("/") else f"/{default_path}"
    return urlunsplit((scheme, netloc, path, parts.query, ""))


__all__ = ["to_ws_url"]
