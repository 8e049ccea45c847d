"""Upstream inference backend exceptions.

``UpstreamError`` covers failures before a stream starts (connection refused,
non-2xx status, cancel failure). ``UpstreamStreamError`` is raised when an
already-open stream dies midway; by then part of the body has been relayed.
"""


class UpstreamError(Exception):
    """Raised when the inference backend cannot be reached or rejects a call.

    Attributes:
        status_code: Upstream HTTP status, if a response was received.
    """

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class UpstreamStreamError(UpstreamError):
    """Raised when an open upstream stream terminates on an I/O error."""


__all__ = ["UpstreamError", "UpstreamStreamError"]
