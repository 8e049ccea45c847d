"""Errors raised by the Python stream consumer client."""


class GenerateError(Exception):
    """Raised when the relay rejects or fails a generate call.

    Attributes:
        status_code: HTTP status of the rejection, if one was received.
        body: Parsed JSON error body, when the server sent one.
    """

    def __init__(self, message: str, *, status_code: int | None = None, body: dict | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body or {}


class StreamInterruptedError(GenerateError):
    """Raised when the HTTP body ends abruptly mid-generation."""


__all__ = ["GenerateError", "StreamInterruptedError"]
