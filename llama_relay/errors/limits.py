"""Rate limiting and quota exceptions with retry metadata."""


class RateLimitError(Exception):
    """Raised when a rate limiter rejects an action.

    Attributes:
        retry_in: Seconds until a new slot becomes available.
        limit: The maximum allowed events per window.
        window_seconds: The duration of the rate limit window.
    """

    def __init__(
        self,
        *,
        retry_in: float,
        limit: int,
        window_seconds: float,
        message: str | None = None,
    ) -> None:
        super().__init__(message or "rate limit exceeded")
        self.retry_in = max(0.0, float(retry_in))
        self.limit = max(0, int(limit))
        self.window_seconds = max(0.0, float(window_seconds))


class QuotaExceededError(Exception):
    """Raised when a user has used up their generation quota."""

    def __init__(self, *, quota: int, usage: int) -> None:
        super().__init__(f"request quota exhausted ({usage}/{quota})")
        self.quota = quota
        self.usage = usage


__all__ = ["RateLimitError", "QuotaExceededError"]
