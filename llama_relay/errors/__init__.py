"""Centralized exception classes for the relay server and client.

This module re-exports all domain-specific exceptions from their respective
modules, providing a single import point for error handling.

Organization:
    - validation.py: Input validation errors with error codes
    - auth.py: Missing sessions and blocked content
    - limits.py: Rate limiting and quota errors
    - upstream.py: Inference backend failures
    - client.py: Failures seen by the Python stream consumer
    - classify.py: Exception-to-label mapping
"""

from .classify import classify_error
from .validation import ValidationError
from .auth import AuthenticationError, BlockedContentError
from .limits import QuotaExceededError, RateLimitError
from .upstream import UpstreamError, UpstreamStreamError
from .client import GenerateError, StreamInterruptedError

__all__ = [
    # Validation
    "ValidationError",
    # Auth / policy
    "AuthenticationError",
    "BlockedContentError",
    # Limits
    "RateLimitError",
    "QuotaExceededError",
    # Upstream
    "UpstreamError",
    "UpstreamStreamError",
    # Client
    "GenerateError",
    "StreamInterruptedError",
    # Classification
    "classify_error",
]
