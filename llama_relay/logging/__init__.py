"""Logging helpers and context utilities."""

from .setup import configure_logging
from .context import (
    LogFields,
    current_log_context,
    install_log_context,
    log_context,
    reset_log_context,
    set_log_context,
)

__all__ = [
    "LogFields",
    "configure_logging",
    "current_log_context",
    "install_log_context",
    "log_context",
    "reset_log_context",
    "set_log_context",
]
