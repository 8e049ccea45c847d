"""Root logger configuration."""

from __future__ import annotations

import logging
import contextlib

from .context import install_log_context


def configure_logging() -> None:
    """Initialize root logging configuration once per process."""
    from llama_relay.config.logging import APP_LOG_LEVEL, APP_LOG_FORMAT, APP_LOG_DATEFMT  # noqa: PLC0415

    install_log_context()
    root_logger = logging.getLogger()
    if not root_logger.handlers:
        logging.basicConfig(level=APP_LOG_LEVEL, format=APP_LOG_FORMAT, datefmt=APP_LOG_DATEFMT)
    else:
        root_logger.setLevel(APP_LOG_LEVEL)
        for handler in root_logger.handlers:
            with contextlib.suppress(Exception):
                handler.setLevel(APP_LOG_LEVEL)
                handler.setFormatter(logging.Formatter(APP_LOG_FORMAT, datefmt=APP_LOG_DATEFMT))

    logging.getLogger("llama_relay").setLevel(APP_LOG_LEVEL)
    # httpx logs every request line at INFO; one per generation is noise here
    logging.getLogger("httpx").setLevel(logging.WARNING)


__all__ = ["configure_logging"]
