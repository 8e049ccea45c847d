"""Public telemetry API re-exports."""

from .sentry import capture_error
from .setup import init_telemetry, shutdown_telemetry

__all__ = [
    "init_telemetry",
    "shutdown_telemetry",
    "capture_error",
]
