"""Public telemetry API."""

from .sentry import capture_error, add_breadcrumb
from .setup import init_telemetry, shutdown_telemetry
from .instruments import get_metrics, initialize_metrics
from .traces import connection_span, render_span

__all__ = [
    "init_telemetry",
    "shutdown_telemetry",
    "capture_error",
    "add_breadcrumb",
    "get_metrics",
    "initialize_metrics",
    "connection_span",
    "render_span",
]
