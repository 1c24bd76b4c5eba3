"""Telemetry lifecycle: wired into the app lifespan by server.create_app."""

from __future__ import annotations

import logging

from .otel import init_otel, shutdown_otel
from .sentry import init_sentry, shutdown_sentry
from .instruments import initialize_metrics
from ..config.telemetry import OTLP_ENDPOINT, SENTRY_DSN

logger = logging.getLogger(__name__)


def init_telemetry() -> None:
    """Start whichever backends are configured. Idempotent."""
    if OTLP_ENDPOINT:
        init_otel()
        # Rebind instruments to the real meter now that one is registered
        initialize_metrics()
    else:
        logger.info("OTel disabled (OTLP_ENDPOINT not set)")

    if SENTRY_DSN:
        init_sentry()
    else:
        logger.info("Sentry disabled (SENTRY_DSN not set)")


def shutdown_telemetry() -> None:
    shutdown_sentry()
    shutdown_otel()


__all__ = ["init_telemetry", "shutdown_telemetry"]
