"""Span context managers for connection and render-cycle tracing."""

from __future__ import annotations

from opentelemetry import trace
from collections.abc import Iterator
from contextlib import contextmanager
from ..config.telemetry import SPAN_RENDER, SPAN_CONNECTION, OTEL_SERVICE_NAME


def _tracer() -> trace.Tracer:
    return trace.get_tracer(OTEL_SERVICE_NAME)


@contextmanager
def connection_span(*, client_id: str) -> Iterator[trace.Span]:
    """Outermost span wrapping one WebSocket connection."""
    with _tracer().start_as_current_span(
        SPAN_CONNECTION,
        attributes={"client.id": client_id},
    ) as span:
        yield span


@contextmanager
def render_span(*, response_id: str, command: str, generation: int) -> Iterator[trace.Span]:
    """One render cycle; the caller records the outcome attribute."""
    with _tracer().start_as_current_span(
        SPAN_RENDER,
        attributes={
            "response.id": response_id,
            "render.command": command,
            "render.generation": generation,
        },
    ) as span:
        yield span


__all__ = ["connection_span", "render_span"]
