"""MetricInstruments registry."""

from __future__ import annotations

import logging
from opentelemetry import metrics
from ..config.telemetry import (
    OTEL_SERVICE_NAME,
    METRIC_ACTIVE_RENDERS,
    METRIC_RENDER_LATENCY,
    METRIC_RENDER_FAILURES_TOTAL,
    METRIC_RENDERS_APPLIED_TOTAL,
    METRIC_RENDERS_STARTED_TOTAL,
    METRIC_SESSIONS_OPENED_TOTAL,
    METRIC_INVALID_TRIGGERS_TOTAL,
    METRIC_SESSIONS_EVICTED_TOTAL,
    METRIC_RENDERS_DISCARDED_TOTAL,
    METRIC_EVICTION_HOOK_FAILURES_TOTAL,
)

logger = logging.getLogger(__name__)


def _histogram(meter: metrics.Meter, spec: tuple[str, str, str]) -> metrics.Histogram:
    name, unit, desc = spec
    return meter.create_histogram(name, unit=unit, description=desc)


def _counter(meter: metrics.Meter, spec: tuple[str, str, str]) -> metrics.Counter:
    name, unit, desc = spec
    return meter.create_counter(name, unit=unit, description=desc)


def _updown(meter: metrics.Meter, spec: tuple[str, str, str]) -> metrics.UpDownCounter:
    name, unit, desc = spec
    return meter.create_up_down_counter(name, unit=unit, description=desc)


class MetricInstruments:
    """Holds all OTel metric instruments created from config specs."""

    __slots__ = (
        "render_latency",
        "renders_started_total",
        "renders_applied_total",
        "renders_discarded_total",
        "render_failures_total",
        "sessions_opened_total",
        "sessions_evicted_total",
        "eviction_hook_failures_total",
        "invalid_triggers_total",
        "active_renders",
    )

    def __init__(self, meter: metrics.Meter) -> None:
        # Histograms
        self.render_latency = _histogram(meter, METRIC_RENDER_LATENCY)
        # Counters
        self.renders_started_total = _counter(meter, METRIC_RENDERS_STARTED_TOTAL)
        self.renders_applied_total = _counter(meter, METRIC_RENDERS_APPLIED_TOTAL)
        self.renders_discarded_total = _counter(meter, METRIC_RENDERS_DISCARDED_TOTAL)
        self.render_failures_total = _counter(meter, METRIC_RENDER_FAILURES_TOTAL)
        self.sessions_opened_total = _counter(meter, METRIC_SESSIONS_OPENED_TOTAL)
        self.sessions_evicted_total = _counter(meter, METRIC_SESSIONS_EVICTED_TOTAL)
        self.eviction_hook_failures_total = _counter(meter, METRIC_EVICTION_HOOK_FAILURES_TOTAL)
        self.invalid_triggers_total = _counter(meter, METRIC_INVALID_TRIGGERS_TOTAL)
        # UpDown counters
        self.active_renders = _updown(meter, METRIC_ACTIVE_RENDERS)


_metrics: MetricInstruments | None = None


def get_metrics() -> MetricInstruments:
    """Return the global MetricInstruments (no-op meter if OTel not initialized)."""
    global _metrics  # noqa: PLW0603
    if _metrics is None:
        meter = metrics.get_meter(OTEL_SERVICE_NAME)
        _metrics = MetricInstruments(meter)
    return _metrics


def initialize_metrics() -> None:
    """Create MetricInstruments from the global meter."""
    global _metrics  # noqa: PLW0603
    meter = metrics.get_meter(OTEL_SERVICE_NAME)
    _metrics = MetricInstruments(meter)
    logger.info("Telemetry metrics initialized")


__all__ = ["MetricInstruments", "get_metrics", "initialize_metrics"]
