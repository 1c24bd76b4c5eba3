"""TracerProvider + MeterProvider export to an OTLP/HTTP collector.

Each signal can be switched off on its own (``OTEL_TRACES_ENABLED``,
``OTEL_METRICS_ENABLED``). A disabled signal keeps the API's no-op
provider, so spans and instruments used across the package cost nothing.
"""

from __future__ import annotations

import socket
import logging
import uuid as _uuid

from opentelemetry import trace, metrics
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.exporter.otlp.proto.http.metric_exporter import OTLPMetricExporter

from ..config.telemetry import (
    OTLP_HEADERS,
    OTLP_API_TOKEN,
    OTLP_ENVIRONMENT,
    OTEL_SERVICE_NAME,
    OTEL_TRACES_ENABLED,
    OTEL_METRICS_ENABLED,
    OTLP_TRACES_ENDPOINT,
    OTLP_METRICS_ENDPOINT,
    OTEL_TRACES_BATCH_SIZE,
    OTEL_TRACES_EXPORT_INTERVAL_MS,
    OTEL_METRICS_EXPORT_INTERVAL_MS,
)

logger = logging.getLogger(__name__)

_providers: list[TracerProvider | MeterProvider] = []


def parse_headers(raw: str) -> dict[str, str]:
    """Parse ``name=value,name=value``; blank or value-less items are skipped."""
    headers: dict[str, str] = {}
    for item in raw.split(","):
        name, sep, value = item.partition("=")
        if sep and name.strip():
            headers[name.strip()] = value.strip()
    return headers


def exporter_headers() -> dict[str, str]:
    headers = parse_headers(OTLP_HEADERS)
    if OTLP_API_TOKEN:
        headers.setdefault("Authorization", f"Bearer {OTLP_API_TOKEN}")
    return headers


def _build_resource() -> Resource:
    return Resource.create({
        "service.name": OTEL_SERVICE_NAME,
        "service.instance.id": _uuid.uuid4().hex[:12],
        "deployment.environment": OTLP_ENVIRONMENT,
        "host.name": socket.gethostname(),
    })


def _tracer_provider(resource: Resource, headers: dict[str, str]) -> TracerProvider:
    provider = TracerProvider(resource=resource)
    provider.add_span_processor(
        BatchSpanProcessor(
            OTLPSpanExporter(endpoint=OTLP_TRACES_ENDPOINT, headers=headers),
            max_export_batch_size=OTEL_TRACES_BATCH_SIZE,
            schedule_delay_millis=OTEL_TRACES_EXPORT_INTERVAL_MS,
        )
    )
    return provider


def _meter_provider(resource: Resource, headers: dict[str, str]) -> MeterProvider:
    reader = PeriodicExportingMetricReader(
        OTLPMetricExporter(endpoint=OTLP_METRICS_ENDPOINT, headers=headers),
        export_interval_millis=OTEL_METRICS_EXPORT_INTERVAL_MS,
    )
    return MeterProvider(resource=resource, metric_readers=[reader])


def init_otel() -> None:
    """Register global providers for the enabled signals. Idempotent."""
    if _providers:
        return

    resource = _build_resource()
    headers = exporter_headers()

    if OTEL_TRACES_ENABLED:
        tracer_provider = _tracer_provider(resource, headers)
        trace.set_tracer_provider(tracer_provider)
        _providers.append(tracer_provider)
    if OTEL_METRICS_ENABLED:
        meter_provider = _meter_provider(resource, headers)
        metrics.set_meter_provider(meter_provider)
        _providers.append(meter_provider)

    logger.info(
        "OTel initialized: traces=%s metrics=%s",
        OTLP_TRACES_ENDPOINT if OTEL_TRACES_ENABLED else "off",
        OTLP_METRICS_ENDPOINT if OTEL_METRICS_ENABLED else "off",
    )


def shutdown_otel() -> None:
    """Flush and shut down registered providers. Idempotent."""
    while _providers:
        provider = _providers.pop()
        try:
            provider.force_flush()
            provider.shutdown()
        except Exception:  # noqa: BLE001
            logger.debug("OTel provider shutdown failed", exc_info=True)


__all__ = ["init_otel", "shutdown_otel", "parse_headers", "exporter_headers"]
