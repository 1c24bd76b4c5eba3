"""Telemetry configuration: env vars, metric specs, span names, Sentry constants."""

import os

# ---------------------------------------------------------------------------
# Sentry
# ---------------------------------------------------------------------------
SENTRY_DSN: str = os.getenv("SENTRY_DSN", "")
SENTRY_ENVIRONMENT: str = os.getenv("SENTRY_ENVIRONMENT", "production")
SENTRY_RELEASE: str = os.getenv("SENTRY_RELEASE", "")
SENTRY_SAMPLE_RATE: float = float(os.getenv("SENTRY_SAMPLE_RATE", "1.0"))

# ---------------------------------------------------------------------------
# OTLP export (HTTP/protobuf)
# ---------------------------------------------------------------------------
# Base collector URL; OTel stays off while it is empty
OTLP_ENDPOINT: str = os.getenv("OTLP_ENDPOINT", "").rstrip("/")
OTLP_TRACES_ENDPOINT: str = os.getenv("OTLP_TRACES_ENDPOINT", f"{OTLP_ENDPOINT}/v1/traces")
OTLP_METRICS_ENDPOINT: str = os.getenv("OTLP_METRICS_ENDPOINT", f"{OTLP_ENDPOINT}/v1/metrics")
OTLP_API_TOKEN: str = os.getenv("OTLP_API_TOKEN", "")
# Extra exporter headers as "name=value,name=value"
OTLP_HEADERS: str = os.getenv("OTLP_HEADERS", "")
OTLP_ENVIRONMENT: str = os.getenv("OTLP_ENVIRONMENT", "production")
OTEL_TRACES_ENABLED: bool = os.getenv("OTEL_TRACES_ENABLED", "1") == "1"
OTEL_METRICS_ENABLED: bool = os.getenv("OTEL_METRICS_ENABLED", "1") == "1"

# ---------------------------------------------------------------------------
# OTel tuning
# ---------------------------------------------------------------------------
OTEL_SERVICE_NAME: str = os.getenv("OTEL_SERVICE_NAME", "statsview")
OTEL_TRACES_EXPORT_INTERVAL_MS: int = int(os.getenv("OTEL_TRACES_EXPORT_INTERVAL_MS", "5000"))
OTEL_METRICS_EXPORT_INTERVAL_MS: int = int(os.getenv("OTEL_METRICS_EXPORT_INTERVAL_MS", "15000"))
OTEL_TRACES_BATCH_SIZE: int = int(os.getenv("OTEL_TRACES_BATCH_SIZE", "512"))

# ---------------------------------------------------------------------------
# Metric spec tuples: (name, unit, description)
# ---------------------------------------------------------------------------

# Histograms
METRIC_RENDER_LATENCY = ("statsview.render_latency", "s", "Render cycle duration")

# Counters
METRIC_RENDERS_STARTED_TOTAL = ("statsview.renders_started_total", "{render}", "Render cycles begun")
METRIC_RENDERS_APPLIED_TOTAL = ("statsview.renders_applied_total", "{render}", "Render results applied")
METRIC_RENDERS_DISCARDED_TOTAL = (
    "statsview.renders_discarded_total",
    "{render}",
    "Superseded render results dropped",
)
METRIC_RENDER_FAILURES_TOTAL = ("statsview.render_failures_total", "{render}", "Failed render cycles")
METRIC_SESSIONS_OPENED_TOTAL = ("statsview.sessions_opened_total", "{session}", "Sessions seeded")
METRIC_SESSIONS_EVICTED_TOTAL = ("statsview.sessions_evicted_total", "{session}", "Sessions expired")
METRIC_EVICTION_HOOK_FAILURES_TOTAL = (
    "statsview.eviction_hook_failures_total",
    "{failure}",
    "Eviction callbacks that raised",
)
METRIC_INVALID_TRIGGERS_TOTAL = ("statsview.invalid_triggers_total", "{trigger}", "Malformed trigger tokens")

# UpDown counters
METRIC_ACTIVE_RENDERS = ("statsview.active_renders", "{render}", "Render cycles in flight")

# ---------------------------------------------------------------------------
# Span names
# ---------------------------------------------------------------------------
SPAN_RENDER = "statsview.render"
SPAN_CONNECTION = "statsview.connection"

# ---------------------------------------------------------------------------
# Sentry constants
# ---------------------------------------------------------------------------
SENTRY_RATE_LIMIT_S: float = 10.0
# Error categories the user already sees explained; never sent to Sentry
SENTRY_IGNORED_CATEGORIES: frozenset[str] = frozenset(
    {"malformed_trigger", "validation", "rate_limit", "not_found", "no_matching_data"}
)


__all__ = [
    # Sentry env
    "SENTRY_DSN",
    "SENTRY_ENVIRONMENT",
    "SENTRY_RELEASE",
    "SENTRY_SAMPLE_RATE",
    # OTLP env
    "OTLP_ENDPOINT",
    "OTLP_TRACES_ENDPOINT",
    "OTLP_METRICS_ENDPOINT",
    "OTLP_API_TOKEN",
    "OTLP_HEADERS",
    "OTLP_ENVIRONMENT",
    "OTEL_TRACES_ENABLED",
    "OTEL_METRICS_ENABLED",
    # OTel tuning
    "OTEL_SERVICE_NAME",
    "OTEL_TRACES_EXPORT_INTERVAL_MS",
    "OTEL_METRICS_EXPORT_INTERVAL_MS",
    "OTEL_TRACES_BATCH_SIZE",
    # Histograms
    "METRIC_RENDER_LATENCY",
    # Counters
    "METRIC_RENDERS_STARTED_TOTAL",
    "METRIC_RENDERS_APPLIED_TOTAL",
    "METRIC_RENDERS_DISCARDED_TOTAL",
    "METRIC_RENDER_FAILURES_TOTAL",
    "METRIC_SESSIONS_OPENED_TOTAL",
    "METRIC_SESSIONS_EVICTED_TOTAL",
    "METRIC_EVICTION_HOOK_FAILURES_TOTAL",
    "METRIC_INVALID_TRIGGERS_TOTAL",
    # UpDown counters
    "METRIC_ACTIVE_RENDERS",
    # Span names
    "SPAN_RENDER",
    "SPAN_CONNECTION",
    # Sentry constants
    "SENTRY_RATE_LIMIT_S",
    "SENTRY_IGNORED_CATEGORIES",
]
