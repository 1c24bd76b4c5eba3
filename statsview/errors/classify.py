"""Exception classification helpers for metrics and telemetry labels."""

from __future__ import annotations

from .limits import RateLimitError
from .render import NoMatchingDataError
from .upstream import UpstreamNotFoundError, UpstreamUnavailableError
from .validation import MalformedTriggerError, ValidationError

ERROR_CATEGORIES: tuple[tuple[type[BaseException], str], ...] = (
    (MalformedTriggerError, "malformed_trigger"),
    (ValidationError, "validation"),
    (RateLimitError, "rate_limit"),
    (UpstreamNotFoundError, "not_found"),
    (UpstreamUnavailableError, "upstream_unavailable"),
    (NoMatchingDataError, "no_matching_data"),
    (TimeoutError, "timeout"),
    (ConnectionError, "connection"),
)


def classify_error(exc: BaseException) -> str:
    """Map an exception to a metric-friendly category label."""
    for cls, label in ERROR_CATEGORIES:
        if isinstance(exc, cls):
            return label
    return "unknown"


__all__ = ["ERROR_CATEGORIES", "classify_error"]
