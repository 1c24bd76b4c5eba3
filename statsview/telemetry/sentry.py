"""Sentry error capture for render cycles and connections.

Only failures that reach a user as a generic message (or that break an
eviction hook or a connection task) are worth an event. Conditions the
dispatcher already explains to the user, such as an unknown context or an
empty filter result, are filtered out in ``before_send`` so callers never
need to think about it.

A given error class is reported at most once per ``SENTRY_RATE_LIMIT_S``:
a broken stats provider fails every render on every response at once.
"""

from __future__ import annotations

import time
import logging
from typing import Any
from collections.abc import Callable

import sentry_sdk

from ..errors import classify_error
from ..logging import current_log_context
from ..config.telemetry import (
    SENTRY_DSN,
    SENTRY_RELEASE,
    SENTRY_ENVIRONMENT,
    SENTRY_SAMPLE_RATE,
    SENTRY_RATE_LIMIT_S,
    SENTRY_IGNORED_CATEGORIES,
)

logger = logging.getLogger(__name__)

_last_reported: dict[str, float] = {}
_initialized: bool = False


def _before_send(event: dict[str, Any], hint: dict[str, Any]) -> dict[str, Any] | None:
    exc_info = hint.get("exc_info")
    if exc_info and classify_error(exc_info[1]) in SENTRY_IGNORED_CATEGORIES:
        return None
    return event


def init_sentry() -> None:
    """Initialize the Sentry SDK. Idempotent."""
    global _initialized  # noqa: PLW0603
    if _initialized:
        return

    options: dict[str, Any] = {
        "dsn": SENTRY_DSN,
        "environment": SENTRY_ENVIRONMENT,
        "sample_rate": SENTRY_SAMPLE_RATE,
        "traces_sample_rate": 0.0,
        "attach_stacktrace": True,
        "before_send": _before_send,
    }
    if SENTRY_RELEASE:
        options["release"] = SENTRY_RELEASE

    sentry_sdk.init(**options)
    _initialized = True
    logger.info("Sentry initialized: environment=%s", SENTRY_ENVIRONMENT)


def shutdown_sentry() -> None:
    """Flush pending events. Idempotent."""
    global _initialized  # noqa: PLW0603
    if not _initialized:
        return
    try:
        sentry_sdk.flush(timeout=2.0)
    except Exception:  # noqa: BLE001
        logger.debug("Sentry flush failed", exc_info=True)
    _initialized = False
    _last_reported.clear()


def should_report(error: BaseException, *, now_fn: Callable[[], float] = time.monotonic) -> bool:
    """Per-class rate limit; records the attempt when it passes."""
    key = type(error).__qualname__
    now = now_fn()
    last = _last_reported.get(key)
    if last is not None and (now - last) < SENTRY_RATE_LIMIT_S:
        return False
    _last_reported[key] = now
    return True


def capture_error(
    error: BaseException,
    *,
    response_id: str | None = None,
    render_id: str | None = None,
    client_id: str | None = None,
    extra: dict[str, Any] | None = None,
) -> None:
    """Report ``error`` tagged with the current log context.

    Explicit ids override whatever the calling task's log context holds.
    No-op while Sentry is disabled.
    """
    if not _initialized or not should_report(error):
        return

    tags = current_log_context()
    overrides = {"response_id": response_id, "render_id": render_id, "client_id": client_id}
    tags.update({name: value for name, value in overrides.items() if value is not None})

    with sentry_sdk.new_scope() as scope:
        for name, value in tags.items():
            scope.set_tag(name, value)
        scope.set_tag("error.category", classify_error(error))
        for name, value in (extra or {}).items():
            scope.set_extra(name, value)
        sentry_sdk.capture_exception(error)


def add_breadcrumb(
    message: str,
    *,
    category: str,
    level: str = "info",
    data: dict[str, Any] | None = None,
) -> None:
    """Add a Sentry breadcrumb. No-op when Sentry is disabled."""
    if not _initialized:
        return
    sentry_sdk.add_breadcrumb(message=message, category=category, level=level, data=data or {})


__all__ = ["init_sentry", "shutdown_sentry", "should_report", "capture_error", "add_breadcrumb"]
