"""Logging context helpers for consistent structured fields.

Render cycles interleave on one event loop, so a plain log line cannot tell
which response or which render produced it. Each field below lives in its
own ContextVar, follows each asyncio task independently, and is copied onto
every LogRecord once :func:`install_log_context` has run.

Fields:
    response_id  the outward-facing response a session is bound to
    render_id    ``<response_id>#<generation>`` of the render cycle
    client_id    the WebSocket connection that sent the frame
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar, Token

_UNSET = "-"

_FIELDS: dict[str, ContextVar[str]] = {
    name: ContextVar(name, default=_UNSET) for name in ("response_id", "render_id", "client_id")
}

_ContextTokens = list[tuple[ContextVar[str], Token[str]]]


def set_log_context(**fields: str | None) -> _ContextTokens:
    """Set the given fields and return tokens for :func:`reset_log_context`.

    Fields passed as None are left untouched.

    Raises:
        KeyError: For a field name that is not a known log field.
    """
    tokens: _ContextTokens = []
    for name, value in fields.items():
        if value is None:
            continue
        var = _FIELDS[name]
        tokens.append((var, var.set(value)))
    return tokens


def reset_log_context(tokens: _ContextTokens) -> None:
    for var, token in reversed(tokens):
        var.reset(token)


def current_log_context() -> dict[str, str]:
    """Snapshot of every field in the calling task."""
    return {name: var.get() for name, var in _FIELDS.items()}


@contextmanager
def log_context(
    *,
    response_id: str | None = None,
    render_id: str | None = None,
    client_id: str | None = None,
) -> Iterator[None]:
    """Apply log fields for the duration of a block."""
    tokens = set_log_context(response_id=response_id, render_id=render_id, client_id=client_id)
    try:
        yield
    finally:
        reset_log_context(tokens)


def install_log_context() -> None:
    """Install a LogRecord factory that stamps the context fields. Idempotent."""
    if getattr(install_log_context, "_installed", False):
        return

    previous = logging.getLogRecordFactory()

    def record_factory(*args, **kwargs):
        record = previous(*args, **kwargs)
        for name, value in current_log_context().items():
            setattr(record, name, value)
        return record

    logging.setLogRecordFactory(record_factory)
    install_log_context._installed = True  # type: ignore[attr-defined]


def configure_logging() -> None:
    """Initialize root logging once per process.

    When the host (uvicorn, a test runner) already attached handlers they are
    kept and only re-levelled, with our formatter swapped in so the context
    fields show up.
    """
    from statsview.config.logging import APP_LOG_DATEFMT, APP_LOG_FORMAT, APP_LOG_LEVEL  # noqa: PLC0415

    install_log_context()
    root_logger = logging.getLogger()
    if root_logger.handlers:
        formatter = logging.Formatter(APP_LOG_FORMAT, datefmt=APP_LOG_DATEFMT)
        root_logger.setLevel(APP_LOG_LEVEL)
        for handler in root_logger.handlers:
            handler.setLevel(APP_LOG_LEVEL)
            handler.setFormatter(formatter)
    else:
        logging.basicConfig(level=APP_LOG_LEVEL, format=APP_LOG_FORMAT, datefmt=APP_LOG_DATEFMT)

    logging.getLogger("statsview").setLevel(APP_LOG_LEVEL)


__all__ = [
    "install_log_context",
    "log_context",
    "current_log_context",
    "reset_log_context",
    "set_log_context",
    "configure_logging",
]
