"""Error frames for the WebSocket handler.

Every error sent to a client has the same shape::

    {
        "type": "error",
        "error_code": "message_rate_limited",   # machine-readable
        "message": "Human-readable description",
        ...extra fields
    }

Error codes used by the handler:
    - invalid_message: Malformed JSON or missing type
    - missing_field: A frame lacks a field its type needs
    - unknown_message_type: Unrecognized frame type
    - unknown_view: ``open`` names a view no dispatcher serves
    - unknown_response: Frame addresses a response this connection never opened
    - response_in_use: ``open`` reuses a response id owned elsewhere
    - message_rate_limited: Too many frames per window (carries ``retry_in``)
    - internal_error: Unexpected server error
"""

from __future__ import annotations

import math
from typing import Any

from fastapi import WebSocket

from ...errors import RateLimitError
from .helpers import safe_send_json


def build_error_payload(
    error_code: str,
    message: str,
    *,
    extra: dict[str, Any] | None = None,
) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "type": "error",
        "error_code": error_code,
        "message": message,
    }
    if extra:
        payload.update(extra)
    return payload


async def send_error(
    ws: WebSocket,
    *,
    error_code: str,
    message: str,
    extra: dict[str, Any] | None = None,
) -> bool:
    """Send a structured error frame; False if the client is gone."""
    return await safe_send_json(ws, build_error_payload(error_code, message, extra=extra))


def rate_limit_payload(err: RateLimitError) -> dict[str, Any]:
    """Error frame for a saturated limiter, ``retry_in`` rounded up to whole seconds."""
    retry_in = int(max(1, math.ceil(err.retry_in)))
    return build_error_payload(
        "message_rate_limited",
        (
            f"message rate limit: at most {err.limit} per {int(err.window_seconds)} seconds; "
            f"retry in {retry_in} seconds"
        ),
        extra={"retry_in": retry_in},
    )


__all__ = ["build_error_payload", "send_error", "rate_limit_payload"]
