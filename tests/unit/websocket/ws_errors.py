"""Unit tests for websocket error frames."""

from __future__ import annotations

from statsview.errors import RateLimitError
from statsview.handlers.websocket.errors import build_error_payload, rate_limit_payload


def test_build_error_payload_basic() -> None:
    result = build_error_payload("unknown_view", "nope")
    assert result == {"type": "error", "error_code": "unknown_view", "message": "nope"}


def test_build_error_payload_merges_extra() -> None:
    result = build_error_payload("err", "msg", extra={"response_id": "m1"})
    assert result["response_id"] == "m1"
    assert result["error_code"] == "err"


def test_rate_limit_payload_rounds_retry_up() -> None:
    payload = rate_limit_payload(RateLimitError(retry_in=2.2, limit=20, window_seconds=10))
    assert payload["error_code"] == "message_rate_limited"
    assert payload["retry_in"] == 3
    assert "20 per 10 seconds" in payload["message"]


def test_rate_limit_payload_never_below_one_second() -> None:
    payload = rate_limit_payload(RateLimitError(retry_in=0.01, limit=5, window_seconds=1))
    assert payload["retry_in"] == 1
