"""Unit tests for telemetry helpers that do not need a collector."""

from __future__ import annotations

import sys

from statsview.errors import NoMatchingDataError, UpstreamNotFoundError, UpstreamUnavailableError
from statsview.telemetry import sentry
from statsview.telemetry.otel import parse_headers
from tests.helpers.sessions import FakeClock


def test_parse_headers_skips_junk() -> None:
    assert parse_headers("") == {}
    assert parse_headers("x-dataset=stats, Authorization = Bearer t ,junk,=v") == {
        "x-dataset": "stats",
        "Authorization": "Bearer t",
    }


def test_should_report_rate_limits_per_class() -> None:
    sentry._last_reported.clear()
    clock = FakeClock()
    assert sentry.should_report(RuntimeError("a"), now_fn=clock) is True
    assert sentry.should_report(RuntimeError("b"), now_fn=clock) is False
    assert sentry.should_report(ValueError("c"), now_fn=clock) is True
    clock.advance(sentry.SENTRY_RATE_LIMIT_S)
    assert sentry.should_report(RuntimeError("d"), now_fn=clock) is True
    sentry._last_reported.clear()


def _hint(exc: BaseException) -> dict:
    try:
        raise exc
    except BaseException:  # noqa: BLE001
        return {"exc_info": sys.exc_info()}


def test_before_send_drops_user_explained_errors() -> None:
    event = {"event_id": "e1"}
    assert sentry._before_send(event, _hint(UpstreamNotFoundError("42"))) is None
    assert sentry._before_send(event, _hint(NoMatchingDataError())) is None
    assert sentry._before_send(event, _hint(UpstreamUnavailableError("down"))) is event
    assert sentry._before_send(event, {}) is event


def test_capture_error_is_noop_when_disabled() -> None:
    assert sentry._initialized is False
    sentry.capture_error(RuntimeError("boom"), response_id="m1")
    assert sentry._last_reported == {}
