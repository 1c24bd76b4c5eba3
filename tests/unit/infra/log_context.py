"""Unit tests for contextvar-backed log fields."""

from __future__ import annotations

import asyncio
import logging

import pytest

from statsview.logging import current_log_context, install_log_context, log_context, set_log_context


def _record() -> logging.LogRecord:
    return logging.getLogRecordFactory()("statsview", logging.INFO, __file__, 1, "msg", None, None)


def test_fields_default_to_dash() -> None:
    install_log_context()
    record = _record()
    assert (record.response_id, record.render_id, record.client_id) == ("-", "-", "-")


def test_log_context_scopes_fields() -> None:
    install_log_context()
    with log_context(response_id="m1", render_id="r7"):
        inner = _record()
        with log_context(client_id="c1"):
            nested = _record()
    outer = _record()
    assert (inner.response_id, inner.render_id, inner.client_id) == ("m1", "r7", "-")
    assert nested.client_id == "c1"
    assert nested.response_id == "m1"
    assert outer.response_id == "-"


def test_tasks_keep_their_own_fields() -> None:
    install_log_context()

    async def _capture(response_id: str) -> str:
        with log_context(response_id=response_id):
            await asyncio.sleep(0)
            return _record().response_id

    async def _run() -> list[str]:
        return await asyncio.gather(_capture("m1"), _capture("m2"))

    assert asyncio.run(_run()) == ["m1", "m2"]


def test_current_log_context_snapshot() -> None:
    with log_context(client_id="c9"):
        assert current_log_context() == {"response_id": "-", "render_id": "-", "client_id": "c9"}


def test_unknown_field_is_rejected() -> None:
    with pytest.raises(KeyError):
        set_log_context(session_id="s1")
