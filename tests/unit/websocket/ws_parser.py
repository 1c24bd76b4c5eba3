"""Unit tests for client frame parsing."""

from __future__ import annotations

import json

import pytest

from statsview.config.websocket import WS_END_SENTINEL, WS_PING_SENTINEL
from statsview.errors import ValidationError
from statsview.handlers.websocket.parser import parse_client_message, require_fields


def test_sentinels_map_to_control_types() -> None:
    assert parse_client_message(WS_PING_SENTINEL) == {"type": "ping"}
    assert parse_client_message(f"  {WS_END_SENTINEL}\n") == {"type": "end"}


def test_type_is_normalized_and_ids_coerced() -> None:
    msg = parse_client_message(json.dumps({"type": " Open ", "response_id": 991, "context_id": 42}))
    assert msg == {"type": "open", "response_id": "991", "context_id": "42"}


def test_trigger_actor_id_is_coerced() -> None:
    msg = parse_client_message(json.dumps({"type": "trigger", "response_id": "m1", "custom_id": "x", "actor_id": 7}))
    assert msg["actor_id"] == "7"


@pytest.mark.parametrize("raw", ["", "   ", "{not json", "[1, 2]", '{"response_id": "m1"}'])
def test_unusable_frames_raise_value_error(raw: str) -> None:
    with pytest.raises(ValueError):
        parse_client_message(raw)


def test_require_fields_per_type() -> None:
    require_fields({"type": "trigger", "response_id": "m1", "custom_id": "stats|time|weekly|both|both|42"})
    require_fields({"type": "ping"})
    with pytest.raises(ValidationError) as exc_info:
        require_fields({"type": "open", "response_id": "m1"})
    assert exc_info.value.error_code == "missing_field"
    assert "context_id" in exc_info.value.message
