"""Client frame parsing for the WebSocket handler."""

from __future__ import annotations

import json
from typing import Any

from ...config.websocket import WS_END_SENTINEL, WS_PING_SENTINEL
from ...errors import ValidationError

# Fields coerced to strings so numeric ids from clients compare equal
_ID_FIELDS = ("response_id", "context_id", "custom_id", "view", "actor_id")

# Fields each frame type must carry
REQUIRED_FIELDS: dict[str, tuple[str, ...]] = {
    "open": ("response_id", "context_id"),
    "trigger": ("response_id", "custom_id"),
    "close": ("response_id",),
}


def parse_client_message(raw: str) -> dict[str, Any]:
    """Normalize a client frame into a dict with a lower-cased ``type``.

    Raises:
        ValueError: If the frame is empty, not JSON or lacks a type.
    """
    text = (raw or "").strip()
    if not text:
        raise ValueError("Empty message.")

    if text == WS_PING_SENTINEL:
        return {"type": "ping"}
    if text == WS_END_SENTINEL:
        return {"type": "end"}

    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValueError("Message must be valid JSON or a sentinel string.") from exc

    if not isinstance(data, dict):
        raise ValueError("Message must be a JSON object.")

    msg_type = data.get("type")
    if not msg_type:
        raise ValueError("Missing 'type' in message.")

    data["type"] = str(msg_type).strip().lower()
    for name in _ID_FIELDS:
        if data.get(name) is not None:
            data[name] = str(data[name]).strip()
    return data


def require_fields(msg: dict[str, Any]) -> None:
    """Check that ``msg`` carries every field its type needs.

    Raises:
        ValidationError: With code ``missing_field`` naming the first gap.
    """
    for name in REQUIRED_FIELDS.get(msg.get("type", ""), ()):
        if not msg.get(name):
            raise ValidationError(
                "missing_field",
                f"{msg['type']} message must include '{name}'.",
            )


__all__ = ["REQUIRED_FIELDS", "parse_client_message", "require_fields"]
