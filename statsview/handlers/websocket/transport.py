"""ResponseTransport backed by WebSocket connections.

A response id is bound to the connection that opened it. Every dispatcher
call for that response becomes one JSON frame on that connection:

    controls        {"type": "controls", "response_id", "rows"}
    status          {"type": "status", "response_id", "message"}
    result          {"type": "result", "response_id", "content", "filename",
                     "image" (base64), "rows"}
    failure         {"type": "failure", "response_id", "message"}
    notice          {"type": "notice", "response_id", "message"}
    strip_controls  {"type": "strip_controls", "response_id"}

Calls for a response with no live owner (never bound, or its connection
closed) are dropped, so late renders and expiries are harmless.
"""

from __future__ import annotations

import base64
import logging
from typing import Any

from fastapi import WebSocket

from ...codec.controls import ControlRow, rows_to_payload
from ...sessions.ports import RenderOutput, ResponseTransport
from .helpers import safe_send_json

logger = logging.getLogger(__name__)


class WebSocketTransport(ResponseTransport):
    """Route response frames to the owning connection."""

    def __init__(self) -> None:
        self._owners: dict[str, WebSocket] = {}

    # ============================================================================
    # Ownership
    # ============================================================================
    def bind(self, response_id: str, ws: WebSocket) -> bool:
        """Make ``ws`` the owner of ``response_id``.

        Returns:
            False if another live connection already owns it.
        """
        owner = self._owners.get(response_id)
        if owner is not None and owner is not ws:
            return False
        self._owners[response_id] = ws
        return True

    def owns(self, response_id: str, ws: WebSocket) -> bool:
        return self._owners.get(response_id) is ws

    def release(self, response_id: str) -> None:
        self._owners.pop(response_id, None)

    def release_connection(self, ws: WebSocket) -> list[str]:
        """Drop every response owned by ``ws`` and return their ids."""
        released = [rid for rid, owner in self._owners.items() if owner is ws]
        for rid in released:
            del self._owners[rid]
        return released

    def __len__(self) -> int:
        return len(self._owners)

    # ============================================================================
    # ResponseTransport
    # ============================================================================
    async def show_controls(self, key: str, rows: list[ControlRow]) -> None:
        await self._send(key, {"type": "controls", "rows": rows_to_payload(rows)})

    async def show_status(self, key: str, message: str) -> None:
        await self._send(key, {"type": "status", "message": message})

    async def show_result(self, key: str, output: RenderOutput, rows: list[ControlRow]) -> None:
        await self._send(
            key,
            {
                "type": "result",
                "content": output.content,
                "filename": output.filename,
                "image": base64.b64encode(output.image).decode("ascii"),
                "rows": rows_to_payload(rows),
            },
        )

    async def show_failure(self, key: str, message: str) -> None:
        await self._send(key, {"type": "failure", "message": message})

    async def show_notice(self, key: str, message: str) -> None:
        await self._send(key, {"type": "notice", "message": message})

    async def strip_controls(self, key: str) -> None:
        await self._send(key, {"type": "strip_controls"})

    async def _send(self, key: str, payload: dict[str, Any]) -> bool:
        ws = self._owners.get(key)
        if ws is None:
            logger.debug("no live owner for %s, %s frame dropped", key, payload["type"])
            return False
        sent = await safe_send_json(ws, {**payload, "response_id": key})
        if not sent:
            self.release_connection(ws)
        return sent


__all__ = ["WebSocketTransport"]
