"""Safe send helpers for WebSocket frames.

Responses outlive the connection that opened them: a render may finish, or a
session may expire, after the client went away. Sends therefore report
failure instead of raising.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from fastapi import WebSocket, WebSocketDisconnect

logger = logging.getLogger(__name__)


async def safe_send_text(ws: WebSocket, text: str) -> bool:
    """Send text to the client, returning False if the socket is gone."""
    try:
        await ws.send_text(text)
    except WebSocketDisconnect:
        logger.info("WebSocket disconnected while sending %s bytes", len(text))
        return False
    except RuntimeError:
        # Starlette refuses sends after the close frame went out
        logger.debug("send after close dropped (%s bytes)", len(text))
        return False
    return True


async def safe_send_json(ws: WebSocket, payload: dict[str, Any]) -> bool:
    return await safe_send_text(ws, json.dumps(payload))


__all__ = ["safe_send_text", "safe_send_json"]
