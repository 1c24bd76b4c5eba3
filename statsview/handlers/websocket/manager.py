"""Primary WebSocket connection handler.

One connection drives any number of responses. The handler:

1. Message Routing:
   - Control frames: ping/pong/end
   - open: bind a response id to this connection and render it once
   - trigger: forward a button press (and who pressed it) on an owned response
   - close: invalidate an owned response and strip its buttons

2. Rate Limiting:
   - One sliding-window limiter per connection for open/trigger/close

3. Concurrency:
   - Renders run as tasks so a second trigger on the same response can
     supersede the first while it is still in flight

4. Cleanup:
   - Releasing response ownership on disconnect; renders still in flight
     finish against a transport that drops their frames
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import uuid
from collections.abc import Awaitable, Callable, Coroutine, Mapping
from dataclasses import dataclass, field
from typing import Any

from fastapi import WebSocket, WebSocketDisconnect

from ...config import (
    STATS_COMMAND,
    WS_CLOSE_CLIENT_REQUEST_CODE,
    WS_MAX_MESSAGES_PER_WINDOW,
    WS_MESSAGE_WINDOW_SECONDS,
)
from ...errors import RateLimitError, ValidationError
from ...logging import log_context
from ...sessions.dispatcher import InteractionDispatcher
from ...state.filters import ViewState
from ...telemetry import capture_error, connection_span
from ..limits import SlidingWindowRateLimiter
from .errors import rate_limit_payload, send_error
from .helpers import safe_send_json
from .parser import parse_client_message, require_fields
from .transport import WebSocketTransport

logger = logging.getLogger(__name__)

# Liveness and teardown frames are never rate limited
_CONTROL_TYPES = frozenset({"ping", "pong", "end"})


@dataclass
class _Connection:
    """Per-connection bookkeeping."""

    ws: WebSocket
    client_id: str
    dispatchers: Mapping[str, InteractionDispatcher]
    transport: WebSocketTransport
    views: dict[str, str] = field(default_factory=dict)  # response_id -> view
    tasks: set[asyncio.Task[Any]] = field(default_factory=set)

    def spawn(self, coro: Coroutine[Any, Any, Any], *, name: str) -> None:
        task = asyncio.create_task(coro, name=name)
        self.tasks.add(task)
        task.add_done_callback(self._on_task_done)

    def _on_task_done(self, task: asyncio.Task[Any]) -> None:
        self.tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("task %s failed", task.get_name(), exc_info=exc)
            capture_error(exc, client_id=self.client_id)


def _initial_filters(dispatcher: InteractionDispatcher, raw: Any) -> ViewState | None:
    """Filters requested with ``open``; unknown values fall back to defaults."""
    if not isinstance(raw, dict):
        return None
    return dispatcher.codec.state_type(
        **{
            dimension.name: dimension.parse(str(raw.get(dimension.name, "")))
            for dimension in dispatcher.codec.dimensions
        }
    )


async def _handle_control_message(ws: WebSocket, msg_type: str) -> bool:
    """Process ping/pong/end frames; return True if the connection should close."""
    if msg_type == "ping":
        await safe_send_json(ws, {"type": "pong"})
        return False
    if msg_type == "end":
        logger.info("WS recv: end")
        await safe_send_json(ws, {"type": "connection_closed", "reason": "client_request"})
        await ws.close(code=WS_CLOSE_CLIENT_REQUEST_CODE)
        return True
    return False


async def _handle_open(conn: _Connection, msg: dict[str, Any]) -> None:
    view = msg.get("view") or STATS_COMMAND
    dispatcher = conn.dispatchers.get(view)
    if dispatcher is None:
        await send_error(
            conn.ws,
            error_code="unknown_view",
            message=f"View '{view}' is not served here.",
        )
        return

    response_id = msg["response_id"]
    if not conn.transport.bind(response_id, conn.ws):
        await send_error(
            conn.ws,
            error_code="response_in_use",
            message=f"Response '{response_id}' belongs to another connection.",
        )
        return

    conn.views[response_id] = view
    filters = _initial_filters(dispatcher, msg.get("filters"))
    logger.info("WS recv: open view=%s response_id=%s", view, response_id)
    conn.spawn(
        dispatcher.open_view(response_id, msg["context_id"], filters),
        name=f"open:{response_id}",
    )


async def _owned_view(conn: _Connection, response_id: str) -> str | None:
    view = conn.views.get(response_id)
    if view is None or not conn.transport.owns(response_id, conn.ws):
        await send_error(
            conn.ws,
            error_code="unknown_response",
            message=f"Response '{response_id}' was not opened on this connection.",
        )
        return None
    return view


async def _handle_trigger(conn: _Connection, msg: dict[str, Any]) -> None:
    response_id = msg["response_id"]
    view = await _owned_view(conn, response_id)
    if view is None:
        return
    # A button is decoded by its own response's view; foreign tokens are rejected there
    dispatcher = conn.dispatchers[view]
    logger.info("WS recv: trigger response_id=%s", response_id)
    conn.spawn(
        dispatcher.handle_trigger(
            response_id,
            msg["custom_id"],
            actor_id=msg.get("actor_id") or None,
        ),
        name=f"trigger:{response_id}",
    )


async def _handle_close(conn: _Connection, msg: dict[str, Any]) -> None:
    response_id = msg["response_id"]
    view = await _owned_view(conn, response_id)
    if view is None:
        return
    logger.info("WS recv: close response_id=%s", response_id)
    await conn.dispatchers[view].invalidate(response_id, strip_controls=True)
    conn.views.pop(response_id, None)
    conn.transport.release(response_id)


_MESSAGE_HANDLERS: dict[str, Callable[[_Connection, dict[str, Any]], Awaitable[None]]] = {
    "open": _handle_open,
    "trigger": _handle_trigger,
    "close": _handle_close,
}


async def handle_websocket_connection(
    ws: WebSocket,
    dispatchers: Mapping[str, InteractionDispatcher],
    transport: WebSocketTransport,
) -> None:
    """Serve one WebSocket connection until the client leaves.

    Args:
        ws: The incoming WebSocket connection from FastAPI.
        dispatchers: Dispatcher per view name.
        transport: Shared transport the dispatchers send through.
    """
    await ws.accept()
    client_id = uuid.uuid4().hex[:12]
    conn = _Connection(ws=ws, client_id=client_id, dispatchers=dispatchers, transport=transport)
    limiter = SlidingWindowRateLimiter(
        limit=WS_MAX_MESSAGES_PER_WINDOW,
        window_seconds=WS_MESSAGE_WINDOW_SECONDS,
    )

    with log_context(client_id=client_id), connection_span(client_id=client_id):
        logger.info("WebSocket connection accepted")
        try:
            while True:
                raw_msg = await ws.receive_text()
                try:
                    msg = parse_client_message(raw_msg)
                    require_fields(msg)
                except ValidationError as exc:
                    await send_error(ws, error_code=exc.error_code, message=exc.message)
                    continue
                except ValueError as exc:
                    await send_error(ws, error_code="invalid_message", message=str(exc))
                    continue

                msg_type = msg["type"]
                if msg_type not in _CONTROL_TYPES:
                    try:
                        limiter.consume()
                    except RateLimitError as err:
                        await safe_send_json(ws, rate_limit_payload(err))
                        continue

                if await _handle_control_message(ws, msg_type):
                    break
                if msg_type in _CONTROL_TYPES:
                    continue

                handler = _MESSAGE_HANDLERS.get(msg_type)
                if handler is None:
                    await send_error(
                        ws,
                        error_code="unknown_message_type",
                        message=f"Message type '{msg_type}' is not supported.",
                    )
                    continue
                await handler(conn, msg)
        except WebSocketDisconnect:
            pass
        except Exception as exc:  # noqa: BLE001
            logger.exception("WebSocket error")
            capture_error(exc, client_id=client_id)
            with contextlib.suppress(Exception):
                await send_error(ws, error_code="internal_error", message=str(exc))
        finally:
            released = transport.release_connection(ws)
            logger.info(
                "WebSocket connection closed: responses=%d renders_in_flight=%d",
                len(released),
                len(conn.tasks),
            )


__all__ = ["handle_websocket_connection"]
