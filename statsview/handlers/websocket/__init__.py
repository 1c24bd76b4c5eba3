"""WebSocket handler exports."""

from .manager import handle_websocket_connection
from .transport import WebSocketTransport

__all__ = [
    "handle_websocket_connection",
    "WebSocketTransport",
]
