"""WebSocket-specific runtime configuration values.

Rate Limits:
    WS_MESSAGE_WINDOW_SECONDS / WS_MAX_MESSAGES_PER_WINDOW bound how many
    open/trigger frames a single connection may send. Button mashing is the
    expected abuse; superseded renders are cheap to discard but each one
    still costs an upstream round trip when the snapshot is invalidated.

Close Codes (RFC 6455):
    1000: Normal closure (client requested)
    1008: Policy violation

Sentinel Values:
    Plain strings accepted instead of JSON for liveness and shutdown.
"""

from __future__ import annotations

import os

# ============================================================================
# Rate Limits
# ============================================================================

WS_MESSAGE_WINDOW_SECONDS = float(os.getenv("WS_MESSAGE_WINDOW_SECONDS", "10"))
WS_MAX_MESSAGES_PER_WINDOW = int(os.getenv("WS_MAX_MESSAGES_PER_WINDOW", "20"))

# ============================================================================
# WebSocket Close Codes
# ============================================================================

WS_CLOSE_POLICY_CODE = int(os.getenv("WS_CLOSE_POLICY_CODE", "1008"))
WS_CLOSE_CLIENT_REQUEST_CODE = int(os.getenv("WS_CLOSE_CLIENT_REQUEST_CODE", "1000"))

# ============================================================================
# Sentinel Values
# ============================================================================

WS_END_SENTINEL = os.getenv("WS_END_SENTINEL", "__END__")
WS_PING_SENTINEL = os.getenv("WS_PING_SENTINEL", "__PING__")

__all__ = [
    "WS_MESSAGE_WINDOW_SECONDS",
    "WS_MAX_MESSAGES_PER_WINDOW",
    "WS_CLOSE_POLICY_CODE",
    "WS_CLOSE_CLIENT_REQUEST_CODE",
    "WS_END_SENTINEL",
    "WS_PING_SENTINEL",
]
