"""Aggregator of configuration modules.

This module re-exports the config API from smaller modules:
- sessions: per-view session lifetimes
- filters: trigger token vocabulary and filter defaults
- messages: user-visible strings
- websocket: transport rate limits and close codes

Logging and telemetry settings are imported from their own modules by the
code that needs them.
"""

from .sessions import (
    STATS_SESSION_TTL_S,
    NOTABLES_SESSION_TTL_S,
    LEADERBOARD_SESSION_TTL_S,
)
from .filters import (
    TRIGGER_TOKEN_DELIMITER,
    TRIGGER_TOKEN_FIXED_FIELDS,
    TRIGGER_TOKEN_MAX_LEN,
    STATS_COMMAND,
    NOTABLES_COMMAND,
    LEADERBOARD_COMMAND,
    TIME_ACTION,
    QUEUE_ACTION,
    SIZE_ACTION,
    GAME_ACTION,
    PAGE_ACTIONS,
    LEADERBOARD_PAGE_SIZE,
    SNAPSHOT_RECORD_FIELD,
    SNAPSHOT_PROFILE_FIELD,
)
from .messages import (
    MSG_LOADING_RECORD,
    MSG_LOADING_PROFILE,
    MSG_NOT_FOUND,
    MSG_NO_MATCHING_DATA,
    MSG_RENDER_FAILED,
    MSG_EXPIRED_TRIGGER,
    MSG_INVALID_CONTEXT,
    MSG_NOT_LISTED,
    MSG_FIND_NEEDS_USER,
)
from .websocket import (
    WS_MESSAGE_WINDOW_SECONDS,
    WS_MAX_MESSAGES_PER_WINDOW,
    WS_CLOSE_POLICY_CODE,
    WS_CLOSE_CLIENT_REQUEST_CODE,
    WS_END_SENTINEL,
    WS_PING_SENTINEL,
)

__all__ = [
    "STATS_SESSION_TTL_S",
    "NOTABLES_SESSION_TTL_S",
    "LEADERBOARD_SESSION_TTL_S",
    "TRIGGER_TOKEN_DELIMITER",
    "TRIGGER_TOKEN_FIXED_FIELDS",
    "TRIGGER_TOKEN_MAX_LEN",
    "STATS_COMMAND",
    "NOTABLES_COMMAND",
    "LEADERBOARD_COMMAND",
    "TIME_ACTION",
    "QUEUE_ACTION",
    "SIZE_ACTION",
    "GAME_ACTION",
    "PAGE_ACTIONS",
    "LEADERBOARD_PAGE_SIZE",
    "SNAPSHOT_RECORD_FIELD",
    "SNAPSHOT_PROFILE_FIELD",
    "MSG_LOADING_RECORD",
    "MSG_LOADING_PROFILE",
    "MSG_NOT_FOUND",
    "MSG_NO_MATCHING_DATA",
    "MSG_RENDER_FAILED",
    "MSG_EXPIRED_TRIGGER",
    "MSG_INVALID_CONTEXT",
    "MSG_NOT_LISTED",
    "MSG_FIND_NEEDS_USER",
    "WS_MESSAGE_WINDOW_SECONDS",
    "WS_MAX_MESSAGES_PER_WINDOW",
    "WS_CLOSE_POLICY_CODE",
    "WS_CLOSE_CLIENT_REQUEST_CODE",
    "WS_END_SENTINEL",
    "WS_PING_SENTINEL",
]
