"""Wire vocabulary for filter buttons.

Trigger tokens are embedded in button ids and take the positional form::

    <command>|<action>|<dimension values...>|<context_id>

Stats and notables carry ``time|queue|size``; the leaderboard carries
``time|game|page``. The values below are the exact strings that appear in
those ids. Changing one breaks decoding of buttons still visible on older
responses (they fall back to the dimension default instead of erroring).
"""

from __future__ import annotations

import os

TRIGGER_TOKEN_DELIMITER = "|"
# command, action and context id surround the dimension values
TRIGGER_TOKEN_FIXED_FIELDS = 3
# Button ids are capped by the chat platform
TRIGGER_TOKEN_MAX_LEN = 100

STATS_COMMAND = "stats"
NOTABLES_COMMAND = "notables"
LEADERBOARD_COMMAND = "leaderboard"

# Trigger actions, one per enumerated dimension
TIME_ACTION = "time"
QUEUE_ACTION = "queue"
SIZE_ACTION = "players"
GAME_ACTION = "format"

# Pagination actions all target the page dimension
PAGE_FIRST_ACTION = "first"
PAGE_PREV_ACTION = "prev"
PAGE_NEXT_ACTION = "next"
PAGE_LAST_ACTION = "last"
PAGE_FIND_ACTION = "find"
PAGE_ACTIONS = (
    PAGE_FIRST_ACTION,
    PAGE_PREV_ACTION,
    PAGE_NEXT_ACTION,
    PAGE_LAST_ACTION,
    PAGE_FIND_ACTION,
)

TIME_VALUES = ("alltime", "weekly", "season")
QUEUE_VALUES = ("soloq", "squads", "both")
SIZE_VALUES = ("12p", "24p", "both")
GAME_VALUES = ("mkworld12p", "mkworld24p")

DEFAULT_TIME = "alltime"
DEFAULT_QUEUE = "both"
DEFAULT_SIZE = "both"
DEFAULT_GAME = "mkworld12p"
DEFAULT_PAGE = 1

LEADERBOARD_PAGE_SIZE = int(os.getenv("LEADERBOARD_PAGE_SIZE", "10"))
# Upper bound applied while decoding, before the real page count is known
LEADERBOARD_MAX_PAGE = int(os.getenv("LEADERBOARD_MAX_PAGE", "9999"))

# Snapshot fields a dimension change can drop
SNAPSHOT_RECORD_FIELD = "record"
SNAPSHOT_PROFILE_FIELD = "profile"

TIME_LABELS = {"alltime": "all time", "weekly": "past week", "season": "this season"}
QUEUE_LABELS = {"soloq": "soloq", "squads": "squads", "both": "both"}
SIZE_LABELS = {"12p": "12p", "24p": "24p", "both": "both"}
GAME_LABELS = {"mkworld12p": "12p", "mkworld24p": "24p"}
PAGE_LABELS = {
    PAGE_FIRST_ACTION: "≪",
    PAGE_PREV_ACTION: "◀",
    PAGE_NEXT_ACTION: "▶",
    PAGE_LAST_ACTION: "≫",
    PAGE_FIND_ACTION: "find me",
}

__all__ = [
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
    "PAGE_FIRST_ACTION",
    "PAGE_PREV_ACTION",
    "PAGE_NEXT_ACTION",
    "PAGE_LAST_ACTION",
    "PAGE_FIND_ACTION",
    "PAGE_ACTIONS",
    "TIME_VALUES",
    "QUEUE_VALUES",
    "SIZE_VALUES",
    "GAME_VALUES",
    "DEFAULT_TIME",
    "DEFAULT_QUEUE",
    "DEFAULT_SIZE",
    "DEFAULT_GAME",
    "DEFAULT_PAGE",
    "LEADERBOARD_PAGE_SIZE",
    "LEADERBOARD_MAX_PAGE",
    "SNAPSHOT_RECORD_FIELD",
    "SNAPSHOT_PROFILE_FIELD",
    "TIME_LABELS",
    "QUEUE_LABELS",
    "SIZE_LABELS",
    "GAME_LABELS",
    "PAGE_LABELS",
]
