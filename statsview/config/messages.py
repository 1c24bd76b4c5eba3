"""User-visible strings surfaced on responses."""

import os

MSG_LOADING_RECORD = os.getenv("MSG_LOADING_RECORD", "getting mogis...")
MSG_LOADING_PROFILE = os.getenv("MSG_LOADING_PROFILE", "loading favorites...")
MSG_NOT_FOUND = os.getenv("MSG_NOT_FOUND", "couldn't find that player in mkw lounge.")
MSG_NO_MATCHING_DATA = os.getenv(
    "MSG_NO_MATCHING_DATA",
    "no events found matching the specified filters.",
)
MSG_RENDER_FAILED = os.getenv(
    "MSG_RENDER_FAILED",
    "something went wrong while loading stats. please try again later.",
)
MSG_EXPIRED_TRIGGER = os.getenv(
    "MSG_EXPIRED_TRIGGER",
    "this button has expired. run the command again to get fresh stats.",
)
MSG_INVALID_CONTEXT = os.getenv(
    "MSG_INVALID_CONTEXT",
    "that id can't be used for an interactive view.",
)
MSG_NOT_LISTED = os.getenv(
    "MSG_NOT_LISTED",
    "you're not present on this leaderboard for the selected filters.",
)
MSG_FIND_NEEDS_USER = os.getenv(
    "MSG_FIND_NEEDS_USER",
    "couldn't tell who pressed that button. please try again.",
)

__all__ = [
    "MSG_LOADING_RECORD",
    "MSG_LOADING_PROFILE",
    "MSG_NOT_FOUND",
    "MSG_NO_MATCHING_DATA",
    "MSG_RENDER_FAILED",
    "MSG_EXPIRED_TRIGGER",
    "MSG_INVALID_CONTEXT",
    "MSG_NOT_LISTED",
    "MSG_FIND_NEEDS_USER",
]
