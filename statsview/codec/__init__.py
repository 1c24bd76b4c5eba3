"""Trigger token codec and filter button rows."""

from .filters import (
    FilterStateCodec,
    TriggerIntent,
    STATS_DIMENSIONS,
    NOTABLES_DIMENSIONS,
    LEADERBOARD_DIMENSIONS,
    stats_codec,
    notables_codec,
    leaderboard_codec,
)
from .controls import Control, ControlRow, build_control_rows, rows_to_payload

__all__ = [
    "FilterStateCodec",
    "TriggerIntent",
    "STATS_DIMENSIONS",
    "NOTABLES_DIMENSIONS",
    "LEADERBOARD_DIMENSIONS",
    "stats_codec",
    "notables_codec",
    "leaderboard_codec",
    "Control",
    "ControlRow",
    "build_control_rows",
    "rows_to_payload",
]
