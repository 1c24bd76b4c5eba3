"""Session lifetime configuration.

Each interactive view keeps its SessionRecord in memory for a fixed idle
window. Every accepted render slides the window forward; once it lapses the
record is evicted and the response's filter buttons are stripped.

Environment Variables:
    STATS_SESSION_TTL_S: Idle lifetime of a stats view (default 10 minutes).
    NOTABLES_SESSION_TTL_S: Idle lifetime of a notables view (default 10 minutes).
    LEADERBOARD_SESSION_TTL_S: Idle lifetime of a leaderboard view (default 10 minutes).
"""

from __future__ import annotations

import os

STATS_SESSION_TTL_S = float(os.getenv("STATS_SESSION_TTL_S", "600"))
NOTABLES_SESSION_TTL_S = float(os.getenv("NOTABLES_SESSION_TTL_S", "600"))
LEADERBOARD_SESSION_TTL_S = float(os.getenv("LEADERBOARD_SESSION_TTL_S", "600"))

__all__ = [
    "STATS_SESSION_TTL_S",
    "NOTABLES_SESSION_TTL_S",
    "LEADERBOARD_SESSION_TTL_S",
]
