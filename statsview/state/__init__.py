"""Centralized state dataclasses for the render-session controller.

This module re-exports all state definitions from their respective modules,
providing a single import point for state types.
"""

from .session import SessionRecord, UpstreamSnapshot
from .filters import (
    Dimension,
    FilterDimension,
    FilterState,
    GameFilter,
    LeaderboardState,
    PageDimension,
    QueueFilter,
    SizeFilter,
    TimeFilter,
    ViewState,
    GAME_DIMENSION,
    PAGE_DIMENSION,
    QUEUE_DIMENSION,
    SIZE_DIMENSION,
    TIME_DIMENSION,
)

__all__ = [
    "Dimension",
    "FilterDimension",
    "FilterState",
    "GameFilter",
    "LeaderboardState",
    "PageDimension",
    "QueueFilter",
    "SessionRecord",
    "SizeFilter",
    "TimeFilter",
    "UpstreamSnapshot",
    "ViewState",
    "GAME_DIMENSION",
    "PAGE_DIMENSION",
    "QUEUE_DIMENSION",
    "SIZE_DIMENSION",
    "TIME_DIMENSION",
]
