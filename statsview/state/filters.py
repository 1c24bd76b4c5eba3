"""Filter state value types.

A view state is the tuple of independent dimensions a view is rendered
with. It is immutable and compared by value only; there is no ordering
between states. Stats and notables views use FilterState; the leaderboard
uses LeaderboardState, whose page dimension is an integer rather than an
enumeration.

Enum member names describe the choice, enum values are the strings that
travel inside button ids (see ``config/filters.py``).
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace as _replace
from enum import Enum
from typing import Any

from ..config.filters import (
    DEFAULT_GAME,
    DEFAULT_PAGE,
    DEFAULT_QUEUE,
    DEFAULT_SIZE,
    DEFAULT_TIME,
    GAME_ACTION,
    GAME_LABELS,
    LEADERBOARD_MAX_PAGE,
    PAGE_ACTIONS,
    PAGE_FIND_ACTION,
    PAGE_LABELS,
    QUEUE_ACTION,
    QUEUE_LABELS,
    SIZE_ACTION,
    SIZE_LABELS,
    TIME_ACTION,
    TIME_LABELS,
)


class TimeFilter(str, Enum):
    ALL = "alltime"
    WEEKLY = "weekly"
    SEASON = "season"


class QueueFilter(str, Enum):
    SOLO = "soloq"
    GROUP = "squads"
    BOTH = "both"


class SizeFilter(str, Enum):
    SMALL = "12p"
    LARGE = "24p"
    BOTH = "both"


class GameFilter(str, Enum):
    TWELVE = "mkworld12p"
    TWENTY_FOUR = "mkworld24p"


def _wire(value: Any) -> str:
    return value.value if isinstance(value, Enum) else str(value)


class ViewState:
    """Shared behaviour of the frozen view-state dataclasses."""

    __slots__ = ()

    def replace(self, dimension: str, value: Any) -> Any:
        """Return a copy with one dimension changed."""
        return _replace(self, **{dimension: value})

    def as_wire(self) -> dict[str, str]:
        return {field.name: _wire(getattr(self, field.name)) for field in fields(self)}


@dataclass(frozen=True, slots=True)
class FilterState(ViewState):
    """Immutable filter tuple: time window x queue type x room size."""

    time: TimeFilter = TimeFilter(DEFAULT_TIME)
    queue: QueueFilter = QueueFilter(DEFAULT_QUEUE)
    size: SizeFilter = SizeFilter(DEFAULT_SIZE)


@dataclass(frozen=True, slots=True)
class LeaderboardState(ViewState):
    """Leaderboard position: time window x game format x 1-based page."""

    time: TimeFilter = TimeFilter(DEFAULT_TIME)
    game: GameFilter = GameFilter(DEFAULT_GAME)
    page: int = DEFAULT_PAGE


@dataclass(frozen=True, slots=True)
class FilterDimension:
    """Static description of one enumerated filter dimension.

    Attributes:
        name: Attribute name on the view state.
        action: Trigger action that targets this dimension.
        enum: Enum type holding the legal values.
        default: Value used when a token carries an unknown or empty value.
        labels: Button label per wire value.
        invalidates: Snapshot fields dropped whenever this dimension changes.
        resets: Other dimensions returned to their default when this one is
            targeted by a trigger.
    """

    name: str
    action: str
    enum: type[Enum]
    default: Enum
    labels: dict[str, str]
    invalidates: frozenset[str] = frozenset()
    resets: frozenset[str] = frozenset()

    @property
    def actions(self) -> tuple[str, ...]:
        return (self.action,)

    @property
    def max_wire_len(self) -> int:
        return max(len(member.value) for member in self.enum)

    def parse(self, raw: str | None) -> Enum:
        """Validate a wire value, falling back to the default."""
        value = (raw or "").strip().lower()
        try:
            return self.enum(value)
        except ValueError:
            return self.default

    def wire(self, value: Enum) -> str:
        return value.value


@dataclass(frozen=True, slots=True)
class PageDimension:
    """1-based page number of a paginated view.

    Several actions target the page (first, prev, next, last, find). The
    value a token carries is already the page the button leads to, except
    for ``find_action`` whose page is resolved from the listing at render
    time. Decoding only bounds the page to ``[1, max_page]``; the dispatcher
    clamps it to the real page count once the listing is known.
    """

    name: str = "page"
    actions: tuple[str, ...] = PAGE_ACTIONS
    find_action: str = PAGE_FIND_ACTION
    default: int = DEFAULT_PAGE
    max_page: int = LEADERBOARD_MAX_PAGE
    labels: dict[str, str] | None = None
    invalidates: frozenset[str] = frozenset()
    resets: frozenset[str] = frozenset()

    @property
    def max_wire_len(self) -> int:
        return len(str(self.max_page))

    def parse(self, raw: str | None) -> int:
        try:
            page = int((raw or "").strip())
        except ValueError:
            return self.default
        return self.clamp(page, self.max_page)

    def wire(self, value: int) -> str:
        return str(value)

    @staticmethod
    def clamp(page: int, page_count: int) -> int:
        return min(max(1, page), max(1, page_count))


TIME_DIMENSION = FilterDimension(
    name="time",
    action=TIME_ACTION,
    enum=TimeFilter,
    default=TimeFilter(DEFAULT_TIME),
    labels=TIME_LABELS,
)
QUEUE_DIMENSION = FilterDimension(
    name="queue",
    action=QUEUE_ACTION,
    enum=QueueFilter,
    default=QueueFilter(DEFAULT_QUEUE),
    labels=QUEUE_LABELS,
)
SIZE_DIMENSION = FilterDimension(
    name="size",
    action=SIZE_ACTION,
    enum=SizeFilter,
    default=SizeFilter(DEFAULT_SIZE),
    labels=SIZE_LABELS,
)
GAME_DIMENSION = FilterDimension(
    name="game",
    action=GAME_ACTION,
    enum=GameFilter,
    default=GameFilter(DEFAULT_GAME),
    labels=GAME_LABELS,
)
PAGE_DIMENSION = PageDimension(labels=PAGE_LABELS)

Dimension = FilterDimension | PageDimension


__all__ = [
    "TimeFilter",
    "QueueFilter",
    "SizeFilter",
    "GameFilter",
    "ViewState",
    "FilterState",
    "LeaderboardState",
    "FilterDimension",
    "PageDimension",
    "Dimension",
    "TIME_DIMENSION",
    "QUEUE_DIMENSION",
    "SIZE_DIMENSION",
    "GAME_DIMENSION",
    "PAGE_DIMENSION",
]
