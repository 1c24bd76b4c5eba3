"""Filter state codec for trigger tokens.

A trigger token is the compact string embedded in a filter button's id.
It carries the complete view state the button leads to, the action naming
which dimension the button targets, and the context id the view concerns::

    stats|time|weekly|both|both|42
    ^     ^    ^      ^    ^    ^
    |     |    time   queue size context id
    |     action (time / queue / players)
    command

    leaderboard|next|alltime|mkworld12p|3|srv1
                ^    ^       ^          ^
                |    time    game       page the button leads to
                action (time / format / first / prev / next / last / find)

Decoding is tolerant by field and strict by shape:

- a wrong prefix, a wrong field count or an empty context id raises
  MalformedTriggerError;
- an unknown or empty dimension value decodes to that dimension's default,
  so buttons left over from an older vocabulary still land somewhere safe;
  a page outside ``[1, max_page]`` is clamped into it;
- an unknown action decodes to ``action=None`` (no dimension targeted).

The codec also owns the static invalidation table: each dimension lists the
upstream snapshot fields a change of that dimension makes stale.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any

from ..config.filters import (
    LEADERBOARD_COMMAND,
    NOTABLES_COMMAND,
    SNAPSHOT_RECORD_FIELD,
    STATS_COMMAND,
    TRIGGER_TOKEN_DELIMITER,
    TRIGGER_TOKEN_FIXED_FIELDS,
    TRIGGER_TOKEN_MAX_LEN,
)
from ..errors import MalformedTriggerError
from ..state.filters import (
    Dimension,
    FilterState,
    LeaderboardState,
    PageDimension,
    ViewState,
    GAME_DIMENSION,
    PAGE_DIMENSION,
    QUEUE_DIMENSION,
    SIZE_DIMENSION,
    TIME_DIMENSION,
)

# Filtering happens on the cached match record, nothing needs a refetch
STATS_DIMENSIONS: tuple[Dimension, ...] = (
    TIME_DIMENSION,
    QUEUE_DIMENSION,
    SIZE_DIMENSION,
)

# The notables record is fetched per room size, so a size change refetches it
NOTABLES_DIMENSIONS: tuple[Dimension, ...] = (
    TIME_DIMENSION,
    QUEUE_DIMENSION,
    dataclasses.replace(SIZE_DIMENSION, invalidates=frozenset({SNAPSHOT_RECORD_FIELD})),
)

# Rankings are fetched per game format; switching ranking starts at page 1
LEADERBOARD_DIMENSIONS: tuple[Dimension, ...] = (
    dataclasses.replace(TIME_DIMENSION, resets=frozenset({PAGE_DIMENSION.name})),
    dataclasses.replace(
        GAME_DIMENSION,
        invalidates=frozenset({SNAPSHOT_RECORD_FIELD}),
        resets=frozenset({PAGE_DIMENSION.name}),
    ),
    PAGE_DIMENSION,
)


@dataclass(frozen=True, slots=True)
class TriggerIntent:
    """Decoded trigger token.

    Attributes:
        command: View the token belongs to.
        action: Action naming the targeted dimension, or None if unknown.
        filter_state: Full view state carried by the token.
        context_id: Upstream entity the view concerns.
    """

    command: str
    action: str | None
    filter_state: Any
    context_id: str


class FilterStateCodec:
    """Encode/decode view states to and from positional trigger tokens."""

    def __init__(
        self,
        command: str,
        dimensions: tuple[Dimension, ...] = STATS_DIMENSIONS,
        *,
        state_type: type[ViewState] = FilterState,
        max_length: int = TRIGGER_TOKEN_MAX_LEN,
    ) -> None:
        if not command or TRIGGER_TOKEN_DELIMITER in command:
            raise ValueError(f"invalid command name: {command!r}")
        names = tuple(dimension.name for dimension in dimensions)
        expected = tuple(field.name for field in dataclasses.fields(state_type))
        if names != expected:
            raise ValueError(f"dimensions must be {expected}, got {names}")

        actions = [action for dimension in dimensions for action in dimension.actions]
        if len(set(actions)) != len(actions):
            raise ValueError(f"dimension actions overlap: {actions}")
        for dimension in dimensions:
            unknown = dimension.resets - set(names)
            if unknown:
                raise ValueError(f"{dimension.name} resets unknown dimensions {sorted(unknown)}")

        self.command = command
        self.dimensions = dimensions
        self.state_type = state_type
        self.max_length = max_length
        self.field_count = TRIGGER_TOKEN_FIXED_FIELDS + len(dimensions)
        self._by_action = {action: d for d in dimensions for action in d.actions}
        self._by_name = {dimension.name: dimension for dimension in dimensions}
        # Longest token any button of this view can carry, context id excluded
        self._widest = (
            len(command)
            + max((len(action) for action in actions), default=0)
            + sum(dimension.max_wire_len for dimension in dimensions)
            + self.field_count - 1
        )

    def default_state(self) -> Any:
        return self.state_type()

    @property
    def page_dimension(self) -> PageDimension | None:
        for dimension in self.dimensions:
            if isinstance(dimension, PageDimension):
                return dimension
        return None

    # ============================================================================
    # Encoding
    # ============================================================================
    def check_context(self, context_id: str) -> str:
        """Validate that every button this view can show is able to embed ``context_id``.

        Ids with surrounding whitespace are refused rather than trimmed, so
        a decoded token always reproduces the id it was built from.

        Raises:
            ValueError: If the id is empty, padded, contains the delimiter,
                or would push the widest token past ``max_length``.
        """
        context = self._context(context_id)
        widest = self._widest + len(context)
        if widest > self.max_length:
            raise ValueError(
                f"context_id is {len(context)} chars, at most "
                f"{self.max_length - self._widest} fit a {self.command} token"
            )
        return context

    def encode(
        self,
        filter_state: ViewState,
        context_id: str,
        action: str | None = None,
    ) -> str:
        """Build the trigger token for ``filter_state`` within ``context_id``.

        Raises:
            ValueError: If the context id or action cannot be embedded, or
                the token would exceed the control-id length limit.
        """
        context = self._context(context_id)
        action_value = (action or "").strip().lower()
        if TRIGGER_TOKEN_DELIMITER in action_value:
            raise ValueError(f"action must not contain {TRIGGER_TOKEN_DELIMITER!r}")

        values = [
            dimension.wire(getattr(filter_state, dimension.name))
            for dimension in self.dimensions
        ]
        token = TRIGGER_TOKEN_DELIMITER.join([self.command, action_value, *values, context])
        if len(token) > self.max_length:
            raise ValueError(
                f"trigger token is {len(token)} chars, limit is {self.max_length}"
            )
        return token

    @staticmethod
    def _context(context_id: str) -> str:
        context = str(context_id)
        if not context.strip():
            raise ValueError("context_id must not be empty")
        if context != context.strip():
            raise ValueError(f"context_id must not be padded with whitespace: {context!r}")
        if TRIGGER_TOKEN_DELIMITER in context:
            raise ValueError(f"context_id must not contain {TRIGGER_TOKEN_DELIMITER!r}")
        return context

    # ============================================================================
    # Decoding
    # ============================================================================
    def decode(self, token: str) -> TriggerIntent:
        """Parse a trigger token.

        Raises:
            MalformedTriggerError: On a structural defect only.
        """
        if not isinstance(token, str):
            raise MalformedTriggerError("trigger token must be a string")
        parts = token.split(TRIGGER_TOKEN_DELIMITER)
        if parts[0].strip().lower() != self.command:
            raise MalformedTriggerError(
                f"trigger token is not a {self.command} token",
                token=token,
            )
        if len(parts) != self.field_count:
            raise MalformedTriggerError(
                f"trigger token has {len(parts)} fields, expected {self.field_count}",
                token=token,
            )

        action_raw, *value_raws, context_raw = parts[1:]
        context_id = context_raw.strip()
        if not context_id:
            raise MalformedTriggerError("trigger token has no context id", token=token)

        values = {
            dimension.name: dimension.parse(raw)
            for dimension, raw in zip(self.dimensions, value_raws)
        }
        action = action_raw.strip().lower()
        return TriggerIntent(
            command=self.command,
            action=action if action in self._by_action else None,
            filter_state=self.state_type(**values),
            context_id=context_id,
        )

    def try_decode(self, token: str) -> TriggerIntent | None:
        try:
            return self.decode(token)
        except MalformedTriggerError:
            return None

    # ============================================================================
    # Dimension table
    # ============================================================================
    def dimension_for(self, action: str | None) -> Dimension | None:
        if action is None:
            return None
        return self._by_action.get(action)

    def merge(self, base: ViewState, intent: TriggerIntent) -> Any:
        """Apply the dimension ``intent`` targets on top of ``base``.

        Only the targeted dimension is taken from the token; the others keep
        the values in ``base`` except those the dimension resets.
        """
        dimension = self.dimension_for(intent.action)
        if dimension is None:
            return base
        merged = base.replace(dimension.name, getattr(intent.filter_state, dimension.name))
        for name in dimension.resets:
            merged = merged.replace(name, self._by_name[name].default)
        return merged

    def invalidated_by(self, before: ViewState, after: ViewState) -> frozenset[str]:
        """Snapshot fields made stale by moving from ``before`` to ``after``.

        A tagged dimension invalidates on every change of its value, in
        either direction, including a move back to its broadest value.
        """
        stale: set[str] = set()
        for dimension in self.dimensions:
            if getattr(before, dimension.name) != getattr(after, dimension.name):
                stale.update(dimension.invalidates)
        return frozenset(stale)


def stats_codec() -> FilterStateCodec:
    return FilterStateCodec(STATS_COMMAND, STATS_DIMENSIONS)


def notables_codec() -> FilterStateCodec:
    return FilterStateCodec(NOTABLES_COMMAND, NOTABLES_DIMENSIONS)


def leaderboard_codec() -> FilterStateCodec:
    return FilterStateCodec(
        LEADERBOARD_COMMAND,
        LEADERBOARD_DIMENSIONS,
        state_type=LeaderboardState,
    )


__all__ = [
    "FilterStateCodec",
    "TriggerIntent",
    "STATS_DIMENSIONS",
    "NOTABLES_DIMENSIONS",
    "LEADERBOARD_DIMENSIONS",
    "stats_codec",
    "notables_codec",
    "leaderboard_codec",
]
