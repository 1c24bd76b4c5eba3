"""Session-scoped dataclasses.

UpstreamSnapshot:
    Memoized expensive inputs reused across filter changes. Every field is
    optional; a missing field is fetched again on the next render.

SessionRecord:
    The cached payload for one interactive response, owned by the TTL store.
    Only a render cycle holding the active token may commit into it.
"""

from __future__ import annotations

import time
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, fields, replace
from typing import Any, TYPE_CHECKING

from .filters import FilterState, ViewState

if TYPE_CHECKING:
    from ..sessions.tokens import RenderToken


@dataclass(frozen=True, slots=True)
class UpstreamSnapshot:
    """Inputs that are expensive to fetch.

    Attributes:
        record: Player and match records returned by the stats provider.
        profile: Durable user preferences (favorites) from the preference store.
    """

    record: Mapping[str, Any] | None = None
    profile: Mapping[str, Any] | None = None

    @property
    def missing(self) -> tuple[str, ...]:
        return tuple(f.name for f in fields(self) if getattr(self, f.name) is None)

    def without(self, names: Iterable[str]) -> "UpstreamSnapshot":
        """Return a copy with the named fields cleared."""
        cleared = {name: None for name in names}
        return replace(self, **cleared) if cleared else self

    def is_empty(self) -> bool:
        return self.record is None and self.profile is None


@dataclass
class SessionRecord:
    """Container for all mutable state of one interactive response.

    Attributes:
        key: Identifier of the outward-facing response.
        command: View the response belongs to (``stats``, ``notables``,
            ``leaderboard``).
        context_id: Upstream entity the view concerns.
        filter_state: Last applied view state.
        upstream_snapshot: Memoized inputs for the committed context.
        pending_filter_state: Filters of the render in flight, if any.
        active_token: Token allowed to commit; set iff a render is in flight.
        expires_at: Monotonic deadline after which the record is evictable.
        created_at: Monotonic creation time.
        renders_applied: Number of accepted render outcomes.
        page_count: Pages of the last applied listing (paginated views only).
    """

    key: str
    command: str
    context_id: str
    filter_state: ViewState = field(default_factory=FilterState)
    upstream_snapshot: UpstreamSnapshot = field(default_factory=UpstreamSnapshot)
    pending_filter_state: ViewState | None = None
    active_token: "RenderToken | None" = None
    expires_at: float = 0.0
    created_at: float = field(default_factory=time.monotonic)
    renders_applied: int = 0
    page_count: int = 1

    @property
    def rendering(self) -> bool:
        return self.active_token is not None

    @property
    def intended_filter_state(self) -> ViewState:
        """Filters the user last asked for, committed or not."""
        return self.pending_filter_state or self.filter_state


__all__ = ["UpstreamSnapshot", "SessionRecord"]
