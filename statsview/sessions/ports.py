"""Collaborator interfaces supplied by the host.

The controller owns none of the expensive work: the stats provider, the
preference store, the image renderer and the response transport are all
injected. The WebSocket adapter in ``handlers/websocket/transport.py`` is
the bundled ResponseTransport.
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from typing import Any

from ..codec.controls import ControlRow
from ..config.filters import LEADERBOARD_PAGE_SIZE
from ..state.filters import ViewState
from ..state.session import UpstreamSnapshot


@dataclass(slots=True)
class RenderOutput:
    """Rendered result for one filter state."""

    content: str
    image: bytes
    filename: str = "stats.png"


# Status port handed to renderers; silently ignores updates once superseded
StatusReporter = Callable[[str], Awaitable[None]]

Renderer = Callable[[UpstreamSnapshot, ViewState, StatusReporter], Awaitable[RenderOutput]]


def offload(fn: Callable[[UpstreamSnapshot, ViewState], RenderOutput]) -> Renderer:
    """Adapt a blocking ``(snapshot, filter_state) -> RenderOutput`` renderer.

    The function runs in the default thread pool so image work never blocks
    the event loop.
    """

    async def _render(
        snapshot: UpstreamSnapshot,
        filter_state: ViewState,
        report_status: StatusReporter,
    ) -> RenderOutput:
        return await asyncio.to_thread(fn, snapshot, filter_state)

    _render.__name__ = getattr(fn, "__name__", "offloaded_renderer")
    return _render


class UpstreamClient(ABC):
    """Stats provider for the record a view is built from."""

    @abstractmethod
    async def fetch_snapshot(
        self,
        context_id: str,
        *,
        filter_state: ViewState,
    ) -> Mapping[str, Any] | None:
        """Fetch the record for ``context_id``.

        ``filter_state`` is the state being rendered. Providers whose record
        depends on a filter dimension (the notables record depends on room
        size, the leaderboard on game format) read it; others ignore it.

        Returns:
            The record, or None when the provider does not know the entity.
        """


class PreferenceStore(ABC):
    """Durable per-user preferences (favorites)."""

    @abstractmethod
    async def load_preferences(self, context_id: str) -> Mapping[str, Any] | None:
        """Load the preference record for ``context_id``, or None if unset."""


class ListingIndex(ABC):
    """Positions within a paginated view's record.

    The dispatcher asks it how long the listing is for a state (to clamp the
    page) and where a user sits in it (to answer "find me"). Both run on the
    snapshot already fetched, so they are synchronous.
    """

    page_size: int = LEADERBOARD_PAGE_SIZE

    @abstractmethod
    def count(self, snapshot: UpstreamSnapshot, filter_state: ViewState) -> int:
        """Number of entries listed for ``filter_state``."""

    @abstractmethod
    def locate(
        self,
        snapshot: UpstreamSnapshot,
        filter_state: ViewState,
        actor_id: str,
    ) -> int | None:
        """0-based index of ``actor_id`` in the listing, or None if absent."""

    def page_count(self, snapshot: UpstreamSnapshot, filter_state: ViewState) -> int:
        entries = self.count(snapshot, filter_state)
        return max(1, -(-entries // self.page_size))

    def page_of(self, index: int) -> int:
        return index // self.page_size + 1


class ResponseTransport(ABC):
    """Outward-facing surface that displays a response.

    Every method addresses a response by key. Implementations must tolerate
    the response having disappeared in the meantime.
    """

    @abstractmethod
    async def show_controls(self, key: str, rows: list[ControlRow]) -> None:
        """Replace the filter buttons only (optimistic update)."""

    @abstractmethod
    async def show_status(self, key: str, message: str) -> None:
        """Show a transient progress message."""

    @abstractmethod
    async def show_result(self, key: str, output: RenderOutput, rows: list[ControlRow]) -> None:
        """Show a rendered result together with its filter buttons."""

    @abstractmethod
    async def show_failure(self, key: str, message: str) -> None:
        """Show a user-facing failure message in place of the result."""

    @abstractmethod
    async def show_notice(self, key: str, message: str) -> None:
        """Reply to the user without touching the response itself."""

    @abstractmethod
    async def strip_controls(self, key: str) -> None:
        """Remove the filter buttons from an expired response."""


__all__ = [
    "RenderOutput",
    "StatusReporter",
    "Renderer",
    "offload",
    "UpstreamClient",
    "PreferenceStore",
    "ListingIndex",
    "ResponseTransport",
]
