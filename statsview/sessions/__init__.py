"""Render-session control: token ledger, snapshot reuse, ports and dispatcher."""

from .tokens import RenderToken, RenderTokenLedger
from .snapshot import plan_snapshot_reuse
from .ports import (
    ListingIndex,
    PreferenceStore,
    RenderOutput,
    Renderer,
    ResponseTransport,
    StatusReporter,
    UpstreamClient,
    offload,
)
from .dispatcher import InteractionDispatcher, RenderOutcome

__all__ = [
    "RenderToken",
    "RenderTokenLedger",
    "plan_snapshot_reuse",
    "ListingIndex",
    "PreferenceStore",
    "RenderOutput",
    "Renderer",
    "ResponseTransport",
    "StatusReporter",
    "UpstreamClient",
    "offload",
    "InteractionDispatcher",
    "RenderOutcome",
]
