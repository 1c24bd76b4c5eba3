"""Upstream snapshot reuse across render cycles.

A render reuses whatever the committed snapshot still holds for its target,
so toggling a filter usually re-renders from memory. Two things make cached
fields stale:

1. A different context id: nothing cached for another entity applies.
2. A change of a dimension tagged in the codec's invalidation table: the
   fields that dimension lists are dropped, in either direction of change.
"""

from __future__ import annotations

import logging

from ..codec.filters import FilterStateCodec
from ..state.filters import ViewState
from ..state.session import SessionRecord, UpstreamSnapshot

logger = logging.getLogger(__name__)


def plan_snapshot_reuse(
    codec: FilterStateCodec,
    record: SessionRecord,
    context_id: str,
    filter_state: ViewState,
) -> UpstreamSnapshot:
    """Return the part of ``record``'s snapshot valid for the target render.

    The comparison base is the committed filter state, since the committed
    snapshot was fetched for exactly that state.
    """
    if record.context_id != context_id:
        if not record.upstream_snapshot.is_empty():
            logger.debug(
                "snapshot dropped: context changed %s -> %s",
                record.context_id,
                context_id,
            )
        return UpstreamSnapshot()

    stale = codec.invalidated_by(record.filter_state, filter_state)
    if stale:
        logger.debug("snapshot fields invalidated: %s", ", ".join(sorted(stale)))
    return record.upstream_snapshot.without(stale)


__all__ = ["plan_snapshot_reuse"]
