"""Interaction dispatcher for filterable stats responses.

This module implements the controller that turns button presses into render
cycles. InteractionDispatcher is responsible for:

1. Session Lifecycle:
   - Seeding a SessionRecord when a view is opened (or when a trigger arrives
     for a response whose record is gone)
   - Keeping records in an injected TTLCacheStore, pinned while rendering
   - Stripping the buttons of a response once its record expires

2. Trigger Handling:
   - Decoding trigger tokens, rejecting malformed ones with a notice
   - Merging the targeted dimension into the filters the user last asked
     for, committed or still in flight
   - Refusing context ids that cannot fit into every button id
   - Sending the new buttons optimistically before the result is ready

3. Render Cycles:
   - Taking a token from the RenderTokenLedger before any await
   - Reusing the cached upstream snapshot where the invalidation table allows
   - Forwarding progress only while the token is active
   - Clamping the page of paginated views to the fetched listing, and
     resolving "find me" to the page that lists the presser
   - Committing only once the result has been displayed, and only while
     the token is active

Every render cycle for a key leaves the key idle again on exit, whatever the
outcome: the token is ended in a ``finally`` block.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import replace
from enum import Enum
from typing import Any

from ..cache.ttl import TTLCacheStore, TimeFn
from ..codec.controls import build_control_rows
from ..codec.filters import FilterStateCodec
from ..config.filters import LEADERBOARD_COMMAND, NOTABLES_COMMAND
from ..config.messages import (
    MSG_EXPIRED_TRIGGER,
    MSG_FIND_NEEDS_USER,
    MSG_INVALID_CONTEXT,
    MSG_LOADING_PROFILE,
    MSG_LOADING_RECORD,
    MSG_NOT_FOUND,
    MSG_NOT_LISTED,
    MSG_RENDER_FAILED,
)
from ..config.sessions import (
    LEADERBOARD_SESSION_TTL_S,
    NOTABLES_SESSION_TTL_S,
    STATS_SESSION_TTL_S,
)
from ..errors import (
    MalformedTriggerError,
    NoMatchingDataError,
    UpstreamNotFoundError,
    classify_error,
)
from ..logging import log_context
from ..state.filters import ViewState
from ..state.session import SessionRecord, UpstreamSnapshot
from ..telemetry import add_breadcrumb, capture_error, get_metrics, render_span
from .ports import (
    ListingIndex,
    PreferenceStore,
    Renderer,
    ResponseTransport,
    StatusReporter,
    UpstreamClient,
)
from .snapshot import plan_snapshot_reuse
from .tokens import RenderToken, RenderTokenLedger

logger = logging.getLogger(__name__)


class RenderOutcome(str, Enum):
    """How a render cycle (or a rejected trigger) ended."""

    APPLIED = "applied"
    FAILED = "failed"
    DISCARDED = "discarded"
    REJECTED = "rejected"


def _default_ttl(command: str) -> float:
    if command == NOTABLES_COMMAND:
        return NOTABLES_SESSION_TTL_S
    if command == LEADERBOARD_COMMAND:
        return LEADERBOARD_SESSION_TTL_S
    return STATS_SESSION_TTL_S


class InteractionDispatcher:
    """Routes opens and triggers for one view type to render cycles.

    One dispatcher per command; each owns its store and ledger unless they
    are injected. An injected store should be built with ``on_evict`` and
    ``can_evict`` pointing at :meth:`handle_eviction` and :meth:`can_evict`.
    A codec with a page dimension needs a ``listing`` to paginate against.

    Thread Safety:
        Single event loop only. Per-key state is mutated synchronously
        between awaits, never from another thread.
    """

    def __init__(
        self,
        codec: FilterStateCodec,
        upstream: UpstreamClient,
        preferences: PreferenceStore,
        renderer: Renderer,
        transport: ResponseTransport,
        *,
        store: TTLCacheStore[str, SessionRecord] | None = None,
        ledger: RenderTokenLedger | None = None,
        ttl: float | None = None,
        listing: ListingIndex | None = None,
        now_fn: TimeFn | None = None,
    ) -> None:
        if codec.page_dimension is not None and listing is None:
            raise ValueError(f"{codec.command} is paginated and needs a ListingIndex")
        self.codec = codec
        self._listing = listing
        self._upstream = upstream
        self._preferences = preferences
        self._renderer = renderer
        self._transport = transport
        self._ledger = ledger or RenderTokenLedger()
        self._now = now_fn or time.monotonic
        if store is None:
            store = TTLCacheStore(
                default_ttl=ttl or _default_ttl(codec.command),
                on_evict=self.handle_eviction,
                can_evict=self.can_evict,
                now_fn=self._now,
                name=f"{codec.command}_sessions",
            )
        self._store = store
        self._eviction_tasks: set[asyncio.Task[None]] = set()
        self._attrs = {"command": codec.command}

    # ============================================================================
    # Entry points
    # ============================================================================
    async def open_view(
        self,
        key: str,
        context_id: str,
        filter_state: ViewState | None = None,
    ) -> RenderOutcome:
        """Seed a session for a new response and render it once inline.

        A context id that some button of this view could not embed is
        refused before anything is seeded or fetched.
        """
        try:
            self.codec.check_context(context_id)
        except ValueError as exc:
            logger.info("refused to open %s: %s", key, exc)
            await self._transport.show_failure(key, MSG_INVALID_CONTEXT)
            return RenderOutcome.REJECTED

        filters = filter_state or self.codec.default_state()
        record = self._seed(key, context_id, filters)
        token = self._start(record, filters)
        return await self._run_cycle(record, token, context_id, filters, optimistic=False)

    async def handle_trigger(
        self,
        key: str,
        token: str,
        *,
        actor_id: str | None = None,
    ) -> RenderOutcome:
        """Apply a button press on response ``key``.

        Args:
            key: Response the button belongs to.
            token: The button's trigger token.
            actor_id: Who pressed the button; required by "find me".
        """
        try:
            intent = self.codec.decode(token)
            self.codec.check_context(intent.context_id)
        except (MalformedTriggerError, ValueError) as exc:
            logger.info("rejected trigger on %s: %s", key, exc)
            get_metrics().invalid_triggers_total.add(1, self._attrs)
            await self._transport.show_notice(key, MSG_EXPIRED_TRIGGER)
            return RenderOutcome.REJECTED

        page_dimension = self.codec.page_dimension
        finding = page_dimension is not None and intent.action == page_dimension.find_action
        if finding and not actor_id:
            logger.info("find on %s without an actor", key)
            await self._transport.show_notice(key, MSG_FIND_NEEDS_USER)
            return RenderOutcome.REJECTED

        record = self._store.get(key)
        if record is None:
            # Never opened, expired or invalidated: start over from the token
            logger.info("no session for %s, seeding from trigger", key)
            record = self._seed(key, intent.context_id, intent.filter_state)
            pending = intent.filter_state
        elif record.context_id != intent.context_id:
            pending = intent.filter_state
        else:
            if self.codec.dimension_for(intent.action) is None:
                logger.info("unknown action on %s, re-rendering current filters", key)
            pending = self.codec.merge(record.intended_filter_state, intent)

        # No await between resolving the base and taking the token
        render_token = self._start(record, pending)
        add_breadcrumb(
            "trigger accepted",
            category="render",
            data={"response_id": key, "render_id": str(render_token), **pending.as_wire()},
        )
        return await self._run_cycle(
            record,
            render_token,
            intent.context_id,
            pending,
            optimistic=True,
            find_actor=actor_id if finding else None,
        )

    async def invalidate(self, key: str, strip_controls: bool = True) -> bool:
        """Forget ``key`` now; in-flight renders for it will not apply.

        Returns:
            True if a session existed.
        """
        record = self._store.remove(key)
        self._ledger.discard(key)
        if record is None:
            return False
        record.active_token = None
        record.pending_filter_state = None
        logger.info("session %s invalidated", key)
        if strip_controls:
            await self._transport.strip_controls(key)
        return True

    def session(self, key: str) -> SessionRecord | None:
        return self._store.get(key)

    def stats(self) -> dict[str, Any]:
        return {
            **self._store.stats(),
            "command": self.codec.command,
            "active_renders": len(self._ledger),
            "pending_strips": len(self._eviction_tasks),
        }

    async def close(self) -> None:
        """Drop all sessions and wait for outstanding button strips."""
        self._store.clear()
        if self._eviction_tasks:
            await asyncio.gather(*self._eviction_tasks, return_exceptions=True)

    # ============================================================================
    # Store hooks
    # ============================================================================
    def can_evict(self, key: str, record: SessionRecord) -> bool:
        return not record.rendering

    def handle_eviction(self, key: str, record: SessionRecord) -> None:
        """Expire ``key``: schedule a strip of its buttons and move on."""
        self._ledger.discard(key)
        get_metrics().sessions_evicted_total.add(1, self._attrs)
        logger.info("session %s expired after %d renders", key, record.renders_applied)
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("no running loop, buttons on %s left in place", key)
            return
        task = loop.create_task(self._strip_expired(key))
        self._eviction_tasks.add(task)
        task.add_done_callback(self._eviction_tasks.discard)

    async def _strip_expired(self, key: str) -> None:
        if key in self._store.keys():
            # Reseeded by a trigger before the strip ran; its buttons are live
            logger.debug("session %s reseeded, strip skipped", key)
            return
        try:
            await self._transport.strip_controls(key)
        except Exception:  # noqa: BLE001 - the response may be long gone
            logger.warning("failed to strip buttons from expired %s", key, exc_info=True)

    # ============================================================================
    # Render cycle
    # ============================================================================
    def _seed(self, key: str, context_id: str, filter_state: ViewState) -> SessionRecord:
        record = SessionRecord(
            key=key,
            command=self.codec.command,
            context_id=context_id,
            filter_state=filter_state,
            created_at=self._now(),
        )
        self._store.put(key, record)
        record.expires_at = self._store.expires_at(key) or 0.0
        get_metrics().sessions_opened_total.add(1, self._attrs)
        return record

    def _start(self, record: SessionRecord, pending: ViewState) -> RenderToken:
        token = self._ledger.begin(record.key)
        record.active_token = token
        record.pending_filter_state = pending
        return token

    def _finish(self, record: SessionRecord, token: RenderToken) -> None:
        self._ledger.end(record.key, token)
        if record.active_token == token:
            record.active_token = None
            record.pending_filter_state = None
        # A pinned entry's deadline slides while it renders
        if self._store.get(record.key) is record:
            record.expires_at = self._store.expires_at(record.key) or record.expires_at

    def _status_port(self, key: str, token: RenderToken) -> StatusReporter:
        async def report_status(message: str) -> None:
            if self._ledger.is_active(key, token):
                await self._transport.show_status(key, message)

        return report_status

    def _known_pages(self, record: SessionRecord, context_id: str, filter_state: ViewState) -> int:
        """Page count to draw optimistic controls with, before the listing is fetched."""
        page_dimension = self.codec.page_dimension
        if page_dimension is None:
            return 1
        known = record.page_count if record.context_id == context_id else 1
        return max(known, getattr(filter_state, page_dimension.name))

    def _paginate(
        self,
        snapshot: UpstreamSnapshot,
        filter_state: ViewState,
        find_actor: str | None,
    ) -> tuple[ViewState, int] | None:
        """Clamp the page to the listing; resolve "find me". None if not listed."""
        page_dimension = self.codec.page_dimension
        if page_dimension is None or self._listing is None:
            return filter_state, 1

        page_count = self._listing.page_count(snapshot, filter_state)
        page = getattr(filter_state, page_dimension.name)
        if find_actor is not None:
            index = self._listing.locate(snapshot, filter_state, find_actor)
            if index is None:
                return None
            page = self._listing.page_of(index)
        page = page_dimension.clamp(page, page_count)
        return filter_state.replace(page_dimension.name, page), page_count

    async def _run_cycle(
        self,
        record: SessionRecord,
        token: RenderToken,
        context_id: str,
        filter_state: ViewState,
        *,
        optimistic: bool,
        find_actor: str | None = None,
    ) -> RenderOutcome:
        key = record.key
        metrics = get_metrics()
        metrics.renders_started_total.add(1, self._attrs)
        metrics.active_renders.add(1, self._attrs)
        started = time.perf_counter()
        outcome = RenderOutcome.DISCARDED

        with log_context(response_id=key, render_id=str(token)), render_span(
            response_id=key,
            command=self.codec.command,
            generation=token.generation,
        ) as span:
            try:
                outcome = await self._render(
                    record, token, context_id, filter_state, optimistic, find_actor
                )
            except UpstreamNotFoundError as exc:
                outcome = await self._fail(record, token, exc, MSG_NOT_FOUND)
            except NoMatchingDataError as exc:
                outcome = await self._fail(record, token, exc, exc.message)
            except Exception as exc:  # noqa: BLE001 - the user sees a generic failure
                outcome = await self._fail(record, token, exc, MSG_RENDER_FAILED, report=True)
            finally:
                self._finish(record, token)
                metrics.active_renders.add(-1, self._attrs)
                attrs = {**self._attrs, "outcome": outcome.value}
                metrics.render_latency.record(time.perf_counter() - started, attrs)
                if outcome is RenderOutcome.APPLIED:
                    metrics.renders_applied_total.add(1, self._attrs)
                elif outcome is RenderOutcome.DISCARDED:
                    metrics.renders_discarded_total.add(1, self._attrs)
                span.set_attribute("render.outcome", outcome.value)
                logger.debug("render finished: %s", outcome.value)
        return outcome

    async def _render(
        self,
        record: SessionRecord,
        token: RenderToken,
        context_id: str,
        filter_state: ViewState,
        optimistic: bool,
        find_actor: str | None,
    ) -> RenderOutcome:
        key = record.key
        if optimistic and self._ledger.is_active(key, token):
            pages = self._known_pages(record, context_id, filter_state)
            rows = build_control_rows(self.codec, filter_state, context_id, page_count=pages)
            await self._transport.show_controls(key, rows)

        snapshot = await self._resolve_snapshot(record, token, context_id, filter_state)
        if snapshot is None:
            logger.debug("superseded while fetching upstream data")
            return RenderOutcome.DISCARDED

        paged = self._paginate(snapshot, filter_state, find_actor)
        if paged is None:
            logger.info("%s not listed on %s", find_actor, key)
            await self._transport.show_notice(key, MSG_NOT_LISTED)
            return RenderOutcome.REJECTED
        filter_state, page_count = paged
        if record.active_token == token:
            record.pending_filter_state = filter_state

        output = await self._renderer(snapshot, filter_state, self._status_port(key, token))
        if not self._ledger.is_active(key, token):
            logger.debug("superseded while rendering, result dropped")
            return RenderOutcome.DISCARDED

        rows = build_control_rows(self.codec, filter_state, context_id, page_count=page_count)
        await self._transport.show_result(key, output, rows)

        # Commit only what was displayed
        record.filter_state = filter_state
        record.context_id = context_id
        record.upstream_snapshot = snapshot
        record.page_count = page_count
        record.renders_applied += 1
        if self._store.touch(key):
            record.expires_at = self._store.expires_at(key) or record.expires_at
        return RenderOutcome.APPLIED

    async def _resolve_snapshot(
        self,
        record: SessionRecord,
        token: RenderToken,
        context_id: str,
        filter_state: ViewState,
    ) -> UpstreamSnapshot | None:
        """Fill in what the cached snapshot lacks. None once superseded."""
        key = record.key
        report_status = self._status_port(key, token)
        snapshot = plan_snapshot_reuse(self.codec, record, context_id, filter_state)

        if snapshot.record is None:
            await report_status(MSG_LOADING_RECORD)
            if not self._ledger.is_active(key, token):
                return None
            data = await self._upstream.fetch_snapshot(context_id, filter_state=filter_state)
            if not self._ledger.is_active(key, token):
                return None
            if data is None:
                raise UpstreamNotFoundError(context_id)
            snapshot = replace(snapshot, record=data)

        if snapshot.profile is None:
            await report_status(MSG_LOADING_PROFILE)
            try:
                profile = await self._preferences.load_preferences(context_id)
            except Exception:  # noqa: BLE001 - favorites are optional decoration
                logger.warning("preferences unavailable for %s", context_id, exc_info=True)
                profile = None
            if not self._ledger.is_active(key, token):
                return None
            snapshot = replace(snapshot, profile=profile or {})

        return snapshot

    async def _fail(
        self,
        record: SessionRecord,
        token: RenderToken,
        exc: Exception,
        message: str,
        *,
        report: bool = False,
    ) -> RenderOutcome:
        key = record.key
        if not self._ledger.is_active(key, token):
            logger.debug("superseded render failed quietly: %s", exc)
            return RenderOutcome.DISCARDED

        category = classify_error(exc)
        get_metrics().render_failures_total.add(1, {**self._attrs, "error": category})
        if report:
            logger.error("render failed for %s", key, exc_info=exc)
            capture_error(
                exc,
                response_id=key,
                render_id=str(token),
                extra={"command": self.codec.command, "context_id": record.context_id},
            )
        else:
            logger.info("render for %s ended with %s", key, category)

        if isinstance(exc, UpstreamNotFoundError):
            record.upstream_snapshot = UpstreamSnapshot()

        try:
            await self._transport.show_failure(key, message)
        except Exception:  # noqa: BLE001 - nothing left to tell the user with
            logger.exception("failed to deliver failure message for %s", key)
        return RenderOutcome.FAILED


__all__ = ["InteractionDispatcher", "RenderOutcome"]
