"""TTL cache store with sliding expiration and an eviction hook.

This module implements the in-memory store that owns every SessionRecord.
It is deliberately generic (opaque keys, opaque values) and injectable, so
each view type gets its own instance instead of sharing a process-wide map.

Expiration:
    Each entry carries an absolute deadline computed from ``now_fn``. The
    deadline is checked in two places:

    1. Lazily, on every ``get``/``touch``/``expires_at``/``__contains__``.
    2. By a background timer armed with ``loop.call_later`` whenever an
       asyncio loop is running at ``put``/``touch`` time.

    Whichever notices first evicts the entry; the other finds it gone.

Eviction:
    ``on_evict(key, value)`` runs before the value is discarded. A failing
    callback is logged and reported but never stops the eviction. Each
    stored entry is evicted at most once.

Pinning:
    ``can_evict(key, value)`` lets the owner veto an expiry, e.g. while a
    render for that key is still in flight. A vetoed entry's deadline slides
    forward by its TTL.

Example:
    store = TTLCacheStore(default_ttl=600, on_evict=strip_buttons)
    store.put("msg-1", record)
    store.touch("msg-1")      # slide the deadline after an accepted render
    store.get("msg-1")        # None once expired; the hook has already run
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable, Hashable, Iterator
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from ..telemetry import capture_error, get_metrics

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")

# Type alias for injectable time functions (used in testing)
TimeFn = Callable[[], float]

# Timers never fire sooner than this, so a vetoed or early wake-up cannot spin
_MIN_TIMER_DELAY_S = 0.01


@dataclass
class _Entry(Generic[V]):
    value: V
    ttl: float
    expires_at: float
    timer: asyncio.TimerHandle | None = None
    evicting: bool = False


class TTLCacheStore(Generic[K, V]):
    """Mapping of opaque key to value with sliding-window expiration.

    Not thread-safe; intended for single-loop asyncio code.
    """

    def __init__(
        self,
        *,
        default_ttl: float,
        on_evict: Callable[[K, V], Any] | None = None,
        can_evict: Callable[[K, V], bool] | None = None,
        now_fn: TimeFn | None = None,
        name: str = "ttl_cache",
    ) -> None:
        """Initialize the store.

        Args:
            default_ttl: Lifetime in seconds used when ``put``/``touch`` get none.
            on_evict: Called with (key, value) right before an expired entry
                is dropped. Exceptions are logged and swallowed.
            can_evict: Optional veto; returning False defers the expiry.
            now_fn: Optional time function for testing. Defaults to time.monotonic.
            name: Label used in log lines.
        """
        if default_ttl <= 0:
            raise ValueError("default_ttl must be positive")
        self.default_ttl = float(default_ttl)
        self.name = name
        self._on_evict = on_evict
        self._can_evict = can_evict
        self._now = now_fn or time.monotonic
        self._entries: dict[K, _Entry[V]] = {}
        self._evictions = 0

    # ============================================================================
    # Public API
    # ============================================================================
    def put(self, key: K, value: V, ttl: float | None = None) -> V:
        """Store ``value`` under ``key`` with a fresh deadline."""
        lifetime = self._resolve_ttl(ttl)
        previous = self._entries.pop(key, None)
        if previous is not None:
            self._cancel_timer(previous)
        entry = _Entry(value=value, ttl=lifetime, expires_at=self._now() + lifetime)
        self._entries[key] = entry
        self._arm_timer(key, entry)
        return value

    def get(self, key: K) -> V | None:
        """Return the live value, or None. An expired entry is evicted first."""
        entry = self._live_entry(key)
        return entry.value if entry is not None else None

    def touch(self, key: K, ttl: float | None = None) -> bool:
        """Slide the deadline of a live entry forward.

        Returns:
            False if the key is missing or already expired. Expired keys are
            evicted, never renewed.
        """
        entry = self._live_entry(key)
        if entry is None:
            return False
        if ttl is not None:
            entry.ttl = self._resolve_ttl(ttl)
        entry.expires_at = self._now() + entry.ttl
        self._cancel_timer(entry)
        self._arm_timer(key, entry)
        return True

    def remove(self, key: K) -> V | None:
        """Drop an entry without running the eviction hook."""
        entry = self._entries.pop(key, None)
        if entry is None:
            return None
        self._cancel_timer(entry)
        return entry.value

    def expires_at(self, key: K) -> float | None:
        entry = self._live_entry(key)
        return entry.expires_at if entry is not None else None

    def sweep(self) -> int:
        """Evict every expired entry now and return how many went."""
        now = self._now()
        expired = [key for key, entry in self._entries.items() if entry.expires_at <= now]
        evicted = 0
        for key in expired:
            entry = self._entries.get(key)
            if entry is not None and self._expire(key, entry):
                evicted += 1
        return evicted

    def clear(self) -> None:
        """Drop everything and cancel all timers. Hooks do not run."""
        for entry in self._entries.values():
            self._cancel_timer(entry)
        self._entries.clear()

    def keys(self) -> list[K]:
        return list(self._entries)

    def stats(self) -> dict[str, Any]:
        return {"name": self.name, "entries": len(self._entries), "evictions": self._evictions}

    def __contains__(self, key: object) -> bool:
        return self._live_entry(key) is not None  # type: ignore[arg-type]

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[K]:
        return iter(list(self._entries))

    # ============================================================================
    # Internal helpers
    # ============================================================================
    def _resolve_ttl(self, ttl: float | None) -> float:
        lifetime = self.default_ttl if ttl is None else float(ttl)
        if lifetime <= 0:
            raise ValueError("ttl must be positive")
        return lifetime

    def _live_entry(self, key: K) -> _Entry[V] | None:
        entry = self._entries.get(key)
        if entry is None or entry.evicting:
            return None
        if entry.expires_at > self._now():
            return entry
        if self._expire(key, entry):
            return None
        return entry

    def _expire(self, key: K, entry: _Entry[V]) -> bool:
        """Evict ``entry`` unless the owner pins it. Returns True if evicted."""
        if self._entries.get(key) is not entry or entry.evicting:
            return False

        if self._can_evict is not None and not self._can_evict(key, entry.value):
            entry.expires_at = self._now() + entry.ttl
            self._cancel_timer(entry)
            self._arm_timer(key, entry)
            logger.debug("%s: expiry of %r deferred, entry pinned", self.name, key)
            return False

        self._cancel_timer(entry)
        entry.evicting = True
        if self._on_evict is not None:
            try:
                self._on_evict(key, entry.value)
            except Exception as exc:  # noqa: BLE001 - eviction must proceed
                logger.exception("%s: eviction hook failed for %r", self.name, key)
                get_metrics().eviction_hook_failures_total.add(1, {"store": self.name})
                capture_error(exc, extra={"store": self.name, "key": str(key)})

        # The hook may have removed or replaced the entry itself
        if self._entries.get(key) is entry:
            del self._entries[key]
        self._evictions += 1
        logger.debug("%s: evicted %r", self.name, key)
        return True

    def _arm_timer(self, key: K, entry: _Entry[V]) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No loop: lazy expiry on access only
            return
        delay = max(_MIN_TIMER_DELAY_S, entry.expires_at - self._now())
        entry.timer = loop.call_later(delay, self._on_timer, key, entry)

    def _on_timer(self, key: K, entry: _Entry[V]) -> None:
        entry.timer = None
        if self._entries.get(key) is not entry:
            return
        if entry.expires_at > self._now():
            # Woke early relative to now_fn; re-arm for the remainder
            self._arm_timer(key, entry)
            return
        self._expire(key, entry)

    @staticmethod
    def _cancel_timer(entry: _Entry[Any]) -> None:
        if entry.timer is not None:
            entry.timer.cancel()
            entry.timer = None


__all__ = ["TTLCacheStore", "TimeFn"]
