"""Unit tests for the TTL cache store."""

from __future__ import annotations

import asyncio

import pytest

from statsview.cache import TTLCacheStore
from tests.helpers.sessions import FakeClock


def _store(clock: FakeClock, ttl: float = 10.0, **kwargs) -> tuple[TTLCacheStore, list[tuple[str, object]]]:
    evicted: list[tuple[str, object]] = []
    kwargs.setdefault("on_evict", lambda key, value: evicted.append((key, value)))
    store = TTLCacheStore(default_ttl=ttl, now_fn=clock, **kwargs)
    return store, evicted


# --- put / get / touch ---


def test_get_returns_value_before_deadline() -> None:
    clock = FakeClock()
    store, evicted = _store(clock)
    store.put("m1", "record")
    clock.advance(9.9)
    assert store.get("m1") == "record"
    assert evicted == []


def test_get_after_deadline_evicts_and_runs_hook() -> None:
    clock = FakeClock()
    store, evicted = _store(clock)
    store.put("m1", "record")
    clock.advance(10.0)
    assert store.get("m1") is None
    assert evicted == [("m1", "record")]
    assert len(store) == 0


def test_hook_runs_before_value_is_discarded() -> None:
    clock = FakeClock()
    seen: list[bool] = []
    store = TTLCacheStore(default_ttl=5, now_fn=clock, on_evict=lambda k, v: seen.append(k in store.keys()))
    store.put("m1", 1)
    clock.advance(6)
    store.sweep()
    assert seen == [True]
    assert store.keys() == []


def test_touch_slides_deadline() -> None:
    clock = FakeClock()
    store, evicted = _store(clock)
    store.put("m1", "record")
    clock.advance(8)
    assert store.touch("m1") is True
    clock.advance(7)
    assert store.get("m1") == "record"
    clock.advance(3)
    assert store.get("m1") is None
    assert len(evicted) == 1


def test_touch_with_new_ttl_applies_from_now() -> None:
    clock = FakeClock()
    store, _ = _store(clock)
    store.put("m1", "record")
    assert store.touch("m1", ttl=30) is True
    assert store.expires_at("m1") == pytest.approx(clock.now + 30)


def test_touch_missing_key_returns_false() -> None:
    clock = FakeClock()
    store, _ = _store(clock)
    assert store.touch("nope") is False


def test_touch_expired_key_does_not_resurrect() -> None:
    clock = FakeClock()
    store, evicted = _store(clock)
    store.put("m1", "record")
    clock.advance(11)
    assert store.touch("m1") is False
    assert evicted == [("m1", "record")]
    assert store.get("m1") is None
    assert "m1" not in store


def test_put_replaces_value_without_running_hook() -> None:
    clock = FakeClock()
    store, evicted = _store(clock)
    store.put("m1", "old")
    clock.advance(9)
    store.put("m1", "new")
    clock.advance(9)
    assert store.get("m1") == "new"
    assert evicted == []


def test_non_positive_ttl_rejected() -> None:
    with pytest.raises(ValueError):
        TTLCacheStore(default_ttl=0)
    store = TTLCacheStore(default_ttl=1)
    with pytest.raises(ValueError):
        store.put("k", "v", ttl=-1)


# --- remove / clear / sweep ---


def test_remove_skips_hook() -> None:
    clock = FakeClock()
    store, evicted = _store(clock)
    store.put("m1", "record")
    assert store.remove("m1") == "record"
    assert store.remove("m1") is None
    clock.advance(20)
    store.sweep()
    assert evicted == []


def test_clear_drops_everything_without_hooks() -> None:
    clock = FakeClock()
    store, evicted = _store(clock)
    store.put("a", 1)
    store.put("b", 2)
    store.clear()
    assert len(store) == 0
    assert evicted == []


def test_sweep_evicts_only_expired_entries() -> None:
    clock = FakeClock()
    store, evicted = _store(clock)
    store.put("old", 1)
    clock.advance(6)
    store.put("fresh", 2)
    clock.advance(5)
    assert store.sweep() == 1
    assert evicted == [("old", 1)]
    assert store.keys() == ["fresh"]
    assert store.stats() == {"name": "ttl_cache", "entries": 1, "evictions": 1}


def test_entry_is_evicted_exactly_once() -> None:
    clock = FakeClock()
    store, evicted = _store(clock)
    store.put("m1", "record")
    clock.advance(15)
    assert "m1" not in store
    assert store.get("m1") is None
    assert store.expires_at("m1") is None
    assert store.sweep() == 0
    assert evicted == [("m1", "record")]


# --- hook failures and re-entrancy ---


def test_hook_failure_is_swallowed_and_eviction_proceeds() -> None:
    clock = FakeClock()
    calls: list[str] = []

    def _boom(key: str, value: object) -> None:
        calls.append(key)
        raise RuntimeError("transport down")

    store = TTLCacheStore(default_ttl=5, now_fn=clock, on_evict=_boom)
    store.put("m1", "record")
    clock.advance(6)
    assert store.get("m1") is None
    assert store.get("m1") is None
    assert calls == ["m1"]
    assert len(store) == 0


def test_hook_reading_its_own_key_does_not_recurse() -> None:
    clock = FakeClock()
    seen: list[object] = []
    store = TTLCacheStore(default_ttl=5, now_fn=clock, on_evict=lambda k, v: seen.append(store.get(k)))
    store.put("m1", "record")
    clock.advance(6)
    assert store.get("m1") is None
    assert seen == [None]


# --- pinning ---


def test_pinned_entry_survives_expiry_and_slides() -> None:
    clock = FakeClock()
    pinned = {"m1": True}
    store, evicted = _store(clock, can_evict=lambda key, value: not pinned[key])
    store.put("m1", "record")
    clock.advance(12)
    assert store.get("m1") == "record"
    assert store.expires_at("m1") == pytest.approx(clock.now + 10)
    assert evicted == []

    pinned["m1"] = False
    clock.advance(10)
    assert store.get("m1") is None
    assert evicted == [("m1", "record")]


# --- background timers ---


def test_timer_evicts_without_access() -> None:
    async def _run() -> None:
        evicted: list[str] = []
        store = TTLCacheStore(default_ttl=0.05, on_evict=lambda k, v: evicted.append(k))
        store.put("m1", "record")
        await asyncio.sleep(0.15)
        assert evicted == ["m1"]
        assert len(store) == 0

    asyncio.run(_run())


def test_touch_rearms_timer() -> None:
    async def _run() -> None:
        evicted: list[str] = []
        store = TTLCacheStore(default_ttl=0.15, on_evict=lambda k, v: evicted.append(k))
        store.put("m1", "record")
        await asyncio.sleep(0.1)
        assert store.touch("m1") is True
        await asyncio.sleep(0.1)
        assert evicted == []
        await asyncio.sleep(0.2)
        assert evicted == ["m1"]

    asyncio.run(_run())


def test_remove_cancels_timer() -> None:
    async def _run() -> None:
        evicted: list[str] = []
        store = TTLCacheStore(default_ttl=0.05, on_evict=lambda k, v: evicted.append(k))
        store.put("m1", "record")
        store.remove("m1")
        await asyncio.sleep(0.12)
        assert evicted == []

    asyncio.run(_run())
