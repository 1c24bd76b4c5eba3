"""Unit tests for upstream snapshot reuse."""

from __future__ import annotations

from statsview.codec import notables_codec, stats_codec
from statsview.sessions.snapshot import plan_snapshot_reuse
from statsview.state.filters import FilterState, QueueFilter, SizeFilter, TimeFilter
from statsview.state.session import SessionRecord, UpstreamSnapshot

_FULL = UpstreamSnapshot(record={"events": 12}, profile={"favorites": []})


def _record(command: str = "stats", **kwargs) -> SessionRecord:
    defaults = {"key": "m1", "command": command, "context_id": "42", "upstream_snapshot": _FULL}
    defaults.update(kwargs)
    return SessionRecord(**defaults)


def test_same_filters_reuse_everything() -> None:
    assert plan_snapshot_reuse(stats_codec(), _record(), "42", FilterState()) == _FULL


def test_stats_filter_changes_reuse_everything() -> None:
    target = FilterState(TimeFilter.WEEKLY, QueueFilter.SOLO, SizeFilter.SMALL)
    assert plan_snapshot_reuse(stats_codec(), _record(), "42", target) == _FULL


def test_context_change_drops_everything() -> None:
    snapshot = plan_snapshot_reuse(stats_codec(), _record(), "77", FilterState())
    assert snapshot.is_empty()
    assert snapshot.missing == ("record", "profile")


def test_notables_size_change_drops_record_keeps_profile() -> None:
    record = _record("notables")
    snapshot = plan_snapshot_reuse(notables_codec(), record, "42", FilterState(size=SizeFilter.LARGE))
    assert snapshot.record is None
    assert snapshot.profile == {"favorites": []}


def test_notables_back_to_both_drops_record() -> None:
    record = _record("notables", filter_state=FilterState(size=SizeFilter.SMALL))
    snapshot = plan_snapshot_reuse(notables_codec(), record, "42", FilterState())
    assert snapshot.missing == ("record",)


def test_notables_time_change_keeps_record() -> None:
    record = _record("notables")
    target = FilterState(time=TimeFilter.SEASON)
    assert plan_snapshot_reuse(notables_codec(), record, "42", target) == _FULL


def test_comparison_base_is_committed_state() -> None:
    record = _record(
        "notables",
        filter_state=FilterState(size=SizeFilter.SMALL),
        pending_filter_state=FilterState(size=SizeFilter.LARGE),
    )
    snapshot = plan_snapshot_reuse(notables_codec(), record, "42", FilterState(size=SizeFilter.SMALL))
    assert snapshot == _FULL
