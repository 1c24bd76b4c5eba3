"""Unit tests for the trigger token codec."""

from __future__ import annotations

import itertools

import pytest

from statsview.codec import (
    FilterStateCodec,
    NOTABLES_DIMENSIONS,
    leaderboard_codec,
    notables_codec,
    stats_codec,
)
from statsview.errors import MalformedTriggerError
from statsview.state.filters import (
    FilterState,
    GameFilter,
    LeaderboardState,
    QueueFilter,
    SizeFilter,
    TimeFilter,
)


def test_encode_layout() -> None:
    codec = stats_codec()
    state = FilterState(TimeFilter.WEEKLY, QueueFilter.SOLO, SizeFilter.SMALL)
    assert codec.encode(state, "42", action="time") == "stats|time|weekly|soloq|12p|42"


def test_every_filter_state_survives_encoding() -> None:
    codec = stats_codec()
    for time, queue, size in itertools.product(TimeFilter, QueueFilter, SizeFilter):
        state = FilterState(time, queue, size)
        intent = codec.decode(codec.encode(state, "8841", action="queue"))
        assert intent.filter_state == state
        assert intent.context_id == "8841"
        assert intent.action == "queue"


def test_decode_is_case_insensitive() -> None:
    intent = stats_codec().decode("STATS|Players|Season|SQUADS|24P|42")
    assert intent.action == "players"
    assert intent.filter_state == FilterState(TimeFilter.SEASON, QueueFilter.GROUP, SizeFilter.LARGE)


def test_unknown_values_fall_back_to_defaults() -> None:
    intent = stats_codec().decode("stats|time|fortnight|duos|48p|42")
    assert intent.filter_state == FilterState()
    assert intent.action == "time"


def test_empty_values_fall_back_to_defaults() -> None:
    intent = stats_codec().decode("stats|queue|||12p|42")
    assert intent.filter_state == FilterState(size=SizeFilter.SMALL)


def test_unknown_action_decodes_to_none() -> None:
    intent = stats_codec().decode("stats|colour|weekly|both|both|42")
    assert intent.action is None
    assert intent.filter_state.time is TimeFilter.WEEKLY


@pytest.mark.parametrize(
    "token",
    [
        "",
        "notables|time|weekly|both|both|42",
        "stats|time|weekly|both|both",
        "stats|time|weekly|both|both|42|extra",
        "stats|time|weekly|both|both|  ",
        "statsy|time|weekly|both|both|42",
    ],
)
def test_structural_defects_are_rejected(token: str) -> None:
    codec = stats_codec()
    with pytest.raises(MalformedTriggerError) as exc_info:
        codec.decode(token)
    assert exc_info.value.error_code == "malformed_trigger"
    assert codec.try_decode(token) is None


def test_non_string_token_is_rejected() -> None:
    with pytest.raises(MalformedTriggerError):
        stats_codec().decode(None)  # type: ignore[arg-type]


def test_encode_rejects_unembeddable_context() -> None:
    codec = stats_codec()
    with pytest.raises(ValueError):
        codec.encode(FilterState(), "4|2")
    with pytest.raises(ValueError):
        codec.encode(FilterState(), "  ")


def test_encode_refuses_padded_context_instead_of_trimming() -> None:
    codec = stats_codec()
    for padded in (" 42", "42 ", "\t42"):
        with pytest.raises(ValueError):
            codec.encode(FilterState(), padded)
    assert codec.decode(codec.encode(FilterState(), "42")).context_id == "42"


def test_check_context_covers_the_widest_button() -> None:
    codec = stats_codec()
    # stats|players|alltime|squads|both| leaves 66 chars for the id
    assert codec.check_context("x" * 66) == "x" * 66
    with pytest.raises(ValueError):
        codec.check_context("x" * 67)
    with pytest.raises(ValueError):
        codec.check_context(" 42")
    # a narrow state still encodes an id the widest button could not carry
    assert len(codec.encode(FilterState(), "x" * 67, action="time")) <= codec.max_length


def test_encode_enforces_length_limit() -> None:
    codec = stats_codec()
    with pytest.raises(ValueError):
        codec.encode(FilterState(), "9" * 100, action="time")


def test_codec_requires_all_dimensions_in_order() -> None:
    with pytest.raises(ValueError):
        FilterStateCodec("stats", NOTABLES_DIMENSIONS[:2])
    with pytest.raises(ValueError):
        FilterStateCodec("st|ats")


# --- invalidation table ---


def test_stats_dimensions_never_invalidate() -> None:
    codec = stats_codec()
    before = FilterState()
    after = FilterState(TimeFilter.SEASON, QueueFilter.SOLO, SizeFilter.LARGE)
    assert codec.invalidated_by(before, after) == frozenset()


def test_notables_size_change_invalidates_record() -> None:
    codec = notables_codec()
    both = FilterState()
    small = FilterState(size=SizeFilter.SMALL)
    assert codec.invalidated_by(both, small) == {"record"}
    assert codec.invalidated_by(small, FilterState(size=SizeFilter.LARGE)) == {"record"}


def test_notables_return_to_both_still_invalidates() -> None:
    codec = notables_codec()
    assert codec.invalidated_by(FilterState(size=SizeFilter.LARGE), FilterState()) == {"record"}


def test_notables_other_dimensions_keep_record() -> None:
    codec = notables_codec()
    assert codec.invalidated_by(FilterState(), FilterState(time=TimeFilter.WEEKLY)) == frozenset()
    assert codec.invalidated_by(FilterState(), FilterState()) == frozenset()


def test_dimension_lookup_by_action() -> None:
    codec = stats_codec()
    assert codec.dimension_for("players").name == "size"
    assert codec.dimension_for("bogus") is None
    assert codec.dimension_for(None) is None


def test_merge_takes_only_the_targeted_dimension() -> None:
    codec = stats_codec()
    base = FilterState(queue=QueueFilter.SOLO)
    intent = codec.decode("stats|time|weekly|both|24p|42")
    assert codec.merge(base, intent) == FilterState(TimeFilter.WEEKLY, QueueFilter.SOLO)
    assert codec.merge(base, codec.decode("stats|colour|weekly|both|24p|42")) == base


# --- leaderboard ---


def test_leaderboard_layout() -> None:
    codec = leaderboard_codec()
    state = LeaderboardState(TimeFilter.WEEKLY, GameFilter.TWENTY_FOUR, 3)
    token = codec.encode(state, "srv1", action="next")
    assert token == "leaderboard|next|weekly|mkworld24p|3|srv1"
    intent = codec.decode(token)
    assert intent.filter_state == state
    assert intent.action == "next"
    assert codec.default_state() == LeaderboardState()


@pytest.mark.parametrize(
    ("raw", "page"),
    [("1", 1), ("7", 7), ("0", 1), ("-4", 1), ("", 1), ("two", 1), ("123456", 9999)],
)
def test_leaderboard_page_is_bounded_on_decode(raw: str, page: int) -> None:
    intent = leaderboard_codec().decode(f"leaderboard|prev|alltime|mkworld12p|{raw}|srv1")
    assert intent.filter_state.page == page


def test_leaderboard_field_count_follows_dimensions() -> None:
    codec = leaderboard_codec()
    assert codec.field_count == 6
    with pytest.raises(MalformedTriggerError):
        codec.decode("leaderboard|next|alltime|mkworld12p|srv1")
    with pytest.raises(MalformedTriggerError):
        stats_codec().decode("leaderboard|next|alltime|mkworld12p|2|srv1")


def test_leaderboard_page_actions_share_one_dimension() -> None:
    codec = leaderboard_codec()
    for action in ("first", "prev", "next", "last", "find"):
        assert codec.dimension_for(action) is codec.page_dimension
    assert codec.dimension_for("format").name == "game"
    assert stats_codec().page_dimension is None


def test_leaderboard_ranking_change_resets_page() -> None:
    codec = leaderboard_codec()
    base = LeaderboardState(page=4)
    weekly = codec.merge(base, codec.decode("leaderboard|time|weekly|mkworld12p|4|srv1"))
    assert weekly == LeaderboardState(time=TimeFilter.WEEKLY, page=1)
    game = codec.merge(base, codec.decode("leaderboard|format|alltime|mkworld24p|4|srv1"))
    assert game == LeaderboardState(game=GameFilter.TWENTY_FOUR, page=1)
    paged = codec.merge(base, codec.decode("leaderboard|next|season|mkworld24p|5|srv1"))
    assert paged == LeaderboardState(page=5)


def test_leaderboard_game_change_invalidates_record() -> None:
    codec = leaderboard_codec()
    assert codec.invalidated_by(LeaderboardState(), LeaderboardState(game=GameFilter.TWENTY_FOUR)) == {"record"}
    assert codec.invalidated_by(LeaderboardState(), LeaderboardState(page=9)) == frozenset()
    assert codec.invalidated_by(LeaderboardState(), LeaderboardState(time=TimeFilter.SEASON)) == frozenset()


def test_codec_rejects_mismatched_state_type() -> None:
    with pytest.raises(ValueError):
        FilterStateCodec("stats", NOTABLES_DIMENSIONS, state_type=LeaderboardState)
