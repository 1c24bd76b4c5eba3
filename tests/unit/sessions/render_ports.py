"""Unit tests for port helpers and dispatcher wiring."""

from __future__ import annotations

import asyncio
import threading

import pytest

from statsview.server import build_dispatchers
from statsview.sessions.ports import RenderOutput, offload
from statsview.state.filters import FilterState
from statsview.state.session import UpstreamSnapshot
from tests.helpers.sessions import (
    FakeListing,
    FakePreferences,
    FakeRenderer,
    FakeUpstream,
    RecordingTransport,
    describe,
)


def test_offload_runs_sync_renderer_in_worker_thread() -> None:
    threads: list[str] = []

    def _draw(snapshot: UpstreamSnapshot, filter_state: FilterState) -> RenderOutput:
        threads.append(threading.current_thread().name)
        return RenderOutput(content=str(snapshot.record), image=b"img")

    async def _noop(message: str) -> None:
        return None

    async def _run() -> RenderOutput:
        render = offload(_draw)
        return await render(UpstreamSnapshot(record={"a": 1}), FilterState(), _noop)

    output = asyncio.run(_run())
    assert output.content == "{'a': 1}"
    assert output.filename == "stats.png"
    assert threads and threads[0] != threading.main_thread().name


def test_build_dispatchers_uses_view_codecs() -> None:
    dispatchers = build_dispatchers(
        FakeUpstream(),
        FakePreferences(),
        {"stats": FakeRenderer(), "notables": FakeRenderer()},
        RecordingTransport(),
    )
    assert dispatchers["stats"].codec.command == "stats"
    assert dispatchers["notables"].codec.dimensions[2].invalidates == {"record"}


def test_build_dispatchers_rejects_unknown_view() -> None:
    with pytest.raises(ValueError):
        build_dispatchers(FakeUpstream(), FakePreferences(), {"rankings": FakeRenderer()}, RecordingTransport())


def test_build_dispatchers_wires_leaderboard_listing() -> None:
    listing = FakeListing()
    dispatchers = build_dispatchers(
        FakeUpstream(),
        FakePreferences(),
        {"leaderboard": FakeRenderer()},
        RecordingTransport(),
        {"leaderboard": listing},
    )
    assert dispatchers["leaderboard"].codec.page_dimension is not None
    with pytest.raises(ValueError):
        build_dispatchers(FakeUpstream(), FakePreferences(), {"leaderboard": FakeRenderer()}, RecordingTransport())


def test_app_health_and_websocket_round_trip() -> None:
    from fastapi.testclient import TestClient

    from statsview.server import create_app

    app = create_app(FakeUpstream(), FakePreferences(), {"stats": FakeRenderer()})
    with TestClient(app) as client:
        health = client.get("/healthz").json()
        assert health["status"] == "ok"
        assert health["sessions"]["stats"]["entries"] == 0

        with client.websocket_connect("/ws") as ws:
            ws.send_json({"type": "open", "view": "stats", "response_id": "m1", "context_id": "42"})
            frame = ws.receive_json()
            while frame["type"] != "result":
                frame = ws.receive_json()
            assert frame["response_id"] == "m1"
            assert frame["content"] == describe(FilterState())
            assert client.get("/healthz").json()["sessions"]["stats"]["entries"] == 1
            ws.send_json({"type": "end"})
            assert ws.receive_json() == {"type": "connection_closed", "reason": "client_request"}
