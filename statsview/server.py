"""FastAPI application factory for the stats view controller.

The stats provider, the preference store and the renderers belong to the
host, so there is no module-level app. Build one with :func:`create_app`:

    from statsview.server import create_app

    app = create_app(lounge_client, favorites_store, {"stats": render_stats})

Paginated views also need a ListingIndex per view:

    app = create_app(
        lounge_client,
        favorites_store,
        {"leaderboard": render_leaderboard},
        listings={"leaderboard": lounge_rankings},
    )

and serve it with uvicorn:

    uvicorn myhost.app:app --host 0.0.0.0 --port 8000

Endpoints:
    GET /healthz   liveness plus per-view session counts
    WS  /ws        open/trigger/close frames (see handlers/websocket)
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Callable, Mapping
from contextlib import asynccontextmanager

from fastapi import FastAPI, WebSocket
from fastapi.responses import ORJSONResponse

from .codec.filters import FilterStateCodec, leaderboard_codec, notables_codec, stats_codec
from .config import LEADERBOARD_COMMAND, NOTABLES_COMMAND, STATS_COMMAND
from .handlers.websocket import WebSocketTransport, handle_websocket_connection
from .logging import configure_logging
from .sessions.dispatcher import InteractionDispatcher
from .sessions.ports import ListingIndex, PreferenceStore, Renderer, UpstreamClient
from .telemetry import init_telemetry, shutdown_telemetry

logger = logging.getLogger(__name__)

_CODECS: dict[str, Callable[[], FilterStateCodec]] = {
    STATS_COMMAND: stats_codec,
    NOTABLES_COMMAND: notables_codec,
    LEADERBOARD_COMMAND: leaderboard_codec,
}


def build_dispatchers(
    upstream: UpstreamClient,
    preferences: PreferenceStore,
    renderers: Mapping[str, Renderer],
    transport: WebSocketTransport,
    listings: Mapping[str, ListingIndex] | None = None,
) -> dict[str, InteractionDispatcher]:
    """One dispatcher per view that has a renderer.

    Raises:
        ValueError: For a renderer registered under an unknown view, or a
            paginated view registered without a listing.
    """
    listings = listings or {}
    unknown = set(renderers) - set(_CODECS)
    if unknown:
        raise ValueError(f"unknown views: {', '.join(sorted(unknown))}")
    return {
        view: InteractionDispatcher(
            _CODECS[view](),
            upstream,
            preferences,
            renderer,
            transport,
            listing=listings.get(view),
        )
        for view, renderer in renderers.items()
    }


def create_app(
    upstream: UpstreamClient,
    preferences: PreferenceStore,
    renderers: Mapping[str, Renderer],
    listings: Mapping[str, ListingIndex] | None = None,
) -> FastAPI:
    """Wire dispatchers, the WebSocket transport and telemetry into an app."""
    configure_logging()
    transport = WebSocketTransport()
    dispatchers = build_dispatchers(upstream, preferences, renderers, transport, listings)

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        init_telemetry()
        logger.info("serving views: %s", ", ".join(sorted(dispatchers)))
        try:
            yield
        finally:
            for dispatcher in dispatchers.values():
                await dispatcher.close()
            shutdown_telemetry()

    app = FastAPI(default_response_class=ORJSONResponse, lifespan=lifespan)
    app.state.dispatchers = dispatchers
    app.state.transport = transport

    @app.get("/healthz")
    async def healthz():
        """Health check endpoint (no authentication required)."""
        return {
            "status": "ok",
            "sessions": {view: d.stats() for view, d in dispatchers.items()},
        }

    @app.websocket("/ws")
    async def websocket_endpoint(websocket: WebSocket):
        await handle_websocket_connection(websocket, dispatchers, transport)

    return app


__all__ = ["build_dispatchers", "create_app"]
