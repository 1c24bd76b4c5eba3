"""statsview: interactive render-session controller.

A stats image is rendered for an outward-facing response; the user toggles
filter buttons on it and every toggle starts a new asynchronous re-render.
This package keeps the per-response state those re-renders share and makes
sure only the newest render's result ever reaches the response.

Architecture Overview:
    - server.py: FastAPI application factory (/healthz, /ws)
    - config/: Configuration modules (environment-based)
    - cache/: TTL cache store with sliding expiry and an eviction hook
    - codec/: Trigger token codec and filter button rows
    - state/: FilterState, LeaderboardState and SessionRecord dataclasses
    - sessions/: Render token ledger, snapshot reuse, ports and dispatcher
    - handlers/: WebSocket transport and per-connection rate limiting
    - errors/: Exception types, one module per concern
    - telemetry/: OpenTelemetry metrics/traces and Sentry error capture

Environment Variables:
    Optional:
        - STATS_SESSION_TTL_S / NOTABLES_SESSION_TTL_S / LEADERBOARD_SESSION_TTL_S:
          idle lifetime (600)
        - LEADERBOARD_PAGE_SIZE: entries per leaderboard page (10)
        - WS_MAX_MESSAGES_PER_WINDOW / WS_MESSAGE_WINDOW_SECONDS: frame limits
        - APP_LOG_LEVEL: root log level (INFO)
        - SENTRY_DSN: enables Sentry error capture
        - OTLP_ENDPOINT: enables OTLP metric and trace export (OTLP_API_TOKEN,
          OTLP_HEADERS for auth)
"""
