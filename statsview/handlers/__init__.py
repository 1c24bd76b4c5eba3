"""Client-facing handlers.

limits.py:
    Sliding window rate limiter for per-connection frame throttling.

websocket/:
    WebSocket frame parsing, routing and the ResponseTransport adapter that
    carries dispatcher output back to the connection owning each response.
"""
