"""Shared fakes and helpers for unit tests and the live client."""

__all__ = [
    "sessions",
]
