"""In-memory caching primitives."""

from .ttl import TTLCacheStore

__all__ = ["TTLCacheStore"]
