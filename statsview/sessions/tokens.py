"""Render token ledger.

Every render cycle for a response key starts by taking a token from the
ledger. Tokens carry a generation number drawn from one counter per ledger,
so they are unique across keys and never reissued, even after a key is
dropped and reopened.

A render may only apply user-visible side effects while its token is still
the newest one issued for its key::

    token = ledger.begin(key)
    try:
        output = await render(...)
        if ledger.is_active(key, token):
            apply(output)
    finally:
        ledger.end(key, token)

This gives the two ordering guarantees the dispatcher relies on:

- at most one of N overlapping renders for a key applies its output;
- the one that applies is the most recently *started*, never a stale render
  that merely finished last.
"""

from __future__ import annotations

import itertools
from collections.abc import Hashable
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class RenderToken:
    """Opaque marker of render-cycle recency, compared by value."""

    key: Hashable
    generation: int

    def __str__(self) -> str:
        return f"r{self.generation}"


class RenderTokenLedger:
    """Per-key record of the token currently authorized to commit."""

    def __init__(self) -> None:
        self._generations = itertools.count(1)
        self._active: dict[Hashable, RenderToken] = {}

    def begin(self, key: Hashable) -> RenderToken:
        """Issue a fresh token for ``key`` and make it the active one."""
        token = RenderToken(key=key, generation=next(self._generations))
        self._active[key] = token
        return token

    def is_active(self, key: Hashable, token: RenderToken | None) -> bool:
        """True iff ``token`` is still the most recently issued for ``key``."""
        if token is None:
            return False
        return self._active.get(key) == token

    def end(self, key: Hashable, token: RenderToken | None) -> bool:
        """Clear the active token if it is still ``token``.

        Returns:
            True if the token was active and got cleared, False for a no-op.
        """
        if token is None or self._active.get(key) != token:
            return False
        del self._active[key]
        return True

    def active(self, key: Hashable) -> RenderToken | None:
        return self._active.get(key)

    def discard(self, key: Hashable) -> RenderToken | None:
        """Drop whatever token is active for ``key``.

        Used on explicit invalidation: every in-flight render for the key
        observes ``is_active == False`` from now on.
        """
        return self._active.pop(key, None)

    def __len__(self) -> int:
        return len(self._active)


__all__ = ["RenderToken", "RenderTokenLedger"]
