"""Upstream data exceptions.

Raised while resolving the snapshot a render needs. All of them are scoped
to a single response; none is fatal to the process.
"""


class UpstreamNotFoundError(Exception):
    """The stats provider has no data for the requested context."""

    def __init__(self, context_id: str) -> None:
        super().__init__(f"no upstream data for context {context_id!r}")
        self.context_id = context_id


class UpstreamUnavailableError(Exception):
    """The stats provider or preference store failed transiently."""


__all__ = ["UpstreamNotFoundError", "UpstreamUnavailableError"]
