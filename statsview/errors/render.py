"""Render-time exceptions."""

from ..config.messages import MSG_NO_MATCHING_DATA


class NoMatchingDataError(Exception):
    """Raised by a renderer when the active filters select nothing.

    The message is shown to the user verbatim.
    """

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or MSG_NO_MATCHING_DATA)
        self.message = message or MSG_NO_MATCHING_DATA


__all__ = ["NoMatchingDataError"]
