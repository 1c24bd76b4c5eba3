"""Input validation exceptions with structured error codes.

Validation failures carry both a human-readable message and a
machine-parseable error code so transport adapters can relay them as-is.
"""


class ValidationError(Exception):
    """Structured validation failure with error code metadata.

    Attributes:
        error_code: Machine-parseable error identifier.
        message: Human-readable error description.
    """

    def __init__(self, error_code: str, message: str) -> None:
        super().__init__(message)
        self.error_code = error_code
        self.message = message


class MalformedTriggerError(ValidationError):
    """Raised when a trigger token is structurally unusable.

    Only the shape of the token is checked here (prefix and field count).
    Unknown values inside a well-formed token decode to defaults instead.
    """

    def __init__(self, message: str, *, token: str | None = None) -> None:
        super().__init__("malformed_trigger", message)
        self.token = token


__all__ = ["ValidationError", "MalformedTriggerError"]
