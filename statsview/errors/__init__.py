"""Centralized exception classes for the render-session controller.

This module re-exports all domain-specific exceptions from their respective
modules, providing a single import point for error handling.

Organization:
    - limits.py: Rate limiting errors with retry info
    - validation.py: Input validation errors with error codes
    - upstream.py: Stats provider / preference store failures
    - render.py: Renderer-raised conditions shown to the user
    - classify.py: Exception-to-telemetry label mapping
"""

from .limits import RateLimitError
from .classify import classify_error
from .render import NoMatchingDataError
from .validation import MalformedTriggerError, ValidationError
from .upstream import UpstreamNotFoundError, UpstreamUnavailableError

__all__ = [
    # Rate limiting
    "RateLimitError",
    # Validation
    "ValidationError",
    "MalformedTriggerError",
    # Upstream
    "UpstreamNotFoundError",
    "UpstreamUnavailableError",
    # Render
    "NoMatchingDataError",
    # Classification
    "classify_error",
]
