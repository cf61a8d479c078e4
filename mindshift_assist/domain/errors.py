"""Error hierarchy for the assistance service.

Every failure of the external model surfaces as a ``ModelError``. The
orchestrator catches only this family and turns it into scripted fallback
text, so nothing here ever reaches the protocol layer.
"""

from __future__ import annotations

from typing import Optional


class AssistanceError(Exception):
    """Base for all assistance service errors."""


class ModelError(AssistanceError):
    """The external completion service could not produce a usable answer."""


class ConfigurationError(ModelError):
    """Missing or invalid model configuration (e.g. no API key).

    Raised when a call is attempted, never at startup.
    """


class ModelAuthError(ModelError):
    """Authentication failed (401/403)."""


class ModelRateLimitError(ModelError):
    """Rate limited or out of quota (429).

    Attributes:
        retry_after: Seconds to wait before retrying, or None if not provided.
    """

    def __init__(self, message: str = "Rate limited", retry_after: Optional[float] = None) -> None:
        self.retry_after = retry_after
        if retry_after is not None:
            message = f"{message} (retry after {retry_after}s)"
        super().__init__(message)


class ModelResponseError(ModelError):
    """Unexpected response format from the completion service."""


class ModelTimeoutError(ModelError):
    """The bounded wait for the completion service elapsed."""
