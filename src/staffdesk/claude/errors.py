"""Error types for the Q&A assistant.

The client maps anthropic SDK exceptions onto these so the assistant can
answer with a fixed, friendly message for each failure.
"""


class ClaudeError(Exception):
    """Base exception for assistant errors."""

    pass


class ClaudeTimeoutError(ClaudeError):
    """Raised when the model does not answer within the configured timeout."""

    pass


class ClaudeAPIError(ClaudeError):
    """Raised when the API rejects or fails a request."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        """Initialize API error.

        Args:
            message: Error message.
            status_code: HTTP status code if available.
        """
        super().__init__(message)
        self.status_code = status_code

    @property
    def is_rate_limited(self) -> bool:
        return self.status_code == 429


class ClaudeAuthError(ClaudeError):
    """Raised when no API key is configured or the key is rejected."""

    pass


class ClaudeConnectivityError(ClaudeError):
    """Raised when the API cannot be reached."""

    pass


__all__ = [
    "ClaudeAPIError",
    "ClaudeAuthError",
    "ClaudeConnectivityError",
    "ClaudeError",
    "ClaudeTimeoutError",
]
