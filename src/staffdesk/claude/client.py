"""Claude API client for the StaffDesk assistant.

Thin wrapper over the anthropic SDK that returns typed responses and
raises the errors defined in :mod:`staffdesk.claude.errors`.
"""

import os
import time
from dataclasses import dataclass

import anthropic

from ..config import ClaudeConfig
from .errors import (
    ClaudeAPIError,
    ClaudeAuthError,
    ClaudeConnectivityError,
    ClaudeTimeoutError,
)


@dataclass
class ClaudeClientConfig:
    """Configuration for Claude client."""

    api_key: str
    model: str = "claude-sonnet-4-20250514"
    max_tokens: int = 512
    temperature: float = 0.7
    timeout_seconds: float = 30.0

    @classmethod
    def from_env(cls, settings: ClaudeConfig | None = None) -> "ClaudeClientConfig":
        """Create config from environment variables and loaded settings.

        Args:
            settings: Model settings from the YAML config; defaults if None.

        Returns:
            ClaudeClientConfig with API key from environment.

        Raises:
            ValueError: If ANTHROPIC_API_KEY is not set.
        """
        api_key = os.environ.get("ANTHROPIC_API_KEY", "").strip()
        if not api_key:
            raise ValueError(
                "ANTHROPIC_API_KEY environment variable is not set. "
                "Set it to let the assistant answer questions."
            )
        settings = settings or ClaudeConfig()
        return cls(
            api_key=api_key,
            model=settings.model,
            max_tokens=settings.max_tokens,
            temperature=settings.temperature,
            timeout_seconds=settings.timeout_seconds,
        )


@dataclass
class ClaudeResponse:
    """Response from Claude API."""

    text: str
    tokens_used: int
    model: str
    latency_ms: int


class ClaudeClient:
    """Client for Claude API communication."""

    def __init__(self, config: ClaudeClientConfig) -> None:
        """Initialize Claude client.

        Args:
            config: Configuration for the client.
        """
        self._config = config
        self._client = anthropic.Anthropic(
            api_key=config.api_key,
            timeout=config.timeout_seconds,
        )

    @property
    def model(self) -> str:
        return self._config.model

    def send_message(self, question: str, system: str) -> ClaudeResponse:
        """Ask a single question under the given system prompt.

        Args:
            question: The user's question.
            system: System prompt carrying instructions and business data.

        Returns:
            ClaudeResponse with text and metadata.

        Raises:
            ClaudeTimeoutError: If the request times out.
            ClaudeAPIError: If the API returns an error.
            ClaudeAuthError: If authentication fails.
            ClaudeConnectivityError: If network is unavailable.
        """
        start_time = time.monotonic()

        try:
            response = self._client.messages.create(
                model=self._config.model,
                max_tokens=self._config.max_tokens,
                temperature=self._config.temperature,
                system=system,
                messages=[{"role": "user", "content": question}],
            )
        except anthropic.AuthenticationError as e:
            raise ClaudeAuthError("Invalid API key. Please check your ANTHROPIC_API_KEY.") from e
        except anthropic.APITimeoutError as e:
            # Timeout is a subclass of connection error, so it goes first
            raise ClaudeTimeoutError(
                f"Request timed out after {self._config.timeout_seconds} seconds."
            ) from e
        except anthropic.APIConnectionError as e:
            raise ClaudeConnectivityError(f"Failed to connect to Claude API: {e}") from e
        except anthropic.APIStatusError as e:
            raise ClaudeAPIError(f"API error: {e.message}", status_code=e.status_code) from e

        latency_ms = int((time.monotonic() - start_time) * 1000)
        text = "".join(block.text for block in response.content if block.type == "text")

        return ClaudeResponse(
            text=text,
            tokens_used=response.usage.input_tokens + response.usage.output_tokens,
            model=response.model,
            latency_ms=latency_ms,
        )


__all__ = [
    "ClaudeClient",
    "ClaudeClientConfig",
    "ClaudeResponse",
]
