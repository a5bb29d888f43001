"""Q&A fallback for messages that name no action.

The assistant is given a snapshot of the agency's data and the current
local time, and answers the question in plain text.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import TYPE_CHECKING
from zoneinfo import ZoneInfo

from bson import json_util
from pymongo.errors import PyMongoError

from ..commands.formatting import format_display_datetime, strip_emphasis
from .client import ClaudeClient, ClaudeClientConfig
from .errors import (
    ClaudeAPIError,
    ClaudeAuthError,
    ClaudeConnectivityError,
    ClaudeError,
    ClaudeTimeoutError,
)

if TYPE_CHECKING:
    from ..config import ClaudeConfig
    from ..storage.qa_repository import QARepository
    from ..storage.snapshot import SnapshotReader

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are the StaffDesk assistant for a recruitment and staffing agency.

IMPORTANT RESTRICTIONS:
- You ONLY discuss the agency's business data and operations
- You CANNOT help with other companies or general questions
- If asked about anything else, politely redirect to the agency's data
- Current local time: {now}
- Use this local time format in all responses

AGENCY DATA:
{data}

INSTRUCTIONS:
- Be direct and concise, with no introductory phrases like "Here is" or "Based on"
- Answer exactly what was asked
- If there is not enough data, say "Not enough data" and mention what is available
- Reference names, fees and placement details when relevant
- Reply in plain text without markdown formatting"""

EMPTY_ANSWER = "I apologize, but I couldn't process your request right now."
AUTH_MESSAGE = (
    "The assistant is not set up yet. "
    "Set the ANTHROPIC_API_KEY environment variable to enable questions."
)
CONNECTIVITY_MESSAGE = (
    "I can't reach the assistant right now. Please check the connection and try again."
)
TIMEOUT_MESSAGE = "The assistant is taking longer than expected. Please try again."
RATE_LIMIT_MESSAGE = "The assistant is on a short coffee break. Please try again in a minute."
API_ERROR_MESSAGE = "The assistant could not answer that right now. Please try again later."


class KnowledgeAssistant:
    """Answers open-ended questions from a snapshot of the business data."""

    def __init__(
        self,
        repository: QARepository,
        snapshot: SnapshotReader,
        timezone: ZoneInfo,
        settings: ClaudeConfig | None = None,
        client: ClaudeClient | None = None,
    ) -> None:
        """Initialize assistant.

        Args:
            repository: Where question and answer pairs are kept.
            snapshot: Reader for the data the assistant may see.
            timezone: Display timezone for the "now" given to the model.
            settings: Model settings; the API key still comes from the environment.
            client: Pre-built client, mainly for tests. Created lazily if None.
        """
        self._repository = repository
        self._snapshot = snapshot
        self._timezone = timezone
        self._settings = settings
        self._client = client

    def _get_client(self) -> ClaudeClient:
        """Get or create Claude client.

        Raises:
            ClaudeAuthError: If API key is not configured.
        """
        if self._client is None:
            try:
                self._client = ClaudeClient(ClaudeClientConfig.from_env(self._settings))
            except ValueError as e:
                raise ClaudeAuthError(str(e)) from e
        return self._client

    def build_system_prompt(self, now: datetime) -> str:
        """Fill the system prompt with the snapshot and local time."""
        data = json_util.dumps(self._snapshot.fetch(), indent=2)
        return SYSTEM_PROMPT.format(now=format_display_datetime(now, self._timezone), data=data)

    def answer(self, question: str, user_id: str, now: datetime) -> str:
        """Answer a question, turning failures into fixed messages.

        Args:
            question: The message that matched no action.
            user_id: Staff ID of whoever asked.
            now: Current instant.

        Returns:
            Reply text.
        """
        try:
            client = self._get_client()
            response = client.send_message(question, self.build_system_prompt(now))
        except ClaudeAuthError as e:
            logger.error("Claude authentication failed: %s", e)
            return AUTH_MESSAGE
        except ClaudeTimeoutError as e:
            logger.warning("Claude request timed out: %s", e)
            return TIMEOUT_MESSAGE
        except ClaudeConnectivityError as e:
            logger.warning("Claude unreachable: %s", e)
            return CONNECTIVITY_MESSAGE
        except ClaudeAPIError as e:
            logger.error("Claude API error: %s", e)
            return RATE_LIMIT_MESSAGE if e.is_rate_limited else API_ERROR_MESSAGE
        except ClaudeError as e:
            logger.error("Claude request failed: %s", e)
            return API_ERROR_MESSAGE

        text = strip_emphasis(response.text).strip() or EMPTY_ANSWER
        logger.debug(
            "Received answer (%d tokens, %dms): %s...",
            response.tokens_used,
            response.latency_ms,
            text[:50],
        )

        try:
            self._repository.save_exchange(
                user_id=user_id,
                question=question,
                answer=text,
                model=response.model,
                tokens_used=response.tokens_used,
                latency_ms=response.latency_ms,
                timestamp=now,
            )
        except PyMongoError as e:
            logger.warning("Failed to save Q&A exchange: %s", e)

        return text


__all__ = ["KnowledgeAssistant", "SYSTEM_PROMPT"]
