"""Claude integration for StaffDesk.

Answers open-ended questions about the agency's data when a message names
no concrete action.
"""

from .assistant import KnowledgeAssistant
from .client import ClaudeClient, ClaudeClientConfig, ClaudeResponse
from .errors import (
    ClaudeAPIError,
    ClaudeAuthError,
    ClaudeConnectivityError,
    ClaudeError,
    ClaudeTimeoutError,
)

__all__ = [
    "ClaudeAPIError",
    "ClaudeAuthError",
    "ClaudeClient",
    "ClaudeClientConfig",
    "ClaudeConnectivityError",
    "ClaudeError",
    "ClaudeResponse",
    "ClaudeTimeoutError",
    "KnowledgeAssistant",
]
