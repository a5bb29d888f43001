"""Configuration module for StaffDesk.

This module provides configuration loading and profile management.
"""

from dataclasses import dataclass, field


@dataclass
class StoreConfig:
    """MongoDB connection configuration."""

    uri: str = "mongodb://localhost:27017"
    database: str = "staffdesk"
    max_pool_size: int = 50
    min_pool_size: int = 10
    connect_timeout_ms: int = 5000
    server_selection_timeout_ms: int = 5000


@dataclass
class DisplayConfig:
    """How dates and amounts are shown to the user."""

    timezone: str = "Africa/Nairobi"
    currency: str = "KSH"


@dataclass
class FinanceConfig:
    """Figures used by the financial summary."""

    paf_fee: float = 500
    active_status: str = "Active"
    won_status: str = "Won"


@dataclass
class ClaudeConfig:
    """Q&A fallback model configuration."""

    model: str = "claude-sonnet-4-20250514"
    max_tokens: int = 512
    temperature: float = 0.7
    timeout_seconds: float = 30.0


@dataclass
class ConfirmationConfig:
    """Handling of reminders withheld by a scheduling conflict."""

    track_pending: bool = False
    ttl_minutes: int = 15


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"


@dataclass
class StaffDeskConfig:
    """Main StaffDesk configuration."""

    store: StoreConfig = field(default_factory=StoreConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)
    finance: FinanceConfig = field(default_factory=FinanceConfig)
    claude: ClaudeConfig = field(default_factory=ClaudeConfig)
    confirmations: ConfirmationConfig = field(default_factory=ConfirmationConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    # Display name (lower-case) -> staff ID of users served by task commands
    roster: dict[str, str] = field(default_factory=dict)


# Public API
__all__ = [
    "ClaudeConfig",
    "ConfirmationConfig",
    "DisplayConfig",
    "FinanceConfig",
    "LoggingConfig",
    "StaffDeskConfig",
    "StoreConfig",
]
