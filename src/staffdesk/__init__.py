"""StaffDesk - conversational action router for a staffing agency.

StaffDesk turns chat messages into actions on the agency's records:
- Reminders for candidates and clients, with interview conflict checks
- Meeting notes and their completion
- Candidate status changes
- Financial summaries
- Meeting task and task assignment queries

Messages that name no action are answered by Claude from a snapshot of
the agency's data.

Usage:
    python -m staffdesk --user staff-1 --message "finance"
    python -m staffdesk --profile prod --user staff-1
"""

__version__ = "0.1.0"

from .config import StaffDeskConfig
from .config.loader import load_config

__all__ = [
    "StaffDeskConfig",
    "__version__",
    "load_config",
]
