"""Command handlers for StaffDesk.

One handler per area; each method takes the intent's parameters and the
acting user ID and returns the reply text.
"""

from .base import CommandContext, utc_now
from .candidate_status import CandidateStatusCommandHandler
from .finance import FinanceCommandHandler
from .meeting_note import MeetingNoteCommandHandler
from .reminder import ReminderCommandHandler
from .tasks import TaskCommandHandler

__all__ = [
    "CandidateStatusCommandHandler",
    "CommandContext",
    "FinanceCommandHandler",
    "MeetingNoteCommandHandler",
    "ReminderCommandHandler",
    "TaskCommandHandler",
    "utc_now",
]
