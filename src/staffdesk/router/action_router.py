"""Entry point that turns one chat message into one reply.

Matched intents are dispatched to their command handler; anything else goes
to the Q&A assistant together with a snapshot of the agency's data.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from ..claude.assistant import KnowledgeAssistant
from ..commands.base import Clock, CommandContext, utc_now
from ..commands.candidate_status import CandidateStatusCommandHandler
from ..commands.finance import FinanceCommandHandler
from ..commands.meeting_note import MeetingNoteCommandHandler
from ..commands.reminder import ReminderCommandHandler
from ..commands.tasks import TaskCommandHandler
from ..config import StaffDeskConfig
from ..storage.store import RecordStore
from .intent import Intent, IntentExtractor, IntentType

logger = logging.getLogger(__name__)

GENERIC_FAILURE = "Sorry, something went wrong while handling that request. Please try again."
VALIDATION_REPLY = "A message and a user ID are required."

Handler = Callable[[Any, str], str]


@dataclass(frozen=True)
class InboundMessage:
    """One chat message and the staff member who sent it."""

    text: str
    acting_user_id: str


class ActionRouter:
    """Routes chat messages to command handlers or the Q&A assistant."""

    def __init__(
        self,
        store: RecordStore,
        config: StaffDeskConfig,
        assistant: KnowledgeAssistant | None = None,
        clock: Clock = utc_now,
        extractor: IntentExtractor | None = None,
    ) -> None:
        """Initialize router.

        Args:
            store: Record store the handlers read and write.
            config: Loaded configuration.
            assistant: Q&A fallback. Built from config if None.
            clock: Source of the current instant.
            extractor: Intent extractor; the default rule set if None.
        """
        self._context = CommandContext(store, config, clock)
        self._extractor = extractor or IntentExtractor()
        self._assistant = assistant or KnowledgeAssistant(
            repository=store.qa,
            snapshot=store.snapshot,
            timezone=self._context.timezone,
            settings=config.claude,
        )

        reminders = ReminderCommandHandler(self._context)
        notes = MeetingNoteCommandHandler(self._context)
        candidates = CandidateStatusCommandHandler(self._context)
        finance = FinanceCommandHandler(self._context)
        tasks = TaskCommandHandler(self._context)

        self._handlers: dict[IntentType, Handler] = {
            IntentType.SET_REMINDER: reminders.set_reminder,
            IntentType.ADD_MEETING_NOTE: notes.add_note,
            IntentType.MARK_MEETING_NOTE_DONE: notes.mark_done,
            IntentType.CONFIRM_PENDING_REMINDER: reminders.confirm_pending,
            IntentType.MARK_CANDIDATE_PENDING: candidates.mark_pending,
            IntentType.FINANCE_QUERY: finance.summary,
            IntentType.MEETING_TASK_QUERY: tasks.meeting_tasks,
            IntentType.GENERIC_TASK_QUERY: tasks.task_list,
            IntentType.ASSIGN_TASK: tasks.assign,
        }

    @property
    def extractor(self) -> IntentExtractor:
        return self._extractor

    def handle(self, message: InboundMessage) -> str:
        """Handle one message and return the reply text.

        Never raises: unexpected errors become a generic failure reply.

        Args:
            message: The inbound message.

        Returns:
            Reply text.
        """
        if not message.text or not message.text.strip() or not message.acting_user_id:
            return VALIDATION_REPLY

        try:
            intent = self._extractor.extract(message.text)
            if intent is None:
                logger.info("No action matched, asking assistant")
                return self._assistant.answer(
                    message.text, message.acting_user_id, self._context.now()
                )
            return self._dispatch(intent, message.acting_user_id)
        except Exception:
            logger.exception("Unhandled error routing message: %s", message.text[:50])
            return GENERIC_FAILURE

    def _dispatch(self, intent: Intent, user_id: str) -> str:
        """Run the handler registered for an intent."""
        logger.info(
            "Handling %s for user %s: %s", intent.type.value, user_id, intent.raw_text[:50]
        )
        return self._handlers[intent.type](intent.params, user_id)


__all__ = [
    "GENERIC_FAILURE",
    "VALIDATION_REPLY",
    "ActionRouter",
    "InboundMessage",
]
