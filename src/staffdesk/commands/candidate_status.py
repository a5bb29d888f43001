"""Candidate status command."""

import logging

from ..resolution.people import NotFound, Single
from ..router.intent import MarkCandidatePendingParams
from ..storage.errors import StoreError
from ..storage.models import PersonKind
from .base import CommandContext, unresolved_reply
from .formatting import format_display_datetime

logger = logging.getLogger(__name__)

PENDING_STATUS = "Pending"


class CandidateStatusCommandHandler:
    """Moves candidates to the Pending status."""

    def __init__(self, context: CommandContext) -> None:
        self._ctx = context

    def mark_pending(self, params: MarkCandidatePendingParams, user_id: str) -> str:
        """Set a candidate's status to Pending.

        Repeating the command leaves the status unchanged and still succeeds.

        Args:
            params: Candidate name.
            user_id: Acting staff member.

        Returns:
            Reply text.
        """
        try:
            resolution = self._ctx.resolver.resolve(params.name, (PersonKind.CANDIDATE,))
            if isinstance(resolution, NotFound):
                return f'Candidate "{params.name}" not found in the system.'
            if not isinstance(resolution, Single):
                return unresolved_reply(resolution, params.name, lambda kind: params.name)

            candidate = resolution.person
            if not self._ctx.store.candidates.update_status(candidate.id, PENDING_STATUS):
                return f'Candidate "{params.name}" not found in the system.'
        except StoreError as e:
            logger.error("Failed to update candidate status for %s: %s", params.name, e)
            return f"Failed to update candidate status: {e}"

        if candidate.status != PENDING_STATUS:
            self._ctx.audit(
                user_id,
                "status_change",
                f"Changed status of {candidate.name} from {candidate.status or 'none'} "
                f"to {PENDING_STATUS}",
                entity_type=PersonKind.CANDIDATE.value,
                entity_id=candidate.id,
                entity_name=candidate.name,
                old_value=candidate.status or None,
                new_value=PENDING_STATUS,
            )

        shown = format_display_datetime(self._ctx.now(), self._ctx.timezone)
        logger.info("Candidate %s marked %s", candidate.name, PENDING_STATUS)
        return f"Candidate {candidate.name} has been updated to {PENDING_STATUS} status at {shown}."


__all__ = ["PENDING_STATUS", "CandidateStatusCommandHandler"]
