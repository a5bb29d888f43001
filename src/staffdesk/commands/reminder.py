"""Follow-up reminder commands for candidates and clients."""

import logging
from datetime import MAXYEAR, datetime, timedelta

from ..resolution.conflicts import Conflict
from ..resolution.people import ALL_KINDS, Single
from ..router.intent import ConfirmReminderParams, SetReminderParams
from ..storage.errors import SchemaGapError, StoreError
from ..storage.models import PendingConfirmationDTO, PersonDTO, PersonKind
from .base import CommandContext, migration_reply, unresolved_reply
from .formatting import format_display_datetime, format_display_time

logger = logging.getLogger(__name__)

STATIC_CONFIRMATION = "✅ Reminder confirmed and set successfully despite conflict."
TOO_FAR_AHEAD_REPLY = "Sorry, I can't set a reminder that far ahead."


class ReminderCommandHandler:
    """Sets reminders and handles the confirmation that follows a conflict."""

    def __init__(self, context: CommandContext) -> None:
        """Initialize handler.

        Args:
            context: Shared command context.
        """
        self._ctx = context

    def set_reminder(self, params: SetReminderParams, user_id: str) -> str:
        """Set a reminder ``hours`` from now for the named person.

        Candidates with an interview on the same local day are not updated;
        the reply lists the interview times instead.

        Args:
            params: Name, hours and optional kind from the message.
            user_id: Acting staff member.

        Returns:
            Reply text.
        """
        remind_at = self._remind_at(params.hours)
        if remind_at is None:
            logger.info("Rejected reminder %d hours ahead", params.hours)
            return TOO_FAR_AHEAD_REPLY

        kinds = (params.kind,) if params.kind else ALL_KINDS

        def usage(kind: PersonKind) -> str:
            return f"set reminder for {kind.value.upper()} {params.name} in next {params.hours} hours"

        try:
            resolution = self._ctx.resolver.resolve(params.name, kinds)
            if not isinstance(resolution, Single):
                return unresolved_reply(resolution, params.name, usage)

            person = resolution.person

            if person.kind is PersonKind.CANDIDATE:
                conflict = self._ctx.conflicts.check(person.id, remind_at)
                if conflict is not None:
                    return self._withhold(person, remind_at, conflict, user_id)

            return self._write(person, remind_at, user_id)
        except SchemaGapError as e:
            logger.error("Reminder field missing for %s: %s", params.name, e)
            return migration_reply(e)
        except StoreError as e:
            logger.error("Failed to set reminder for %s: %s", params.name, e)
            return f"Failed to set reminder: {e}"

    def _remind_at(self, hours: int) -> datetime | None:
        """The instant ``hours`` from now, or None past the last representable year."""
        try:
            remind_at = self._ctx.now() + timedelta(hours=hours)
        except OverflowError:
            return None
        # Leaves room to shift into the display timezone.
        return remind_at if remind_at.year < MAXYEAR else None

    def confirm_pending(self, params: ConfirmReminderParams, user_id: str) -> str:
        """Confirm a reminder that was withheld by a conflict.

        Unless pending confirmations are tracked, the reply is a fixed
        acknowledgement and nothing is written.

        Args:
            params: Unused; the confirmation carries no parameters.
            user_id: Acting staff member.

        Returns:
            Reply text.
        """
        if not self._ctx.config.confirmations.track_pending:
            return STATIC_CONFIRMATION

        try:
            pending = self._ctx.store.confirmations.pop_latest(user_id, self._ctx.now())
            if pending is None:
                return STATIC_CONFIRMATION

            repository = self._ctx.store.people(pending.person.kind)
            person = repository.get_by_id(pending.person.id)
            if person is None:
                return f'"{pending.person_name}" no longer exists, so no reminder was set.'

            return self._write(person, pending.reminder_at, user_id, confirmed=True)
        except SchemaGapError as e:
            logger.error("Reminder field missing: %s", e)
            return migration_reply(e)
        except StoreError as e:
            logger.error("Failed to confirm reminder: %s", e)
            return f"Failed to confirm reminder: {e}"

    def _withhold(
        self, person: PersonDTO, remind_at: datetime, conflict: Conflict, user_id: str
    ) -> str:
        confirmations = self._ctx.config.confirmations
        if confirmations.track_pending:
            now = self._ctx.now()
            self._ctx.store.confirmations.save(
                PendingConfirmationDTO(
                    user_id=user_id,
                    person=person.ref,
                    person_name=person.name,
                    reminder_at=remind_at,
                    expires_at=now + timedelta(minutes=confirmations.ttl_minutes),
                )
            )

        times = ", ".join(format_display_time(t, self._ctx.timezone) for t in conflict.times)
        logger.info("Reminder for %s withheld: interview conflict at %s", person.name, times)
        return (
            f"⚠️ CONFLICT: {person.name} has interview(s) scheduled on the same day at {times}. "
            'The reminder was not set. Reply "confirm reminder" to set it anyway.'
        )

    def _write(
        self, person: PersonDTO, remind_at: datetime, user_id: str, confirmed: bool = False
    ) -> str:
        repository = self._ctx.store.people(person.kind)
        if not repository.set_reminder(person.id, remind_at):
            return f'"{person.name}" not found in {person.kind.value}s.'

        shown = format_display_datetime(remind_at, self._ctx.timezone)
        self._ctx.audit(
            user_id,
            "reminder",
            f"Set reminder for {person.kind.value} {person.name} for {shown}",
            entity_type=person.kind.value,
            entity_id=person.id,
            entity_name=person.name,
            old_value=person.reminder_at.isoformat() if person.reminder_at else None,
            new_value=remind_at.isoformat(),
        )
        logger.info("Reminder set for %s %s at %s", person.kind.value, person.name, shown)

        contact = person.contact or "no contact"
        if confirmed:
            return (
                f"✅ Reminder confirmed and set for {person.kind.value} {person.name} "
                f"({contact}) for {shown}."
            )
        return f"✅ Reminder set for {person.kind.value} {person.name} ({contact}) for {shown}."


__all__ = ["STATIC_CONFIRMATION", "TOO_FAR_AHEAD_REPLY", "ReminderCommandHandler"]
