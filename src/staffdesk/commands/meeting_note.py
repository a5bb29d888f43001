"""Meeting note commands: add a note and mark a note done."""

import logging

from ..resolution.people import ALL_KINDS, Single
from ..router.intent import AddMeetingNoteParams, MarkMeetingNoteDoneParams
from ..storage.errors import StoreError
from ..storage.models import MeetingNoteDTO, NoteStatus, PersonKind
from .base import CommandContext, unresolved_reply
from .formatting import ensure_terminal_punctuation, note_preview, strip_entities

logger = logging.getLogger(__name__)


class MeetingNoteCommandHandler:
    """Creates meeting notes and moves them from pending to completed."""

    def __init__(self, context: CommandContext) -> None:
        """Initialize handler.

        Args:
            context: Shared command context.
        """
        self._ctx = context

    def add_note(self, params: AddMeetingNoteParams, user_id: str) -> str:
        """Add a pending meeting note for a candidate or client.

        Args:
            params: Person name, note content and optional kind.
            user_id: Acting staff member, recorded as the note's author.

        Returns:
            Reply text.
        """
        kinds = (params.kind,) if params.kind else ALL_KINDS

        def usage(kind: PersonKind) -> str:
            return f"add meeting note for {kind.value.upper()} {params.person_name}: {params.content}"

        try:
            resolution = self._ctx.resolver.resolve(params.person_name, kinds)
            if not isinstance(resolution, Single):
                return unresolved_reply(resolution, params.person_name, usage)

            person = resolution.person
            now = self._ctx.now()
            note = MeetingNoteDTO(
                note_content=params.content,
                status=NoteStatus.PENDING,
                created_by=user_id,
                linked_to=person.ref,
                title=f"Meeting with {person.name}",
                meeting_date=now,
                created_at=now,
            )
            note_id = self._ctx.store.meeting_notes.save(note)
        except StoreError as e:
            logger.error("Failed to add meeting note for %s: %s", params.person_name, e)
            return f"Failed to add meeting note: {e}"

        self._ctx.audit(
            user_id,
            "create",
            f"Added meeting note for {person.kind.value} {person.name}",
            entity_type="meeting_note",
            entity_id=note_id,
            entity_name=person.name,
            new_value=params.content,
        )
        logger.info("Meeting note %s added for %s", note_id, person.name)
        echoed = ensure_terminal_punctuation(params.content)
        return f'✅ Meeting note added for {person.kind.value} {person.name}: "{echoed}"'

    def mark_done(self, params: MarkMeetingNoteDoneParams, user_id: str) -> str:
        """Complete the single pending note for a person.

        Several pending notes are listed back rather than picking one.

        Args:
            params: Person name and optional kind.
            user_id: Acting staff member, recorded as completer.

        Returns:
            Reply text.
        """
        kinds = (params.kind,) if params.kind else ALL_KINDS

        def usage(kind: PersonKind) -> str:
            return f"mark meeting note for {kind.value.upper()} {params.person_name} as done"

        try:
            resolution = self._ctx.resolver.resolve(params.person_name, kinds)
            if not isinstance(resolution, Single):
                return unresolved_reply(resolution, params.person_name, usage)

            person = resolution.person
            notes = self._ctx.store.meeting_notes.find_pending_for(person.ref)
            if not notes:
                return f"No pending meeting notes found for {person.name}."

            if len(notes) > 1:
                listing = "\n".join(
                    f"{index}. {note_preview(note.note_content)}"
                    for index, note in enumerate(notes, start=1)
                )
                return (
                    f"Multiple pending notes found for {person.name}:\n{listing}\n\n"
                    "Please specify which note to mark as done."
                )

            note = notes[0]
            if note.id is None or not self._ctx.store.meeting_notes.mark_completed(
                note.id, user_id, self._ctx.now()
            ):
                return f"The meeting note for {person.name} is no longer pending."
        except StoreError as e:
            logger.error("Failed to mark meeting note done for %s: %s", params.person_name, e)
            return f"Failed to mark meeting note as done: {e}"

        self._ctx.audit(
            user_id,
            "complete",
            f"Marked meeting note done for {person.kind.value} {person.name}",
            entity_type="meeting_note",
            entity_id=note.id,
            entity_name=person.name,
            old_value=NoteStatus.PENDING.value,
            new_value=NoteStatus.COMPLETED.value,
        )
        logger.info("Meeting note %s completed for %s", note.id, person.name)
        return (
            f"✅ Meeting note marked as done for {person.name}: "
            f'"{ensure_terminal_punctuation(strip_entities(note.note_content))}"'
        )


__all__ = ["MeetingNoteCommandHandler"]
