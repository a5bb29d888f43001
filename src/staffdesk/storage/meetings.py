"""Meeting note and meeting task repositories."""

import uuid
from datetime import datetime
from typing import Any

from pymongo import ASCENDING
from pymongo.collection import Collection

from .client import store_operation
from .models import MeetingNoteDTO, MeetingTaskDTO, NoteStatus, PersonRef


class MeetingNoteRepository:
    """Repository for meeting notes."""

    def __init__(self, collection: Collection[dict[str, Any]]) -> None:
        """Initialize repository with MongoDB collection.

        Args:
            collection: MongoDB collection for meeting notes.
        """
        self._collection = collection
        self._ensure_indexes()

    def _ensure_indexes(self) -> None:
        """Create indexes for efficient queries."""
        self._collection.create_index(
            [("linked_to_type", ASCENDING), ("linked_to_id", ASCENDING), ("status", ASCENDING)]
        )

    @store_operation
    def save(self, note: MeetingNoteDTO) -> str:
        """Insert a note and return its ID.

        Args:
            note: The note to save.

        Returns:
            The generated document ID.
        """
        doc_id = str(uuid.uuid4())
        self._collection.insert_one({"_id": doc_id, **note.to_dict()})
        return doc_id

    @store_operation
    def get_by_id(self, note_id: str) -> MeetingNoteDTO | None:
        """Retrieve a note by ID."""
        doc = self._collection.find_one({"_id": note_id})
        if doc is None:
            return None
        return MeetingNoteDTO.from_dict(doc)

    @store_operation
    def get_many(self, note_ids: list[str]) -> dict[str, MeetingNoteDTO]:
        """Retrieve several notes keyed by ID."""
        if not note_ids:
            return {}
        cursor = self._collection.find({"_id": {"$in": list(note_ids)}})
        notes = [MeetingNoteDTO.from_dict(doc) for doc in cursor]
        return {note.id: note for note in notes if note.id}

    @store_operation
    def find_pending_for(self, person: PersonRef) -> list[MeetingNoteDTO]:
        """Find pending notes linked to a person.

        Args:
            person: The candidate or client the notes are about.

        Returns:
            Pending notes, oldest first.
        """
        cursor = self._collection.find(
            {**person.to_link(), "status": NoteStatus.PENDING.as_filter()}
        )
        notes = [MeetingNoteDTO.from_dict(doc) for doc in cursor]
        return sorted(notes, key=lambda n: (n.created_at is None, n.created_at or 0))

    @store_operation
    def mark_completed(self, note_id: str, completed_by: str, completed_at: datetime) -> bool:
        """Move a pending note to completed.

        The update only matches while the note is still pending, so a note
        completes at most once.

        Args:
            note_id: The note ID.
            completed_by: Staff ID of whoever completed it.
            completed_at: When it was completed.

        Returns:
            True if the note transitioned, False if it was not pending.
        """
        result = self._collection.update_one(
            {"_id": note_id, "status": NoteStatus.PENDING.as_filter()},
            {
                "$set": {
                    "status": NoteStatus.COMPLETED.value,
                    "completed_by": completed_by,
                    "completed_at": completed_at,
                }
            },
        )
        return result.modified_count > 0


class MeetingTaskRepository:
    """Read-only repository for tasks agreed in meetings."""

    def __init__(self, collection: Collection[dict[str, Any]]) -> None:
        """Initialize repository with MongoDB collection.

        Args:
            collection: MongoDB collection for meeting tasks.
        """
        self._collection = collection
        self._collection.create_index([("assigned_to", ASCENDING), ("status", ASCENDING)])
        self._collection.create_index([("meeting_note_id", ASCENDING)])

    @store_operation
    def find(
        self,
        assigned_to: str | None = None,
        status: NoteStatus | None = None,
        meeting_note_ids: list[str] | None = None,
    ) -> list[MeetingTaskDTO]:
        """Find meeting tasks matching the given filters.

        Args:
            assigned_to: Only tasks assigned to this staff ID.
            status: Only tasks in this status.
            meeting_note_ids: Only tasks belonging to these meetings.

        Returns:
            Matching tasks in store order.
        """
        query: dict[str, Any] = {}
        if assigned_to is not None:
            query["assigned_to"] = assigned_to
        if status is not None:
            query["status"] = status.as_filter()
        if meeting_note_ids is not None:
            query["meeting_note_id"] = {"$in": list(meeting_note_ids)}
        return [MeetingTaskDTO.from_dict(doc) for doc in self._collection.find(query)]


__all__ = [
    "MeetingNoteRepository",
    "MeetingTaskRepository",
]
