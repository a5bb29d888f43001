"""Candidate, client and interview repositories.

Names carry no uniqueness guarantee, so every name lookup returns a list.
"""

import re
from datetime import datetime
from typing import Any

from pymongo import ASCENDING
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from .client import store_operation
from .errors import translate_error
from .models import InterviewDTO, PersonDTO, PersonKind


class PersonRepository:
    """Repository for one kind of person record (candidates or clients)."""

    def __init__(self, collection: Collection[dict[str, Any]], kind: PersonKind) -> None:
        """Initialize repository with MongoDB collection.

        Args:
            collection: MongoDB collection for this kind.
            kind: Which kind of person the collection holds.
        """
        self._collection = collection
        self._kind = kind
        self._ensure_indexes()

    def _ensure_indexes(self) -> None:
        """Create indexes for efficient queries."""
        self._collection.create_index([("name", ASCENDING)])
        self._collection.create_index([("status", ASCENDING)])

    @property
    def kind(self) -> PersonKind:
        return self._kind

    @store_operation
    def find_by_name(self, fragment: str) -> list[PersonDTO]:
        """Find rows whose name contains the fragment, ignoring case.

        Args:
            fragment: Part of a display name.

        Returns:
            Matching rows ordered by name.
        """
        pattern = re.escape(fragment.strip())
        cursor = self._collection.find(
            {"name": {"$regex": pattern, "$options": "i"}}
        ).sort("name", ASCENDING)
        return [PersonDTO.from_dict(self._kind, doc) for doc in cursor]

    @store_operation
    def get_by_id(self, person_id: str) -> PersonDTO | None:
        """Retrieve a row by ID.

        Args:
            person_id: The row ID.

        Returns:
            The row or None if not found.
        """
        doc = self._collection.find_one({"_id": person_id})
        if doc is None:
            return None
        return PersonDTO.from_dict(self._kind, doc)

    @store_operation
    def find_all(self) -> list[PersonDTO]:
        """Get every row of this kind."""
        return [PersonDTO.from_dict(self._kind, doc) for doc in self._collection.find()]

    def set_reminder(self, person_id: str, remind_at: datetime) -> bool:
        """Write the follow-up reminder instant for a row.

        Args:
            person_id: The row ID.
            remind_at: When the reminder is due.

        Returns:
            True if a row was matched.

        Raises:
            SchemaGapError: If the collection does not accept the reminder field.
            StoreError: If the update fails for any other reason.
        """
        field = self._kind.reminder_field
        try:
            result = self._collection.update_one(
                {"_id": person_id},
                {"$set": {field: remind_at}},
            )
        except PyMongoError as e:
            raise translate_error(e, (field,)) from e
        return result.matched_count > 0

    @store_operation
    def update_status(self, person_id: str, status: str) -> bool:
        """Set the free-form status of a row.

        Args:
            person_id: The row ID.
            status: New status value.

        Returns:
            True if a row was matched (including when the status was unchanged).
        """
        result = self._collection.update_one(
            {"_id": person_id},
            {"$set": {"status": status}},
        )
        return result.matched_count > 0


class InterviewRepository:
    """Repository for candidate interviews."""

    def __init__(self, collection: Collection[dict[str, Any]]) -> None:
        """Initialize repository with MongoDB collection.

        Args:
            collection: MongoDB collection for interviews.
        """
        self._collection = collection
        self._collection.create_index([("candidate_id", ASCENDING)])

    @store_operation
    def find_for_candidate(self, candidate_id: str) -> list[InterviewDTO]:
        """Get every interview for a candidate.

        Args:
            candidate_id: The candidate's row ID.

        Returns:
            Interviews in store order; callers filter by date.
        """
        cursor = self._collection.find({"candidate_id": candidate_id})
        return [InterviewDTO.from_dict(doc) for doc in cursor]


__all__ = [
    "InterviewRepository",
    "PersonRepository",
]
