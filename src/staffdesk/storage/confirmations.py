"""Short-lived records of reminders withheld by a scheduling conflict."""

import uuid
from datetime import datetime
from typing import Any

from pymongo.collection import Collection

from .client import store_operation
from .models import PendingConfirmationDTO


class PendingConfirmationRepository:
    """Repository for pending reminder confirmations, keyed by user and person."""

    def __init__(self, collection: Collection[dict[str, Any]]) -> None:
        """Initialize repository with MongoDB collection.

        Args:
            collection: MongoDB collection for pending confirmations.
        """
        self._collection = collection
        self._collection.create_index("user_id")

    @store_operation
    def save(self, pending: PendingConfirmationDTO) -> str:
        """Store a pending confirmation, replacing any for the same user and person.

        Args:
            pending: The withheld reminder.

        Returns:
            The generated document ID.
        """
        self._collection.delete_many({"user_id": pending.user_id, **pending.person.to_link()})
        doc_id = str(uuid.uuid4())
        self._collection.insert_one({"_id": doc_id, **pending.to_dict()})
        return doc_id

    @store_operation
    def pop_latest(self, user_id: str, now: datetime) -> PendingConfirmationDTO | None:
        """Take the most recent unexpired confirmation for a user.

        Expired records for the user are discarded along the way.

        Args:
            user_id: The acting user.
            now: Current instant.

        Returns:
            The confirmation, removed from the store, or None.
        """
        records = [
            PendingConfirmationDTO.from_dict(doc)
            for doc in self._collection.find({"user_id": user_id})
        ]
        expired = [r.id for r in records if r.expires_at <= now]
        if expired:
            self._collection.delete_many({"_id": {"$in": expired}})

        live = [r for r in records if r.expires_at > now]
        if not live:
            return None
        latest = max(live, key=lambda r: r.expires_at)
        self._collection.delete_one({"_id": latest.id})
        return latest


__all__ = ["PendingConfirmationRepository"]
