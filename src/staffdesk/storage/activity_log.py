"""Audit trail of changes made through the assistant.

Mirrors the dashboard's activity log so chat-driven changes show up next to
changes made through the screens.
"""

import logging
import uuid
from datetime import UTC, datetime
from typing import Any

from pymongo import DESCENDING
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

logger = logging.getLogger(__name__)


class ActivityLogRepository:
    """Repository for activity log entries."""

    def __init__(self, collection: Collection[dict[str, Any]]) -> None:
        """Initialize repository with MongoDB collection.

        Args:
            collection: MongoDB collection for activity logs.
        """
        self._collection = collection
        self._collection.create_index([("created_at", DESCENDING)])
        self._collection.create_index([("entity_type", 1), ("entity_id", 1)])

    def log(
        self,
        user_id: str,
        action_type: str,
        description: str,
        entity_type: str | None = None,
        entity_id: str | None = None,
        entity_name: str | None = None,
        old_value: str | None = None,
        new_value: str | None = None,
    ) -> str | None:
        """Record an activity.

        A failed audit write is logged and does not interrupt the action
        that triggered it.

        Args:
            user_id: Staff ID of the acting user.
            action_type: Kind of change (status_change, create, reminder, ...).
            description: Human-readable summary.
            entity_type: Kind of record changed.
            entity_id: ID of the record changed.
            entity_name: Display name of the record changed.
            old_value: Value before the change.
            new_value: Value after the change.

        Returns:
            The entry ID, or None if the write failed.
        """
        doc_id = str(uuid.uuid4())
        document = {
            "_id": doc_id,
            "user_id": user_id,
            "action_type": action_type,
            "entity_type": entity_type,
            "entity_id": entity_id,
            "entity_name": entity_name,
            "old_value": old_value,
            "new_value": new_value,
            "description": description,
            "created_at": datetime.now(UTC),
        }
        try:
            self._collection.insert_one(document)
        except PyMongoError as e:
            logger.warning("Failed to log activity '%s': %s", description, e)
            return None
        return doc_id


__all__ = ["ActivityLogRepository"]
