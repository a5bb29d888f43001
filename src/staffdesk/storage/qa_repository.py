"""MongoDB repository for questions answered by the assistant.

Provides persistence for the Q&A fallback's conversation history.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pymongo.collection import Collection
    from pymongo.database import Database


class QARepository:
    """Repository for Q&A exchanges."""

    COLLECTION_NAME = "qa_exchanges"

    def __init__(self, database: Database) -> None:
        """Initialize repository with database connection.

        Args:
            database: MongoDB database instance.
        """
        self._db = database
        self._collection: Collection = database[self.COLLECTION_NAME]
        self._ensure_indexes()

    def _ensure_indexes(self) -> None:
        """Create indexes for efficient querying."""
        self._collection.create_index([("timestamp", -1)])
        self._collection.create_index("user_id")

    def save_exchange(
        self,
        user_id: str,
        question: str,
        answer: str,
        model: str,
        tokens_used: int,
        latency_ms: int,
        timestamp: datetime,
    ) -> str:
        """Save a question and the assistant's answer.

        Args:
            user_id: Staff ID of whoever asked.
            question: The original message.
            answer: Text returned by the assistant.
            model: Model that answered.
            tokens_used: Total tokens consumed.
            latency_ms: API response time.
            timestamp: When the question was received.

        Returns:
            Document ID of the saved exchange.
        """
        doc_id = str(uuid.uuid4())
        document = {
            "_id": doc_id,
            "user_id": user_id,
            "question": question,
            "answer": answer,
            "model": model,
            "tokens_used": tokens_used,
            "latency_ms": latency_ms,
            "timestamp": timestamp,
        }
        self._collection.insert_one(document)
        return doc_id


__all__ = ["QARepository"]
