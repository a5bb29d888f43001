"""Shared fixtures: an in-memory MongoDB and helpers to seed it."""

from datetime import UTC, datetime
from typing import Any

import pytest
from mongomock import MongoClient

from staffdesk.config import StaffDeskConfig
from staffdesk.storage.store import RecordStore


class Seeder:
    """Inserts raw documents shaped like the dashboard writes them."""

    def __init__(self, db) -> None:
        self.db = db

    def candidate(self, candidate_id: str, name: str, phone: str = "", **fields: Any) -> None:
        self.db["candidates"].insert_one(
            {"_id": candidate_id, "name": name, "phone": phone, **fields}
        )

    def client(self, client_id: str, name: str, contact: str = "", **fields: Any) -> None:
        self.db["clients"].insert_one(
            {"_id": client_id, "name": name, "contact": contact, **fields}
        )

    def interview(self, interview_id: str, candidate_id: str, when: datetime) -> None:
        self.db["interviews"].insert_one(
            {"_id": interview_id, "candidate_id": candidate_id, "date_time": when}
        )

    def meeting_note(
        self,
        note_id: str,
        content: str,
        kind: str | None = None,
        person_id: str | None = None,
        status: str = "pending",
        **fields: Any,
    ) -> None:
        doc: dict[str, Any] = {
            "_id": note_id,
            "note_content": content,
            "status": status,
            "created_by": "staff-1",
            **fields,
        }
        if kind is not None:
            doc["linked_to_type"] = kind
            doc["linked_to_id"] = person_id
        self.db["meeting_notes"].insert_one(doc)

    def meeting_task(
        self,
        task_id: str,
        meeting_note_id: str,
        description: str,
        assigned_to: str,
        status: str = "pending",
    ) -> None:
        self.db["meeting_tasks"].insert_one(
            {
                "_id": task_id,
                "meeting_note_id": meeting_note_id,
                "task_description": description,
                "assigned_to": assigned_to,
                "status": status,
            }
        )

    def staff(self, staff_id: str, name: str, username: str = "") -> None:
        self.db["staff"].insert_one({"_id": staff_id, "name": name, "username": username})

    def placement(self, placement_id: str, fee: float, when: datetime, **fields: Any) -> None:
        self.db["converted_clients"].insert_one(
            {"_id": placement_id, "placement_fee": fee, "placement_date": when, **fields}
        )


@pytest.fixture
def now() -> datetime:
    """Fixed request time: 09:00 on 10 March 2026 in Nairobi."""
    return datetime(2026, 3, 10, 6, 0, tzinfo=UTC)


@pytest.fixture
def mock_db():
    """Create a mock MongoDB database for testing."""
    client = MongoClient()
    return client["staffdesk_test"]


@pytest.fixture
def seed(mock_db) -> Seeder:
    """Helper for inserting test documents."""
    return Seeder(mock_db)


@pytest.fixture
def store(mock_db) -> RecordStore:
    """Create a RecordStore over the mock database."""
    return RecordStore(mock_db)


@pytest.fixture
def config() -> StaffDeskConfig:
    """Default configuration with one roster member."""
    return StaffDeskConfig(roster={"wendy": "staff-wendy"})
