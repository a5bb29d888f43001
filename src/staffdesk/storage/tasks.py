"""Task assignment and staff repositories."""

import uuid
from typing import Any

from pymongo import ASCENDING
from pymongo.collection import Collection

from .client import store_operation
from .models import EPOCH, NoteStatus, StaffDTO, TaskAssignmentDTO


class TaskAssignmentRepository:
    """Repository for standalone task assignments."""

    def __init__(self, collection: Collection[dict[str, Any]]) -> None:
        """Initialize repository with MongoDB collection.

        Args:
            collection: MongoDB collection for task assignments.
        """
        self._collection = collection
        self._collection.create_index([("assigned_to", ASCENDING), ("status", ASCENDING)])

    @store_operation
    def save(self, task: TaskAssignmentDTO) -> str:
        """Insert a task assignment and return its ID.

        Args:
            task: The assignment to save.

        Returns:
            The generated document ID.
        """
        doc_id = str(uuid.uuid4())
        self._collection.insert_one({"_id": doc_id, **task.to_dict()})
        return doc_id

    @store_operation
    def find_for(
        self,
        assigned_to: str,
        status: NoteStatus | None = None,
    ) -> list[TaskAssignmentDTO]:
        """Find assignments for a staff member.

        Args:
            assigned_to: Staff ID the tasks are assigned to.
            status: Optional status filter.

        Returns:
            Assignments, newest first; undated ones last.
        """
        query: dict[str, Any] = {"assigned_to": assigned_to}
        if status is not None:
            query["status"] = status.as_filter()
        tasks = [TaskAssignmentDTO.from_dict(doc) for doc in self._collection.find(query)]
        return sorted(tasks, key=lambda t: t.created_at or EPOCH, reverse=True)


class StaffRepository:
    """Repository for staff members."""

    def __init__(self, collection: Collection[dict[str, Any]]) -> None:
        """Initialize repository with MongoDB collection.

        Args:
            collection: MongoDB collection for staff.
        """
        self._collection = collection

    @store_operation
    def find_all(self) -> list[StaffDTO]:
        """Get every staff member."""
        return [StaffDTO.from_dict(doc) for doc in self._collection.find()]

    @store_operation
    def get_by_id(self, staff_id: str) -> StaffDTO | None:
        """Retrieve a staff member by ID."""
        doc = self._collection.find_one({"_id": staff_id})
        if doc is None:
            return None
        return StaffDTO.from_dict(doc)

    @store_operation
    def get_many(self, staff_ids: list[str]) -> dict[str, StaffDTO]:
        """Retrieve several staff members keyed by ID."""
        if not staff_ids:
            return {}
        cursor = self._collection.find({"_id": {"$in": list(staff_ids)}})
        return {member.id: member for member in (StaffDTO.from_dict(doc) for doc in cursor)}


__all__ = [
    "StaffRepository",
    "TaskAssignmentRepository",
]
