"""Repository access for one MongoDB database."""

from typing import Any

from pymongo.database import Database

from .activity_log import ActivityLogRepository
from .confirmations import PendingConfirmationRepository
from .finance import PlacementRepository
from .meetings import MeetingNoteRepository, MeetingTaskRepository
from .models import PersonKind
from .people import InterviewRepository, PersonRepository
from .qa_repository import QARepository
from .snapshot import SnapshotReader
from .tasks import StaffRepository, TaskAssignmentRepository


class RecordStore:
    """Bundles the repositories the router reads and writes.

    Works with a real pymongo database or a mongomock one.
    """

    def __init__(self, database: Database[dict[str, Any]]) -> None:
        """Initialize every repository against the database.

        Args:
            database: MongoDB database instance.
        """
        self.database = database
        self.candidates = PersonRepository(database["candidates"], PersonKind.CANDIDATE)
        self.clients = PersonRepository(database["clients"], PersonKind.CLIENT)
        self.interviews = InterviewRepository(database["interviews"])
        self.meeting_notes = MeetingNoteRepository(database["meeting_notes"])
        self.meeting_tasks = MeetingTaskRepository(database["meeting_tasks"])
        self.task_assignments = TaskAssignmentRepository(database["task_assignments"])
        self.staff = StaffRepository(database["staff"])
        self.placements = PlacementRepository(database["converted_clients"])
        self.activity_log = ActivityLogRepository(database["activity_logs"])
        self.confirmations = PendingConfirmationRepository(database["pending_confirmations"])
        self.qa = QARepository(database)
        self.snapshot = SnapshotReader(database)

    def people(self, kind: PersonKind) -> PersonRepository:
        """Repository for the given person kind."""
        return self.candidates if kind is PersonKind.CANDIDATE else self.clients


__all__ = ["RecordStore"]
