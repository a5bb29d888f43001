"""MongoDB storage module for StaffDesk.

Provides typed access to candidates, clients, interviews, meeting notes,
tasks, staff and placements, plus the audit log.
"""

from .activity_log import ActivityLogRepository
from .client import MongoStorageClient
from .confirmations import PendingConfirmationRepository
from .errors import SchemaGapError, StoreError
from .finance import PlacementRepository
from .meetings import MeetingNoteRepository, MeetingTaskRepository
from .models import (
    InterviewDTO,
    MeetingNoteDTO,
    MeetingTaskDTO,
    NoteStatus,
    PendingConfirmationDTO,
    PersonDTO,
    PersonKind,
    PersonRef,
    PlacementDTO,
    StaffDTO,
    TaskAssignmentDTO,
)
from .people import InterviewRepository, PersonRepository
from .qa_repository import QARepository
from .snapshot import SnapshotReader
from .store import RecordStore
from .tasks import StaffRepository, TaskAssignmentRepository

__all__ = [
    "ActivityLogRepository",
    "InterviewDTO",
    "InterviewRepository",
    "MeetingNoteDTO",
    "MeetingNoteRepository",
    "MeetingTaskDTO",
    "MeetingTaskRepository",
    "MongoStorageClient",
    "NoteStatus",
    "PendingConfirmationDTO",
    "PendingConfirmationRepository",
    "PersonDTO",
    "PersonKind",
    "PersonRef",
    "PersonRepository",
    "PlacementDTO",
    "PlacementRepository",
    "QARepository",
    "RecordStore",
    "SchemaGapError",
    "SnapshotReader",
    "StaffDTO",
    "StaffRepository",
    "StoreError",
    "TaskAssignmentDTO",
    "TaskAssignmentRepository",
]
