"""Record types for the agency's MongoDB collections.

Every executor works on these dataclasses rather than raw documents. Rows
written by the dashboard may carry ISO strings or naive datetimes, so the
``from_dict`` constructors normalize timestamps to aware UTC.
"""

from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum
from typing import Any


class PersonKind(Enum):
    """The two kinds of person records a name can resolve to."""

    CANDIDATE = "candidate"
    CLIENT = "client"

    @property
    def collection(self) -> str:
        """Name of the collection holding this kind."""
        return "candidates" if self is PersonKind.CANDIDATE else "clients"

    @property
    def reminder_field(self) -> str:
        """Field the dashboard reads the follow-up reminder from."""
        if self is PersonKind.CANDIDATE:
            return "reminder_date"
        return "custom_reminder_datetime"


COMPLETED_VALUES = ("completed", "done")
EPOCH = datetime.fromtimestamp(0, UTC)


class NoteStatus(Enum):
    """Lifecycle of a meeting note or task."""

    PENDING = "pending"
    COMPLETED = "completed"

    @classmethod
    def parse(cls, value: Any) -> "NoteStatus":
        """Read a stored status.

        The dashboard marks meeting deliverables ``done`` rather than
        ``completed``. Anything that is not a completed value reads as pending.
        """
        return cls.COMPLETED if value in COMPLETED_VALUES else cls.PENDING

    def as_filter(self) -> dict[str, Any]:
        """Query clause matching every stored value that parses to this status."""
        if self is NoteStatus.COMPLETED:
            return {"$in": list(COMPLETED_VALUES)}
        return {"$nin": list(COMPLETED_VALUES)}


def as_utc(value: Any) -> datetime | None:
    """Coerce a stored timestamp into an aware UTC datetime.

    Args:
        value: A datetime (naive values are taken as UTC), an ISO-8601
            string, or None.

    Returns:
        The aware datetime, or None when the value is empty or unparseable.
    """
    if value is None or value == "":
        return None
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
    if not isinstance(value, datetime):
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


@dataclass(frozen=True)
class PersonRef:
    """Tagged reference to a candidate or client row."""

    kind: PersonKind
    id: str

    def to_link(self) -> dict[str, str]:
        """Convert to the ``linked_to_*`` fields used by meeting notes."""
        return {"linked_to_type": self.kind.value, "linked_to_id": self.id}

    @classmethod
    def from_link(cls, data: dict[str, Any]) -> "PersonRef | None":
        """Read a reference back from ``linked_to_*`` fields."""
        kind = data.get("linked_to_type")
        person_id = data.get("linked_to_id")
        if kind not in ("candidate", "client") or not person_id:
            return None
        return cls(kind=PersonKind(kind), id=str(person_id))


@dataclass
class PersonDTO:
    """A candidate or client row."""

    id: str
    kind: PersonKind
    name: str
    contact: str = ""
    status: str = ""
    reminder_at: datetime | None = None

    @property
    def ref(self) -> PersonRef:
        """Tagged reference to this row."""
        return PersonRef(kind=self.kind, id=self.id)

    @classmethod
    def from_dict(cls, kind: PersonKind, data: dict[str, Any]) -> "PersonDTO":
        """Create from a MongoDB document of the given kind."""
        if kind is PersonKind.CANDIDATE:
            contact = data.get("phone") or ""
        else:
            contact = data.get("contact") or data.get("phone") or ""
        return cls(
            id=str(data.get("_id", "")),
            kind=kind,
            name=data.get("name", ""),
            contact=contact,
            status=data.get("status") or "",
            reminder_at=as_utc(data.get(kind.reminder_field)),
        )


@dataclass
class InterviewDTO:
    """A scheduled candidate interview."""

    id: str
    candidate_id: str
    date_time: datetime | None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "InterviewDTO":
        """Create from MongoDB document."""
        return cls(
            id=str(data.get("_id", "")),
            candidate_id=str(data.get("candidate_id", "")),
            date_time=as_utc(data.get("date_time")),
        )


@dataclass
class MeetingNoteDTO:
    """A meeting note, optionally linked to a candidate or client."""

    note_content: str
    status: NoteStatus
    created_by: str
    id: str | None = None
    linked_to: PersonRef | None = None
    title: str = ""
    meeting_date: datetime | None = None
    completed_by: str | None = None
    completed_at: datetime | None = None
    created_at: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for MongoDB storage."""
        doc: dict[str, Any] = {
            "note_content": self.note_content,
            "status": self.status.value,
            "created_by": self.created_by,
            "title": self.title,
            "meeting_date": self.meeting_date,
            "completed_by": self.completed_by,
            "completed_at": self.completed_at,
            "created_at": self.created_at,
        }
        if self.linked_to is not None:
            doc.update(self.linked_to.to_link())
        return doc

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MeetingNoteDTO":
        """Create from MongoDB document."""
        return cls(
            id=str(data.get("_id", "")),
            note_content=data.get("note_content") or data.get("notes") or "",
            status=NoteStatus.parse(data.get("status")),
            created_by=str(data.get("created_by", "")),
            linked_to=PersonRef.from_link(data),
            title=data.get("title") or "",
            meeting_date=as_utc(data.get("meeting_date")),
            completed_by=data.get("completed_by"),
            completed_at=as_utc(data.get("completed_at")),
            created_at=as_utc(data.get("created_at")),
        )


@dataclass
class MeetingTaskDTO:
    """A deliverable agreed in a meeting and assigned to a staff member."""

    id: str
    meeting_note_id: str
    task_description: str
    assigned_to: str
    status: NoteStatus
    created_at: datetime | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MeetingTaskDTO":
        """Create from MongoDB document."""
        return cls(
            id=str(data.get("_id", "")),
            meeting_note_id=str(data.get("meeting_note_id", "")),
            task_description=data.get("task_description") or "",
            assigned_to=str(data.get("assigned_to", "")),
            status=NoteStatus.parse(data.get("status")),
            created_at=as_utc(data.get("created_at")),
        )


@dataclass
class TaskAssignmentDTO:
    """A standalone work item handed to a staff member."""

    description: str
    assigned_to: str
    assigned_by: str
    status: NoteStatus
    created_at: datetime | None
    id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for MongoDB storage."""
        return {
            "description": self.description,
            "assigned_to": self.assigned_to,
            "assigned_by": self.assigned_by,
            "status": self.status.value,
            "created_at": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TaskAssignmentDTO":
        """Create from MongoDB document."""
        return cls(
            id=str(data.get("_id", "")),
            description=data.get("description") or "",
            assigned_to=str(data.get("assigned_to", "")),
            assigned_by=str(data.get("assigned_by", "")),
            status=NoteStatus.parse(data.get("status")),
            created_at=as_utc(data.get("created_at")),
        )


@dataclass
class StaffDTO:
    """A member of staff who can be assigned work."""

    id: str
    name: str
    username: str = ""

    @property
    def first_name(self) -> str:
        parts = self.name.split()
        return parts[0] if parts else ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "StaffDTO":
        """Create from MongoDB document."""
        return cls(
            id=str(data.get("_id", "")),
            name=data.get("name") or "",
            username=data.get("username") or "",
        )


@dataclass
class PlacementDTO:
    """A converted client, carrying the placement fee and any refund."""

    id: str
    client_name: str
    placement_fee: float
    refund_amount: float
    placed_at: datetime | None

    @property
    def is_refund(self) -> bool:
        return self.placement_fee < 0 or self.refund_amount > 0

    @property
    def refund_value(self) -> float:
        """Absolute amount refunded for this placement."""
        return abs(self.refund_amount or self.placement_fee or 0)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PlacementDTO":
        """Create from MongoDB document."""
        return cls(
            id=str(data.get("_id", "")),
            client_name=data.get("client_name") or data.get("name") or "",
            placement_fee=float(data.get("placement_fee") or 0),
            refund_amount=float(data.get("refund_amount") or 0),
            placed_at=as_utc(data.get("placement_date") or data.get("created_at")),
        )


@dataclass
class PendingConfirmationDTO:
    """A reminder held back by a conflict, awaiting the user's confirmation."""

    user_id: str
    person: PersonRef
    person_name: str
    reminder_at: datetime
    expires_at: datetime
    id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for MongoDB storage."""
        return {
            "user_id": self.user_id,
            **self.person.to_link(),
            "person_name": self.person_name,
            "reminder_at": self.reminder_at,
            "expires_at": self.expires_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PendingConfirmationDTO":
        """Create from MongoDB document."""
        person = PersonRef.from_link(data)
        if person is None:
            raise ValueError("Pending confirmation without a person link")
        reminder_at = as_utc(data.get("reminder_at"))
        expires_at = as_utc(data.get("expires_at"))
        if reminder_at is None or expires_at is None:
            # Rows missing either timestamp read as long expired.
            reminder_at = expires_at = EPOCH
        return cls(
            id=str(data.get("_id", "")),
            user_id=str(data.get("user_id", "")),
            person=person,
            person_name=data.get("person_name") or "",
            reminder_at=reminder_at,
            expires_at=expires_at,
        )


__all__ = [
    "COMPLETED_VALUES",
    "EPOCH",
    "InterviewDTO",
    "MeetingNoteDTO",
    "MeetingTaskDTO",
    "NoteStatus",
    "PendingConfirmationDTO",
    "PersonDTO",
    "PersonKind",
    "PersonRef",
    "PlacementDTO",
    "StaffDTO",
    "TaskAssignmentDTO",
    "as_utc",
]
