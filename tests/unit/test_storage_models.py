"""Unit tests for storage record types and error translation."""

from datetime import UTC, datetime, timedelta, timezone

import pytest
from pymongo.errors import OperationFailure, ServerSelectionTimeoutError

from staffdesk.storage.errors import (
    DOCUMENT_VALIDATION_FAILURE,
    SchemaGapError,
    StoreError,
    translate_error,
)
from staffdesk.storage.models import (
    EPOCH,
    MeetingNoteDTO,
    MeetingTaskDTO,
    NoteStatus,
    PendingConfirmationDTO,
    PersonDTO,
    PersonKind,
    PersonRef,
    PlacementDTO,
    TaskAssignmentDTO,
    as_utc,
)


class TestAsUtc:
    """Tests for timestamp normalization."""

    def test_naive_is_taken_as_utc(self) -> None:
        assert as_utc(datetime(2026, 1, 1, 12, 0)) == datetime(2026, 1, 1, 12, 0, tzinfo=UTC)

    def test_aware_is_converted(self) -> None:
        eat = timezone(timedelta(hours=3))
        value = as_utc(datetime(2026, 1, 1, 15, 0, tzinfo=eat))
        assert value == datetime(2026, 1, 1, 12, 0, tzinfo=UTC)
        assert value.tzinfo == UTC

    def test_iso_string(self) -> None:
        assert as_utc("2026-01-01T12:00:00Z") == datetime(2026, 1, 1, 12, 0, tzinfo=UTC)

    def test_empty_and_invalid(self) -> None:
        assert as_utc(None) is None
        assert as_utc("") is None
        assert as_utc("not a date") is None


class TestPersonRecords:
    """Tests for PersonDTO and PersonRef."""

    def test_candidate_contact_is_phone(self) -> None:
        person = PersonDTO.from_dict(
            PersonKind.CANDIDATE, {"_id": "c1", "name": "Jane", "phone": "0711"}
        )
        assert person.contact == "0711"
        assert person.ref == PersonRef(PersonKind.CANDIDATE, "c1")

    def test_client_contact_falls_back_to_phone(self) -> None:
        person = PersonDTO.from_dict(PersonKind.CLIENT, {"_id": "k1", "name": "Acme", "phone": "0722"})
        assert person.contact == "0722"

    def test_reminder_field_per_kind(self) -> None:
        assert PersonKind.CANDIDATE.reminder_field == "reminder_date"
        assert PersonKind.CLIENT.reminder_field == "custom_reminder_datetime"
        client = PersonDTO.from_dict(
            PersonKind.CLIENT,
            {"_id": "k1", "name": "Acme", "custom_reminder_datetime": "2026-01-01T09:00:00Z"},
        )
        assert client.reminder_at == datetime(2026, 1, 1, 9, 0, tzinfo=UTC)

    def test_link_round_trip(self) -> None:
        ref = PersonRef(PersonKind.CLIENT, "k1")
        assert PersonRef.from_link(ref.to_link()) == ref

    def test_invalid_link(self) -> None:
        assert PersonRef.from_link({"linked_to_type": "staff", "linked_to_id": "s1"}) is None


class TestNoteStatus:
    """Tests for reading stored statuses."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("pending", NoteStatus.PENDING),
            ("completed", NoteStatus.COMPLETED),
            ("done", NoteStatus.COMPLETED),
            (None, NoteStatus.PENDING),
            ("archived", NoteStatus.PENDING),
        ],
    )
    def test_parse(self, value, expected: NoteStatus) -> None:
        assert NoteStatus.parse(value) is expected

    def test_filters_cover_dashboard_values(self) -> None:
        assert NoteStatus.COMPLETED.as_filter() == {"$in": ["completed", "done"]}
        assert NoteStatus.PENDING.as_filter() == {"$nin": ["completed", "done"]}

    def test_task_with_done_status(self) -> None:
        task = MeetingTaskDTO.from_dict({"_id": "t1", "task_description": "x", "status": "done"})
        assert task.status is NoteStatus.COMPLETED


class TestMeetingNote:
    """Tests for MeetingNoteDTO."""

    def test_reads_legacy_notes_field(self) -> None:
        note = MeetingNoteDTO.from_dict({"_id": "n1", "notes": "Old text", "status": "completed"})
        assert note.note_content == "Old text"
        assert note.status is NoteStatus.COMPLETED
        assert note.linked_to is None

    def test_to_dict_includes_link(self) -> None:
        note = MeetingNoteDTO(
            note_content="Call back",
            status=NoteStatus.PENDING,
            created_by="s1",
            linked_to=PersonRef(PersonKind.CANDIDATE, "c1"),
        )
        doc = note.to_dict()
        assert doc["linked_to_type"] == "candidate"
        assert doc["linked_to_id"] == "c1"
        assert doc["status"] == "pending"


class TestPlacement:
    """Tests for refund detection."""

    def test_negative_fee_is_refund(self) -> None:
        placement = PlacementDTO.from_dict({"_id": "p1", "placement_fee": -1500})
        assert placement.is_refund
        assert placement.refund_value == 1500

    def test_refund_amount_takes_precedence(self) -> None:
        placement = PlacementDTO.from_dict(
            {"_id": "p1", "placement_fee": 5000, "refund_amount": 2000}
        )
        assert placement.is_refund
        assert placement.refund_value == 2000

    def test_date_falls_back_to_created_at(self) -> None:
        created = datetime(2026, 2, 1, tzinfo=UTC)
        placement = PlacementDTO.from_dict({"_id": "p1", "placement_fee": 10, "created_at": created})
        assert placement.placed_at == created
        assert not placement.is_refund


class TestMissingTimestamps:
    """Tests for rows written without timestamps."""

    def test_assignment_without_created_at(self) -> None:
        task = TaskAssignmentDTO.from_dict({"_id": "a1", "description": "Call Acme"})
        assert task.created_at is None
        assert task.status is NoteStatus.PENDING

    def test_confirmation_without_expiry_reads_expired(self) -> None:
        pending = PendingConfirmationDTO.from_dict(
            {
                "_id": "x1",
                "user_id": "s1",
                "linked_to_type": "candidate",
                "linked_to_id": "c1",
                "reminder_at": datetime(2026, 3, 10, 8, 0, tzinfo=UTC),
            }
        )
        assert pending.expires_at == EPOCH


class TestTranslateError:
    """Tests for driver error translation."""

    def test_validation_failure_is_schema_gap(self) -> None:
        error = OperationFailure("Document failed validation", code=DOCUMENT_VALIDATION_FAILURE)
        result = translate_error(error, ("reminder_date",))
        assert isinstance(result, SchemaGapError)
        assert result.field == "reminder_date"

    def test_message_naming_field_is_schema_gap(self) -> None:
        error = OperationFailure("unknown field reminder_date", code=2)
        result = translate_error(error, ("reminder_date",))
        assert isinstance(result, SchemaGapError)

    def test_other_failures_are_store_errors(self) -> None:
        result = translate_error(ServerSelectionTimeoutError("no servers"), ("reminder_date",))
        assert type(result) is StoreError
        assert "no servers" in str(result)
