"""Integration tests for message handling through the action router.

Drives ActionRouter end to end against mongomock with a fixed clock and
a mocked Q&A assistant.
"""

from datetime import UTC, datetime, timedelta
from unittest.mock import MagicMock

import pytest

from staffdesk.commands.reminder import STATIC_CONFIRMATION, TOO_FAR_AHEAD_REPLY
from staffdesk.commands.tasks import UNKNOWN_USER_REPLY
from staffdesk.config import ConfirmationConfig, StaffDeskConfig
from staffdesk.router.action_router import (
    GENERIC_FAILURE,
    VALIDATION_REPLY,
    ActionRouter,
    InboundMessage,
)
from staffdesk.storage.errors import SchemaGapError
from staffdesk.storage.models import as_utc

pytestmark = pytest.mark.integration

USER = "staff-1"


@pytest.fixture
def assistant() -> MagicMock:
    mock = MagicMock()
    mock.answer.return_value = "Two candidates passed vetting last month."
    return mock


@pytest.fixture
def router(store, config, assistant, now) -> ActionRouter:
    return ActionRouter(store, config, assistant=assistant, clock=lambda: now)


@pytest.fixture
def send(router):
    def _send(text: str, user_id: str = USER) -> str:
        return router.handle(InboundMessage(text=text, acting_user_id=user_id))

    return _send


def stored_instant(doc: dict, field: str) -> datetime:
    return as_utc(doc[field])


def close_to(value: datetime, expected: datetime) -> bool:
    return abs(value - expected) < timedelta(milliseconds=1)


class TestSetReminderFlow:
    """Tests for setting reminders from chat."""

    def test_candidate_reminder(self, send, seed, mock_db, now) -> None:
        seed.candidate("c1", "Jane Doe", "0711000001")

        reply = send('set reminder for candidate "Jane Doe" in next 2 hours')

        assert reply == (
            "✅ Reminder set for candidate Jane Doe (0711000001) for 10 Mar 2026, 11:00 AM."
        )
        doc = mock_db["candidates"].find_one({"_id": "c1"})
        assert close_to(stored_instant(doc, "reminder_date"), now + timedelta(hours=2))

        entry = mock_db["activity_logs"].find_one({"action_type": "reminder"})
        assert entry["entity_id"] == "c1"
        assert entry["user_id"] == USER

    def test_client_reminder_field(self, send, seed, mock_db, now) -> None:
        seed.client("k1", "Acme Ltd", "0722000001")

        reply = send("set custom reminder for client Acme in next 24 hours")

        assert reply.startswith("✅ Reminder set for client Acme Ltd (0722000001)")
        doc = mock_db["clients"].find_one({"_id": "k1"})
        assert close_to(
            stored_instant(doc, "custom_reminder_datetime"), now + timedelta(hours=24)
        )

    def test_interview_conflict_blocks_write(self, send, seed, mock_db) -> None:
        seed.candidate("c1", "Jane Doe", "0711000001")
        seed.interview("i1", "c1", datetime(2026, 3, 10, 11, 0, tzinfo=UTC))

        reply = send('set reminder for candidate "Jane Doe" in next 2 hours')

        assert reply.startswith("⚠️ CONFLICT: Jane Doe has interview(s)")
        assert "02:00 PM" in reply
        assert "reminder_date" not in mock_db["candidates"].find_one({"_id": "c1"})
        assert mock_db["activity_logs"].count_documents({}) == 0

    def test_name_in_both_kinds(self, send, seed) -> None:
        seed.candidate("c1", "John Kamau")
        seed.client("k1", "John Otieno")

        reply = send("set reminder for John in next 1 hour")

        assert reply.startswith('Found "John" in both candidates and clients.')
        assert '"set reminder for CANDIDATE John in next 1 hours"' in reply

    def test_several_candidates_listed(self, send, seed) -> None:
        seed.candidate("c1", "Jane Doe", "0711000001")
        seed.candidate("c2", "Jane Smith")

        reply = send("set reminder for candidate Jane in next 2 hours")

        assert reply == (
            'Multiple candidates found for "Jane":\n'
            "1. Jane Doe (0711000001)\n"
            "2. Jane Smith (no contact)\n\n"
            "Please be more specific with the full name."
        )

    def test_unknown_person(self, send) -> None:
        reply = send("set reminder for Wanjiru in next 2 hours")
        assert reply == 'No person named "Wanjiru" found in candidates or clients.'

    def test_reminder_too_far_ahead(self, send, seed, mock_db) -> None:
        seed.client("k1", "Acme Ltd")

        reply = send("set reminder for client Acme in next 100000000 hours")

        assert reply == TOO_FAR_AHEAD_REPLY
        assert "custom_reminder_datetime" not in mock_db["clients"].find_one({"_id": "k1"})
        assert mock_db["activity_logs"].count_documents({}) == 0

    def test_missing_schema_field(self, send, seed, store, monkeypatch) -> None:
        seed.client("k1", "Acme Ltd")

        def reject(person_id, remind_at):
            raise SchemaGapError("custom_reminder_datetime", "validation failed")

        monkeypatch.setattr(store.clients, "set_reminder", reject)

        reply = send("set reminder for client Acme in next 2 hours")

        assert reply == (
            "Database needs update: custom_reminder_datetime column missing. "
            "Please run the database migration first."
        )


class TestConfirmReminderFlow:
    """Tests for confirming a reminder after a conflict."""

    def test_confirmation_without_pending_reminder(self, send) -> None:
        assert send("yes reminder") == STATIC_CONFIRMATION

    def test_untracked_confirmation_writes_nothing(self, send, seed, mock_db, now) -> None:
        seed.candidate("c1", "Jane Doe")
        seed.interview("i1", "c1", now + timedelta(hours=4))
        send('set reminder for candidate "Jane Doe" in next 2 hours')

        assert send("confirm reminder") == STATIC_CONFIRMATION
        assert "reminder_date" not in mock_db["candidates"].find_one({"_id": "c1"})

    def test_tracked_confirmation_sets_withheld_reminder(
        self, store, seed, mock_db, assistant, now
    ) -> None:
        config = StaffDeskConfig(confirmations=ConfirmationConfig(track_pending=True))
        router = ActionRouter(store, config, assistant=assistant, clock=lambda: now)
        seed.candidate("c1", "Jane Doe", "0711000001")
        seed.interview("i1", "c1", now + timedelta(hours=4))

        conflict = router.handle(
            InboundMessage('set reminder for candidate "Jane Doe" in next 2 hours', USER)
        )
        confirmed = router.handle(InboundMessage("yes, confirm the reminder", USER))
        again = router.handle(InboundMessage("confirm reminder", USER))

        assert conflict.startswith("⚠️ CONFLICT")
        assert confirmed == (
            "✅ Reminder confirmed and set for candidate Jane Doe (0711000001) "
            "for 10 Mar 2026, 11:00 AM."
        )
        doc = mock_db["candidates"].find_one({"_id": "c1"})
        assert close_to(stored_instant(doc, "reminder_date"), now + timedelta(hours=2))
        assert again == STATIC_CONFIRMATION

    def test_tracked_confirmation_is_per_user(self, store, seed, mock_db, assistant, now) -> None:
        config = StaffDeskConfig(confirmations=ConfirmationConfig(track_pending=True))
        router = ActionRouter(store, config, assistant=assistant, clock=lambda: now)
        seed.candidate("c1", "Jane Doe")
        seed.interview("i1", "c1", now + timedelta(hours=4))

        router.handle(InboundMessage('set reminder for candidate "Jane Doe" in next 2 hours', USER))

        assert router.handle(InboundMessage("confirm reminder", "staff-2")) == STATIC_CONFIRMATION
        assert "reminder_date" not in mock_db["candidates"].find_one({"_id": "c1"})


class TestMeetingNoteFlow:
    """Tests for adding and completing meeting notes."""

    def test_add_note(self, send, seed, mock_db, now) -> None:
        seed.client("k1", "Acme Ltd")

        reply = send("add meeting note for Acme: send the signed contract")

        assert reply == '✅ Meeting note added for client Acme Ltd: "send the signed contract."'
        doc = mock_db["meeting_notes"].find_one({})
        assert doc["status"] == "pending"
        assert doc["note_content"] == "send the signed contract"
        assert doc["created_by"] == USER
        assert doc["linked_to_type"] == "client"
        assert doc["linked_to_id"] == "k1"
        assert doc["title"] == "Meeting with Acme Ltd"
        assert mock_db["activity_logs"].count_documents({"action_type": "create"}) == 1

    def test_ambiguous_name_inserts_nothing(self, send, seed, mock_db) -> None:
        seed.candidate("c1", "John Kamau")
        seed.client("k1", "John Otieno")

        reply = send("add meeting note for John: call back tomorrow")

        assert "Please specify CANDIDATE or CLIENT" in reply
        assert '"add meeting note for CLIENT John: call back tomorrow"' in reply
        assert mock_db["meeting_notes"].count_documents({}) == 0

    def test_kind_keyword_resolves_ambiguity(self, send, seed, mock_db) -> None:
        seed.candidate("c1", "John Kamau")
        seed.client("k1", "John Otieno")

        reply = send("add meeting note for CANDIDATE John: call back tomorrow")

        assert reply.startswith("✅ Meeting note added for candidate John Kamau")
        assert mock_db["meeting_notes"].find_one({})["linked_to_id"] == "c1"

    def test_mark_single_note_done(self, send, seed, mock_db) -> None:
        seed.candidate("c1", "Jane Doe")
        seed.meeting_note("n1", "Send CV to Acme", "candidate", "c1")

        reply = send("mark meeting note for Jane as done")

        assert reply == '✅ Meeting note marked as done for Jane Doe: "Send CV to Acme."'
        doc = mock_db["meeting_notes"].find_one({"_id": "n1"})
        assert doc["status"] == "completed"
        assert doc["completed_by"] == USER
        assert send("mark meeting note for Jane as done") == (
            "No pending meeting notes found for Jane Doe."
        )

    def test_several_pending_notes_are_listed(self, send, seed, mock_db, now) -> None:
        seed.candidate("c1", "Jane Doe")
        seed.meeting_note("n1", "First note", "candidate", "c1", created_at=now - timedelta(days=1))
        seed.meeting_note("n2", "x" * 60, "candidate", "c1", created_at=now)

        reply = send("mark meeting note for Jane as done")

        assert reply == (
            "Multiple pending notes found for Jane Doe:\n"
            "1. First note...\n"
            f"2. {'x' * 50}...\n\n"
            "Please specify which note to mark as done."
        )
        assert mock_db["meeting_notes"].count_documents({"status": "pending"}) == 2


class TestCandidateStatusFlow:
    """Tests for marking candidates pending."""

    def test_mark_pending_is_idempotent(self, send, seed, mock_db) -> None:
        seed.candidate("c1", "Jane Doe", status="Interviewed")

        first = send("mark candidate Jane Doe as pending")
        second = send("mark candidate Jane Doe as pending")

        expected = "Candidate Jane Doe has been updated to Pending status at 10 Mar 2026, 09:00 AM."
        assert first == expected
        assert second == expected
        assert mock_db["candidates"].find_one({"_id": "c1"})["status"] == "Pending"
        entries = list(mock_db["activity_logs"].find({"action_type": "status_change"}))
        assert len(entries) == 1
        assert entries[0]["old_value"] == "Interviewed"

    def test_clients_are_not_candidates(self, send, seed) -> None:
        seed.client("k1", "Jane Doe")
        assert send("mark candidate Jane Doe as pending") == (
            'Candidate "Jane Doe" not found in the system.'
        )


class TestFinanceFlow:
    """Tests for the financial summary."""

    def test_month_and_paf_figures(self, send, seed) -> None:
        for client_id in ("k1", "k2", "k3"):
            seed.client(client_id, f"Client {client_id}", status="Active")
        seed.client("k4", "Client k4", status="Won")
        seed.placement("p1", 1000, datetime(2026, 3, 2, 8, 0, tzinfo=UTC))
        seed.placement("p2", 2000, datetime(2026, 3, 5, 8, 0, tzinfo=UTC))

        reply = send("finance")

        lines = reply.splitlines()
        assert lines[0] == "💰 FINANCIAL ANALYSIS:"
        assert lines[lines.index("📅 THIS MONTH:") + 1] == "KSH 3,000 (2 placements)"
        assert "• PAF Fees: KSH 1,500 (3 active clients)" in lines
        assert "💵 NET REVENUE: KSH 4,500" in lines
        assert "• Won: 1" in lines

    def test_no_data(self, send) -> None:
        assert send("what is our revenue?") == "No financial data available."


class TestTaskFlow:
    """Tests for task assignment and task queries."""

    @pytest.fixture(autouse=True)
    def wendy(self, seed) -> None:
        seed.staff("staff-wendy", "Wendy Achieng", "wendy.a")

    def test_assign_then_list(self, send, mock_db) -> None:
        assigned = send('assign task "call Acme about invoice" to Wendy')
        listed = send("show tasks for Wendy")

        assert assigned == '✅ Task assigned to Wendy Achieng: "call Acme about invoice."'
        doc = mock_db["task_assignments"].find_one({})
        assert doc["description"] == "call Acme about invoice"
        assert doc["assigned_to"] == "staff-wendy"
        assert doc["assigned_by"] == USER
        assert doc["status"] == "pending"
        assert listed == "📋 Tasks for Wendy Achieng:\n1. ⏳ Call Acme about invoice (10 Mar 2026)"

    def test_completed_filter(self, send) -> None:
        send('assign task "Call Acme" to Wendy')
        assert send("completed tasks for Wendy") == "No tasks found for Wendy Achieng (completed)."

    def test_unknown_user_is_refused(self, send, mock_db) -> None:
        assert send("show tasks for Peter") == UNKNOWN_USER_REPLY
        assert send('assign task "Call Acme" to Peter') == UNKNOWN_USER_REPLY
        assert mock_db["task_assignments"].count_documents({}) == 0

    def test_meeting_tasks_for_named_user(self, send, seed, now) -> None:
        seed.meeting_note("n1", "Sync", title="Weekly sync", meeting_date=now)
        seed.meeting_note(
            "n2", "Kickoff", title="Acme kickoff", meeting_date=now - timedelta(days=3)
        )
        seed.meeting_task("t1", "n1", "send CV", "staff-wendy")
        seed.meeting_task("t2", "n2", "Book room", "staff-wendy", status="completed")
        seed.meeting_task("t3", "n1", "Call client", "staff-other")

        reply = send("show meeting tasks for Wendy")

        assert reply == (
            "📋 Meeting tasks for Wendy Achieng:\n"
            "\n"
            "Weekly sync (10 Mar 2026)\n"
            "⏳ Send CV\n"
            "\n"
            "Acme kickoff (07 Mar 2026)\n"
            "✅ Book room"
        )

    def test_my_pending_meeting_tasks_today(self, send, seed, now) -> None:
        seed.meeting_note("n1", "Sync", title="Weekly sync", meeting_date=now)
        seed.meeting_note("n2", "Old", title="Old sync", meeting_date=now - timedelta(days=3))
        seed.meeting_task("t1", "n1", "Send CV", "staff-wendy")
        seed.meeting_task("t2", "n2", "Book room", "staff-wendy")

        reply = send("my pending meeting tasks today", user_id="staff-wendy")

        assert reply.splitlines()[0] == "📋 Meeting tasks for Wendy Achieng (pending, today):"
        assert "⏳ Send CV" in reply
        assert "Book room" not in reply

    def test_unmatched_user_widens_to_everyone(self, send, seed, now) -> None:
        seed.staff("staff-peter", "Peter Mwangi")
        seed.meeting_note("n1", "Sync", title="Weekly sync", meeting_date=now)
        seed.meeting_task("t1", "n1", "Send CV", "staff-peter")

        reply = send("meeting tasks for Grace")

        assert reply.splitlines()[0] == "📋 Meeting tasks:"
        assert "⏳ Send CV (Peter Mwangi)" in reply

    def test_dashboard_done_tasks_count_as_completed(self, send, seed, now) -> None:
        seed.meeting_note("n1", "Sync", title="Weekly sync", meeting_date=now)
        seed.meeting_task("t1", "n1", "Send CV", "staff-wendy")
        seed.meeting_task("t2", "n1", "Book room", "staff-wendy", status="done")

        everything = send("show my meeting tasks", user_id="staff-wendy")
        completed = send("my completed meeting tasks", user_id="staff-wendy")

        assert everything == (
            "📋 Meeting tasks for Wendy Achieng:\n"
            "\n"
            "Weekly sync (10 Mar 2026)\n"
            "⏳ Send CV\n"
            "✅ Book room"
        )
        assert completed.splitlines()[0] == "📋 Meeting tasks for Wendy Achieng (completed):"
        assert "✅ Book room" in completed
        assert "Send CV" not in completed

    def test_undated_assignment_is_not_today(self, send, mock_db) -> None:
        mock_db["task_assignments"].insert_one(
            {
                "_id": "a1",
                "description": "Old import",
                "assigned_to": "staff-wendy",
                "status": "pending",
            }
        )

        assert send("tasks for Wendy today") == "No tasks found for Wendy Achieng (today)."
        assert send("show tasks for Wendy") == "📋 Tasks for Wendy Achieng:\n1. ⏳ Old import"

    def test_no_meeting_tasks(self, send) -> None:
        assert send("show my meeting tasks", user_id="staff-wendy") == (
            "No meeting tasks found for Wendy Achieng."
        )


class TestFallbackAndGuards:
    """Tests for the Q&A fallback, validation and the error guard."""

    def test_unmatched_message_goes_to_assistant(
        self, send, assistant, seed, mock_db, now
    ) -> None:
        seed.candidate("c1", "Jane Doe", status="New")
        question = "how many candidates passed vetting last month?"

        reply = send(question)

        assert reply == "Two candidates passed vetting last month."
        assistant.answer.assert_called_once_with(question, USER, now)
        assert mock_db["candidates"].find_one({"_id": "c1"}) == {
            "_id": "c1",
            "name": "Jane Doe",
            "phone": "",
            "status": "New",
        }
        assert mock_db["activity_logs"].count_documents({}) == 0
        assert mock_db["meeting_notes"].count_documents({}) == 0

    @pytest.mark.parametrize(
        "text,user_id",
        [("", USER), ("   ", USER), ("finance", "")],
    )
    def test_validation(self, router, assistant, text: str, user_id: str) -> None:
        assert router.handle(InboundMessage(text, user_id)) == VALIDATION_REPLY
        assistant.answer.assert_not_called()

    def test_unexpected_error_becomes_generic_failure(self, store, config, assistant) -> None:
        extractor = MagicMock()
        extractor.extract.side_effect = RuntimeError("boom")
        router = ActionRouter(store, config, assistant=assistant, extractor=extractor)

        assert router.handle(InboundMessage("finance", USER)) == GENERIC_FAILURE
