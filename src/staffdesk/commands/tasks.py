"""Task commands: meeting task queries, task lists and task assignment."""

import logging
from datetime import date, datetime

from ..resolution.staff import match_staff
from ..router.intent import (
    AssignTaskParams,
    GenericTaskQueryParams,
    MeetingTaskQueryParams,
    TaskDateFilter,
)
from ..storage.errors import StoreError
from ..storage.models import (
    EPOCH,
    MeetingNoteDTO,
    MeetingTaskDTO,
    NoteStatus,
    StaffDTO,
    TaskAssignmentDTO,
)
from .base import CommandContext
from .formatting import (
    clean_task_description,
    ensure_terminal_punctuation,
    format_display_date,
)

logger = logging.getLogger(__name__)

DONE_MARKER = "✅"
PENDING_MARKER = "⏳"
UNKNOWN_USER_REPLY = "Sorry, I can only manage tasks for recognized team members."


def marker(status: NoteStatus) -> str:
    return DONE_MARKER if status is NoteStatus.COMPLETED else PENDING_MARKER


def meeting_day(note: MeetingNoteDTO) -> datetime | None:
    """When a meeting took place, falling back to when its note was written."""
    return note.meeting_date or note.created_at


class TaskCommandHandler:
    """Lists meeting tasks and task assignments, and assigns new tasks."""

    def __init__(self, context: CommandContext) -> None:
        """Initialize handler.

        Args:
            context: Shared command context.
        """
        self._ctx = context

    def _today(self) -> date:
        return self._ctx.now().astimezone(self._ctx.timezone).date()

    def _local_date(self, value: datetime) -> date:
        return value.astimezone(self._ctx.timezone).date()

    def _roster_id(self, name: str) -> str | None:
        return self._ctx.config.roster.get(name.strip().lower())

    def meeting_tasks(self, params: MeetingTaskQueryParams, user_id: str) -> str:
        """List tasks agreed in meetings, grouped by meeting.

        A user who cannot be matched to a staff member widens the query to
        everyone's tasks.

        Args:
            params: Who the tasks belong to and which filters apply.
            user_id: Acting staff member, used for "my tasks".

        Returns:
            Reply text.
        """
        status: NoteStatus | None = None
        if params.pending != params.completed:
            status = NoteStatus.PENDING if params.pending else NoteStatus.COMPLETED

        try:
            assignee = self._find_assignee(params, user_id)
            tasks = self._ctx.store.meeting_tasks.find(
                assigned_to=assignee.id if assignee else None,
                status=status,
            )
            meetings = self._ctx.store.meeting_notes.get_many(
                sorted({task.meeting_note_id for task in tasks})
            )
            staff = self._ctx.store.staff.get_many(sorted({task.assigned_to for task in tasks}))
        except StoreError as e:
            logger.error("Failed to get meeting tasks: %s", e)
            return f"Failed to get meeting tasks: {e}"

        if params.today:
            today = self._today()
            tasks = [task for task in tasks if self._held_on(task, meetings, today)]

        scope = self._describe_scope(assignee, status, params.today)
        if not tasks:
            return f"No meeting tasks found{scope}."

        lines = [f"📋 Meeting tasks{scope}:"]
        for heading, group in self._group_by_meeting(tasks, meetings):
            lines.append("")
            lines.append(heading)
            for task in group:
                line = f"{marker(task.status)} {clean_task_description(task.task_description)}"
                if assignee is None and task.assigned_to in staff:
                    line += f" ({staff[task.assigned_to].name})"
                lines.append(line)
        return "\n".join(lines)

    def _find_assignee(self, params: MeetingTaskQueryParams, user_id: str) -> StaffDTO | None:
        if not params.user_specific:
            return None
        if params.user_name is not None:
            member = match_staff(params.user_name, self._ctx.store.staff.find_all())
            if member is None:
                logger.info("No staff match for %r, showing all tasks", params.user_name)
            return member
        return self._ctx.store.staff.get_by_id(user_id)

    def _held_on(
        self, task: MeetingTaskDTO, meetings: dict[str, MeetingNoteDTO], day: date
    ) -> bool:
        note = meetings.get(task.meeting_note_id)
        held = meeting_day(note) if note else None
        return held is not None and self._local_date(held) == day

    def _describe_scope(
        self, assignee: StaffDTO | None, status: NoteStatus | None, today: bool
    ) -> str:
        parts = []
        if assignee is not None:
            parts.append(f" for {assignee.name}")
        qualifiers = []
        if status is not None:
            qualifiers.append(status.value)
        if today:
            qualifiers.append("today")
        if qualifiers:
            parts.append(f" ({', '.join(qualifiers)})")
        return "".join(parts)

    def _group_by_meeting(
        self, tasks: list[MeetingTaskDTO], meetings: dict[str, MeetingNoteDTO]
    ) -> list[tuple[str, list[MeetingTaskDTO]]]:
        """Group tasks under a "title (date)" heading, most recent meeting first."""
        groups: dict[str, list[MeetingTaskDTO]] = {}
        order: dict[str, datetime | None] = {}
        for task in tasks:
            note = meetings.get(task.meeting_note_id)
            title = (note.title if note else "") or "Untitled meeting"
            day = meeting_day(note) if note else None
            heading = f"{title} ({format_display_date(day, self._ctx.timezone)})" if day else title
            groups.setdefault(heading, []).append(task)
            order.setdefault(heading, day)

        ranked = sorted(groups, key=lambda h: order[h] or EPOCH, reverse=True)
        return [(heading, groups[heading]) for heading in ranked]

    def task_list(self, params: GenericTaskQueryParams, user_id: str) -> str:
        """List a roster member's task assignments.

        Args:
            params: Whose tasks and the optional date or status filter.
            user_id: Acting staff member.

        Returns:
            Reply text.
        """
        staff_id = self._roster_id(params.user_name)
        if staff_id is None:
            return UNKNOWN_USER_REPLY

        status: NoteStatus | None = None
        if params.date_filter is TaskDateFilter.PENDING:
            status = NoteStatus.PENDING
        elif params.date_filter is TaskDateFilter.COMPLETED:
            status = NoteStatus.COMPLETED

        try:
            tasks = self._ctx.store.task_assignments.find_for(staff_id, status)
            member = self._ctx.store.staff.get_by_id(staff_id)
        except StoreError as e:
            logger.error("Failed to get tasks for %s: %s", params.user_name, e)
            return f"Failed to get tasks: {e}"

        if params.date_filter is TaskDateFilter.TODAY:
            today = self._today()
            tasks = [
                task
                for task in tasks
                if task.created_at is not None and self._local_date(task.created_at) == today
            ]

        name = member.name if member else params.user_name.title()
        qualifier = f" ({params.date_filter.value})" if params.date_filter else ""
        if not tasks:
            return f"No tasks found for {name}{qualifier}."

        lines = [f"📋 Tasks for {name}{qualifier}:"]
        for index, task in enumerate(tasks, start=1):
            line = f"{index}. {marker(task.status)} {clean_task_description(task.description)}"
            if task.created_at is not None:
                line += f" ({format_display_date(task.created_at, self._ctx.timezone)})"
            lines.append(line)
        return "\n".join(lines)

    def assign(self, params: AssignTaskParams, user_id: str) -> str:
        """Assign a new pending task to a roster member.

        Args:
            params: Task description and assignee name.
            user_id: Acting staff member, recorded as assigner.

        Returns:
            Reply text.
        """
        staff_id = self._roster_id(params.user_name)
        if staff_id is None:
            return UNKNOWN_USER_REPLY

        task = TaskAssignmentDTO(
            description=params.description,
            assigned_to=staff_id,
            assigned_by=user_id,
            status=NoteStatus.PENDING,
            created_at=self._ctx.now(),
        )
        try:
            task_id = self._ctx.store.task_assignments.save(task)
            member = self._ctx.store.staff.get_by_id(staff_id)
        except StoreError as e:
            logger.error("Failed to assign task to %s: %s", params.user_name, e)
            return f"Failed to assign task: {e}"

        name = member.name if member else params.user_name.title()
        self._ctx.audit(
            user_id,
            "assign",
            f"Assigned task to {name}: {params.description}",
            entity_type="task_assignment",
            entity_id=task_id,
            entity_name=name,
            new_value=params.description,
        )
        logger.info("Task %s assigned to %s", task_id, name)
        return f'✅ Task assigned to {name}: "{ensure_terminal_punctuation(params.description)}"'


__all__ = [
    "DONE_MARKER",
    "PENDING_MARKER",
    "UNKNOWN_USER_REPLY",
    "TaskCommandHandler",
]
