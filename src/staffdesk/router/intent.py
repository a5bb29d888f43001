"""Intent extraction for chat commands.

Turns a message into a typed intent using an ordered list of keyword rules.
Rules are tried top to bottom and the first one that both triggers and
extracts its parameters wins. A rule that triggers but cannot extract
(for example "set a reminder" with no name or hours) lets the next rule try.
"""

import re
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from ..storage.models import PersonKind
from .normalizer import NormalizedText, normalize


class IntentType(Enum):
    """Actions the router can carry out without the Q&A fallback."""

    SET_REMINDER = "set_reminder"
    ADD_MEETING_NOTE = "add_meeting_note"
    MARK_MEETING_NOTE_DONE = "mark_meeting_note_done"
    CONFIRM_PENDING_REMINDER = "confirm_pending_reminder"
    MARK_CANDIDATE_PENDING = "mark_candidate_pending"
    FINANCE_QUERY = "finance_query"
    MEETING_TASK_QUERY = "meeting_task_query"
    GENERIC_TASK_QUERY = "generic_task_query"
    ASSIGN_TASK = "assign_task"


class TaskDateFilter(Enum):
    """Single filter applied to a generic task query."""

    TODAY = "today"
    PENDING = "pending"
    COMPLETED = "completed"


@dataclass(frozen=True)
class SetReminderParams:
    name: str
    hours: int
    kind: PersonKind | None = None


@dataclass(frozen=True)
class AddMeetingNoteParams:
    person_name: str
    content: str
    kind: PersonKind | None = None


@dataclass(frozen=True)
class MarkMeetingNoteDoneParams:
    person_name: str
    kind: PersonKind | None = None


@dataclass(frozen=True)
class ConfirmReminderParams:
    pass


@dataclass(frozen=True)
class MarkCandidatePendingParams:
    name: str


@dataclass(frozen=True)
class FinanceQueryParams:
    pass


@dataclass(frozen=True)
class MeetingTaskQueryParams:
    """Filters for a meeting task query.

    ``today``, ``pending`` and ``completed`` are independent flags; the
    executor decides which combination it can apply.
    """

    user_name: str | None = None
    mine: bool = False
    today: bool = False
    pending: bool = False
    completed: bool = False

    @property
    def user_specific(self) -> bool:
        return self.mine or self.user_name is not None


@dataclass(frozen=True)
class GenericTaskQueryParams:
    user_name: str
    date_filter: TaskDateFilter | None = None


@dataclass(frozen=True)
class AssignTaskParams:
    description: str
    user_name: str


IntentParams = (
    SetReminderParams
    | AddMeetingNoteParams
    | MarkMeetingNoteDoneParams
    | ConfirmReminderParams
    | MarkCandidatePendingParams
    | FinanceQueryParams
    | MeetingTaskQueryParams
    | GenericTaskQueryParams
    | AssignTaskParams
)


@dataclass(frozen=True)
class Intent:
    """Extracted intent with typed parameters."""

    type: IntentType
    params: IntentParams
    raw_text: str = ""


@dataclass(frozen=True)
class IntentRule:
    """One entry of the ordered rule list.

    Attributes:
        intent_type: Intent produced when the rule wins.
        triggers: Cheap keyword check on the normalized text.
        extract: Pulls parameters from the text; None means fall through.
    """

    intent_type: IntentType
    triggers: Callable[[NormalizedText], bool]
    extract: Callable[[NormalizedText], IntentParams | None]


# Words that end a captured staff name ("tasks for Wendy today")
NAME_STOPWORDS = frozenset(
    {
        "today",
        "pending",
        "completed",
        "done",
        "task",
        "tasks",
        "note",
        "notes",
        "meeting",
        "meetings",
        "please",
        "this",
        "that",
        "the",
        "which",
        "are",
        "is",
        "and",
        "from",
        "in",
        "on",
        "with",
    }
)

# Captures that refer to the acting user rather than a named one
SELF_REFERENCES = frozenset({"me", "myself", "my", "us"})

QUOTED_TEXT = re.compile(r"\"[^\"]*\"|“[^”]*”")
KIND_PREFIX = re.compile(r"^(candidate|client)\b\s*:?\s*(.+)$", re.IGNORECASE | re.DOTALL)


def without_quotes(text: NormalizedText) -> NormalizedText:
    """Drop quoted passages, such as a task description, from a message."""
    return normalize(QUOTED_TEXT.sub(" ", text.original))


def clean_name(value: str) -> str:
    """Trim whitespace, quotes and trailing punctuation from a captured name."""
    return value.strip().strip("\"'“”").strip().rstrip(".,!?;:").strip()


def split_kind(value: str) -> tuple[PersonKind | None, str]:
    """Split an explicit "candidate"/"client" keyword off a captured name.

    Args:
        value: Captured name, possibly starting with a kind keyword.

    Returns:
        The kind (or None) and the remaining name.
    """
    match = KIND_PREFIX.match(value.strip())
    if match and clean_name(match.group(2)):
        return PersonKind(match.group(1).lower()), clean_name(match.group(2))
    return None, clean_name(value)


class IntentExtractor:
    """Rule-based intent extractor for chat commands.

    Matching is deterministic keyword and pattern matching; the rule order
    is the precedence order (meeting task queries are tried before the
    generic task query, for example).
    """

    SET_REMINDER_PATTERNS = [
        (
            PersonKind.CANDIDATE,
            r"set\s+(?:a\s+)?(?:custom\s+)?reminder\s+for\s+candidate\s+[\"']?(.+?)[\"']?"
            r"\s+in\s+(?:the\s+)?next\s+(\d+)\s+hours?",
        ),
        (
            PersonKind.CLIENT,
            r"set\s+(?:a\s+)?(?:custom\s+)?reminder\s+for\s+client\s+[\"']?(.+?)[\"']?"
            r"\s+in\s+(?:the\s+)?next\s+(\d+)\s+hours?",
        ),
        (
            None,
            r"set\s+(?:a\s+)?(?:custom\s+)?reminder\s+for\s+[\"']?(.+?)[\"']?"
            r"\s+in\s+(?:the\s+)?next\s+(\d+)\s+hours?",
        ),
    ]

    ADD_MEETING_NOTE_PATTERN = r"add\s+(?:a\s+)?meeting\s+note\s+for\s+([^:]+):\s*(.+)"

    MARK_MEETING_NOTE_DONE_PATTERN = (
        r"mark\s+(?:the\s+)?meeting\s+(?:notes?\s+)?(?:for\s+)?(.+?)\s+(?:as\s+)?done\b"
    )

    MARK_CANDIDATE_PENDING_PATTERN = r"candidate[:\s]+(.+?)\s+as\s+pending"

    ASSIGNEE_PATTERN = r"\b(?:assigned\s+to|for|by)\s+([^\s,.?!]+(?:\s+[^\s,.?!]+){0,2})"

    ASSIGN_TASK_PATTERN = r"assign\s+(?:a\s+)?task\s+[\"“](.+?)[\"”]\s+to\s+(.+)"

    def __init__(self) -> None:
        """Initialize the extractor with compiled patterns and the rule list."""
        self._set_reminder = [
            (kind, re.compile(p, re.IGNORECASE)) for kind, p in self.SET_REMINDER_PATTERNS
        ]
        self._add_note = re.compile(self.ADD_MEETING_NOTE_PATTERN, re.IGNORECASE | re.DOTALL)
        self._mark_done = re.compile(self.MARK_MEETING_NOTE_DONE_PATTERN, re.IGNORECASE)
        self._mark_pending = re.compile(self.MARK_CANDIDATE_PENDING_PATTERN, re.IGNORECASE)
        self._assignee = re.compile(self.ASSIGNEE_PATTERN, re.IGNORECASE)
        self._assign_task = re.compile(self.ASSIGN_TASK_PATTERN, re.IGNORECASE | re.DOTALL)

        self._rules: list[IntentRule] = [
            IntentRule(
                IntentType.SET_REMINDER,
                lambda t: t.contains("set", "reminder"),
                self._extract_set_reminder,
            ),
            IntentRule(
                IntentType.ADD_MEETING_NOTE,
                lambda t: t.contains("add", "meeting", "note"),
                self._extract_add_meeting_note,
            ),
            IntentRule(
                IntentType.MARK_MEETING_NOTE_DONE,
                lambda t: t.contains("mark", "meeting", "done"),
                self._extract_mark_meeting_note_done,
            ),
            IntentRule(
                IntentType.CONFIRM_PENDING_REMINDER,
                lambda t: t.contains_any("yes", "confirm") and t.contains("reminder"),
                lambda t: ConfirmReminderParams(),
            ),
            IntentRule(
                IntentType.MARK_CANDIDATE_PENDING,
                lambda t: t.contains("mark", "candidate", "pending"),
                self._extract_mark_candidate_pending,
            ),
            IntentRule(
                IntentType.FINANCE_QUERY,
                lambda t: t.contains_any("finance", "money", "revenue", "income"),
                lambda t: FinanceQueryParams(),
            ),
            IntentRule(
                IntentType.MEETING_TASK_QUERY,
                lambda t: without_quotes(t).contains("meeting")
                and without_quotes(t).contains_any("task", "note"),
                self._extract_meeting_task_query,
            ),
            IntentRule(
                IntentType.GENERIC_TASK_QUERY,
                lambda t: t.contains("task"),
                self._extract_generic_task_query,
            ),
            IntentRule(
                IntentType.ASSIGN_TASK,
                lambda t: t.contains("assign", "task"),
                self._extract_assign_task,
            ),
        ]

    @property
    def rules(self) -> list[IntentRule]:
        """The ordered rule list, highest priority first."""
        return list(self._rules)

    def extract(self, message: str) -> Intent | None:
        """Extract the intent named by a message.

        Args:
            message: The raw message text.

        Returns:
            The first matching intent, or None for open-ended questions.
        """
        text = normalize(message)
        if not text.lower:
            return None

        for rule in self._rules:
            if not rule.triggers(text):
                continue
            params = rule.extract(text)
            if params is not None:
                return Intent(type=rule.intent_type, params=params, raw_text=text.original)
        return None

    def _extract_set_reminder(self, text: NormalizedText) -> SetReminderParams | None:
        for kind, pattern in self._set_reminder:
            match = pattern.search(text.original)
            if not match:
                continue
            name = clean_name(match.group(1))
            hours = int(match.group(2))
            if name and hours > 0:
                return SetReminderParams(name=name, hours=hours, kind=kind)
        return None

    def _extract_add_meeting_note(self, text: NormalizedText) -> AddMeetingNoteParams | None:
        match = self._add_note.search(text.original)
        if not match:
            return None
        kind, name = split_kind(match.group(1))
        content = match.group(2).strip()
        if not name or not content:
            return None
        return AddMeetingNoteParams(person_name=name, content=content, kind=kind)

    def _extract_mark_meeting_note_done(
        self, text: NormalizedText
    ) -> MarkMeetingNoteDoneParams | None:
        match = self._mark_done.search(text.original)
        if not match:
            return None
        kind, name = split_kind(match.group(1))
        if not name:
            return None
        return MarkMeetingNoteDoneParams(person_name=name, kind=kind)

    def _extract_mark_candidate_pending(
        self, text: NormalizedText
    ) -> MarkCandidatePendingParams | None:
        match = self._mark_pending.search(text.original)
        if not match:
            return None
        name = clean_name(match.group(1))
        return MarkCandidatePendingParams(name=name) if name else None

    def _extract_meeting_task_query(self, text: NormalizedText) -> MeetingTaskQueryParams:
        lower = text.lower
        mine = bool(re.search(r"\bmy\b", lower)) or "assigned to me" in lower
        return MeetingTaskQueryParams(
            user_name=self._capture_assignee(text),
            mine=mine,
            today="today" in lower,
            pending="pending" in lower,
            completed="completed" in lower,
        )

    def _extract_generic_task_query(self, text: NormalizedText) -> GenericTaskQueryParams | None:
        name = self._capture_assignee(text)
        if name is None:
            return None

        lower = text.lower
        date_filter: TaskDateFilter | None = None
        if "today" in lower:
            date_filter = TaskDateFilter.TODAY
        elif "pending" in lower:
            date_filter = TaskDateFilter.PENDING
        elif "completed" in lower:
            date_filter = TaskDateFilter.COMPLETED
        return GenericTaskQueryParams(user_name=name, date_filter=date_filter)

    def _extract_assign_task(self, text: NormalizedText) -> AssignTaskParams | None:
        match = self._assign_task.search(text.original)
        if not match:
            return None
        description = match.group(1).strip()
        name = clean_name(match.group(2))
        if not description or not name:
            return None
        return AssignTaskParams(description=description, user_name=name)

    def _capture_assignee(self, text: NormalizedText) -> str | None:
        """Capture the staff name after "for", "by" or "assigned to".

        Quoted text is skipped so a task description never names the assignee.
        """
        for match in self._assignee.finditer(without_quotes(text).original):
            words: list[str] = []
            for word in match.group(1).split():
                if word.lower() in NAME_STOPWORDS:
                    break
                words.append(word)
            name = clean_name(" ".join(words))
            if name and name.lower() not in SELF_REFERENCES:
                return name
        return None


__all__ = [
    "AddMeetingNoteParams",
    "AssignTaskParams",
    "ConfirmReminderParams",
    "FinanceQueryParams",
    "GenericTaskQueryParams",
    "Intent",
    "IntentExtractor",
    "IntentParams",
    "IntentRule",
    "IntentType",
    "MarkCandidatePendingParams",
    "MarkMeetingNoteDoneParams",
    "MeetingTaskQueryParams",
    "SetReminderParams",
    "TaskDateFilter",
    "clean_name",
    "split_kind",
    "without_quotes",
]
