"""Shared context and reply helpers for command handlers."""

from collections.abc import Callable
from datetime import UTC, datetime
from functools import cached_property
from zoneinfo import ZoneInfo

from ..config import StaffDeskConfig
from ..resolution.conflicts import ConflictChecker
from ..resolution.people import (
    AmbiguousAcrossKinds,
    AmbiguousWithinKind,
    EntityResolver,
    NotFound,
)
from ..storage.errors import SchemaGapError
from ..storage.models import PersonKind
from ..storage.store import RecordStore

Clock = Callable[[], datetime]

Unresolved = NotFound | AmbiguousWithinKind | AmbiguousAcrossKinds


def utc_now() -> datetime:
    """Default clock: the current instant in UTC."""
    return datetime.now(UTC)


class CommandContext:
    """Everything a command handler needs to act on one message.

    Attributes:
        store: Record store to read and write.
        config: Loaded configuration.
        clock: Source of the current instant (aware UTC).
    """

    def __init__(
        self,
        store: RecordStore,
        config: StaffDeskConfig,
        clock: Clock = utc_now,
    ) -> None:
        self.store = store
        self.config = config
        self.clock = clock

    @cached_property
    def timezone(self) -> ZoneInfo:
        """Display timezone used for every date comparison and rendering."""
        return ZoneInfo(self.config.display.timezone)

    @cached_property
    def resolver(self) -> EntityResolver:
        return EntityResolver(self.store)

    @cached_property
    def conflicts(self) -> ConflictChecker:
        return ConflictChecker(self.store.interviews, self.timezone)

    def now(self) -> datetime:
        """Current instant, normalized to aware UTC."""
        value = self.clock()
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def audit(self, user_id: str, action_type: str, description: str, **fields: str | None) -> None:
        """Record an activity log entry; failures are logged by the repository."""
        self.store.activity_log.log(user_id, action_type, description, **fields)


def plural(kind: PersonKind) -> str:
    return f"{kind.value}s"


def unresolved_reply(
    resolution: Unresolved,
    name: str,
    usage: Callable[[PersonKind], str],
) -> str:
    """Phrase a resolution that did not single out one person.

    Args:
        resolution: Outcome from the entity resolver other than Single.
        name: Name as the user wrote it.
        usage: Builds the command to re-send with an explicit kind keyword.

    Returns:
        The reply.
    """
    if isinstance(resolution, NotFound):
        if len(resolution.kinds) == 1:
            return f'{resolution.kinds[0].value.capitalize()} "{name}" not found.'
        return f'No person named "{name}" found in candidates or clients.'

    if isinstance(resolution, AmbiguousAcrossKinds):
        kinds = " and ".join(plural(kind) for kind in resolution.kinds)
        options = " or ".join(f'"{usage(kind)}"' for kind in resolution.kinds)
        return f'Found "{name}" in both {kinds}. Please specify CANDIDATE or CLIENT: {options}'

    listing = "\n".join(
        f"{index}. {person.name} ({person.contact or 'no contact'})"
        for index, person in enumerate(resolution.people, start=1)
    )
    return (
        f"Multiple {plural(resolution.kind)} found for \"{name}\":\n{listing}\n\n"
        "Please be more specific with the full name."
    )


def migration_reply(error: SchemaGapError) -> str:
    """Reply for a write rejected because the schema lacks a field."""
    return (
        f"Database needs update: {error.field} column missing. "
        "Please run the database migration first."
    )


__all__ = [
    "Clock",
    "CommandContext",
    "Unresolved",
    "migration_reply",
    "plural",
    "unresolved_reply",
    "utc_now",
]
