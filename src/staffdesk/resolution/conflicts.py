"""Same-day interview conflict detection for reminders."""

from dataclasses import dataclass
from datetime import datetime
from zoneinfo import ZoneInfo

from ..storage.people import InterviewRepository


@dataclass(frozen=True)
class Conflict:
    """Interviews falling on the same calendar day as a proposed reminder.

    Attributes:
        times: Interview start times, in the display timezone, in time order.
    """

    times: list[datetime]


class ConflictChecker:
    """Checks a proposed reminder against the candidate's interviews."""

    def __init__(self, interviews: InterviewRepository, timezone: ZoneInfo) -> None:
        """Initialize checker.

        Args:
            interviews: Interview repository.
            timezone: Civil timezone that defines a calendar day.
        """
        self._interviews = interviews
        self._timezone = timezone

    def check(self, candidate_id: str, proposed: datetime) -> Conflict | None:
        """Find interviews on the same local day as the proposed instant.

        Args:
            candidate_id: The candidate's row ID.
            proposed: Proposed reminder instant (aware).

        Returns:
            A Conflict listing every same-day interview, or None.

        Raises:
            StoreError: If the interview lookup fails.
        """
        day = proposed.astimezone(self._timezone).date()
        times = sorted(
            interview.date_time.astimezone(self._timezone)
            for interview in self._interviews.find_for_candidate(candidate_id)
            if interview.date_time is not None
            and interview.date_time.astimezone(self._timezone).date() == day
        )
        if not times:
            return None
        return Conflict(times=times)


__all__ = ["Conflict", "ConflictChecker"]
