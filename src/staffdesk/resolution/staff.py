"""Loose matching of a spoken name to a staff member."""

from ..storage.models import StaffDTO


def match_staff(query: str, staff: list[StaffDTO]) -> StaffDTO | None:
    """Find the staff member a name refers to.

    Exact case-insensitive equality on name or username is tried first.
    Failing that, a member matches when their first name appears in the
    query, or the query appears in their name or username.

    Args:
        query: Name as written in the message.
        staff: Everyone who can be matched.

    Returns:
        The first matching staff member, or None.
    """
    needle = query.strip().lower()
    if not needle:
        return None

    for member in staff:
        if needle in (member.name.lower(), member.username.lower()):
            return member

    for member in staff:
        first_name = member.first_name.lower()
        if first_name and first_name in needle:
            return member
        if needle in member.name.lower() or (
            member.username and needle in member.username.lower()
        ):
            return member

    return None


__all__ = ["match_staff"]
