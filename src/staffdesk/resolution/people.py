"""Name resolution against candidates and clients.

A display name can match nothing, one row, several rows of one kind, or rows
of both kinds. The resolver classifies the outcome and leaves it to the
caller to phrase the reply.
"""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field

from ..storage.models import PersonDTO, PersonKind
from ..storage.store import RecordStore

ALL_KINDS: tuple[PersonKind, ...] = (PersonKind.CANDIDATE, PersonKind.CLIENT)


@dataclass(frozen=True)
class NotFound:
    """No row of any requested kind matched."""

    fragment: str
    kinds: tuple[PersonKind, ...]


@dataclass(frozen=True)
class Single:
    """Exactly one row matched."""

    kind: PersonKind
    person: PersonDTO


@dataclass(frozen=True)
class AmbiguousWithinKind:
    """Several rows of one kind matched."""

    kind: PersonKind
    people: list[PersonDTO] = field(default_factory=list)


@dataclass(frozen=True)
class AmbiguousAcrossKinds:
    """Rows of more than one kind matched."""

    kinds: tuple[PersonKind, ...]
    matches: dict[PersonKind, list[PersonDTO]] = field(default_factory=dict)


Resolution = NotFound | Single | AmbiguousWithinKind | AmbiguousAcrossKinds


def classify(
    fragment: str,
    kinds: tuple[PersonKind, ...],
    matches: dict[PersonKind, list[PersonDTO]],
) -> Resolution:
    """Classify per-kind lookup results.

    Args:
        fragment: The name fragment that was searched.
        kinds: Kinds that were searched, in preference order.
        matches: Rows found for each kind.

    Returns:
        The resolution outcome.
    """
    found = [kind for kind in kinds if matches.get(kind)]
    if not found:
        return NotFound(fragment=fragment, kinds=kinds)
    if len(found) > 1:
        return AmbiguousAcrossKinds(
            kinds=tuple(found), matches={kind: matches[kind] for kind in found}
        )

    kind = found[0]
    rows = matches[kind]
    if len(rows) == 1:
        return Single(kind=kind, person=rows[0])
    return AmbiguousWithinKind(kind=kind, people=list(rows))


class EntityResolver:
    """Resolves name fragments to candidate and client rows.

    Each kind is searched with a case-insensitive substring match on name;
    when several kinds are requested the lookups run concurrently.
    """

    def __init__(self, store: RecordStore) -> None:
        """Initialize resolver.

        Args:
            store: Record store to search.
        """
        self._store = store

    def resolve(
        self, fragment: str, kinds: tuple[PersonKind, ...] | None = None
    ) -> Resolution:
        """Resolve a name fragment.

        Args:
            fragment: Part of a display name.
            kinds: Kinds to search; both when None.

        Returns:
            The resolution outcome.

        Raises:
            StoreError: If a lookup fails.
        """
        kinds = kinds or ALL_KINDS
        if len(kinds) == 1:
            kind = kinds[0]
            matches = {kind: self._store.people(kind).find_by_name(fragment)}
            return classify(fragment, kinds, matches)

        with ThreadPoolExecutor(max_workers=len(kinds)) as pool:
            futures = {
                kind: pool.submit(self._store.people(kind).find_by_name, fragment)
                for kind in kinds
            }
            matches = {kind: future.result() for kind, future in futures.items()}
        return classify(fragment, kinds, matches)


__all__ = [
    "ALL_KINDS",
    "AmbiguousAcrossKinds",
    "AmbiguousWithinKind",
    "EntityResolver",
    "NotFound",
    "Resolution",
    "Single",
    "classify",
]
