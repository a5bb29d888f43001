"""Resolution of names, staff and scheduling conflicts."""

from .conflicts import Conflict, ConflictChecker
from .people import (
    ALL_KINDS,
    AmbiguousAcrossKinds,
    AmbiguousWithinKind,
    EntityResolver,
    NotFound,
    Resolution,
    Single,
)
from .staff import match_staff

__all__ = [
    "ALL_KINDS",
    "AmbiguousAcrossKinds",
    "AmbiguousWithinKind",
    "Conflict",
    "ConflictChecker",
    "EntityResolver",
    "NotFound",
    "Resolution",
    "Single",
    "match_staff",
]
