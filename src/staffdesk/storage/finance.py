"""Placement (converted client) repository."""

from typing import Any

from pymongo.collection import Collection

from .client import store_operation
from .models import PlacementDTO


class PlacementRepository:
    """Repository for converted clients and their placement fees."""

    def __init__(self, collection: Collection[dict[str, Any]]) -> None:
        """Initialize repository with MongoDB collection.

        Args:
            collection: MongoDB collection for converted clients.
        """
        self._collection = collection

    @store_operation
    def find_all(self) -> list[PlacementDTO]:
        """Get every placement."""
        return [PlacementDTO.from_dict(doc) for doc in self._collection.find()]


__all__ = ["PlacementRepository"]
