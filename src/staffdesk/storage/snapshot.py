"""Read-only snapshot of the business data for the Q&A fallback."""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any

from pymongo.database import Database
from pymongo.errors import PyMongoError

logger = logging.getLogger(__name__)

# Collection name -> key in the snapshot handed to the assistant
SNAPSHOT_COLLECTIONS = {
    "candidates": "candidates",
    "clients": "clients",
    "interviews": "interviews",
    "updates": "updates",
    "assessments": "assessments",
    "responses": "responses",
    "candidate_notes": "candidateNotes",
    "client_notes": "clientNotes",
    "meeting_notes": "meetingNotes",
    "converted_clients": "convertedClients",
    "pillars": "pillars",
    "criteria": "criteria",
}

# Totals reported in the snapshot summary
SUMMARY_KEYS = {
    "totalCandidates": "candidates",
    "totalClients": "clients",
    "totalInterviews": "interviews",
    "totalAssessments": "assessments",
    "totalMeetingNotes": "meetingNotes",
    "totalConvertedClients": "convertedClients",
}


class SnapshotReader:
    """Fetches every collection the assistant may see, concurrently."""

    def __init__(self, database: Database[dict[str, Any]], max_workers: int = 6) -> None:
        """Initialize reader.

        Args:
            database: MongoDB database to read from.
            max_workers: Number of collections read in parallel.
        """
        self._db = database
        self._max_workers = max_workers

    def _read(self, collection: str) -> list[dict[str, Any]]:
        return list(self._db[collection].find())

    def fetch(self) -> dict[str, Any]:
        """Read all snapshot collections.

        A failed read yields an empty snapshot rather than an error so the
        assistant can still answer general questions.

        Returns:
            Mapping of snapshot keys to documents, plus a ``summary`` of counts.
        """
        try:
            with ThreadPoolExecutor(max_workers=self._max_workers) as pool:
                results = dict(
                    zip(
                        SNAPSHOT_COLLECTIONS.values(),
                        pool.map(self._read, SNAPSHOT_COLLECTIONS.keys()),
                        strict=True,
                    )
                )
        except PyMongoError as e:
            logger.error("Error fetching system data: %s", e)
            results = {key: [] for key in SNAPSHOT_COLLECTIONS.values()}

        results["summary"] = {
            total: len(results[key]) for total, key in SUMMARY_KEYS.items()
        }
        return results


__all__ = ["SNAPSHOT_COLLECTIONS", "SnapshotReader"]
