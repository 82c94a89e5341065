import logging
from typing import List

from evoting.database.connection import MongoStore, storage_errors
from evoting.models.vote_model import TallyEntry

logger = logging.getLogger(__name__)

# Ties on totalVotes are ordered by position, then candidate
RESULTS_PIPELINE = [
    {
        "$group": {
            "_id": {"candidate": "$candidate", "position": "$position"},
            "totalVotes": {"$sum": 1},
        }
    },
    {"$sort": {"totalVotes": -1, "_id.position": 1, "_id.candidate": 1}},
]


class TallyService:
    def __init__(self, store: MongoStore):
        self.store = store

    def compute_results(self) -> List[TallyEntry]:
        """Vote counts per (candidate, position), highest first."""
        with storage_errors("compute_results"):
            rows = list(self.store.votes.aggregate(RESULTS_PIPELINE))
        logger.debug(f"Tallied {len(rows)} candidate/position pairs")
        return [
            TallyEntry(
                candidate=row["_id"]["candidate"],
                position=row["_id"]["position"],
                totalVotes=row["totalVotes"],
            )
            for row in rows
        ]
