"""Vote admission: one ballot per voter per position."""
import logging
from datetime import datetime, timezone
from typing import List

from pymongo import ASCENDING
from pymongo.errors import DuplicateKeyError

from evoting.database.connection import MongoStore, storage_errors
from evoting.errors import DuplicateVote, InvalidInput
from evoting.models.vote_model import Ballot, Position
from evoting.security import clean_field

logger = logging.getLogger(__name__)


def _parse_position(value) -> Position:
    try:
        return Position(value)
    except ValueError:
        allowed = ", ".join(p.value for p in Position)
        raise InvalidInput(f"Position must be one of: {allowed}")


class VoteAdmissionService:
    def __init__(self, store: MongoStore):
        self.store = store

    def cast_vote(self, voter_id: str, candidate: str, position: str) -> None:
        """
        Record a ballot for ``(voter_id, position)``.

        The lookup before the insert only rejects the common case early. The
        unique index on (voterID, position) decides concurrent submissions:
        whichever insert loses gets DuplicateVote.
        """
        voter_id = clean_field(voter_id)
        candidate = clean_field(candidate)
        position = _parse_position(clean_field(position))

        with storage_errors("cast_vote"):
            existing = self.store.votes.find_one(
                {"voterID": voter_id, "position": position.value}
            )
            if existing is not None:
                logger.warning(f"Voter {voter_id} already voted for {position.value}")
                raise DuplicateVote()

            ballot = Ballot(
                voterID=voter_id,
                candidate=candidate,
                position=position,
                timestamp=datetime.now(timezone.utc),
            )
            try:
                self.store.votes.insert_one(ballot.to_document())
            except DuplicateKeyError:
                logger.warning(
                    f"Concurrent vote for voter {voter_id} on {position.value} rejected"
                )
                raise DuplicateVote()

        logger.info(f"Vote recorded for voter {voter_id} on {position.value}")

    def find_ballots_for(self, voter_id: str) -> List[Ballot]:
        voter_id = clean_field(voter_id)
        with storage_errors("find_ballots_for"):
            cursor = self.store.votes.find({"voterID": voter_id}).sort(
                "position", ASCENDING
            )
            return [Ballot.from_document(doc) for doc in cursor]

    def clear_all_ballots(self) -> int:
        with storage_errors("clear_all_ballots"):
            result = self.store.votes.delete_many({})
        logger.warning(f"All ballots cleared ({result.deleted_count} deleted)")
        return result.deleted_count
