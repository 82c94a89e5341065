import logging
from datetime import datetime, timezone

from pymongo.errors import DuplicateKeyError

from evoting.database.connection import MongoStore, storage_errors
from evoting.errors import (
    AlreadyRegistered,
    InvalidCredential,
    NotFound,
    UsernameTaken,
)
from evoting.models.voter_model import VoterAccount
from evoting.security import (
    canonical_username,
    clean_field,
    hash_password,
    verify_password,
)

logger = logging.getLogger(__name__)


class VoterRegistry:
    """Voter accounts: registration and password login."""

    def __init__(self, store: MongoStore):
        self.store = store

    # Create a new voter with hashed password
    def register(self, voter_id: str, username: str, secret: str) -> VoterAccount:
        voter_id = clean_field(voter_id)
        username = canonical_username(clean_field(username))
        clean_field(secret)

        with storage_errors("register"):
            if self.store.users.find_one({"voterID": voter_id}) is not None:
                logger.warning(f"Voter {voter_id} already registered")
                raise AlreadyRegistered()

            account = VoterAccount(
                voterID=voter_id,
                username=username,
                password=hash_password(secret),
                createdAt=datetime.now(timezone.utc),
            )
            try:
                self.store.users.insert_one(account.to_document())
            except DuplicateKeyError:
                # Either a concurrent registration won, or the username is in use
                if self.store.users.count_documents({"voterID": voter_id}) > 0:
                    raise AlreadyRegistered()
                logger.warning(f"Username for voter {voter_id} already taken")
                raise UsernameTaken()

        logger.info(f"Voter {voter_id} registered")
        return account

    # Login voter, returns the voterID
    def authenticate(self, username: str, secret: str) -> str:
        username = canonical_username(clean_field(username))
        clean_field(secret)
        with storage_errors("authenticate"):
            doc = self.store.users.find_one({"username": username})
        if doc is None:
            raise NotFound()
        if not verify_password(secret, doc["password"]):
            logger.warning(f"Failed login for voter {doc['voterID']}")
            raise InvalidCredential("Invalid password")
        return doc["voterID"]
