import logging
from contextlib import contextmanager
from typing import Optional

from pymongo import ASCENDING, MongoClient
from pymongo.errors import DuplicateKeyError, PyMongoError

from evoting import config
from evoting.errors import StorageUnavailable

logger = logging.getLogger(__name__)

VOTER_POSITION_INDEX = "voterID_position_unique"


@contextmanager
def storage_errors(operation: str):
    """
    Translate driver failures into StorageUnavailable.

    DuplicateKeyError passes through untouched so callers can map the
    constraint violation to their own business error.
    """
    try:
        yield
    except DuplicateKeyError:
        raise
    except PyMongoError as e:
        logger.error(f"Storage failure during {operation}: {e}")
        raise StorageUnavailable() from e


class MongoStore:
    """Owns the MongoDB client and the users/votes collections."""

    def __init__(
        self,
        uri: str = None,
        db_name: str = None,
        client: Optional[MongoClient] = None,
    ):
        self.uri = uri or config.MONGO_URI
        self.db_name = db_name or config.MONGO_DB
        self.client = client
        self.db = None
        self.users = None
        self.votes = None

    def connect(self) -> "MongoStore":
        """Open the connection and declare the unique indexes"""
        try:
            if self.client is None:
                self.client = MongoClient(
                    self.uri, serverSelectionTimeoutMS=config.MONGO_TIMEOUT_MS
                )
            self.db = self.client[self.db_name]
            self.users = self.db[config.USERS_COLLECTION_NAME]
            self.votes = self.db[config.VOTES_COLLECTION_NAME]
            self.ensure_indexes()

            # Test connection
            self.client.server_info()
            logger.info(f"Connected to MongoDB, database: {self.db_name}")
        except PyMongoError as e:
            logger.error(f"Failed to connect to MongoDB: {e}")
            raise StorageUnavailable() from e
        return self

    def ensure_indexes(self):
        self.users.create_index("voterID", unique=True)
        self.users.create_index("username", unique=True)
        # One ballot per voter per position
        self.votes.create_index(
            [("voterID", ASCENDING), ("position", ASCENDING)],
            unique=True,
            name=VOTER_POSITION_INDEX,
        )

    @property
    def is_connected(self) -> bool:
        return self.db is not None

    def ping(self) -> bool:
        if not self.is_connected:
            return False
        try:
            self.client.server_info()
            return True
        except PyMongoError as e:
            logger.error(f"MongoDB health check failed: {e}")
            return False

    def close(self):
        """Close MongoDB connection"""
        if self.client is not None:
            self.client.close()
            logger.info("MongoDB connection closed")
        self.client = None
        self.db = None
        self.users = None
        self.votes = None
