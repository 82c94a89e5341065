"""Pytest fixtures for the e-voting backend.

The store runs over a mongomock client, which honours unique indexes and the
aggregation stages used by the tally, so no MongoDB server is required.
"""

import os
import uuid

# Cheap hashes for tests; must be set before evoting.security is imported
os.environ.setdefault("BCRYPT_ROUNDS", "4")

from typing import Generator

import mongomock
import pytest
from fastapi.testclient import TestClient

from evoting import config
from evoting.crud import VoterRegistry
from evoting.database.connection import MongoStore
from evoting.main import create_app
from evoting.security import hash_password
from evoting.tally import TallyService
from evoting.voting import VoteAdmissionService

ADMIN_PASSWORD = "adminpass123"


@pytest.fixture
def store() -> Generator[MongoStore, None, None]:
    """A connected store with fresh, empty collections."""
    db_name = f"evoting_test_{uuid.uuid4().hex}"
    store = MongoStore(db_name=db_name, client=mongomock.MongoClient())
    store.connect()
    yield store
    store.close()


@pytest.fixture
def registry(store: MongoStore) -> VoterRegistry:
    return VoterRegistry(store)


@pytest.fixture
def vote_service(store: MongoStore) -> VoteAdmissionService:
    return VoteAdmissionService(store)


@pytest.fixture
def tally_service(store: MongoStore) -> TallyService:
    return TallyService(store)


@pytest.fixture
def admin_credentials(monkeypatch):
    """Configure an admin account and return its (username, password)."""
    monkeypatch.setattr(config, "ADMIN_USERNAME", "admin")
    monkeypatch.setattr(config, "ADMIN_PASSWORD_HASH", hash_password(ADMIN_PASSWORD))
    return "admin", ADMIN_PASSWORD


@pytest.fixture
def client(store: MongoStore) -> Generator[TestClient, None, None]:
    """HTTP client over an app bound to the test store."""
    app = create_app(store=store)
    with TestClient(app) as client:
        yield client


@pytest.fixture
def admin_headers(client: TestClient, admin_credentials) -> dict:
    username, password = admin_credentials
    response = client.post("/admin/login", json={"username": username, "password": password})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


class UnavailableCollection:
    """Collection stand-in whose every operation fails like a lost server."""

    def __getattr__(self, name):
        from pymongo.errors import ServerSelectionTimeoutError

        def fail(*args, **kwargs):
            raise ServerSelectionTimeoutError("No servers available")

        return fail


class NoFastPathCollection:
    """Wraps a collection so the pre-insert lookup never sees a prior ballot.

    This reproduces two concurrent requests that both pass the check before
    either insert lands.
    """

    def __init__(self, collection):
        self._collection = collection

    def find_one(self, *args, **kwargs):
        return None

    def __getattr__(self, name):
        return getattr(self._collection, name)


@pytest.fixture
def unavailable_collection() -> UnavailableCollection:
    return UnavailableCollection()


@pytest.fixture
def race_votes(store: MongoStore, monkeypatch) -> None:
    """Hide existing ballots from the duplicate check, leaving only the index."""
    monkeypatch.setattr(store, "votes", NoFastPathCollection(store.votes))


@pytest.fixture
def race_users(store: MongoStore, monkeypatch) -> None:
    """Hide existing accounts from the registration lookup, leaving only the indexes."""
    monkeypatch.setattr(store, "users", NoFastPathCollection(store.users))


@pytest.fixture
def lenient_client(store: MongoStore) -> Generator[TestClient, None, None]:
    """HTTP client that returns 500 responses instead of re-raising server errors."""
    app = create_app(store=store)
    with TestClient(app, raise_server_exceptions=False) as client:
        yield client


@pytest.fixture
def live_store() -> Generator[MongoStore, None, None]:
    """A store on a real MongoDB server (MONGO_URI), skipped when none is reachable."""
    from pymongo import MongoClient

    from evoting.errors import StorageUnavailable

    db_name = f"evoting_it_{uuid.uuid4().hex}"
    client = MongoClient(config.MONGO_URI, serverSelectionTimeoutMS=500)
    store = MongoStore(db_name=db_name, client=client)
    try:
        store.connect()
    except StorageUnavailable:
        client.close()
        pytest.skip("MongoDB not available")

    yield store

    client.drop_database(db_name)
    store.close()
