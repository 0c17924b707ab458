"""Shared fixtures: a throwaway SQLite store and bearer-token principals."""

import pytest
from fastapi import Security
from fastapi.security import HTTPAuthorizationCredentials
from fastapi.testclient import TestClient

from app.core.access import AccessControlledStore
from app.core.dependencies import get_current_principal, security
from app.database.sqlite_store import SQLiteTripStore
from app.database.store import get_trip_store
from app.main import app

PRINCIPALS = ("alice", "bob", "carol", "dave")


@pytest.fixture
def store(tmp_path):
    return SQLiteTripStore(tmp_path / "trip_store.sqlite3")


@pytest.fixture
def access(store):
    return AccessControlledStore(store)


@pytest.fixture
def profiles(store):
    """alice, bob, carol and dave, each with <name>@example.com"""
    return {
        name: store.insert_profile({
            "id": name,
            "email": f"{name}@example.com",
            "display_name": name.capitalize(),
        })
        for name in PRINCIPALS
    }


def _principal_from_bearer(credentials: HTTPAuthorizationCredentials = Security(security)) -> dict:
    # Tests authenticate with the principal id as the bearer token
    principal_id = credentials.credentials
    return {"id": principal_id, "email": f"{principal_id}@example.com"}


@pytest.fixture
def client(store, profiles):
    app.dependency_overrides[get_trip_store] = lambda: store
    app.dependency_overrides[get_current_principal] = _principal_from_bearer
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def as_user():
    def headers(principal_id: str) -> dict:
        return {"Authorization": f"Bearer {principal_id}"}

    return headers
