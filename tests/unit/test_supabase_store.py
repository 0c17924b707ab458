from datetime import datetime, timezone
from types import SimpleNamespace

import httpx
import pytest
from postgrest.exceptions import APIError

from app.core.exceptions import IntegrityViolation, StoreUnavailable, TripStoreError
from app.database.hooks import format_timestamp
from app.database.supabase_store import SupabaseTripStore

NOW = datetime(2026, 6, 1, 8, 30, tzinfo=timezone.utc)


class FakeQuery:
    """Chainable stand-in for a PostgREST request builder."""

    def __init__(self, data=None, error=None):
        self.data = data if data is not None else []
        self.error = error
        self.calls = []

    def __getattr__(self, name):
        def record(*args, **kwargs):
            self.calls.append((name, args, kwargs))
            return self
        return record

    def execute(self):
        if self.error is not None:
            raise self.error
        return SimpleNamespace(data=self.data)


class FakeSupabase:
    def __init__(self, query):
        self.query = query
        self.tables = []

    def table(self, name):
        self.tables.append(name)
        return self.query


def _store(query):
    return SupabaseTripStore(FakeSupabase(query), clock=lambda: NOW)


def test_unique_violation_keeps_sqlstate():
    error = APIError({"message": "duplicate key value", "code": "23505", "hint": None, "details": None})
    store = _store(FakeQuery(error=error))
    with pytest.raises(IntegrityViolation) as excinfo:
        store.insert_collaborator({"itinerary_id": "t1", "user_id": "bob"})
    assert excinfo.value.is_unique_violation


def test_other_api_errors_are_store_errors():
    error = APIError({"message": "permission denied", "code": "42501", "hint": None, "details": None})
    store = _store(FakeQuery(error=error))
    with pytest.raises(TripStoreError) as excinfo:
        store.get_itinerary("t1")
    assert not isinstance(excinfo.value, IntegrityViolation)


def test_transport_errors_are_unavailable():
    store = _store(FakeQuery(error=httpx.ConnectError("connection refused")))
    with pytest.raises(StoreUnavailable):
        store.ping()


def test_update_itinerary_sends_store_timestamp():
    query = FakeQuery(data=[{"id": "t1", "name": "Oslo"}])
    store = _store(query)
    store.update_itinerary("t1", {"name": "Oslo", "updated_at": "2001-01-01T00:00:00Z"})
    update_call = next(call for call in query.calls if call[0] == "update")
    assert update_call[1][0] == {"name": "Oslo", "updated_at": format_timestamp(NOW)}


def test_email_lookup_is_exact_match():
    for email, expected in (
        ("  Sam@Example.com ", "sam@example.com"),
        ("*", "*"),
        ("*@example.com", "*@example.com"),
        ("a_b%@example.com", "a_b%@example.com"),
    ):
        query = FakeQuery(data=[])
        assert _store(query).find_profiles_by_email(email) == []
        names = [call[0] for call in query.calls]
        assert "ilike" not in names and "like" not in names
        eq_call = next(call for call in query.calls if call[0] == "eq")
        assert eq_call[1] == ("email", expected)


def test_profile_email_stored_lower_case():
    query = FakeQuery(data=[{"id": "sam", "email": "sam@example.com"}])
    _store(query).insert_profile({"id": "sam", "email": " Sam@Example.COM"})
    insert_call = next(call for call in query.calls if call[0] == "insert")
    assert insert_call[1][0]["email"] == "sam@example.com"


def test_activities_order_matches_sqlite_backend():
    query = FakeQuery(data=[])
    _store(query).list_activities("t1")
    orders = [call[1][0] for call in query.calls if call[0] == "order"]
    assert orders == ["date", "start_time", "order_index", "created_at"]


def test_get_missing_row_returns_none():
    assert _store(FakeQuery(data=[])).get_activity("missing") is None

