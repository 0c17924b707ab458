import re
from pathlib import Path

import pytest

from app.config import settings
from app.core.exceptions import StoreUnavailable
from app.database.sqlite_store import SQLiteTripStore
from app.database.store import TripStoreProvider
from app.database.supabase_client import SupabaseClient

MIGRATIONS = Path(__file__).resolve().parents[2] / "supabase" / "migrations"
TABLES = ("profiles", "itineraries", "collaborators", "activities")


@pytest.fixture(autouse=True)
def fresh_provider():
    TripStoreProvider.reset_store()
    SupabaseClient.reset_client()
    yield
    TripStoreProvider.reset_store()
    SupabaseClient.reset_client()


def test_supabase_backend_requires_service_role_key(monkeypatch):
    monkeypatch.setattr(settings, "store_backend", "supabase")
    monkeypatch.setattr(settings, "supabase_url", "https://project.supabase.co")
    monkeypatch.setattr(settings, "supabase_key", "anon-key")
    monkeypatch.setattr(settings, "supabase_service_role_key", None)
    with pytest.raises(StoreUnavailable):
        TripStoreProvider.get_store()
    assert SupabaseClient._auth_client is None


def test_sqlite_backend(monkeypatch, tmp_path):
    monkeypatch.setattr(settings, "store_backend", " SQLite ")
    monkeypatch.setattr(settings, "sqlite_path", str(tmp_path / "store.sqlite3"))
    store = TripStoreProvider.get_store()
    assert isinstance(store, SQLiteTripStore)
    assert TripStoreProvider.get_store() is store


def test_unknown_backend(monkeypatch):
    monkeypatch.setattr(settings, "store_backend", "mongo")
    with pytest.raises(ValueError):
        TripStoreProvider.get_store()


def test_migration_locks_tables_to_service_role():
    sql = "\n".join(path.read_text() for path in sorted(MIGRATIONS.glob("*.sql")))
    for table in TABLES:
        assert re.search(rf"ALTER TABLE {table} ENABLE ROW LEVEL SECURITY;", sql)
    revoke = re.search(r"REVOKE ALL ON TABLE ([\w, ]+) FROM anon, authenticated;", sql)
    assert revoke is not None
    assert {name.strip() for name in revoke.group(1).split(",")} == set(TABLES)
    assert "CREATE POLICY" not in sql
