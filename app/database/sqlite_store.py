"""SQLite implementation of the trip store."""

from __future__ import annotations

import logging
import sqlite3
import threading
import uuid
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, List, Optional

from app.core.exceptions import (
    CHECK_VIOLATION,
    FOREIGN_KEY_VIOLATION,
    NOT_NULL_VIOLATION,
    UNIQUE_VIOLATION,
    IntegrityViolation,
    StoreUnavailable,
    TripStoreError,
)
from app.database.hooks import format_timestamp, stamp_itinerary_update, utcnow

logger = logging.getLogger(__name__)

Row = Dict[str, Any]

_SCHEMA = """
CREATE TABLE IF NOT EXISTS profiles (
    id TEXT PRIMARY KEY,
    email TEXT NOT NULL,
    display_name TEXT NOT NULL DEFAULT '',
    created_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS itineraries (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    description TEXT NOT NULL DEFAULT '',
    destination TEXT NOT NULL DEFAULT '',
    start_date TEXT,
    end_date TEXT,
    created_by TEXT NOT NULL REFERENCES profiles(id) ON DELETE CASCADE,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS collaborators (
    id TEXT PRIMARY KEY,
    itinerary_id TEXT NOT NULL REFERENCES itineraries(id) ON DELETE CASCADE,
    user_id TEXT NOT NULL REFERENCES profiles(id) ON DELETE CASCADE,
    role TEXT NOT NULL DEFAULT 'viewer' CHECK (role IN ('owner', 'editor', 'viewer')),
    added_at TEXT NOT NULL,
    UNIQUE (itinerary_id, user_id)
);

CREATE TABLE IF NOT EXISTS activities (
    id TEXT PRIMARY KEY,
    itinerary_id TEXT NOT NULL REFERENCES itineraries(id) ON DELETE CASCADE,
    title TEXT NOT NULL,
    description TEXT NOT NULL DEFAULT '',
    date TEXT,
    start_time TEXT,
    end_time TEXT,
    location TEXT NOT NULL DEFAULT '',
    category TEXT NOT NULL DEFAULT 'other',
    created_by TEXT NOT NULL REFERENCES profiles(id) ON DELETE CASCADE,
    created_at TEXT NOT NULL,
    order_index INTEGER NOT NULL DEFAULT 0
);

CREATE INDEX IF NOT EXISTS idx_profiles_email ON profiles(lower(email));
CREATE INDEX IF NOT EXISTS idx_itineraries_created_by ON itineraries(created_by);
CREATE INDEX IF NOT EXISTS idx_collaborators_user_id ON collaborators(user_id);
CREATE INDEX IF NOT EXISTS idx_activities_itinerary_id ON activities(itinerary_id);
CREATE INDEX IF NOT EXISTS idx_activities_created_by ON activities(created_by);
"""

_COLUMNS = {
    "profiles": ("id", "email", "display_name", "created_at"),
    "itineraries": (
        "id", "name", "description", "destination", "start_date", "end_date",
        "created_by", "created_at", "updated_at",
    ),
    "collaborators": ("id", "itinerary_id", "user_id", "role", "added_at"),
    "activities": (
        "id", "itinerary_id", "title", "description", "date", "start_time", "end_time",
        "location", "category", "created_by", "created_at", "order_index",
    ),
}

_DEFAULTS = {
    "profiles": {"display_name": ""},
    "itineraries": {"description": "", "destination": ""},
    "collaborators": {"role": "viewer"},
    "activities": {"description": "", "location": "", "category": "other", "order_index": 0},
}

# Fill-in for rows created without an explicit timestamp
_CREATED_COLUMNS = {
    "profiles": ("created_at",),
    "itineraries": ("created_at", "updated_at"),
    "collaborators": ("added_at",),
    "activities": ("created_at",),
}


def _integrity_code(message: str) -> str:
    if message.startswith("UNIQUE"):
        return UNIQUE_VIOLATION
    if message.startswith("FOREIGN KEY"):
        return FOREIGN_KEY_VIOLATION
    if message.startswith("NOT NULL"):
        return NOT_NULL_VIOLATION
    return CHECK_VIOLATION


class SQLiteTripStore:
    backend = "sqlite"

    def __init__(self, db_path: str | Path, clock: Callable = utcnow) -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._clock = clock
        self._lock = threading.Lock()
        self._init_schema()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path, timeout=5.0, isolation_level=None)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys=ON;")
        return conn

    @contextmanager
    def _transaction(self) -> Iterator[sqlite3.Connection]:
        """One atomic write. Integrity errors keep their SQLSTATE-like code."""
        with self._lock:
            try:
                conn = self._connect()
            except sqlite3.Error as e:
                raise StoreUnavailable(f"SQLite store unavailable: {e}") from e
            try:
                conn.execute("BEGIN IMMEDIATE")
                yield conn
                conn.execute("COMMIT")
            except sqlite3.IntegrityError as e:
                if conn.in_transaction:
                    conn.execute("ROLLBACK")
                message = str(e)
                logger.warning(f"Integrity violation: {message}")
                raise IntegrityViolation(_integrity_code(message), message) from e
            except sqlite3.OperationalError as e:
                if conn.in_transaction:
                    conn.execute("ROLLBACK")
                raise StoreUnavailable(f"SQLite store unavailable: {e}") from e
            except BaseException:
                if conn.in_transaction:
                    conn.execute("ROLLBACK")
                raise
            finally:
                conn.close()

    def _init_schema(self) -> None:
        with self._lock:
            conn = self._connect()
            try:
                conn.executescript(_SCHEMA)
            finally:
                conn.close()

    def _now(self) -> str:
        return format_timestamp(self._clock())

    @staticmethod
    def _check_columns(table: str, values: Row) -> None:
        unknown = set(values) - set(_COLUMNS[table])
        if unknown:
            raise TripStoreError(f"Unknown column(s) for {table}: {', '.join(sorted(unknown))}")

    def _fetch_one(self, conn: sqlite3.Connection, table: str, row_id: str) -> Optional[Row]:
        row = conn.execute(f"SELECT * FROM {table} WHERE id = ?", (row_id,)).fetchone()
        return dict(row) if row else None

    def _select(self, sql: str, params: tuple = ()) -> List[Row]:
        with self._transaction() as conn:
            return [dict(row) for row in conn.execute(sql, params).fetchall()]

    def _get(self, table: str, row_id: str) -> Optional[Row]:
        with self._transaction() as conn:
            return self._fetch_one(conn, table, row_id)

    def _insert(self, table: str, values: Row) -> Row:
        self._check_columns(table, values)
        record = {**_DEFAULTS[table], **{k: v for k, v in values.items() if v is not None or k not in _DEFAULTS[table]}}
        record.setdefault("id", str(uuid.uuid4()))
        now = self._now()
        for column in _CREATED_COLUMNS[table]:
            record.setdefault(column, now)
        columns = ", ".join(record)
        placeholders = ", ".join("?" for _ in record)
        with self._transaction() as conn:
            conn.execute(f"INSERT INTO {table} ({columns}) VALUES ({placeholders})", tuple(record.values()))
            return self._fetch_one(conn, table, record["id"])

    def _update_in(self, conn: sqlite3.Connection, table: str, row_id: str, changes: Row) -> Optional[Row]:
        self._check_columns(table, changes)
        if changes:
            assignments = ", ".join(f"{column} = ?" for column in changes)
            conn.execute(
                f"UPDATE {table} SET {assignments} WHERE id = ?",
                (*changes.values(), row_id),
            )
        return self._fetch_one(conn, table, row_id)

    def _update(self, table: str, row_id: str, changes: Row) -> Optional[Row]:
        with self._transaction() as conn:
            return self._update_in(conn, table, row_id, changes)

    def _delete(self, table: str, row_id: str) -> bool:
        with self._transaction() as conn:
            cursor = conn.execute(f"DELETE FROM {table} WHERE id = ?", (row_id,))
            return cursor.rowcount > 0

    # Profiles

    def get_profile(self, profile_id: str) -> Optional[Row]:
        return self._get("profiles", profile_id)

    def find_profiles_by_email(self, email: str) -> List[Row]:
        return self._select(
            "SELECT * FROM profiles WHERE lower(email) = lower(?) ORDER BY created_at",
            (email,),
        )

    def insert_profile(self, values: Row) -> Row:
        return self._insert("profiles", values)

    def update_profile(self, profile_id: str, changes: Row) -> Optional[Row]:
        return self._update("profiles", profile_id, changes)

    def delete_principal(self, principal_id: str) -> bool:
        """Removes the profile; owned itineraries, memberships and authored activities cascade."""
        return self._delete("profiles", principal_id)

    # Itineraries

    def get_itinerary(self, itinerary_id: str) -> Optional[Row]:
        return self._get("itineraries", itinerary_id)

    def list_itinerary_candidates(self, principal_id: str) -> List[Row]:
        return self._select(
            """
            SELECT * FROM itineraries
            WHERE created_by = ?
               OR id IN (SELECT itinerary_id FROM collaborators WHERE user_id = ?)
            ORDER BY created_at DESC
            """,
            (principal_id, principal_id),
        )

    def insert_itinerary(self, values: Row) -> Row:
        values = {k: v for k, v in values.items() if k != "updated_at"}
        return self._insert("itineraries", values)

    def update_itinerary(self, itinerary_id: str, changes: Row) -> Optional[Row]:
        with self._transaction() as conn:
            current = self._fetch_one(conn, "itineraries", itinerary_id)
            if current is None:
                return None
            stamped = stamp_itinerary_update(changes, current["updated_at"], self._clock())
            return self._update_in(conn, "itineraries", itinerary_id, stamped)

    def delete_itinerary(self, itinerary_id: str) -> bool:
        return self._delete("itineraries", itinerary_id)

    # Collaborators

    def get_collaborator(self, collaborator_id: str) -> Optional[Row]:
        return self._get("collaborators", collaborator_id)

    def get_collaborator_role(self, itinerary_id: str, user_id: str) -> Optional[str]:
        rows = self._select(
            "SELECT role FROM collaborators WHERE itinerary_id = ? AND user_id = ?",
            (itinerary_id, user_id),
        )
        return rows[0]["role"] if rows else None

    def list_collaborators(self, itinerary_id: str) -> List[Row]:
        return self._select(
            "SELECT * FROM collaborators WHERE itinerary_id = ? ORDER BY added_at",
            (itinerary_id,),
        )

    def insert_collaborator(self, values: Row) -> Row:
        return self._insert("collaborators", values)

    def update_collaborator(self, collaborator_id: str, changes: Row) -> Optional[Row]:
        return self._update("collaborators", collaborator_id, changes)

    def delete_collaborator(self, collaborator_id: str) -> bool:
        return self._delete("collaborators", collaborator_id)

    # Activities

    def get_activity(self, activity_id: str) -> Optional[Row]:
        return self._get("activities", activity_id)

    def list_activities(self, itinerary_id: str) -> List[Row]:
        return self._select(
            """
            SELECT * FROM activities
            WHERE itinerary_id = ?
            ORDER BY date IS NULL, date, start_time IS NULL, start_time, order_index, created_at
            """,
            (itinerary_id,),
        )

    def insert_activity(self, values: Row) -> Row:
        return self._insert("activities", values)

    def update_activity(self, activity_id: str, changes: Row) -> Optional[Row]:
        return self._update("activities", activity_id, changes)

    def delete_activity(self, activity_id: str) -> bool:
        return self._delete("activities", activity_id)

    def ping(self) -> bool:
        self._select("SELECT 1")
        return True
