"""Relational store interface and factory."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Protocol

from app.config import settings
from app.database.sqlite_store import SQLiteTripStore

logger = logging.getLogger(__name__)

Row = Dict[str, Any]


class TripStore(Protocol):
    """
    Plain CRUD over profiles, itineraries, collaborators and activities.
    No authorization happens here; see app.core.access.
    Rows are dicts keyed by column name with ISO-8601 strings for dates and times.
    """

    backend: str

    def get_profile(self, profile_id: str) -> Optional[Row]: ...

    def find_profiles_by_email(self, email: str) -> List[Row]: ...

    def insert_profile(self, values: Row) -> Row: ...

    def update_profile(self, profile_id: str, changes: Row) -> Optional[Row]: ...

    def delete_principal(self, principal_id: str) -> bool: ...

    def get_itinerary(self, itinerary_id: str) -> Optional[Row]: ...

    def list_itinerary_candidates(self, principal_id: str) -> List[Row]: ...

    def insert_itinerary(self, values: Row) -> Row: ...

    def update_itinerary(self, itinerary_id: str, changes: Row) -> Optional[Row]: ...

    def delete_itinerary(self, itinerary_id: str) -> bool: ...

    def get_collaborator(self, collaborator_id: str) -> Optional[Row]: ...

    def get_collaborator_role(self, itinerary_id: str, user_id: str) -> Optional[str]: ...

    def list_collaborators(self, itinerary_id: str) -> List[Row]: ...

    def insert_collaborator(self, values: Row) -> Row: ...

    def update_collaborator(self, collaborator_id: str, changes: Row) -> Optional[Row]: ...

    def delete_collaborator(self, collaborator_id: str) -> bool: ...

    def get_activity(self, activity_id: str) -> Optional[Row]: ...

    def list_activities(self, itinerary_id: str) -> List[Row]: ...

    def insert_activity(self, values: Row) -> Row: ...

    def update_activity(self, activity_id: str, changes: Row) -> Optional[Row]: ...

    def delete_activity(self, activity_id: str) -> bool: ...

    def ping(self) -> bool: ...


class TripStoreProvider:
    _store: Optional[TripStore] = None

    @classmethod
    def get_store(cls) -> TripStore:
        if cls._store is None:
            cls._store = cls._create()
            logger.info("Trip store backend: %s", cls._store.backend)
        return cls._store

    @staticmethod
    def _create() -> TripStore:
        backend = settings.store_backend.strip().lower()
        if backend == "sqlite":
            return SQLiteTripStore(settings.sqlite_path)
        if backend == "supabase":
            from app.database.supabase_client import SupabaseClient
            from app.database.supabase_store import SupabaseTripStore

            return SupabaseTripStore(SupabaseClient.get_store_client())
        raise ValueError(f"Unknown store backend: {settings.store_backend}")

    @classmethod
    def reset_store(cls):
        cls._store = None


def get_trip_store() -> TripStore:
    return TripStoreProvider.get_store()


__all__ = ["Row", "TripStore", "TripStoreProvider", "get_trip_store"]
