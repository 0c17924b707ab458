"""Hosted Postgres (Supabase) implementation of the trip store."""

import logging
from typing import Any, Callable, Dict, List, Optional

import httpx
from postgrest.exceptions import APIError
from supabase import Client

from app.core.exceptions import IntegrityViolation, StoreUnavailable, TripStoreError
from app.database.hooks import stamp_itinerary_update, utcnow

logger = logging.getLogger(__name__)

Row = Dict[str, Any]

# Postgres SQLSTATE class 23: integrity constraint violation
_INTEGRITY_CLASS = "23"


def _normalize_email(email: str) -> str:
    return email.strip().lower()


def _with_normalized_email(values: Row) -> Row:
    if values.get("email"):
        return {**values, "email": _normalize_email(values["email"])}
    return values


class SupabaseTripStore:
    """
    Reads and writes through PostgREST with the service-role key.
    The tables allow no other key (RLS on, no policies); every call site
    goes through app.core.access.AccessControlledStore first.
    """

    backend = "supabase"

    def __init__(self, supabase: Client, clock: Callable = utcnow):
        self.supabase = supabase
        self._clock = clock

    def _execute(self, query):
        try:
            return query.execute()
        except APIError as e:
            code = str(e.code or "")
            message = e.message or str(e)
            if code.startswith(_INTEGRITY_CLASS):
                logger.warning(f"Integrity violation ({code}): {message}")
                raise IntegrityViolation(code, message) from e
            raise TripStoreError(message) from e
        except httpx.HTTPError as e:
            raise StoreUnavailable(f"Supabase unavailable: {e}") from e

    def _first(self, query) -> Optional[Row]:
        result = self._execute(query.limit(1))
        return result.data[0] if result.data else None

    def _get(self, table: str, row_id: str) -> Optional[Row]:
        return self._first(self.supabase.table(table).select("*").eq("id", row_id))

    def _insert(self, table: str, values: Row) -> Row:
        result = self._execute(self.supabase.table(table).insert(values))
        if not result.data:
            raise TripStoreError(f"Failed to insert into {table}")
        return result.data[0]

    def _update(self, table: str, row_id: str, changes: Row) -> Optional[Row]:
        if not changes:
            return self._get(table, row_id)
        result = self._execute(
            self.supabase.table(table)
            .update(changes)
            .eq("id", row_id)
        )
        return result.data[0] if result.data else None

    def _delete(self, table: str, row_id: str) -> bool:
        result = self._execute(
            self.supabase.table(table)
            .delete()
            .eq("id", row_id)
        )
        return len(result.data) > 0

    # Profiles

    def get_profile(self, profile_id: str) -> Optional[Row]:
        return self._get("profiles", profile_id)

    def find_profiles_by_email(self, email: str) -> List[Row]:
        # Exact match on the stored lower-case form; no pattern operators, so
        # "%", "_" and "*" are literal characters
        result = self._execute(
            self.supabase.table("profiles")
            .select("*")
            .eq("email", _normalize_email(email))
            .order("created_at")
        )
        return result.data or []

    def insert_profile(self, values: Row) -> Row:
        return self._insert("profiles", _with_normalized_email(values))

    def update_profile(self, profile_id: str, changes: Row) -> Optional[Row]:
        return self._update("profiles", profile_id, _with_normalized_email(changes))

    def delete_principal(self, principal_id: str) -> bool:
        """Deletes the auth user; profiles and everything owned cascade in Postgres."""
        try:
            self.supabase.auth.admin.delete_user(principal_id)
        except httpx.HTTPError as e:
            raise StoreUnavailable(f"Supabase unavailable: {e}") from e
        except Exception as e:
            raise TripStoreError(f"Failed to delete principal: {e}") from e
        return True

    # Itineraries

    def get_itinerary(self, itinerary_id: str) -> Optional[Row]:
        return self._get("itineraries", itinerary_id)

    def list_itinerary_candidates(self, principal_id: str) -> List[Row]:
        owned = self._execute(
            self.supabase.table("itineraries")
            .select("*")
            .eq("created_by", principal_id)
        ).data or []
        memberships = self._execute(
            self.supabase.table("collaborators")
            .select("itinerary_id")
            .eq("user_id", principal_id)
        ).data or []
        owned_ids = {row["id"] for row in owned}
        shared_ids = [m["itinerary_id"] for m in memberships if m["itinerary_id"] not in owned_ids]
        shared = []
        if shared_ids:
            shared = self._execute(
                self.supabase.table("itineraries")
                .select("*")
                .in_("id", shared_ids)
            ).data or []
        rows = owned + shared
        rows.sort(key=lambda row: row.get("created_at") or "", reverse=True)
        return rows

    def insert_itinerary(self, values: Row) -> Row:
        values = {k: v for k, v in values.items() if k != "updated_at"}
        return self._insert("itineraries", values)

    def update_itinerary(self, itinerary_id: str, changes: Row) -> Optional[Row]:
        # The update_itineraries_updated_at trigger stamps the same column server side
        stamped = stamp_itinerary_update(changes, now=self._clock())
        return self._update("itineraries", itinerary_id, stamped)

    def delete_itinerary(self, itinerary_id: str) -> bool:
        return self._delete("itineraries", itinerary_id)

    # Collaborators

    def get_collaborator(self, collaborator_id: str) -> Optional[Row]:
        return self._get("collaborators", collaborator_id)

    def get_collaborator_role(self, itinerary_id: str, user_id: str) -> Optional[str]:
        row = self._first(
            self.supabase.table("collaborators")
            .select("role")
            .eq("itinerary_id", itinerary_id)
            .eq("user_id", user_id)
        )
        return row["role"] if row else None

    def list_collaborators(self, itinerary_id: str) -> List[Row]:
        result = self._execute(
            self.supabase.table("collaborators")
            .select("*")
            .eq("itinerary_id", itinerary_id)
            .order("added_at")
        )
        return result.data or []

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
        result = self._execute(
            self.supabase.table("activities")
            .select("*")
            .eq("itinerary_id", itinerary_id)
            .order("date", nullsfirst=False)
            .order("start_time", nullsfirst=False)
            .order("order_index")
            .order("created_at")
        )
        return result.data or []

    def insert_activity(self, values: Row) -> Row:
        return self._insert("activities", values)

    def update_activity(self, activity_id: str, changes: Row) -> Optional[Row]:
        return self._update("activities", activity_id, changes)

    def delete_activity(self, activity_id: str) -> bool:
        return self._delete("activities", activity_id)

    def ping(self) -> bool:
        self._execute(self.supabase.table("profiles").select("id").limit(1))
        return True
