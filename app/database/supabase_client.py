from supabase import create_client, Client
from app.config import settings
from app.core.exceptions import StoreUnavailable


class SupabaseClient:
    """
    Two clients with different reach:
    - auth client (anon key): sign up, sign in and token checks only;
    - store client (service_role key): the only identity allowed past the
      row-level security that locks the trip tables, used solely by
      SupabaseTripStore behind app.core.access.
    """

    _auth_client: Client = None
    _store_client: Client = None

    @classmethod
    def get_auth_client(cls) -> Client:
        if cls._auth_client is None:
            cls._auth_client = create_client(settings.supabase_url, settings.supabase_key)
        return cls._auth_client

    @classmethod
    def get_store_client(cls) -> Client:
        """Never falls back to the anon key; the trip tables reject it."""
        if cls._store_client is None:
            if not settings.supabase_service_role_key:
                raise StoreUnavailable(
                    "supabase_service_role_key is required for the supabase store backend"
                )
            cls._store_client = create_client(settings.supabase_url, settings.supabase_service_role_key)
        return cls._store_client

    @classmethod
    def reset_client(cls):
        cls._auth_client = None
        cls._store_client = None


def get_supabase() -> Client:
    return SupabaseClient.get_auth_client()
