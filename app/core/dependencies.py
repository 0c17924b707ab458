"""
Core dependencies for authentication and store access
"""

from fastapi import Depends, Security
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from app.core.access import AccessControlledStore
from app.database.store import TripStore, get_trip_store
from app.database.supabase_client import get_supabase
from app.modules.auth.service import AuthService
from supabase import Client
import logging

logger = logging.getLogger(__name__)

security = HTTPBearer()


def get_access_store(store: TripStore = Depends(get_trip_store)) -> AccessControlledStore:
    """Services only ever receive the access-controlled wrapper, never the raw store"""
    return AccessControlledStore(store)


def get_auth_service(
    supabase: Client = Depends(get_supabase),
    access: AccessControlledStore = Depends(get_access_store)
) -> AuthService:
    return AuthService(supabase, access)


def get_current_principal(
    credentials: HTTPAuthorizationCredentials = Security(security),
    auth_service: AuthService = Depends(get_auth_service)
) -> dict:
    """Extract the acting principal from the JWT token"""
    token = credentials.credentials
    return auth_service.get_current_user(token)


def get_current_token(
    credentials: HTTPAuthorizationCredentials = Security(security)
) -> str:
    """Extract JWT token from Authorization header"""
    return credentials.credentials
