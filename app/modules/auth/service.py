import hashlib
import logging
import time
from supabase import Client
from app.core.access import AccessControlledStore
from app.core.exceptions import TripStoreError, to_http_exception
from app.modules.auth.schemas import LoginRequest, RegisterRequest, TokenResponse, RegisterResponse
from fastapi import HTTPException
from typing import Dict, Any, Optional

logger = logging.getLogger(__name__)

# In-memory cache for get_current_user to reduce Supabase auth calls (e.g. many parallel requests with same token)
_AUTH_USER_CACHE: Dict[str, tuple] = {}
_AUTH_CACHE_TTL_SEC = 60
_AUTH_CACHE_MAX_SIZE = 500


def clear_auth_cache():
    _AUTH_USER_CACHE.clear()


class AuthService:
    def __init__(self, supabase: Client, access: AccessControlledStore):
        self.supabase = supabase
        self.access = access

    def register(self, register_data: RegisterRequest) -> RegisterResponse:
        """Register a new principal using Supabase Auth"""
        try:
            user_metadata = {}
            if register_data.display_name:
                user_metadata["display_name"] = register_data.display_name

            auth_response = self.supabase.auth.sign_up({
                "email": register_data.email,
                "password": register_data.password,
                "options": {
                    "data": user_metadata
                }
            })

            if not auth_response.user:
                raise HTTPException(status_code=400, detail="Failed to register user")

            return RegisterResponse(
                user_id=auth_response.user.id,
                email=auth_response.user.email or register_data.email,
                message="User registered successfully"
            )
        except HTTPException:
            raise
        except Exception as e:
            error_message = str(e)
            if "already registered" in error_message.lower() or "already exists" in error_message.lower():
                raise HTTPException(status_code=400, detail="User already exists")
            raise HTTPException(status_code=500, detail=f"Registration failed: {error_message}")

    def login(self, login_data: LoginRequest) -> TokenResponse:
        """Authenticate using Supabase Auth; creates the profile on first login"""
        try:
            auth_response = self.supabase.auth.sign_in_with_password({
                "email": login_data.email,
                "password": login_data.password
            })

            if not auth_response.user or not auth_response.session:
                raise HTTPException(status_code=401, detail="Invalid credentials")

            user = auth_response.user
            self.ensure_profile(
                user.id,
                user.email or login_data.email,
                (user.user_metadata or {}).get("display_name")
            )

            return TokenResponse(
                access_token=auth_response.session.access_token,
                token_type="bearer",
                user_id=user.id,
                email=user.email or login_data.email
            )
        except HTTPException:
            raise
        except TripStoreError as e:
            raise to_http_exception(e)
        except Exception as e:
            error_message = str(e)
            if "invalid" in error_message.lower() or "credentials" in error_message.lower():
                raise HTTPException(status_code=401, detail="Invalid email or password")
            raise HTTPException(status_code=500, detail=f"Login failed: {error_message}")

    def ensure_profile(self, principal_id: str, email: str, display_name: Optional[str] = None) -> Dict[str, Any]:
        """Create the principal's profile once; later logins leave it untouched"""
        existing = self.access.get_profile(principal_id, principal_id)
        if existing:
            return existing
        logger.info(f"Creating profile for principal {principal_id}")
        return self.access.create_profile(principal_id, {
            "id": principal_id,
            "email": email.strip().lower(),
            "display_name": display_name or ""
        })

    def get_current_user(self, token: str) -> Dict[str, Any]:
        """Get current principal from Supabase Auth token. Uses short TTL cache to reduce auth API calls."""
        try:
            cache_key = hashlib.sha256(token.encode()).hexdigest()
            now = time.monotonic()
            if cache_key in _AUTH_USER_CACHE:
                user_data, expiry = _AUTH_USER_CACHE[cache_key]
                if now < expiry:
                    return user_data
                del _AUTH_USER_CACHE[cache_key]
            user_response = self.supabase.auth.get_user(jwt=token)
            if not user_response or not user_response.user:
                raise HTTPException(status_code=401, detail="Invalid or expired token")
            user = user_response.user
            user_data = {
                "id": user.id,
                "email": user.email,
                "user_metadata": user.user_metadata or {},
                "created_at": user.created_at,
            }
            if len(_AUTH_USER_CACHE) < _AUTH_CACHE_MAX_SIZE:
                _AUTH_USER_CACHE[cache_key] = (user_data, now + _AUTH_CACHE_TTL_SEC)
            return user_data
        except HTTPException:
            raise
        except Exception as e:
            error_msg = str(e)
            if "JWT" in error_msg or "expired" in error_msg.lower() or "invalid" in error_msg.lower():
                raise HTTPException(status_code=401, detail="Invalid or expired token")
            raise HTTPException(status_code=401, detail="Authentication failed")

    def logout(self, token: str) -> bool:
        """Logout using Supabase Auth"""
        try:
            # Supabase Auth tokens are stateless JWTs; drop our cached lookup and let the token expire
            _AUTH_USER_CACHE.pop(hashlib.sha256(token.encode()).hexdigest(), None)
            self.supabase.auth.sign_out()
            return True
        except Exception as e:
            logger.warning(f"Sign out failed: {e}")
            return False

    def delete_account(self, principal_id: str) -> bool:
        """Delete the principal; profile, owned itineraries and memberships cascade"""
        try:
            deleted = self.access.delete_principal(principal_id, principal_id)
            for key in [k for k, (data, _) in _AUTH_USER_CACHE.items() if data.get("id") == principal_id]:
                del _AUTH_USER_CACHE[key]
            return deleted
        except TripStoreError as e:
            raise to_http_exception(e)
