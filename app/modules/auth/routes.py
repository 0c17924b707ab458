from fastapi import APIRouter, Depends
from app.core.access import AccessControlledStore
from app.core.dependencies import get_access_store, get_auth_service, get_current_principal, get_current_token
from app.modules.auth.schemas import (
    LoginRequest, RegisterRequest, TokenResponse, RegisterResponse
)
from app.modules.auth.service import AuthService
from typing import Dict

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=RegisterResponse, status_code=201)
async def register(
    register_data: RegisterRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Register a new user"""
    return service.register(register_data)


@router.post("/login", response_model=TokenResponse)
async def login(
    login_data: LoginRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Login and get access token (creates the profile on first login)"""
    return service.login(login_data)


@router.post("/logout", status_code=200)
async def logout(
    token: str = Depends(get_current_token),
    service: AuthService = Depends(get_auth_service)
):
    """Logout and invalidate token"""
    service.logout(token)
    return {"message": "Logged out successfully"}


@router.get("/me")
async def get_current_user(
    current_user: Dict = Depends(get_current_principal),
    access: AccessControlledStore = Depends(get_access_store),
):
    """Get current authenticated principal and their profile (null before first login)."""
    profile = access.get_profile(current_user["id"], current_user["id"])
    return {**current_user, "profile": profile}


@router.delete("/me", status_code=204)
async def delete_account(
    current_user: Dict = Depends(get_current_principal),
    service: AuthService = Depends(get_auth_service)
):
    """Delete own account; owned itineraries, activities and memberships are removed with it"""
    service.delete_account(current_user["id"])
    return None
