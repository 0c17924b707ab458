from fastapi import APIRouter, Depends, HTTPException
from app.core.access import AccessControlledStore
from app.core.dependencies import get_access_store, get_current_principal
from app.modules.profiles.schemas import ProfileCreate, ProfileUpdate, ProfileResponse
from app.modules.profiles.service import ProfileService
from typing import Dict

router = APIRouter(prefix="/profiles", tags=["profiles"])


def get_profile_service(access: AccessControlledStore = Depends(get_access_store)) -> ProfileService:
    return ProfileService(access)


@router.post("", response_model=ProfileResponse, status_code=201)
async def create_profile(
    profile_data: ProfileCreate,
    current_user: Dict = Depends(get_current_principal),
    service: ProfileService = Depends(get_profile_service)
):
    """Create own profile (id is always the acting principal)"""
    return service.create_profile(profile_data, current_user["id"])


@router.get("", response_model=ProfileResponse)
async def lookup_profile(
    email: str,
    current_user: Dict = Depends(get_current_principal),
    service: ProfileService = Depends(get_profile_service)
):
    """Look up a profile by email (trimmed, case-insensitive)"""
    profile = service.find_by_email(email, current_user["id"])
    if profile is None:
        raise HTTPException(status_code=404, detail="User not found with this email")
    return profile


@router.get("/me", response_model=ProfileResponse)
async def get_own_profile(
    current_user: Dict = Depends(get_current_principal),
    service: ProfileService = Depends(get_profile_service)
):
    """Get the acting principal's profile"""
    return service.get_profile(current_user["id"], current_user["id"])


@router.put("/me", response_model=ProfileResponse)
async def update_own_profile(
    profile_data: ProfileUpdate,
    current_user: Dict = Depends(get_current_principal),
    service: ProfileService = Depends(get_profile_service)
):
    """Update the acting principal's profile"""
    return service.update_profile(current_user["id"], profile_data, current_user["id"])


@router.get("/{profile_id}", response_model=ProfileResponse)
async def get_profile(
    profile_id: str,
    current_user: Dict = Depends(get_current_principal),
    service: ProfileService = Depends(get_profile_service)
):
    """Get any profile by ID (visible to every authenticated principal)"""
    return service.get_profile(profile_id, current_user["id"])


@router.put("/{profile_id}", response_model=ProfileResponse)
async def update_profile(
    profile_id: str,
    profile_data: ProfileUpdate,
    current_user: Dict = Depends(get_current_principal),
    service: ProfileService = Depends(get_profile_service)
):
    """Update a profile by ID (rejected unless it is the acting principal's own)"""
    return service.update_profile(profile_id, profile_data, current_user["id"])
