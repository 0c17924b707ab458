from app.core.access import AccessControlledStore
from app.core.exceptions import TripStoreError, to_http_exception
from app.modules.profiles.schemas import ProfileCreate, ProfileUpdate, ProfileResponse
from typing import Optional
from fastapi import HTTPException


class ProfileService:
    def __init__(self, access: AccessControlledStore):
        self.access = access

    def create_profile(self, profile_data: ProfileCreate, principal_id: str) -> ProfileResponse:
        """Create the acting principal's own profile"""
        try:
            row = self.access.create_profile(principal_id, {
                "id": principal_id,
                "email": profile_data.email.strip().lower(),
                "display_name": profile_data.display_name or ""
            })
            return ProfileResponse(**row)
        except TripStoreError as e:
            raise to_http_exception(e)
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def get_profile(self, profile_id: str, principal_id: str) -> ProfileResponse:
        """Get profile by ID"""
        try:
            row = self.access.get_profile(principal_id, profile_id)
            if not row:
                raise HTTPException(status_code=404, detail="Profile not found")
            return ProfileResponse(**row)
        except HTTPException:
            raise
        except TripStoreError as e:
            raise to_http_exception(e)
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def find_by_email(self, email: str, principal_id: str) -> Optional[ProfileResponse]:
        """Exact case-insensitive lookup after trimming whitespace"""
        try:
            row = self.access.find_profile_by_email(principal_id, email.strip())
            return ProfileResponse(**row) if row else None
        except TripStoreError as e:
            raise to_http_exception(e)

    def update_profile(self, profile_id: str, profile_data: ProfileUpdate, principal_id: str) -> ProfileResponse:
        """Update profile (self only)"""
        try:
            update_data = profile_data.model_dump(exclude_unset=True, exclude_none=True)
            if "email" in update_data:
                update_data["email"] = update_data["email"].strip().lower()
            row = self.access.update_profile(principal_id, profile_id, update_data)
            return ProfileResponse(**row)
        except HTTPException:
            raise
        except TripStoreError as e:
            raise to_http_exception(e)
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
