from enum import Enum
from pydantic import BaseModel, field_validator
from typing import Optional
from datetime import datetime
from app.modules.profiles.schemas import ProfileSummary


class CollaboratorRole(str, Enum):
    OWNER = "owner"
    EDITOR = "editor"
    VIEWER = "viewer"


class CollaboratorInvite(BaseModel):
    email: str
    role: CollaboratorRole = CollaboratorRole.VIEWER

    @field_validator("email")
    @classmethod
    def email_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Email is required")
        return value


class CollaboratorRoleUpdate(BaseModel):
    role: CollaboratorRole


class CollaboratorResponse(BaseModel):
    id: str
    itinerary_id: str
    user_id: str
    role: CollaboratorRole
    added_at: datetime
    profile: Optional[ProfileSummary] = None

    class Config:
        from_attributes = True
