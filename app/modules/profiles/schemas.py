from pydantic import BaseModel, EmailStr
from typing import Optional
from datetime import datetime


class ProfileCreate(BaseModel):
    email: EmailStr
    display_name: Optional[str] = ""


class ProfileUpdate(BaseModel):
    email: Optional[EmailStr] = None
    display_name: Optional[str] = None


class ProfileResponse(BaseModel):
    id: str
    email: str
    display_name: str = ""
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ProfileSummary(BaseModel):
    email: str
    display_name: str = ""
