from pydantic import BaseModel, field_validator, model_validator
from typing import Optional, List
from datetime import date, datetime


class ItineraryCreate(BaseModel):
    name: str
    description: str = ""
    destination: str = ""
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Name is required")
        return value.strip()

    @model_validator(mode="after")
    def end_after_start(self):
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class ItineraryUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    destination: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    # Accepted only when unchanged; ownership cannot be transferred
    created_by: Optional[str] = None
    # Ignored: the store stamps updated_at itself
    updated_at: Optional[datetime] = None

    @field_validator("name", "description", "destination")
    @classmethod
    def not_null(cls, value: Optional[str], info) -> str:
        # Only reached when the field is sent; these columns are NOT NULL
        if value is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return value

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            raise ValueError("Name cannot be blank")
        return value.strip() if value is not None else value


class ItineraryResponse(BaseModel):
    id: str
    name: str
    description: str = ""
    destination: str = ""
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    created_by: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ItineraryAccessResponse(BaseModel):
    itinerary_id: str
    role: Optional[str] = None
    is_creator: bool
    capabilities: List[str]
    can_edit: bool
    can_manage_collaborators: bool
    can_delete: bool
