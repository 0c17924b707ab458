from pydantic import BaseModel, field_validator, model_validator
from typing import Optional, List
import datetime as dt


class ActivityCreate(BaseModel):
    title: str
    description: str = ""
    date: Optional[dt.date] = None
    start_time: Optional[dt.time] = None
    end_time: Optional[dt.time] = None
    location: str = ""
    category: str = "other"
    order_index: Optional[int] = None

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Title is required")
        return value.strip()

    @model_validator(mode="after")
    def end_after_start(self):
        if self.start_time and self.end_time and self.end_time < self.start_time:
            raise ValueError("end_time must not be before start_time")
        return self


class ActivityUpdate(BaseModel):
    itinerary_id: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    date: Optional[dt.date] = None
    start_time: Optional[dt.time] = None
    end_time: Optional[dt.time] = None
    location: Optional[str] = None
    category: Optional[str] = None
    order_index: Optional[int] = None

    @field_validator("itinerary_id", "title", "description", "location", "category", "order_index")
    @classmethod
    def not_null(cls, value, info):
        # date and times may be cleared; every other column is NOT NULL
        if value is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return value

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            raise ValueError("Title cannot be blank")
        return value.strip() if value is not None else value


class ActivityReorder(BaseModel):
    activity_ids: List[str]


class ActivityResponse(BaseModel):
    id: str
    itinerary_id: str
    title: str
    description: str = ""
    date: Optional[dt.date] = None
    start_time: Optional[dt.time] = None
    end_time: Optional[dt.time] = None
    location: str = ""
    category: str = "other"
    created_by: str
    created_at: dt.datetime
    order_index: int = 0

    class Config:
        from_attributes = True
