from pydantic import BaseModel
from typing import Optional, List


class SuggestionRequest(BaseModel):
    destination: Optional[str] = None
    startDate: Optional[str] = None
    endDate: Optional[str] = None
    description: Optional[str] = None


class SuggestionResponse(BaseModel):
    suggestions: List[str]
    destination: str
