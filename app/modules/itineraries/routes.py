from fastapi import APIRouter, Depends
from app.core.access import AccessControlledStore
from app.core.dependencies import get_access_store, get_current_principal
from app.modules.itineraries.schemas import (
    ItineraryCreate, ItineraryUpdate, ItineraryResponse, ItineraryAccessResponse
)
from app.modules.itineraries.service import ItineraryService
from typing import List, Dict

router = APIRouter(prefix="/itineraries", tags=["itineraries"])


def get_itinerary_service(access: AccessControlledStore = Depends(get_access_store)) -> ItineraryService:
    return ItineraryService(access)


@router.post("", response_model=ItineraryResponse, status_code=201)
async def create_itinerary(
    itinerary_data: ItineraryCreate,
    current_user: Dict = Depends(get_current_principal),
    service: ItineraryService = Depends(get_itinerary_service)
):
    """Create a new itinerary; the acting principal becomes its owner"""
    return service.create_itinerary(itinerary_data, current_user["id"])


@router.get("", response_model=List[ItineraryResponse])
async def list_itineraries(
    limit: int = 50,
    offset: int = 0,
    current_user: Dict = Depends(get_current_principal),
    service: ItineraryService = Depends(get_itinerary_service)
):
    """List itineraries the user owns or collaborates on"""
    return service.list_itineraries(current_user["id"], limit=limit, offset=offset)


@router.get("/{itinerary_id}", response_model=ItineraryResponse)
async def get_itinerary(
    itinerary_id: str,
    current_user: Dict = Depends(get_current_principal),
    service: ItineraryService = Depends(get_itinerary_service)
):
    """Get itinerary by ID (owner or collaborator)"""
    return service.get_itinerary_by_id(itinerary_id, current_user["id"])


@router.put("/{itinerary_id}", response_model=ItineraryResponse)
async def update_itinerary(
    itinerary_id: str,
    itinerary_data: ItineraryUpdate,
    current_user: Dict = Depends(get_current_principal),
    service: ItineraryService = Depends(get_itinerary_service)
):
    """Update itinerary (owner or owner/editor collaborator)"""
    return service.update_itinerary(itinerary_id, itinerary_data, current_user["id"])


@router.delete("/{itinerary_id}", status_code=204)
async def delete_itinerary(
    itinerary_id: str,
    current_user: Dict = Depends(get_current_principal),
    service: ItineraryService = Depends(get_itinerary_service)
):
    """Delete itinerary (owner only)"""
    service.delete_itinerary(itinerary_id, current_user["id"])
    return None


@router.get("/{itinerary_id}/access", response_model=ItineraryAccessResponse)
async def get_itinerary_access(
    itinerary_id: str,
    current_user: Dict = Depends(get_current_principal),
    service: ItineraryService = Depends(get_itinerary_service)
):
    """Role and capability flags of the current user on this itinerary"""
    return service.get_access(itinerary_id, current_user["id"])
