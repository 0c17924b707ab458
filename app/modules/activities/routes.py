from fastapi import APIRouter, Depends
from app.core.access import AccessControlledStore
from app.core.dependencies import get_access_store, get_current_principal
from app.modules.activities.schemas import (
    ActivityCreate, ActivityUpdate, ActivityReorder, ActivityResponse
)
from app.modules.activities.service import ActivityService
from typing import List, Dict

router = APIRouter(tags=["activities"])


def get_activity_service(access: AccessControlledStore = Depends(get_access_store)) -> ActivityService:
    return ActivityService(access)


@router.get("/itineraries/{itinerary_id}/activities", response_model=List[ActivityResponse])
async def list_activities(
    itinerary_id: str,
    current_user: Dict = Depends(get_current_principal),
    service: ActivityService = Depends(get_activity_service)
):
    """List activities of an itinerary (owner or any collaborator)"""
    return service.list_activities(itinerary_id, current_user["id"])


@router.post("/itineraries/{itinerary_id}/activities", response_model=ActivityResponse, status_code=201)
async def create_activity(
    itinerary_id: str,
    activity_data: ActivityCreate,
    current_user: Dict = Depends(get_current_principal),
    service: ActivityService = Depends(get_activity_service)
):
    """Add an activity (owner or owner/editor collaborator)"""
    return service.create_activity(itinerary_id, activity_data, current_user["id"])


@router.put("/itineraries/{itinerary_id}/activities/reorder", response_model=List[ActivityResponse])
async def reorder_activities(
    itinerary_id: str,
    reorder: ActivityReorder,
    current_user: Dict = Depends(get_current_principal),
    service: ActivityService = Depends(get_activity_service)
):
    """Reorder activities; returns only the rows that were updated"""
    return service.reorder_activities(itinerary_id, reorder, current_user["id"])


@router.get("/activities/{activity_id}", response_model=ActivityResponse)
async def get_activity(
    activity_id: str,
    current_user: Dict = Depends(get_current_principal),
    service: ActivityService = Depends(get_activity_service)
):
    """Get activity by ID"""
    return service.get_activity_by_id(activity_id, current_user["id"])


@router.put("/activities/{activity_id}", response_model=ActivityResponse)
async def update_activity(
    activity_id: str,
    activity_data: ActivityUpdate,
    current_user: Dict = Depends(get_current_principal),
    service: ActivityService = Depends(get_activity_service)
):
    """Update activity (owner or owner/editor collaborator)"""
    return service.update_activity(activity_id, activity_data, current_user["id"])


@router.delete("/activities/{activity_id}", status_code=204)
async def delete_activity(
    activity_id: str,
    current_user: Dict = Depends(get_current_principal),
    service: ActivityService = Depends(get_activity_service)
):
    """Delete activity (owner or owner/editor collaborator)"""
    service.delete_activity(activity_id, current_user["id"])
    return None
