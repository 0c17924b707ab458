from fastapi import APIRouter, Depends
from app.core.access import AccessControlledStore
from app.core.dependencies import get_access_store, get_current_principal
from app.modules.collaborators.schemas import (
    CollaboratorInvite, CollaboratorRoleUpdate, CollaboratorResponse
)
from app.modules.collaborators.service import CollaboratorService
from typing import List, Dict

router = APIRouter(prefix="/itineraries/{itinerary_id}/collaborators", tags=["collaborators"])


def get_collaborator_service(access: AccessControlledStore = Depends(get_access_store)) -> CollaboratorService:
    return CollaboratorService(access)


@router.get("", response_model=List[CollaboratorResponse])
async def list_collaborators(
    itinerary_id: str,
    current_user: Dict = Depends(get_current_principal),
    service: CollaboratorService = Depends(get_collaborator_service)
):
    """List collaborators with their email and display name"""
    return service.list_collaborators(itinerary_id, current_user["id"])


@router.post("", response_model=CollaboratorResponse, status_code=201)
async def add_collaborator(
    itinerary_id: str,
    invite: CollaboratorInvite,
    current_user: Dict = Depends(get_current_principal),
    service: CollaboratorService = Depends(get_collaborator_service)
):
    """Add a collaborator by email (itinerary owner only)"""
    return service.add_collaborator_by_email(itinerary_id, invite, current_user["id"])


@router.put("/{collaborator_id}", response_model=CollaboratorResponse)
async def update_collaborator_role(
    itinerary_id: str,
    collaborator_id: str,
    role_data: CollaboratorRoleUpdate,
    current_user: Dict = Depends(get_current_principal),
    service: CollaboratorService = Depends(get_collaborator_service)
):
    """Change a collaborator's role (itinerary owner only)"""
    return service.update_role(itinerary_id, collaborator_id, role_data, current_user["id"])


@router.delete("/{collaborator_id}", status_code=204)
async def remove_collaborator(
    itinerary_id: str,
    collaborator_id: str,
    current_user: Dict = Depends(get_current_principal),
    service: CollaboratorService = Depends(get_collaborator_service)
):
    """Remove a collaborator (itinerary owner only)"""
    service.remove_collaborator(itinerary_id, collaborator_id, current_user["id"])
    return None
