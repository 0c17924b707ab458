from app.core.access import AccessControlledStore
from app.core.exceptions import IntegrityViolation, TripStoreError, to_http_exception
from app.modules.collaborators.schemas import (
    CollaboratorInvite, CollaboratorRoleUpdate, CollaboratorResponse
)
from typing import List
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)


class CollaboratorService:
    def __init__(self, access: AccessControlledStore):
        self.access = access

    def _with_profile(self, row: dict, principal_id: str) -> CollaboratorResponse:
        profile = self.access.get_profile(principal_id, row["user_id"])
        data = dict(row)
        if profile:
            data["profile"] = {
                "email": profile["email"],
                "display_name": profile.get("display_name") or ""
            }
        return CollaboratorResponse(**data)

    def list_collaborators(self, itinerary_id: str, principal_id: str) -> List[CollaboratorResponse]:
        """Collaborators of an itinerary the principal can read (empty otherwise)"""
        try:
            rows = self.access.list_collaborators(principal_id, itinerary_id)
            return [self._with_profile(row, principal_id) for row in rows]
        except TripStoreError as e:
            raise to_http_exception(e)
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def add_collaborator_by_email(self, itinerary_id: str, invite: CollaboratorInvite, principal_id: str) -> CollaboratorResponse:
        """
        Resolve an email to a principal and add it to the itinerary.
        Ownership of the itinerary is enforced by the access-controlled store.
        """
        try:
            profile = self.access.find_profile_by_email(principal_id, invite.email.strip())
            if not profile:
                raise HTTPException(status_code=404, detail="User not found with this email")

            if profile["id"] == principal_id:
                raise HTTPException(status_code=400, detail="You cannot add yourself as a collaborator")

            row = self.access.create_collaborator(principal_id, {
                "itinerary_id": itinerary_id,
                "user_id": profile["id"],
                "role": invite.role.value
            })
            logger.info(f"Principal {profile['id']} added to itinerary {itinerary_id} as {invite.role.value}")
            return self._with_profile(row, principal_id)
        except HTTPException:
            raise
        except IntegrityViolation as e:
            if e.is_unique_violation:
                raise HTTPException(status_code=409, detail="This user is already a collaborator")
            raise to_http_exception(e)
        except TripStoreError as e:
            raise to_http_exception(e)
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def _get_in_itinerary(self, itinerary_id: str, collaborator_id: str, principal_id: str) -> dict:
        row = self.access.get_collaborator(principal_id, collaborator_id)
        if not row or row["itinerary_id"] != itinerary_id:
            raise HTTPException(status_code=404, detail="Collaborator not found")
        return row

    def update_role(self, itinerary_id: str, collaborator_id: str, role_data: CollaboratorRoleUpdate, principal_id: str) -> CollaboratorResponse:
        """Change a collaborator's role (itinerary owner only)"""
        try:
            self._get_in_itinerary(itinerary_id, collaborator_id, principal_id)
            row = self.access.update_collaborator(principal_id, collaborator_id, {"role": role_data.role.value})
            return self._with_profile(row, principal_id)
        except HTTPException:
            raise
        except TripStoreError as e:
            raise to_http_exception(e)
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def remove_collaborator(self, itinerary_id: str, collaborator_id: str, principal_id: str) -> bool:
        """Remove a collaborator (itinerary owner only)"""
        try:
            self._get_in_itinerary(itinerary_id, collaborator_id, principal_id)
            return self.access.delete_collaborator(principal_id, collaborator_id)
        except HTTPException:
            raise
        except TripStoreError as e:
            raise to_http_exception(e)
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
