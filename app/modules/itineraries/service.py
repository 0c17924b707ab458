from app.core.access import AccessControlledStore
from app.core.exceptions import TripStoreError, to_http_exception
from app.modules.itineraries.schemas import (
    ItineraryCreate, ItineraryUpdate, ItineraryResponse, ItineraryAccessResponse
)
from typing import List
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)


class ItineraryService:
    def __init__(self, access: AccessControlledStore):
        self.access = access

    def create_itinerary(self, itinerary_data: ItineraryCreate, principal_id: str) -> ItineraryResponse:
        """Create a new itinerary owned by the acting principal"""
        try:
            values = itinerary_data.model_dump(mode="json")
            values["created_by"] = principal_id
            row = self.access.create_itinerary(principal_id, values)
            logger.info(f"Itinerary {row['id']} created by {principal_id}")
            return ItineraryResponse(**row)
        except TripStoreError as e:
            raise to_http_exception(e)
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def get_itinerary_by_id(self, itinerary_id: str, principal_id: str) -> ItineraryResponse:
        """Get itinerary by ID (owner or collaborator)"""
        try:
            row = self.access.get_itinerary(principal_id, itinerary_id)
            if not row:
                raise HTTPException(status_code=404, detail="Itinerary not found")
            return ItineraryResponse(**row)
        except HTTPException:
            raise
        except TripStoreError as e:
            raise to_http_exception(e)
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def list_itineraries(self, principal_id: str, limit: int = 50, offset: int = 0) -> List[ItineraryResponse]:
        """List itineraries the principal owns or collaborates on, newest first"""
        try:
            rows = self.access.list_itineraries(principal_id)
            return [ItineraryResponse(**row) for row in rows[offset:offset + limit]]
        except TripStoreError as e:
            raise to_http_exception(e)
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def update_itinerary(self, itinerary_id: str, itinerary_data: ItineraryUpdate, principal_id: str) -> ItineraryResponse:
        """Update itinerary (owner or owner/editor collaborator); updated_at is always refreshed"""
        try:
            update_data = itinerary_data.model_dump(exclude_unset=True, mode="json")
            update_data.pop("updated_at", None)
            if update_data.get("created_by") is None:
                update_data.pop("created_by", None)

            current = self.access.get_itinerary(principal_id, itinerary_id)
            if not current:
                raise HTTPException(status_code=404, detail="Itinerary not found")
            merged = {**current, **update_data}
            if merged.get("start_date") and merged.get("end_date") and merged["end_date"] < merged["start_date"]:
                raise HTTPException(status_code=400, detail="end_date must not be before start_date")

            row = self.access.update_itinerary(principal_id, itinerary_id, update_data)
            return ItineraryResponse(**row)
        except HTTPException:
            raise
        except TripStoreError as e:
            raise to_http_exception(e)
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def delete_itinerary(self, itinerary_id: str, principal_id: str) -> bool:
        """Delete itinerary (creator only); activities and collaborators cascade"""
        try:
            deleted = self.access.delete_itinerary(principal_id, itinerary_id)
            if deleted:
                logger.info(f"Itinerary {itinerary_id} deleted by {principal_id}")
            return deleted
        except TripStoreError as e:
            raise to_http_exception(e)
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def get_access(self, itinerary_id: str, principal_id: str) -> ItineraryAccessResponse:
        """Effective role and capabilities of the principal on the itinerary"""
        try:
            summary = self.access.effective_access(principal_id, itinerary_id)
            if summary is None:
                raise HTTPException(status_code=404, detail="Itinerary not found")
            return ItineraryAccessResponse(**summary)
        except HTTPException:
            raise
        except TripStoreError as e:
            raise to_http_exception(e)
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
