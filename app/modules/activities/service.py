from app.core.access import AccessControlledStore
from app.core.exceptions import TripStoreError, to_http_exception
from app.modules.activities.schemas import (
    ActivityCreate, ActivityUpdate, ActivityReorder, ActivityResponse
)
from typing import List
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)


class ActivityService:
    def __init__(self, access: AccessControlledStore):
        self.access = access

    def list_activities(self, itinerary_id: str, principal_id: str) -> List[ActivityResponse]:
        """Activities ordered by date, start time, then order index (empty if the itinerary is not visible)"""
        try:
            rows = self.access.list_activities(principal_id, itinerary_id)
            return [ActivityResponse(**row) for row in rows]
        except TripStoreError as e:
            raise to_http_exception(e)
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def create_activity(self, itinerary_id: str, activity_data: ActivityCreate, principal_id: str) -> ActivityResponse:
        """Create an activity; appended after existing ones unless order_index is given"""
        try:
            values = activity_data.model_dump(mode="json")
            if values.get("order_index") is None:
                existing = self.access.list_activities(principal_id, itinerary_id)
                values["order_index"] = max((a.get("order_index") or 0 for a in existing), default=-1) + 1
            values["itinerary_id"] = itinerary_id
            values["created_by"] = principal_id
            row = self.access.create_activity(principal_id, values)
            return ActivityResponse(**row)
        except TripStoreError as e:
            raise to_http_exception(e)
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def get_activity_by_id(self, activity_id: str, principal_id: str) -> ActivityResponse:
        """Get activity by ID"""
        try:
            row = self.access.get_activity(principal_id, activity_id)
            if not row:
                raise HTTPException(status_code=404, detail="Activity not found")
            return ActivityResponse(**row)
        except HTTPException:
            raise
        except TripStoreError as e:
            raise to_http_exception(e)
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def update_activity(self, activity_id: str, activity_data: ActivityUpdate, principal_id: str) -> ActivityResponse:
        """Update activity; moving it requires edit rights on both itineraries"""
        try:
            update_data = activity_data.model_dump(exclude_unset=True, mode="json")

            current = self.access.get_activity(principal_id, activity_id)
            if not current:
                raise HTTPException(status_code=404, detail="Activity not found")
            merged = {**current, **update_data}
            if merged.get("start_time") and merged.get("end_time") and merged["end_time"] < merged["start_time"]:
                raise HTTPException(status_code=400, detail="end_time must not be before start_time")

            row = self.access.update_activity(principal_id, activity_id, update_data)
            return ActivityResponse(**row)
        except HTTPException:
            raise
        except TripStoreError as e:
            raise to_http_exception(e)
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def delete_activity(self, activity_id: str, principal_id: str) -> bool:
        """Delete activity"""
        try:
            return self.access.delete_activity(principal_id, activity_id)
        except TripStoreError as e:
            raise to_http_exception(e)
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def reorder_activities(self, itinerary_id: str, reorder: ActivityReorder, principal_id: str) -> List[ActivityResponse]:
        """
        Assign order_index by position in activity_ids.
        Ids outside the itinerary are ignored; rows the principal may not edit
        are skipped. Returns the rows actually updated.
        """
        try:
            visible_ids = {row["id"] for row in self.access.list_activities(principal_id, itinerary_id)}
            updates = [
                (activity_id, {"order_index": position})
                for position, activity_id in enumerate(reorder.activity_ids)
                if activity_id in visible_ids
            ]
            rows = self.access.update_activities(principal_id, updates)
            return [ActivityResponse(**row) for row in rows]
        except TripStoreError as e:
            raise to_http_exception(e)
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
