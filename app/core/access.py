"""
Access-controlled trip store.

The only path from services to the relational store. Every method takes the
acting principal id explicitly and evaluates app.core.policies for each row
it reads or writes. Parent itinerary context is loaded per row and never
shared across rows of a batch.

Failure semantics:
- reads drop rows the principal may not see (single-row reads return None);
- writes raise RowNotFound when the target, or its parent itinerary, is not
  readable, and AccessDenied when it is readable but the write is not allowed;
- an update must pass the predicate both before (USING) and after (WITH CHECK)
  the change, and may not alter immutable columns.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple

from app.core.exceptions import AccessDenied, RowNotFound
from app.core.policies import (
    NO_CONTEXT,
    Action,
    Entity,
    ItineraryContext,
    changed_immutable_columns,
    is_allowed,
)
from app.database.store import TripStore

logger = logging.getLogger(__name__)

Row = Dict[str, Any]


class AccessControlledStore:
    def __init__(self, store: TripStore):
        self._store = store

    @property
    def backend(self) -> str:
        return self._store.backend

    # Context and raw access

    def _context(self, principal_id: str, entity: Entity, row: Row) -> ItineraryContext:
        if entity is Entity.PROFILE:
            return NO_CONTEXT
        if entity is Entity.ITINERARY:
            itinerary = row
        else:
            itinerary_id = row.get("itinerary_id")
            itinerary = self._store.get_itinerary(itinerary_id) if itinerary_id else None
        if itinerary is None or not itinerary.get("id"):
            return ItineraryContext(itinerary=itinerary)
        role = self._store.get_collaborator_role(itinerary["id"], principal_id)
        return ItineraryContext(itinerary=itinerary, role=role)

    def _raw_get(self, entity: Entity, row_id: str) -> Optional[Row]:
        getters = {
            Entity.PROFILE: self._store.get_profile,
            Entity.ITINERARY: self._store.get_itinerary,
            Entity.COLLABORATOR: self._store.get_collaborator,
            Entity.ACTIVITY: self._store.get_activity,
        }
        return getters[entity](row_id)

    def _raw_update(self, entity: Entity, row_id: str, changes: Row) -> Optional[Row]:
        updaters = {
            Entity.PROFILE: self._store.update_profile,
            Entity.ITINERARY: self._store.update_itinerary,
            Entity.COLLABORATOR: self._store.update_collaborator,
            Entity.ACTIVITY: self._store.update_activity,
        }
        return updaters[entity](row_id, changes)

    def _raw_delete(self, entity: Entity, row_id: str) -> bool:
        deleters = {
            Entity.ITINERARY: self._store.delete_itinerary,
            Entity.COLLABORATOR: self._store.delete_collaborator,
            Entity.ACTIVITY: self._store.delete_activity,
        }
        if entity not in deleters:
            raise AccessDenied(entity.value, Action.DELETE.value, row_id)
        return deleters[entity](row_id)

    def _raw_insert(self, entity: Entity, values: Row) -> Row:
        inserters = {
            Entity.PROFILE: self._store.insert_profile,
            Entity.ITINERARY: self._store.insert_itinerary,
            Entity.COLLABORATOR: self._store.insert_collaborator,
            Entity.ACTIVITY: self._store.insert_activity,
        }
        return inserters[entity](values)

    # Generic guarded operations

    def _visible(self, principal_id: str, entity: Entity, row: Optional[Row]) -> Optional[Row]:
        if row is None:
            return None
        context = self._context(principal_id, entity, row)
        return row if is_allowed(entity, principal_id, Action.READ, row, context) else None

    def _filter_visible(self, principal_id: str, entity: Entity, rows: Iterable[Row]) -> List[Row]:
        return [row for row in rows if self._visible(principal_id, entity, row) is not None]

    def _get(self, principal_id: str, entity: Entity, row_id: str) -> Optional[Row]:
        return self._visible(principal_id, entity, self._raw_get(entity, row_id))

    def _deny(self, principal_id: str, entity: Entity, action: Action, row_id, reason: str = ""):
        logger.info(f"Denied {action.value} on {entity.value} {row_id} for principal {principal_id}")
        raise AccessDenied(entity.value, action.value, row_id, reason)

    def _create(self, principal_id: str, entity: Entity, values: Row) -> Row:
        context = self._context(principal_id, entity, values)
        if not is_allowed(entity, principal_id, Action.CREATE, values, context):
            parent_hidden = entity in (Entity.COLLABORATOR, Entity.ACTIVITY) and not context.can_read(principal_id)
            if parent_hidden:
                raise RowNotFound(Entity.ITINERARY.value, values.get("itinerary_id"))
            self._deny(principal_id, entity, Action.CREATE, values.get("id"))
        return self._raw_insert(entity, values)

    def _update(self, principal_id: str, entity: Entity, row_id: str, changes: Row) -> Row:
        current = self._raw_get(entity, row_id)
        if current is None:
            raise RowNotFound(entity.value, row_id)
        context = self._context(principal_id, entity, current)
        if not is_allowed(entity, principal_id, Action.READ, current, context):
            raise RowNotFound(entity.value, row_id)
        if not is_allowed(entity, principal_id, Action.UPDATE, current, context):
            self._deny(principal_id, entity, Action.UPDATE, row_id)

        immutable = changed_immutable_columns(entity, current, changes)
        if immutable:
            self._deny(principal_id, entity, Action.UPDATE, row_id, f"Cannot change {', '.join(immutable)}")

        proposed = {**current, **changes}
        proposed_context = self._context(principal_id, entity, proposed)
        if not is_allowed(entity, principal_id, Action.UPDATE, proposed, proposed_context):
            self._deny(principal_id, entity, Action.UPDATE, row_id, "Updated row would not be editable")

        updated = self._raw_update(entity, row_id, changes)
        if updated is None:
            raise RowNotFound(entity.value, row_id)
        return updated

    def _delete(self, principal_id: str, entity: Entity, row_id: str) -> bool:
        current = self._raw_get(entity, row_id)
        if current is None:
            raise RowNotFound(entity.value, row_id)
        context = self._context(principal_id, entity, current)
        if not is_allowed(entity, principal_id, Action.READ, current, context):
            raise RowNotFound(entity.value, row_id)
        if not is_allowed(entity, principal_id, Action.DELETE, current, context):
            self._deny(principal_id, entity, Action.DELETE, row_id)
        return self._raw_delete(entity, row_id)

    # Profiles

    def get_profile(self, principal_id: str, profile_id: str) -> Optional[Row]:
        return self._get(principal_id, Entity.PROFILE, profile_id)

    def find_profile_by_email(self, principal_id: str, email: str) -> Optional[Row]:
        """Exact, case-insensitive match; the earliest profile wins on duplicates"""
        matches = self._filter_visible(principal_id, Entity.PROFILE, self._store.find_profiles_by_email(email))
        return matches[0] if matches else None

    def create_profile(self, principal_id: str, values: Row) -> Row:
        return self._create(principal_id, Entity.PROFILE, values)

    def update_profile(self, principal_id: str, profile_id: str, changes: Row) -> Row:
        return self._update(principal_id, Entity.PROFILE, profile_id, changes)

    def delete_principal(self, principal_id: str, target_id: str) -> bool:
        """A principal may only delete itself; everything it owns cascades."""
        if not principal_id or principal_id != target_id:
            raise RowNotFound(Entity.PROFILE.value, target_id)
        return self._store.delete_principal(target_id)

    # Itineraries

    def list_itineraries(self, principal_id: str) -> List[Row]:
        candidates = self._store.list_itinerary_candidates(principal_id)
        return self._filter_visible(principal_id, Entity.ITINERARY, candidates)

    def get_itinerary(self, principal_id: str, itinerary_id: str) -> Optional[Row]:
        return self._get(principal_id, Entity.ITINERARY, itinerary_id)

    def create_itinerary(self, principal_id: str, values: Row) -> Row:
        return self._create(principal_id, Entity.ITINERARY, values)

    def update_itinerary(self, principal_id: str, itinerary_id: str, changes: Row) -> Row:
        return self._update(principal_id, Entity.ITINERARY, itinerary_id, changes)

    def delete_itinerary(self, principal_id: str, itinerary_id: str) -> bool:
        return self._delete(principal_id, Entity.ITINERARY, itinerary_id)

    def effective_access(self, principal_id: str, itinerary_id: str) -> Optional[Dict[str, Any]]:
        """Role and capability flags of the principal on one itinerary, None when not visible"""
        itinerary = self._store.get_itinerary(itinerary_id)
        if itinerary is None:
            return None
        context = self._context(principal_id, Entity.ITINERARY, itinerary)
        if not context.can_read(principal_id):
            return None
        is_owner = context.is_owner(principal_id)
        capabilities = context.capabilities(principal_id)
        return {
            "itinerary_id": itinerary_id,
            "role": "owner" if is_owner else context.role,
            "is_creator": is_owner,
            "capabilities": capabilities,
            "can_edit": "edit" in capabilities,
            "can_manage_collaborators": "manage_collaborators" in capabilities,
            "can_delete": "delete" in capabilities,
        }

    # Collaborators

    def list_collaborators(self, principal_id: str, itinerary_id: str) -> List[Row]:
        return self._filter_visible(principal_id, Entity.COLLABORATOR, self._store.list_collaborators(itinerary_id))

    def get_collaborator(self, principal_id: str, collaborator_id: str) -> Optional[Row]:
        return self._get(principal_id, Entity.COLLABORATOR, collaborator_id)

    def create_collaborator(self, principal_id: str, values: Row) -> Row:
        return self._create(principal_id, Entity.COLLABORATOR, values)

    def update_collaborator(self, principal_id: str, collaborator_id: str, changes: Row) -> Row:
        return self._update(principal_id, Entity.COLLABORATOR, collaborator_id, changes)

    def delete_collaborator(self, principal_id: str, collaborator_id: str) -> bool:
        return self._delete(principal_id, Entity.COLLABORATOR, collaborator_id)

    # Activities

    def list_activities(self, principal_id: str, itinerary_id: str) -> List[Row]:
        return self._filter_visible(principal_id, Entity.ACTIVITY, self._store.list_activities(itinerary_id))

    def get_activity(self, principal_id: str, activity_id: str) -> Optional[Row]:
        return self._get(principal_id, Entity.ACTIVITY, activity_id)

    def create_activity(self, principal_id: str, values: Row) -> Row:
        return self._create(principal_id, Entity.ACTIVITY, values)

    def update_activity(self, principal_id: str, activity_id: str, changes: Row) -> Row:
        return self._update(principal_id, Entity.ACTIVITY, activity_id, changes)

    def delete_activity(self, principal_id: str, activity_id: str) -> bool:
        return self._delete(principal_id, Entity.ACTIVITY, activity_id)

    def update_activities(self, principal_id: str, updates: Iterable[Tuple[str, Row]]) -> List[Row]:
        """
        Batch update. Each row is checked on its own; rows the principal may
        not update are left out of the result instead of failing the batch.
        """
        updated = []
        for activity_id, changes in updates:
            try:
                updated.append(self._update(principal_id, Entity.ACTIVITY, activity_id, changes))
            except (RowNotFound, AccessDenied):
                logger.info(f"Batch update skipped activity {activity_id} for principal {principal_id}")
        return updated
