"""
Row-level authorization predicates.

One predicate per entity decides whether a principal may perform an action on a
single row. Predicates are pure: the caller supplies the row and the parent
itinerary context (itinerary row plus the principal's collaborator role on it),
loaded fresh for every row that is evaluated.

"Owner" here always means itineraries.created_by. A collaborator row with role
"owner" grants edit rights only.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional

from app.config.access_matrix import EDIT_ROLES, capabilities_for

Row = Dict[str, Any]


class Entity(str, Enum):
    PROFILE = "profile"
    ITINERARY = "itinerary"
    COLLABORATOR = "collaborator"
    ACTIVITY = "activity"


class Action(str, Enum):
    READ = "read"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


# Columns that no update may change
IMMUTABLE_COLUMNS = {
    Entity.PROFILE: frozenset({"id", "created_at"}),
    Entity.ITINERARY: frozenset({"id", "created_by", "created_at"}),
    Entity.COLLABORATOR: frozenset({"id", "itinerary_id", "user_id", "added_at"}),
    Entity.ACTIVITY: frozenset({"id", "created_by", "created_at"}),
}


@dataclass(frozen=True)
class ItineraryContext:
    """Parent itinerary of a row and the acting principal's collaborator role on it."""

    itinerary: Optional[Row]
    role: Optional[str] = None

    def is_owner(self, principal_id: str) -> bool:
        return self.itinerary is not None and self.itinerary.get("created_by") == principal_id

    def can_read(self, principal_id: str) -> bool:
        if self.itinerary is None:
            return False
        return self.is_owner(principal_id) or self.role is not None

    def can_edit(self, principal_id: str) -> bool:
        if self.itinerary is None:
            return False
        return self.is_owner(principal_id) or self.role in EDIT_ROLES

    def capabilities(self, principal_id: str) -> list:
        if not self.can_read(principal_id):
            return []
        return capabilities_for(self.role, is_creator=self.is_owner(principal_id))


NO_CONTEXT = ItineraryContext(itinerary=None)


def profile_allows(principal_id: str, action: Action, row: Row, context: ItineraryContext = NO_CONTEXT) -> bool:
    if action is Action.READ:
        return True
    if action in (Action.CREATE, Action.UPDATE):
        return row.get("id") == principal_id
    return False


def itinerary_allows(principal_id: str, action: Action, row: Row, context: ItineraryContext) -> bool:
    if action is Action.CREATE:
        return row.get("created_by") == principal_id
    if action is Action.READ:
        return context.can_read(principal_id)
    if action is Action.UPDATE:
        return context.can_edit(principal_id)
    if action is Action.DELETE:
        return context.is_owner(principal_id)
    return False


def collaborator_allows(principal_id: str, action: Action, row: Row, context: ItineraryContext) -> bool:
    if action is Action.READ:
        return context.can_read(principal_id)
    return context.is_owner(principal_id)


def activity_allows(principal_id: str, action: Action, row: Row, context: ItineraryContext) -> bool:
    if action is Action.READ:
        return context.can_read(principal_id)
    return context.can_edit(principal_id)


POLICIES: Dict[Entity, Callable[..., bool]] = {
    Entity.PROFILE: profile_allows,
    Entity.ITINERARY: itinerary_allows,
    Entity.COLLABORATOR: collaborator_allows,
    Entity.ACTIVITY: activity_allows,
}


def is_allowed(entity: Entity, principal_id: str, action: Action, row: Row, context: ItineraryContext = NO_CONTEXT) -> bool:
    """Evaluate the predicate for one row. Unauthenticated principals are always denied."""
    if not principal_id:
        return False
    return POLICIES[entity](principal_id, action, row, context)


def changed_immutable_columns(entity: Entity, current: Row, changes: Row) -> list:
    """Immutable columns whose value `changes` would alter."""
    return sorted(
        column for column in IMMUTABLE_COLUMNS[entity]
        if column in changes and changes[column] != current.get(column)
    )
