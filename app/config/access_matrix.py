"""
Itinerary Access Matrix
This config defines the capabilities carried by each collaborator role and by
the itinerary creator. Used by the policy engine and by the access summary
endpoint that clients read to toggle edit/share/delete controls.
"""

# Entities guarded by the policy engine and the actions evaluated for them
ENTITIES = {
    "profile": {
        "table": "profiles",
        "actions": ["read", "create", "update"],
        "description": "Principal profile (email, display name)"
    },
    "itinerary": {
        "table": "itineraries",
        "actions": ["read", "create", "update", "delete"],
        "description": "Trip with destination and date range"
    },
    "collaborator": {
        "table": "collaborators",
        "actions": ["read", "create", "update", "delete"],
        "description": "Principal granted access to an itinerary"
    },
    "activity": {
        "table": "activities",
        "actions": ["read", "create", "update", "delete"],
        "description": "Dated activity inside an itinerary"
    }
}

# Collaborator roles and what they allow on the parent itinerary
ROLE_TYPES = {
    "owner": {
        "capabilities": ["read", "edit"],
        "description": "Co-owner: can edit the itinerary and its activities"
    },
    "editor": {
        "capabilities": ["read", "edit"],
        "description": "Can edit the itinerary and its activities"
    },
    "viewer": {
        "capabilities": ["read"],
        "description": "Read-only access to the itinerary and its activities"
    }
}

# The principal in itineraries.created_by; not represented by a collaborator row
CREATOR_CAPABILITIES = ["read", "edit", "manage_collaborators", "delete"]


def roles_with(capability: str) -> frozenset:
    """Collaborator roles that carry the given capability"""
    return frozenset(
        role for role, config in ROLE_TYPES.items()
        if capability in config["capabilities"]
    )


def capabilities_for(role, is_creator: bool = False) -> list:
    """
    Returns the capabilities held on an itinerary.
    The creator always holds CREATOR_CAPABILITIES; a collaborator row adds
    nothing on top of that. Unknown or missing roles hold nothing.
    """
    if is_creator:
        return list(CREATOR_CAPABILITIES)
    if role not in ROLE_TYPES:
        return []
    return list(ROLE_TYPES[role]["capabilities"])


EDIT_ROLES = roles_with("edit")
