import pytest

from app.core.exceptions import AccessDenied, RowNotFound


@pytest.fixture
def trip(store, profiles):
    """alice's itinerary: bob edits, carol views, dave is a stranger"""
    row = store.insert_itinerary({"name": "Iceland", "created_by": "alice"})
    store.insert_collaborator({"itinerary_id": row["id"], "user_id": "bob", "role": "editor"})
    store.insert_collaborator({"itinerary_id": row["id"], "user_id": "carol", "role": "viewer"})
    return row


@pytest.fixture
def activity(store, trip):
    return store.insert_activity({"itinerary_id": trip["id"], "title": "Blue Lagoon", "created_by": "alice"})


def test_read_visibility(access, trip):
    for principal in ("alice", "bob", "carol"):
        assert access.get_itinerary(principal, trip["id"])["id"] == trip["id"]
        assert [row["id"] for row in access.list_itineraries(principal)] == [trip["id"]]
    assert access.get_itinerary("dave", trip["id"]) is None
    assert access.list_itineraries("dave") == []
    assert access.list_collaborators("dave", trip["id"]) == []


def test_child_rows_hidden_from_strangers(access, activity, trip):
    assert access.get_activity("carol", activity["id"]) is not None
    assert access.get_activity("dave", activity["id"]) is None
    assert access.list_activities("dave", trip["id"]) == []


def test_update_allowed_for_creator_and_edit_roles(access, store, trip):
    assert access.update_itinerary("bob", trip["id"], {"destination": "Reykjavik"})["destination"] == "Reykjavik"
    store.insert_collaborator({"itinerary_id": trip["id"], "user_id": "dave", "role": "owner"})
    assert access.update_itinerary("dave", trip["id"], {"name": "Iceland Ring Road"})["name"] == "Iceland Ring Road"


def test_viewer_update_denied_and_row_unchanged(access, store, trip):
    with pytest.raises(AccessDenied):
        access.update_itinerary("carol", trip["id"], {"name": "Hijacked"})
    assert store.get_itinerary(trip["id"])["name"] == "Iceland"


def test_stranger_update_reports_not_found(access, trip):
    with pytest.raises(RowNotFound):
        access.update_itinerary("dave", trip["id"], {"name": "Hijacked"})
    with pytest.raises(RowNotFound):
        access.delete_itinerary("dave", trip["id"])


def test_created_by_is_immutable(access, store, trip):
    with pytest.raises(AccessDenied) as excinfo:
        access.update_itinerary("alice", trip["id"], {"created_by": "bob"})
    assert "created_by" in str(excinfo.value)
    assert store.get_itinerary(trip["id"])["created_by"] == "alice"
    # Restating the current value is not a change
    assert access.update_itinerary("alice", trip["id"], {"created_by": "alice", "name": "Iceland 2026"})


def test_collaborator_owner_role_cannot_delete_or_share(access, store, trip):
    store.insert_collaborator({"itinerary_id": trip["id"], "user_id": "dave", "role": "owner"})
    with pytest.raises(AccessDenied):
        access.delete_itinerary("dave", trip["id"])
    with pytest.raises(AccessDenied):
        access.create_collaborator("dave", {"itinerary_id": trip["id"], "user_id": "bob"})
    assert store.get_itinerary(trip["id"]) is not None


def test_collaborator_management(access, store, trip):
    bob_row = next(row for row in store.list_collaborators(trip["id"]) if row["user_id"] == "bob")
    with pytest.raises(AccessDenied):
        access.update_collaborator("bob", bob_row["id"], {"role": "owner"})
    with pytest.raises(AccessDenied):
        access.update_collaborator("alice", bob_row["id"], {"user_id": "dave"})
    assert access.update_collaborator("alice", bob_row["id"], {"role": "viewer"})["role"] == "viewer"
    assert access.delete_collaborator("alice", bob_row["id"])
    assert access.get_itinerary("bob", trip["id"]) is None


def test_create_activity_rules(access, trip):
    values = {"itinerary_id": trip["id"], "title": "Glacier walk"}
    assert access.create_activity("bob", {**values, "created_by": "bob"})["title"] == "Glacier walk"
    with pytest.raises(AccessDenied):
        access.create_activity("carol", {**values, "created_by": "carol"})
    with pytest.raises(RowNotFound) as excinfo:
        access.create_activity("dave", {**values, "created_by": "dave"})
    assert excinfo.value.entity == "itinerary"
    with pytest.raises(RowNotFound):
        access.create_activity("alice", {**values, "itinerary_id": "missing", "created_by": "alice"})


def test_moving_activity_requires_edit_on_destination(access, store, trip, activity):
    carols_trip = store.insert_itinerary({"name": "Faroe", "created_by": "carol"})
    store.insert_collaborator({"itinerary_id": carols_trip["id"], "user_id": "bob", "role": "viewer"})

    with pytest.raises(AccessDenied):
        access.update_activity("bob", activity["id"], {"itinerary_id": carols_trip["id"]})
    assert store.get_activity(activity["id"])["itinerary_id"] == trip["id"]

    bobs_trip = store.insert_itinerary({"name": "Bob's trip", "created_by": "bob"})
    moved = access.update_activity("bob", activity["id"], {"itinerary_id": bobs_trip["id"]})
    assert moved["itinerary_id"] == bobs_trip["id"]


def test_batch_update_skips_rows_without_rights(access, store, trip, activity):
    other_trip = store.insert_itinerary({"name": "Greenland", "created_by": "carol"})
    store.insert_collaborator({"itinerary_id": other_trip["id"], "user_id": "bob", "role": "viewer"})
    foreign = store.insert_activity({"itinerary_id": other_trip["id"], "title": "Fjord", "created_by": "carol"})

    updated = access.update_activities("bob", [
        (activity["id"], {"order_index": 5}),
        (foreign["id"], {"order_index": 5}),
        ("missing", {"order_index": 5}),
    ])
    assert [row["id"] for row in updated] == [activity["id"]]
    assert store.get_activity(activity["id"])["order_index"] == 5
    assert store.get_activity(foreign["id"])["order_index"] == 0


def test_effective_access(access, store, trip):
    creator = access.effective_access("alice", trip["id"])
    assert creator["is_creator"] and creator["can_delete"] and creator["can_manage_collaborators"]
    editor = access.effective_access("bob", trip["id"])
    assert editor["role"] == "editor"
    assert editor["can_edit"] and not editor["can_delete"]
    assert access.effective_access("carol", trip["id"])["capabilities"] == ["read"]
    assert access.effective_access("dave", trip["id"]) is None
    assert access.effective_access("alice", "missing") is None


def test_profile_rules(access, profiles):
    assert access.get_profile("dave", "alice")["email"] == "alice@example.com"
    with pytest.raises(AccessDenied):
        access.update_profile("dave", "alice", {"display_name": "Mallory"})
    with pytest.raises(AccessDenied):
        access.create_profile("dave", {"id": "erin", "email": "erin@example.com"})
    assert access.update_profile("alice", "alice", {"display_name": "Al"})["display_name"] == "Al"


def test_find_profile_by_email_prefers_earliest(access, store):
    store.insert_profile({"id": "late", "email": "Twin@example.com", "created_at": "2026-02-01T00:00:00.000000+00:00"})
    store.insert_profile({"id": "early", "email": "twin@example.com", "created_at": "2026-01-01T00:00:00.000000+00:00"})
    assert access.find_profile_by_email("late", "TWIN@example.com")["id"] == "early"
    assert access.find_profile_by_email("late", "nobody@example.com") is None


def test_principal_can_only_delete_itself(access, store, trip):
    with pytest.raises(RowNotFound):
        access.delete_principal("dave", "alice")
    assert access.delete_principal("alice", "alice")
    assert store.get_itinerary(trip["id"]) is None
