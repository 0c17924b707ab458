import pytest


@pytest.fixture
def trip(store, profiles):
    """alice's itinerary shared with bob (editor) and carol (viewer)"""
    row = store.insert_itinerary({
        "name": "Patagonia",
        "destination": "El Chalten",
        "start_date": "2026-11-01",
        "end_date": "2026-11-10",
        "created_by": "alice",
    })
    store.insert_collaborator({"itinerary_id": row["id"], "user_id": "bob", "role": "editor"})
    store.insert_collaborator({"itinerary_id": row["id"], "user_id": "carol", "role": "viewer"})
    return row
