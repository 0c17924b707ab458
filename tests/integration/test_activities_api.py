def _activities(trip):
    return f"/api/v1/itineraries/{trip['id']}/activities"


def test_editor_creates_with_appended_order(client, as_user, trip):
    first = client.post(_activities(trip), json={"title": "Laguna de los Tres"}, headers=as_user("bob"))
    second = client.post(_activities(trip), json={"title": "Cerro Torre"}, headers=as_user("alice"))
    assert first.status_code == 201
    assert first.json()["created_by"] == "bob"
    assert first.json()["order_index"] == 0
    assert second.json()["order_index"] == 1


def test_viewer_and_stranger_cannot_create(client, as_user, trip):
    assert client.post(_activities(trip), json={"title": "Nope"}, headers=as_user("carol")).status_code == 403
    stranger = client.post(_activities(trip), json={"title": "Nope"}, headers=as_user("dave"))
    assert stranger.status_code == 404
    assert stranger.json()["detail"] == "Itinerary not found"


def test_validation(client, as_user, trip):
    assert client.post(_activities(trip), json={"title": " "}, headers=as_user("alice")).status_code == 422
    resp = client.post(
        _activities(trip),
        json={"title": "Backwards", "start_time": "10:00", "end_time": "09:00"},
        headers=as_user("alice"),
    )
    assert resp.status_code == 422


def test_list_order(client, as_user, store, trip):
    def add(title, **values):
        store.insert_activity({"itinerary_id": trip["id"], "title": title, "created_by": "alice", **values})

    add("loose")
    add("afternoon", date="2026-11-02", start_time="15:00:00")
    add("morning", date="2026-11-02", start_time="08:00:00")
    add("arrival", date="2026-11-01")

    resp = client.get(_activities(trip), headers=as_user("carol"))
    assert [row["title"] for row in resp.json()] == ["arrival", "morning", "afternoon", "loose"]
    assert client.get(_activities(trip), headers=as_user("dave")).json() == []


def test_update_rules(client, as_user, store, trip):
    activity = store.insert_activity({
        "itinerary_id": trip["id"], "title": "Kayak", "created_by": "alice", "start_time": "10:00:00",
    })
    url = f"/api/v1/activities/{activity['id']}"

    assert client.put(url, json={"title": "Kayak tour"}, headers=as_user("carol")).status_code == 403
    assert client.put(url, json={"title": "Kayak tour"}, headers=as_user("dave")).status_code == 404
    assert client.put(url, json={"end_time": "09:00"}, headers=as_user("bob")).status_code == 400

    resp = client.put(url, json={"title": "Kayak tour", "end_time": "12:30"}, headers=as_user("bob"))
    assert resp.status_code == 200
    assert resp.json()["title"] == "Kayak tour"
    assert resp.json()["end_time"] == "12:30:00"


def test_move_requires_edit_on_target(client, as_user, store, trip):
    activity = store.insert_activity({"itinerary_id": trip["id"], "title": "Ferry", "created_by": "alice"})
    viewed = store.insert_itinerary({"name": "Carol's", "created_by": "carol"})
    store.insert_collaborator({"itinerary_id": viewed["id"], "user_id": "bob", "role": "viewer"})

    resp = client.put(f"/api/v1/activities/{activity['id']}", json={"itinerary_id": viewed["id"]}, headers=as_user("bob"))
    assert resp.status_code == 403
    assert store.get_activity(activity["id"])["itinerary_id"] == trip["id"]


def test_delete(client, as_user, store, trip):
    activity = store.insert_activity({"itinerary_id": trip["id"], "title": "Bus", "created_by": "alice"})
    url = f"/api/v1/activities/{activity['id']}"
    assert client.delete(url, headers=as_user("carol")).status_code == 403
    assert client.delete(url, headers=as_user("bob")).status_code == 204
    assert client.get(url, headers=as_user("alice")).status_code == 404


def test_reorder(client, as_user, store, trip):
    ids = [
        store.insert_activity({"itinerary_id": trip["id"], "title": title, "created_by": "alice", "order_index": i})["id"]
        for i, title in enumerate(("a", "b", "c"))
    ]
    reordered = list(reversed(ids)) + ["not-in-trip"]

    viewer = client.put(f"{_activities(trip)}/reorder", json={"activity_ids": reordered}, headers=as_user("carol"))
    assert viewer.status_code == 200
    assert viewer.json() == []

    resp = client.put(f"{_activities(trip)}/reorder", json={"activity_ids": reordered}, headers=as_user("bob"))
    assert [row["id"] for row in resp.json()] == list(reversed(ids))
    titles = [row["title"] for row in client.get(_activities(trip), headers=as_user("alice")).json()]
    assert titles == ["c", "b", "a"]


def test_null_for_required_column_is_rejected_before_write(client, as_user, store, trip):
    activity = store.insert_activity({
        "itinerary_id": trip["id"], "title": "Estancia", "created_by": "alice", "date": "2026-11-03",
    })
    url = f"/api/v1/activities/{activity['id']}"
    for column in ("itinerary_id", "title", "description", "location", "category", "order_index"):
        assert client.put(url, json={column: None}, headers=as_user("bob")).status_code == 422
    assert store.get_activity(activity["id"]) == activity

    cleared = client.put(url, json={"date": None}, headers=as_user("bob"))
    assert cleared.status_code == 200
    assert cleared.json()["date"] is None
