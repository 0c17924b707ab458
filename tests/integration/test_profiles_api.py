def test_lookup_by_email(client, as_user):
    resp = client.get("/api/v1/profiles", params={"email": " Bob@EXAMPLE.com "}, headers=as_user("dave"))
    assert resp.status_code == 200
    assert resp.json()["id"] == "bob"


def test_lookup_unknown_email(client, as_user):
    resp = client.get("/api/v1/profiles", params={"email": "ghost@example.com"}, headers=as_user("dave"))
    assert resp.status_code == 404
    assert resp.json()["detail"] == "User not found with this email"


def test_own_profile(client, as_user):
    assert client.get("/api/v1/profiles/me", headers=as_user("carol")).json()["email"] == "carol@example.com"
    resp = client.put("/api/v1/profiles/me", json={"display_name": "Caz"}, headers=as_user("carol"))
    assert resp.status_code == 200
    assert resp.json()["display_name"] == "Caz"


def test_any_profile_readable_only_own_writable(client, as_user, store):
    assert client.get("/api/v1/profiles/alice", headers=as_user("dave")).status_code == 200
    resp = client.put("/api/v1/profiles/alice", json={"display_name": "Mallory"}, headers=as_user("dave"))
    assert resp.status_code == 403
    assert store.get_profile("alice")["display_name"] == "Alice"
    assert client.get("/api/v1/profiles/nobody", headers=as_user("dave")).status_code == 404


def test_create_own_profile(client, as_user):
    resp = client.post("/api/v1/profiles", json={"email": "Erin@Example.com"}, headers=as_user("erin"))
    assert resp.status_code == 201
    assert resp.json()["id"] == "erin"
    assert resp.json()["email"] == "erin@example.com"
    assert client.post("/api/v1/profiles", json={"email": "not-an-email"}, headers=as_user("erin")).status_code == 422
