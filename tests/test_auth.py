from tests.conftest import register


def test_register_seeds_default_categories(client, user):
    assert user["username"] == "asha"
    assert "passwordHash" not in user
    assert user["upiBlockEnabled"] is True
    assert user["upiCurrentlyBlocked"] is False

    names = [c["name"] for c in client.get("/api/categories").json()]
    assert names == ["Food", "Shopping", "Entertainment", "Transport", "Education", "Other"]


def test_duplicate_username(client, user):
    res = client.post("/api/register", json={"username": "asha", "password": "another1", "name": "A"})
    assert res.status_code == 400
    assert res.json()["message"] == "Username already exists"


def test_login_logout_cycle(client, user):
    assert client.post("/api/logout").status_code == 200
    assert client.get("/api/user").status_code == 401

    bad = client.post("/api/login", json={"username": "asha", "password": "wrong-pass"})
    assert bad.status_code == 401
    assert bad.json()["message"] == "Invalid username or password"

    ok = client.post("/api/login", json={"username": "asha", "password": "secret123"})
    assert ok.status_code == 200
    assert client.get("/api/user").json()["id"] == user["id"]


def test_profile_update_is_partial(client, user):
    res = client.put("/api/user/profile", json={"upiId": "asha@upi", "darkMode": True})
    assert res.status_code == 200
    body = res.json()
    assert body["upiId"] == "asha@upi"
    assert body["darkMode"] is True
    assert body["name"] == "Asha"
    assert body["pushNotifications"] is True


def test_profile_cannot_clear_block(client, user):
    client.post("/api/upi/block")
    res = client.put("/api/user/profile", json={"upiCurrentlyBlocked": False})
    assert res.status_code == 200
    assert res.json()["upiCurrentlyBlocked"] is True


def test_custom_category(client, user):
    res = client.post("/api/categories", json={"name": "Gaming", "icon": "gamepad", "iconColor": "#112233"})
    assert res.status_code == 201
    assert res.json()["userId"] == user["id"]
    assert len(client.get("/api/categories").json()) == 7


def test_users_see_only_their_categories(client, user):
    mine = {c["id"] for c in client.get("/api/categories").json()}
    client.post("/api/logout")
    register(client, username="ravi", name="Ravi")
    theirs = {c["id"] for c in client.get("/api/categories").json()}
    assert not mine & theirs


def test_health(client):
    res = client.get("/health")
    assert res.status_code == 200
    assert res.json()["mode"] == "frozen_time"
