import pytest
from fastapi import HTTPException

from app.models.user import User, UserRole
from app.services.user_service import UserService


def _create(client, **overrides):
    payload = {
        "username": "NewAgent",
        "email": "New.Agent@Example.com",
        "password": "secret123",
        "first_name": "New",
        "last_name": "Agent",
        "role": "agent",
    }
    payload.update(overrides)
    return client.post("/api/admin/users", json=payload)


def test_create_user_normalizes_and_hides_hash(admin_client):
    r = _create(admin_client)
    assert r.status_code == 201, r.text
    user = r.json()["data"]
    assert user["username"] == "newagent"
    assert user["email"] == "new.agent@example.com"
    assert user["display_name"] == "New Agent"
    assert "password" not in user and "password_hash" not in user


def test_duplicate_username_or_email(admin_client):
    assert _create(admin_client).status_code == 201
    r = _create(admin_client, email="other@example.com")
    assert r.status_code == 409
    assert r.json()["error"] == "Username or email already exists"
    r = _create(admin_client, username="someone", email="NEW.AGENT@example.com")
    assert r.status_code == 409


def test_create_user_validation(admin_client):
    r = _create(admin_client, username="ab", email="not-an-email", password="123")
    assert r.status_code == 400
    fields = {d["field"] for d in r.json()["details"]}
    assert {"username", "email", "password"} <= fields


def test_list_users_filters(admin_client, make_user):
    make_user("alice", first_name="Alice")
    make_user("bob", role=UserRole.MANAGER, is_active=False)

    r = admin_client.get("/api/admin/users", params={"role": "manager"})
    assert [u["username"] for u in r.json()["data"]["users"]] == ["bob"]

    r = admin_client.get("/api/admin/users", params={"search": "ALI"})
    assert [u["username"] for u in r.json()["data"]["users"]] == ["alice"]

    r = admin_client.get("/api/admin/users", params={"is_active": "true", "sort": "username"})
    assert [u["username"] for u in r.json()["data"]["users"]] == ["admin", "alice"]


def test_update_user_password_and_role(admin_client, make_user, login, client):
    agent = make_user("carol")
    r = admin_client.put(
        f"/api/admin/users/{agent.id}", json={"role": "manager", "password": "newpass1"}
    )
    assert r.status_code == 200, r.text
    assert r.json()["data"]["role"] == "manager"

    client.cookies.clear()
    assert login(client, "carol", password="newpass1").status_code == 200


def test_cannot_demote_last_admin(admin_client, admin_user):
    r = admin_client.put(f"/api/admin/users/{admin_user.id}", json={"role": "agent"})
    assert r.status_code == 400
    r = admin_client.put(f"/api/admin/users/{admin_user.id}", json={"is_active": False})
    assert r.status_code == 400


def test_second_admin_can_be_demoted(admin_client, make_user):
    other = make_user("boss", role=UserRole.ADMIN)
    r = admin_client.put(f"/api/admin/users/{other.id}", json={"role": "agent"})
    assert r.status_code == 200, r.text


def test_cannot_delete_self(admin_client, admin_user):
    r = admin_client.delete(f"/api/admin/users/{admin_user.id}")
    assert r.status_code == 400
    assert r.json()["error"] == "Cannot delete your own account"


def test_last_admin_cannot_be_deleted(db_session, admin_user):
    with pytest.raises(HTTPException) as excinfo:
        UserService(db_session).delete_user(admin_user.id, {"id": 999})
    assert excinfo.value.status_code == 400
    assert excinfo.value.detail == "Cannot delete the last admin user"


def test_delete_user(admin_client, make_user, db_session):
    agent = make_user("dave")
    r = admin_client.delete(f"/api/admin/users/{agent.id}")
    assert r.status_code == 200, r.text
    assert db_session.query(User).filter(User.username == "dave").count() == 0
    assert admin_client.get(f"/api/admin/users/{agent.id}").status_code == 404


def test_avatar_upload(admin_client, image):
    r = admin_client.post(
        "/api/admin/users",
        data={"username": "erin", "email": "erin@example.com", "password": "secret123"},
        files={"avatar": image("erin.png")},
    )
    assert r.status_code == 201, r.text
    assert r.json()["data"]["avatar"].startswith("/uploads/avatars/")
