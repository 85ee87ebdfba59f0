from datetime import datetime, timedelta, timezone

from app.config import settings
from app.models.user import UserRole
from app.models.user_session import UserSession
from app.routers.admin_pages import safe_next
from app.services.auth_service import SessionService


def test_login_sets_session_cookie(client, admin_user, login):
    r = login(client, "admin")
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["message"] == "Login successful"
    assert body["data"]["user"]["username"] == "admin"
    assert body["data"]["user"]["role"] == "admin"
    assert "password_hash" not in body["data"]["user"]

    cookie = r.headers["set-cookie"]
    assert cookie.startswith(f"{settings.SESSION_COOKIE_NAME}=")
    assert "HttpOnly" in cookie
    assert "samesite=lax" in cookie.lower()


def test_login_by_email_case_insensitive(client, admin_user, login):
    r = login(client, "ADMIN@example.com")
    assert r.status_code == 200, r.text


def test_me_and_logout(client, admin_user, login, db_session):
    assert login(client, "admin").status_code == 200

    r = client.get("/api/auth/me")
    assert r.status_code == 200, r.text
    assert r.json()["data"]["email"] == "admin@example.com"
    assert r.json()["data"]["last_login"] is not None

    r = client.post("/api/auth/logout")
    assert r.status_code == 200, r.text
    assert db_session.query(UserSession).count() == 0

    client.cookies.clear()
    r = client.get("/api/auth/me")
    assert r.status_code == 401
    assert r.json()["error"] == "Authentication required"


def test_wrong_password_is_rejected(client, admin_user, login):
    r = login(client, "admin", password="nope-nope")
    assert r.status_code == 401
    assert r.json()["error"] == "Invalid username or password"


def test_unknown_user_is_rejected(client, login):
    r = login(client, "ghost")
    assert r.status_code == 401


def test_inactive_user_cannot_login(client, make_user, login):
    make_user("sleepy", is_active=False)
    r = login(client, "sleepy")
    assert r.status_code == 403
    assert r.json()["error"] == "Account is deactivated"


def test_missing_fields_fail_validation(client):
    r = client.post("/api/auth/login", json={"username": "admin"})
    assert r.status_code == 400
    body = r.json()
    assert body["error"] == "Validation failed"
    assert any(d["field"] == "password" for d in body["details"])


def test_remember_me_extends_session(client, admin_user, login, db_session):
    short = login(client, "admin").json()["data"]["expires_at"]
    long = login(client, "admin", remember_me=True).json()["data"]["expires_at"]
    assert long > short

    remembered = db_session.query(UserSession).filter(UserSession.remember == True).one()
    assert remembered.user_id == admin_user.id


def test_deactivated_user_loses_session(client, make_user, login, db_session):
    user = make_user("temp")
    assert login(client, "temp").status_code == 200
    user.is_active = False
    db_session.commit()
    assert client.get("/api/auth/me").status_code == 401


def test_tampered_cookie_is_anonymous(client):
    client.cookies.set(settings.SESSION_COOKIE_NAME, "not-a-token")
    assert client.get("/api/auth/me").status_code == 401


def test_admin_api_requires_login(client):
    r = client.get("/api/admin/users")
    assert r.status_code == 401


def test_admin_api_rejects_wrong_role(agent_client):
    r = agent_client.get("/api/admin/users")
    assert r.status_code == 403
    assert r.json()["error"] == "Insufficient permissions"


def test_agent_may_edit_content(agent_client):
    r = agent_client.get("/api/admin/properties")
    assert r.status_code == 200, r.text


def test_admin_page_redirects_anonymous_to_login(client):
    r = client.get("/admin/dashboard?tab=stats", follow_redirects=False)
    assert r.status_code == 303
    assert r.headers["location"] == "/admin/login?next=%2Fadmin%2Fdashboard%3Ftab%3Dstats"


def test_admin_page_denies_non_admin(agent_client):
    r = agent_client.get("/admin/dashboard", follow_redirects=False)
    assert r.status_code == 403
    assert "text/html" in r.headers["content-type"]
    assert "Access Denied" in r.text


def test_admin_page_renders_for_admin(admin_client):
    r = admin_client.get("/admin/dashboard")
    assert r.status_code == 200
    assert "Dashboard" in r.text


def test_admin_login_form(client, admin_user):
    r = client.get("/admin/login?next=/admin/settings")
    assert r.status_code == 200
    assert 'value="/admin/settings"' in r.text

    r = client.post(
        "/admin/login",
        data={"username": "admin", "password": "secret123", "next": "/admin/settings"},
        follow_redirects=False,
    )
    assert r.status_code == 303
    assert r.headers["location"] == "/admin/settings"
    assert settings.SESSION_COOKIE_NAME in r.headers["set-cookie"]

    # already signed in
    r = client.get("/admin/login", follow_redirects=False)
    assert r.status_code == 303
    assert r.headers["location"] == "/admin/dashboard"


def test_admin_login_form_rejects_non_admin(client, make_user):
    make_user("editor", role=UserRole.MANAGER)
    r = client.post(
        "/admin/login",
        data={"username": "editor", "password": "secret123"},
        follow_redirects=False,
    )
    assert r.status_code == 403
    assert "Admin privileges required" in r.text


def test_admin_login_form_bad_password(client, admin_user):
    r = client.post(
        "/admin/login",
        data={"username": "admin", "password": "wrong-password"},
        follow_redirects=False,
    )
    assert r.status_code == 401
    assert "Invalid username or password" in r.text


def test_admin_logout_page(admin_client):
    r = admin_client.get("/admin/logout", follow_redirects=False)
    assert r.status_code == 303
    assert r.headers["location"] == "/admin/login"
    admin_client.cookies.clear()
    r = admin_client.get("/admin/dashboard", follow_redirects=False)
    assert r.status_code == 303


def test_safe_next():
    assert safe_next("/admin/users?page=2") == "/admin/users?page=2"
    assert safe_next(None) == "/admin/dashboard"
    assert safe_next("https://evil.example") == "/admin/dashboard"
    assert safe_next("//evil.example") == "/admin/dashboard"
    assert safe_next("/\\evil.example") == "/admin/dashboard"


def test_admin_password_change_page(admin_client, login):
    r = admin_client.post(
        "/admin/settings/password",
        data={
            "current_password": "secret123",
            "new_password": "better-secret",
            "confirm_password": "better-secret",
        },
        follow_redirects=False,
    )
    assert r.status_code == 303
    assert "success=" in r.headers["location"]

    r = admin_client.post(
        "/admin/settings/password",
        data={
            "current_password": "secret123",
            "new_password": "another-one",
            "confirm_password": "another-one",
        },
        follow_redirects=False,
    )
    assert r.status_code == 303
    assert "error=Current+password+is+incorrect" in r.headers["location"]

    admin_client.cookies.clear()
    assert login(admin_client, "admin", password="better-secret").status_code == 200


def _stored_session(db, user, session_id, expires_in):
    session = UserSession(
        id=session_id,
        user_id=user.id,
        data={},
        expires_at=datetime.now(timezone.utc) + expires_in,
    )
    db.add(session)
    db.commit()
    return session


def test_purge_expired_removes_only_stale_sessions(db_session, admin_user):
    _stored_session(db_session, admin_user, "stale-1", timedelta(hours=-2))
    _stored_session(db_session, admin_user, "stale-2", timedelta(minutes=-1))
    _stored_session(db_session, admin_user, "live", timedelta(hours=2))

    assert SessionService(db_session).purge_expired() == 2
    assert [s.id for s in db_session.query(UserSession).all()] == ["live"]
    assert SessionService(db_session).purge_expired() == 0


def test_login_prunes_abandoned_sessions(client, admin_user, login, db_session):
    _stored_session(db_session, admin_user, "abandoned", timedelta(days=-3))
    assert login(client, "admin").status_code == 200
    db_session.expire_all()
    ids = [s.id for s in db_session.query(UserSession).all()]
    assert "abandoned" not in ids
    assert len(ids) == 1
