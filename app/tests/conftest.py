import os
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool
from sqlalchemy.orm import sessionmaker

# CRITICAL: Set test configuration BEFORE importing any app modules
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["TESTING"] = "true"
os.environ.setdefault("SESSION_SECRET", "test-session-secret")
os.environ["ENVIRONMENT"] = "development"

from app.main import app
from app.config import settings
from app.database import Base
from app.limits import FixedWindowRateLimiter
from app.models.user import User, UserRole
from app.services.auth_service import get_password_hash
import app.database as db_module
import app.dependencies as dependencies_module

PASSWORD = "secret123"
PNG_BYTES = (
    b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x00\x00\x01\x00\x00\x00\x01"
    b"\x08\x06\x00\x00\x00\x1f\x15\xc4\x89\x00\x00\x00\rIDATx\x9cc\xf8\x0f\x00"
    b"\x00\x01\x01\x00\x05\x18\xd8N\x00\x00\x00\x00IEND\xaeB`\x82"
)


@pytest.fixture(scope="session")
def test_engine():
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,  # share same in-memory DB across connections
    )
    return engine


@pytest.fixture()
def db_session(test_engine):
    TestingSessionLocal = sessionmaker(
        autocommit=False, autoflush=False, bind=test_engine
    )
    # Fresh schema per test to avoid cross-test data (e.g., unique email)
    Base.metadata.drop_all(bind=test_engine)
    Base.metadata.create_all(bind=test_engine)

    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(autouse=True)
def patch_sessionlocal(monkeypatch, test_engine, db_session):
    monkeypatch.setattr(db_module, "engine", test_engine, raising=False)

    TestingSessionLocal = sessionmaker(
        autocommit=False, autoflush=False, bind=test_engine
    )
    monkeypatch.setattr(db_module, "SessionLocal", TestingSessionLocal, raising=True)
    # get_db reads SessionLocal from the dependencies module at call time
    monkeypatch.setattr(
        dependencies_module, "SessionLocal", TestingSessionLocal, raising=True
    )

    # Disable the slowapi login limiter globally for tests
    if hasattr(app.state, "limiter"):
        monkeypatch.setattr(app.state.limiter, "enabled", False)
    # Fresh public API window per test
    monkeypatch.setattr(
        app.state, "rate_limiter", FixedWindowRateLimiter(max_requests=1000)
    )
    yield


@pytest.fixture(autouse=True)
def upload_dir(monkeypatch, tmp_path):
    directory = tmp_path / "uploads"
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(directory))
    return directory


@pytest.fixture()
def client():
    return TestClient(app)


def _make_user(db, username="admin", role=UserRole.ADMIN, is_active=True, **extra):
    user = User(
        username=username,
        email=extra.pop("email", f"{username}@example.com"),
        password_hash=get_password_hash(extra.pop("password", PASSWORD)),
        first_name=extra.pop("first_name", username.capitalize()),
        last_name=extra.pop("last_name", "User"),
        role=role,
        is_active=is_active,
        **extra,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def _login(client, username, password=PASSWORD, remember_me=False):
    return client.post(
        "/api/auth/login",
        json={"username": username, "password": password, "remember_me": remember_me},
    )


@pytest.fixture()
def admin_user(db_session):
    return _make_user(db_session, "admin", UserRole.ADMIN)


@pytest.fixture()
def admin_client(client, admin_user):
    response = _login(client, admin_user.username)
    assert response.status_code == 200
    return client


@pytest.fixture()
def agent_client(client, db_session):
    agent = _make_user(db_session, "agent", UserRole.AGENT)
    response = _login(client, agent.username)
    assert response.status_code == 200
    return client


def png_file(name="photo.png"):
    return (name, PNG_BYTES, "image/png")


@pytest.fixture()
def make_user(db_session):
    def factory(username, role=UserRole.AGENT, **extra):
        return _make_user(db_session, username, role, **extra)

    return factory


@pytest.fixture()
def login():
    return _login


@pytest.fixture()
def image():
    return png_file
