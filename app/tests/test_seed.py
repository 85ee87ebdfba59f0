import logging

from sqlalchemy.orm import sessionmaker

from app.config import settings
from app.models.setting import Setting, SettingValueType
from app.models.user import User, UserRole
from app.scripts import seed
from app.services.auth_service import verify_password


def test_create_admin_user_from_settings(db_session, monkeypatch):
    monkeypatch.setattr(settings, "ADMIN_USERNAME", "Boss")
    monkeypatch.setattr(settings, "ADMIN_EMAIL", "boss@example.com")
    monkeypatch.setattr(settings, "ADMIN_PASSWORD", "boss-password")

    admin = seed.create_admin_user(db_session)
    assert admin.username == "boss"
    assert admin.role == UserRole.ADMIN
    assert verify_password("boss-password", admin.password_hash)

    again = seed.create_admin_user(db_session)
    assert again.id == admin.id
    assert db_session.query(User).count() == 1


def test_create_admin_user_generates_password(db_session, monkeypatch, caplog):
    monkeypatch.setattr(settings, "ADMIN_PASSWORD", None)
    with caplog.at_level(logging.WARNING, logger="app.scripts.seed"):
        admin = seed.create_admin_user(db_session)
    assert "generated password" in caplog.text
    generated = caplog.records[-1].args[-1]
    assert verify_password(generated, admin.password_hash)


def test_seed_settings_never_overwrites(db_session):
    db_session.add(Setting(key="company_name", value="Mine", value_type=SettingValueType.STRING))
    db_session.commit()

    created = seed.seed_settings(db_session)
    assert created == len(seed.DEFAULT_SETTINGS) - 1
    assert db_session.query(Setting).filter(Setting.key == "company_name").one().value == "Mine"

    per_page = db_session.query(Setting).filter(Setting.key == "properties_per_page").one()
    assert per_page.value == 12
    assert per_page.value_type == SettingValueType.NUMBER

    assert seed.seed_settings(db_session) == 0


def test_main_runs_selected_steps(db_session, test_engine, monkeypatch):
    monkeypatch.setattr(seed, "SessionLocal", sessionmaker(bind=test_engine))
    monkeypatch.setattr(seed, "configure_logging", lambda: None)
    monkeypatch.setattr(settings, "ADMIN_PASSWORD", "pw-123456")

    seed.main(["--settings"])
    assert db_session.query(User).count() == 0
    assert db_session.query(Setting).count() == len(seed.DEFAULT_SETTINGS)

    seed.main([])
    assert db_session.query(User).filter(User.role == UserRole.ADMIN).count() == 1
