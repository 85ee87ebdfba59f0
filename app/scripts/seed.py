"""Bootstrap data: the first admin account and the default site settings.

Usage::

    python -m app.scripts.seed            # both
    python -m app.scripts.seed --admin    # admin account only
    python -m app.scripts.seed --settings # default settings only
"""

import argparse
import logging
import secrets

from sqlalchemy.orm import Session

from app.config import settings
from app.database import SessionLocal
from app.logging_config import configure_logging
from app.models.setting import Setting, SettingCategory, SettingValueType
from app.models.user import User, UserRole
from app.schemas.setting import infer_setting_value
from app.services.auth_service import get_password_hash

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS = [
    ("company_name", "Estate Properties", SettingCategory.COMPANY, "Company name"),
    ("company_tagline", "Your Trusted Real Estate Partner", SettingCategory.COMPANY, "Company tagline"),
    (
        "company_description",
        "A real estate agency helping clients buy, sell, and rent properties.",
        SettingCategory.COMPANY,
        "Company description",
    ),
    ("contact_phone", "(555) 123-4567", SettingCategory.CONTACT, "Main phone number"),
    ("contact_email", "info@example.com", SettingCategory.CONTACT, "Main email address"),
    (
        "contact_address",
        "123 Real Estate Blvd, City, State 12345",
        SettingCategory.CONTACT,
        "Office address",
    ),
    ("social_facebook", "", SettingCategory.SOCIAL, "Facebook page URL"),
    ("social_instagram", "", SettingCategory.SOCIAL, "Instagram profile URL"),
    ("social_twitter", "", SettingCategory.SOCIAL, "Twitter profile URL"),
    ("social_linkedin", "", SettingCategory.SOCIAL, "LinkedIn company URL"),
    ("site_currency", "USD", SettingCategory.GENERAL, "Default currency"),
    ("properties_per_page", 12, SettingCategory.GENERAL, "Properties per page"),
    ("blog_posts_per_page", 10, SettingCategory.GENERAL, "Blog posts per page"),
]


def create_admin_user(db: Session) -> User:
    """Return the first admin, creating one from ADMIN_* settings if none exists."""
    existing = db.query(User).filter(User.role == UserRole.ADMIN).first()
    if existing:
        logger.info("Admin user already exists: %s", existing.email)
        return existing

    password = settings.ADMIN_PASSWORD
    if not password:
        password = secrets.token_urlsafe(12)
        logger.warning(
            "ADMIN_PASSWORD is not set; generated password for %s: %s",
            settings.ADMIN_USERNAME,
            password,
        )

    admin = User(
        username=settings.ADMIN_USERNAME,
        email=settings.ADMIN_EMAIL,
        password_hash=get_password_hash(password),
        first_name="Admin",
        last_name="User",
        role=UserRole.ADMIN,
        is_active=True,
    )
    db.add(admin)
    db.commit()
    db.refresh(admin)
    logger.info("Admin user created: %s", admin.email)
    return admin


def seed_settings(db: Session) -> int:
    """Insert the default settings; existing keys are never overwritten."""
    existing = {key for (key,) in db.query(Setting.key).all()}
    created = 0
    for key, raw, category, description in DEFAULT_SETTINGS:
        if key in existing:
            continue
        value = infer_setting_value(raw)
        db.add(
            Setting(
                key=key,
                value=value.value,
                value_type=SettingValueType(value.kind),
                category=category,
                description=description,
                is_editable=True,
            )
        )
        created += 1
    db.commit()
    logger.info("Seeded %s default settings", created)
    return created


def main(argv=None):
    parser = argparse.ArgumentParser(description="Seed the estate database")
    parser.add_argument("--admin", action="store_true", help="create the admin user")
    parser.add_argument("--settings", action="store_true", help="insert default settings")
    args = parser.parse_args(argv)
    run_all = not (args.admin or args.settings)

    configure_logging()
    db = SessionLocal()
    try:
        if run_all or args.admin:
            create_admin_user(db)
        if run_all or args.settings:
            seed_settings(db)
    finally:
        db.close()


if __name__ == "__main__":
    main()
