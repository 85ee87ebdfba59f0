import logging
from typing import Any, Optional

from fastapi import HTTPException, status
from pydantic import ValidationError
from sqlalchemy.orm import Session

from app.models.setting import (
    PUBLIC_CATEGORIES,
    Setting,
    SettingCategory,
    SettingValueType,
)
from app.schemas.setting import coerce_setting_value
from app.utils.forms import validation_detail

logger = logging.getLogger(__name__)

CONTACT_KEYS = {
    "phone": ("contact_phone", "Company phone number"),
    "whatsapp": ("contact_whatsapp", "Company WhatsApp number"),
    "email": ("contact_email", "Company email address"),
}
SOCIAL_KEYS = {
    name: (f"social_{name}", f"{name.capitalize()} profile URL")
    for name in ("facebook", "instagram", "twitter", "linkedin", "telegram")
}


def _not_found(key: str):
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND, detail=f"Setting '{key}' not found"
    )


class SettingService:
    def __init__(self, db: Session):
        self.db = db

    def list_all(self) -> list[Setting]:
        return (
            self.db.query(Setting)
            .order_by(Setting.category.asc(), Setting.key.asc())
            .all()
        )

    def grouped(self, categories=None) -> dict[str, list[Setting]]:
        grouped: dict[str, list[Setting]] = {}
        for setting in self.list_all():
            if categories is not None and setting.category not in categories:
                continue
            grouped.setdefault(setting.category.value, []).append(setting)
        return grouped

    def public_values(self) -> dict[str, dict[str, Any]]:
        """``{category: {key: value}}`` for the public categories only."""
        return {
            category: {s.key: s.value for s in settings}
            for category, settings in self.grouped(PUBLIC_CATEGORIES).items()
        }

    def get_public(self, key: str) -> Setting:
        setting = (
            self.db.query(Setting)
            .filter(Setting.key == key, Setting.category.in_(PUBLIC_CATEGORIES))
            .first()
        )
        if not setting:
            raise _not_found(key)
        return setting

    def values_for(self, *categories: SettingCategory) -> dict[str, Any]:
        rows = self.db.query(Setting).filter(Setting.category.in_(categories)).all()
        return {s.key: s.value for s in rows}

    def get(self, key: str) -> Setting:
        setting = self.db.query(Setting).filter(Setting.key == key).first()
        if not setting:
            raise _not_found(key)
        return setting

    def upsert(
        self,
        key: str,
        raw_value: Any,
        description: Optional[str] = None,
        category: Optional[SettingCategory] = None,
        is_editable: Optional[bool] = None,
        commit: bool = True,
    ) -> Setting:
        """Create or replace the setting stored under ``key``.

        ``raw_value`` is either a tagged ``{"kind", "value"}`` object or a
        bare value whose kind is inferred.
        """
        key = (key or "").strip()
        if not key:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail="Setting key is required"
            )
        try:
            value = coerce_setting_value(raw_value)
        except ValidationError as exc:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail=validation_detail(exc)
            )

        setting = self.db.query(Setting).filter(Setting.key == key).first()
        if setting is None:
            setting = Setting(
                key=key,
                category=category or SettingCategory.GENERAL,
                is_editable=True if is_editable is None else is_editable,
            )
            self.db.add(setting)
        elif not setting.is_editable:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Setting '{key}' is not editable",
            )
        else:
            if category is not None:
                setting.category = category
            if is_editable is not None:
                setting.is_editable = is_editable

        setting.value = value.value
        setting.value_type = SettingValueType(value.kind)
        if description is not None:
            setting.description = description

        if commit:
            self.db.commit()
            self.db.refresh(setting)
        return setting

    def bulk_upsert(self, values: dict[str, Any]) -> list[Setting]:
        """Upsert each key on its own; earlier keys stay saved if a later one fails."""
        return [self.upsert(key, value) for key, value in values.items()]

    def _upsert_group(self, mapping, category: SettingCategory, values: dict):
        updated = []
        for field, (key, description) in mapping.items():
            if field in values and values[field] is not None:
                updated.append(
                    self.upsert(key, values[field], description=description, category=category)
                )
        return updated

    def update_contact(self, values: dict) -> list[Setting]:
        return self._upsert_group(CONTACT_KEYS, SettingCategory.CONTACT, values)

    def update_social(self, values: dict) -> list[Setting]:
        return self._upsert_group(SOCIAL_KEYS, SettingCategory.SOCIAL, values)

    def delete(self, key: str) -> None:
        setting = self.get(key)
        if not setting.is_editable:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Setting '{key}' is not editable",
            )
        self.db.delete(setting)
        self.db.commit()
        logger.info("Setting %s deleted", key)
