from sqlalchemy import Column, Integer, String, Boolean, DateTime, JSON, Enum
from sqlalchemy.sql import func
from app.database import Base
import enum


class SettingCategory(str, enum.Enum):
    GENERAL = "general"
    COMPANY = "company"
    CONTACT = "contact"
    SOCIAL = "social"
    SEO = "seo"
    THEME = "theme"
    FEATURES = "features"


class SettingValueType(str, enum.Enum):
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    OBJECT = "object"
    ARRAY = "array"


PUBLIC_CATEGORIES = (
    SettingCategory.GENERAL,
    SettingCategory.COMPANY,
    SettingCategory.CONTACT,
    SettingCategory.SOCIAL,
)


def _values(enum_cls):
    return [e.value for e in enum_cls]


class Setting(Base):
    __tablename__ = "settings"

    id = Column(Integer, primary_key=True, index=True)
    key = Column(String(100), unique=True, index=True, nullable=False)
    value = Column(JSON, nullable=True)
    value_type = Column(
        Enum(SettingValueType, values_callable=_values, native_enum=False),
        default=SettingValueType.STRING,
        nullable=False,
    )
    description = Column(String(500), nullable=True)
    category = Column(
        Enum(SettingCategory, values_callable=_values, native_enum=False),
        default=SettingCategory.GENERAL,
        nullable=False,
        index=True,
    )
    is_editable = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )
