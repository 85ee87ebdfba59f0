from datetime import datetime
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, EmailStr, Field, TypeAdapter, field_validator
from app.models.setting import SettingCategory, SettingValueType
from app.utils.text import is_valid_phone


class StringValue(BaseModel):
    kind: Literal["string"] = "string"
    value: str


class NumberValue(BaseModel):
    kind: Literal["number"] = "number"
    value: int | float


class BooleanValue(BaseModel):
    kind: Literal["boolean"] = "boolean"
    value: bool


class ObjectValue(BaseModel):
    kind: Literal["object"] = "object"
    value: dict[str, Any]


class ArrayValue(BaseModel):
    kind: Literal["array"] = "array"
    value: list[Any]


SettingValue = Annotated[
    Union[StringValue, NumberValue, BooleanValue, ObjectValue, ArrayValue],
    Field(discriminator="kind"),
]
setting_value_adapter = TypeAdapter(SettingValue)


def infer_setting_value(raw: Any) -> SettingValue:
    """Tag an untyped value. ``bool`` is checked before numbers on purpose."""
    if isinstance(raw, bool):
        return BooleanValue(value=raw)
    if isinstance(raw, (int, float)):
        return NumberValue(value=raw)
    if isinstance(raw, dict):
        return ObjectValue(value=raw)
    if isinstance(raw, (list, tuple)):
        return ArrayValue(value=list(raw))
    return StringValue(value="" if raw is None else str(raw))


def coerce_setting_value(raw: Any) -> SettingValue:
    """Accept either a tagged ``{"kind", "value"}`` object or a bare value."""
    if isinstance(raw, BaseModel):
        return raw
    if isinstance(raw, dict) and "kind" in raw and "value" in raw:
        return setting_value_adapter.validate_python(raw)
    return infer_setting_value(raw)


class SettingUpsert(BaseModel):
    value: Any
    description: Optional[str] = Field(None, max_length=500)
    category: Optional[SettingCategory] = None
    is_editable: Optional[bool] = None


class BulkSettingsUpdate(BaseModel):
    settings: dict[str, Any] = Field(..., min_length=1)


class ContactSettingsUpdate(BaseModel):
    phone: Optional[str] = None
    whatsapp: Optional[str] = None
    email: Optional[EmailStr] = None

    @field_validator("phone", "whatsapp")
    @classmethod
    def check_phone(cls, v):
        if v is not None and not is_valid_phone(v):
            raise ValueError("Please enter a valid phone number")
        return v

    @field_validator("email", mode="before")
    @classmethod
    def strip_email(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("email")
    @classmethod
    def lower_email(cls, v):
        return v.lower() if v else v


class SocialSettingsUpdate(BaseModel):
    facebook: Optional[str] = None
    instagram: Optional[str] = None
    twitter: Optional[str] = None
    linkedin: Optional[str] = None
    telegram: Optional[str] = None


class SettingResponse(BaseModel):
    id: int
    key: str
    value: SettingValue
    value_type: SettingValueType
    description: Optional[str] = None
    category: SettingCategory
    is_editable: bool
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(use_enum_values=True)

    @classmethod
    def from_model(cls, setting) -> "SettingResponse":
        return cls(
            id=setting.id,
            key=setting.key,
            value=setting_value_adapter.validate_python(
                {"kind": setting.value_type.value, "value": setting.value}
            ),
            value_type=setting.value_type,
            description=setting.description,
            category=setting.category,
            is_editable=setting.is_editable,
            updated_at=setting.updated_at,
        )
