from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from app.models.hero_slide import DEFAULT_CTA_LINK, DEFAULT_CTA_TEXT
from app.schemas.common import ImageRef
from app.utils.dates import as_utc


class HeroSlideCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=100)
    subtitle: Optional[str] = Field(None, max_length=200)
    description: Optional[str] = Field(None, max_length=500)
    image_alt: Optional[str] = Field(None, max_length=200)
    cta_text: str = Field(DEFAULT_CTA_TEXT, max_length=50)
    cta_link: str = Field(DEFAULT_CTA_LINK, max_length=500)
    cta_is_external: bool = False
    property_id: Optional[int] = None
    display_order: int = 0
    is_active: bool = True
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Title cannot be blank")
        return v

    @field_validator("start_date", "end_date")
    @classmethod
    def to_utc(cls, v):
        return as_utc(v)

    @model_validator(mode="after")
    def check_window(self):
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class HeroSlideUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=100)
    subtitle: Optional[str] = Field(None, max_length=200)
    description: Optional[str] = Field(None, max_length=500)
    image_alt: Optional[str] = Field(None, max_length=200)
    cta_text: Optional[str] = Field(None, max_length=50)
    cta_link: Optional[str] = Field(None, max_length=500)
    cta_is_external: Optional[bool] = None
    property_id: Optional[int] = None
    display_order: Optional[int] = None
    is_active: Optional[bool] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("Title cannot be blank")
        return v

    @field_validator("start_date", "end_date")
    @classmethod
    def to_utc(cls, v):
        return as_utc(v)


class CtaButton(BaseModel):
    text: str
    link: str
    is_external: bool


class HeroSlideResponse(BaseModel):
    id: int
    title: str
    subtitle: Optional[str] = None
    description: Optional[str] = None
    image: ImageRef
    cta_button: CtaButton
    property_id: Optional[int] = None
    display_order: int
    is_active: bool
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
