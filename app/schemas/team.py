import json
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator
from app.schemas.common import ImageRef
from app.schemas.property import PropertyResponse
from app.utils.text import is_valid_phone, split_list


class SocialMedia(BaseModel):
    linkedin: Optional[str] = None
    twitter: Optional[str] = None
    facebook: Optional[str] = None
    instagram: Optional[str] = None
    telegram: Optional[str] = None


class Experience(BaseModel):
    years_in_business: Optional[int] = Field(None, ge=0)
    properties_sold: int = Field(0, ge=0)
    total_sales_volume: float = Field(0, ge=0)


class Certification(BaseModel):
    name: str = Field(..., min_length=1)
    issuing_organization: Optional[str] = None
    year: Optional[int] = None


class Contact(BaseModel):
    email: str
    phone: str
    whatsapp: Optional[str] = None


def _list_field(v):
    return split_list(v)


SOCIAL_KEYS = ("linkedin", "twitter", "facebook", "instagram", "telegram")
EXPERIENCE_KEYS = ("years_in_business", "properties_sold", "total_sales_volume")


def lift_flat_fields(data):
    """Group flat form inputs (``linkedin``, ``years_in_business``...) into
    their nested objects; certifications may arrive as a JSON string."""
    if not isinstance(data, dict):
        return data
    data = dict(data)
    social = {k: data.pop(k) for k in SOCIAL_KEYS if k in data}
    if social:
        data["social_media"] = {**(data.get("social_media") or {}), **social}
    experience = {k: data.pop(k) for k in EXPERIENCE_KEYS if k in data}
    if experience:
        data["experience"] = {**(data.get("experience") or {}), **experience}
    if isinstance(data.get("certifications"), str):
        try:
            data["certifications"] = json.loads(data["certifications"])
        except ValueError:
            raise ValueError("certifications must be a JSON list")
    return data


class TeamMemberBase(BaseModel):
    first_name: str = Field(..., min_length=1, max_length=50)
    last_name: str = Field(..., min_length=1, max_length=50)
    position: str = Field(..., min_length=1, max_length=100)
    bio: str = Field(..., min_length=1, max_length=1000)
    email: EmailStr
    phone: str = Field(..., min_length=1, max_length=30)
    whatsapp: Optional[str] = Field(None, max_length=30)
    photo_alt: Optional[str] = Field(None, max_length=200)

    social_media: SocialMedia = SocialMedia()
    specialties: List[str] = []
    languages: List[str] = []
    experience: Experience = Experience()
    certifications: List[Certification] = []

    user_id: Optional[int] = None
    is_active: bool = True
    display_order: int = 0

    @model_validator(mode="before")
    @classmethod
    def group_fields(cls, data):
        return lift_flat_fields(data)

    @field_validator("first_name", "last_name", "position", "bio", "phone")
    @classmethod
    def strip_required(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Field cannot be blank")
        return v

    @field_validator("phone")
    @classmethod
    def check_phone(cls, v: str) -> str:
        if not is_valid_phone(v):
            raise ValueError("Please enter a valid phone number")
        return v

    @field_validator("specialties", "languages", mode="before")
    @classmethod
    def parse_lists(cls, v):
        return _list_field(v)


class TeamMemberCreate(TeamMemberBase):
    pass


class TeamMemberUpdate(BaseModel):
    first_name: Optional[str] = Field(None, min_length=1, max_length=50)
    last_name: Optional[str] = Field(None, min_length=1, max_length=50)
    position: Optional[str] = Field(None, min_length=1, max_length=100)
    bio: Optional[str] = Field(None, min_length=1, max_length=1000)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, min_length=1, max_length=30)
    whatsapp: Optional[str] = Field(None, max_length=30)
    photo_alt: Optional[str] = Field(None, max_length=200)
    social_media: Optional[SocialMedia] = None
    specialties: Optional[List[str]] = None
    languages: Optional[List[str]] = None
    experience: Optional[Experience] = None
    certifications: Optional[List[Certification]] = None
    user_id: Optional[int] = None
    is_active: Optional[bool] = None
    display_order: Optional[int] = None

    @model_validator(mode="before")
    @classmethod
    def group_fields(cls, data):
        return lift_flat_fields(data)

    @field_validator("phone")
    @classmethod
    def check_phone(cls, v):
        if v is not None and not is_valid_phone(v):
            raise ValueError("Please enter a valid phone number")
        return v

    @field_validator("specialties", "languages", mode="before")
    @classmethod
    def parse_lists(cls, v):
        return None if v is None else _list_field(v)


class TeamMemberResponse(BaseModel):
    id: int
    first_name: str
    last_name: str
    full_name: str
    position: str
    bio: str
    photo: Optional[ImageRef] = None
    contact: Contact
    formatted_phone: Optional[str] = None
    social_media: SocialMedia
    specialties: List[str] = []
    languages: List[str] = []
    experience: Experience
    certifications: List[Certification] = []
    user_id: Optional[int] = None
    is_active: bool
    display_order: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class TeamMemberWithCount(TeamMemberResponse):
    property_count: int = 0


class TeamMemberDetail(TeamMemberResponse):
    recent_properties: List[PropertyResponse] = []


class TeamAgentSummary(BaseModel):
    id: int
    first_name: str
    last_name: str
    position: str

    model_config = ConfigDict(from_attributes=True)
