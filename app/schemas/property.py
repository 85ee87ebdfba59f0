from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)
from typing import List, Optional
from datetime import datetime
from app.models.property import PropertyType, PropertyStatus
from app.schemas.common import AgentSummary
from app.utils.text import split_list


class PropertyBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1, max_length=2000)
    price: float = Field(..., ge=0)
    property_type: PropertyType
    status: PropertyStatus = PropertyStatus.FOR_SALE

    street: str = Field(..., min_length=1, max_length=255)
    city: str = Field(..., min_length=1, max_length=100)
    state: str = Field(..., min_length=1, max_length=100)
    zip_code: str = Field(..., min_length=1, max_length=20)
    country: str = Field(default="USA", max_length=100)
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)

    bedrooms: Optional[int] = Field(None, ge=0)
    bathrooms: Optional[float] = Field(None, ge=0)
    sqft: Optional[int] = Field(None, ge=0)
    lot_size: Optional[float] = Field(None, ge=0)
    year_built: Optional[int] = Field(None, ge=0)
    garage: Optional[int] = Field(None, ge=0)
    stories: Optional[int] = Field(None, ge=0)

    amenities: List[str] = []

    agent_id: Optional[int] = None
    is_featured: bool = False
    is_active: bool = True

    @field_validator("title", "description", "street", "city", "state", "zip_code")
    @classmethod
    def strip_required(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Field cannot be blank")
        return v

    @field_validator("amenities", mode="before")
    @classmethod
    def parse_amenities(cls, v):
        return split_list(v)


class PropertyCreate(PropertyBase):
    pass


class PropertyUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, min_length=1, max_length=2000)
    price: Optional[float] = Field(None, ge=0)
    property_type: Optional[PropertyType] = None
    status: Optional[PropertyStatus] = None
    street: Optional[str] = Field(None, min_length=1, max_length=255)
    city: Optional[str] = Field(None, min_length=1, max_length=100)
    state: Optional[str] = Field(None, min_length=1, max_length=100)
    zip_code: Optional[str] = Field(None, min_length=1, max_length=20)
    country: Optional[str] = Field(None, max_length=100)
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    bedrooms: Optional[int] = Field(None, ge=0)
    bathrooms: Optional[float] = Field(None, ge=0)
    sqft: Optional[int] = Field(None, ge=0)
    lot_size: Optional[float] = Field(None, ge=0)
    year_built: Optional[int] = Field(None, ge=0)
    garage: Optional[int] = Field(None, ge=0)
    stories: Optional[int] = Field(None, ge=0)
    amenities: Optional[List[str]] = None
    agent_id: Optional[int] = None
    is_featured: Optional[bool] = None
    is_active: Optional[bool] = None

    @field_validator("title", "description", "street", "city", "state", "zip_code")
    @classmethod
    def strip_required(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("Field cannot be blank")
        return v

    @field_validator("amenities", mode="before")
    @classmethod
    def parse_amenities(cls, v):
        return None if v is None else split_list(v)


class PropertyImageResponse(BaseModel):
    id: int
    url: str
    alt: Optional[str] = Field(None, validation_alias=AliasChoices("alt_text", "alt"))
    is_primary: bool
    order_index: int

    model_config = ConfigDict(from_attributes=True)


class AddressResponse(BaseModel):
    street: str
    city: str
    state: str
    zip_code: str
    country: Optional[str] = None


class CoordinatesResponse(BaseModel):
    latitude: float
    longitude: float


class FeaturesResponse(BaseModel):
    bedrooms: Optional[int] = None
    bathrooms: Optional[float] = None
    sqft: Optional[int] = None
    lot_size: Optional[float] = None
    year_built: Optional[int] = None
    garage: Optional[int] = None
    stories: Optional[int] = None


class PropertyResponse(BaseModel):
    id: int
    title: str
    description: str
    price: float
    property_type: PropertyType
    status: PropertyStatus
    address: AddressResponse
    full_address: str
    coordinates: Optional[CoordinatesResponse] = None
    features: FeaturesResponse
    amenities: List[str] = []
    images: List[PropertyImageResponse] = []
    primary_image: Optional[PropertyImageResponse] = None
    agent: Optional[AgentSummary] = None
    is_featured: bool
    is_active: bool
    views: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True, use_enum_values=True)


class PropertyStats(BaseModel):
    total_properties: int
    for_sale: int
    for_rent: int
    sold: int
    average_price: float
