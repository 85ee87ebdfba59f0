from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    Float,
    Boolean,
    DateTime,
    ForeignKey,
    JSON,
    Enum,
    Index,
)
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.database import Base
import enum


class PropertyType(str, enum.Enum):
    HOUSE = "house"
    APARTMENT = "apartment"
    CONDO = "condo"
    TOWNHOUSE = "townhouse"
    VILLA = "villa"
    LAND = "land"
    COMMERCIAL = "commercial"


class PropertyStatus(str, enum.Enum):
    FOR_SALE = "for-sale"
    FOR_RENT = "for-rent"
    SOLD = "sold"
    RENTED = "rented"
    PENDING = "pending"


def _values(enum_cls):
    return [e.value for e in enum_cls]


class Property(Base):
    __tablename__ = "properties"
    __table_args__ = (
        Index("ix_properties_city_state", "city", "state"),
        Index("ix_properties_type_status", "property_type", "status"),
        Index("ix_properties_price", "price"),
        Index("ix_properties_featured_active", "is_featured", "is_active"),
    )

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    price = Column(Float, nullable=False)

    property_type = Column(
        Enum(PropertyType, values_callable=_values, native_enum=False),
        nullable=False,
    )
    status = Column(
        Enum(PropertyStatus, values_callable=_values, native_enum=False),
        default=PropertyStatus.FOR_SALE,
        nullable=False,
    )

    # Location
    street = Column(String(255), nullable=False)
    city = Column(String(100), nullable=False)
    state = Column(String(100), nullable=False)
    zip_code = Column(String(20), nullable=False)
    country = Column(String(100), default="USA")
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)

    # Features
    bedrooms = Column(Integer, nullable=True)
    bathrooms = Column(Float, nullable=True)
    sqft = Column(Integer, nullable=True)
    lot_size = Column(Float, nullable=True)
    year_built = Column(Integer, nullable=True)
    garage = Column(Integer, nullable=True)
    stories = Column(Integer, nullable=True)

    amenities = Column(JSON, nullable=False, default=list)  # ["pool", "gym"]

    agent_id = Column(
        Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )

    is_featured = Column(Boolean, default=False, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    views = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    agent = relationship("User", back_populates="properties")
    images = relationship(
        "PropertyImage",
        back_populates="property",
        cascade="all, delete-orphan",
        order_by="PropertyImage.order_index",
    )

    @property
    def address(self) -> dict:
        return {
            "street": self.street,
            "city": self.city,
            "state": self.state,
            "zip_code": self.zip_code,
            "country": self.country,
        }

    @property
    def coordinates(self) -> dict | None:
        if self.latitude is None or self.longitude is None:
            return None
        return {"latitude": self.latitude, "longitude": self.longitude}

    @property
    def features(self) -> dict:
        return {
            "bedrooms": self.bedrooms,
            "bathrooms": self.bathrooms,
            "sqft": self.sqft,
            "lot_size": self.lot_size,
            "year_built": self.year_built,
            "garage": self.garage,
            "stories": self.stories,
        }

    @property
    def full_address(self) -> str:
        return f"{self.street}, {self.city}, {self.state} {self.zip_code}"

    @property
    def primary_image(self):
        """The flagged primary image, else the first one, else None."""
        for image in self.images:
            if image.is_primary:
                return image
        return self.images[0] if self.images else None
