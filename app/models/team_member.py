from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    Boolean,
    DateTime,
    ForeignKey,
    JSON,
    Index,
)
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.database import Base
from app.utils.text import format_phone


class TeamMember(Base):
    __tablename__ = "team_members"
    __table_args__ = (Index("ix_team_members_order_active", "display_order", "is_active"),)

    id = Column(Integer, primary_key=True, index=True)
    first_name = Column(String(50), nullable=False)
    last_name = Column(String(50), nullable=False)
    position = Column(String(100), nullable=False)
    bio = Column(Text, nullable=False)

    photo_url = Column(String(1000), nullable=True)
    photo_alt = Column(String(200), nullable=True)

    email = Column(String(255), nullable=False)
    phone = Column(String(30), nullable=False)
    whatsapp = Column(String(30), nullable=True)

    # {"linkedin": ..., "twitter": ..., "facebook": ..., "instagram": ..., "telegram": ...}
    social_media = Column(JSON, nullable=False, default=dict)
    specialties = Column(JSON, nullable=False, default=list)
    languages = Column(JSON, nullable=False, default=list)
    # {"years_in_business": ..., "properties_sold": ..., "total_sales_volume": ...}
    experience = Column(JSON, nullable=False, default=dict)
    # [{"name": ..., "issuing_organization": ..., "year": ...}]
    certifications = Column(JSON, nullable=False, default=list)

    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    display_order = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    user = relationship("User")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def formatted_phone(self) -> str:
        return format_phone(self.phone)

    @property
    def photo(self) -> dict | None:
        if not self.photo_url:
            return None
        return {"url": self.photo_url, "alt": self.photo_alt}

    @property
    def contact(self) -> dict:
        return {"email": self.email, "phone": self.phone, "whatsapp": self.whatsapp}
