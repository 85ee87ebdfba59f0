from datetime import datetime, timezone

from sqlalchemy import (
    Column,
    Integer,
    String,
    Boolean,
    DateTime,
    ForeignKey,
    Index,
)
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.database import Base
from app.utils.dates import as_utc

DEFAULT_CTA_TEXT = "Learn More"
DEFAULT_CTA_LINK = "/listings"


class HeroSlide(Base):
    __tablename__ = "hero_slides"
    __table_args__ = (Index("ix_hero_slides_active_order", "is_active", "display_order"),)

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(100), nullable=False)
    subtitle = Column(String(200), nullable=True)
    description = Column(String(500), nullable=True)

    image_url = Column(String(1000), nullable=False)
    image_alt = Column(String(200), nullable=True)

    cta_text = Column(String(50), default=DEFAULT_CTA_TEXT, nullable=False)
    cta_link = Column(String(500), default=DEFAULT_CTA_LINK, nullable=False)
    cta_is_external = Column(Boolean, default=False, nullable=False)

    property_id = Column(
        Integer, ForeignKey("properties.id", ondelete="SET NULL"), nullable=True
    )
    display_order = Column(Integer, default=0, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    start_date = Column(DateTime(timezone=True), nullable=True)
    end_date = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    linked_property = relationship("Property")

    @property
    def image(self) -> dict:
        return {"url": self.image_url, "alt": self.image_alt}

    @property
    def cta_button(self) -> dict:
        return {
            "text": self.cta_text,
            "link": self.cta_link,
            "is_external": self.cta_is_external,
        }

    def is_currently_active(self, now: datetime | None = None) -> bool:
        now = now or datetime.now(timezone.utc)
        if not self.is_active:
            return False
        if self.start_date is not None and as_utc(self.start_date) > now:
            return False
        if self.end_date is not None and as_utc(self.end_date) < now:
            return False
        return True
