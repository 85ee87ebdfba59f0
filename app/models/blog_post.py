from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
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


class BlogCategory(str, enum.Enum):
    MARKET_TRENDS = "market-trends"
    BUYING_GUIDE = "buying-guide"
    SELLING_TIPS = "selling-tips"
    INVESTMENT = "investment"
    HOME_IMPROVEMENT = "home-improvement"
    NEIGHBORHOOD_GUIDE = "neighborhood-guide"
    COMPANY_NEWS = "company-news"


class BlogStatus(str, enum.Enum):
    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"


def _values(enum_cls):
    return [e.value for e in enum_cls]


class BlogPost(Base):
    __tablename__ = "blog_posts"
    __table_args__ = (
        Index("ix_blog_posts_status_published_at", "status", "published_at"),
        Index("ix_blog_posts_category_status", "category", "status"),
    )

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(200), nullable=False)
    slug = Column(String(250), unique=True, index=True, nullable=False)
    excerpt = Column(String(300), nullable=False)
    content = Column(Text, nullable=False)  # sanitized HTML

    featured_image_url = Column(String(1000), nullable=True)
    featured_image_alt = Column(String(200), nullable=True)

    author_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    category = Column(
        Enum(BlogCategory, values_callable=_values, native_enum=False),
        nullable=False,
    )
    tags = Column(JSON, nullable=False, default=list)
    status = Column(
        Enum(BlogStatus, values_callable=_values, native_enum=False),
        default=BlogStatus.DRAFT,
        nullable=False,
    )
    published_at = Column(DateTime(timezone=True), nullable=True)
    views = Column(Integer, default=0, nullable=False)
    is_featured = Column(Boolean, default=False, nullable=False)
    read_time = Column(Integer, default=1, nullable=False)  # minutes
    # {"meta_title": ..., "meta_description": ..., "keywords": [...]}
    seo = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    author = relationship("User")

    @property
    def featured_image(self) -> dict | None:
        if not self.featured_image_url:
            return None
        return {"url": self.featured_image_url, "alt": self.featured_image_alt}
