from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from app.models.blog_post import BlogCategory, BlogStatus
from app.schemas.common import AgentSummary, ImageRef
from app.utils.text import split_list


class Seo(BaseModel):
    meta_title: Optional[str] = Field(None, max_length=60)
    meta_description: Optional[str] = Field(None, max_length=160)
    keywords: List[str] = []

    @field_validator("keywords", mode="before")
    @classmethod
    def parse_keywords(cls, v):
        return split_list(v)


class BlogPostCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    slug: Optional[str] = Field(None, max_length=250)
    excerpt: str = Field(..., min_length=1, max_length=300)
    content: str = Field(..., min_length=1)
    featured_image_alt: Optional[str] = Field(None, max_length=200)
    category: BlogCategory
    tags: List[str] = []
    status: BlogStatus = BlogStatus.DRAFT
    is_featured: bool = False
    seo_meta_title: Optional[str] = Field(None, max_length=60)
    seo_meta_description: Optional[str] = Field(None, max_length=160)
    seo_keywords: List[str] = []

    @field_validator("title", "excerpt", "content")
    @classmethod
    def strip_required(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Field cannot be blank")
        return v

    @field_validator("tags", "seo_keywords", mode="before")
    @classmethod
    def parse_lists(cls, v):
        return [t.lower() for t in split_list(v)]


class BlogPostUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    slug: Optional[str] = Field(None, max_length=250)
    excerpt: Optional[str] = Field(None, min_length=1, max_length=300)
    content: Optional[str] = Field(None, min_length=1)
    featured_image_alt: Optional[str] = Field(None, max_length=200)
    category: Optional[BlogCategory] = None
    tags: Optional[List[str]] = None
    status: Optional[BlogStatus] = None
    is_featured: Optional[bool] = None
    seo_meta_title: Optional[str] = Field(None, max_length=60)
    seo_meta_description: Optional[str] = Field(None, max_length=160)
    seo_keywords: Optional[List[str]] = None

    @field_validator("title", "excerpt", "content")
    @classmethod
    def strip_required(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("Field cannot be blank")
        return v

    @field_validator("tags", "seo_keywords", mode="before")
    @classmethod
    def parse_lists(cls, v):
        return None if v is None else [t.lower() for t in split_list(v)]


class BlogPostSummary(BaseModel):
    """List projection; content is omitted."""

    id: int
    title: str
    slug: str
    excerpt: str
    featured_image: Optional[ImageRef] = None
    author: Optional[AgentSummary] = None
    category: BlogCategory
    tags: List[str] = []
    status: BlogStatus
    published_at: Optional[datetime] = None
    views: int
    is_featured: bool
    read_time: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True, use_enum_values=True)


class BlogPostResponse(BlogPostSummary):
    content: str
    seo: Seo = Seo()


class CategoryCount(BaseModel):
    name: str
    display_name: str
    count: int


class TagCount(BaseModel):
    name: str
    count: int
