import json
import logging
from collections import Counter
from datetime import datetime, timezone
from typing import Optional

from bs4 import BeautifulSoup
from fastapi import HTTPException, UploadFile, status
from sqlalchemy import String, and_, cast, func, or_, select, update
from sqlalchemy.orm import Session, joinedload

from app.models.blog_post import BlogCategory, BlogPost, BlogStatus
from app.schemas.blog import BlogPostCreate, BlogPostUpdate
from app.services.storage_service import StorageService, UploadFolder, delete_by_url
from app.utils.pagination import paginate
from app.utils.query import (
    LIKE_ESCAPE,
    apply_sort,
    escape_like,
    text_search_condition,
)
from app.utils.sanitizer import sanitize_html
from app.utils.text import display_name, reading_time, slugify

logger = logging.getLogger(__name__)

SORTABLE_FIELDS = {"published_at", "created_at", "updated_at", "title", "views"}
SEARCH_COLUMNS = (BlogPost.title, BlogPost.excerpt, BlogPost.content)
PUBLIC_PAGE_SIZE = 10

# draft -> published -> archived, archived posts may be reopened
ALLOWED_TRANSITIONS = {
    BlogStatus.DRAFT: {BlogStatus.PUBLISHED, BlogStatus.ARCHIVED},
    BlogStatus.PUBLISHED: {BlogStatus.ARCHIVED},
    BlogStatus.ARCHIVED: {BlogStatus.DRAFT, BlogStatus.PUBLISHED},
}


def _not_found():
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND, detail="Blog post not found"
    )


def _tag_condition(tag: str):
    # tags is a JSON array; match the quoted element inside its text form
    pattern = escape_like(json.dumps(tag.strip().lower()))
    return cast(BlogPost.tags, String).like(f"%{pattern}%", escape=LIKE_ESCAPE)


def _published():
    return BlogPost.status == BlogStatus.PUBLISHED


class BlogService:
    def __init__(self, db: Session):
        self.db = db

    # ==================== QUERIES ====================

    def _page(self, query, page: int, limit: int, sort: str | None, default_sort: str):
        total = self.db.execute(
            select(func.count()).select_from(query.order_by(None).subquery())
        ).scalar_one()
        pagination = paginate(page, limit, total)
        query = apply_sort(query, BlogPost, sort, SORTABLE_FIELDS, default_sort)
        query = query.offset(pagination.skip).limit(pagination.items_per_page)
        rows = self.db.execute(query.options(joinedload(BlogPost.author))).scalars().all()
        return rows, pagination

    def list_public(
        self,
        page: int = 1,
        limit: int = PUBLIC_PAGE_SIZE,
        category: Optional[BlogCategory] = None,
        tag: Optional[str] = None,
        featured: Optional[bool] = None,
        sort: Optional[str] = None,
    ):
        conditions = [_published()]
        if category:
            conditions.append(BlogPost.category == category)
        if tag and tag.strip():
            conditions.append(_tag_condition(tag))
        if featured:
            conditions.append(BlogPost.is_featured == True)
        query = select(BlogPost).where(and_(*conditions))
        return self._page(query, page, limit, sort, "-published_at")

    def list_admin(
        self,
        page: int = 1,
        limit: int = 20,
        search: Optional[str] = None,
        status_filter: Optional[BlogStatus] = None,
        category: Optional[BlogCategory] = None,
        sort: Optional[str] = None,
    ):
        conditions = []
        if search and search.strip():
            conditions.append(text_search_condition(search, SEARCH_COLUMNS))
        if status_filter:
            conditions.append(BlogPost.status == status_filter)
        if category:
            conditions.append(BlogPost.category == category)
        query = select(BlogPost)
        if conditions:
            query = query.where(and_(*conditions))
        return self._page(query, page, limit, sort, "-updated_at")

    def search_public(self, term: str, page: int = 1, limit: int = PUBLIC_PAGE_SIZE):
        term = (term or "").strip()
        if len(term) < 2:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Search query must be at least 2 characters",
            )
        query = select(BlogPost).where(
            and_(_published(), text_search_condition(term, SEARCH_COLUMNS))
        )
        return self._page(query, page, limit, None, "-published_at")

    def get_post(self, post_id: int) -> BlogPost:
        post = (
            self.db.query(BlogPost)
            .options(joinedload(BlogPost.author))
            .filter(BlogPost.id == post_id)
            .first()
        )
        if not post:
            raise _not_found()
        return post

    def get_published_by_slug(self, slug: str) -> BlogPost:
        post = (
            self.db.query(BlogPost)
            .options(joinedload(BlogPost.author))
            .filter(BlogPost.slug == slug, _published())
            .first()
        )
        if not post:
            raise _not_found()
        return post

    def view_post(self, slug: str) -> BlogPost:
        post = self.get_published_by_slug(slug)
        self.db.execute(
            update(BlogPost)
            .where(BlogPost.id == post.id)
            .values(views=BlogPost.views + 1, updated_at=BlogPost.updated_at)
        )
        self.db.commit()
        self.db.refresh(post)
        return post

    def featured(self, limit: int = 3):
        return (
            self.db.query(BlogPost)
            .options(joinedload(BlogPost.author))
            .filter(_published(), BlogPost.is_featured == True)
            .order_by(BlogPost.published_at.desc(), BlogPost.id.desc())
            .limit(limit)
            .all()
        )

    def related(self, slug: str, limit: int = 3):
        """Published posts sharing the category or at least one tag."""
        post = self.get_published_by_slug(slug)
        shared = [BlogPost.category == post.category]
        shared.extend(_tag_condition(tag) for tag in (post.tags or []))
        return (
            self.db.query(BlogPost)
            .options(joinedload(BlogPost.author))
            .filter(BlogPost.id != post.id, _published(), or_(*shared))
            .order_by(BlogPost.published_at.desc(), BlogPost.id.desc())
            .limit(limit)
            .all()
        )

    def categories(self) -> list[dict]:
        rows = self.db.execute(
            select(BlogPost.category, func.count(BlogPost.id))
            .where(_published())
            .group_by(BlogPost.category)
            .order_by(func.count(BlogPost.id).desc())
        ).all()
        return [
            {
                "name": category.value,
                "display_name": display_name(category.value),
                "count": count,
            }
            for category, count in rows
        ]

    def tags(self, limit: int = 20) -> list[dict]:
        # JSON arrays are counted in Python so SQLite and PostgreSQL behave alike
        counter = Counter()
        for (tags,) in self.db.execute(select(BlogPost.tags).where(_published())):
            counter.update(set(tags or []))
        ranked = sorted(counter.items(), key=lambda item: (-item[1], item[0]))
        return [{"name": tag, "count": count} for tag, count in ranked[:limit]]

    # ==================== MUTATIONS ====================

    def _ensure_slug_available(self, slug: str, exclude_id: int | None = None):
        query = self.db.query(BlogPost.id).filter(BlogPost.slug == slug)
        if exclude_id is not None:
            query = query.filter(BlogPost.id != exclude_id)
        if query.first():
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"A post with slug '{slug}' already exists",
            )

    @staticmethod
    def _clean_slug(raw: str) -> str:
        slug = slugify(raw)
        if not slug:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Slug must contain at least one letter or digit",
            )
        return slug

    @staticmethod
    def _apply_content(post: BlogPost, content: str):
        post.content = sanitize_html(content)
        text = BeautifulSoup(post.content, "html.parser").get_text(" ")
        post.read_time = reading_time(text)

    @staticmethod
    def _apply_status(post: BlogPost, new_status: BlogStatus):
        current = post.status or BlogStatus.DRAFT
        if new_status != current and new_status not in ALLOWED_TRANSITIONS[current]:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Cannot change status from {current.value} to {new_status.value}",
            )
        post.status = new_status
        if new_status == BlogStatus.PUBLISHED and post.published_at is None:
            post.published_at = datetime.now(timezone.utc)

    async def create_post(
        self,
        post_data: BlogPostCreate,
        featured_image: UploadFile | None,
        current_user: dict,
    ) -> BlogPost:
        slug = self._clean_slug(post_data.slug or post_data.title)
        self._ensure_slug_available(slug)

        image_url = await StorageService(UploadFolder.BLOG).save(featured_image)

        post = BlogPost(
            title=post_data.title,
            slug=slug,
            excerpt=post_data.excerpt,
            featured_image_url=image_url,
            featured_image_alt=post_data.featured_image_alt or post_data.title,
            author_id=current_user.get("id"),
            category=post_data.category,
            tags=post_data.tags,
            status=BlogStatus.DRAFT,
            is_featured=post_data.is_featured,
            seo={
                "meta_title": post_data.seo_meta_title,
                "meta_description": post_data.seo_meta_description,
                "keywords": post_data.seo_keywords,
            },
        )
        self._apply_content(post, post_data.content)
        self._apply_status(post, post_data.status)
        self.db.add(post)
        self.db.commit()
        logger.info("Blog post %s (%s) created", post.id, post.slug)
        return self.get_post(post.id)

    async def update_post(
        self,
        post_id: int,
        post_data: BlogPostUpdate,
        featured_image: UploadFile | None,
    ) -> BlogPost:
        post = self.get_post(post_id)
        update_data = post_data.model_dump(exclude_unset=True)

        if "slug" in update_data:
            slug = self._clean_slug(update_data.pop("slug") or post.title)
            if slug != post.slug:
                self._ensure_slug_available(slug, exclude_id=post.id)
                post.slug = slug

        if "status" in update_data:
            self._apply_status(post, update_data.pop("status"))
        if "content" in update_data:
            self._apply_content(post, update_data.pop("content"))

        new_image = await StorageService(UploadFolder.BLOG).save(featured_image)
        old_image = None
        if new_image:
            old_image, post.featured_image_url = post.featured_image_url, new_image

        seo = dict(post.seo or {})
        for field in ("meta_title", "meta_description", "keywords"):
            key = f"seo_{field}"
            if key in update_data:
                seo[field] = update_data.pop(key)
        post.seo = seo

        for key, value in update_data.items():
            setattr(post, key, value)

        self.db.commit()
        if old_image:
            delete_by_url(old_image)
        return self.get_post(post_id)

    def delete_post(self, post_id: int) -> None:
        post = self.get_post(post_id)
        image_url = post.featured_image_url
        self.db.delete(post)
        self.db.commit()
        delete_by_url(image_url)
        logger.info("Blog post %s deleted", post_id)
