from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.dependencies import db_dependency, enforce_rate_limit
from app.models.blog_post import BlogCategory
from app.schemas.blog import BlogPostResponse, BlogPostSummary, CategoryCount, TagCount
from app.services.blog_service import PUBLIC_PAGE_SIZE, BlogService
from app.utils.responses import serialize, success

router = APIRouter(
    prefix="/api/blog",
    tags=["blog"],
    dependencies=[Depends(enforce_rate_limit)],
)


def _listing(posts, pagination) -> dict:
    return {
        "posts": serialize(BlogPostSummary, posts),
        "pagination": pagination.to_dict(),
    }


@router.get("")
def list_posts(
    db: db_dependency,
    page: int = 1,
    limit: int = Query(PUBLIC_PAGE_SIZE, ge=1, le=100),
    category: Optional[BlogCategory] = None,
    tag: Optional[str] = None,
    featured: Optional[bool] = None,
    sort: Optional[str] = None,
):
    posts, pagination = BlogService(db).list_public(
        page=page, limit=limit, category=category, tag=tag, featured=featured, sort=sort
    )
    return success(_listing(posts, pagination), "Blog posts retrieved successfully")


@router.get("/post/{slug}")
def get_post(db: db_dependency, slug: str):
    post = BlogService(db).view_post(slug)
    return success(serialize(BlogPostResponse, post), "Blog post retrieved successfully")


@router.get("/post/{slug}/related")
def related_posts(db: db_dependency, slug: str, limit: int = Query(3, ge=1, le=20)):
    posts = BlogService(db).related(slug, limit)
    return success(serialize(BlogPostSummary, posts), "Related posts retrieved successfully")


@router.get("/search/{query}")
def search_posts(
    db: db_dependency,
    query: str,
    page: int = 1,
    limit: int = Query(PUBLIC_PAGE_SIZE, ge=1, le=100),
):
    posts, pagination = BlogService(db).search_public(query, page, limit)
    return success(_listing(posts, pagination), "Search results retrieved successfully")


@router.get("/categories")
def list_categories(db: db_dependency):
    categories = [CategoryCount(**c).model_dump() for c in BlogService(db).categories()]
    return success(categories, "Categories retrieved successfully")


@router.get("/tags")
def list_tags(db: db_dependency, limit: int = Query(20, ge=1, le=100)):
    tags = [TagCount(**t).model_dump() for t in BlogService(db).tags(limit)]
    return success(tags, "Tags retrieved successfully")


@router.get("/featured/list")
def featured_posts(db: db_dependency, limit: int = Query(3, ge=1, le=20)):
    posts = BlogService(db).featured(limit)
    return success(serialize(BlogPostSummary, posts), "Featured posts retrieved successfully")
