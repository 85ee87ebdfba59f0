from typing import Optional

from fastapi import APIRouter, Query, Request, status

from app.dependencies import ContentEditor, db_dependency
from app.models.blog_post import BlogCategory, BlogStatus
from app.schemas.blog import BlogPostCreate, BlogPostResponse, BlogPostSummary, BlogPostUpdate
from app.services.blog_service import BlogService
from app.services.storage_service import present
from app.utils.forms import parse_form, read_form
from app.utils.responses import serialize, success

router = APIRouter(prefix="/api/admin/blog", tags=["admin: blog"])


def _featured_image(files):
    images = present(files.get("featured_image"))
    return images[0] if images else None


@router.get("")
def list_posts(
    db: db_dependency,
    user: ContentEditor,
    page: int = 1,
    limit: int = Query(20, ge=1, le=100),
    search: Optional[str] = None,
    status: Optional[BlogStatus] = None,
    category: Optional[BlogCategory] = None,
    sort: Optional[str] = None,
):
    posts, pagination = BlogService(db).list_admin(
        page=page,
        limit=limit,
        search=search,
        status_filter=status,
        category=category,
        sort=sort,
    )
    return success(
        {"posts": serialize(BlogPostSummary, posts), "pagination": pagination.to_dict()},
        "Blog posts retrieved successfully",
    )


@router.get("/{post_id}")
def get_post(db: db_dependency, user: ContentEditor, post_id: int):
    post = BlogService(db).get_post(post_id)
    return success(serialize(BlogPostResponse, post), "Blog post retrieved successfully")


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_post(request: Request, db: db_dependency, user: ContentEditor):
    fields, files = await read_form(request)
    post_data = parse_form(BlogPostCreate, fields)
    post = await BlogService(db).create_post(post_data, _featured_image(files), user)
    return success(serialize(BlogPostResponse, post), "Blog post created successfully")


@router.put("/{post_id}")
async def update_post(
    request: Request, db: db_dependency, user: ContentEditor, post_id: int
):
    service = BlogService(db)
    service.get_post(post_id)
    fields, files = await read_form(request)
    post_data = parse_form(BlogPostUpdate, fields)
    post = await service.update_post(post_id, post_data, _featured_image(files))
    return success(serialize(BlogPostResponse, post), "Blog post updated successfully")


@router.delete("/{post_id}")
def delete_post(db: db_dependency, user: ContentEditor, post_id: int):
    BlogService(db).delete_post(post_id)
    return success(message="Blog post deleted successfully")
