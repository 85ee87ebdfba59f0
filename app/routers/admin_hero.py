from fastapi import APIRouter, Request, status

from app.dependencies import AdminUser, db_dependency
from app.schemas.hero import HeroSlideCreate, HeroSlideResponse, HeroSlideUpdate
from app.services.hero_service import HeroService
from app.services.storage_service import present
from app.utils.forms import parse_form, read_form
from app.utils.responses import serialize, success

router = APIRouter(prefix="/api/admin/hero", tags=["admin: hero"])


def _image(files):
    images = present(files.get("image"))
    return images[0] if images else None


@router.get("")
def list_slides(db: db_dependency, user: AdminUser):
    slides = HeroService(db).list_all()
    return success(serialize(HeroSlideResponse, slides), "Hero slides retrieved successfully")


@router.get("/{slide_id}")
def get_slide(db: db_dependency, user: AdminUser, slide_id: int):
    slide = HeroService(db).get_slide(slide_id)
    return success(serialize(HeroSlideResponse, slide), "Hero slide retrieved successfully")


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_slide(request: Request, db: db_dependency, user: AdminUser):
    fields, files = await read_form(request)
    slide_data = parse_form(HeroSlideCreate, fields)
    slide = await HeroService(db).create_slide(slide_data, _image(files))
    return success(serialize(HeroSlideResponse, slide), "Hero slide created successfully")


@router.put("/{slide_id}")
async def update_slide(
    request: Request, db: db_dependency, user: AdminUser, slide_id: int
):
    service = HeroService(db)
    service.get_slide(slide_id)
    fields, files = await read_form(request)
    slide_data = parse_form(HeroSlideUpdate, fields)
    slide = await service.update_slide(slide_id, slide_data, _image(files))
    return success(serialize(HeroSlideResponse, slide), "Hero slide updated successfully")


@router.delete("/{slide_id}")
def delete_slide(db: db_dependency, user: AdminUser, slide_id: int):
    HeroService(db).delete_slide(slide_id)
    return success(message="Hero slide deleted successfully")
