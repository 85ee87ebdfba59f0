from fastapi import APIRouter, Depends

from app.dependencies import db_dependency, enforce_rate_limit
from app.schemas.hero import HeroSlideResponse
from app.services.hero_service import HeroService
from app.utils.responses import serialize, success

router = APIRouter(
    prefix="/api/hero",
    tags=["hero"],
    dependencies=[Depends(enforce_rate_limit)],
)


@router.get("")
def list_hero_slides(db: db_dependency):
    slides = HeroService(db).list_visible()
    return success(serialize(HeroSlideResponse, slides), "Hero slides retrieved successfully")


@router.get("/{slide_id}")
def get_hero_slide(db: db_dependency, slide_id: int):
    slide = HeroService(db).get_visible(slide_id)
    return success(serialize(HeroSlideResponse, slide), "Hero slide retrieved successfully")
