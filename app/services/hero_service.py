import logging
from datetime import datetime, timezone

from fastapi import HTTPException, UploadFile, status
from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.models.hero_slide import HeroSlide
from app.models.property import Property
from app.schemas.hero import HeroSlideCreate, HeroSlideUpdate
from app.services.storage_service import StorageService, UploadFolder, delete_by_url
from app.utils.dates import as_utc

logger = logging.getLogger(__name__)


def _not_found():
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND, detail="Hero slide not found"
    )


def currently_active_filter(now: datetime):
    """SQL form of HeroSlide.is_currently_active."""
    return (
        HeroSlide.is_active == True,
        or_(HeroSlide.start_date.is_(None), HeroSlide.start_date <= now),
        or_(HeroSlide.end_date.is_(None), HeroSlide.end_date >= now),
    )


class HeroService:
    def __init__(self, db: Session):
        self.db = db

    def _ordered(self):
        return self.db.query(HeroSlide).order_by(
            HeroSlide.display_order.asc(), HeroSlide.id.asc()
        )

    def list_visible(self, now: datetime | None = None) -> list[HeroSlide]:
        now = now or datetime.now(timezone.utc)
        return self._ordered().filter(*currently_active_filter(now)).all()

    def get_visible(self, slide_id: int, now: datetime | None = None) -> HeroSlide:
        now = now or datetime.now(timezone.utc)
        slide = (
            self.db.query(HeroSlide)
            .filter(HeroSlide.id == slide_id, *currently_active_filter(now))
            .first()
        )
        if not slide:
            raise _not_found()
        return slide

    def list_all(self) -> list[HeroSlide]:
        return self._ordered().all()

    def get_slide(self, slide_id: int) -> HeroSlide:
        slide = self.db.query(HeroSlide).filter(HeroSlide.id == slide_id).first()
        if not slide:
            raise _not_found()
        return slide

    def _check_property(self, property_id: int | None):
        if property_id is not None and not self.db.get(Property, property_id):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Property with ID {property_id} does not exist",
            )

    async def create_slide(
        self, slide_data: HeroSlideCreate, image: UploadFile | None
    ) -> HeroSlide:
        self._check_property(slide_data.property_id)
        image_url = await StorageService(UploadFolder.HERO).save(image)
        if not image_url:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Hero image is required",
            )

        data = slide_data.model_dump()
        if not data.get("image_alt"):
            data["image_alt"] = slide_data.title
        slide = HeroSlide(**data, image_url=image_url)
        self.db.add(slide)
        self.db.commit()
        self.db.refresh(slide)
        logger.info("Hero slide %s created", slide.id)
        return slide

    async def update_slide(
        self, slide_id: int, slide_data: HeroSlideUpdate, image: UploadFile | None
    ) -> HeroSlide:
        slide = self.get_slide(slide_id)
        update_data = slide_data.model_dump(exclude_unset=True)
        if "property_id" in update_data:
            self._check_property(update_data["property_id"])

        start = update_data.get("start_date", slide.start_date)
        end = update_data.get("end_date", slide.end_date)
        if start and end and as_utc(end) < as_utc(start):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="end_date must not be before start_date",
            )

        new_image = await StorageService(UploadFolder.HERO).save(image)
        old_image = None
        if new_image:
            old_image, slide.image_url = slide.image_url, new_image

        for key, value in update_data.items():
            setattr(slide, key, value)

        self.db.commit()
        self.db.refresh(slide)
        if old_image:
            delete_by_url(old_image)
        return slide

    def delete_slide(self, slide_id: int) -> None:
        slide = self.get_slide(slide_id)
        image_url = slide.image_url
        self.db.delete(slide)
        self.db.commit()
        delete_by_url(image_url)
        logger.info("Hero slide %s deleted", slide_id)
