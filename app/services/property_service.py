import logging
from typing import Optional

from sqlalchemy import select, and_, func, update
from sqlalchemy.orm import Session, joinedload, selectinload
from fastapi import HTTPException, UploadFile, status

from app.models.property import Property, PropertyStatus, PropertyType
from app.models.property_images import PropertyImage
from app.models.user import User
from app.schemas.property import PropertyCreate, PropertyUpdate
from app.services.storage_service import StorageService, UploadFolder, delete_by_url
from app.utils.pagination import paginate
from app.utils.query import (
    LIKE_ESCAPE,
    apply_sort,
    escape_like,
    text_search_condition,
)

logger = logging.getLogger(__name__)

SORTABLE_FIELDS = {
    "created_at",
    "updated_at",
    "price",
    "title",
    "views",
    "bedrooms",
    "bathrooms",
    "sqft",
}
SEARCH_COLUMNS = (Property.title, Property.description, Property.city, Property.state)
PUBLIC_PAGE_SIZE = 12


def _not_found(property_id: int):
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Property with ID {property_id} not found",
    )


def _with_relations(query):
    return query.options(selectinload(Property.images), joinedload(Property.agent))


class PropertyService:
    def __init__(self, db: Session):
        self.db = db

    # ==================== QUERIES ====================

    def _page(self, query, page: int, limit: int, sort: str | None, default_sort: str):
        total = self.db.execute(
            select(func.count()).select_from(query.order_by(None).subquery())
        ).scalar_one()
        pagination = paginate(page, limit, total)
        query = apply_sort(query, Property, sort, SORTABLE_FIELDS, default_sort)
        query = query.offset(pagination.skip).limit(pagination.items_per_page)
        rows = self.db.execute(_with_relations(query)).scalars().unique().all()
        return rows, pagination

    def list_public(
        self,
        page: int = 1,
        limit: int = PUBLIC_PAGE_SIZE,
        property_type: Optional[PropertyType] = None,
        status: Optional[PropertyStatus] = None,
        min_price: Optional[float] = None,
        max_price: Optional[float] = None,
        bedrooms: Optional[int] = None,
        bathrooms: Optional[float] = None,
        city: Optional[str] = None,
        state: Optional[str] = None,
        featured: Optional[bool] = None,
        search: Optional[str] = None,
        sort: Optional[str] = None,
    ):
        """Active listings, every supplied filter AND-ed together.

        ``bedrooms``/``bathrooms`` are minimums; ``city``/``state`` match
        case-insensitively anywhere in the value.
        """
        conditions = [Property.is_active == True]

        if property_type:
            conditions.append(Property.property_type == property_type)
        if status:
            conditions.append(Property.status == status)
        if min_price is not None:
            conditions.append(Property.price >= min_price)
        if max_price is not None:
            conditions.append(Property.price <= max_price)
        if bedrooms is not None:
            conditions.append(Property.bedrooms >= bedrooms)
        if bathrooms is not None:
            conditions.append(Property.bathrooms >= bathrooms)
        if city and city.strip():
            conditions.append(
                Property.city.ilike(f"%{escape_like(city.strip())}%", escape=LIKE_ESCAPE)
            )
        if state and state.strip():
            conditions.append(
                Property.state.ilike(f"%{escape_like(state.strip())}%", escape=LIKE_ESCAPE)
            )
        if featured:
            conditions.append(Property.is_featured == True)
        if search and search.strip():
            conditions.append(text_search_condition(search, SEARCH_COLUMNS))

        query = select(Property).where(and_(*conditions))
        return self._page(query, page, limit, sort, "-created_at")

    def list_admin(
        self,
        page: int = 1,
        limit: int = 20,
        search: Optional[str] = None,
        status: Optional[PropertyStatus] = None,
        property_type: Optional[PropertyType] = None,
        is_active: Optional[bool] = None,
        is_featured: Optional[bool] = None,
        sort: Optional[str] = None,
    ):
        conditions = []
        if search and search.strip():
            conditions.append(text_search_condition(search, SEARCH_COLUMNS))
        if status:
            conditions.append(Property.status == status)
        if property_type:
            conditions.append(Property.property_type == property_type)
        if is_active is not None:
            conditions.append(Property.is_active == is_active)
        if is_featured is not None:
            conditions.append(Property.is_featured == is_featured)

        query = select(Property)
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
        query = select(Property).where(
            and_(Property.is_active == True, text_search_condition(term, SEARCH_COLUMNS))
        )
        return self._page(query, page, limit, None, "-created_at")

    def get_property(self, property_id: int, active_only: bool = False) -> Property:
        query = _with_relations(select(Property).where(Property.id == property_id))
        if active_only:
            query = query.where(Property.is_active == True)
        property = self.db.execute(query).scalars().unique().one_or_none()
        if not property:
            raise _not_found(property_id)
        return property

    def view_property(self, property_id: int) -> Property:
        """Public detail fetch; counts one view."""
        property = self.get_property(property_id, active_only=True)
        # Atomic increment; updated_at is pinned so views don't reorder admin lists
        self.db.execute(
            update(Property)
            .where(Property.id == property_id)
            .values(views=Property.views + 1, updated_at=Property.updated_at)
        )
        self.db.commit()
        self.db.refresh(property)
        return property

    def featured(self, limit: int = 6):
        query = (
            select(Property)
            .where(and_(Property.is_active == True, Property.is_featured == True))
            .order_by(Property.created_at.desc(), Property.id.desc())
            .limit(limit)
        )
        return self.db.execute(_with_relations(query)).scalars().unique().all()

    def similar(self, property_id: int, limit: int = 4):
        """Same type and city, price within 20% either side."""
        property = self.get_property(property_id)
        query = (
            select(Property)
            .where(
                and_(
                    Property.id != property.id,
                    Property.is_active == True,
                    Property.property_type == property.property_type,
                    Property.city == property.city,
                    Property.price >= property.price * 0.8,
                    Property.price <= property.price * 1.2,
                )
            )
            .order_by(Property.created_at.desc(), Property.id.desc())
            .limit(limit)
        )
        return self.db.execute(_with_relations(query)).scalars().unique().all()

    def stats(self) -> dict:
        def count(*conditions):
            return self.db.execute(
                select(func.count(Property.id)).where(*conditions)
            ).scalar_one()

        active = Property.is_active == True
        average_price = self.db.execute(
            select(func.avg(Property.price)).where(
                active, Property.status == PropertyStatus.FOR_SALE
            )
        ).scalar()
        return {
            "total_properties": count(active),
            "for_sale": count(active, Property.status == PropertyStatus.FOR_SALE),
            "for_rent": count(active, Property.status == PropertyStatus.FOR_RENT),
            # sold listings are usually deactivated, so count them regardless
            "sold": count(Property.status == PropertyStatus.SOLD),
            "average_price": float(average_price or 0),
        }

    def for_agent(
        self,
        agent_id: int,
        page: int = 1,
        limit: int = PUBLIC_PAGE_SIZE,
        status: Optional[PropertyStatus] = None,
    ):
        conditions = [Property.is_active == True, Property.agent_id == agent_id]
        if status:
            conditions.append(Property.status == status)
        query = select(Property).where(and_(*conditions))
        return self._page(query, page, limit, None, "-created_at")

    def recent_for_agent(self, agent_id: int, limit: int = 6):
        query = (
            select(Property)
            .where(and_(Property.is_active == True, Property.agent_id == agent_id))
            .order_by(Property.created_at.desc(), Property.id.desc())
            .limit(limit)
        )
        return self.db.execute(_with_relations(query)).scalars().unique().all()

    def count_for_agent(self, agent_id: int | None) -> int:
        if agent_id is None:
            return 0
        return self.db.execute(
            select(func.count(Property.id)).where(
                Property.is_active == True, Property.agent_id == agent_id
            )
        ).scalar_one()

    # ==================== MUTATIONS ====================

    def _check_agent(self, agent_id: int | None):
        if agent_id is not None and not self.db.get(User, agent_id):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Agent with ID {agent_id} does not exist",
            )

    async def create_property(
        self,
        property_data: PropertyCreate,
        images: list[UploadFile],
        current_user: dict,
    ) -> Property:
        """Create a listing; the first uploaded image becomes primary."""
        data = property_data.model_dump()
        if data.get("agent_id") is None:
            data["agent_id"] = current_user.get("id")
        self._check_agent(data["agent_id"])

        urls = await StorageService(UploadFolder.PROPERTIES).save_all(images)

        new_property = Property(**data)
        new_property.images = [
            PropertyImage(
                url=url,
                alt_text=new_property.title,
                is_primary=index == 0,
                order_index=index,
            )
            for index, url in enumerate(urls)
        ]
        self.db.add(new_property)
        self.db.commit()
        logger.info(
            "Property %s created by user %s", new_property.id, current_user.get("id")
        )
        return self.get_property(new_property.id)

    async def update_property(
        self,
        property_id: int,
        property_data: PropertyUpdate,
        images: list[UploadFile],
        remove_image_ids: list[int] | None = None,
        primary_image_id: int | None = None,
    ) -> Property:
        """Merge provided fields; existing images survive unless removed.

        New uploads are appended after the current images. If the primary
        image is removed (or none existed) the first remaining image is
        promoted so a listing with images always has exactly one primary.
        """
        property = self.get_property(property_id)

        update_data = property_data.model_dump(exclude_unset=True)
        if "agent_id" in update_data:
            self._check_agent(update_data["agent_id"])

        remove_ids = set(remove_image_ids or [])
        kept_ids = {img.id for img in property.images if img.id not in remove_ids}
        if primary_image_id is not None and primary_image_id not in kept_ids:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Image {primary_image_id} does not belong to this property",
            )

        urls = await StorageService(UploadFolder.PROPERTIES).save_all(images)

        removed_urls = [img.url for img in property.images if img.id in remove_ids]
        property.images = [img for img in property.images if img.id not in remove_ids]

        next_index = max((img.order_index for img in property.images), default=-1) + 1
        for offset, url in enumerate(urls):
            property.images.append(
                PropertyImage(
                    url=url,
                    alt_text=update_data.get("title", property.title),
                    is_primary=False,
                    order_index=next_index + offset,
                )
            )

        if primary_image_id is not None:
            for img in property.images:
                img.is_primary = img.id == primary_image_id
        elif property.images and not any(img.is_primary for img in property.images):
            property.images[0].is_primary = True

        for key, value in update_data.items():
            setattr(property, key, value)

        self.db.commit()
        for url in removed_urls:
            delete_by_url(url)
        return self.get_property(property_id)

    def delete_property(self, property_id: int) -> None:
        property = self.get_property(property_id)
        urls = [img.url for img in property.images]
        self.db.delete(property)
        self.db.commit()
        for url in urls:
            delete_by_url(url)
        logger.info("Property %s deleted", property_id)
