from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.dependencies import db_dependency, enforce_rate_limit
from app.models.property import PropertyStatus, PropertyType
from app.schemas.property import PropertyResponse, PropertyStats
from app.services.property_service import PUBLIC_PAGE_SIZE, PropertyService
from app.utils.responses import serialize, success

router = APIRouter(
    prefix="/api/properties",
    tags=["properties"],
    dependencies=[Depends(enforce_rate_limit)],
)


def _listing(properties, pagination) -> dict:
    return {
        "properties": serialize(PropertyResponse, properties),
        "pagination": pagination.to_dict(),
    }


@router.get("")
def list_properties(
    db: db_dependency,
    page: int = 1,
    limit: int = Query(PUBLIC_PAGE_SIZE, ge=1, le=100),
    property_type: Optional[PropertyType] = Query(None, alias="type"),
    status: Optional[PropertyStatus] = Query(None, description="Listing status"),
    min_price: Optional[float] = Query(None, ge=0),
    max_price: Optional[float] = Query(None, ge=0),
    bedrooms: Optional[int] = Query(None, ge=0, description="Minimum bedrooms"),
    bathrooms: Optional[float] = Query(None, ge=0, description="Minimum bathrooms"),
    city: Optional[str] = Query(None, description="City (partial match)"),
    state: Optional[str] = Query(None, description="State (partial match)"),
    featured: Optional[bool] = None,
    search: Optional[str] = None,
    sort: Optional[str] = Query(None, description="Field name, '-' prefix for descending"),
):
    properties, pagination = PropertyService(db).list_public(
        page=page,
        limit=limit,
        property_type=property_type,
        status=status,
        min_price=min_price,
        max_price=max_price,
        bedrooms=bedrooms,
        bathrooms=bathrooms,
        city=city,
        state=state,
        featured=featured,
        search=search,
        sort=sort,
    )
    return success(_listing(properties, pagination), "Properties retrieved successfully")


# Fixed paths are declared before /{property_id}


@router.get("/search/{query}")
def search_properties(
    db: db_dependency,
    query: str,
    page: int = 1,
    limit: int = Query(PUBLIC_PAGE_SIZE, ge=1, le=100),
):
    properties, pagination = PropertyService(db).search_public(query, page, limit)
    return success(_listing(properties, pagination), "Search results retrieved successfully")


@router.get("/featured/list")
def featured_properties(db: db_dependency, limit: int = Query(6, ge=1, le=50)):
    properties = PropertyService(db).featured(limit)
    return success(
        serialize(PropertyResponse, properties), "Featured properties retrieved successfully"
    )


@router.get("/stats/overview")
def property_stats(db: db_dependency):
    stats = PropertyStats(**PropertyService(db).stats())
    return success(stats.model_dump(), "Property statistics retrieved successfully")


@router.get("/{property_id}")
def get_property(db: db_dependency, property_id: int):
    property = PropertyService(db).view_property(property_id)
    return success(serialize(PropertyResponse, property), "Property retrieved successfully")


@router.get("/{property_id}/similar")
def similar_properties(
    db: db_dependency, property_id: int, limit: int = Query(4, ge=1, le=20)
):
    properties = PropertyService(db).similar(property_id, limit)
    return success(
        serialize(PropertyResponse, properties), "Similar properties retrieved successfully"
    )
