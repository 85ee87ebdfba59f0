from typing import Optional

from fastapi import APIRouter, Query, Request, status

from app.dependencies import ContentEditor, db_dependency
from app.models.property import PropertyStatus, PropertyType
from app.schemas.property import PropertyCreate, PropertyResponse, PropertyUpdate
from app.services.property_service import PropertyService
from app.services.storage_service import present
from app.utils.forms import int_list, optional_int, parse_form, read_form
from app.utils.responses import serialize, success

router = APIRouter(prefix="/api/admin/properties", tags=["admin: properties"])


@router.get("")
def list_properties(
    db: db_dependency,
    user: ContentEditor,
    page: int = 1,
    limit: int = Query(20, ge=1, le=100),
    search: Optional[str] = None,
    status: Optional[PropertyStatus] = None,
    property_type: Optional[PropertyType] = Query(None, alias="type"),
    is_active: Optional[bool] = None,
    is_featured: Optional[bool] = None,
    sort: Optional[str] = None,
):
    properties, pagination = PropertyService(db).list_admin(
        page=page,
        limit=limit,
        search=search,
        status=status,
        property_type=property_type,
        is_active=is_active,
        is_featured=is_featured,
        sort=sort,
    )
    return success(
        {
            "properties": serialize(PropertyResponse, properties),
            "pagination": pagination.to_dict(),
        },
        "Properties retrieved successfully",
    )


@router.get("/{property_id}")
def get_property(db: db_dependency, user: ContentEditor, property_id: int):
    property = PropertyService(db).get_property(property_id)
    return success(serialize(PropertyResponse, property), "Property retrieved successfully")


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_property(request: Request, db: db_dependency, user: ContentEditor):
    fields, files = await read_form(request)
    property_data = parse_form(PropertyCreate, fields)
    property = await PropertyService(db).create_property(
        property_data, present(files.get("images")), user
    )
    return success(serialize(PropertyResponse, property), "Property created successfully")


@router.put("/{property_id}")
async def update_property(
    request: Request, db: db_dependency, user: ContentEditor, property_id: int
):
    service = PropertyService(db)
    service.get_property(property_id)

    fields, files = await read_form(request)
    remove_ids = int_list(fields.pop("remove_image_ids", None), "remove_image_ids")
    primary_id = optional_int(fields.pop("primary_image_id", None), "primary_image_id")
    property_data = parse_form(PropertyUpdate, fields)

    property = await service.update_property(
        property_id,
        property_data,
        present(files.get("images")),
        remove_image_ids=remove_ids,
        primary_image_id=primary_id,
    )
    return success(serialize(PropertyResponse, property), "Property updated successfully")


@router.delete("/{property_id}")
def delete_property(db: db_dependency, user: ContentEditor, property_id: int):
    PropertyService(db).delete_property(property_id)
    return success(message="Property deleted successfully")
