from typing import Optional

from fastapi import APIRouter, Query, Request, status

from app.dependencies import AdminUser, db_dependency
from app.models.user import UserRole
from app.schemas.user import UserCreate, UserResponse, UserUpdate
from app.services.storage_service import present
from app.services.user_service import UserService
from app.utils.forms import parse_form, read_form
from app.utils.responses import serialize, success

router = APIRouter(prefix="/api/admin/users", tags=["admin: users"])


def _avatar(files):
    avatars = present(files.get("avatar"))
    return avatars[0] if avatars else None


@router.get("")
def list_users(
    db: db_dependency,
    user: AdminUser,
    page: int = 1,
    limit: int = Query(20, ge=1, le=100),
    search: Optional[str] = None,
    role: Optional[UserRole] = None,
    is_active: Optional[bool] = None,
    sort: Optional[str] = None,
):
    users, pagination = UserService(db).list_users(
        page=page, limit=limit, search=search, role=role, is_active=is_active, sort=sort
    )
    return success(
        {"users": serialize(UserResponse, users), "pagination": pagination.to_dict()},
        "Users retrieved successfully",
    )


@router.get("/{user_id}")
def get_user(db: db_dependency, user: AdminUser, user_id: int):
    found = UserService(db).get_user(user_id)
    return success(serialize(UserResponse, found), "User retrieved successfully")


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_user(request: Request, db: db_dependency, user: AdminUser):
    fields, files = await read_form(request)
    user_data = parse_form(UserCreate, fields)
    created = await UserService(db).create_user(user_data, _avatar(files))
    return success(serialize(UserResponse, created), "User created successfully")


@router.put("/{user_id}")
async def update_user(request: Request, db: db_dependency, user: AdminUser, user_id: int):
    service = UserService(db)
    service.get_user(user_id)
    fields, files = await read_form(request)
    user_data = parse_form(UserUpdate, fields)
    updated = await service.update_user(user_id, user_data, _avatar(files))
    return success(serialize(UserResponse, updated), "User updated successfully")


@router.delete("/{user_id}")
def delete_user(db: db_dependency, user: AdminUser, user_id: int):
    UserService(db).delete_user(user_id, user)
    return success(message="User deleted successfully")
