import logging
from typing import Optional

from fastapi import HTTPException, UploadFile, status
from sqlalchemy import and_, func, or_, select
from sqlalchemy.orm import Session

from app.models.user import User, UserRole
from app.schemas.user import PasswordChange, UserCreate, UserUpdate
from app.services.auth_service import get_password_hash, verify_password
from app.services.storage_service import StorageService, UploadFolder, delete_by_url
from app.utils.pagination import paginate
from app.utils.query import apply_sort, text_search_condition

logger = logging.getLogger(__name__)

SORTABLE_FIELDS = {"created_at", "updated_at", "username", "email", "last_login"}
SEARCH_COLUMNS = (User.username, User.email, User.first_name, User.last_name)


def _not_found():
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")


class UserService:
    def __init__(self, db: Session):
        self.db = db

    def list_users(
        self,
        page: int = 1,
        limit: int = 20,
        search: Optional[str] = None,
        role: Optional[UserRole] = None,
        is_active: Optional[bool] = None,
        sort: Optional[str] = None,
    ):
        conditions = []
        if search and search.strip():
            conditions.append(text_search_condition(search, SEARCH_COLUMNS))
        if role:
            conditions.append(User.role == role)
        if is_active is not None:
            conditions.append(User.is_active == is_active)

        query = select(User)
        if conditions:
            query = query.where(and_(*conditions))
        total = self.db.execute(
            select(func.count()).select_from(query.subquery())
        ).scalar_one()
        pagination = paginate(page, limit, total)
        query = apply_sort(query, User, sort, SORTABLE_FIELDS, "-created_at")
        users = (
            self.db.execute(query.offset(pagination.skip).limit(pagination.items_per_page))
            .scalars()
            .all()
        )
        return users, pagination

    def get_user(self, user_id: int) -> User:
        user = self.db.get(User, user_id)
        if not user:
            raise _not_found()
        return user

    def _ensure_unique(self, username: str | None, email: str | None, exclude_id=None):
        checks = []
        if username:
            checks.append(User.username == username.strip().lower())
        if email:
            checks.append(User.email == email.strip().lower())
        if not checks:
            return
        query = self.db.query(User.id).filter(or_(*checks))
        if exclude_id is not None:
            query = query.filter(User.id != exclude_id)
        if query.first():
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Username or email already exists",
            )

    def _active_admin_count(self) -> int:
        return (
            self.db.query(func.count(User.id))
            .filter(User.role == UserRole.ADMIN, User.is_active == True)
            .scalar()
        )

    def _is_last_active_admin(self, user: User) -> bool:
        if user.role != UserRole.ADMIN or not user.is_active:
            return False
        return self._active_admin_count() <= 1

    async def create_user(self, user_data: UserCreate, avatar: UploadFile | None) -> User:
        self._ensure_unique(user_data.username, user_data.email)
        avatar_url = await StorageService(UploadFolder.AVATARS).save(avatar)

        user = User(
            username=user_data.username,
            email=user_data.email,
            password_hash=get_password_hash(user_data.password),
            first_name=user_data.first_name,
            last_name=user_data.last_name,
            role=user_data.role,
            is_active=user_data.is_active,
            avatar=avatar_url,
        )
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        logger.info("User %s created with role %s", user.username, user.role.value)
        return user

    async def update_user(
        self, user_id: int, user_data: UserUpdate, avatar: UploadFile | None
    ) -> User:
        user = self.get_user(user_id)
        update_data = user_data.model_dump(exclude_unset=True)
        self._ensure_unique(
            update_data.get("username"), update_data.get("email"), exclude_id=user.id
        )

        demoted = "role" in update_data and update_data["role"] != UserRole.ADMIN
        deactivated = update_data.get("is_active") is False
        if (demoted or deactivated) and self._is_last_active_admin(user):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Cannot demote or deactivate the last active admin user",
            )

        password = update_data.pop("password", None)
        if password:
            user.password_hash = get_password_hash(password)

        new_avatar = await StorageService(UploadFolder.AVATARS).save(avatar)
        old_avatar = None
        if new_avatar:
            old_avatar, user.avatar = user.avatar, new_avatar

        for key, value in update_data.items():
            setattr(user, key, value)

        self.db.commit()
        self.db.refresh(user)
        if old_avatar:
            delete_by_url(old_avatar)
        return user

    def delete_user(self, user_id: int, current_user: dict) -> None:
        user = self.get_user(user_id)
        if user.id == current_user.get("id"):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Cannot delete your own account",
            )
        if self._is_last_active_admin(user):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Cannot delete the last admin user",
            )
        avatar = user.avatar
        self.db.delete(user)
        self.db.commit()
        delete_by_url(avatar)
        logger.info("User %s deleted by %s", user_id, current_user.get("id"))

    def change_password(self, user_id: int, data: PasswordChange) -> None:
        if data.new_password != data.confirm_password:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="New passwords do not match",
            )
        user = self.get_user(user_id)
        if not verify_password(data.current_password, user.password_hash):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Current password is incorrect",
            )
        user.password_hash = get_password_hash(data.new_password)
        self.db.commit()
        logger.info("User %s changed their password", user.username)
