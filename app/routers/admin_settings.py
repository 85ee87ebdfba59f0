from fastapi import APIRouter, Request

from app.dependencies import AdminUser, db_dependency
from app.schemas.setting import (
    BulkSettingsUpdate,
    ContactSettingsUpdate,
    SettingResponse,
    SettingUpsert,
    SocialSettingsUpdate,
)
from app.schemas.user import PasswordChange
from app.services.setting_service import SettingService
from app.services.user_service import UserService
from app.utils.forms import parse_form, read_form
from app.utils.responses import success

router = APIRouter(prefix="/api/admin/settings", tags=["admin: settings"])


def _dump(settings) -> list[dict]:
    return [SettingResponse.from_model(s).model_dump(mode="json") for s in settings]


@router.get("")
def list_settings(db: db_dependency, user: AdminUser):
    grouped = {
        category: _dump(settings)
        for category, settings in SettingService(db).grouped().items()
    }
    return success(grouped, "Settings retrieved successfully")


@router.post("/bulk")
def bulk_update_settings(db: db_dependency, user: AdminUser, payload: BulkSettingsUpdate):
    updated = SettingService(db).bulk_upsert(payload.settings)
    return success(_dump(updated), f"{len(updated)} settings updated successfully")


@router.post("/contact")
async def update_contact_settings(request: Request, db: db_dependency, user: AdminUser):
    fields, _ = await read_form(request)
    data = parse_form(ContactSettingsUpdate, fields)
    updated = SettingService(db).update_contact(data.model_dump(exclude_none=True))
    return success(_dump(updated), "Contact information updated successfully")


@router.post("/social")
async def update_social_settings(request: Request, db: db_dependency, user: AdminUser):
    fields, _ = await read_form(request)
    data = parse_form(SocialSettingsUpdate, fields)
    updated = SettingService(db).update_social(data.model_dump(exclude_none=True))
    return success(_dump(updated), "Social media links updated successfully")


@router.post("/password")
async def change_password(request: Request, db: db_dependency, user: AdminUser):
    fields, _ = await read_form(request)
    data = parse_form(PasswordChange, fields)
    UserService(db).change_password(user.get("id"), data)
    return success(message="Password changed successfully")


@router.get("/{key}")
def get_setting(db: db_dependency, user: AdminUser, key: str):
    setting = SettingService(db).get(key)
    return success(SettingResponse.from_model(setting).model_dump(mode="json"))


@router.put("/{key}")
def upsert_setting(db: db_dependency, user: AdminUser, key: str, payload: SettingUpsert):
    setting = SettingService(db).upsert(
        key,
        payload.value,
        description=payload.description,
        category=payload.category,
        is_editable=payload.is_editable,
    )
    return success(
        SettingResponse.from_model(setting).model_dump(mode="json"),
        "Setting updated successfully",
    )


@router.delete("/{key}")
def delete_setting(db: db_dependency, user: AdminUser, key: str):
    SettingService(db).delete(key)
    return success(message="Setting deleted successfully")
