from fastapi import APIRouter, Depends

from app.dependencies import db_dependency, enforce_rate_limit
from app.models.setting import SettingCategory
from app.services.setting_service import SettingService
from app.utils.responses import success

router = APIRouter(
    prefix="/api/settings",
    tags=["settings"],
    dependencies=[Depends(enforce_rate_limit)],
)


@router.get("/public")
def public_settings(db: db_dependency):
    return success(SettingService(db).public_values(), "Settings retrieved successfully")


@router.get("/public/{key}")
def public_setting(db: db_dependency, key: str):
    setting = SettingService(db).get_public(key)
    return success({"key": setting.key, "value": setting.value}, "Setting retrieved successfully")


@router.get("/company")
def company_settings(db: db_dependency):
    values = SettingService(db).values_for(SettingCategory.COMPANY, SettingCategory.CONTACT)
    return success(values, "Company information retrieved successfully")


@router.get("/social")
def social_settings(db: db_dependency):
    values = SettingService(db).values_for(SettingCategory.SOCIAL)
    return success(values, "Social media links retrieved successfully")
