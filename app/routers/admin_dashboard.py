from fastapi import APIRouter
from fastapi.encoders import jsonable_encoder

from app.dependencies import AdminUser, db_dependency
from app.services.dashboard_service import DashboardService
from app.utils.responses import success

router = APIRouter(prefix="/api/admin/dashboard", tags=["admin: dashboard"])


@router.get("")
def dashboard(db: db_dependency, user: AdminUser):
    return success(
        jsonable_encoder(DashboardService(db).overview()),
        "Dashboard data retrieved successfully",
    )
