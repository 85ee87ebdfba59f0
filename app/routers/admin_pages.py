import logging
from pathlib import Path
from urllib.parse import urlencode

from fastapi import APIRouter, HTTPException, Request, status
from fastapi.responses import RedirectResponse
from fastapi.templating import Jinja2Templates

from app.config import settings
from app.dependencies import ADMIN_ONLY, AdminPage, OptionalPrincipal, db_dependency
from app.limits import limiter
from app.schemas.user import LoginRequest, PasswordChange
from app.services.auth_service import (
    SessionService,
    clear_session_cookie,
    set_session_cookie,
)
from app.services.dashboard_service import DashboardService
from app.services.setting_service import SettingService
from app.services.user_service import UserService
from app.utils.forms import parse_form, read_form
from app.utils.text import display_name

logger = logging.getLogger(__name__)

templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent.parent / "templates"))
templates.env.filters["display_name"] = display_name

router = APIRouter(prefix="/admin", tags=["admin pages"], include_in_schema=False)

DEFAULT_NEXT = "/admin/dashboard"


def safe_next(value: str | None) -> str:
    """Only same-site absolute paths are followed after login."""
    if not value or not value.startswith("/") or value.startswith("//") or "\\" in value:
        return DEFAULT_NEXT
    return value


def _error_message(exc: HTTPException) -> str:
    if isinstance(exc.detail, dict):
        errors = exc.detail.get("errors") or []
        if errors:
            return errors[0]["message"]
        return exc.detail.get("message", "Request failed")
    return str(exc.detail)


def _redirect(url: str, **params) -> RedirectResponse:
    query = {k: v for k, v in params.items() if v}
    if query:
        url = f"{url}?{urlencode(query)}"
    return RedirectResponse(url, status_code=status.HTTP_303_SEE_OTHER)


@router.get("")
def admin_root():
    return _redirect(DEFAULT_NEXT)


@router.get("/login")
def login_page(request: Request, principal: OptionalPrincipal):
    next_path = safe_next(request.query_params.get("next"))
    if principal and principal.get("role") in ADMIN_ONLY:
        return _redirect(next_path)
    return templates.TemplateResponse(
        request,
        "login.html",
        {
            "title": "Admin Login",
            "error": request.query_params.get("error"),
            "next": next_path,
        },
    )


@router.post("/login")
@limiter.limit(settings.LOGIN_RATE_LIMIT)
async def login_submit(request: Request, db: db_dependency):
    fields, _ = await read_form(request)
    next_path = safe_next(fields.pop("next", None))
    try:
        credentials = parse_form(LoginRequest, fields)
        _, token, expires_at = SessionService(db).login(
            credentials.username,
            credentials.password,
            credentials.remember_me,
            allowed_roles=ADMIN_ONLY,
        )
    except HTTPException as exc:
        return templates.TemplateResponse(
            request,
            "login.html",
            {
                "title": "Admin Login",
                "error": _error_message(exc),
                "next": next_path,
                "username": fields.get("username", ""),
            },
            status_code=exc.status_code,
        )

    response = _redirect(next_path)
    set_session_cookie(response, token, expires_at)
    return response


@router.api_route("/logout", methods=["GET", "POST"])
def logout(request: Request, db: db_dependency):
    SessionService(db).logout(request.cookies.get(settings.SESSION_COOKIE_NAME))
    response = _redirect("/admin/login")
    clear_session_cookie(response)
    return response


@router.get("/dashboard")
def dashboard_page(request: Request, db: db_dependency, user: AdminPage):
    overview = DashboardService(db).overview()
    return templates.TemplateResponse(
        request,
        "dashboard.html",
        {"title": "Dashboard", "user": user, **overview},
    )


@router.get("/settings")
def settings_page(request: Request, db: db_dependency, user: AdminPage):
    return templates.TemplateResponse(
        request,
        "settings.html",
        {
            "title": "Settings",
            "user": user,
            "grouped": SettingService(db).grouped(),
            "success": request.query_params.get("success"),
            "error": request.query_params.get("error"),
        },
    )


@router.post("/settings/password")
async def change_password(request: Request, db: db_dependency, user: AdminPage):
    fields, _ = await read_form(request)
    try:
        data = parse_form(PasswordChange, fields)
        UserService(db).change_password(user.get("id"), data)
    except HTTPException as exc:
        return _redirect("/admin/settings", error=_error_message(exc))
    return _redirect("/admin/settings", success="Password changed successfully")
