from fastapi import APIRouter, Request, Response, status

from app.config import settings
from app.dependencies import CurrentUser, db_dependency
from app.limits import limiter
from app.schemas.user import LoginRequest, UserResponse
from app.services.auth_service import (
    SessionService,
    clear_session_cookie,
    principal_from_user,
    set_session_cookie,
)
from app.services.user_service import UserService
from app.utils.forms import parse_form, read_form
from app.utils.responses import serialize, success

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/login", status_code=status.HTTP_200_OK)
@limiter.limit(settings.LOGIN_RATE_LIMIT)
async def login(request: Request, response: Response, db: db_dependency):
    fields, _ = await read_form(request)
    credentials = parse_form(LoginRequest, fields)
    user, token, expires_at = SessionService(db).login(
        credentials.username, credentials.password, credentials.remember_me
    )
    set_session_cookie(response, token, expires_at)
    return success(
        {"user": principal_from_user(user), "expires_at": expires_at.isoformat()},
        "Login successful",
    )


@router.post("/logout", status_code=status.HTTP_200_OK)
def logout(request: Request, response: Response, db: db_dependency):
    SessionService(db).logout(request.cookies.get(settings.SESSION_COOKIE_NAME))
    clear_session_cookie(response)
    return success(message="Logged out successfully")


@router.get("/me", status_code=status.HTTP_200_OK)
def me(user: CurrentUser, db: db_dependency):
    current = UserService(db).get_user(user.get("id"))
    return success(serialize(UserResponse, current), "User retrieved successfully")
