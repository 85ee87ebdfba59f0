from enum import Enum
from typing import Annotated, Callable

from fastapi import Depends, HTTPException, Request
from slowapi.util import get_remote_address
from starlette import status
from sqlalchemy.orm import Session

from app.config import settings
from app.database import SessionLocal
from app.exceptions import AccessDenied, LoginRequired
from app.models.user import UserRole
from app.services.auth_service import SessionService


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


db_dependency = Annotated[Session, Depends(get_db)]


class FailureMode(str, Enum):
    """How an authorization failure is reported to the client."""

    JSON = "json"
    RENDER = "render"


ADMIN_ONLY = frozenset({UserRole.ADMIN.value})
CONTENT_EDITORS = frozenset(
    {UserRole.ADMIN.value, UserRole.MANAGER.value, UserRole.AGENT.value}
)


def get_optional_principal(request: Request, db: db_dependency) -> dict | None:
    """Resolve the session cookie once per request; never blocks."""
    if hasattr(request.state, "principal"):
        return request.state.principal
    token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    principal = SessionService(db).resolve(token)
    request.state.principal = principal
    return principal


OptionalPrincipal = Annotated[dict | None, Depends(get_optional_principal)]


def _next_path(request: Request) -> str:
    path = request.url.path
    if request.url.query:
        path = f"{path}?{request.url.query}"
    return path


def _unauthenticated(request: Request, failure: FailureMode):
    if failure is FailureMode.RENDER:
        raise LoginRequired(next_path=_next_path(request))
    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Authentication required",
    )


def require_auth(failure: FailureMode = FailureMode.JSON) -> Callable[..., dict]:
    def dependency(request: Request, principal: OptionalPrincipal) -> dict:
        if not principal:
            _unauthenticated(request, failure)
        return principal

    return dependency


def require_role(
    *roles: str, failure: FailureMode = FailureMode.JSON
) -> Callable[..., dict]:
    allowed = {r.value if isinstance(r, UserRole) else r for r in roles}

    def dependency(request: Request, principal: OptionalPrincipal) -> dict:
        if not principal:
            _unauthenticated(request, failure)

        if principal.get("role") not in allowed:
            if failure is FailureMode.RENDER:
                raise AccessDenied()
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Insufficient permissions",
            )

        return principal

    return dependency


def enforce_rate_limit(request: Request) -> None:
    if not settings.RATE_LIMIT_ENABLED:
        return
    rate_limiter = getattr(request.app.state, "rate_limiter", None)
    if rate_limiter is None:
        return
    rate_limiter.hit(get_remote_address(request))


AdminUser = Annotated[dict, Depends(require_role(*ADMIN_ONLY))]
ContentEditor = Annotated[dict, Depends(require_role(*CONTENT_EDITORS))]
CurrentUser = Annotated[dict, Depends(require_auth())]
AdminPage = Annotated[
    dict, Depends(require_role(*ADMIN_ONLY, failure=FailureMode.RENDER))
]
