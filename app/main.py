import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from urllib.parse import urlencode

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import (
    IntegrityError,
    OperationalError,
    SQLAlchemyError,
    TimeoutError as SQLTimeoutError,
)
from starlette import status
from starlette.exceptions import HTTPException as StarletteHTTPException

from app import models  # noqa: F401  registers every table on Base.metadata
from app.config import settings
from app.database import Base, SessionLocal, engine, wait_for_database
from app.exceptions import AccessDenied, LoginRequired, RateLimitExceeded
from app.limits import FixedWindowRateLimiter, LoginRateLimitExceeded, limiter
from app.logging_config import configure_logging
from app.Middleware.request_logging import request_logging_middleware
from app.models.user import User, UserRole
from app.routers import (
    admin_blog,
    admin_dashboard,
    admin_hero,
    admin_pages,
    admin_properties,
    admin_settings,
    admin_team,
    admin_users,
    auth,
    blog,
    contact,
    hero,
    properties,
    team,
)
from app.routers import settings as settings_router
from app.scripts.seed import create_admin_user
from app.services.auth_service import SessionService
from app.utils.responses import error_body

logger = logging.getLogger(__name__)


def _bootstrap():
    if not wait_for_database():
        logger.error("Database is unreachable; requests will fail until it recovers")
        return
    # In production, use Alembic migrations; only SQLite dev databases are created here
    if settings.DATABASE_URL.startswith("sqlite"):
        Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        if not db.query(User.id).filter(User.role == UserRole.ADMIN).first():
            create_admin_user(db)
        SessionService(db).purge_expired()
    except SQLAlchemyError as exc:
        logger.error("Startup bootstrap failed: %s", exc)
    finally:
        db.close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    _bootstrap()
    logger.info("Server starting in %s mode on port %s", settings.ENVIRONMENT, settings.PORT)
    yield


app = FastAPI(title="Estate API", lifespan=lifespan)
app.middleware("http")(request_logging_middleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Login endpoints use the slowapi limiter; the public API uses the fixed window one
app.state.limiter = limiter
app.state.rate_limiter = FixedWindowRateLimiter.from_settings()


def _error(status_code: int, message: str, details=None, headers=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=error_body(message, details, include_details=not settings.is_production),
        headers=headers,
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if isinstance(exc.detail, dict):
        message = exc.detail.get("message", "Request failed")
        details = exc.detail.get("errors")
    else:
        message, details = str(exc.detail), None
    return _error(exc.status_code, message, details, getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    details = [
        {"field": ".".join(str(p) for p in err["loc"]), "message": err["msg"]}
        for err in exc.errors()
    ]
    return _error(status.HTTP_400_BAD_REQUEST, "Validation failed", details)


@app.exception_handler(IntegrityError)
async def integrity_error_handler(request: Request, exc: IntegrityError):
    logger.warning("Integrity error on %s: %s", request.url.path, exc.orig)
    return _error(status.HTTP_409_CONFLICT, "Resource conflicts with existing data")


@app.exception_handler(OperationalError)
async def database_operational_error_handler(request: Request, exc: OperationalError):
    """Handle database connection/operation errors"""
    logger.error(f"Database operational error: {exc}", exc_info=True)
    error_msg = str(exc).lower()

    if "timeout" in error_msg:
        return _error(
            status.HTTP_504_GATEWAY_TIMEOUT, "Database query timeout. Please try again."
        )
    if "could not connect" in error_msg or "connection" in error_msg:
        return _error(
            status.HTTP_503_SERVICE_UNAVAILABLE,
            "Database connection error. Please try again.",
        )
    return _error(status.HTTP_503_SERVICE_UNAVAILABLE, "Database unavailable")


@app.exception_handler(SQLTimeoutError)
async def database_timeout_handler(request: Request, exc: SQLTimeoutError):
    logger.error(f"Database pool timeout: {exc}")
    return _error(
        status.HTTP_503_SERVICE_UNAVAILABLE, "Database is busy. Please try again."
    )


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    """Handle general SQLAlchemy errors"""
    logger.error(f"Database error: {exc}", exc_info=True)
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Database error occurred")


@app.exception_handler(LoginRequired)
async def login_required_handler(request: Request, exc: LoginRequired):
    query = urlencode({"next": exc.next_path})
    return RedirectResponse(f"/admin/login?{query}", status_code=status.HTTP_303_SEE_OTHER)


@app.exception_handler(AccessDenied)
async def access_denied_handler(request: Request, exc: AccessDenied):
    return admin_pages.templates.TemplateResponse(
        request,
        "error.html",
        {
            "title": "Access Denied",
            "status_code": status.HTTP_403_FORBIDDEN,
            "message": exc.message,
            "user": getattr(request.state, "principal", None),
        },
        status_code=status.HTTP_403_FORBIDDEN,
    )


@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content={
            "error": "Too many requests from this IP, please try again later.",
            "retry_after": exc.retry_after,
        },
        headers={"Retry-After": str(exc.retry_after)},
    )


@app.exception_handler(LoginRateLimitExceeded)
async def login_rate_limit_handler(request: Request, exc: LoginRateLimitExceeded):
    return _error(
        status.HTTP_429_TOO_MANY_REQUESTS,
        "Too many login attempts, please try again later.",
        str(exc.detail),
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error", str(exc))


@app.get("/health", status_code=status.HTTP_200_OK)
def health_check():
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "environment": settings.ENVIRONMENT,
    }


app.mount(
    "/uploads",
    StaticFiles(directory=settings.UPLOAD_DIR, check_dir=False),
    name="uploads",
)

app.include_router(auth.router)
app.include_router(properties.router)
app.include_router(hero.router)
app.include_router(team.router)
app.include_router(blog.router)
app.include_router(contact.router)
app.include_router(settings_router.router)
app.include_router(admin_properties.router)
app.include_router(admin_team.router)
app.include_router(admin_blog.router)
app.include_router(admin_hero.router)
app.include_router(admin_users.router)
app.include_router(admin_settings.router)
app.include_router(admin_dashboard.router)
app.include_router(admin_pages.router)
