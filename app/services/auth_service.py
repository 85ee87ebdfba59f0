import logging
import secrets
from datetime import datetime, timedelta, timezone

from fastapi import HTTPException, Response
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from starlette import status
from app.config import settings
from app.models.user import User
from app.models.user_session import UserSession
from app.utils.dates import as_utc

logger = logging.getLogger(__name__)

SESSION_SECRET = settings.SESSION_SECRET
ALGORITHM = settings.SESSION_ALGORITHM

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def principal_from_user(user: User) -> dict:
    """Public user fields carried by a session."""
    return {
        "id": user.id,
        "username": user.username,
        "email": user.email,
        "display_name": user.display_name,
        "role": user.role.value if user.role else None,
        "avatar": user.avatar,
    }


def session_lifetime(remember: bool) -> timedelta:
    if remember:
        return timedelta(days=settings.SESSION_REMEMBER_DAYS)
    return timedelta(hours=settings.SESSION_TTL_HOURS)


def create_session_token(session_id: str, expires_at: datetime) -> str:
    return jwt.encode(
        {"sid": session_id, "exp": expires_at}, SESSION_SECRET, algorithm=ALGORITHM
    )


def read_session_token(token: str) -> str | None:
    try:
        payload = jwt.decode(token, SESSION_SECRET, algorithms=[ALGORITHM])
    except JWTError:
        return None
    return payload.get("sid")


def set_session_cookie(response: Response, token: str, expires_at: datetime) -> None:
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        expires=expires_at,
        httponly=True,
        samesite="lax",
        secure=settings.is_production,
        path="/",
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(
        key=settings.SESSION_COOKIE_NAME,
        httponly=True,
        samesite="lax",
        secure=settings.is_production,
        path="/",
    )


def authenticate_user(identifier: str, password: str, db: Session):
    """Look a user up by username or email and check the password."""
    identifier = (identifier or "").strip().lower()
    if not identifier or not password:
        return False
    user: User = (
        db.query(User)
        .filter(or_(User.username == identifier, User.email == identifier))
        .first()
    )
    if not user:
        return False
    if not pwd_context.verify(password, user.password_hash):
        return False
    return user


class SessionService:
    def __init__(self, db: Session):
        self.db = db

    def login(
        self,
        identifier: str,
        password: str,
        remember: bool = False,
        allowed_roles=None,
    ):
        """Verify credentials and open a session.

        Returns ``(user, token, expires_at)``. Raises 401 for bad credentials
        and 403 for deactivated accounts or a role outside ``allowed_roles``.
        """
        user = authenticate_user(identifier, password, self.db)
        if not user:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid username or password",
            )
        if not user.is_active:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Account is deactivated",
            )
        if allowed_roles is not None and user.role.value not in allowed_roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Access denied. Admin privileges required.",
            )

        self.purge_expired()
        now = datetime.now(timezone.utc)
        user.last_login = now
        expires_at = now + session_lifetime(remember)
        session = UserSession(
            id=secrets.token_urlsafe(32),
            user_id=user.id,
            data=principal_from_user(user),
            remember=remember,
            expires_at=expires_at,
        )
        self.db.add(session)
        self.db.commit()
        self.db.refresh(user)
        logger.info("User %s logged in", user.username)
        return user, create_session_token(session.id, expires_at), expires_at

    def resolve(self, token: str | None) -> dict | None:
        """Principal for a cookie value, or None. Never raises."""
        if not token:
            return None
        session_id = read_session_token(token)
        if not session_id:
            return None
        try:
            session = (
                self.db.query(UserSession).filter(UserSession.id == session_id).first()
            )
            if not session:
                return None
            if as_utc(session.expires_at) <= datetime.now(timezone.utc):
                self.db.delete(session)
                self.db.commit()
                return None
            user = self.db.query(User).filter(User.id == session.user_id).first()
            if not user or not user.is_active:
                return None
            principal = dict(session.data or {})
            # Role and activation may change after login; trust the row
            principal.update(id=user.id, role=user.role.value)
            return principal
        except SQLAlchemyError as exc:
            logger.error("Session lookup failed: %s", exc)
            self.db.rollback()
            return None

    def logout(self, token: str | None) -> None:
        session_id = read_session_token(token) if token else None
        if not session_id:
            return
        self.db.query(UserSession).filter(UserSession.id == session_id).delete()
        self.db.commit()

    def purge_expired(self) -> int:
        """Delete session rows past their expiry; returns how many went."""
        removed = (
            self.db.query(UserSession)
            .filter(UserSession.expires_at <= datetime.now(timezone.utc))
            .delete()
        )
        self.db.commit()
        if removed:
            logger.info("Purged %d expired sessions", removed)
        return removed
