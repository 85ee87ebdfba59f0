from pydantic_settings import BaseSettings
from pydantic import ConfigDict, field_validator


class Settings(BaseSettings):
    # Runtime
    ENVIRONMENT: str = "development"
    PORT: int = 5000
    LOG_LEVEL: str | None = None
    CORS_ORIGINS: str = "*"

    # Database
    DATABASE_URL: str = "sqlite:///./estate.db"
    DB_CONNECT_RETRIES: int = 5
    DB_CONNECT_RETRY_DELAY: float = 5.0

    # Sessions
    SESSION_SECRET: str
    SESSION_ALGORITHM: str = "HS256"
    SESSION_COOKIE_NAME: str = "estate_session"
    SESSION_TTL_HOURS: int = 24
    SESSION_REMEMBER_DAYS: int = 30

    # Public API rate limiting (fixed window per client IP)
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_WINDOW_SECONDS: int = 15 * 60
    RATE_LIMIT_MAX_REQUESTS: int = 100
    LOGIN_RATE_LIMIT: str = "5 per 15 minutes"

    # Uploads
    UPLOAD_DIR: str = "uploads"

    # Bootstrap admin account
    ADMIN_USERNAME: str = "admin"
    ADMIN_EMAIL: str = "admin@example.com"
    ADMIN_PASSWORD: str | None = None

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def blank_log_level(cls, v):
        return v or None

    @property
    def cors_origins(self) -> list[str]:
        """Comma separated ``CORS_ORIGINS`` as a list."""
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

    model_config = ConfigDict(env_file=".env", extra="ignore")


settings = Settings()
