from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings

# Get the repository root directory (parent of vaev directory)
REPO_ROOT = Path(__file__).parent.parent.absolute()


class Settings(BaseSettings):
    """Application settings."""

    # API settings
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000
    API_RELOAD: bool = False

    # Version and environment
    VERSION: str = "0.1.0"
    APP_ENV: str = "production"  # "production" or "development"
    DEV_ASSET_SERVER: str = "http://localhost:5173"
    STATIC_DIR: Optional[str] = None

    # Secrets
    SESSION_KEY: str
    AUTH_TOKEN_SECRET: Optional[str] = None

    # Database
    DATABASE_URL: str = f"sqlite:///{REPO_ROOT / 'vaev.db'}"

    # Cookies and request context
    AUTH_COOKIE_NAME: str = "vaev-auth"
    SESSION_COOKIE_NAME: str = "app_session"
    AUTH_CONTEXT_KEY: str = "vaev_auth"
    LOGIN_ROUTE: str = "/login"
    SESSION_MAX_AGE_DAYS: int = 30
    AUTH_MAX_AGE_DAYS: int = 365
    MAX_FORM_BYTES: int = 1024 * 1024

    class Config:
        env_file = ".env"

    @field_validator("SESSION_KEY")
    @classmethod
    def session_key_not_empty(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("SESSION_KEY must be set to a non-empty value")
        return value

    @property
    def is_development(self) -> bool:
        return self.APP_ENV == "development"

    @property
    def token_secret(self) -> str:
        return self.AUTH_TOKEN_SECRET or self.SESSION_KEY


@lru_cache
def get_settings() -> Settings:
    return Settings()
