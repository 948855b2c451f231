# app/core/config.py
import logging
from typing import List

from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)

DEFAULT_JWT_SECRET = "your-super-secret-jwt-key-change-in-production"


class Settings(BaseSettings):
    APP_NAME: str = "LLM Prompt Library"
    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    HOST: str = "0.0.0.0"
    PORT: int = 3001

    FRONTEND_URL: str = "http://localhost:3000"
    ALLOWED_HOSTS: str = "*"

    # sql | json | supabase
    STORAGE_BACKEND: str = "sql"
    DATABASE_URL: str = "sqlite+aiosqlite:///./prompt_library.db"
    DB_AUTO_CREATE: bool = True
    DATA_DIR: str = "./data"

    SUPABASE_URL: str | None = None
    SUPABASE_SERVICE_KEY: str | None = None

    JWT_SECRET: str = DEFAULT_JWT_SECRET
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRE_DAYS: int = 7

    BCRYPT_ROUNDS: int = 12
    PASSWORD_MIN_LENGTH: int = 6
    PASSWORD_REQUIRE_COMPLEXITY: bool = False
    VERIFICATION_CODE_TTL_MINUTES: int = 10

    RATE_LIMIT_ENABLED: bool = True
    AUTH_RATE_LIMIT: str = "10/minute"

    SEED_DEFAULT_CATEGORIES: bool = True

    class Config:
        env_file = ".env"
        extra = "ignore"

    @property
    def cors_origins(self) -> List[str]:
        return [origin.strip() for origin in self.FRONTEND_URL.split(",") if origin.strip()]

    @property
    def allowed_hosts(self) -> List[str]:
        return [host.strip() for host in self.ALLOWED_HOSTS.split(",") if host.strip()]

    @property
    def async_database_url(self) -> str:
        url = self.DATABASE_URL
        if url.startswith("postgresql://"):
            url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
            logger.warning("Adapted database URL to the asyncpg driver. Please update your configuration.")
        elif url.startswith("postgres://"):
            url = url.replace("postgres://", "postgresql+asyncpg://", 1)
            logger.warning("Adapted database URL to the asyncpg driver. Please update your configuration.")
        elif url.startswith("sqlite://") and not url.startswith("sqlite+aiosqlite://"):
            url = url.replace("sqlite://", "sqlite+aiosqlite://", 1)
        return url


settings = Settings()
