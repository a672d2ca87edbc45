import logging
from typing import List, Optional

from dotenv import load_dotenv
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)

# Load .env before the Settings class reads the environment
load_dotenv()


class Settings(BaseSettings):
    # --- Application ---
    APP_TITLE: str = "Quote Builder API"
    API_VERSION: str = "1.0.0"
    API_V1_PREFIX: str = "/api/v1"
    SUPPORT_EMAIL: str = "support@quotebuilder.local"
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ]

    # --- Pagination ---
    DEFAULT_PAGE_SIZE: int = 10
    MAX_PAGE_SIZE: int = 100

    # --- Database ---
    # DATABASE_URL wins over the POSTGRES_* parts when it is set
    DATABASE_URL: Optional[str] = None
    POSTGRES_DB: str = "quotebuilder"
    POSTGRES_USER: str = "quotebuilder"
    POSTGRES_PASSWORD: str = "quotebuilder"
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: str = "5432"
    DB_ECHO_LOG: bool = False
    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 10

    # --- Generic messages ---
    INTERNAL_ERROR_MSG: str = "Internal server error"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    @property
    def database_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@"
            f"{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        )


settings = Settings()

logger.info(f"Configuration loaded: DB={settings.POSTGRES_DB}@{settings.POSTGRES_HOST}, API={settings.API_V1_PREFIX}")
