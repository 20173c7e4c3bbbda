from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # ==============================
    # Application
    # ==============================
    APP_NAME: str = "Saleh Digital API"
    ENVIRONMENT: str = "local"

    # ==============================
    # Server
    # ==============================
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    CORS_ORIGINS: str = "*"

    # ==============================
    # Database
    # ==============================
    DATABASE_URL: str = "sqlite:///./saleh.db"

    # ==============================
    # Logging
    # ==============================
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False
    LOG_SQL: bool = False

    # ==============================
    # Listing limits
    # ==============================
    CUSTOMER_LIST_LIMIT: int = 200
    SUMMARY_PURCHASE_COUNT: int = 4

    def cors_origin_list(self) -> List[str]:
        return [part.strip() for part in self.CORS_ORIGINS.split(",") if part.strip()]


@lru_cache
def get_settings() -> Settings:
    """Cached settings loader (once per process)."""
    return Settings()


__all__ = ["Settings", "get_settings"]
