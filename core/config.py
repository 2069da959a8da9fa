"""
Application configuration using Pydantic Settings
"""

from pydantic_settings import BaseSettings
from typing import Optional

from schemas.catalog import APIConfig


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    # Persistent store
    DATABASE_URL: str = "sqlite+aiosqlite:///./catalog.db"
    STORE_LOCK_TIMEOUT: float = 3.0

    # Upstream catalog API
    CATALOG_API_BASE_URL: str = "https://apigw3.ashleyfurniture.com/productinformation"
    CATALOG_API_AUTHORIZATION: Optional[str] = None
    CATALOG_API_CLIENT_ID: Optional[str] = None
    CATALOG_API_CUSTOMER: str = ""
    CATALOG_API_PAGE_LIMIT: int = 1000

    # Sync behaviour
    REQUEST_TIMEOUT: float = 120.0
    MAX_RETRIES: int = 3
    PAGE_DELAY_SECONDS: float = 0.1
    MAX_PAGES: int = 10000
    SYNC_INTERVAL_MINUTES: int = 15
    SCHEDULER_ENABLED: bool = True

    # API
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8080

    # Environment
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"

    def api_config(self) -> APIConfig:
        """Build the immutable upstream API configuration for one run"""
        return APIConfig(
            base_url=self.CATALOG_API_BASE_URL.rstrip("/"),
            authorization=self.CATALOG_API_AUTHORIZATION or "",
            client_id=self.CATALOG_API_CLIENT_ID or "",
            customer=self.CATALOG_API_CUSTOMER,
            limit=self.CATALOG_API_PAGE_LIMIT,
        )


settings = Settings()
