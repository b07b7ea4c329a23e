from functools import lru_cache
from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """應用程式設定"""

    # Application
    app_name: str = "TWStock"
    app_version: str = "0.1.0"
    app_host: str = "0.0.0.0"
    port: int = 3000
    environment: str = Field(
        "development",
        validation_alias=AliasChoices("environment", "node_env"),
    )

    # CORS
    frontend_url: str = "http://localhost:5173"

    # Storage
    storage_backend: str = "memory"  # memory, database
    database_url: str = "sqlite:///./twstock.db"
    seed_sample_data: bool = True

    # Pagination
    default_page_size: int = 20
    max_page_size: int = 100

    # Logging
    log_level: str = "INFO"

    # Client
    api_base_url: str = Field(
        "http://localhost:3000/api/v1",
        validation_alias=AliasChoices("api_base_url", "vite_api_base_url"),
    )
    api_timeout_seconds: float = 10.0

    class Config:
        # 專案根目錄的 .env 檔案絕對路徑
        env_file = str(Path(__file__).parent.parent / ".env")
        case_sensitive = False
        extra = "ignore"

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"


@lru_cache()
def get_settings() -> Settings:
    """回傳設定實例 (單例)"""
    return Settings()
