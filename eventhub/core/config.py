# eventhub/core/config.py
from functools import lru_cache
from typing import List, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    PROJECT_NAME: str = "EventHub"

    # The environment mode: 'local' or 'prod'
    ENV: str = "local"
    LOG_LEVEL: str = "INFO"

    # --- Storage ---
    # 'memory' keeps everything in-process, 'mongo' uses MONGODB_URI
    STORAGE_BACKEND: str = "memory"
    MONGODB_URI: Optional[str] = None
    MONGODB_DB: str = "eventhub"

    # --- Auth ---
    JWT_SECRET: str = "change-me"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24
    SESSION_CHECK_PERIOD_SECONDS: int = 86400  # 1 day

    # --- Demo data ---
    SEED_DEMO_DATA: bool = True
    ADMIN_USERNAME: str = "admin"
    ADMIN_PASSWORD: str = "admin_password"
    ADMIN_EMAIL: str = "admin@eventhub.com"

    # --- Anthropic (chat assistant) ---
    ANTHROPIC_API_KEY: Optional[str] = None
    ANTHROPIC_MODEL: str = "claude-sonnet-4-5-20250929"
    AI_MAX_TOKENS: int = 1024

    # CORS - comma-separated list of origins
    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:5173"

    @field_validator("STORAGE_BACKEND")
    @classmethod
    def normalize_backend(cls, v: str) -> str:
        v = v.strip().lower()
        if v not in ("memory", "mongo"):
            raise ValueError("STORAGE_BACKEND must be 'memory' or 'mongo'")
        return v

    def get_cors_origins(self) -> List[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


@lru_cache()
def get_settings() -> Settings:
    return Settings()
