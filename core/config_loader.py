from __future__ import annotations
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    DATABASE_URL: str = "sqlite:///./ooo.db"
    BACKEND_CORS_ORIGINS: List[str] = []

    # auth
    SECRET_KEY: str = "dev-secret-unsafe"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24

    # day boundaries for out-of-office windows are taken in this zone
    SERVER_TIMEZONE: str = "UTC"

    LOG_LEVEL: str = "INFO"

    API_HOST: str = "127.0.0.1"
    API_PORT: int = 8000

    # outgoing mail; leave SMTP_HOST empty to only log notifications
    SMTP_HOST: Optional[str] = None
    SMTP_PORT: int = 587
    SMTP_USERNAME: Optional[str] = None
    SMTP_PASSWORD: Optional[str] = None
    SMTP_USE_TLS: bool = True
    EMAIL_FROM: str = "no-reply@localhost"


settings = Settings()
