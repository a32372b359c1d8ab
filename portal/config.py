from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # Eagle API (Cloudflare worker)
    API_BASE_URL: str = "https://eagle-security.charliemoimeme.workers.dev"
    LOGIN_PATH: str = "/api/login"
    REFRESH_PATH: str = "/api/refresh-token"

    # HTTP
    REQUEST_TIMEOUT: int = 30
    MAX_RETRIES: int = 3
    BACKOFF_FACTOR: float = 0.5
    VERIFY_SSL: bool = True

    # Session store
    STORE_PATH: str = ".eagle_session.json"

    # Navigation
    LOGIN_ROUTE: str = "login.html"
    DASHBOARD_ROUTE: str = "dashboard.html"
    ACCESS_DENIED_REDIRECT_DELAY: float = 1.5
    ALREADY_CONNECTED_REDIRECT_DELAY: float = 1.0
    LOGIN_REDIRECT_DELAY: float = 1.5

    # Uploads
    MAX_UPLOAD_MB: int = 5
    AVATAR_MAX_PX: int = 800
    AVATAR_JPEG_QUALITY: int = 92

    # Logging
    LOG_LEVEL: str = "INFO"
    DEBUG: bool = False
