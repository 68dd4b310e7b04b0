"""Application configuration loaded from environment variables."""

from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


BASE_DIR = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(BASE_DIR / ".env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Application
    app_name: str = "TimeSeal"
    debug: bool = False
    log_level: str = "INFO"

    # Token codec (AES-GCM keys must decode to 16, 24 or 32 bytes)
    secret_key: str = "change-me-to-a-random-32b-string"
    key_encoding: Literal["utf-8", "base64", "hex"] = "utf-8"
    algorithm: Literal["aes-gcm", "hmac-sha256"] = "aes-gcm"
    max_age: int = 600

    # Where the middleware looks for the token/identity pair
    csrf_header: str = "X-CSRF-Token"
    csrf_cookie: str = "csrf_token"
    session_header: str = "X-Session-ID"
    session_cookie: str = "session_token"


settings = Settings()
