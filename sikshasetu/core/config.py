from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )

    # ─────────── APP ───────────
    app_name: str = "SikshaSetu Community API"
    environment: str = "dev"
    log_level: str = "INFO"

    # ─────────── API ───────────
    api_prefix: str = "/v1"
    request_id_header: str = "X-Request-Id"

    # ─────────── DATABASE ───────────
    # unset => backend runs in disabled mode
    database_url: Optional[str] = None
    auto_create_tables: bool = True

    # ─────────── JWT / AUTH ───────────
    jwt_secret_key: str
    jwt_algorithm: str = "HS256"
    jwt_access_token_minutes: int = 1440  # 24 hours
    password_min_length: int = 6
    require_email_confirmation: bool = False

    # ─────────── VERIFICATION UPLOADS ───────────
    upload_dir: str = "./verification-uploads"
    verification_max_bytes: int = 5 * 1024 * 1024

    # ─────────── FEED ───────────
    feed_background_refresh: bool = False


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
