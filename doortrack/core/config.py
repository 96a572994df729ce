"""Application configuration."""

from os import getenv

from pydantic import BaseModel

PLACEHOLDER_REMOTE_URL: str = "https://your-project.supabase.co"
PLACEHOLDER_REMOTE_KEY: str = "your-anon-key-here"


class Settings(BaseModel):
    """Runtime settings for the application."""

    app_name: str = "doortrack API"
    app_env: str = getenv("APP_ENV", "dev")
    debug: bool = getenv("DEBUG", "0") == "1"
    log_level: str = getenv("LOG_LEVEL", "INFO")
    local_store_url: str = getenv("LOCAL_STORE_URL", "sqlite:///./doortrack_local.db")
    supabase_url: str = getenv("SUPABASE_URL", "")
    supabase_anon_key: str = getenv("SUPABASE_ANON_KEY", "")
    photo_bucket: str = getenv("PHOTO_BUCKET", "order-photos")
    auth_jwt_secret: str = getenv("AUTH_JWT_SECRET", "dev-only-change-me-to-a-long-random-secret")
    auth_jwt_algorithm: str = getenv("AUTH_JWT_ALGORITHM", "HS256")
    order_retention_months: int = int(getenv("ORDER_RETENTION_MONTHS", "3"))


def is_configured(url: str | None, key: str | None) -> bool:
    """Return True when the remote endpoint and credential are real values."""
    if not url or not key:
        return False
    url, key = url.strip(), key.strip()
    if not url or not key:
        return False
    return url != PLACEHOLDER_REMOTE_URL and key != PLACEHOLDER_REMOTE_KEY


def remote_configured(config: Settings) -> bool:
    return is_configured(config.supabase_url, config.supabase_anon_key)


settings: Settings = Settings()
