from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    # Database holding the key-value storage table
    database_url: str = "sqlite:///./coursestore.db"

    # JWT
    secret_key: str = "your-secret-key-change-in-production"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24 * 7  # 7 days

    # Frontend URL for CORS
    frontend_url: str = "http://localhost:3000"

    # Key-value storage: collection key prefix and write quota (browser local storage is ~5 MiB)
    storage_namespace: str = "samir"
    storage_quota_bytes: int = 5 * 1024 * 1024

    # Seed admin account + demo courses on first start
    seed_on_startup: bool = True
    admin_email: str = "admin@coursestore.local"
    admin_username: str = "StoreAdmin"
    admin_password: str = "change-me-admin"

    # Ads: external ad network endpoint (empty = local simulated timer only)
    ad_provider_url: str = ""
    ad_provider_timeout_seconds: float = 30.0
    ad_fallback_seconds: float = 15.0

    # Minimum password length for register / password change
    password_min_length: int = 6

    log_level: str = "INFO"

    class Config:
        env_file = ".env"


@lru_cache
def get_settings() -> Settings:
    return Settings()
