"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All secrets come from environment variables (never hardcoded)
    - get_settings() is cached (lru_cache) — single instance per process

Design Decisions:
    - Defaults provided for all non-secret settings so docker-compose works out of the box
    - Tenant SMTP lives in the settings table; the smtp_* values here are the
      system transport for account emails and the fallback for tenants
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Runtime
    environment: str = "development"
    public_base_url: str = "http://localhost:3000"

    # Database
    database_url: str = (
        "postgresql+asyncpg://boothboss:boothboss@db:5432/boothboss"
    )

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosting providers hand out postgresql://; asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10

    # Auth
    jwt_secret: str = "change-me-in-production"
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 60 * 24 * 7
    admin_email: str = ""
    verification_token_hours: int = 24

    # Email (system transport)
    smtp_host: str = "localhost"
    smtp_port: int = 587
    smtp_user: str = ""
    smtp_password: str = ""
    smtp_from_address: str = "no-reply@boothboss.app"
    smtp_from_name: str = "BoothBoss"
    smtp_timeout_seconds: int = 30
    email_enabled_in_dev: bool = False
    email_force_disabled: bool = False
    email_preview_capacity: int = 50

    # Storage
    storage_provider: str = "auto"
    blob_read_write_token: str = ""
    blob_api_url: str = "https://blob.vercel-storage.com"
    vercel: str = ""
    vercel_url: str = ""
    public_dir: str = "public"
    local_upload_path: str = "uploads"
    storage_base_url: str = ""
    max_upload_bytes: int = 50 * 1024 * 1024

    # Seed
    seed_admin_email: str = "admin@boothboss.app"
    seed_admin_password: str = ""

    # API
    cors_origins: list[str] = ["http://localhost:3000"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    @property
    def is_development(self) -> bool:
        return self.environment.lower() == "development"

    @property
    def running_on_vercel(self) -> bool:
        return bool(self.vercel or self.vercel_url)


@lru_cache
def get_settings() -> Settings:
    return Settings()
