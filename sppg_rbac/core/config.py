"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. Every field has a working default so the service and
the provisioning CLI start against a local SQLite file out of the box.
"""

from functools import lru_cache

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment and .env."""

    # App
    app_name: str = "sppg-rbac"
    app_version: str = "1.0.0"
    debug: bool = False

    # Database (postgresql+asyncpg://... in production)
    database_url: str = "sqlite+aiosqlite:///./sppg_rbac.db"
    database_echo: bool = False
    # Optional pool overrides (None = use defaults in database.py); ignored for SQLite
    db_pool_size: int | None = None
    db_max_overflow: int | None = None
    # Create tables on startup instead of relying on `alembic upgrade head`
    database_create_all: bool = False

    # CORS
    allowed_origins: str = "http://localhost:3000,http://localhost:8080"

    # Request identity (resolved upstream by the session layer)
    tenant_header_name: str = "X-Tenant-ID"
    user_id_header_name: str = "X-User-ID"

    # Redis Cache
    redis_enabled: bool = False
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0
    redis_password: SecretStr | None = None
    redis_max_connections: int = 10
    cache_ttl_permissions: int = 300
    permission_cache_enabled: bool = False

    # Provisioning
    provision_on_startup: bool = False
    provisioning_definition_path: str | None = None

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def validate_cache(self) -> "Settings":
        """A permission cache needs Redis."""
        if self.permission_cache_enabled and not self.redis_enabled:
            raise ValueError(
                "PERMISSION_CACHE_ENABLED requires REDIS_ENABLED=true"
            )
        if self.cache_ttl_permissions <= 0:
            raise ValueError("CACHE_TTL_PERMISSIONS must be positive")
        return self

    @property
    def is_sqlite(self) -> bool:
        """True when database_url points at SQLite (no pool sizing, no row locks)."""
        return self.database_url.startswith("sqlite")


@lru_cache
def get_settings() -> Settings:
    """Return cached settings (singleton)."""
    return Settings()
