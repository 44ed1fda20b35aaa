"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All endpoints and credentials come from environment variables (never hardcoded)
    - get_settings() is cached (lru_cache): single instance per process

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults match docker-compose service names: works out-of-the-box locally
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database (local store: favourites + additional cat info)
    database_url: str = (
        "postgresql+asyncpg://shelter:shelter@db:5432/shelter"
    )

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosting platforms provide postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10

    # Upstream services
    authorization_service_url: str = "http://authorization:8080"
    billing_service_url: str = "http://billing:8080"
    cat_info_service_url: str = "http://cat-info:8080"
    cat_exchange_service_url: str = "http://cat-exchange:8080"
    upstream_timeout_seconds: float = 10.0

    # Favourites: read-modify-write attempts before surfacing a conflict
    favourites_write_attempts: int = 3

    # API
    cors_origins: list[str] = ["http://localhost:5173"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
