"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All secrets come from environment variables (never hardcoded)
    - get_settings() is cached (lru_cache) — single instance per process
    - Font sources are compiled-in defaults; overriding them is a deploy-time decision

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults provided for all non-secret settings: works out-of-the-box with docker-compose
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


INTER_REGULAR_URL = (
    "https://fonts.gstatic.com/s/inter/v18/"
    "UcCO3FwrK3iLTeHuS_nVMrMxCp50SjIw2boKoduKmMEVuLyfAZ9hjQ.ttf"
)
INTER_BOLD_URL = (
    "https://fonts.gstatic.com/s/inter/v18/"
    "UcCO3FwrK3iLTeHuS_nVMrMxCp50SjIw2boKoduKmMEVuFuYAZ9hjQ.ttf"
)


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database (read-only card store)
    database_url: str = (
        "postgresql+asyncpg://cards:cards@db:5432/cards"
    )

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosted Postgres provides postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 10
    database_max_overflow: int = 5

    # Card lookup
    card_active_status: str = "active"
    civic_layout_prefix: str = "civic-card"

    # Fonts: fetched once per process
    font_family: str = "Inter"
    font_regular_url: str = INTER_REGULAR_URL
    font_bold_url: str = INTER_BOLD_URL
    font_fetch_timeout_seconds: float = 10.0

    # Profile photo inlining
    photo_fetch_timeout_seconds: float = 5.0
    photo_max_bytes: int = 5 * 1024 * 1024
    http_user_agent: str = "tavvy-card-preview/1.0"

    # Response
    preview_cache_control: str = (
        "public, max-age=3600, s-maxage=3600, stale-while-revalidate=86400"
    )

    # API
    cors_origins: list[str] = ["http://localhost:3000"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
