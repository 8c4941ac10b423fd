"""Application configuration loaded from environment variables."""

from pydantic_settings import BaseSettings
from pydantic import Field
from functools import lru_cache


class Settings(BaseSettings):
    """Centralised settings — no hardcoded values anywhere else."""

    # Database
    database_url: str = Field(..., env="DATABASE_URL")
    db_pool_size: int = Field(10, env="DB_POOL_SIZE")
    db_max_overflow: int = Field(20, env="DB_MAX_OVERFLOW")

    # Shared secret for /cron/* endpoints
    cron_secret: str = Field("", env="CRON_SECRET")

    # Google Places (seeding only)
    google_places_api_key: str = Field("", env="GOOGLE_PLACES_API_KEY")
    places_request_timeout_seconds: float = Field(10.0, env="PLACES_REQUEST_TIMEOUT_SECONDS")
    places_request_delay_seconds: float = Field(1.0, env="PLACES_REQUEST_DELAY_SECONDS")

    # Security
    allowed_origins: str = Field("http://localhost:3000", env="ALLOWED_ORIGINS")

    # App
    app_env: str = Field("development", env="APP_ENV")
    log_level: str = Field("INFO", env="LOG_LEVEL")
    timezone: str = Field("Asia/Kuala_Lumpur", env="TIMEZONE")

    # Restaurant detail cache tiers
    memory_cache_ttl_seconds: int = Field(30 * 60, env="MEMORY_CACHE_TTL_SECONDS")
    memory_cache_max_entries: int = Field(2_000, env="MEMORY_CACHE_MAX_ENTRIES")
    persisted_cache_ttl_seconds: int = Field(7 * 24 * 60 * 60, env="PERSISTED_CACHE_TTL_SECONDS")
    trending_dishes_cache_ttl_seconds: int = Field(60 * 60, env="TRENDING_DISHES_CACHE_TTL_SECONDS")
    reviews_cache_ttl_seconds: int = Field(24 * 60 * 60, env="REVIEWS_CACHE_TTL_SECONDS")
    reviews_cache_max_entries: int = Field(1_000, env="REVIEWS_CACHE_MAX_ENTRIES")
    reviews_per_restaurant: int = Field(10, env="REVIEWS_PER_RESTAURANT")

    # Trending batch job. 0.10 was also used historically.
    trending_percentage: float = Field(0.15, env="TRENDING_PERCENTAGE")
    trending_dish_candidates: int = Field(5, env="TRENDING_DISH_CANDIDATES")
    trending_fallback_size: int = Field(10, env="TRENDING_FALLBACK_SIZE")

    # Restaurant list pipeline
    halal_filter_policy: str = Field("exclusion", env="HALAL_FILTER_POLICY")
    list_default_limit: int = Field(100, env="LIST_DEFAULT_LIMIT")
    list_max_limit: int = Field(500, env="LIST_MAX_LIMIT")
    halal_limit_multiplier: int = Field(3, env="HALAL_LIMIT_MULTIPLIER")
    unlimited_radius_km: float = Field(100.0, env="UNLIMITED_RADIUS_KM")

    # Third-party enrichment
    tripadvisor_cache_path: str = Field(
        "data/tripadvisor_cache.json", env="TRIPADVISOR_CACHE_PATH"
    )
    hours_cache_path: str = Field("data/hours_cache.json", env="HOURS_CACHE_PATH")

    # Derived
    @property
    def allowed_origins_list(self) -> list[str]:
        """Return ALLOWED_ORIGINS as a list."""
        return [o.strip() for o in self.allowed_origins.split(",")]

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached Settings instance."""
    return Settings()


settings = get_settings()
