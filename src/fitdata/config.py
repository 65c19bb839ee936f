"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # DEMO_KEY works without signup but is limited to 1000 requests/hour.
    usda_api_key: str = "DEMO_KEY"
    usda_base_url: str = "https://api.nal.usda.gov/fdc/v1"
    openfoodfacts_product_url: str = "https://world.openfoodfacts.org/api/v0/product"
    openfoodfacts_search_url: str = "https://us.openfoodfacts.org/api/v2/search"
    exercisedb_base_url: str = "https://www.exercisedb.dev/api/v1"
    upstream_user_agent: str = "YFIT-App/1.0 (https://yfit-deploy.vercel.app)"
    http_timeout_seconds: float = 15.0
    exercise_cache_max_age_seconds: int = 86400
    log_level: str = "INFO"
    supabase_url: str | None = None
    supabase_service_key: str | None = None
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @property
    def uses_demo_key(self) -> bool:
        """Return True when the rate-limited public USDA key is in use."""
        return self.usda_api_key == "DEMO_KEY"

    @property
    def supabase_enabled(self) -> bool:
        """Return True when Supabase credentials are configured."""
        return bool(self.supabase_url and self.supabase_service_key)
