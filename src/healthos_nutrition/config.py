"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

from healthos_nutrition.domain.errors import ConfigurationError

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    usda_api_key: str | None = None
    usda_base_url: str = "https://api.nal.usda.gov/fdc/v1"
    usda_search_ttl_seconds: float = 300
    openfoodfacts_base_url: str = "https://world.openfoodfacts.org/api/v2"
    openfoodfacts_user_agent: str = "HealthOS/1.0 (personal-use)"
    openfoodfacts_min_interval_seconds: float = 6
    provider_timeout_seconds: float = 8
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def require_usda_api_key(settings: Settings) -> str:
    """Return the USDA API key, or raise if it is not configured."""
    key = (settings.usda_api_key or "").strip()
    if not key:
        raise ConfigurationError("USDA_API_KEY is not set")
    return key
