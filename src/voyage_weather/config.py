"""Application configuration.

Configuration is loaded from environment variables using pydantic-settings.
Secrets (the OpenWeatherMap API key) should be provided via environment
variables, not config files.

## Optional Environment Variables

- OPENWEATHER_API_KEY: OpenWeatherMap API key (without it the mock provider is used)
- WEATHER_PROVIDER: "openweather" or "mock" (default: openweather)
- WEATHER_FALLBACK_TO_MOCK: Serve mock data when the provider fails (default: true)
- RANDOM_SEED: Seed for mock weather and current jitter (default: unseeded)
- LOG_LEVEL: Logging level for the CLI and server (default: INFO)
- DEBUG: Enable debug mode (default: false)

## Example .env file

```
OPENWEATHER_API_KEY=your-openweathermap-key
WEATHER_CACHE_TTL_SECONDS=3600
WAYPOINT_COUNT=10
```
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Voyage Weather"
    app_version: str = "0.1.0"
    debug: bool = False
    environment: Literal["development", "staging", "production"] = "development"
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    allowed_origins: list[str] = Field(
        default=["http://localhost:3000", "http://localhost:8000"],
        description="CORS allowed origins",
    )

    # Weather provider
    weather_provider: Literal["openweather", "mock"] = "openweather"
    openweather_api_key: str | None = None
    openweather_base_url: str = "https://api.openweathermap.org/data/2.5"
    weather_user_agent: str = "voyage-weather/0.1.0"
    weather_timeout_seconds: float = Field(default=30.0, gt=0)
    weather_cache_ttl_seconds: int = Field(default=3600, ge=0)
    weather_fallback_to_mock: bool = True

    # Route sampling
    forecast_days: int = Field(default=10, ge=1, le=16)
    waypoint_count: int = Field(default=10, ge=2, le=50)
    random_seed: int | None = None

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def openweather_configured(self) -> bool:
        """Check if the OpenWeatherMap provider can be used."""
        return bool(self.openweather_api_key)


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Settings are loaded once and cached. To reload, clear the cache:
    ```python
    get_settings.cache_clear()
    ```
    """
    return Settings()


def get_settings_uncached() -> Settings:
    """Get fresh settings without caching.

    Useful for testing when environment variables change.
    """
    return Settings()
