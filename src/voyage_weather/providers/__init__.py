"""Weather data providers."""

from __future__ import annotations

import logging
import random

from voyage_weather.config import Settings
from voyage_weather.providers.base import (
    AuthenticationError,
    ForecastCache,
    HttpWeatherProvider,
    ProviderError,
    RateLimitError,
    WeatherProvider,
)
from voyage_weather.providers.fallback import FallbackWeatherProvider
from voyage_weather.providers.mock import MockWeatherProvider
from voyage_weather.providers.openweather import OpenWeatherProvider

logger = logging.getLogger(__name__)


def create_provider(settings: Settings, rng: random.Random | None = None) -> WeatherProvider:
    """Build the weather provider described by the settings.

    - `weather_provider="mock"` gives the mock provider
    - without an OpenWeatherMap key the mock provider is used (if fallback
      is enabled)
    - otherwise OpenWeatherMap, wrapped with a mock fallback when
      `weather_fallback_to_mock` is set
    """
    rng = rng or random.Random(settings.random_seed)
    mock = MockWeatherProvider(rng=rng, forecast_days=settings.forecast_days)

    if settings.weather_provider == "mock":
        return mock

    if not settings.openweather_configured and settings.weather_fallback_to_mock:
        logger.warning("OPENWEATHER_API_KEY not set; using mock weather data")
        return mock

    provider = OpenWeatherProvider(
        api_key=settings.openweather_api_key,
        base_url=settings.openweather_base_url,
        user_agent=settings.weather_user_agent,
        timeout=settings.weather_timeout_seconds,
        cache_ttl_seconds=settings.weather_cache_ttl_seconds,
        forecast_days=settings.forecast_days,
        rng=rng,
    )
    if settings.weather_fallback_to_mock:
        return FallbackWeatherProvider(provider, mock)
    return provider


__all__ = [
    "AuthenticationError",
    "FallbackWeatherProvider",
    "ForecastCache",
    "HttpWeatherProvider",
    "MockWeatherProvider",
    "OpenWeatherProvider",
    "ProviderError",
    "RateLimitError",
    "WeatherProvider",
    "create_provider",
]
