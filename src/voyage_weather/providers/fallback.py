"""Provider wrapper that falls back to another provider on failure."""

from __future__ import annotations

import logging

from voyage_weather.models.location import Coordinates
from voyage_weather.models.weather import PointForecast
from voyage_weather.providers.base import ProviderError, WeatherProvider

logger = logging.getLogger(__name__)


class FallbackWeatherProvider(WeatherProvider):
    """Serve the fallback provider's forecast when the primary fails.

    Typically wraps OpenWeatherProvider with MockWeatherProvider so a
    planning request still gets an answer during an upstream outage.
    """

    def __init__(self, primary: WeatherProvider, fallback: WeatherProvider):
        self.primary = primary
        self.fallback = fallback
        self.name = primary.name

    async def get_forecast(self, coordinates: Coordinates) -> PointForecast:
        try:
            return await self.primary.get_forecast(coordinates)
        except ProviderError as e:
            logger.warning(
                f"{self.primary.name} failed for {coordinates} ({e}); "
                f"using {self.fallback.name} data"
            )
            return await self.fallback.get_forecast(coordinates)

    async def aclose(self) -> None:
        await self.primary.aclose()
        await self.fallback.aclose()

    def get_max_forecast_days(self) -> int:
        return self.primary.get_max_forecast_days()
