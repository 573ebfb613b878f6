"""Synthetic weather provider.

Generates plausible daily forecasts without any network access. Used when
no OpenWeatherMap key is configured, as the fallback when the real
provider fails, and in tests.

Each day has a 20% chance of being stormy: storm days get 25-55 m/s wind,
Storm or Thunderstorm conditions, heavy rain and 2-5 km visibility. Other
days get 5-20 m/s wind and Clear, Clouds or Rain.

All randomness comes from the injected `random.Random`, so a seeded
provider produces the same sequence of forecasts for the same sequence of
calls.
"""

from __future__ import annotations

import random
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

from voyage_weather.models.location import Coordinates
from voyage_weather.models.weather import (
    CurrentConditions,
    DailyForecast,
    PointForecast,
    WeatherCondition,
)
from voyage_weather.providers.base import WeatherProvider

STORM_PROBABILITY = 0.2

CALM_CONDITIONS = (WeatherCondition.CLEAR, WeatherCondition.CLOUDS, WeatherCondition.RAIN)
STORM_CONDITIONS = (WeatherCondition.STORM, WeatherCondition.THUNDERSTORM)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class MockWeatherProvider(WeatherProvider):
    """Seedable synthetic forecast provider."""

    name = "mock"

    def __init__(
        self,
        rng: random.Random | None = None,
        forecast_days: int = 10,
        clock: Callable[[], datetime] = _utc_now,
    ):
        """Initialize the mock provider.

        Args:
            rng: Random source; pass a seeded instance for reproducible data
            forecast_days: Number of days to generate
            clock: Returns the current time (start of the first day)
        """
        self.rng = rng or random.Random()
        self.forecast_days = forecast_days
        self.clock = clock

    async def get_forecast(self, coordinates: Coordinates) -> PointForecast:
        now = self.clock()
        start = now.replace(hour=0, minute=0, second=0, microsecond=0)
        return PointForecast(
            location=coordinates,
            generated_at=now,
            provider=self.name,
            current=self._current(now),
            daily=[self._day(start + timedelta(days=i)) for i in range(self.forecast_days)],
        )

    def _current(self, now: datetime) -> CurrentConditions:
        return CurrentConditions(
            time=now,
            temperature_c=22,
            feels_like_c=24,
            wind_speed_ms=10,
            wind_gust_ms=15,
            wind_direction_deg=180,
            visibility_m=10000,
            pressure_hpa=1013,
            humidity_percent=70,
            cloud_cover_percent=40,
            condition=WeatherCondition.CLOUDS,
            description="scattered clouds",
        )

    def _day(self, date: datetime) -> DailyForecast:
        rng = self.rng
        base_wind = 5 + rng.random() * 15
        stormy = rng.random() < STORM_PROBABILITY

        if stormy:
            wind = 25 + rng.random() * 30
            gust = 35 + rng.random() * 40
            condition = rng.choice(STORM_CONDITIONS)
            description = "thunderstorm with heavy rain"
            precipitation = 20 + rng.random() * 30
            probability = 0.8 + rng.random() * 0.2
            visibility = 2000 + rng.random() * 3000
        else:
            wind = base_wind
            gust = base_wind + 5 + rng.random() * 10
            condition = rng.choice(CALM_CONDITIONS)
            description = "scattered clouds"
            precipitation = rng.random() * 10
            probability = rng.random() * 0.5
            visibility = 8000 + rng.random() * 2000

        return DailyForecast(
            date=date,
            condition=condition,
            description=description,
            temperature_c=20 + rng.random() * 10,
            temperature_min_c=15 + rng.random() * 5,
            temperature_max_c=25 + rng.random() * 5,
            wind_speed_ms=wind,
            wind_gust_ms=gust,
            wind_direction_deg=rng.random() * 360,
            precipitation_mm=precipitation,
            precipitation_probability=probability,
            visibility_m=visibility,
            pressure_hpa=1010 + rng.random() * 20,
            humidity_percent=60 + rng.random() * 30,
            cloud_cover_percent=rng.random() * 100,
        )

    def get_max_forecast_days(self) -> int:
        return self.forecast_days
