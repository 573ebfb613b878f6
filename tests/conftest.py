"""Pytest fixtures for voyage weather tests.

This module provides test fixtures that ensure:
1. No external API calls are made (weather providers are faked or mocked)
2. Isolated test environment with controlled configuration
3. Deterministic randomness (every random source is seeded)
"""

import os
import random
from datetime import datetime, timedelta, timezone

import pytest

# Set test environment BEFORE importing application modules
# This ensures no real services are contacted during test collection
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("WEATHER_PROVIDER", "mock")
os.environ.setdefault("RANDOM_SEED", "42")
os.environ.pop("OPENWEATHER_API_KEY", None)

from voyage_weather.models.location import Coordinates
from voyage_weather.models.vessel import VesselLimits
from voyage_weather.models.weather import (
    CurrentConditions,
    DailyForecast,
    PointForecast,
    RouteDayForecast,
    WeatherCondition,
)
from voyage_weather.providers.base import ProviderError, WeatherProvider
from voyage_weather.units import KNOTS_PER_MS

BASE_DATE = datetime(2024, 6, 15, tzinfo=timezone.utc)


# =============================================================================
# Test Isolation Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache():
    """Reset settings cache before each test to ensure clean state."""
    from voyage_weather.config import get_settings
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


# =============================================================================
# Builders
# =============================================================================


def knots(value: float) -> float:
    """Wind speed in m/s for a speed given in knots."""
    return value / KNOTS_PER_MS


def make_daily(
    day: int = 0,
    wind_kn: float = 10.0,
    condition: WeatherCondition = WeatherCondition.CLEAR,
    **overrides,
) -> DailyForecast:
    """Daily point forecast with wind given in knots."""
    values = {
        "date": BASE_DATE + timedelta(days=day),
        "condition": condition,
        "temperature_c": 20.0,
        "wind_speed_ms": knots(wind_kn),
        "wind_direction_deg": 180.0,
        "precipitation_mm": 0.0,
        "visibility_m": 10000.0,
        "pressure_hpa": 1013.0,
        "humidity_percent": 70.0,
        "cloud_cover_percent": 20.0,
    }
    values.update(overrides)
    return DailyForecast(**values)


def make_point_forecast(
    coordinates: Coordinates,
    days: int = 10,
    wind_kn: float = 10.0,
    condition: WeatherCondition = WeatherCondition.CLEAR,
) -> PointForecast:
    """Point forecast with identical days."""
    return PointForecast(
        location=coordinates,
        generated_at=BASE_DATE,
        provider="fake",
        current=CurrentConditions(
            time=BASE_DATE,
            temperature_c=20.0,
            wind_speed_ms=knots(wind_kn),
            wind_direction_deg=90.0,
            visibility_m=10000.0,
            pressure_hpa=1013.0,
            humidity_percent=70.0,
            condition=condition,
        ),
        daily=[make_daily(i, wind_kn, condition) for i in range(days)],
    )


def make_route_day(
    day_index: int = 0,
    wind_kn: int = 10,
    wave_m: float = 1.0,
    sea_state: int = 3,
    condition: WeatherCondition = WeatherCondition.CLEAR,
    visibility_km: float = 10.0,
    **overrides,
) -> RouteDayForecast:
    """Aggregated route forecast day."""
    return RouteDayForecast(
        day_index=day_index,
        date=BASE_DATE + timedelta(days=day_index),
        condition=condition,
        temperature_c=20,
        wind_speed_kn=wind_kn,
        wave_height_m=wave_m,
        sea_state=sea_state,
        visibility_km=visibility_km,
        **overrides,
    )


class FakeWeatherProvider(WeatherProvider):
    """In-memory provider with scripted failures.

    Points whose rounded coordinates appear in `failing` raise
    ProviderError; `fail_all` makes every lookup fail.
    """

    name = "fake"

    def __init__(
        self,
        days: int = 10,
        wind_kn: float = 10.0,
        condition: WeatherCondition = WeatherCondition.CLEAR,
        failing: set[tuple[float, float]] | None = None,
        fail_all: bool = False,
    ):
        self.days = days
        self.wind_kn = wind_kn
        self.condition = condition
        self.failing = failing or set()
        self.fail_all = fail_all
        self.calls: list[Coordinates] = []
        self.closed = False

    async def get_forecast(self, coordinates: Coordinates) -> PointForecast:
        self.calls.append(coordinates)
        key = (round(coordinates.latitude, 4), round(coordinates.longitude, 4))
        if self.fail_all or key in self.failing:
            raise ProviderError("scripted failure", provider=self.name)
        return make_point_forecast(coordinates, self.days, self.wind_kn, self.condition)

    def get_max_forecast_days(self) -> int:
        return self.days

    async def aclose(self) -> None:
        self.closed = True


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def sample_coordinates() -> Coordinates:
    """Sample coordinates for New York City."""
    return Coordinates(latitude=40.7128, longitude=-74.0060)


@pytest.fixture
def equator_origin() -> Coordinates:
    return Coordinates(latitude=0, longitude=0)


@pytest.fixture
def equator_destination() -> Coordinates:
    """10 degrees east of the origin along the equator."""
    return Coordinates(latitude=0, longitude=10)


@pytest.fixture
def cargo_limits() -> VesselLimits:
    """Generic limits: 35 kn wind, 4 m waves."""
    return VesselLimits(max_wind_speed_kn=35, max_wave_height_m=4)


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def fake_provider() -> FakeWeatherProvider:
    """Calm-weather fake provider."""
    return FakeWeatherProvider()
