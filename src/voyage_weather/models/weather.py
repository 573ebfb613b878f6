"""Weather and forecast models.

Point forecasts use the canonical SI units every provider translates into
(see `voyage_weather.providers.base`). Route forecasts are expressed in
marine units: knots for wind and current, metres for waves, kilometres for
visibility.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from voyage_weather.models.location import Coordinates


class WeatherCondition(str, Enum):
    """Categorical weather condition vocabulary."""

    CLEAR = "Clear"
    CLOUDS = "Clouds"
    RAIN = "Rain"
    DRIZZLE = "Drizzle"
    STORM = "Storm"
    THUNDERSTORM = "Thunderstorm"
    SNOW = "Snow"
    FOG = "Fog"
    MIST = "Mist"

    @property
    def is_stormy(self) -> bool:
        """Storm and thunderstorm both count as storm conditions."""
        return self in (WeatherCondition.STORM, WeatherCondition.THUNDERSTORM)


class CurrentConditions(BaseModel):
    """Observed conditions at a point right now."""

    time: datetime | None = Field(default=None, description="Observation time")
    temperature_c: float | None = None
    feels_like_c: float | None = None
    wind_speed_ms: float = Field(default=0.0, ge=0)
    wind_gust_ms: float | None = Field(default=None, ge=0)
    wind_direction_deg: float | None = Field(default=None, ge=0, le=360)
    visibility_m: float | None = Field(default=None, ge=0)
    pressure_hpa: float | None = None
    humidity_percent: float | None = Field(default=None, ge=0, le=100)
    cloud_cover_percent: float | None = Field(default=None, ge=0, le=100)
    condition: WeatherCondition = WeatherCondition.CLEAR
    description: str | None = None


class DailyForecast(BaseModel):
    """Weather forecast for a single day at a single point."""

    date: datetime = Field(..., description="Start of the forecast day (UTC)")
    condition: WeatherCondition = Field(
        default=WeatherCondition.CLEAR, description="Dominant weather condition"
    )
    description: str | None = Field(default=None, description="Provider description")

    # Temperature
    temperature_c: float = Field(default=20.0, description="Day temperature in Celsius")
    temperature_min_c: float | None = None
    temperature_max_c: float | None = None

    # Wind
    wind_speed_ms: float = Field(default=0.0, ge=0, description="Mean wind speed (m/s)")
    wind_gust_ms: float | None = Field(default=None, ge=0, description="Max gust (m/s)")
    wind_direction_deg: float = Field(
        default=0.0, ge=0, le=360, description="Wind direction (0=N, 90=E)"
    )

    # Precipitation
    precipitation_mm: float = Field(default=0.0, ge=0, description="Rain + snow (mm)")
    precipitation_probability: float | None = Field(default=None, ge=0, le=1)

    # Atmosphere
    visibility_m: float = Field(default=10000.0, ge=0, description="Visibility (m)")
    pressure_hpa: float = Field(default=1013.0, description="Sea-level pressure (hPa)")
    humidity_percent: float = Field(default=70.0, ge=0, le=100)
    cloud_cover_percent: float = Field(default=0.0, ge=0, le=100)


class PointForecast(BaseModel):
    """Multi-day forecast for one coordinate, as returned by a provider."""

    location: Coordinates = Field(..., description="Location of the forecast")
    generated_at: datetime = Field(..., description="When the forecast was generated")
    provider: str = Field(..., description="Weather data provider name")

    current: CurrentConditions | None = Field(
        default=None, description="Current conditions, when the provider has them"
    )
    daily: list[DailyForecast] = Field(
        default_factory=list, description="Daily forecast, nearest day first"
    )


class MarineDailyForecast(DailyForecast):
    """Daily forecast annotated with estimated marine conditions.

    The marine fields are derived from wind speed (and position, for the
    current) and are never fetched from a provider.
    """

    wave_height_m: float = Field(..., ge=0)
    swell_height_m: float = Field(..., ge=0)
    sea_state: int = Field(..., ge=0, le=8, description="Douglas sea scale")
    wave_period_s: float = Field(..., ge=0)
    swell_period_s: float = Field(..., ge=0)
    current_speed_kn: float = Field(..., ge=0)
    current_direction_deg: float = Field(..., ge=0, lt=360)


class RouteDayForecast(BaseModel):
    """One day of the route forecast, aggregated across waypoints.

    Ordering by `day_index` is the route's temporal ordering; day 0 is the
    day nearest the sampling start.
    """

    day_index: int = Field(..., ge=0)
    date: datetime | None = None
    condition: WeatherCondition = WeatherCondition.CLEAR

    temperature_c: int
    wind_speed_kn: int = Field(..., ge=0)
    wind_gust_kn: int = Field(default=0, ge=0)
    wind_direction_deg: int = Field(default=0, ge=0, le=360)
    wind_direction_text: str = "N"

    wave_height_m: float = Field(..., ge=0)
    swell_height_m: float = Field(default=0.0, ge=0)
    wave_period_s: float = Field(default=0.0, ge=0)
    swell_period_s: float = Field(default=0.0, ge=0)
    sea_state: int = Field(..., ge=0, le=8)
    sea_state_description: str = ""
    current_speed_kn: float = Field(default=0.0, ge=0)
    current_direction_deg: float = Field(default=0.0, ge=0, lt=360)

    precipitation_mm: float = Field(default=0.0, ge=0)
    visibility_km: float = Field(default=10.0, ge=0)
    pressure_hpa: int = 1013
    humidity_percent: int = Field(default=70, ge=0, le=100)
    cloud_cover_percent: int = Field(default=0, ge=0, le=100)

    waypoint_count: int = Field(
        default=1, ge=1, description="Waypoints that contributed to this day"
    )

    @property
    def is_calm(self) -> bool:
        """Calm day: wind under 15 kn and waves under 2 m."""
        return self.wind_speed_kn < 15 and self.wave_height_m < 2
