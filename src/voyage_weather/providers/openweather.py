"""OpenWeatherMap weather provider.

## API Documentation Summary
Source: https://openweathermap.org/current
Source: https://openweathermap.org/forecast5

## Endpoints
- Current weather: {base_url}/weather?lat={lat}&lon={lon}&appid={key}&units=metric
- 5 day / 3 hour forecast: {base_url}/forecast?lat={lat}&lon={lon}&appid={key}&units=metric&cnt=40

## Authentication
- API key required, passed as the `appid` query parameter
- Invalid key returns 401

## Rate Limiting
- Free tier: 60 calls/minute, 1,000,000 calls/month
- Responses are cached in memory per coordinate (default 1 hour)

## Response Format (forecast)
```json
{
  "list": [
    {
      "dt": 1704110400,
      "main": {"temp": 21.3, "temp_min": 20.1, "temp_max": 21.3,
               "pressure": 1014, "humidity": 72},
      "weather": [{"main": "Clouds", "description": "scattered clouds"}],
      "clouds": {"all": 40},
      "wind": {"speed": 6.2, "deg": 210, "gust": 8.1},
      "visibility": 10000,
      "pop": 0.2,
      "rain": {"3h": 0.4}
    }
  ]
}
```

## Daily Translation (3-hour entries grouped by UTC day)
| Canonical Field | Derived From | Rule |
|-----------------|--------------|------|
| temperature_c | main.temp | mean |
| temperature_min_c / max_c | main.temp | min / max |
| wind_speed_ms | wind.speed | mean |
| wind_gust_ms | wind.gust (or speed) | max |
| wind_direction_deg | wind.deg | mean |
| precipitation_mm | rain.3h + snow.3h | sum |
| precipitation_probability | pop | max |
| visibility_m | visibility (default 10000) | mean |
| pressure_hpa / humidity_percent | main.pressure / main.humidity | mean |
| cloud_cover_percent | clouds.all | mean |
| condition | weather[0].main | most frequent |

The free endpoint covers about 5 days. The daily series is padded to
`forecast_days` by repeating the last day with jittered temperature, wind,
gust and rain. Unexpected payload shapes are raised as ProviderError.

### Condition mapping (weather[0].main -> WeatherCondition)
| main | WeatherCondition |
|------|------------------|
| Clear, Clouds, Rain, Drizzle, Thunderstorm, Snow, Mist, Fog | same name |
| Haze, Smoke, Dust, Sand, Ash | MIST |
| Squall, Tornado | STORM |
"""

from __future__ import annotations

import asyncio
import logging
import random
from collections import Counter
from datetime import datetime, timedelta, timezone
from typing import Any

import httpx

from voyage_weather.models.location import Coordinates
from voyage_weather.models.weather import (
    CurrentConditions,
    DailyForecast,
    PointForecast,
    WeatherCondition,
)
from voyage_weather.providers.base import (
    AuthenticationError,
    HttpWeatherProvider,
    ProviderError,
)

logger = logging.getLogger(__name__)


MAIN_TO_CONDITION: dict[str, WeatherCondition] = {
    "Clear": WeatherCondition.CLEAR,
    "Clouds": WeatherCondition.CLOUDS,
    "Rain": WeatherCondition.RAIN,
    "Drizzle": WeatherCondition.DRIZZLE,
    "Thunderstorm": WeatherCondition.THUNDERSTORM,
    "Storm": WeatherCondition.STORM,
    "Snow": WeatherCondition.SNOW,
    "Mist": WeatherCondition.MIST,
    "Fog": WeatherCondition.FOG,
    "Haze": WeatherCondition.MIST,
    "Smoke": WeatherCondition.MIST,
    "Dust": WeatherCondition.MIST,
    "Sand": WeatherCondition.MIST,
    "Ash": WeatherCondition.MIST,
    "Squall": WeatherCondition.STORM,
    "Tornado": WeatherCondition.STORM,
}

DEFAULT_VISIBILITY_M = 10000.0


def _parse_main(main: str | None) -> WeatherCondition:
    """Map OpenWeatherMap's weather[0].main to WeatherCondition."""
    if not main:
        return WeatherCondition.CLEAR
    return MAIN_TO_CONDITION.get(main, WeatherCondition.CLOUDS)


def _unix_to_datetime(timestamp: int | float | None) -> datetime | None:
    """Convert Unix timestamp to UTC datetime."""
    if timestamp is None:
        return None
    return datetime.fromtimestamp(timestamp, tz=timezone.utc)


def _mean(values: list[float]) -> float:
    return sum(values) / len(values)


def _first_weather(item: dict[str, Any]) -> dict[str, Any]:
    weather = item.get("weather") or [{}]
    return weather[0]


class OpenWeatherProvider(HttpWeatherProvider):
    """OpenWeatherMap current weather + 5 day / 3 hour forecast provider.

    Example:
        ```python
        async with OpenWeatherProvider(api_key="your-api-key") as provider:
            forecast = await provider.get_forecast(
                Coordinates(latitude=40.7128, longitude=-74.0060)
            )
        ```
    """

    name = "openweather"
    base_url = "https://api.openweathermap.org/data/2.5"
    requires_api_key = True

    def __init__(
        self,
        api_key: str | None,
        base_url: str | None = None,
        user_agent: str | None = None,
        timeout: float = 30.0,
        cache_ttl_seconds: float = 3600,
        forecast_days: int = 10,
        rng: random.Random | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        """Initialize OpenWeatherMap provider.

        Args:
            api_key: OpenWeatherMap API key
            base_url: Override the API base URL
            user_agent: Optional User-Agent string
            timeout: Request timeout in seconds
            cache_ttl_seconds: Forecast cache lifetime (0 disables)
            forecast_days: Length the daily series is padded to
            rng: Random source for padding jitter
            client: Pre-configured HTTP client (e.g. for tests)
        """
        super().__init__(
            api_key=api_key,
            user_agent=user_agent,
            timeout=timeout,
            cache_ttl_seconds=cache_ttl_seconds,
            client=client,
        )
        if base_url:
            self.base_url = base_url.rstrip("/")
        self.forecast_days = forecast_days
        self.rng = rng or random.Random()

    async def get_forecast(self, coordinates: Coordinates) -> PointForecast:
        """Get current conditions and a daily forecast from OpenWeatherMap.

        Args:
            coordinates: Location (lat/lon)

        Returns:
            PointForecast in canonical format

        Raises:
            AuthenticationError: If no API key is configured or it is rejected
            ProviderError: If a request fails or the response is unusable
        """
        cached = self._cache.get(coordinates)
        if cached is not None:
            logger.debug(f"Cache hit for {coordinates}")
            return cached

        if not self.api_key:
            raise AuthenticationError(
                "API key required for OpenWeatherMap",
                provider=self.name,
            )

        params: dict[str, Any] = {
            "lat": coordinates.latitude,
            "lon": coordinates.longitude,
            "appid": self.api_key,
            "units": "metric",
        }

        logger.debug(f"Fetching OpenWeatherMap data for {coordinates}")
        current, forecast = await asyncio.gather(
            self._fetch_json(f"{self.base_url}/weather", params=params),
            self._fetch_json(f"{self.base_url}/forecast", params={**params, "cnt": 40}),
        )

        try:
            result = self._translate_response(
                {"current": current, "forecast": forecast}, coordinates
            )
        except (KeyError, TypeError, AttributeError, ValueError) as e:
            # ValueError also covers pydantic.ValidationError
            raise ProviderError(
                f"Malformed response for {coordinates}: {e}",
                provider=self.name,
            ) from e
        self._cache.set(coordinates, result)
        return result

    def _translate_response(
        self,
        response_data: dict[str, Any],
        coordinates: Coordinates,
    ) -> PointForecast:
        """Translate the current + forecast responses to canonical format.

        See module docstring for detailed field mapping.
        """
        current = self._translate_current(response_data.get("current") or {})
        items = (response_data.get("forecast") or {}).get("list") or []

        daily = self._group_daily(items)[: self.forecast_days]
        if not daily:
            raise ProviderError(
                "Forecast response contained no entries",
                provider=self.name,
            )
        daily = self._pad_daily(daily)

        return PointForecast(
            location=coordinates,
            generated_at=datetime.now(timezone.utc),
            provider=self.name,
            current=current,
            daily=daily,
        )

    def _translate_current(self, data: dict[str, Any]) -> CurrentConditions | None:
        if not data:
            return None

        main = data.get("main", {})
        wind = data.get("wind", {})
        weather = _first_weather(data)
        wind_speed = wind.get("speed") or 0.0

        return CurrentConditions(
            time=_unix_to_datetime(data.get("dt")),
            temperature_c=main.get("temp"),
            feels_like_c=main.get("feels_like"),
            wind_speed_ms=wind_speed,
            wind_gust_ms=wind.get("gust") or wind_speed,
            wind_direction_deg=wind.get("deg"),
            visibility_m=data.get("visibility"),
            pressure_hpa=main.get("pressure"),
            humidity_percent=main.get("humidity"),
            cloud_cover_percent=data.get("clouds", {}).get("all"),
            condition=_parse_main(weather.get("main")),
            description=weather.get("description"),
        )

    def _group_daily(self, items: list[dict[str, Any]]) -> list[DailyForecast]:
        """Group 3-hour entries into UTC days, in order of appearance."""
        groups: dict[datetime, list[dict[str, Any]]] = {}
        for item in items:
            time = _unix_to_datetime(item.get("dt"))
            if time is None:
                continue
            day = time.replace(hour=0, minute=0, second=0, microsecond=0)
            groups.setdefault(day, []).append(item)

        daily: list[DailyForecast] = []
        for day, entries in groups.items():
            temps = [e.get("main", {}).get("temp", 20.0) for e in entries]
            speeds = [e.get("wind", {}).get("speed") or 0.0 for e in entries]
            gusts = [
                e.get("wind", {}).get("gust") or e.get("wind", {}).get("speed") or 0.0
                for e in entries
            ]
            degs = [e.get("wind", {}).get("deg") or 0.0 for e in entries]
            conditions = [_parse_main(_first_weather(e).get("main")) for e in entries]
            precipitation = sum(
                (e.get("rain") or {}).get("3h", 0.0) + (e.get("snow") or {}).get("3h", 0.0)
                for e in entries
            )
            pops = [e["pop"] for e in entries if e.get("pop") is not None]

            daily.append(
                DailyForecast(
                    date=day,
                    condition=Counter(conditions).most_common(1)[0][0],
                    description=_first_weather(entries[0]).get("description"),
                    temperature_c=_mean(temps),
                    temperature_min_c=min(temps),
                    temperature_max_c=max(temps),
                    wind_speed_ms=_mean(speeds),
                    wind_gust_ms=max(gusts),
                    wind_direction_deg=_mean(degs),
                    precipitation_mm=precipitation,
                    precipitation_probability=max(pops) if pops else None,
                    visibility_m=_mean(
                        [e.get("visibility") or DEFAULT_VISIBILITY_M for e in entries]
                    ),
                    pressure_hpa=_mean([e.get("main", {}).get("pressure", 1013) for e in entries]),
                    humidity_percent=_mean([e.get("main", {}).get("humidity", 70) for e in entries]),
                    cloud_cover_percent=_mean([e.get("clouds", {}).get("all", 0) for e in entries]),
                )
            )

        return daily

    def _pad_daily(self, daily: list[DailyForecast]) -> list[DailyForecast]:
        """Repeat the last day, with jitter, until `forecast_days` days exist."""
        padded = list(daily)
        while len(padded) < self.forecast_days:
            last = padded[-1]
            wind = 5 + self.rng.random() * 15
            padded.append(
                last.model_copy(
                    update={
                        "date": last.date + timedelta(days=1),
                        "temperature_c": 20 + self.rng.random() * 10,
                        "temperature_min_c": 15 + self.rng.random() * 5,
                        "temperature_max_c": 25 + self.rng.random() * 5,
                        "wind_speed_ms": wind,
                        "wind_gust_ms": wind + 5 + self.rng.random() * 10,
                        "precipitation_mm": self.rng.random() * 5,
                    }
                )
            )
        return padded

    def get_max_forecast_days(self) -> int:
        """Five days of real data, padded to `forecast_days`."""
        return self.forecast_days
