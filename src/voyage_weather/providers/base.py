"""Base weather provider abstraction.

This module defines the interface the route-weather engine consumes and the
canonical format every provider translates its data into.

## Canonical Data Format

Providers return a `PointForecast` (see `voyage_weather.models.weather`):
optional current conditions plus one `DailyForecast` per day, nearest day
first. The engine only calls `get_forecast(coordinates)`; caching, rate
limiting and mock fallback are the provider's business.

### Canonical Units (SI-based)
- Temperature: Celsius (°C)
- Wind speed: meters per second (m/s)
- Pressure: hectopascals (hPa)
- Precipitation: millimeters (mm) per day
- Visibility: meters (m)
- Cloud cover: percentage (0-100)
- Humidity: percentage (0-100)
- Wind direction: degrees (0-360, where 0=N, 90=E, 180=S, 270=W)

Marine fields (waves, swell, currents) are never provided; the engine
estimates them from wind speed and position.

### Translation Requirements
HTTP providers implement `_translate_response()` to convert their API
response into a `PointForecast`.

## Supported Providers

### OpenWeatherMap (api.openweathermap.org)
- Endpoints: /data/2.5/weather (current), /data/2.5/forecast (5 day / 3 hour)
- Auth: API key in the `appid` query parameter
- Native units: `units=metric` gives Celsius and m/s
- See `voyage_weather.providers.openweather`

### Mock
- Seeded synthetic forecasts, no network
- See `voyage_weather.providers.mock`
"""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from typing import Any

import httpx
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
)

from voyage_weather.models.location import Coordinates
from voyage_weather.models.weather import PointForecast


class ProviderError(Exception):
    """Base exception for weather provider errors."""

    def __init__(
        self,
        message: str,
        provider: str,
        status_code: int | None = None,
        response_body: str | None = None,
    ):
        super().__init__(message)
        self.provider = provider
        self.status_code = status_code
        self.response_body = response_body


class RateLimitError(ProviderError):
    """Raised when provider rate limit is exceeded."""

    def __init__(
        self,
        provider: str,
        retry_after: int | None = None,
        status_code: int | None = None,
    ):
        super().__init__(
            f"Rate limit exceeded for {provider}",
            provider=provider,
            status_code=status_code,
        )
        self.retry_after = retry_after


class AuthenticationError(ProviderError):
    """Raised when authentication fails."""

    pass


class ForecastCache:
    """In-memory forecast cache with a fixed time-to-live.

    Keys are coordinates rounded to 4 decimal places (about 11 m). A TTL of
    0 disables caching.

    Expired entries are swept on every `set()`. When the cache is still at
    `max_entries`, the oldest entry is evicted.
    """

    def __init__(self, ttl_seconds: float = 3600, max_entries: int = 1024):
        self.ttl_seconds = ttl_seconds
        self.max_entries = max(1, max_entries)
        self._entries: dict[tuple[float, float], tuple[float, PointForecast]] = {}

    @staticmethod
    def key(coordinates: Coordinates) -> tuple[float, float]:
        return (round(coordinates.latitude, 4), round(coordinates.longitude, 4))

    def get(self, coordinates: Coordinates) -> PointForecast | None:
        if self.ttl_seconds <= 0:
            return None
        key = self.key(coordinates)
        entry = self._entries.get(key)
        if entry is None:
            return None
        expires_at, forecast = entry
        if time.monotonic() >= expires_at:
            del self._entries[key]
            return None
        return forecast

    def set(self, coordinates: Coordinates, forecast: PointForecast) -> None:
        if self.ttl_seconds <= 0:
            return
        now = time.monotonic()
        key = self.key(coordinates)
        self._sweep(now)
        self._entries.pop(key, None)
        while len(self._entries) >= self.max_entries:
            # dicts keep insertion order, so the first key is the oldest
            del self._entries[next(iter(self._entries))]
        self._entries[key] = (now + self.ttl_seconds, forecast)

    def _sweep(self, now: float) -> None:
        expired = [k for k, (expires_at, _) in self._entries.items() if now >= expires_at]
        for key in expired:
            del self._entries[key]

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


class WeatherProvider(ABC):
    """Abstract base class for weather data providers.

    Attributes:
        name: Human-readable provider name

    Example:
        ```python
        async with create_provider(settings) as provider:
            forecast = await provider.get_forecast(
                Coordinates(latitude=40.7128, longitude=-74.0060)
            )
        ```
    """

    name: str

    async def __aenter__(self) -> WeatherProvider:
        """Enter async context manager."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Exit async context manager."""
        await self.aclose()

    async def aclose(self) -> None:
        """Release any resources held by the provider."""
        return None

    @abstractmethod
    async def get_forecast(self, coordinates: Coordinates) -> PointForecast:
        """Get a multi-day forecast for a location.

        Args:
            coordinates: Location coordinates

        Returns:
            Forecast data in canonical format

        Raises:
            ProviderError: If forecast cannot be retrieved
        """
        pass

    def get_max_forecast_days(self) -> int:
        """Get maximum forecast days supported."""
        return 10


class HttpWeatherProvider(WeatherProvider):
    """Base class for providers backed by an HTTP API.

    Attributes:
        base_url: Base URL for the API
        requires_api_key: Whether this provider requires an API key
    """

    base_url: str
    requires_api_key: bool = False

    def __init__(
        self,
        api_key: str | None = None,
        user_agent: str | None = None,
        timeout: float = 30.0,
        cache_ttl_seconds: float = 3600,
        client: httpx.AsyncClient | None = None,
    ):
        """Initialize the provider.

        Args:
            api_key: API key if required by the provider
            user_agent: User-Agent string for requests
            timeout: Request timeout in seconds
            cache_ttl_seconds: How long forecasts are cached (0 disables)
            client: Pre-configured HTTP client. The provider does not close
                clients it did not create.
        """
        self.api_key = api_key
        self.user_agent = user_agent or "voyage-weather/0.1.0"
        self.timeout = timeout
        self._client: httpx.AsyncClient | None = client
        self._owns_client = client is None
        self._cache = ForecastCache(cache_ttl_seconds)

    async def __aenter__(self) -> HttpWeatherProvider:
        """Enter async context manager."""
        self._get_client()
        return self

    async def aclose(self) -> None:
        if self._client and self._owns_client:
            await self._client.aclose()
            self._client = None

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
            self._owns_client = True
        return self._client

    def _get_default_headers(self) -> dict[str, str]:
        """Get default headers for requests."""
        return {
            "User-Agent": self.user_agent,
            "Accept": "application/json",
        }

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        retry=retry_if_exception_type((httpx.TimeoutException, httpx.NetworkError)),
        reraise=True,
    )
    async def _fetch(
        self,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        """Fetch data from the API with retry logic.

        Timeouts and network errors are retried up to 3 attempts; the last
        one is re-raised.

        Args:
            url: Full URL to fetch
            params: Query parameters
            headers: Additional headers

        Returns:
            HTTP response

        Raises:
            ProviderError: If the API answers with an error status
            RateLimitError: If rate limit is exceeded
            AuthenticationError: If the API key is rejected
        """
        client = self._get_client()
        request_headers = self._get_default_headers()
        if headers:
            request_headers.update(headers)

        response = await client.get(url, params=params, headers=request_headers)

        # Handle rate limiting
        if response.status_code == 429:
            retry_after = response.headers.get("Retry-After")
            raise RateLimitError(
                self.name,
                retry_after=int(retry_after) if retry_after and retry_after.isdigit() else None,
                status_code=429,
            )

        if response.status_code in (401, 403):
            raise AuthenticationError(
                "Invalid API key",
                provider=self.name,
                status_code=response.status_code,
                response_body=response.text,
            )

        # Handle other errors
        if response.status_code >= 400:
            raise ProviderError(
                f"API request failed: {response.status_code}",
                provider=self.name,
                status_code=response.status_code,
                response_body=response.text,
            )

        return response

    async def _fetch_json(
        self,
        url: str,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Fetch and decode a JSON object.

        Transport failures that survive the retries are raised as
        ProviderError so callers only deal with one exception family.
        """
        try:
            response = await self._fetch(url, params=params)
        except httpx.HTTPError as e:
            raise ProviderError(
                f"Request to {self.name} failed: {e}",
                provider=self.name,
            ) from e

        try:
            data = response.json()
        except ValueError as e:
            raise ProviderError(
                f"Failed to parse response: {e}",
                provider=self.name,
                response_body=response.text,
            ) from e

        if not isinstance(data, dict):
            raise ProviderError(
                "Unexpected response shape",
                provider=self.name,
                response_body=response.text,
            )
        return data

    @abstractmethod
    def _translate_response(
        self,
        response_data: dict[str, Any],
        coordinates: Coordinates,
    ) -> PointForecast:
        """Translate provider-specific response to canonical format.

        Args:
            response_data: Raw JSON response from provider
            coordinates: Location coordinates

        Returns:
            PointForecast in canonical format
        """
        pass
