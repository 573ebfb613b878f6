"""Errors raised by the route-weather engine.

Every error is scoped to a single planning request. The engine keeps no
long-lived state, so none of these is fatal to the process.

| Error | Raised when | HTTP status |
|-------|-------------|-------------|
| InvalidInputError | Coordinates missing, out of range or non-finite | 400 |
| DegenerateGeometryError | Great-circle path undefined (antipodal endpoints) | 422 |
| UpstreamUnavailableError | Every waypoint weather lookup failed | 502 |
"""

from __future__ import annotations


class VoyageWeatherError(Exception):
    """Base exception for route-weather engine errors."""


class InvalidInputError(VoyageWeatherError, ValueError):
    """Raised when request input is rejected before any computation."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.field = field


class DegenerateGeometryError(VoyageWeatherError):
    """Raised when endpoints make the great-circle path undefined."""


class UpstreamUnavailableError(VoyageWeatherError):
    """Raised when no weather data could be obtained for a request."""

    def __init__(self, message: str, failures: list[str] | None = None):
        super().__init__(message)
        self.failures = failures or []
