"""FastAPI application and routes.

This module provides the REST API for the voyage weather service.

## API Structure

- /api/weather/route - Plan a route and assess weather risk
- /api/weather/optimize-route - Compare candidate routes
- /api/weather/point/{lat}/{lng} - Marine conditions at a point
- /api/weather/alerts/{lat}/{lng} - Storm warnings at a point
- /api/weather/marine-forecast - Marine conditions for several points
- /health - Health check

## Authentication

None. The service holds no user data and keeps no state between requests
apart from the weather provider's forecast cache.
"""

from voyage_weather.api.app import create_app

__all__ = ["create_app"]
