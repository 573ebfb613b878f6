"""FastAPI application factory.

Creates and configures the FastAPI application with all routes and middleware.

## Usage

```python
from voyage_weather.api import create_app

app = create_app()

# Run with uvicorn
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
```

## Configuration

The app is configured via environment variables. See `voyage_weather.config`
for available settings.

## Errors

| Exception | Status |
|-----------|--------|
| InvalidInputError, request validation errors | 400 |
| DegenerateGeometryError | 422 |
| UpstreamUnavailableError | 502 |
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from voyage_weather.config import Settings, get_settings
from voyage_weather.engine.planner import VoyagePlanner
from voyage_weather.errors import (
    DegenerateGeometryError,
    InvalidInputError,
    UpstreamUnavailableError,
)
from voyage_weather.providers import WeatherProvider, create_provider

logger = logging.getLogger(__name__)


def _error(status_code: int, message: str, **extra: object) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message, **extra})


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(InvalidInputError)
    async def invalid_input(request: Request, exc: InvalidInputError) -> JSONResponse:
        return _error(400, str(exc), field=exc.field)

    @app.exception_handler(RequestValidationError)
    async def invalid_request(request: Request, exc: RequestValidationError) -> JSONResponse:
        return _error(
            400,
            "Invalid request",
            details=jsonable_errors(exc),
        )

    @app.exception_handler(DegenerateGeometryError)
    async def degenerate_geometry(
        request: Request, exc: DegenerateGeometryError
    ) -> JSONResponse:
        return _error(422, str(exc))

    @app.exception_handler(UpstreamUnavailableError)
    async def upstream_unavailable(
        request: Request, exc: UpstreamUnavailableError
    ) -> JSONResponse:
        logger.error(f"Upstream weather unavailable: {exc}")
        return _error(502, str(exc), failures=exc.failures)


def jsonable_errors(exc: RequestValidationError) -> list[dict[str, object]]:
    """Validation errors reduced to JSON-safe location/message pairs."""
    return [
        {"loc": [str(part) for part in error.get("loc", ())], "msg": error.get("msg", "")}
        for error in exc.errors()
    ]


def create_app(
    provider: WeatherProvider | None = None,
    settings: Settings | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        provider: Weather provider to use. When omitted, one is built from
            the settings at startup and closed at shutdown.
        settings: Application settings (default: cached environment settings)

    Returns:
        Configured FastAPI application
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Application lifespan manager.

        Builds the weather provider and planner on startup and closes the
        provider on shutdown (unless it was injected).
        """
        logger.info(f"Starting {settings.app_name} v{settings.app_version}")

        active = provider or create_provider(settings)
        app.state.provider = active
        app.state.planner = VoyagePlanner(active, settings=settings)
        logger.info(f"Using weather provider: {active.name}")

        yield

        logger.info("Shutting down")
        if provider is None:
            await active.aclose()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Maritime route planning with weather risk assessment",
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    _register_exception_handlers(app)

    # Include routers
    from voyage_weather.api.routes import weather

    app.include_router(weather.router, prefix="/api/weather", tags=["Weather"])

    # Health check endpoint
    @app.get("/health", tags=["Health"])
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "version": settings.app_version}

    return app
