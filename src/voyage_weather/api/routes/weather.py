"""Weather routes.

Thin dispatch onto `VoyagePlanner`; all computation happens in the engine.

| Method | Path | Engine operation |
|--------|------|------------------|
| POST | /route | plan_route |
| POST | /optimize-route | optimize_route |
| GET | /point/{lat}/{lng} | point_weather |
| GET | /alerts/{lat}/{lng} | storm_alerts |
| POST | /marine-forecast | marine_forecast |
| GET | /historical/{lat}/{lng}/{on} | historical_weather |
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from pydantic import BaseModel, Field, ValidationError

from voyage_weather.engine.planner import VoyagePlanner
from voyage_weather.errors import InvalidInputError
from voyage_weather.models import (
    Coordinates,
    HistoricalWeather,
    MarineForecastReport,
    OptimizationResult,
    PointWeather,
    RoutePlan,
    StormReport,
    VesselConfig,
    VesselType,
)

router = APIRouter()


class RouteRequest(BaseModel):
    """Plan a route between two points."""

    origin: Coordinates
    destination: Coordinates
    vessel_type: VesselType | None = None
    max_wind_speed_kn: float | None = Field(
        default=None, gt=0, description="Overrides the vessel type's wind limit"
    )
    max_wave_height_m: float | None = Field(
        default=None, gt=0, description="Overrides the vessel type's wave limit"
    )
    departure_time: datetime | None = None
    origin_name: str | None = Field(default=None, max_length=100)
    destination_name: str | None = Field(default=None, max_length=100)

    def vessel_config(self) -> VesselConfig:
        return VesselConfig(
            vessel_type=self.vessel_type,
            max_wind_speed_kn=self.max_wind_speed_kn,
            max_wave_height_m=self.max_wave_height_m,
        )


class OptimizeRouteRequest(BaseModel):
    """Compare candidate routes between two points."""

    origin: Coordinates
    destination: Coordinates
    vessel_type: VesselType | None = None
    departure_time: datetime | None = None


class MarineForecastRequest(BaseModel):
    """Marine conditions for a list of points."""

    points: list[Coordinates] = Field(default_factory=list)


def get_planner(request: Request) -> VoyagePlanner:
    """Planner created in the application lifespan."""
    return request.app.state.planner


Planner = Annotated[VoyagePlanner, Depends(get_planner)]


def _coordinates(lat: float, lng: float) -> Coordinates:
    try:
        return Coordinates(latitude=lat, longitude=lng)
    except ValidationError as e:
        raise InvalidInputError(f"Invalid coordinates: {lat},{lng}", field="coordinates") from e


@router.post("/route", response_model=RoutePlan)
async def plan_route(body: RouteRequest, planner: Planner) -> RoutePlan:
    """Plan a great-circle route and assess weather risk along it."""
    return await planner.plan_route(
        body.origin,
        body.destination,
        body.vessel_config(),
        departure=body.departure_time,
        origin_name=body.origin_name,
        destination_name=body.destination_name,
    )


@router.post("/optimize-route", response_model=OptimizationResult)
async def optimize_route(body: OptimizeRouteRequest, planner: Planner) -> OptimizationResult:
    """Recommend the safest of the direct, northern and southern routes."""
    return await planner.optimize_route(
        body.origin,
        body.destination,
        body.vessel_type,
        departure=body.departure_time,
    )


@router.get("/point/{lat}/{lng}", response_model=PointWeather)
async def point_weather(lat: float, lng: float, planner: Planner) -> PointWeather:
    """Current marine conditions and 7-day forecast at a point."""
    return await planner.point_weather(_coordinates(lat, lng))


@router.get("/alerts/{lat}/{lng}", response_model=StormReport)
async def storm_alerts(
    lat: float,
    lng: float,
    planner: Planner,
    radius: float = Query(default=100, gt=0, description="Alert radius (nm)"),
) -> StormReport:
    """Storm warnings at a point."""
    return await planner.storm_alerts(_coordinates(lat, lng), radius_nm=radius)


@router.post("/marine-forecast", response_model=MarineForecastReport)
async def marine_forecast(
    body: MarineForecastRequest, planner: Planner
) -> MarineForecastReport:
    """Current marine conditions at each point plus a worst-case summary."""
    return await planner.marine_forecast(body.points)


@router.get("/historical/{lat}/{lng}/{on}", response_model=HistoricalWeather)
async def historical_weather(
    lat: float, lng: float, on: date, planner: Planner
) -> HistoricalWeather:
    """Conditions and statistics for the 30 days ending on a date (YYYY-MM-DD)."""
    return await planner.historical_weather(_coordinates(lat, lng), on)
