"""Result envelopes returned by the planner."""

from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, Field, computed_field

from voyage_weather.models.assessment import (
    HazardReport,
    HistoricalStatistics,
    MarineSummary,
    RouteAnalysis,
    SafetyAssessment,
    StormWarning,
)
from voyage_weather.models.location import Coordinates
from voyage_weather.models.route import CandidateRoute, RouteSpec
from voyage_weather.models.vessel import VesselLimits
from voyage_weather.models.weather import MarineDailyForecast, RouteDayForecast


class RoutePlan(BaseModel):
    """Result of planning a route: geometry, forecast and safety."""

    route: RouteSpec
    forecast: list[RouteDayForecast] = Field(default_factory=list)
    safety: SafetyAssessment
    report: HazardReport
    vessel_limits: VesselLimits
    fuel_estimate_tons: float | None = Field(
        default=None, ge=0, description="Weather-adjusted fuel estimate"
    )
    departure_time: datetime | None = None
    estimated_arrival: datetime | None = None
    failed_waypoints: list[str] = Field(
        default_factory=list, description="Waypoints whose weather lookup failed"
    )


class OptimizationResult(BaseModel):
    """Ranked candidate routes."""

    recommended: CandidateRoute
    alternatives: list[CandidateRoute] = Field(default_factory=list)
    analysis: RouteAnalysis
    departure_time: datetime | None = None


class MarineSnapshot(BaseModel):
    """Marine conditions at a point right now."""

    location: str
    temperature_c: float | None = None
    wind_speed_kn: float = 0
    wind_gust_kn: float = 0
    wind_direction_deg: float = 0
    wind_direction_text: str = "N"
    condition: str = "Unknown"
    visibility_km: float = 10
    pressure_hpa: float | None = None
    humidity_percent: float | None = None
    wave_height_m: float = 0
    wave_period_s: float = 0
    swell_height_m: float = 0
    swell_period_s: float = 0
    sea_state: int = 0
    current_speed_kn: float = 0
    current_direction_deg: float = 0


class PointWeather(BaseModel):
    """Current marine conditions and short forecast for one point."""

    location: Coordinates
    current: MarineSnapshot | None = None
    forecast: list[MarineDailyForecast] = Field(default_factory=list)


class StormReport(BaseModel):
    """Storm warnings for a point."""

    location: Coordinates
    radius_nm: float = 100
    warnings: list[StormWarning] = Field(default_factory=list)

    @computed_field
    @property
    def safety_status(self) -> str:
        return "safe" if not self.warnings else "hazardous"


class MarineForecastReport(BaseModel):
    """Marine conditions for a list of points plus a worst-case summary."""

    conditions: list[MarineSnapshot] = Field(default_factory=list)
    summary: MarineSummary


class HistoricalWeather(BaseModel):
    """Daily conditions for the period ending on a date, with statistics."""

    location: Coordinates
    end_date: date = Field(..., description="Last day of the period")
    days: list[RouteDayForecast] = Field(default_factory=list)
    statistics: HistoricalStatistics
