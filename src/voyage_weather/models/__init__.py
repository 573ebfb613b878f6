"""Domain models for voyage weather planning."""

from voyage_weather.models.location import Coordinates, Waypoint
from voyage_weather.models.weather import (
    CurrentConditions,
    DailyForecast,
    MarineDailyForecast,
    PointForecast,
    RouteDayForecast,
    WeatherCondition,
)
from voyage_weather.models.vessel import (
    DEFAULT_VESSEL_CATALOG,
    VesselCatalog,
    VesselConfig,
    VesselLimits,
    VesselProfile,
    VesselType,
)
from voyage_weather.models.route import CandidateRoute, RouteSpec
from voyage_weather.models.assessment import (
    Hazard,
    HazardReport,
    HazardSeverity,
    HistoricalStatistics,
    MarineSummary,
    RouteAnalysis,
    SafetyAssessment,
    StormWarning,
)
from voyage_weather.models.plan import (
    HistoricalWeather,
    MarineForecastReport,
    MarineSnapshot,
    OptimizationResult,
    PointWeather,
    RoutePlan,
    StormReport,
)

__all__ = [
    # Location
    "Coordinates",
    "Waypoint",
    # Weather
    "CurrentConditions",
    "DailyForecast",
    "MarineDailyForecast",
    "PointForecast",
    "RouteDayForecast",
    "WeatherCondition",
    # Vessel
    "DEFAULT_VESSEL_CATALOG",
    "VesselCatalog",
    "VesselConfig",
    "VesselLimits",
    "VesselProfile",
    "VesselType",
    # Route
    "CandidateRoute",
    "RouteSpec",
    # Assessment
    "Hazard",
    "HazardReport",
    "HazardSeverity",
    "HistoricalStatistics",
    "MarineSummary",
    "RouteAnalysis",
    "SafetyAssessment",
    "StormWarning",
    # Plan
    "HistoricalWeather",
    "MarineForecastReport",
    "MarineSnapshot",
    "OptimizationResult",
    "PointWeather",
    "RoutePlan",
    "StormReport",
]
