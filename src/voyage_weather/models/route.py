"""Route models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from voyage_weather.models.location import Coordinates, Waypoint
from voyage_weather.models.weather import RouteDayForecast


class RouteSpec(BaseModel):
    """A sampled route: ordered waypoints from origin to destination.

    Produced once per planning request and never mutated.
    """

    model_config = ConfigDict(frozen=True)

    waypoints: tuple[Waypoint, ...] = Field(..., min_length=1)
    total_distance_nm: float = Field(..., ge=0, description="Sum of leg distances")
    bearing_deg: float = Field(..., ge=0, lt=360, description="Initial bearing")
    vessel_speed_kn: float = Field(..., gt=0)
    estimated_duration_hours: float = Field(..., ge=0)
    estimated_duration: str = Field(..., description="Duration as 'Xd Yh'")

    @property
    def origin(self) -> Coordinates:
        return self.waypoints[0].coordinates

    @property
    def destination(self) -> Coordinates:
        return self.waypoints[-1].coordinates

    @property
    def is_stationary(self) -> bool:
        """True when origin and destination coincide."""
        return self.total_distance_nm == 0


class CandidateRoute(BaseModel):
    """A candidate path evaluated by the route optimizer."""

    label: str = Field(..., description="e.g. 'Direct Route'")
    description: str = ""
    route: RouteSpec
    forecast: list[RouteDayForecast] = Field(default_factory=list)
    weather_score: float = Field(
        default=0.0, ge=0, description="Weather penalty, lower is safer"
    )
