"""Hazard and safety assessment models."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class HazardSeverity(str, Enum):
    """Severity of a hazardous forecast day."""

    LOW = "low"
    MODERATE = "moderate"
    SEVERE = "severe"
    EXTREME = "extreme"


class Hazard(BaseModel):
    """A forecast day on which at least one safety threshold is breached."""

    day_index: int = Field(..., ge=0)
    date: datetime | None = None
    severity: HazardSeverity
    issues: list[str] = Field(default_factory=list, description="What was breached")
    recommendations: list[str] = Field(
        default_factory=list, description="What to do about it"
    )


class HazardReport(BaseModel):
    """Per-day hazards plus voyage-level recommendations."""

    hazards: list[Hazard] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)

    @property
    def worst_severity(self) -> HazardSeverity | None:
        if not self.hazards:
            return None
        order = list(HazardSeverity)
        return max((h.severity for h in self.hazards), key=order.index)


class SafetyAssessment(BaseModel):
    """Overall safety score for a route.

    Computed fresh on every request; never persisted.
    """

    score: float = Field(..., ge=0, le=100)
    recommendation: str = Field(
        ..., description="Safe to proceed / Proceed with caution / Not recommended"
    )
    hazards: list[Hazard] = Field(default_factory=list)

    def is_safe(self) -> bool:
        return self.score >= 80


class StormWarning(BaseModel):
    """A storm warning for one forecast day at one point."""

    day_index: int = Field(..., ge=0)
    date: datetime | None = None
    severity: HazardSeverity
    wind_speed_kn: int
    wave_height_m: float
    sea_state: int
    sea_state_description: str
    condition: str
    description: str = ""
    recommendations: list[str] = Field(default_factory=list)


class RouteAnalysis(BaseModel):
    """Qualitative analysis of a candidate route's weather score."""

    overall: str = Field(..., description="Excellent, Good, Fair, Poor or Dangerous")
    score: float = Field(..., ge=0)
    details: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
    estimated_delay_hours: int = Field(default=0, ge=0)


class MarineSummary(BaseModel):
    """Worst-case marine conditions across a set of points."""

    overall_conditions: str = Field(..., description="Calm, Moderate, Rough or Severe")
    max_wind_speed_kn: float = 0
    max_wave_height_m: float = 0
    max_swell_height_m: float = 0
    avg_current_speed_kn: float = 0
    min_visibility_km: float = 10
    worst_sea_state: int = 0
    worst_sea_state_description: str = ""
    recommendations: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


class HistoricalStatistics(BaseModel):
    """Averages and condition-day counts over a historical period."""

    total_days: int = Field(default=0, ge=0)
    avg_wind_speed_kn: int = 0
    avg_wave_height_m: float = 0
    avg_swell_height_m: float = 0
    avg_current_speed_kn: float = 0
    storm_days: int = Field(default=0, ge=0, description="Days with wind over 34 kn")
    calm_days: int = Field(default=0, ge=0, description="Wind under 10 kn and waves under 1 m")
    rough_days: int = Field(default=0, ge=0, description="Days with waves over 4 m")
    fog_days: int = Field(default=0, ge=0, description="Days with visibility under 1 km")
    recommendations: list[str] = Field(default_factory=list)
    summary: str = ""
