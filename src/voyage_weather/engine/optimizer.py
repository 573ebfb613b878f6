"""Weather-based route optimization.

Three candidate paths are compared for every request, generated in this
order:

1. Direct: the great-circle route
2. Northern: two-segment path through a midpoint shifted north by 20% of
   the latitude difference
3. Southern: the same shifted south

Each candidate's route forecast is scored with a weather penalty (lower
is safer). Candidates are sorted stably, so equal scores keep generation
order and the direct route wins ties.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from voyage_weather.geo.geometry import (
    alternative_offset,
    build_route,
    offset_route,
    route_from_waypoints,
)
from voyage_weather.models.assessment import RouteAnalysis
from voyage_weather.models.location import Coordinates
from voyage_weather.models.plan import OptimizationResult
from voyage_weather.models.route import CandidateRoute, RouteSpec
from voyage_weather.models.vessel import VesselLimits
from voyage_weather.models.weather import RouteDayForecast

WIND_EXCESS_PENALTY = 10  # per knot over the vessel limit
WAVE_EXCESS_PENALTY = 15  # per metre over the vessel limit
STORM_PENALTY = 50
POOR_VISIBILITY_PENALTY = 20
CALM_DAY_BONUS = 5

MAX_ALTERNATIVES = 2


@dataclass(frozen=True)
class RouteVariant:
    """A candidate path before its weather has been sampled."""

    label: str
    description: str
    route: RouteSpec


@dataclass(frozen=True)
class ScoreBand:
    """Qualitative band for a weather score below `upper`."""

    upper: float
    overall: str
    detail: str
    recommendation: str | None
    delay_hours: int


# First band whose upper bound exceeds the score wins
SCORE_BANDS: tuple[ScoreBand, ...] = (
    ScoreBand(50, "Excellent", "Ideal weather conditions throughout voyage", None, 0),
    ScoreBand(
        150, "Good", "Generally favorable conditions with minor rough weather", None, 2
    ),
    ScoreBand(
        300,
        "Fair",
        "Mixed conditions - careful planning required",
        "Monitor weather updates closely",
        6,
    ),
    ScoreBand(
        500,
        "Poor",
        "Challenging weather conditions expected",
        "Consider postponing voyage",
        12,
    ),
    ScoreBand(
        float("inf"),
        "Dangerous",
        "Severe weather conditions - voyage not recommended",
        "Postpone voyage until conditions improve",
        24,
    ),
)


def generate_candidate_routes(
    origin: Coordinates,
    destination: Coordinates,
    num_waypoints: int = 10,
    vessel_speed_kn: float = 15.0,
) -> list[RouteVariant]:
    """Direct, northern and southern candidates, in that order."""
    offset = alternative_offset(origin, destination)

    direct = build_route(origin, destination, num_waypoints, vessel_speed_kn)
    northern = route_from_waypoints(
        offset_route(origin, destination, num_waypoints, offset), vessel_speed_kn
    )
    southern = route_from_waypoints(
        offset_route(origin, destination, num_waypoints, -offset), vessel_speed_kn
    )

    return [
        RouteVariant("Direct Route", "Shortest distance between ports", direct),
        RouteVariant(
            "Northern Route", "Higher latitude route - may avoid tropical storms", northern
        ),
        RouteVariant(
            "Southern Route", "Lower latitude route - may have favorable currents", southern
        ),
    ]


def score_route_weather(
    days: Sequence[RouteDayForecast],
    limits: VesselLimits,
) -> float:
    """Weather penalty over a route forecast, floored at 0.

    Per day: 10 per knot over the wind limit, 15 per metre over the wave
    limit, 50 for storm conditions, 20 for visibility under 1 km, and a
    5 point bonus for calm days (wind < 15 kn and waves < 2 m).
    """
    score = 0.0
    for day in days:
        if day.wind_speed_kn > limits.max_wind_speed_kn:
            score += (day.wind_speed_kn - limits.max_wind_speed_kn) * WIND_EXCESS_PENALTY
        if day.wave_height_m > limits.max_wave_height_m:
            score += (day.wave_height_m - limits.max_wave_height_m) * WAVE_EXCESS_PENALTY
        if day.condition.is_stormy:
            score += STORM_PENALTY
        if day.visibility_km < 1:
            score += POOR_VISIBILITY_PENALTY
        if day.is_calm:
            score -= CALM_DAY_BONUS
    return max(0.0, score)


def rank_candidates(candidates: Sequence[CandidateRoute]) -> list[CandidateRoute]:
    """Sort ascending by weather score; ties keep their input order."""
    return sorted(candidates, key=lambda c: c.weather_score)


def analyze_route(candidate: CandidateRoute) -> RouteAnalysis:
    """Qualitative analysis of a candidate's weather score."""
    score = candidate.weather_score
    band = next(b for b in SCORE_BANDS if score < b.upper)
    return RouteAnalysis(
        overall=band.overall,
        score=score,
        details=[band.detail],
        recommendations=[band.recommendation] if band.recommendation else [],
        estimated_delay_hours=band.delay_hours,
    )


class RouteOptimizer:
    """Scores and ranks candidate routes for one vessel."""

    def __init__(self, limits: VesselLimits):
        self.limits = limits

    def score(self, variant: RouteVariant, forecast: list[RouteDayForecast]) -> CandidateRoute:
        return CandidateRoute(
            label=variant.label,
            description=variant.description,
            route=variant.route,
            forecast=forecast,
            weather_score=score_route_weather(forecast, self.limits),
        )

    def select(self, candidates: Sequence[CandidateRoute]) -> OptimizationResult:
        """Pick the lowest-scoring candidate and up to two alternatives.

        Raises:
            ValueError: If there are no candidates
        """
        if not candidates:
            raise ValueError("No candidate routes to rank")

        ranked = rank_candidates(candidates)
        best = ranked[0]
        return OptimizationResult(
            recommended=best,
            alternatives=ranked[1 : 1 + MAX_ALTERNATIVES],
            analysis=analyze_route(best),
        )
