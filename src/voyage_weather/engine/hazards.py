"""Hazard evaluation for route forecasts.

Each route forecast day is checked independently against the vessel's
limits and a set of fixed danger thresholds:

| Check | Trigger | Safety score penalty |
|-------|---------|----------------------|
| Wind over vessel limit | wind_speed_kn > max_wind_speed_kn | 20 |
| Waves over vessel limit | wave_height_m > max_wave_height_m | 20 |
| Poor visibility | visibility_km < 1 | - |
| Storm conditions | Storm or Thunderstorm | - |
| Dangerous seas | sea_state >= 6 | - |

Two results come out of this:

- the simple safety score (100 minus penalties, clamped to 0-100), which
  drives the primary recommendation
- per-day hazards with a severity and advisories, plus voyage-level
  recommendations

## Severity

- extreme: wind > 64 kn, waves > 9 m or sea state >= 8
- severe: wind > 48 kn, waves > 6 m or sea state >= 6
- moderate: only the vessel's own limits are exceeded
- low: anything else (e.g. fog or a storm condition with moderate wind)

The same module also produces storm warnings for a single point, a
worst-case summary of marine conditions across several points and
statistics over a historical period.
"""

from __future__ import annotations

from collections.abc import Sequence

from voyage_weather.marine.estimators import sea_state_description
from voyage_weather.models.assessment import (
    Hazard,
    HazardReport,
    HazardSeverity,
    HistoricalStatistics,
    MarineSummary,
    SafetyAssessment,
    StormWarning,
)
from voyage_weather.models.plan import MarineSnapshot
from voyage_weather.models.vessel import VesselLimits
from voyage_weather.models.weather import MarineDailyForecast, RouteDayForecast
from voyage_weather.units import ms_to_knots, round_half_up, round_int

# Fixed danger thresholds (calibration constants)
HURRICANE_WIND_KN = 64
STORM_WIND_KN = 48
GALE_WIND_KN = 34
HIGH_WIND_KN = 40
EXTREME_WAVE_M = 9
SEVERE_WAVE_M = 6
EXTREME_SEA_STATE = 8
VERY_HIGH_SEA_STATE = 7
DANGEROUS_SEA_STATE = 6
ROUGH_SEA_STATE = 5
POOR_VISIBILITY_KM = 1

VIOLATION_PENALTY = 20
SAFE_SCORE = 80
CAUTION_SCORE = 60

# Consecutive days over HIGH_WIND_KN before an extended high-wind advisory
HIGH_WIND_RUN_DAYS = 3
# Hazards starting on or before this day index suggest delaying departure
EARLY_HAZARD_DAY = 2


def _fmt(value: float) -> str:
    return f"{value:g}"


def exceeds_wind_limit(day: RouteDayForecast, limits: VesselLimits) -> bool:
    return day.wind_speed_kn > limits.max_wind_speed_kn


def exceeds_wave_limit(day: RouteDayForecast, limits: VesselLimits) -> bool:
    return day.wave_height_m > limits.max_wave_height_m


def identify_issues(day: RouteDayForecast, limits: VesselLimits) -> list[str]:
    """Human-readable issues for one day, in check order."""
    issues: list[str] = []

    if exceeds_wind_limit(day, limits):
        issues.append(
            f"Wind speed ({day.wind_speed_kn} kts) exceeds vessel limit of "
            f"{_fmt(limits.max_wind_speed_kn)} kts"
        )
    if exceeds_wave_limit(day, limits):
        issues.append(
            f"Wave height ({_fmt(day.wave_height_m)} m) exceeds vessel limit of "
            f"{_fmt(limits.max_wave_height_m)} m"
        )
    if day.visibility_km < POOR_VISIBILITY_KM:
        issues.append(
            f"Poor visibility ({_fmt(day.visibility_km)} km) - fog navigation required"
        )
    if day.condition.is_stormy:
        issues.append(f"Storm conditions - {day.condition.value}")
    if day.sea_state >= DANGEROUS_SEA_STATE:
        issues.append(f"{day.sea_state_description} - dangerous sea conditions")

    return issues


def determine_severity(day: RouteDayForecast, limits: VesselLimits) -> HazardSeverity:
    """Classify a day's severity."""
    if (
        day.wind_speed_kn > HURRICANE_WIND_KN
        or day.wave_height_m > EXTREME_WAVE_M
        or day.sea_state >= EXTREME_SEA_STATE
    ):
        return HazardSeverity.EXTREME
    if (
        day.wind_speed_kn > STORM_WIND_KN
        or day.wave_height_m > SEVERE_WAVE_M
        or day.sea_state >= DANGEROUS_SEA_STATE
    ):
        return HazardSeverity.SEVERE
    if exceeds_wind_limit(day, limits) or exceeds_wave_limit(day, limits):
        return HazardSeverity.MODERATE
    return HazardSeverity.LOW


def hazard_recommendations(day: RouteDayForecast, limits: VesselLimits) -> list[str]:
    """Advisories for one hazardous day."""
    recommendations: list[str] = []

    if day.wind_speed_kn > HURRICANE_WIND_KN:
        recommendations.append("Hurricane force winds - DO NOT SAIL")
    elif day.wind_speed_kn > STORM_WIND_KN:
        recommendations.append("Storm force winds - postpone voyage or seek shelter")
    elif exceeds_wind_limit(day, limits):
        recommendations.append(
            "Wind exceeds vessel limits - consider waiting for better conditions"
        )

    if day.sea_state >= VERY_HIGH_SEA_STATE:
        recommendations.append("Very high to phenomenal seas - extreme danger")
    elif day.sea_state >= ROUGH_SEA_STATE:
        recommendations.append("Rough to very rough seas - secure all cargo and equipment")

    if day.visibility_km < POOR_VISIBILITY_KM:
        recommendations.append("Use radar, reduce speed, sound fog signals")

    return recommendations


def identify_hazards(
    days: Sequence[RouteDayForecast],
    limits: VesselLimits,
) -> list[Hazard]:
    """One hazard per day with at least one issue, in day order."""
    hazards: list[Hazard] = []
    for day in days:
        issues = identify_issues(day, limits)
        if not issues:
            continue
        hazards.append(
            Hazard(
                day_index=day.day_index,
                date=day.date,
                severity=determine_severity(day, limits),
                issues=issues,
                recommendations=hazard_recommendations(day, limits),
            )
        )
    return hazards


def safety_recommendation(score: float) -> str:
    if score >= SAFE_SCORE:
        return "Safe to proceed"
    if score >= CAUTION_SCORE:
        return "Proceed with caution"
    return "Not recommended"


def calculate_safety_score(
    days: Sequence[RouteDayForecast],
    limits: VesselLimits,
) -> SafetyAssessment:
    """Simple safety score.

    Starts at 100 and loses 20 for every day over the wind limit and 20
    for every day over the wave limit (a single day can lose 40). Clamped
    to [0, 100].
    """
    score = 100
    for day in days:
        if exceeds_wind_limit(day, limits):
            score -= VIOLATION_PENALTY
        if exceeds_wave_limit(day, limits):
            score -= VIOLATION_PENALTY
    score = max(0, min(100, score))

    return SafetyAssessment(
        score=score,
        recommendation=safety_recommendation(score),
        hazards=identify_hazards(days, limits),
    )


def longest_high_wind_run(days: Sequence[RouteDayForecast]) -> int:
    """Longest run of consecutive days with wind over 40 kn."""
    longest = run = 0
    for day in days:
        run = run + 1 if day.wind_speed_kn > HIGH_WIND_KN else 0
        longest = max(longest, run)
    return longest


def voyage_recommendations(
    hazards: Sequence[Hazard],
    days: Sequence[RouteDayForecast],
) -> list[str]:
    """Voyage-level recommendations from the day hazards.

    Args:
        hazards: Output of identify_hazards()
        days: The route forecast the hazards came from

    Returns:
        Ordered recommendation strings
    """
    if not hazards:
        return [
            "Weather conditions are favorable for voyage",
            "Normal voyage preparations recommended",
        ]

    recommendations: list[str] = []

    extreme = [h for h in hazards if h.severity == HazardSeverity.EXTREME]
    severe = [h for h in hazards if h.severity == HazardSeverity.SEVERE]
    if extreme:
        recommendations.append("EXTREME DANGER - Voyage strongly discouraged")
        recommendations.append(f"{len(extreme)} days with extreme conditions detected")
    elif severe:
        recommendations.append("SEVERE CONDITIONS - Only emergency voyages recommended")
        recommendations.append(f"{len(severe)} days with severe weather expected")

    if longest_high_wind_run(days) > HIGH_WIND_RUN_DAYS:
        recommendations.append(
            "Extended period of high winds - plan for rough seas throughout voyage"
        )

    if any(day.condition.is_stormy for day in days):
        recommendations.append(
            "Storm conditions expected - ensure all safety equipment is operational"
        )
        recommendations.append("Brief crew on heavy weather procedures")

    if hazards[0].day_index <= EARLY_HAZARD_DAY:
        recommendations.append(
            "Poor conditions in first 48 hours - consider delaying departure"
        )

    recommendations.append("Double-check weather routing equipment")
    recommendations.append("Ensure adequate fuel reserves for weather routing")
    return recommendations


def evaluate_hazards(
    days: Sequence[RouteDayForecast],
    limits: VesselLimits,
) -> HazardReport:
    """Per-day hazards plus voyage-level recommendations."""
    hazards = identify_hazards(days, limits)
    return HazardReport(
        hazards=hazards,
        recommendations=voyage_recommendations(hazards, days),
    )


class HazardEvaluator:
    """Evaluates route forecasts against one vessel's limits."""

    def __init__(self, limits: VesselLimits):
        self.limits = limits

    def evaluate(self, days: Sequence[RouteDayForecast]) -> HazardReport:
        return evaluate_hazards(days, self.limits)

    def assess(self, days: Sequence[RouteDayForecast]) -> SafetyAssessment:
        return calculate_safety_score(days, self.limits)


# Storm warnings


def storm_recommendations(wind_speed_kn: float, sea_state: int) -> list[str]:
    """Advisories for a storm warning."""
    recommendations: list[str] = []

    if wind_speed_kn > HURRICANE_WIND_KN:
        recommendations.append("Hurricane force winds - seek immediate shelter")
        recommendations.append("DO NOT attempt to navigate in these conditions")
    elif wind_speed_kn > STORM_WIND_KN:
        recommendations.append("Storm force winds - only essential voyages")
        recommendations.append("Ensure storm preparations are complete")
    elif wind_speed_kn > GALE_WIND_KN:
        recommendations.append("Gale force winds - experienced crew essential")
        recommendations.append("Reduce sail, secure deck cargo")

    if sea_state >= EXTREME_SEA_STATE:
        recommendations.append("Phenomenal seas - survival conditions only")
    elif sea_state >= VERY_HIGH_SEA_STATE:
        recommendations.append("Very high seas - heave to if necessary")
    elif sea_state >= DANGEROUS_SEA_STATE:
        recommendations.append("Very rough seas - reduce speed, alter course to ease motion")

    return recommendations


def storm_warnings(days: Sequence[MarineDailyForecast]) -> list[StormWarning]:
    """Storm warnings for the days of one point forecast.

    A day warns on gale-force wind (> 34 kn), sea state 6 or more, or a
    storm condition. Severity follows the wind only.
    """
    warnings: list[StormWarning] = []
    for index, day in enumerate(days):
        wind_kn = ms_to_knots(day.wind_speed_ms)
        if not (
            wind_kn > GALE_WIND_KN
            or day.sea_state >= DANGEROUS_SEA_STATE
            or day.condition.is_stormy
        ):
            continue

        if wind_kn > HURRICANE_WIND_KN:
            severity = HazardSeverity.EXTREME
        elif wind_kn > STORM_WIND_KN:
            severity = HazardSeverity.SEVERE
        else:
            severity = HazardSeverity.MODERATE

        warnings.append(
            StormWarning(
                day_index=index,
                date=day.date,
                severity=severity,
                wind_speed_kn=round_int(wind_kn),
                wave_height_m=round_half_up(day.wave_height_m, 1),
                sea_state=day.sea_state,
                sea_state_description=sea_state_description(day.sea_state),
                condition=day.condition.value,
                description=day.description or "",
                recommendations=storm_recommendations(wind_kn, day.sea_state),
            )
        )
    return warnings


# Marine summary


def summarize_marine_conditions(snapshots: Sequence[MarineSnapshot]) -> MarineSummary:
    """Worst-case summary of current marine conditions across points."""
    max_wind = max((s.wind_speed_kn for s in snapshots), default=0.0)
    max_wave = max((s.wave_height_m for s in snapshots), default=0.0)
    max_swell = max((s.swell_height_m for s in snapshots), default=0.0)
    min_visibility = min((s.visibility_km for s in snapshots), default=10.0)
    min_visibility = min(min_visibility, 10.0)
    worst_sea_state = max((s.sea_state for s in snapshots), default=0)
    avg_current = (
        sum(s.current_speed_kn for s in snapshots) / len(snapshots) if snapshots else 0.0
    )

    recommendations: list[str] = []
    warnings: list[str] = []

    if (
        max_wind > HIGH_WIND_KN
        or max_wave > SEVERE_WAVE_M
        or worst_sea_state >= VERY_HIGH_SEA_STATE
    ):
        overall = "Severe"
        warnings.append("Severe conditions detected - voyage not recommended")
        recommendations.append("Wait for conditions to improve before departing")
    elif max_wind > 25 or max_wave > 4 or worst_sea_state >= ROUGH_SEA_STATE:
        overall = "Rough"
        warnings.append("Rough conditions expected - experienced crew required")
        recommendations.append("Ensure vessel is properly prepared for heavy weather")
        recommendations.append("Brief crew on safety procedures")
    elif max_wind < 15 and max_wave < 2 and worst_sea_state <= 3:
        overall = "Calm"
        recommendations.append("Calm conditions - ideal for voyage")
        recommendations.append("Good opportunity for crew training or maintenance")
    else:
        overall = "Moderate"
        recommendations.append("Moderate conditions - standard voyage preparations")

    if min_visibility < 2:
        warnings.append("Poor visibility expected - radar watch required")
        recommendations.append("Reduce speed in fog conditions")
        recommendations.append("Post additional lookouts")
        recommendations.append("Sound fog signals as per COLREGS")

    if avg_current > 2:
        recommendations.append(
            f"Strong currents (avg {avg_current:.1f} kts) - adjust ETA calculations"
        )

    return MarineSummary(
        overall_conditions=overall,
        max_wind_speed_kn=round_int(max_wind),
        max_wave_height_m=round_half_up(max_wave, 1),
        max_swell_height_m=round_half_up(max_swell, 1),
        avg_current_speed_kn=round_half_up(avg_current, 1),
        min_visibility_km=round_half_up(min_visibility, 1),
        worst_sea_state=worst_sea_state,
        worst_sea_state_description=sea_state_description(worst_sea_state),
        recommendations=recommendations,
        warnings=warnings,
    )


# Historical statistics

CALM_HISTORY_WIND_KN = 10
CALM_HISTORY_WAVE_M = 1
ROUGH_HISTORY_WAVE_M = 4
FOG_VISIBILITY_KM = 1


def historical_statistics(days: Sequence[RouteDayForecast]) -> HistoricalStatistics:
    """Averages, condition-day counts and timing advice for past days.

    Storm frequency above 20% advises other timing and below 5% reports low
    risk. More than 30% calm days notes fuel efficiency, and fog on more
    than 15% of days asks for working radar.
    """
    total = len(days)
    if total == 0:
        return HistoricalStatistics(summary="No historical data available")

    storm_days = sum(1 for d in days if d.wind_speed_kn > GALE_WIND_KN)
    calm_days = sum(
        1
        for d in days
        if d.wind_speed_kn < CALM_HISTORY_WIND_KN and d.wave_height_m < CALM_HISTORY_WAVE_M
    )
    rough_days = sum(1 for d in days if d.wave_height_m > ROUGH_HISTORY_WAVE_M)
    fog_days = sum(1 for d in days if d.visibility_km < FOG_VISIBILITY_KM)

    avg_wind = round_int(sum(d.wind_speed_kn for d in days) / total)
    avg_wave = round_half_up(sum(d.wave_height_m for d in days) / total, 1)

    recommendations: list[str] = []
    storm_percent = storm_days / total * 100
    if storm_percent > 20:
        recommendations.append("High storm frequency in this period - consider alternative timing")
    elif storm_percent < 5:
        recommendations.append("Low storm risk based on historical data")
    if calm_days / total * 100 > 30:
        recommendations.append("Historically calm period - good for fuel efficiency")
    if fog_days > total * 0.15:
        recommendations.append("Frequent fog conditions - ensure radar is operational")

    return HistoricalStatistics(
        total_days=total,
        avg_wind_speed_kn=avg_wind,
        avg_wave_height_m=avg_wave,
        avg_swell_height_m=round_half_up(sum(d.swell_height_m for d in days) / total, 1),
        avg_current_speed_kn=round_half_up(sum(d.current_speed_kn for d in days) / total, 1),
        storm_days=storm_days,
        calm_days=calm_days,
        rough_days=rough_days,
        fog_days=fog_days,
        recommendations=recommendations,
        summary=(
            f"Based on {total} days of historical data, expect average conditions "
            f"with {avg_wind} kt winds and {avg_wave}m waves."
        ),
    )
