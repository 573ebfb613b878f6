"""Forecast aggregation along a route.

Each waypoint's point forecast is first annotated with estimated marine
fields, then the per-waypoint daily series are folded into one per-day
route forecast:

- numeric fields are averaged over the waypoints that have that day
- the weather condition and current direction take the mode (ties go to
  the value seen first)
- days are never synthesized; the route forecast is as long as the longest
  waypoint series, capped at `max_days`

An errored waypoint is passed as None and simply does not contribute.
"""

from __future__ import annotations

import logging
import random
from collections import Counter
from collections.abc import Hashable, Sequence
from statistics import fmean
from typing import TypeVar

from voyage_weather.errors import UpstreamUnavailableError
from voyage_weather.marine.estimators import (
    calculate_sea_state,
    estimate_current_direction,
    estimate_current_speed,
    estimate_swell_height,
    estimate_swell_period,
    estimate_wave_height,
    estimate_wave_period,
    sea_state_description,
    wind_direction_text,
)
from voyage_weather.models.plan import MarineSnapshot
from voyage_weather.models.weather import (
    CurrentConditions,
    MarineDailyForecast,
    PointForecast,
    RouteDayForecast,
)
from voyage_weather.units import ms_to_knots, round_half_up, round_int

logger = logging.getLogger(__name__)

DEFAULT_MAX_DAYS = 10
DEFAULT_VISIBILITY_M = 10000.0

T = TypeVar("T", bound=Hashable)


def most_frequent(values: Sequence[T]) -> T:
    """Mode of a non-empty sequence; ties go to the first value seen."""
    # Counter keeps insertion order and most_common() sorts stably
    return Counter(values).most_common(1)[0][0]


def annotate_point_forecast(
    point: PointForecast,
    rng: random.Random | None = None,
) -> list[MarineDailyForecast]:
    """Add estimated marine fields to every day of a point forecast.

    Args:
        point: Forecast returned by a weather provider
        rng: Random source for current-speed jitter. None gives the
            region's base current speed.

    Returns:
        One MarineDailyForecast per provider day, in the same order
    """
    lat = point.location.latitude
    lng = point.location.longitude
    current_direction = estimate_current_direction(lat, lng)

    annotated: list[MarineDailyForecast] = []
    for day in point.daily:
        wind = day.wind_speed_ms
        wave = estimate_wave_height(wind)
        jitter = rng.random() if rng is not None else None

        annotated.append(
            MarineDailyForecast(
                **day.model_dump(),
                wave_height_m=wave,
                swell_height_m=estimate_swell_height(wind),
                sea_state=calculate_sea_state(wave),
                wave_period_s=estimate_wave_period(wind),
                swell_period_s=estimate_swell_period(wind),
                current_speed_kn=estimate_current_speed(lat, lng, jitter),
                current_direction_deg=current_direction,
            )
        )

    return annotated


def _aggregate_day(day_index: int, entries: list[MarineDailyForecast]) -> RouteDayForecast:
    wind_ms = fmean(e.wind_speed_ms for e in entries)
    gust_ms = fmean(
        e.wind_gust_ms if e.wind_gust_ms is not None else e.wind_speed_ms for e in entries
    )
    wind_dir = fmean(e.wind_direction_deg for e in entries)
    wave = fmean(e.wave_height_m for e in entries)
    sea_state = calculate_sea_state(wave)

    return RouteDayForecast(
        day_index=day_index,
        date=entries[0].date,
        condition=most_frequent([e.condition for e in entries]),
        temperature_c=round_int(fmean(e.temperature_c for e in entries)),
        wind_speed_kn=round_int(ms_to_knots(wind_ms)),
        wind_gust_kn=round_int(ms_to_knots(gust_ms)),
        wind_direction_deg=round_int(wind_dir),
        wind_direction_text=wind_direction_text(wind_dir),
        wave_height_m=round_half_up(wave, 1),
        swell_height_m=round_half_up(fmean(e.swell_height_m for e in entries), 1),
        wave_period_s=round_half_up(fmean(e.wave_period_s for e in entries), 1),
        swell_period_s=round_half_up(fmean(e.swell_period_s for e in entries), 1),
        sea_state=sea_state,
        sea_state_description=sea_state_description(sea_state),
        current_speed_kn=round_half_up(fmean(e.current_speed_kn for e in entries), 1),
        current_direction_deg=most_frequent([e.current_direction_deg for e in entries]),
        precipitation_mm=round_half_up(fmean(e.precipitation_mm for e in entries), 1),
        visibility_km=round_half_up(fmean(e.visibility_m for e in entries) / 1000, 1),
        pressure_hpa=round_int(fmean(e.pressure_hpa for e in entries)),
        humidity_percent=round_int(fmean(e.humidity_percent for e in entries)),
        cloud_cover_percent=round_int(fmean(e.cloud_cover_percent for e in entries)),
        waypoint_count=len(entries),
    )


def aggregate_route_forecast(
    points: Sequence[Sequence[MarineDailyForecast] | None],
    max_days: int = DEFAULT_MAX_DAYS,
) -> list[RouteDayForecast]:
    """Fold per-waypoint daily series into one per-day route forecast.

    Args:
        points: One annotated series per waypoint, or None where the
            waypoint's weather lookup failed
        max_days: Maximum number of days to return

    Returns:
        Route forecast of length min(max_days, longest available series)

    Raises:
        UpstreamUnavailableError: If every waypoint errored
    """
    available = [p for p in points if p is not None]
    if not available:
        raise UpstreamUnavailableError(
            f"Weather unavailable for all {len(points)} waypoints"
        )

    if len(available) < len(points):
        logger.debug(
            f"Aggregating {len(available)} of {len(points)} waypoints "
            f"({len(points) - len(available)} errored)"
        )

    num_days = min(max_days, max(len(p) for p in available))
    forecast: list[RouteDayForecast] = []
    for k in range(num_days):
        entries = [p[k] for p in available if len(p) > k]
        forecast.append(_aggregate_day(k, entries))

    return forecast


def marine_snapshot(
    point: PointForecast,
    rng: random.Random | None = None,
) -> MarineSnapshot:
    """Current marine conditions at a point.

    Uses the provider's current conditions; missing values fall back to
    calm defaults (no wind, 10 km visibility).
    """
    lat = point.location.latitude
    lng = point.location.longitude
    current = point.current or CurrentConditions()

    wind = current.wind_speed_ms
    gust = current.wind_gust_ms if current.wind_gust_ms is not None else wind
    direction = current.wind_direction_deg or 0.0
    wave = estimate_wave_height(wind)
    visibility_m = (
        current.visibility_m if current.visibility_m is not None else DEFAULT_VISIBILITY_M
    )
    jitter = rng.random() if rng is not None else None

    return MarineSnapshot(
        location=point.location.display(),
        temperature_c=current.temperature_c,
        wind_speed_kn=ms_to_knots(wind),
        wind_gust_kn=ms_to_knots(gust),
        wind_direction_deg=direction,
        wind_direction_text=wind_direction_text(direction),
        condition=current.condition.value if point.current else "Unknown",
        visibility_km=visibility_m / 1000,
        pressure_hpa=current.pressure_hpa,
        humidity_percent=current.humidity_percent,
        wave_height_m=wave,
        wave_period_s=estimate_wave_period(wind),
        swell_height_m=estimate_swell_height(wind),
        swell_period_s=estimate_swell_period(wind),
        sea_state=calculate_sea_state(wave),
        current_speed_kn=estimate_current_speed(lat, lng, jitter),
        current_direction_deg=estimate_current_direction(lat, lng),
    )
