"""Marine condition estimators.

Weather providers report wind, temperature and visibility but no sea state,
so marine fields are estimated from wind speed (and, for currents, from
position). These are coarse Beaufort-derived lookups, not physical models.

The breakpoints below are calibration constants. They are kept literally
for behavioural compatibility and should not be retuned without domain
sign-off. Note that 34 kn is a "gale" band edge here while it is also the
storm-alert threshold in `voyage_weather.engine.hazards`.

Everything in this module is deterministic. Where local variability is
emulated (current speed) the caller passes a `jitter` value in [0, 1),
drawn from the planner's single seedable random source.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass

from voyage_weather.models.weather import RouteDayForecast
from voyage_weather.models.vessel import DEFAULT_FUEL_RATE_TONS_PER_NM
from voyage_weather.units import ms_to_knots, round_half_up, round_int

# (upper bound in knots, wave height in metres); a band matches when
# wind < upper bound
WAVE_HEIGHT_BANDS: tuple[tuple[float, float], ...] = (
    (1, 0.0),
    (4, 0.1),
    (7, 0.2),
    (11, 0.5),
    (17, 1.0),
    (22, 2.0),
    (28, 3.0),
    (34, 4.0),
    (41, 5.5),
    (48, 7.0),
    (56, 9.0),
    (64, 11.5),
    (math.inf, 14.0),
)

SWELL_RATIO = 0.4

# Douglas sea scale: state n once wave height reaches the n-th threshold (m)
SEA_STATE_THRESHOLDS: tuple[float, ...] = (0.1, 0.5, 1.25, 2.5, 4.0, 6.0, 9.0, 14.0)

SEA_STATE_DESCRIPTIONS: tuple[str, ...] = (
    "Calm (glassy)",
    "Calm (rippled)",
    "Smooth",
    "Slight",
    "Moderate",
    "Rough",
    "Very Rough",
    "High",
    "Very High",
    "Phenomenal",
)

COMPASS_POINTS: tuple[str, ...] = (
    "N", "NNE", "NE", "ENE", "E", "ESE", "SE", "SSE",
    "S", "SSW", "SW", "WSW", "W", "WNW", "NW", "NNW",
)


@dataclass(frozen=True)
class RegionBox:
    """Latitude/longitude box with exclusive bounds.

    Unbounded sides default to +/- infinity. `include_lat_max` closes the
    upper latitude bound, e.g. for "southern hemisphere" meaning lat <= 0.
    """

    lat_min: float = -math.inf
    lat_max: float = math.inf
    lng_min: float = -math.inf
    lng_max: float = math.inf
    include_lat_max: bool = False

    def contains(self, lat: float, lng: float) -> bool:
        if not lat > self.lat_min:
            return False
        if not (lat < self.lat_max or (self.include_lat_max and lat == self.lat_max)):
            return False
        return self.lng_min < lng < self.lng_max


@dataclass(frozen=True)
class CurrentSpeedRegion:
    """Current speed band: base + spread * jitter knots."""

    name: str
    box: RegionBox
    base_kn: float
    spread_kn: float


@dataclass(frozen=True)
class CurrentDirectionRegion:
    """Dominant gyre direction (degrees) within a region."""

    name: str
    box: RegionBox
    direction_deg: float


# First match wins
CURRENT_SPEED_REGIONS: tuple[CurrentSpeedRegion, ...] = (
    CurrentSpeedRegion(
        name="Gulf Stream",
        box=RegionBox(lat_min=25, lat_max=45, lng_min=-80, lng_max=-60),
        base_kn=2.0,
        spread_kn=0.5,
    ),
    CurrentSpeedRegion(
        name="Equatorial",
        box=RegionBox(lat_min=-10, lat_max=10),
        base_kn=1.5,
        spread_kn=0.5,
    ),
)
DEFAULT_CURRENT_SPEED = CurrentSpeedRegion(
    name="Open ocean", box=RegionBox(), base_kn=0.5, spread_kn=1.0
)

CURRENT_DIRECTION_REGIONS: tuple[CurrentDirectionRegion, ...] = (
    # Northern hemisphere, clockwise gyres
    CurrentDirectionRegion("North western basin", RegionBox(lat_min=0, lng_max=-60), 45),
    CurrentDirectionRegion("North eastern basin", RegionBox(lat_min=0, lng_min=60), 225),
    # Southern hemisphere, counter-clockwise gyres
    CurrentDirectionRegion(
        "South western basin", RegionBox(lat_max=0, lng_max=-60, include_lat_max=True), 315
    ),
    CurrentDirectionRegion(
        "South eastern basin", RegionBox(lat_max=0, lng_min=60, include_lat_max=True), 135
    ),
)
DEFAULT_CURRENT_DIRECTION_DEG = 0.0


def estimate_wave_height(wind_speed_ms: float) -> float:
    """Estimate significant wave height (m) from wind speed (m/s)."""
    knots = ms_to_knots(wind_speed_ms)
    for upper, height in WAVE_HEIGHT_BANDS:
        if knots < upper:
            return height
    return WAVE_HEIGHT_BANDS[-1][1]


def estimate_swell_height(wind_speed_ms: float) -> float:
    """Swell height (m), taken as 40% of the wave height."""
    return estimate_wave_height(wind_speed_ms) * SWELL_RATIO


def calculate_sea_state(wave_height_m: float) -> int:
    """Douglas sea state (0-8) for a wave height in metres."""
    state = 0
    for threshold in SEA_STATE_THRESHOLDS:
        if wave_height_m < threshold:
            break
        state += 1
    return state


def sea_state_description(sea_state: int) -> str:
    if 0 <= sea_state < len(SEA_STATE_DESCRIPTIONS):
        return SEA_STATE_DESCRIPTIONS[sea_state]
    return "Unknown"


def estimate_wave_period(wind_speed_ms: float) -> float:
    """Wave period in seconds, sqrt(5 * wave height), to 0.1 s."""
    return round_half_up(math.sqrt(estimate_wave_height(wind_speed_ms) * 5), 1)


def estimate_swell_period(wind_speed_ms: float) -> float:
    """Swell period in seconds, 1.5x the wave period, to 0.1 s."""
    return round_half_up(estimate_wave_period(wind_speed_ms) * 1.5, 1)


def _check_jitter(jitter: float) -> None:
    if not 0.0 <= jitter < 1.0:
        raise ValueError(f"jitter must be within [0, 1), got {jitter}")


def current_speed_region(lat: float, lng: float) -> CurrentSpeedRegion:
    """Find the current speed band for a position."""
    for region in CURRENT_SPEED_REGIONS:
        if region.box.contains(lat, lng):
            return region
    return DEFAULT_CURRENT_SPEED


def estimate_current_speed(lat: float, lng: float, jitter: float | None = None) -> float:
    """Estimate surface current speed in knots.

    Args:
        lat: Latitude in degrees
        lng: Longitude in degrees
        jitter: Value in [0, 1) scaling the band's spread. None gives the
            band's base speed.

    Returns:
        Current speed in knots
    """
    region = current_speed_region(lat, lng)
    if jitter is None:
        return region.base_kn
    _check_jitter(jitter)
    return region.base_kn + region.spread_kn * jitter


def estimate_current_direction(lat: float, lng: float) -> float:
    """Coarse gyre direction by hemisphere and basin.

    Returns one of 0, 45, 135, 225 or 315 degrees.
    """
    for region in CURRENT_DIRECTION_REGIONS:
        if region.box.contains(lat, lng):
            return region.direction_deg
    return DEFAULT_CURRENT_DIRECTION_DEG


def wind_direction_text(degrees: float) -> str:
    """Nearest of the 16 compass points."""
    return COMPASS_POINTS[round_int(degrees / 22.5) % 16]


def estimate_fuel_consumption(
    distance_nm: float,
    days: Sequence[RouteDayForecast],
    fuel_rate_tons_per_nm: float = DEFAULT_FUEL_RATE_TONS_PER_NM,
) -> float:
    """Weather-adjusted fuel estimate in tons, to 0.1 t.

    Base consumption is distance x rate. Average wind above 25 kn adds 30%
    (above 15 kn, 15%); average waves above 4 m add 25% (above 2 m, 10%).
    No forecast days means no weather adjustment.
    """
    consumption = distance_nm * fuel_rate_tons_per_nm

    if days:
        avg_wind = sum(d.wind_speed_kn for d in days) / len(days)
        avg_wave = sum(d.wave_height_m for d in days) / len(days)

        if avg_wind > 25:
            consumption *= 1.3
        elif avg_wind > 15:
            consumption *= 1.15

        if avg_wave > 4:
            consumption *= 1.25
        elif avg_wave > 2:
            consumption *= 1.1

    return round_half_up(consumption, 1)
