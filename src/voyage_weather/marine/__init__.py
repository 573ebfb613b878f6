"""Marine condition estimators."""

from voyage_weather.marine.estimators import (
    calculate_sea_state,
    estimate_current_direction,
    estimate_current_speed,
    estimate_fuel_consumption,
    estimate_swell_height,
    estimate_swell_period,
    estimate_wave_height,
    estimate_wave_period,
    sea_state_description,
    wind_direction_text,
)

__all__ = [
    "calculate_sea_state",
    "estimate_current_direction",
    "estimate_current_speed",
    "estimate_fuel_consumption",
    "estimate_swell_height",
    "estimate_swell_period",
    "estimate_wave_height",
    "estimate_wave_period",
    "sea_state_description",
    "wind_direction_text",
]
