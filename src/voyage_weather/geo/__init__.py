"""Great-circle route geometry."""

from voyage_weather.geo.geometry import (
    EARTH_RADIUS_NM,
    alternative_offset,
    build_route,
    estimate_arrival,
    format_duration,
    haversine_distance,
    initial_bearing,
    interpolate_great_circle,
    offset_route,
    route_from_waypoints,
)

__all__ = [
    "EARTH_RADIUS_NM",
    "alternative_offset",
    "build_route",
    "estimate_arrival",
    "format_duration",
    "haversine_distance",
    "initial_bearing",
    "interpolate_great_circle",
    "offset_route",
    "route_from_waypoints",
]
