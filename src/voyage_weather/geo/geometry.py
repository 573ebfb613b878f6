"""Great-circle geometry for route sampling.

All distances are in nautical miles on a spherical Earth
(R = 3440.065 nm). Angles are in degrees at the API boundary and radians
internally.

## Degenerate inputs

Great-circle interpolation divides by sin(d), where d is the central angle
between the endpoints:

- d = 0 (origin == destination): every fraction maps to the origin, and
  `build_route` returns a single-waypoint route with zero distance.
- d = pi (antipodal endpoints): infinitely many great circles connect the
  points, so `DegenerateGeometryError` is raised.
"""

from __future__ import annotations

import math
from datetime import datetime, timedelta

from voyage_weather.errors import DegenerateGeometryError, InvalidInputError
from voyage_weather.models.location import Coordinates, Waypoint
from voyage_weather.models.route import RouteSpec
from voyage_weather.units import round_half_up

EARTH_RADIUS_NM = 3440.065

# Fraction of the latitude difference used to offset alternative routes
ALTERNATIVE_OFFSET_RATIO = 0.2

_COINCIDENT_ANGLE = 1e-12
# asin() loses precision near h = 1, so antipodal pairs land within ~1e-8 of pi
_ANTIPODAL_TOLERANCE = 1e-6


def central_angle(a: Coordinates, b: Coordinates) -> float:
    """Central angle between two points in radians (haversine)."""
    lat1 = math.radians(a.latitude)
    lat2 = math.radians(b.latitude)
    dlat = lat2 - lat1
    dlng = math.radians(b.longitude - a.longitude)

    h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlng / 2) ** 2
    return 2 * math.asin(math.sqrt(min(1.0, h)))


def haversine_distance(a: Coordinates, b: Coordinates) -> float:
    """Great-circle distance in nautical miles."""
    return EARTH_RADIUS_NM * central_angle(a, b)


def initial_bearing(origin: Coordinates, destination: Coordinates) -> float:
    """Initial bearing (degrees clockwise from true north) in [0, 360)."""
    lat1 = math.radians(origin.latitude)
    lat2 = math.radians(destination.latitude)
    dlng = math.radians(destination.longitude - origin.longitude)

    x = math.sin(dlng) * math.cos(lat2)
    y = math.cos(lat1) * math.sin(lat2) - math.sin(lat1) * math.cos(lat2) * math.cos(dlng)

    bearing = (math.degrees(math.atan2(x, y)) + 360.0) % 360.0
    return 0.0 if bearing >= 360.0 else bearing


def is_coincident(a: Coordinates, b: Coordinates) -> bool:
    return central_angle(a, b) < _COINCIDENT_ANGLE


def is_antipodal(a: Coordinates, b: Coordinates) -> bool:
    return abs(math.pi - central_angle(a, b)) < _ANTIPODAL_TOLERANCE


def _check_fraction(fraction: float) -> None:
    if not math.isfinite(fraction) or not 0.0 <= fraction <= 1.0:
        raise InvalidInputError(
            f"Interpolation fraction must be within [0, 1], got {fraction}",
            field="fraction",
        )


def interpolate_great_circle(
    origin: Coordinates,
    destination: Coordinates,
    fraction: float,
) -> Coordinates:
    """Point at `fraction` of the way along the great circle.

    Args:
        origin: Start point
        destination: End point
        fraction: 0 = origin, 1 = destination

    Returns:
        Interpolated coordinates

    Raises:
        InvalidInputError: If fraction is outside [0, 1]
        DegenerateGeometryError: If the endpoints are antipodal
    """
    _check_fraction(fraction)

    d = central_angle(origin, destination)
    if d < _COINCIDENT_ANGLE:
        return origin
    if abs(math.pi - d) < _ANTIPODAL_TOLERANCE:
        raise DegenerateGeometryError(
            f"Great-circle path between {origin} and {destination} is undefined "
            "(antipodal points)"
        )
    if fraction == 0.0:
        return origin
    if fraction == 1.0:
        return destination

    lat1 = math.radians(origin.latitude)
    lng1 = math.radians(origin.longitude)
    lat2 = math.radians(destination.latitude)
    lng2 = math.radians(destination.longitude)

    sin_d = math.sin(d)
    a = math.sin((1 - fraction) * d) / sin_d
    b = math.sin(fraction * d) / sin_d

    x = a * math.cos(lat1) * math.cos(lng1) + b * math.cos(lat2) * math.cos(lng2)
    y = a * math.cos(lat1) * math.sin(lng1) + b * math.cos(lat2) * math.sin(lng2)
    z = a * math.sin(lat1) + b * math.sin(lat2)

    lat = math.atan2(z, math.sqrt(x * x + y * y))
    lng = math.atan2(y, x)

    return Coordinates(latitude=math.degrees(lat), longitude=math.degrees(lng))


def format_duration(hours: float) -> str:
    """Format a duration as 'Xd Yh'."""
    days = math.floor(hours / 24)
    return f"{days}d {int(round_half_up(hours % 24))}h"


def estimate_arrival(
    distance_nm: float,
    speed_kn: float,
    departure: datetime,
) -> datetime:
    """Estimated time of arrival at a constant speed."""
    if speed_kn <= 0:
        raise InvalidInputError("Vessel speed must be positive", field="speed")
    return departure + timedelta(hours=distance_nm / speed_kn)


def route_from_waypoints(
    waypoints: list[Waypoint],
    vessel_speed_kn: float,
) -> RouteSpec:
    """Build a RouteSpec from an ordered list of waypoints.

    Cumulative distances are (re)computed from the legs.
    """
    if not waypoints:
        raise InvalidInputError("A route needs at least one waypoint", field="waypoints")
    if vessel_speed_kn <= 0:
        raise InvalidInputError("Vessel speed must be positive", field="vessel_speed_kn")

    total = 0.0
    measured: list[Waypoint] = []
    for i, wp in enumerate(waypoints):
        if i > 0:
            total += haversine_distance(waypoints[i - 1].coordinates, wp.coordinates)
        measured.append(wp.model_copy(update={"distance_from_origin_nm": total}))

    origin = waypoints[0].coordinates
    destination = waypoints[-1].coordinates
    bearing = 0.0 if is_coincident(origin, destination) else initial_bearing(origin, destination)
    hours = total / vessel_speed_kn

    return RouteSpec(
        waypoints=tuple(measured),
        total_distance_nm=total,
        bearing_deg=bearing,
        vessel_speed_kn=vessel_speed_kn,
        estimated_duration_hours=hours,
        estimated_duration=format_duration(hours),
    )


def build_route(
    origin: Coordinates,
    destination: Coordinates,
    num_waypoints: int = 10,
    vessel_speed_kn: float = 15.0,
    origin_name: str | None = None,
    destination_name: str | None = None,
) -> RouteSpec:
    """Sample a great-circle route.

    Produces `num_waypoints` waypoints: the origin, `num_waypoints - 2`
    interpolated points at fractions i / (num_waypoints - 1), and the
    destination. When origin and destination coincide the route collapses
    to a single waypoint with zero distance.

    Raises:
        InvalidInputError: If fewer than 2 waypoints are requested
        DegenerateGeometryError: If the endpoints are antipodal
    """
    if num_waypoints < 2:
        raise InvalidInputError(
            f"A route needs at least 2 waypoints, got {num_waypoints}",
            field="num_waypoints",
        )

    start = Waypoint(coordinates=origin, name=origin_name or "Origin")
    if is_coincident(origin, destination):
        return route_from_waypoints([start], vessel_speed_kn)
    if is_antipodal(origin, destination):
        raise DegenerateGeometryError(
            f"Great-circle path between {origin} and {destination} is undefined "
            "(antipodal points)"
        )

    waypoints = [start]
    for i in range(1, num_waypoints - 1):
        fraction = i / (num_waypoints - 1)
        waypoints.append(
            Waypoint(
                coordinates=interpolate_great_circle(origin, destination, fraction),
                name=f"Waypoint {i}",
            )
        )
    waypoints.append(Waypoint(coordinates=destination, name=destination_name or "Destination"))

    return route_from_waypoints(waypoints, vessel_speed_kn)


def _wrap_longitude(lng: float) -> float:
    return ((lng + 180.0) % 360.0) - 180.0 if not -180.0 <= lng <= 180.0 else lng


def alternative_offset(origin: Coordinates, destination: Coordinates) -> float:
    """Latitude offset (degrees) used for northern/southern alternatives."""
    return abs(destination.latitude - origin.latitude) * ALTERNATIVE_OFFSET_RATIO


def offset_route(
    origin: Coordinates,
    destination: Coordinates,
    num_waypoints: int,
    lat_offset: float,
) -> list[Waypoint]:
    """Two-segment path through a latitude-shifted midpoint.

    Fractions up to 0.5 blend linearly from the origin to the offset
    midpoint; fractions above 0.5 blend from the midpoint to the
    destination. Positive offsets bend the route north, negative south.
    """
    if num_waypoints < 2:
        raise InvalidInputError(
            f"A route needs at least 2 waypoints, got {num_waypoints}",
            field="num_waypoints",
        )

    # Unwrap so routes crossing the antimeridian blend the short way round
    dest_lng = destination.longitude
    if dest_lng - origin.longitude > 180:
        dest_lng -= 360
    elif dest_lng - origin.longitude < -180:
        dest_lng += 360

    mid_lat = (origin.latitude + destination.latitude) / 2 + lat_offset
    mid_lat = max(-90.0, min(90.0, mid_lat))
    mid_lng = (origin.longitude + dest_lng) / 2

    waypoints: list[Waypoint] = []
    last = num_waypoints - 1
    for i in range(num_waypoints):
        t = i / last
        if i == 0:
            coords = origin
        elif i == last:
            coords = destination
        else:
            if t <= 0.5:
                t2 = t * 2
                lat = origin.latitude + (mid_lat - origin.latitude) * t2
                lng = origin.longitude + (mid_lng - origin.longitude) * t2
            else:
                t2 = (t - 0.5) * 2
                lat = mid_lat + (destination.latitude - mid_lat) * t2
                lng = mid_lng + (dest_lng - mid_lng) * t2
            coords = Coordinates(latitude=lat, longitude=_wrap_longitude(lng))

        if i == 0:
            name = "Origin"
        elif i == last:
            name = "Destination"
        else:
            name = f"Waypoint {i}"
        waypoints.append(Waypoint(coordinates=coords, name=name))

    return waypoints
