"""Voyage planner: the route-weather engine's entry point.

Control flow for `plan_route`:

1. build a great-circle route for the vessel's cruise speed
2. fetch every waypoint's forecast concurrently (one task per waypoint)
3. annotate each point forecast with estimated marine fields
4. aggregate into one per-day route forecast
5. score safety and classify hazards against the vessel's limits

`optimize_route` repeats steps 1-4 for the direct, northern and southern
candidates (concurrently) and ranks them by weather penalty.
`historical_weather` runs steps 3-4 over 30 synthesized past days for one
point and summarizes them.

## Failure policy

A waypoint whose lookup raises `ProviderError` is logged and left out of
the averages. If every waypoint of a route fails, the request fails with
`UpstreamUnavailableError`. Any other error cancels the remaining lookups
before it propagates. Cancelling the awaiting task cancels every
pending lookup.
"""

from __future__ import annotations

import asyncio
import logging
import random
from collections.abc import Awaitable, Iterable, Sequence
from datetime import date, datetime, timedelta, timezone
from typing import TypeVar

from voyage_weather.config import Settings, get_settings
from voyage_weather.engine.aggregator import (
    aggregate_route_forecast,
    annotate_point_forecast,
    marine_snapshot,
)
from voyage_weather.engine.hazards import (
    calculate_safety_score,
    evaluate_hazards,
    historical_statistics,
    storm_warnings,
    summarize_marine_conditions,
)
from voyage_weather.engine.optimizer import (
    RouteOptimizer,
    RouteVariant,
    generate_candidate_routes,
)
from voyage_weather.errors import InvalidInputError, UpstreamUnavailableError
from voyage_weather.geo.geometry import build_route, estimate_arrival
from voyage_weather.marine.estimators import estimate_fuel_consumption
from voyage_weather.models.assessment import HazardReport
from voyage_weather.models.location import Coordinates, Waypoint
from voyage_weather.models.plan import (
    HistoricalWeather,
    MarineForecastReport,
    OptimizationResult,
    PointWeather,
    RoutePlan,
    StormReport,
)
from voyage_weather.models.route import CandidateRoute, RouteSpec
from voyage_weather.models.vessel import (
    DEFAULT_VESSEL_CATALOG,
    VesselCatalog,
    VesselConfig,
    VesselLimits,
    VesselType,
)
from voyage_weather.models.weather import MarineDailyForecast, PointForecast, RouteDayForecast
from voyage_weather.providers.base import ProviderError, WeatherProvider
from voyage_weather.providers.mock import MockWeatherProvider

logger = logging.getLogger(__name__)

POINT_FORECAST_DAYS = 7
DEFAULT_ALERT_RADIUS_NM = 100.0
HISTORY_DAYS = 30

T = TypeVar("T")


def _require(value: Coordinates | None, field: str) -> Coordinates:
    if value is None:
        raise InvalidInputError(f"Missing {field} coordinates", field=field)
    return value


async def _join_all(coros: Iterable[Awaitable[T]]) -> list[T]:
    """Run coroutines concurrently and wait for all of them.

    If one raises, the others are cancelled before the error propagates;
    `asyncio.gather` alone would leave them running.
    """
    tasks = [asyncio.ensure_future(c) for c in coros]
    try:
        return await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        raise


class VoyagePlanner:
    """Plans voyages and evaluates weather risk along them.

    Example:
        ```python
        async with create_provider(settings) as provider:
            planner = VoyagePlanner(provider, settings=settings)
            plan = await planner.plan_route(
                Coordinates(latitude=40.7, longitude=-74.0),
                Coordinates(latitude=51.5, longitude=-0.1),
                VesselConfig(vessel_type=VesselType.CONTAINER),
            )
        ```
    """

    def __init__(
        self,
        provider: WeatherProvider,
        catalog: VesselCatalog = DEFAULT_VESSEL_CATALOG,
        settings: Settings | None = None,
        rng: random.Random | None = None,
    ):
        """Initialize the planner.

        Args:
            provider: Weather collaborator queried once per waypoint
            catalog: Vessel speeds, limits and fuel rates
            settings: Waypoint count and forecast length (default: app settings)
            rng: Random source for current-speed jitter (default: seeded
                from settings.random_seed)

        The route forecast is never longer than the provider supports, even
        when `settings.forecast_days` asks for more.
        """
        settings = settings or get_settings()
        self.provider = provider
        self.catalog = catalog
        self.num_waypoints = settings.waypoint_count
        self.max_days = min(settings.forecast_days, provider.get_max_forecast_days())
        self.rng = rng or random.Random(settings.random_seed)

    # Sampling

    async def _fetch_point(self, coordinates: Coordinates) -> PointForecast | None:
        try:
            return await self.provider.get_forecast(coordinates)
        except ProviderError as e:
            logger.warning(f"Weather lookup failed for {coordinates}: {e}")
            return None

    async def _sample_waypoint(self, waypoint: Waypoint) -> list[MarineDailyForecast] | None:
        point = await self._fetch_point(waypoint.coordinates)
        if point is None:
            return None
        return annotate_point_forecast(point, self.rng)

    async def sample_route(self, route: RouteSpec) -> tuple[list[RouteDayForecast], list[str]]:
        """Fetch and aggregate weather for every waypoint of a route.

        Returns:
            Tuple of (route forecast, names of waypoints that failed)

        Raises:
            UpstreamUnavailableError: If every waypoint lookup failed
        """
        results = await _join_all(
            self._sample_waypoint(wp) for wp in route.waypoints
        )

        failed = [
            wp.display_name() for wp, result in zip(route.waypoints, results) if result is None
        ]
        if len(failed) == len(results):
            raise UpstreamUnavailableError(
                f"Weather unavailable for all {len(results)} waypoints",
                failures=failed,
            )
        if failed:
            logger.warning(f"{len(failed)} of {len(results)} waypoint lookups failed")

        return aggregate_route_forecast(results, self.max_days), failed

    # Engine operations

    async def plan_route(
        self,
        origin: Coordinates | None,
        destination: Coordinates | None,
        vessel: VesselConfig | None = None,
        departure: datetime | None = None,
        origin_name: str | None = None,
        destination_name: str | None = None,
    ) -> RoutePlan:
        """Plan a route and assess its weather risk.

        Args:
            origin: Start of the voyage
            destination: End of the voyage
            vessel: Vessel type and optional explicit limits
            departure: Departure time (default: now, UTC)
            origin_name: Display name for the first waypoint
            destination_name: Display name for the last waypoint

        Returns:
            RoutePlan with route, forecast, safety score and hazards

        Raises:
            InvalidInputError: If origin or destination is missing
            DegenerateGeometryError: If the endpoints are antipodal
            UpstreamUnavailableError: If no weather could be fetched
        """
        origin = _require(origin, "origin")
        destination = _require(destination, "destination")
        vessel = vessel or VesselConfig()

        limits = self.catalog.resolve_limits(vessel)
        speed = self.catalog.speed_for(vessel.vessel_type)
        route = build_route(
            origin,
            destination,
            self.num_waypoints,
            speed,
            origin_name=origin_name,
            destination_name=destination_name,
        )
        logger.info(
            f"Planning route {origin} -> {destination}: "
            f"{route.total_distance_nm:.0f} nm, {len(route.waypoints)} waypoints"
        )

        forecast, failed = await self.sample_route(route)
        departure = departure or datetime.now(timezone.utc)

        return RoutePlan(
            route=route,
            forecast=forecast,
            safety=calculate_safety_score(forecast, limits),
            report=evaluate_hazards(forecast, limits),
            vessel_limits=limits,
            fuel_estimate_tons=estimate_fuel_consumption(
                route.total_distance_nm,
                forecast,
                self.catalog.fuel_rate_for(vessel.vessel_type),
            ),
            departure_time=departure,
            estimated_arrival=estimate_arrival(route.total_distance_nm, speed, departure),
            failed_waypoints=failed,
        )

    def evaluate_hazards(
        self,
        days: Sequence[RouteDayForecast],
        limits: VesselLimits,
    ) -> HazardReport:
        """Classify hazards in an existing route forecast."""
        return evaluate_hazards(days, limits)

    async def _evaluate_candidate(
        self,
        optimizer: RouteOptimizer,
        variant: RouteVariant,
    ) -> CandidateRoute | None:
        try:
            forecast, _ = await self.sample_route(variant.route)
        except UpstreamUnavailableError as e:
            logger.warning(f"Skipping {variant.label}: {e}")
            return None
        return optimizer.score(variant, forecast)

    async def optimize_route(
        self,
        origin: Coordinates | None,
        destination: Coordinates | None,
        vessel_type: VesselType | None = None,
        departure: datetime | None = None,
    ) -> OptimizationResult:
        """Compare direct, northern and southern routes.

        Candidates are scored against the vessel type's default limits
        (cargo limits when the type is unknown).

        Raises:
            InvalidInputError: If origin or destination is missing
            DegenerateGeometryError: If the endpoints are antipodal
            UpstreamUnavailableError: If no candidate could be sampled
        """
        origin = _require(origin, "origin")
        destination = _require(destination, "destination")

        limits = self.catalog.default_limits(vessel_type)
        optimizer = RouteOptimizer(limits)
        variants = generate_candidate_routes(
            origin,
            destination,
            self.num_waypoints,
            self.catalog.speed_for(vessel_type),
        )
        logger.info(f"Optimizing route {origin} -> {destination} over {len(variants)} candidates")

        evaluated = await _join_all(
            self._evaluate_candidate(optimizer, v) for v in variants
        )
        candidates = [c for c in evaluated if c is not None]
        if not candidates:
            raise UpstreamUnavailableError("Weather unavailable for every candidate route")

        result = optimizer.select(candidates)
        return result.model_copy(update={"departure_time": departure})

    # Point operations

    async def _point_forecast(self, coordinates: Coordinates) -> PointForecast:
        try:
            return await self.provider.get_forecast(coordinates)
        except ProviderError as e:
            raise UpstreamUnavailableError(
                f"Weather unavailable for {coordinates}: {e}",
                failures=[str(coordinates)],
            ) from e

    async def point_weather(
        self,
        coordinates: Coordinates,
        days: int = POINT_FORECAST_DAYS,
    ) -> PointWeather:
        """Current marine conditions and a short daily forecast at a point."""
        point = await self._point_forecast(coordinates)
        return PointWeather(
            location=coordinates,
            current=marine_snapshot(point, self.rng),
            forecast=annotate_point_forecast(point, self.rng)[:days],
        )

    async def storm_alerts(
        self,
        coordinates: Coordinates,
        radius_nm: float = DEFAULT_ALERT_RADIUS_NM,
    ) -> StormReport:
        """Storm warnings from the forecast at a point."""
        point = await self._point_forecast(coordinates)
        days = annotate_point_forecast(point, self.rng)
        return StormReport(
            location=coordinates,
            radius_nm=radius_nm,
            warnings=storm_warnings(days),
        )

    async def marine_forecast(self, points: Sequence[Coordinates]) -> MarineForecastReport:
        """Current marine conditions at several points plus a summary.

        Raises:
            InvalidInputError: If no points are given
            UpstreamUnavailableError: If every lookup failed
        """
        if not points:
            raise InvalidInputError("No route points provided", field="points")

        forecasts = await _join_all(self._fetch_point(p) for p in points)
        available = [f for f in forecasts if f is not None]
        if not available:
            raise UpstreamUnavailableError(
                f"Weather unavailable for all {len(points)} points",
                failures=[str(p) for p in points],
            )

        snapshots = [marine_snapshot(f, self.rng) for f in available]
        return MarineForecastReport(
            conditions=snapshots,
            summary=summarize_marine_conditions(snapshots),
        )

    async def historical_weather(self, coordinates: Coordinates, on: date) -> HistoricalWeather:
        """Daily conditions for the 30 days ending on `on`, with statistics.

        Archived observations need a paid OpenWeatherMap plan, so the days are
        synthesized by the mock provider from the planner's random source,
        whatever provider the planner was built with.

        Raises:
            InvalidInputError: If `on` is in the future
        """
        if on > datetime.now(timezone.utc).date():
            raise InvalidInputError(f"Historical date {on} is in the future", field="date")

        start = datetime(on.year, on.month, on.day, tzinfo=timezone.utc) - timedelta(
            days=HISTORY_DAYS - 1
        )
        archive = MockWeatherProvider(rng=self.rng, forecast_days=HISTORY_DAYS, clock=lambda: start)
        point = await archive.get_forecast(coordinates)
        days = aggregate_route_forecast(
            [annotate_point_forecast(point, self.rng)], max_days=HISTORY_DAYS
        )
        logger.info(f"Historical weather for {coordinates}: {len(days)} days ending {on}")

        return HistoricalWeather(
            location=coordinates,
            end_date=on,
            days=days,
            statistics=historical_statistics(days),
        )
