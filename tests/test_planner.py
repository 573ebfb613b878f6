"""Tests for the voyage planner."""

import asyncio
import random
from datetime import date, datetime, timedelta, timezone

import httpx
import pytest

from conftest import FakeWeatherProvider, make_point_forecast
from voyage_weather.config import Settings
from voyage_weather.engine.planner import VoyagePlanner
from voyage_weather.errors import (
    DegenerateGeometryError,
    InvalidInputError,
    UpstreamUnavailableError,
)
from voyage_weather.models.location import Coordinates
from voyage_weather.models.vessel import VesselConfig, VesselType
from voyage_weather.models.weather import PointForecast, WeatherCondition
from voyage_weather.providers.base import WeatherProvider
from voyage_weather.providers.fallback import FallbackWeatherProvider
from voyage_weather.providers.mock import MockWeatherProvider
from voyage_weather.providers.openweather import OpenWeatherProvider


NEW_YORK = Coordinates(latitude=40.7128, longitude=-74.0060)
LONDON = Coordinates(latitude=51.5074, longitude=-0.1278)


@pytest.fixture
def settings() -> Settings:
    return Settings(waypoint_count=10, forecast_days=10, random_seed=1)


def _planner(provider, settings: Settings) -> VoyagePlanner:
    return VoyagePlanner(provider, settings=settings, rng=random.Random(1))


class SlowWeatherProvider(WeatherProvider):
    """Provider whose lookups wait, recording concurrency and cancellation.

    Lookups for coordinates in `broken` raise RuntimeError immediately.
    """

    name = "slow"

    def __init__(self, delay: float = 0.01, broken: set[Coordinates] | None = None):
        self.delay = delay
        self.broken = broken or set()
        self.started = 0
        self.cancelled = 0
        self.in_flight = 0
        self.max_in_flight = 0

    async def get_forecast(self, coordinates: Coordinates) -> PointForecast:
        self.started += 1
        if coordinates in self.broken:
            raise RuntimeError("unexpected failure")
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delay)
        except asyncio.CancelledError:
            self.cancelled += 1
            raise
        finally:
            self.in_flight -= 1
        return make_point_forecast(coordinates)


async def _cancel_once_started(coro, provider: SlowWeatherProvider, expected: int) -> None:
    """Start `coro`, wait until `expected` lookups are pending, then cancel it."""
    task = asyncio.create_task(coro)
    for _ in range(1000):
        if provider.started >= expected:
            break
        await asyncio.sleep(0)
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task


def _openweather_handler(malformed_longitude: float):
    """MockTransport handler with a broken forecast at one longitude."""

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/weather"):
            return httpx.Response(200, json={})
        if float(request.url.params["lon"]) == malformed_longitude:
            return httpx.Response(200, json={"list": [{"dt": 1718409600, "main": None}]})
        item = {"dt": 1718409600, "main": {"temp": 20.0}, "wind": {"speed": 5.0}}
        return httpx.Response(200, json={"list": [item]})

    return handler


class TestPlanRoute:
    """Tests for planning a route."""

    def test_calm_route(self, settings: Settings, fake_provider: FakeWeatherProvider):
        departure = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)
        plan = asyncio.run(
            _planner(fake_provider, settings).plan_route(
                NEW_YORK,
                LONDON,
                VesselConfig(vessel_type=VesselType.CONTAINER),
                departure=departure,
            )
        )

        assert len(plan.route.waypoints) == 10
        assert len(fake_provider.calls) == 10
        assert len(plan.forecast) == 10
        assert plan.safety.score == 100
        assert plan.safety.recommendation == "Safe to proceed"
        assert plan.report.hazards == []
        assert plan.vessel_limits.max_wind_speed_kn == 40
        assert plan.route.vessel_speed_kn == 22
        assert plan.failed_waypoints == []
        assert plan.estimated_arrival == departure + timedelta(
            hours=plan.route.total_distance_nm / 22
        )
        assert plan.fuel_estimate_tons == pytest.approx(
            plan.route.total_distance_nm * 0.4, abs=0.1
        )

    def test_explicit_limits_win(self, settings: Settings):
        """Test that request limits override the vessel type defaults."""
        provider = FakeWeatherProvider(wind_kn=30)
        plan = asyncio.run(
            _planner(provider, settings).plan_route(
                NEW_YORK,
                LONDON,
                VesselConfig(vessel_type=VesselType.CONTAINER, max_wind_speed_kn=25),
            )
        )

        assert plan.vessel_limits.max_wind_speed_kn == 25
        assert plan.vessel_limits.max_wave_height_m == 6
        assert plan.safety.score == 0
        assert all(h.severity.value == "moderate" for h in plan.safety.hazards)

    def test_default_vessel(self, settings: Settings, fake_provider: FakeWeatherProvider):
        plan = asyncio.run(_planner(fake_provider, settings).plan_route(NEW_YORK, LONDON))

        assert plan.vessel_limits.max_wind_speed_kn == 35
        assert plan.vessel_limits.max_wave_height_m == 4
        assert plan.route.vessel_speed_kn == 15

    def test_partial_failures(self, settings: Settings):
        """Test that failed waypoints are reported and skipped."""
        provider = FakeWeatherProvider(failing={(40.7128, -74.006)})
        plan = asyncio.run(_planner(provider, settings).plan_route(NEW_YORK, LONDON))

        assert plan.failed_waypoints == ["Origin"]
        assert all(day.waypoint_count == 9 for day in plan.forecast)

    def test_all_waypoints_fail(self, settings: Settings):
        provider = FakeWeatherProvider(fail_all=True)
        with pytest.raises(UpstreamUnavailableError) as exc_info:
            asyncio.run(_planner(provider, settings).plan_route(NEW_YORK, LONDON))

        assert len(exc_info.value.failures) == 10

    def test_missing_origin(self, settings: Settings, fake_provider: FakeWeatherProvider):
        with pytest.raises(InvalidInputError) as exc_info:
            asyncio.run(_planner(fake_provider, settings).plan_route(None, LONDON))
        assert exc_info.value.field == "origin"

    def test_origin_equals_destination(
        self, settings: Settings, fake_provider: FakeWeatherProvider
    ):
        """Test that a stationary route samples one point and does not fail."""
        plan = asyncio.run(_planner(fake_provider, settings).plan_route(LONDON, LONDON))

        assert plan.route.total_distance_nm == 0
        assert len(fake_provider.calls) == 1
        assert plan.fuel_estimate_tons == 0

    def test_antipodal_endpoints(self, settings: Settings, fake_provider: FakeWeatherProvider):
        with pytest.raises(DegenerateGeometryError):
            asyncio.run(
                _planner(fake_provider, settings).plan_route(
                    Coordinates(latitude=0, longitude=0),
                    Coordinates(latitude=0, longitude=180),
                )
            )
        assert fake_provider.calls == []

    def test_stormy_route(self, settings: Settings):
        provider = FakeWeatherProvider(wind_kn=50, condition=WeatherCondition.STORM)
        plan = asyncio.run(_planner(provider, settings).plan_route(NEW_YORK, LONDON))

        assert plan.safety.recommendation == "Not recommended"
        assert plan.report.recommendations[0] == (
            "SEVERE CONDITIONS - Only emergency voyages recommended"
        )

    def test_mock_provider_is_reproducible(self, settings: Settings):
        """Test that a seeded mock provider and planner give identical plans."""

        def plan():
            provider = MockWeatherProvider(rng=random.Random(5))
            return asyncio.run(
                _planner(provider, settings).plan_route(NEW_YORK, LONDON)
            ).forecast

        assert plan() == plan()


    def test_malformed_waypoint_response_is_skipped(self, settings: Settings):
        """Test that a waypoint with an unusable payload is reported as failed."""
        handler = _openweather_handler(malformed_longitude=10.0)

        async def run():
            async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
                provider = OpenWeatherProvider(
                    api_key="test-key", client=client, rng=random.Random(0)
                )
                return await _planner(provider, settings).plan_route(
                    Coordinates(latitude=0, longitude=0),
                    Coordinates(latitude=0, longitude=10),
                )

        plan = asyncio.run(run())

        assert plan.failed_waypoints == ["Destination"]
        assert len(plan.forecast) == 10
        assert all(day.waypoint_count == 9 for day in plan.forecast)

    def test_malformed_waypoint_response_falls_back(self, settings: Settings):
        handler = _openweather_handler(malformed_longitude=10.0)

        async def run():
            async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
                provider = FallbackWeatherProvider(
                    OpenWeatherProvider(api_key="test-key", client=client, rng=random.Random(0)),
                    MockWeatherProvider(rng=random.Random(1)),
                )
                return await _planner(provider, settings).plan_route(
                    Coordinates(latitude=0, longitude=0),
                    Coordinates(latitude=0, longitude=10),
                )

        plan = asyncio.run(run())

        assert plan.failed_waypoints == []
        assert all(day.waypoint_count == 10 for day in plan.forecast)

    def test_forecast_capped_by_provider_range(self, settings: Settings):
        class ShortRangeProvider(FakeWeatherProvider):
            def get_max_forecast_days(self) -> int:
                return 3

        provider = ShortRangeProvider(days=10)
        plan = asyncio.run(_planner(provider, settings).plan_route(NEW_YORK, LONDON))
        assert len(plan.forecast) == 3

    def test_waypoint_lookups_run_concurrently(self, settings: Settings):
        provider = SlowWeatherProvider()
        plan = asyncio.run(_planner(provider, settings).plan_route(NEW_YORK, LONDON))

        assert provider.started == 10
        assert provider.max_in_flight == 10
        assert plan.failed_waypoints == []

    def test_cancellation_cancels_pending_lookups(self, settings: Settings):
        provider = SlowWeatherProvider(delay=10)
        planner = _planner(provider, settings)

        asyncio.run(_cancel_once_started(planner.plan_route(NEW_YORK, LONDON), provider, 10))

        assert provider.started == 10
        assert provider.cancelled == 10
        assert provider.in_flight == 0

    def test_unexpected_error_cancels_other_lookups(self, settings: Settings):
        provider = SlowWeatherProvider(delay=10, broken={NEW_YORK})
        planner = _planner(provider, settings)

        async def run():
            with pytest.raises(RuntimeError):
                await planner.plan_route(NEW_YORK, LONDON)
            await asyncio.sleep(0)

        asyncio.run(run())

        assert provider.started == 10
        assert provider.cancelled == 9


class TestOptimizeRoute:
    """Tests for route optimization."""

    def test_calm_weather_prefers_direct(
        self, settings: Settings, fake_provider: FakeWeatherProvider
    ):
        result = asyncio.run(
            _planner(fake_provider, settings).optimize_route(NEW_YORK, LONDON)
        )

        assert result.recommended.label == "Direct Route"
        assert result.recommended.weather_score == 0
        assert len(result.alternatives) == 2
        assert result.analysis.overall == "Excellent"
        assert len(fake_provider.calls) == 30

    def test_departure_time_recorded(
        self, settings: Settings, fake_provider: FakeWeatherProvider
    ):
        departure = datetime(2024, 6, 15, tzinfo=timezone.utc)
        result = asyncio.run(
            _planner(fake_provider, settings).optimize_route(
                NEW_YORK, LONDON, VesselType.YACHT, departure=departure
            )
        )
        assert result.departure_time == departure
        assert result.recommended.route.vessel_speed_kn == 12

    def test_all_candidates_fail(self, settings: Settings):
        provider = FakeWeatherProvider(fail_all=True)
        with pytest.raises(UpstreamUnavailableError):
            asyncio.run(_planner(provider, settings).optimize_route(NEW_YORK, LONDON))
    def test_cancellation_cancels_every_candidate(self, settings: Settings):
        provider = SlowWeatherProvider(delay=10)
        planner = _planner(provider, settings)

        asyncio.run(
            _cancel_once_started(planner.optimize_route(NEW_YORK, LONDON), provider, 30)
        )

        assert provider.started == 30
        assert provider.cancelled == 30



class TestPointOperations:
    """Tests for point weather, storm alerts and marine forecasts."""

    def test_point_weather(self, settings: Settings, fake_provider: FakeWeatherProvider):
        weather = asyncio.run(_planner(fake_provider, settings).point_weather(LONDON))

        assert weather.location == LONDON
        assert len(weather.forecast) == 7
        assert weather.current is not None
        assert weather.current.condition == "Clear"

    def test_point_weather_upstream_failure(self, settings: Settings):
        provider = FakeWeatherProvider(fail_all=True)
        with pytest.raises(UpstreamUnavailableError):
            asyncio.run(_planner(provider, settings).point_weather(LONDON))

    def test_storm_alerts(self, settings: Settings):
        provider = FakeWeatherProvider(days=3, wind_kn=50)
        report = asyncio.run(
            _planner(provider, settings).storm_alerts(LONDON, radius_nm=50)
        )

        assert report.radius_nm == 50
        assert len(report.warnings) == 3
        assert report.safety_status == "hazardous"

    def test_no_storm_alerts(self, settings: Settings, fake_provider: FakeWeatherProvider):
        report = asyncio.run(_planner(fake_provider, settings).storm_alerts(LONDON))

        assert report.warnings == []
        assert report.safety_status == "safe"

    def test_marine_forecast(self, settings: Settings, fake_provider: FakeWeatherProvider):
        report = asyncio.run(
            _planner(fake_provider, settings).marine_forecast([NEW_YORK, LONDON])
        )

        assert len(report.conditions) == 2
        assert report.summary.overall_conditions == "Calm"

    def test_marine_forecast_requires_points(
        self, settings: Settings, fake_provider: FakeWeatherProvider
    ):
        with pytest.raises(InvalidInputError):
            asyncio.run(_planner(fake_provider, settings).marine_forecast([]))

    def test_marine_forecast_all_fail(self, settings: Settings):
        provider = FakeWeatherProvider(fail_all=True)
        with pytest.raises(UpstreamUnavailableError):
            asyncio.run(_planner(provider, settings).marine_forecast([LONDON]))


class TestHistoricalWeather:
    """Tests for historical conditions at a point."""

    def test_thirty_days_ending_on_date(
        self, settings: Settings, fake_provider: FakeWeatherProvider
    ):
        on = date(2024, 6, 15)
        history = asyncio.run(
            _planner(fake_provider, settings).historical_weather(LONDON, on)
        )

        assert history.end_date == on
        assert history.location == LONDON
        assert len(history.days) == 30
        assert history.days[-1].date.date() == on
        assert history.days[0].date.date() == on - timedelta(days=29)
        assert history.statistics.total_days == 30
        assert history.statistics.summary.startswith("Based on 30 days")

    def test_does_not_use_forecast_provider(
        self, settings: Settings, fake_provider: FakeWeatherProvider
    ):
        asyncio.run(
            _planner(fake_provider, settings).historical_weather(LONDON, date(2024, 6, 15))
        )
        assert fake_provider.calls == []

    def test_future_date_rejected(
        self, settings: Settings, fake_provider: FakeWeatherProvider
    ):
        on = datetime.now(timezone.utc).date() + timedelta(days=2)
        with pytest.raises(InvalidInputError) as exc_info:
            asyncio.run(_planner(fake_provider, settings).historical_weather(LONDON, on))
        assert exc_info.value.field == "date"

    def test_reproducible_with_seed(self, settings: Settings):
        """Test that the same seed gives the same history."""
        on = date(2024, 1, 31)
        first = asyncio.run(
            _planner(FakeWeatherProvider(), settings).historical_weather(NEW_YORK, on)
        )
        second = asyncio.run(
            _planner(FakeWeatherProvider(), settings).historical_weather(NEW_YORK, on)
        )
        assert first == second
