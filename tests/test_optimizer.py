"""Tests for weather-based route optimization."""

import pytest

from conftest import make_route_day
from voyage_weather.engine.optimizer import (
    RouteOptimizer,
    analyze_route,
    generate_candidate_routes,
    rank_candidates,
    score_route_weather,
)
from voyage_weather.models.location import Coordinates
from voyage_weather.models.route import CandidateRoute
from voyage_weather.models.vessel import VesselLimits
from voyage_weather.models.weather import WeatherCondition


ORIGIN = Coordinates(latitude=10, longitude=-60)
DESTINATION = Coordinates(latitude=30, longitude=-20)


def _calm_days(n: int = 5):
    return [make_route_day(i, wind_kn=10, wave_m=1.0, sea_state=2) for i in range(n)]


def _candidate(label: str, score: float) -> CandidateRoute:
    variant = generate_candidate_routes(ORIGIN, DESTINATION)[0]
    return CandidateRoute(label=label, route=variant.route, weather_score=score)


class TestGenerateCandidateRoutes:
    """Tests for candidate generation."""

    def test_order_and_labels(self):
        variants = generate_candidate_routes(ORIGIN, DESTINATION)
        assert [v.label for v in variants] == [
            "Direct Route",
            "Northern Route",
            "Southern Route",
        ]

    def test_shared_endpoints(self):
        for variant in generate_candidate_routes(ORIGIN, DESTINATION, num_waypoints=6):
            assert len(variant.route.waypoints) == 6
            assert variant.route.origin == ORIGIN
            assert variant.route.destination == DESTINATION

    def test_alternatives_bend_north_and_south(self):
        direct, northern, southern = generate_candidate_routes(ORIGIN, DESTINATION)
        mid = len(direct.route.waypoints) // 2

        assert northern.route.waypoints[mid].latitude > southern.route.waypoints[mid].latitude
        # The direct route is the shortest
        assert direct.route.total_distance_nm < northern.route.total_distance_nm
        assert direct.route.total_distance_nm < southern.route.total_distance_nm

    def test_vessel_speed_applied(self):
        for variant in generate_candidate_routes(ORIGIN, DESTINATION, vessel_speed_kn=22):
            assert variant.route.vessel_speed_kn == 22


class TestScoreRouteWeather:
    """Tests for the weather penalty."""

    def test_calm_days_floor_at_zero(self, cargo_limits: VesselLimits):
        """Test that calm bonuses cannot push a score below zero."""
        assert score_route_weather(_calm_days(), cargo_limits) == 0

    def test_wind_excess(self, cargo_limits: VesselLimits):
        days = [make_route_day(0, wind_kn=40, wave_m=3.0, sea_state=4)]
        assert score_route_weather(days, cargo_limits) == 50

    def test_wave_excess(self, cargo_limits: VesselLimits):
        days = [make_route_day(0, wind_kn=20, wave_m=6.0, sea_state=6)]
        assert score_route_weather(days, cargo_limits) == pytest.approx(30)

    def test_storm_and_fog(self, cargo_limits: VesselLimits):
        days = [
            make_route_day(0, wind_kn=20, wave_m=3.0, condition=WeatherCondition.STORM),
            make_route_day(1, wind_kn=20, wave_m=3.0, visibility_km=0.5),
        ]
        assert score_route_weather(days, cargo_limits) == 70

    def test_calm_bonus_offsets_penalty(self, cargo_limits: VesselLimits):
        days = [
            make_route_day(0, wind_kn=20, wave_m=3.0, visibility_km=0.5),
            make_route_day(1, wind_kn=10, wave_m=1.0),
        ]
        assert score_route_weather(days, cargo_limits) == 15


class TestRanking:
    """Tests for ranking and analysis."""

    def test_lowest_score_first(self):
        ranked = rank_candidates(
            [_candidate("a", 120), _candidate("b", 10), _candidate("c", 60)]
        )
        assert [c.label for c in ranked] == ["b", "c", "a"]

    def test_ties_keep_generation_order(self):
        ranked = rank_candidates(
            [_candidate("Direct Route", 0), _candidate("Northern Route", 0),
             _candidate("Southern Route", 0)]
        )
        assert ranked[0].label == "Direct Route"

    @pytest.mark.parametrize(
        "score,overall,delay",
        [
            (0, "Excellent", 0),
            (49.9, "Excellent", 0),
            (50, "Good", 2),
            (200, "Fair", 6),
            (300, "Poor", 12),
            (500, "Dangerous", 24),
            (5000, "Dangerous", 24),
        ],
    )
    def test_analysis_bands(self, score: float, overall: str, delay: int):
        analysis = analyze_route(_candidate("x", score))
        assert analysis.overall == overall
        assert analysis.estimated_delay_hours == delay
        assert analysis.score == score

    def test_analysis_recommendations(self):
        assert analyze_route(_candidate("x", 10)).recommendations == []
        assert analyze_route(_candidate("x", 600)).recommendations == [
            "Postpone voyage until conditions improve"
        ]


class TestRouteOptimizer:
    """Tests for scoring and selecting candidates."""

    def test_calm_weather_prefers_direct(self, cargo_limits: VesselLimits):
        """Test that equal calm scores resolve to the direct route."""
        optimizer = RouteOptimizer(cargo_limits)
        variants = generate_candidate_routes(ORIGIN, DESTINATION)
        candidates = [optimizer.score(v, _calm_days()) for v in variants]

        result = optimizer.select(candidates)

        assert result.recommended.label == "Direct Route"
        assert [c.label for c in result.alternatives] == ["Northern Route", "Southern Route"]
        assert result.analysis.overall == "Excellent"

    def test_stormy_direct_route_loses(self, cargo_limits: VesselLimits):
        optimizer = RouteOptimizer(cargo_limits)
        direct, northern, southern = generate_candidate_routes(ORIGIN, DESTINATION)
        stormy = [make_route_day(0, wind_kn=20, wave_m=3.0, condition=WeatherCondition.STORM)]

        result = optimizer.select(
            [
                optimizer.score(direct, stormy),
                optimizer.score(northern, _calm_days()),
                optimizer.score(southern, _calm_days()),
            ]
        )

        assert result.recommended.label == "Northern Route"
        assert result.alternatives[-1].label == "Direct Route"
        assert result.alternatives[-1].weather_score == 50

    def test_no_candidates(self, cargo_limits: VesselLimits):
        with pytest.raises(ValueError):
            RouteOptimizer(cargo_limits).select([])
