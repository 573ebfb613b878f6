"""Route-weather risk engine."""

from voyage_weather.engine.aggregator import (
    aggregate_route_forecast,
    annotate_point_forecast,
    marine_snapshot,
)
from voyage_weather.engine.hazards import (
    HazardEvaluator,
    calculate_safety_score,
    evaluate_hazards,
    historical_statistics,
    identify_hazards,
    storm_warnings,
    summarize_marine_conditions,
    voyage_recommendations,
)
from voyage_weather.engine.optimizer import (
    RouteOptimizer,
    analyze_route,
    generate_candidate_routes,
    rank_candidates,
    score_route_weather,
)
from voyage_weather.engine.planner import VoyagePlanner

__all__ = [
    "HazardEvaluator",
    "RouteOptimizer",
    "VoyagePlanner",
    "aggregate_route_forecast",
    "analyze_route",
    "annotate_point_forecast",
    "calculate_safety_score",
    "evaluate_hazards",
    "generate_candidate_routes",
    "historical_statistics",
    "identify_hazards",
    "marine_snapshot",
    "rank_candidates",
    "score_route_weather",
    "storm_warnings",
    "summarize_marine_conditions",
    "voyage_recommendations",
]
