"""Command-line interface for voyage weather planning."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from collections.abc import Awaitable, Callable
from datetime import date, datetime, timezone

from pydantic import BaseModel

from voyage_weather.config import Settings, get_settings
from voyage_weather.engine.planner import DEFAULT_ALERT_RADIUS_NM, VoyagePlanner
from voyage_weather.errors import VoyageWeatherError
from voyage_weather.models import Coordinates, VesselConfig, VesselType
from voyage_weather.providers import create_provider

logger = logging.getLogger(__name__)


def _coordinates(value: str) -> Coordinates:
    """argparse type for 'latitude,longitude'."""
    try:
        return Coordinates.from_string(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def _date(value: str) -> date:
    """argparse type for YYYY-MM-DD."""
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"Invalid date: {value}") from e


async def _run(
    settings: Settings,
    operation: Callable[[VoyagePlanner], Awaitable[BaseModel]],
) -> BaseModel:
    async with create_provider(settings) as provider:
        planner = VoyagePlanner(provider, settings=settings)
        return await operation(planner)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Voyage Weather - Assess weather risk along maritime routes"
    )
    parser.add_argument(
        "--version",
        action="version",
        version="%(prog)s 0.1.0",
    )
    parser.add_argument(
        "--provider",
        choices=["openweather", "mock"],
        default=None,
        help="Weather data provider (default: WEATHER_PROVIDER setting)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")
    vessel_choices = [v.value for v in VesselType]

    # Plan command
    plan_parser = subparsers.add_parser(
        "plan", help="Plan a route and assess its weather risk"
    )
    plan_parser.add_argument("origin", type=_coordinates, help="Origin as lat,lon")
    plan_parser.add_argument("destination", type=_coordinates, help="Destination as lat,lon")
    plan_parser.add_argument("--vessel", choices=vessel_choices, help="Vessel type")
    plan_parser.add_argument("--max-wind", type=float, help="Maximum wind speed (knots)")
    plan_parser.add_argument("--max-wave", type=float, help="Maximum wave height (m)")

    # Optimize command
    optimize_parser = subparsers.add_parser(
        "optimize", help="Compare direct, northern and southern routes"
    )
    optimize_parser.add_argument("origin", type=_coordinates, help="Origin as lat,lon")
    optimize_parser.add_argument(
        "destination", type=_coordinates, help="Destination as lat,lon"
    )
    optimize_parser.add_argument("--vessel", choices=vessel_choices, help="Vessel type")

    # Point command
    point_parser = subparsers.add_parser(
        "point", help="Current marine conditions and forecast at a point"
    )
    point_parser.add_argument("location", type=_coordinates, help="Location as lat,lon")

    # Alerts command
    alerts_parser = subparsers.add_parser("alerts", help="Storm warnings at a point")
    alerts_parser.add_argument("location", type=_coordinates, help="Location as lat,lon")
    alerts_parser.add_argument(
        "--radius",
        type=float,
        default=DEFAULT_ALERT_RADIUS_NM,
        help="Alert radius (nm)",
    )

    # History command
    history_parser = subparsers.add_parser(
        "history", help="Conditions and statistics for the 30 days ending on a date"
    )
    history_parser.add_argument("location", type=_coordinates, help="Location as lat,lon")
    history_parser.add_argument(
        "--date",
        type=_date,
        default=None,
        help="Last day of the period as YYYY-MM-DD (default: today, UTC)",
    )

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", help="Bind address (default: HOST setting)")
    serve_parser.add_argument("--port", type=int, help="Port (default: PORT setting)")

    return parser


def _serve(settings: Settings, args: argparse.Namespace) -> int:
    import uvicorn

    from voyage_weather.api import create_app

    uvicorn.run(
        create_app(settings=settings),
        host=args.host or settings.host,
        port=args.port or settings.port,
        log_level=settings.log_level.lower(),
    )
    return 0


def _operation(args: argparse.Namespace) -> Callable[[VoyagePlanner], Awaitable[BaseModel]]:
    """Planner call for a weather command."""

    async def plan(planner: VoyagePlanner) -> BaseModel:
        vessel = VesselConfig(
            vessel_type=args.vessel,
            max_wind_speed_kn=args.max_wind,
            max_wave_height_m=args.max_wave,
        )
        return await planner.plan_route(args.origin, args.destination, vessel)

    async def optimize(planner: VoyagePlanner) -> BaseModel:
        vessel_type = VesselType(args.vessel) if args.vessel else None
        return await planner.optimize_route(args.origin, args.destination, vessel_type)

    async def point(planner: VoyagePlanner) -> BaseModel:
        return await planner.point_weather(args.location)

    async def alerts(planner: VoyagePlanner) -> BaseModel:
        return await planner.storm_alerts(args.location, radius_nm=args.radius)

    async def history(planner: VoyagePlanner) -> BaseModel:
        on = args.date or datetime.now(timezone.utc).date()
        return await planner.historical_weather(args.location, on)

    operations = {
        "plan": plan,
        "optimize": optimize,
        "point": point,
        "alerts": alerts,
        "history": history,
    }
    return operations[args.command]


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    settings = get_settings()
    if args.provider:
        settings = settings.model_copy(update={"weather_provider": args.provider})

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "serve":
        return _serve(settings, args)

    try:
        result = asyncio.run(_run(settings, _operation(args)))
    except VoyageWeatherError as e:
        logger.error(f"{args.command} failed: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(result.model_dump_json(indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
