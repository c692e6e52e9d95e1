"""Command-line fetch using the same stack as the background updater."""
from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict
from typing import Any, Optional, Sequence

from . import settings
from .entities import FetchRequest, Observation
from .providers.aviationweather import AviationWeatherProvider
from .services.weather import MAX_VALID_LATITUDE, run_fetch
from .state import WeatherState


class CommandError(Exception):
    def __init__(self, message: str, returncode: int = 1) -> None:
        super().__init__(message)
        self.returncode = returncode


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="simweather-fetch",
        description="Fetch the nearest METAR pressure for the provided coordinates",
    )
    parser.add_argument("--lat", type=float, required=True, help="Latitude")
    parser.add_argument("--lon", type=float, required=True, help="Longitude")
    parser.add_argument("--radius", type=float, default=25.0, help="Search radius [nm]")
    return parser


def serialize_observation(observation: Observation, request: FetchRequest) -> dict[str, Any]:
    payload = asdict(observation)
    payload["pressure_hpa"] = round(observation.pressure_hpa, 2)
    payload["search_radius_nm"] = request.radius_nm
    return payload


def handle(args: argparse.Namespace, provider: Optional[AviationWeatherProvider] = None) -> dict[str, Any]:
    if abs(args.lat) >= MAX_VALID_LATITUDE:
        raise CommandError(f"--lat must be within +/-{MAX_VALID_LATITUDE:.0f} degrees", returncode=2)

    provider = provider or AviationWeatherProvider()
    request = FetchRequest(args.lat, args.lon, min(args.radius, provider.max_radius_nm))
    outcome = run_fetch(provider, request, WeatherState())
    if not outcome.ok:
        raise CommandError(f"{outcome.status.value}: {outcome.message or 'no weather found'}")
    return serialize_observation(outcome.observation, request)


def main(argv: Optional[Sequence[str]] = None, provider: Optional[AviationWeatherProvider] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    try:
        payload = handle(args, provider)
    except CommandError as exc:
        sys.stderr.write(f"{exc}\n")
        return exc.returncode
    sys.stdout.write(json.dumps(payload) + "\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
