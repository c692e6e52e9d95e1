"""Background weather updates with at most one fetch in flight."""
from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from functools import lru_cache
from threading import Lock
from typing import Any, Optional

from ..entities import FetchOutcome, FetchRequest
from ..providers.aviationweather import AviationWeatherProvider
from ..state import WeatherSink, WeatherState


logger = logging.getLogger(__name__)

# Simulator start-up briefly reports bogus positions beyond this latitude.
MAX_VALID_LATITUDE = 80.0


def run_fetch(provider: Any, request: FetchRequest, sink: WeatherSink) -> FetchOutcome:
    """Fetch weather for ``request`` and publish it to ``sink`` on success.

    Runs on the worker thread. Never raises: unexpected failures become a
    transport error outcome and leave the sink untouched.
    """
    try:
        outcome = provider.fetch(request)
        if not outcome.ok:
            logger.info(
                "No weather update for %.2f/%.2f within %.fnm: %s %s",
                request.latitude,
                request.longitude,
                request.radius_nm,
                outcome.status.value,
                outcome.message,
            )
            return outcome

        observation = outcome.observation
        sink.set_weather(
            observation.pressure_hpa,
            observation.latitude,
            observation.longitude,
            observation.station_id,
            observation.raw_text,
        )
        logger.debug("Weather updated from %s: %.1f hPa", observation.station_id or "?", observation.pressure_hpa)
        return outcome
    except Exception as exc:  # noqa: BLE001 - nothing may escape the worker thread
        logger.error("Fetching weather failed with exception %s", exc, exc_info=exc)
        return FetchOutcome.transport_error(str(exc) or exc.__class__.__name__)


class FetchCoordinatorState:
    """Holds the handle of the most recently started fetch."""

    def __init__(self) -> None:
        self._future: Optional[Future] = None
        self._lock = Lock()

    def is_ready(self) -> bool:
        """True if no fetch was started yet or the last one has finished."""
        with self._lock:
            return self._future is None or self._future.done()

    def store(self, future: Future) -> None:
        with self._lock:
            self._future = future


class WeatherFetchCoordinator:
    """Starts weather fetches on a background thread, one at a time.

    ``update`` is meant to be called periodically from the simulation loop; it
    never blocks and quietly declines while a previous fetch is running.
    """

    def __init__(
        self,
        provider: Any,
        sink: WeatherSink,
        *,
        max_radius_nm: Optional[float] = None,
        executor: Optional[ThreadPoolExecutor] = None,
        state: Optional[FetchCoordinatorState] = None,
    ) -> None:
        self.provider = provider
        self.sink = sink
        if max_radius_nm is None:
            max_radius_nm = getattr(provider, "max_radius_nm", None)
        self.max_radius_nm = max_radius_nm
        self.state = state or FetchCoordinatorState()
        self._executor = executor or ThreadPoolExecutor(max_workers=1, thread_name_prefix="simweather")
        self._lock = Lock()

    def update(self, position: Any, radius_nm: float) -> bool:
        """Start a fetch around ``position``; True if one was started."""
        if abs(position.latitude) >= MAX_VALID_LATITUDE:
            return False

        with self._lock:
            if not self.state.is_ready():
                return False
            if self.max_radius_nm is not None and radius_nm > self.max_radius_nm:
                radius_nm = self.max_radius_nm
            request = FetchRequest(position.latitude, position.longitude, radius_nm)
            self.state.store(self._executor.submit(run_fetch, self.provider, request, self.sink))
        return True

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)


@lru_cache(maxsize=1)
def get_weather_state() -> WeatherState:
    return WeatherState()


@lru_cache(maxsize=1)
def get_weather_coordinator() -> WeatherFetchCoordinator:
    return WeatherFetchCoordinator(AviationWeatherProvider(), get_weather_state())


def weather_update(position: Any, radius_nm: float) -> bool:
    """Process-wide entry point: refresh weather around ``position`` in the background."""
    return get_weather_coordinator().update(position, radius_nm)


__all__ = [
    "FetchCoordinatorState",
    "WeatherFetchCoordinator",
    "get_weather_coordinator",
    "get_weather_state",
    "run_fetch",
    "weather_update",
    "MAX_VALID_LATITUDE",
]
