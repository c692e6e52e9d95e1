"""Shared real-world weather state.

The fetcher publishes into anything implementing :class:`WeatherSink`. The
in-memory :class:`WeatherState` is written from the fetch thread and read from
the simulation thread, so every access goes through a lock.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from threading import Lock
from typing import Callable, Dict, Optional, Protocol


class WeatherSink(Protocol):
    """Receiver of freshly fetched weather."""

    def set_weather(
        self,
        pressure_hpa: float,
        latitude: Optional[float],
        longitude: Optional[float],
        station_id: str,
        raw_text: str,
    ) -> None:
        ...


@dataclass(frozen=True)
class WeatherSnapshot:
    pressure_hpa: float
    latitude: Optional[float]
    longitude: Optional[float]
    station_id: str
    raw_text: str
    updated_at: datetime

    def as_dict(self) -> Dict[str, object]:
        payload = asdict(self)
        payload["updated_at"] = WeatherState._format_datetime(self.updated_at)
        return payload


class WeatherState:
    """Keeps the latest published weather and how often it changed."""

    def __init__(self, clock: Optional[Callable[[], datetime]] = None) -> None:
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._current: Optional[WeatherSnapshot] = None
        self._updates = 0
        self._lock = Lock()

    def set_weather(
        self,
        pressure_hpa: float,
        latitude: Optional[float],
        longitude: Optional[float],
        station_id: str,
        raw_text: str,
    ) -> None:
        if pressure_hpa is None:
            raise ValueError("pressure_hpa must be provided")
        snapshot = WeatherSnapshot(
            pressure_hpa=float(pressure_hpa),
            latitude=latitude,
            longitude=longitude,
            station_id=station_id or "",
            raw_text=raw_text or "",
            updated_at=self._clock(),
        )
        with self._lock:
            self._current = snapshot
            self._updates += 1

    @property
    def current(self) -> Optional[WeatherSnapshot]:
        with self._lock:
            return self._current

    @property
    def updates(self) -> int:
        with self._lock:
            return self._updates

    def snapshot(self) -> Dict[str, object]:
        with self._lock:
            current = self._current
            updates = self._updates
        return {"weather": current.as_dict() if current else None, "updates": updates}

    @staticmethod
    def _format_datetime(value: datetime) -> str:
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc).isoformat()


__all__ = ["WeatherSink", "WeatherSnapshot", "WeatherState"]
