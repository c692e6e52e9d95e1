from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


@dataclass(frozen=True)
class Position:
    """Simulated position supplied by the host application."""

    latitude: float
    longitude: float


@dataclass(frozen=True)
class Observation:
    """Nearest barometric observation found around a position.

    Pressure is always present. The reporting station's location, identifier
    and METAR text are best-effort and may be missing from the response.
    """

    pressure_hpa: float
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    station_id: str = ""
    raw_text: str = ""


@dataclass
class FetchRequest:
    latitude: float
    longitude: float
    radius_nm: float

    def widen(self, max_radius_nm: float) -> bool:
        """Grow the radius to ``max_radius_nm``; False if already there."""
        if self.radius_nm >= max_radius_nm:
            return False
        self.radius_nm = max_radius_nm
        return True


class FetchStatus(Enum):
    SUCCESS = "success"
    NOT_FOUND = "not_found"
    PROTOCOL_ERROR = "protocol_error"
    TRANSPORT_ERROR = "transport_error"
    PARSE_ERROR = "parse_error"


@dataclass(frozen=True)
class FetchOutcome:
    """Result of one weather fetch. ``observation`` is only set on success."""

    status: FetchStatus
    observation: Optional[Observation] = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.status is FetchStatus.SUCCESS

    @classmethod
    def success(cls, observation: Observation) -> "FetchOutcome":
        return cls(FetchStatus.SUCCESS, observation=observation)

    @classmethod
    def not_found(cls) -> "FetchOutcome":
        return cls(FetchStatus.NOT_FOUND)

    @classmethod
    def protocol_error(cls, message: str) -> "FetchOutcome":
        return cls(FetchStatus.PROTOCOL_ERROR, message=message)

    @classmethod
    def transport_error(cls, message: str) -> "FetchOutcome":
        return cls(FetchStatus.TRANSPORT_ERROR, message=message)

    @classmethod
    def parse_error(cls, message: str) -> "FetchOutcome":
        return cls(FetchStatus.PARSE_ERROR, message=message)


__all__ = ["Position", "Observation", "FetchRequest", "FetchStatus", "FetchOutcome"]
