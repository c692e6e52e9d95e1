"""Nearest METAR lookup on the NOAA Aviation Weather Center text data server.

One request asks for the most recent report within a radius around a point,
limited to the fields we use. Answers look like this::

    <response ...>
    <errors/>
    <warnings/>
    <data num_results="1">
    <METAR>
    <raw_text>KL18 222035Z AUTO 23009G16KT 10SM CLR A2990 RMK AO2</raw_text>
    <station_id>KL18</station_id>
    <latitude>33.35</latitude>
    <longitude>-117.25</longitude>
    <altim_in_hg>29.899607</altim_in_hg>
    </METAR>
    </data>
    </response>

No report in range gives ``<data num_results="0"/>``; a rejected query carries
``<errors><error>Query must be constrained by time</error></errors>``.
"""
from __future__ import annotations

import logging
import math
from typing import Optional

from .. import settings
from ..entities import FetchOutcome, FetchRequest, FetchStatus, Observation
from ..tags import TagScanner
from .base import ParseError, ProviderError, WeatherProvider


logger = logging.getLogger(__name__)

HPA_PER_INCH_HG = 33.8639
SM_PER_NM = 1.151


def interpret_response(body: str) -> FetchOutcome:
    """Classify a data server answer and extract the observation from it."""
    scanner = TagScanner(body)

    # an error element wins over anything else in the body
    error = scanner.extract("<error>")
    if error:
        return FetchOutcome.protocol_error(error)

    altimeter = scanner.extract("<altim_in_hg>")
    if not altimeter:
        return FetchOutcome.not_found()
    try:
        pressure_hpa = _parse_pressure(altimeter)
    except ParseError as exc:
        return FetchOutcome.parse_error(str(exc))

    # remaining fields come before the altimeter setting, so start over
    scanner.reset()
    raw_text = scanner.extract("<raw_text>")
    station_id = scanner.extract("<station_id>")
    latitude = _parse_coordinate(scanner.extract("<latitude>"), "latitude")
    longitude = _parse_coordinate(scanner.extract("<longitude>"), "longitude")

    return FetchOutcome.success(
        Observation(
            pressure_hpa=pressure_hpa,
            latitude=latitude,
            longitude=longitude,
            station_id=station_id,
            raw_text=raw_text,
        )
    )


def _parse_pressure(value: str) -> float:
    try:
        inches = float(value)
    except ValueError:
        raise ParseError(f"altim_in_hg is not a number: {value!r}") from None
    if not math.isfinite(inches):
        raise ParseError(f"altim_in_hg is not a number: {value!r}")
    return inches * HPA_PER_INCH_HG


def _parse_coordinate(value: str, field: str) -> Optional[float]:
    if not value:
        return None
    try:
        return float(value)
    except ValueError:
        logger.debug("Ignoring unreadable %s %r", field, value)
        return None


class AviationWeatherProvider(WeatherProvider):
    """Fetches the nearest METAR, widening the search radius once if needed."""

    url_template = settings.WEATHER_URL

    def __init__(
        self,
        url_template: Optional[str] = None,
        max_radius_nm: Optional[float] = None,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.url_template = url_template or self.url_template
        self.max_radius_nm = settings.MAX_RADIUS_NM if max_radius_nm is None else max_radius_nm

    def build_url(self, request: FetchRequest) -> str:
        return self.url_template.format(
            radius_sm=request.radius_nm * SM_PER_NM,
            longitude=request.longitude,
            latitude=request.latitude,
        )

    def fetch(self, request: FetchRequest) -> FetchOutcome:
        """Run the request, retrying once at maximum radius if nothing was found.

        Blocks for the duration of the network calls. ``request.radius_nm`` is
        updated in place when the search is widened.
        """
        self.begin_fetch()
        while True:
            outcome = self._fetch_once(request)
            if outcome.status is not FetchStatus.NOT_FOUND:
                return outcome
            self._log.warning("Found no weather in a %.fnm radius", request.radius_nm)
            if not request.widen(self.max_radius_nm):
                return outcome

    def _fetch_once(self, request: FetchRequest) -> FetchOutcome:
        try:
            response = self._request("GET", self.build_url(request))
        except ProviderError as exc:
            return FetchOutcome(exc.status, message=str(exc))

        outcome = interpret_response(response.text)
        if outcome.status is FetchStatus.PROTOCOL_ERROR:
            self._log.error("Weather request returned with error: %s", outcome.message)
        elif outcome.status is FetchStatus.PARSE_ERROR:
            self._log.error("Weather response could not be parsed: %s", outcome.message)
        return outcome


__all__ = ["AviationWeatherProvider", "interpret_response", "HPA_PER_INCH_HG", "SM_PER_NM"]
