from __future__ import annotations

import pytest

from simweather.providers.aviationweather import AviationWeatherProvider
from simweather.providers.base import RequestConfig


AWC_URL = "https://awc.test/adds/dataserver_current/httpparam"
AWC_URL_TEMPLATE = (
    AWC_URL
    + "?dataSource=metars&requestType=retrieve&format=xml"
    + "&radialDistance={radius_sm:.0f};{longitude:.2f},{latitude:.2f}"
    + "&hoursBeforeNow=2&mostRecent=true"
)

METAR_BODY = """<response xmlns:xsd="http://www.w3.org/2001/XMLSchema" version="1.2">
<request_index>71114711</request_index>
<data_source name="metars"/>
<request type="retrieve"/>
<errors/>
<warnings/>
<time_taken_ms>249</time_taken_ms>
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
"""

EMPTY_BODY = """<response xmlns:xsd="http://www.w3.org/2001/XMLSchema" version="1.2">
<request_index>60222216</request_index>
<data_source name="metars"/>
<request type="retrieve"/>
<errors/>
<warnings/>
<time_taken_ms>7</time_taken_ms>
<data num_results="0"/>
</response>
"""

ERROR_BODY = """<response xmlns:xsd="http://www.w3.org/2001/XMLSchema" version="1.2">
<request_index>59450188</request_index>
<data_source name="metars"/>
<request type="retrieve"/>
<errors>
<error>Query must be constrained by time</error>
</errors>
<warnings/>
<time_taken_ms>0</time_taken_ms>
</response>
"""


@pytest.fixture
def awc_url() -> str:
    return AWC_URL


@pytest.fixture
def metar_body() -> str:
    return METAR_BODY


@pytest.fixture
def empty_body() -> str:
    return EMPTY_BODY


@pytest.fixture
def error_body() -> str:
    return ERROR_BODY


@pytest.fixture
def awc_provider() -> AviationWeatherProvider:
    return AviationWeatherProvider(
        url_template=AWC_URL_TEMPLATE,
        max_radius_nm=100.0,
        request_config=RequestConfig(timeout=7.5, user_agent="simweather-tests/1.0"),
    )
