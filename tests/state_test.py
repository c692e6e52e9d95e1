from datetime import datetime, timezone

import pytest

from simweather.state import WeatherState


class TimeController:
    def __init__(self) -> None:
        self.now = datetime(2024, 1, 10, 12, 30, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture()
def state() -> WeatherState:
    return WeatherState(clock=TimeController())


def test_state_starts_empty(state: WeatherState) -> None:
    assert state.current is None
    assert state.snapshot() == {"weather": None, "updates": 0}


def test_set_weather_replaces_current(state: WeatherState) -> None:
    state.set_weather(1012.5, 33.35, -117.25, "KL18", "KL18 222035Z AUTO")
    state.set_weather(1009.0, None, None, "", "")

    assert state.updates == 2
    assert state.current.pressure_hpa == 1009.0
    assert state.current.latitude is None
    assert state.current.station_id == ""


def test_snapshot_is_serializable(state: WeatherState) -> None:
    state.set_weather(1012.5, 33.35, -117.25, "KL18", "KL18 222035Z AUTO")

    payload = state.snapshot()

    assert payload["updates"] == 1
    assert payload["weather"] == {
        "pressure_hpa": 1012.5,
        "latitude": 33.35,
        "longitude": -117.25,
        "station_id": "KL18",
        "raw_text": "KL18 222035Z AUTO",
        "updated_at": "2024-01-10T12:30:00+00:00",
    }


def test_pressure_is_mandatory(state: WeatherState) -> None:
    with pytest.raises(ValueError):
        state.set_weather(None, 1.0, 2.0, "X", "")
    assert state.updates == 0
