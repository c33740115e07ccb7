from __future__ import annotations

import json
import os
from typing import Any, Dict, List

import pytest

os.environ.setdefault("FIMBUL_URL", "http://fimbul.test")
os.environ.setdefault("CONTEXT_BROKER_URL", "http://broker.test")
os.environ.setdefault("ENTITY_PREFIX_ENDING", "se:servanet:lora:fimbul")
os.environ.setdefault("STATION_PAUSE_SECONDS", "0")

from integration_fimbul import config  # noqa: E402
from integration_fimbul.errors import NotFoundError  # noqa: E402
from integration_fimbul.schemas import StationResponse, WeatherStation  # noqa: E402

config.get_settings.cache_clear()  # type: ignore[attr-defined]
settings = config.get_settings()

STATION_PAYLOAD = """{"station":{
    "STATION_ID": "S-vall-01-02",
    "NAME": "Sundsvall Södra berget",
    "CUSTOMER": "Sundsvall",
    "LAT": "62.36623300",
    "LON": "17.30874500",
    "ELEVATION": "",
    "logg":[{
        "MESSAGE_DATE_TIME": "2023-01-13 15:40:00",
        "WIND_MINIMUM_SPEED": "1.1",
        "WIND_AVERAGE_SPEED": "1.9",
        "WIND_MAXIMUM_SPEED": "3.1",
        "WIND_DIRECTION": "62.0",
        "WIND_DIRECTION_VARIABILITY": "5.0",
        "TEMPERATURE": "-1.0",
        "RELATIVE_HUMIDITY": "100.0"
    }]
}
}"""


def make_station(station_id: str = "S-vall-01-02", **log_overrides: str) -> WeatherStation:
    payload = json.loads(STATION_PAYLOAD)
    payload["station"]["STATION_ID"] = station_id
    payload["station"]["logg"][0].update(log_overrides)
    return StationResponse.model_validate(payload).station


class FakeStations:
    def __init__(self, stations: Dict[str, WeatherStation] | None = None) -> None:
        self.stations = stations or {}
        self.requested: List[str] = []

    def get_latest(self, station_id: str) -> WeatherStation:
        self.requested.append(station_id)
        if station_id in self.stations:
            return self.stations[station_id]
        return make_station(station_id)


class FakeBroker:
    def __init__(self, merge_error: Exception | None = None, create_error: Exception | None = None) -> None:
        self.merge_error = merge_error
        self.create_error = create_error
        self.merge_calls: List[Dict[str, Any]] = []
        self.create_calls: List[Dict[str, Any]] = []

    def merge_entity(self, entity_id, fragment, headers=None):  # noqa: ANN001
        self.merge_calls.append({"entity_id": entity_id, "fragment": fragment, "headers": headers})
        if self.merge_error is not None:
            raise self.merge_error

    def create_entity(self, entity, headers=None):  # noqa: ANN001
        self.create_calls.append({"entity": entity, "headers": headers})
        if self.create_error is not None:
            raise self.create_error
        return None


@pytest.fixture
def test_settings():
    return settings


@pytest.fixture
def stations():
    return FakeStations()


@pytest.fixture
def broker_not_found():
    return FakeBroker(merge_error=NotFoundError("not found"))
