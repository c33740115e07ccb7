from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict, Field


class LogEntry(BaseModel):
    """One sample from a station. Every value is transmitted as a string."""

    model_config = ConfigDict(populate_by_name=True)

    date_time: str = Field("", alias="MESSAGE_DATE_TIME")
    wind_minimum_speed: str = Field("", alias="WIND_MINIMUM_SPEED")
    wind_average_speed: str = Field("", alias="WIND_AVERAGE_SPEED")
    wind_maximum_speed: str = Field("", alias="WIND_MAXIMUM_SPEED")
    wind_direction: str = Field("", alias="WIND_DIRECTION")
    wind_direction_variability: str = Field("", alias="WIND_DIRECTION_VARIABILITY")
    temperature: str = Field("", alias="TEMPERATURE")
    relative_humidity: str = Field("", alias="RELATIVE_HUMIDITY")


class WeatherStation(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    station_id: str = Field("", alias="STATION_ID")
    name: str = Field("", alias="NAME")
    customer: str = Field("", alias="CUSTOMER")
    latitude: str = Field("", alias="LAT")
    longitude: str = Field("", alias="LON")
    elevation: str = Field("", alias="ELEVATION")
    logg: List[LogEntry] = Field(default_factory=list)


class StationResponse(BaseModel):
    station: WeatherStation


__all__ = ["LogEntry", "WeatherStation", "StationResponse"]
