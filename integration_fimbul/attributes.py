"""Convert a raw station reading into WeatherObserved attributes."""

from __future__ import annotations

import math
from datetime import datetime, timedelta, timezone
from typing import List

from .errors import NoDataError, ParseError
from .ngsild import Attribute, date_time, number
from .schemas import WeatherStation

TIMESTAMP_LAYOUT = "%Y-%m-%d %H:%M:%S"
RFC3339_UTC = "%Y-%m-%dT%H:%M:%SZ"


def parse_float(field: str, raw: str) -> float:
    try:
        value = float(raw)
    except ValueError as exc:
        raise ParseError(field, raw) from exc
    # NaN, infinities and out-of-range literals have no JSON encoding.
    if not math.isfinite(value):
        raise ParseError(field, raw)
    return value


def parse_timestamp(raw: str) -> datetime:
    """Parse the station's naive timestamp and pin it to UTC."""

    try:
        parsed = datetime.strptime(raw, TIMESTAMP_LAYOUT)
    except ValueError as exc:
        raise ParseError("dateObserved", raw) from exc
    return parsed.replace(tzinfo=timezone.utc)


def correct_clock_skew(observed: datetime, now: datetime) -> datetime:
    """Step a timestamp back an hour at a time until it is not in the future.

    Stations report local time without an offset, so a reading taken after a
    DST change can look like it happened later than ``now``.
    """

    while observed > now:
        observed -= timedelta(hours=1)
    return observed


def round_half_away_from_zero(value: float) -> float:
    return math.copysign(math.floor(abs(value) + 0.5), value)


def normalize_humidity(percent: float) -> float:
    return round_half_away_from_zero(percent) / 100


def build_attributes(
    station: WeatherStation,
    *,
    apply_clock_skew_correction: bool = True,
    now: datetime | None = None,
) -> List[Attribute]:
    if not station.logg:
        raise NoDataError(station.station_id)

    latest = station.logg[0]

    temperature = parse_float("temperature", latest.temperature)
    wind_speed = parse_float("windSpeed", latest.wind_average_speed)
    wind_direction = parse_float("windDirection", latest.wind_direction)
    relative_humidity = parse_float("relativeHumidity", latest.relative_humidity)

    observed = parse_timestamp(latest.date_time)
    if apply_clock_skew_correction:
        observed = correct_clock_skew(observed, now or datetime.now(timezone.utc))

    observed_at = observed.strftime(RFC3339_UTC)

    return [
        number("temperature", temperature, observed_at),
        number("windSpeed", wind_speed, observed_at),
        number("windDirection", wind_direction, observed_at),
        number("relativeHumidity", normalize_humidity(relative_humidity), observed_at),
        date_time("dateObserved", observed_at),
    ]


__all__ = [
    "build_attributes",
    "correct_clock_skew",
    "normalize_humidity",
    "parse_float",
    "parse_timestamp",
    "round_half_away_from_zero",
]
