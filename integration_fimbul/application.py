from __future__ import annotations

import logging
import threading
from datetime import datetime
from typing import Any, Callable, Dict, List, Mapping, Protocol, Sequence

from .attributes import build_attributes, parse_float
from .config import Settings, get_settings
from .errors import (
    BrokerCreateError,
    EmptyInputError,
    IntegrationError,
    NotFoundError,
    RunCancelledError,
)
from .ngsild import (
    LD_JSON_HEADERS,
    WEATHER_OBSERVED_ID_PREFIX,
    WEATHER_OBSERVED_TYPE,
    Attribute,
    location,
    new_entity,
    new_fragment,
    text,
)
from .schemas import WeatherStation

logger = logging.getLogger(__name__)

StationID = str


class StationSource(Protocol):
    def get_latest(self, station_id: str) -> WeatherStation:
        ...


class BrokerClient(Protocol):
    def merge_entity(
        self,
        entity_id: str,
        fragment: Dict[str, Any],
        headers: Mapping[str, str] | None = None,
    ) -> None:
        ...

    def create_entity(
        self,
        entity: Dict[str, Any],
        headers: Mapping[str, str] | None = None,
    ) -> Any:
        ...


def normalize_prefix_ending(prefix_ending: str) -> str:
    if not prefix_ending.endswith(":"):
        prefix_ending = prefix_ending + ":"
    return prefix_ending


def entity_id_for(prefix_ending: str, station_id: str) -> str:
    return f"{WEATHER_OBSERVED_ID_PREFIX}{normalize_prefix_ending(prefix_ending)}{station_id}"


def upsert_observation(
    broker: BrokerClient,
    entity_id: str,
    attributes: List[Attribute],
    station: WeatherStation,
    *,
    context: str,
) -> None:
    """Merge the observation into an existing entity, creating it if missing."""

    fragment = new_fragment(attributes, context)

    logger.info("merging entity", extra={"entityID": entity_id})
    try:
        broker.merge_entity(entity_id, fragment, LD_JSON_HEADERS)
        return
    except NotFoundError:
        logger.info("entity not found, attempting create", extra={"entityID": entity_id})

    latitude = parse_float("latitude", station.latitude)
    longitude = parse_float("longitude", station.longitude)

    full_attributes = [
        *attributes,
        location(latitude, longitude),
        text("name", station.name),
    ]
    try:
        entity = new_entity(entity_id, WEATHER_OBSERVED_TYPE, full_attributes, context)
    except ValueError as exc:
        raise BrokerCreateError(f"failed to construct new entity {entity_id}: {exc}") from exc

    broker.create_entity(entity, LD_JSON_HEADERS)
    logger.info("entity created", extra={"entityID": entity_id})


class WeatherObservedService:
    def __init__(
        self,
        broker: BrokerClient,
        stations: StationSource,
        settings: Settings | None = None,
        *,
        stop_event: threading.Event | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.broker = broker
        self.stations = stations
        self.settings = settings or get_settings()
        self.stop_event = stop_event or threading.Event()
        self.clock = clock

    def _now(self) -> datetime | None:
        # The clock must return a timezone-aware UTC datetime.
        return self.clock() if self.clock else None

    def _check_cancelled(self) -> None:
        if self.stop_event.is_set():
            raise RunCancelledError("run cancelled before all stations were processed")

    def process_station(self, station_id: StationID, prefix_ending: str) -> None:
        station = self.stations.get_latest(station_id)
        self._check_cancelled()

        entity_id = entity_id_for(prefix_ending, station.station_id or station_id)
        attributes = build_attributes(
            station,
            apply_clock_skew_correction=self.settings.apply_clock_skew_correction,
            now=self._now(),
        )

        upsert_observation(
            self.broker,
            entity_id,
            attributes,
            station,
            context=self.settings.ngsild_context,
        )

    def create_weather_observed(
        self,
        station_ids: Sequence[StationID],
        prefix_ending: str,
    ) -> None:
        """Fetch and upsert every station in order, stopping at the first failure."""

        if not station_ids:
            raise EmptyInputError("list of stations is empty")

        prefix_ending = normalize_prefix_ending(prefix_ending)
        pause = self.settings.station_pause_seconds

        last = len(station_ids) - 1
        for index, station_id in enumerate(station_ids):
            self._check_cancelled()
            try:
                self.process_station(station_id, prefix_ending)
                # Pace requests to the weather service, cut short by cancellation.
                if self.stop_event.wait(pause) and index < last:
                    raise RunCancelledError("run cancelled while pausing between stations")
            except KeyboardInterrupt as exc:
                # Raised by the signal handler to abort a blocking HTTP call or pause.
                self.stop_event.set()
                raise RunCancelledError(f"run cancelled while processing {station_id}") from exc
            except RunCancelledError:
                raise
            except IntegrationError as exc:
                logger.error(
                    "station processing failed",
                    extra={"station": station_id, "err": str(exc)},
                )
                raise

        logger.info("processed stations", extra={"count": len(station_ids)})


__all__ = [
    "StationID",
    "WeatherObservedService",
    "entity_id_for",
    "normalize_prefix_ending",
    "upsert_observation",
]
