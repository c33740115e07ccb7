from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable

WEATHER_OBSERVED_TYPE = "WeatherObserved"
WEATHER_OBSERVED_ID_PREFIX = "urn:ngsi-ld:WeatherObserved:"


@dataclass(frozen=True)
class Attribute:
    """A named NGSI-LD property body, ready to be placed on an entity."""

    name: str
    body: Dict[str, Any]


def number(name: str, value: float, observed_at: str | None = None) -> Attribute:
    body: Dict[str, Any] = {"type": "Property", "value": value}
    if observed_at is not None:
        body["observedAt"] = observed_at
    return Attribute(name, body)


def date_time(name: str, value: str) -> Attribute:
    return Attribute(
        name,
        {"type": "Property", "value": {"@type": "DateTime", "@value": value}},
    )


def text(name: str, value: str) -> Attribute:
    return Attribute(name, {"type": "Property", "value": value})


def location(latitude: float, longitude: float) -> Attribute:
    # GeoJSON orders coordinates longitude first.
    return Attribute(
        "location",
        {
            "type": "GeoProperty",
            "value": {"type": "Point", "coordinates": [longitude, latitude]},
        },
    )


def _collect(attributes: Iterable[Attribute]) -> Dict[str, Any]:
    collected: Dict[str, Any] = {}
    for attribute in attributes:
        if attribute.name in ("id", "type", "@context"):
            raise ValueError(f"attribute name {attribute.name!r} is reserved")
        if attribute.name in collected:
            raise ValueError(f"duplicate attribute {attribute.name!r}")
        collected[attribute.name] = attribute.body
    return collected


def new_fragment(attributes: Iterable[Attribute], context: str) -> Dict[str, Any]:
    """Build a partial entity used for merge operations."""

    return {"@context": [context], **_collect(attributes)}


def new_entity(
    entity_id: str,
    entity_type: str,
    attributes: Iterable[Attribute],
    context: str,
) -> Dict[str, Any]:
    if not entity_id:
        raise ValueError("entity id cannot be empty")
    if not entity_type:
        raise ValueError("entity type cannot be empty")
    return {
        "@context": [context],
        "id": entity_id,
        "type": entity_type,
        **_collect(attributes),
    }


__all__ = [
    "Attribute",
    "WEATHER_OBSERVED_TYPE",
    "WEATHER_OBSERVED_ID_PREFIX",
    "number",
    "date_time",
    "text",
    "location",
    "new_fragment",
    "new_entity",
]
