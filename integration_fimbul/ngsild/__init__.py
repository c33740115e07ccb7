"""NGSI-LD entity helpers and context broker client."""

from .client import LD_JSON_HEADERS, ContextBrokerClient
from .entities import (
    WEATHER_OBSERVED_ID_PREFIX,
    WEATHER_OBSERVED_TYPE,
    Attribute,
    date_time,
    location,
    new_entity,
    new_fragment,
    number,
    text,
)

__all__ = [
    "ContextBrokerClient",
    "LD_JSON_HEADERS",
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
