"""Error taxonomy for the station-to-broker pipeline."""

from __future__ import annotations


class IntegrationError(Exception):
    """Base class for every failure that aborts a run."""


class EmptyInputError(IntegrationError):
    pass


class TransportError(IntegrationError):
    """The request could not be built or sent."""


class HTTPStatusError(IntegrationError):
    def __init__(self, status_code: int, url: str) -> None:
        super().__init__(
            f"request failed expected status code 200 but got: {status_code} ({url})"
        )
        self.status_code = status_code
        self.url = url


class DecodeError(IntegrationError):
    pass


class NoDataError(IntegrationError):
    def __init__(self, station_id: str) -> None:
        super().__init__(f"weather station response does not contain logs: {station_id}")
        self.station_id = station_id


class ParseError(IntegrationError):
    def __init__(self, field: str, value: str) -> None:
        super().__init__(f"failed to parse {field} from {value!r}")
        self.field = field
        self.value = value


class NotFoundError(IntegrationError):
    """The broker has no entity with the requested id."""


class BrokerMergeError(IntegrationError):
    pass


class BrokerCreateError(IntegrationError):
    pass


class EntityAlreadyExistsError(BrokerCreateError):
    pass


class RunCancelledError(IntegrationError):
    pass


__all__ = [
    "IntegrationError",
    "EmptyInputError",
    "TransportError",
    "HTTPStatusError",
    "DecodeError",
    "NoDataError",
    "ParseError",
    "NotFoundError",
    "BrokerMergeError",
    "BrokerCreateError",
    "EntityAlreadyExistsError",
    "RunCancelledError",
]
