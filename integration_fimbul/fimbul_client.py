"""HTTP client for the Fimbul weather station service."""

from __future__ import annotations

import logging

import requests
from pydantic import ValidationError

from .errors import DecodeError, HTTPStatusError, TransportError
from .schemas import StationResponse, WeatherStation

logger = logging.getLogger(__name__)


class FimbulClient:
    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 10.0,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def station_url(self, station_id: str) -> str:
        return f"{self.base_url}/stations/{station_id}.last"

    def get_latest(self, station_id: str) -> WeatherStation:
        """Fetch the most recent reading for a single station."""

        url = self.station_url(station_id)
        logger.info("requesting data", extra={"station": station_id})
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as exc:
            logger.error("failed to send request", extra={"url": url, "err": str(exc)})
            raise TransportError(f"failed to send request to {url}: {exc}") from exc

        if response.status_code != 200:
            raise HTTPStatusError(response.status_code, url)

        try:
            payload = response.json()
        except ValueError as exc:
            logger.error("failed to decode response body", extra={"url": url, "err": str(exc)})
            raise DecodeError(f"response from {url} is not valid json: {exc}") from exc

        try:
            return StationResponse.model_validate(payload).station
        except ValidationError as exc:
            logger.error("unexpected response shape", extra={"url": url, "err": str(exc)})
            raise DecodeError(f"response from {url} has unexpected shape: {exc}") from exc

    def close(self) -> None:
        self.session.close()


__all__ = ["FimbulClient"]
