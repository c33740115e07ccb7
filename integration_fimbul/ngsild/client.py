from __future__ import annotations

import json
import logging
from typing import Any, Dict, Mapping
from urllib.parse import quote

import requests

from ..errors import (
    BrokerCreateError,
    BrokerMergeError,
    EntityAlreadyExistsError,
    NotFoundError,
)

logger = logging.getLogger(__name__)

LD_JSON_HEADERS = {"Content-Type": "application/ld+json"}


class ContextBrokerClient:
    """Minimal NGSI-LD client covering the merge and create operations."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 10.0,
        tenant: str | None = None,
        debug: bool = False,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.tenant = tenant
        self.debug = debug
        self.session = session or requests.Session()

    def _headers(self, headers: Mapping[str, str] | None) -> Dict[str, str]:
        merged = dict(LD_JSON_HEADERS)
        if self.tenant:
            merged["NGSILD-Tenant"] = self.tenant
        if headers:
            merged.update(headers)
        return merged

    def _send(
        self,
        method: str,
        url: str,
        body: Dict[str, Any],
        headers: Mapping[str, str] | None,
    ) -> requests.Response:
        data = json.dumps(body)
        if self.debug:
            logger.debug("broker request", extra={"method": method, "url": url, "body": data})
        response = self.session.request(
            method,
            url,
            data=data.encode("utf-8"),
            headers=self._headers(headers),
            timeout=self.timeout,
        )
        if self.debug:
            logger.debug(
                "broker response",
                extra={"status": response.status_code, "body": response.text},
            )
        return response

    def merge_entity(
        self,
        entity_id: str,
        fragment: Dict[str, Any],
        headers: Mapping[str, str] | None = None,
    ) -> None:
        url = f"{self.base_url}/ngsi-ld/v1/entities/{quote(entity_id, safe=':')}"
        try:
            response = self._send("PATCH", url, fragment, headers)
        except requests.RequestException as exc:
            raise BrokerMergeError(f"failed to merge entity {entity_id}: {exc}") from exc

        if response.status_code == 404:
            raise NotFoundError(f"entity {entity_id} not found")
        if response.status_code not in (200, 204):
            raise BrokerMergeError(
                f"failed to merge entity {entity_id}: "
                f"status {response.status_code} {response.text[:200]}"
            )

    def create_entity(
        self,
        entity: Dict[str, Any],
        headers: Mapping[str, str] | None = None,
    ) -> str | None:
        """Create a full entity and return the Location header, if any."""

        entity_id = entity.get("id")
        url = f"{self.base_url}/ngsi-ld/v1/entities"
        try:
            response = self._send("POST", url, entity, headers)
        except requests.RequestException as exc:
            raise BrokerCreateError(f"failed to create entity {entity_id}: {exc}") from exc

        if response.status_code == 409:
            raise EntityAlreadyExistsError(f"entity {entity_id} already exists")
        if response.status_code != 201:
            raise BrokerCreateError(
                f"failed to create entity {entity_id}: "
                f"status {response.status_code} {response.text[:200]}"
            )
        return response.headers.get("Location")

    def close(self) -> None:
        self.session.close()


__all__ = ["ContextBrokerClient", "LD_JSON_HEADERS"]
