# This project was developed with assistance from AI tools.
"""HTTP client for the managed backend platform's entity API.

Every entity collection is exposed under
``{base_url}/apps/{app_id}/entities/{RecordType}``. Each call is an
independent round trip; transport errors, timeouts and non-2xx responses
are translated into ``RecordStoreError`` (``RecordNotFoundError`` for 404)
so callers never need to know about httpx.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import httpx

from .config import RecordStoreSettings
from .enums import RecordType
from .store import Record, RecordNotFoundError, RecordStoreError

logger = logging.getLogger(__name__)


class PlatformRecordStore:
    """``RecordStore`` implementation backed by ``httpx.AsyncClient``."""

    def __init__(
        self,
        base_url: str,
        app_id: str,
        api_key: str = "",
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        headers = {"Accept": "application/json"}
        if api_key:
            headers["api_key"] = api_key
        self._client = httpx.AsyncClient(
            base_url=f"{base_url.rstrip('/')}/apps/{app_id}/entities",
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_settings(cls, cfg: RecordStoreSettings) -> "PlatformRecordStore":
        return cls(
            base_url=cfg.RECORD_STORE_URL,
            app_id=cfg.RECORD_STORE_APP_ID,
            api_key=cfg.RECORD_STORE_API_KEY,
            timeout=cfg.RECORD_STORE_TIMEOUT,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        *,
        record_type: RecordType,
        record_id: str | None = None,
        params: dict[str, str] | None = None,
        body: dict[str, Any] | None = None,
    ) -> Any:
        try:
            response = await self._client.request(method, path, params=params, json=body)
        except httpx.TimeoutException as exc:
            raise RecordStoreError(f"{method} {record_type.value} timed out") from exc
        except httpx.HTTPError as exc:
            raise RecordStoreError(f"{method} {record_type.value} failed: {exc}") from exc

        if response.status_code == 404 and record_id is not None:
            raise RecordNotFoundError(record_type, record_id)
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.error(
                "Record store %s %s returned %s", method, path, response.status_code
            )
            raise RecordStoreError(
                f"{method} {record_type.value} returned {response.status_code}"
            ) from exc

        try:
            return response.json()
        except ValueError as exc:
            raise RecordStoreError(f"{method} {record_type.value} returned invalid JSON") from exc

    @staticmethod
    def _as_list(payload: Any, record_type: RecordType) -> list[Record]:
        if payload is None:
            return []
        if not isinstance(payload, list):
            raise RecordStoreError(f"Expected a list of {record_type.value} records")
        return payload

    async def get(self, record_type: RecordType, record_id: str) -> Record:
        record_type = RecordType(record_type)
        payload = await self._request(
            "GET", f"/{record_type.value}/{record_id}", record_type=record_type, record_id=record_id
        )
        if not payload:
            raise RecordNotFoundError(record_type, record_id)
        return payload

    async def list(self, record_type: RecordType, sort: str | None = None) -> list[Record]:
        record_type = RecordType(record_type)
        params = {"sort": sort} if sort else None
        payload = await self._request(
            "GET", f"/{record_type.value}", record_type=record_type, params=params
        )
        return self._as_list(payload, record_type)

    async def filter(self, record_type: RecordType, fields: dict[str, Any]) -> list[Record]:
        record_type = RecordType(record_type)
        payload = await self._request(
            "GET",
            f"/{record_type.value}",
            record_type=record_type,
            params={"q": json.dumps(fields, default=str)},
        )
        return self._as_list(payload, record_type)

    async def create(self, record_type: RecordType, data: dict[str, Any]) -> Record:
        record_type = RecordType(record_type)
        return await self._request(
            "POST", f"/{record_type.value}", record_type=record_type, body=data
        )

    async def update(
        self, record_type: RecordType, record_id: str, patch: dict[str, Any]
    ) -> Record:
        record_type = RecordType(record_type)
        return await self._request(
            "PUT",
            f"/{record_type.value}/{record_id}",
            record_type=record_type,
            record_id=record_id,
            body=patch,
        )
