# This project was developed with assistance from AI tools.
"""Request-scoped read-through cache over any ``RecordStore``.

One instance is created per request and thrown away with it, so links that
change between requests (a borrower activating an invite, a team update) are
always observed fresh. Writes invalidate every cached read of the written
record type; failed reads are never cached.
"""

from __future__ import annotations

import copy
import json
from typing import Any

from .enums import RecordType
from .store import Record, RecordStore


def _filter_key(fields: dict[str, Any]) -> str:
    return json.dumps(fields, sort_keys=True, default=str)


class CachedRecordStore:
    """Memoize ``get`` / ``list`` / ``filter`` for the lifetime of one request."""

    def __init__(self, inner: RecordStore):
        self._inner = inner
        self._cache: dict[RecordType, dict[tuple[str, str], Any]] = {}

    @property
    def inner(self) -> RecordStore:
        return self._inner

    def invalidate(self, record_type: RecordType | None = None) -> None:
        """Drop cached reads for one record type, or everything."""
        if record_type is None:
            self._cache.clear()
        else:
            self._cache.pop(RecordType(record_type), None)

    async def _cached(self, record_type: RecordType, key: tuple[str, str], load):
        bucket = self._cache.setdefault(RecordType(record_type), {})
        if key not in bucket:
            bucket[key] = await load()
        return copy.deepcopy(bucket[key])

    async def get(self, record_type: RecordType, record_id: str) -> Record:
        return await self._cached(
            record_type, ("get", str(record_id)), lambda: self._inner.get(record_type, record_id)
        )

    async def list(self, record_type: RecordType, sort: str | None = None) -> list[Record]:
        return await self._cached(
            record_type, ("list", sort or ""), lambda: self._inner.list(record_type, sort)
        )

    async def filter(self, record_type: RecordType, fields: dict[str, Any]) -> list[Record]:
        return await self._cached(
            record_type,
            ("filter", _filter_key(fields)),
            lambda: self._inner.filter(record_type, fields),
        )

    async def create(self, record_type: RecordType, data: dict[str, Any]) -> Record:
        self.invalidate(record_type)
        return await self._inner.create(record_type, data)

    async def update(
        self, record_type: RecordType, record_id: str, patch: dict[str, Any]
    ) -> Record:
        self.invalidate(record_type)
        return await self._inner.update(record_type, record_id, patch)
