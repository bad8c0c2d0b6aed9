# This project was developed with assistance from AI tools.
"""In-process record store for local development and tests.

Mirrors the managed platform's observable behaviour: ids are assigned on
create, ``created_date`` / ``updated_date`` are maintained, reads return
copies so callers can never mutate stored state by accident, and filters are
exact field equality.
"""

from __future__ import annotations

import copy
import logging
import uuid
from datetime import UTC, datetime
from typing import Any

from .enums import RecordType
from .store import Record, RecordNotFoundError, sort_records

logger = logging.getLogger(__name__)


def _now() -> str:
    return datetime.now(UTC).isoformat()


class InMemoryRecordStore:
    """Dict-backed implementation of the ``RecordStore`` protocol."""

    def __init__(self, seed: dict[RecordType, list[Record]] | None = None):
        self._tables: dict[RecordType, dict[str, Record]] = {rt: {} for rt in RecordType}
        for record_type, records in (seed or {}).items():
            for record in records:
                self._insert(RecordType(record_type), record)

    def _insert(self, record_type: RecordType, data: dict[str, Any]) -> Record:
        record = copy.deepcopy(data)
        record_id = str(record.get("id") or uuid.uuid4().hex)
        record["id"] = record_id
        stamp = _now()
        record.setdefault("created_date", stamp)
        record.setdefault("updated_date", stamp)
        self._tables[record_type][record_id] = record
        return record

    async def get(self, record_type: RecordType, record_id: str) -> Record:
        record = self._tables[RecordType(record_type)].get(str(record_id))
        if record is None:
            raise RecordNotFoundError(record_type, record_id)
        return copy.deepcopy(record)

    async def list(self, record_type: RecordType, sort: str | None = None) -> list[Record]:
        records = list(self._tables[RecordType(record_type)].values())
        return copy.deepcopy(sort_records(records, sort))

    async def filter(self, record_type: RecordType, fields: dict[str, Any]) -> list[Record]:
        matches = [
            record
            for record in self._tables[RecordType(record_type)].values()
            if all(record.get(name) == value for name, value in fields.items())
        ]
        return copy.deepcopy(matches)

    async def create(self, record_type: RecordType, data: dict[str, Any]) -> Record:
        record = self._insert(RecordType(record_type), data)
        logger.debug("Created %s %s", RecordType(record_type).value, record["id"])
        return copy.deepcopy(record)

    async def update(
        self, record_type: RecordType, record_id: str, patch: dict[str, Any]
    ) -> Record:
        table = self._tables[RecordType(record_type)]
        record = table.get(str(record_id))
        if record is None:
            raise RecordNotFoundError(record_type, record_id)
        record.update(copy.deepcopy({k: v for k, v in patch.items() if k != "id"}))
        record["updated_date"] = _now()
        return copy.deepcopy(record)
