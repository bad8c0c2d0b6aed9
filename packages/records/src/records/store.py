# This project was developed with assistance from AI tools.
"""Record store contract shared by every backend.

Records are plain ``dict`` objects keyed by field name; every record carries
a string ``id``. Backends raise ``RecordNotFoundError`` from ``get`` /
``update`` for unknown ids and ``RecordStoreError`` for any other failure
(timeouts, transport errors, malformed responses).
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from .enums import RecordType

Record = dict[str, Any]


class RecordStoreError(Exception):
    """Raised when a record store call fails."""


class RecordNotFoundError(RecordStoreError):
    """Raised when a referenced record does not exist."""

    def __init__(self, record_type: RecordType | str, record_id: str):
        self.record_type = RecordType(record_type)
        self.record_id = record_id
        super().__init__(f"{self.record_type.value} {record_id} not found")


@runtime_checkable
class RecordStore(Protocol):
    """Async CRUD surface of the managed backend platform."""

    async def get(self, record_type: RecordType, record_id: str) -> Record: ...

    async def list(self, record_type: RecordType, sort: str | None = None) -> list[Record]: ...

    async def filter(self, record_type: RecordType, fields: dict[str, Any]) -> list[Record]: ...

    async def create(self, record_type: RecordType, data: dict[str, Any]) -> Record: ...

    async def update(
        self, record_type: RecordType, record_id: str, patch: dict[str, Any]
    ) -> Record: ...


def sort_records(records: list[Record], sort: str | None) -> list[Record]:
    """Order records by a ``sort`` key; a leading ``-`` means descending.

    Missing / ``None`` values sort first ascending (last descending). Numbers
    and numeric strings compare as numbers and come before other values,
    which compare as strings, so mixed field types never raise.
    """
    if not sort:
        return list(records)
    descending = sort.startswith("-")
    key = sort.lstrip("-")

    def _key(record: Record) -> tuple[int, float, str]:
        value = record.get(key)
        if value is None:
            return (0, 0.0, "")
        try:
            return (1, float(value), "")
        except (TypeError, ValueError):
            return (2, 0.0, str(value))

    return sorted(records, key=_key, reverse=descending)
