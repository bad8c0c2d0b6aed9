# This project was developed with assistance from AI tools.
"""Shared id-normalization helpers.

Record ids come back from the store as strings, numbers, ``None``, empty
strings, or (for ``created_by``) a nested ``{"id": ...}`` object. Every
comparison in the access and assignment code goes through these helpers so
that the rules for "is this an id, and which one" live in one place.
"""

from collections.abc import Iterable
from typing import Any

from records.enums import TeamRole


def normalize_id(value: Any) -> str | None:
    """Coerce a raw id to a non-empty string, or None.

    Dicts are unwrapped through their ``id`` key; booleans are never ids.
    """
    if isinstance(value, dict):
        value = value.get("id")
    if value is None or isinstance(value, bool):
        return None
    text = str(value).strip()
    return text or None


def dedupe_ids(values: Iterable[Any]) -> list[str]:
    """Normalize ids, drop empties and duplicates, keep first-seen order."""
    seen: dict[str, None] = {}
    for value in values:
        normalized = normalize_id(value)
        if normalized is not None:
            seen.setdefault(normalized, None)
    return list(seen)


def normalize_id_array(value: Any) -> list[str]:
    """Treat anything that is not a list/tuple as an empty id array."""
    if not isinstance(value, (list, tuple)):
        return []
    return dedupe_ids(value)


def same_id_set(a: Iterable[Any], b: Iterable[Any]) -> bool:
    """Order-insensitive equality of two id collections."""
    return set(dedupe_ids(a)) == set(dedupe_ids(b))


def owner_id(record: dict[str, Any]) -> str | None:
    """Creator id of a record; ``created_by`` may be an id or an ``{id}`` object."""
    return normalize_id(record.get("created_by"))


def effective_ids(record: dict[str, Any], role: TeamRole) -> list[str]:
    """Team ids for one role, reconciling the singular and array field shapes.

    The singular field (``referrer_id``) is authoritative when present;
    otherwise the legacy array field (``referrer_ids``) is used.
    """
    singular = normalize_id(record.get(role.singular_field))
    if singular is not None:
        return [singular]
    return normalize_id_array(record.get(role.array_field))


def emails_match(a: Any, b: Any) -> bool:
    """Case-insensitive email equality; empty values never match."""
    if not a or not b:
        return False
    return str(a).strip().lower() == str(b).strip().lower()
