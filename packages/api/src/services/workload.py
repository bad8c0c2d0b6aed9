# This project was developed with assistance from AI tools.
"""Loan officer workload and queue-based assignment.

New applications go to the officer with the fewest active applications and
loans. Queue position is only the tie-break: among officers sharing the
minimum workload, the one earliest in the queue wins.
"""

import asyncio
import logging
from collections.abc import Iterable, Mapping
from typing import Any

from records import ApplicationStatus, LoanStatus, RecordStore, RecordType

from ..core.auth import is_loan_officer
from ..schemas.queue import QueueEntry, QueuedOfficer, QueueSyncResponse, QueueWorkloadItem
from .ids import normalize_id, normalize_id_array

logger = logging.getLogger(__name__)

TERMINAL_APPLICATION_STATUSES = frozenset(s.value for s in ApplicationStatus.terminal_statuses())
TERMINAL_LOAN_STATUSES = frozenset(s.value for s in LoanStatus.terminal_statuses())


def compute_workload(
    applications: Iterable[Mapping[str, Any]],
    loans: Iterable[Mapping[str, Any]],
) -> dict[str, int]:
    """Count active applications and loans per loan officer.

    An active application counts once against its assigned officer. An
    active loan counts once against *each* of its officers. Officers with
    nothing active are absent from the result (implicitly 0).
    """
    workload: dict[str, int] = {}

    for application in applications:
        if application.get("status") in TERMINAL_APPLICATION_STATUSES:
            continue
        officer_id = normalize_id(application.get("assigned_loan_officer_id"))
        if officer_id is not None:
            workload[officer_id] = workload.get(officer_id, 0) + 1

    for loan in loans:
        if loan.get("status") in TERMINAL_LOAN_STATUSES:
            continue
        for officer_id in normalize_id_array(loan.get("loan_officer_ids")):
            workload[officer_id] = workload.get(officer_id, 0) + 1

    return workload


def _position(entry: QueueEntry | Mapping[str, Any]) -> int:
    value = entry.queue_position if isinstance(entry, QueueEntry) else entry.get("queue_position")
    try:
        return int(value or 0)
    except (TypeError, ValueError):
        return 0


def _officer_id(entry: QueueEntry | Mapping[str, Any]) -> str | None:
    if isinstance(entry, QueueEntry):
        return normalize_id(entry.loan_officer_id)
    return normalize_id(entry.get("loan_officer_id"))


def _is_active(entry: QueueEntry | Mapping[str, Any]) -> bool:
    if isinstance(entry, QueueEntry):
        return entry.is_active
    return entry.get("is_active") is not False


def select_officer(
    queue: Iterable[QueueEntry | Mapping[str, Any]],
    workload: Mapping[str, int],
) -> str | None:
    """Pick the least-loaded officer, breaking ties by queue position.

    Entries are (stably) ordered by ``queue_position``; explicitly inactive
    entries are skipped. Returns None for an empty queue.
    """
    selected: str | None = None
    min_workload: float = float("inf")

    for entry in sorted(queue, key=_position):
        officer_id = _officer_id(entry)
        if officer_id is None or not _is_active(entry):
            continue
        officer_workload = workload.get(officer_id, 0)
        if officer_workload < min_workload:
            min_workload = officer_workload
            selected = officer_id

    return selected


async def _load_workload_inputs(store: RecordStore) -> tuple[list, list, list]:
    return await asyncio.gather(
        store.list(RecordType.LOAN_OFFICER_QUEUE, "queue_position"),
        store.list(RecordType.LOAN_APPLICATION),
        store.list(RecordType.LOAN),
    )


async def pick_loan_officer(store: RecordStore) -> tuple[str | None, int | None]:
    """Choose the officer for a new application from live records.

    Returns ``(officer_id, current_workload)``, or ``(None, None)`` when the
    queue is empty.
    """
    queue, applications, loans = await _load_workload_inputs(store)
    if not queue:
        logger.warning("Loan officer queue is empty; application left unassigned")
        return None, None

    workload = compute_workload(applications, loans)
    officer_id = select_officer(queue, workload)
    if officer_id is None:
        return None, None
    current = workload.get(officer_id, 0)
    logger.info("Selected loan officer %s (workload=%d)", officer_id, current)
    return officer_id, current


async def queue_workload(store: RecordStore) -> tuple[list[QueueWorkloadItem], str | None]:
    """Queue entries annotated with their live workload, plus the next pick."""
    queue, applications, loans = await _load_workload_inputs(store)
    workload = compute_workload(applications, loans)
    items = []
    for raw in sorted(queue, key=_position):
        officer_id = _officer_id(raw)
        if officer_id is None:
            continue
        items.append(
            QueueWorkloadItem(
                loan_officer_id=officer_id,
                queue_position=_position(raw),
                is_active=_is_active(raw),
                workload=workload.get(officer_id, 0),
            )
        )
    return items, select_officer(queue, workload)


def _display_name(user: Mapping[str, Any]) -> str:
    if user.get("first_name") and user.get("last_name"):
        return f"{user['first_name']} {user['last_name']}"
    return user.get("full_name") or user.get("email") or str(user.get("id"))


async def sync_queue_with_officers(store: RecordStore) -> QueueSyncResponse:
    """Append every Loan Officer account missing from the queue.

    New entries go after the current maximum position, in account order.
    """
    users, existing = await asyncio.gather(
        store.list(RecordType.USER),
        store.list(RecordType.LOAN_OFFICER_QUEUE),
    )
    queued_ids = {_officer_id(entry) for entry in existing}
    missing = [
        user
        for user in users
        if is_loan_officer(user.get("app_role")) and normalize_id(user.get("id")) not in queued_ids
    ]
    if not missing:
        return QueueSyncResponse(message="All loan officers are already in the queue", added=0)

    max_position = max((_position(entry) for entry in existing), default=0)
    added: list[QueuedOfficer] = []
    for offset, officer in enumerate(missing, start=1):
        position = max_position + offset
        await store.create(
            RecordType.LOAN_OFFICER_QUEUE,
            {
                "loan_officer_id": officer["id"],
                "queue_position": position,
                "active_loan_count": 0,
                "is_active": True,
            },
        )
        added.append(
            QueuedOfficer(id=str(officer["id"]), name=_display_name(officer), position=position)
        )

    logger.info("Added %d loan officers to the queue", len(added))
    return QueueSyncResponse(
        message=f"Added {len(added)} loan officers to queue",
        added=len(added),
        officers=added,
    )
