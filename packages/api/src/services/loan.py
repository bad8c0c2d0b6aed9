# This project was developed with assistance from AI tools.
"""Loan listing and loan-team management."""

import asyncio
import logging
from datetime import UTC, datetime
from typing import Any

from records import RecordNotFoundError, RecordStore, RecordType, TeamRole

from ..core.errors import Forbidden, NotFound, VerificationFailed
from ..schemas.auth import Principal
from ..schemas.loan import LoanTeam, LoanTeamUpdate
from .ids import effective_ids, normalize_id_array, same_id_set

logger = logging.getLogger(__name__)

_TEAM_ARRAY_FIELDS = tuple(LoanTeam.model_fields)

# Every field a team update writes, recorded in history and overridden_fields.
_TEAM_FIELDS_CHANGED = [
    *_TEAM_ARRAY_FIELDS,
    *(role.singular_field for role in TeamRole),
]


async def get_loan_record(store: RecordStore, loan_id: str) -> dict[str, Any]:
    try:
        return await store.get(RecordType.LOAN, loan_id)
    except RecordNotFoundError as exc:
        raise NotFound("Loan not found") from exc


async def list_loans(store: RecordStore) -> list[dict[str, Any]]:
    return await store.list(RecordType.LOAN)


def can_view_loan_officers(loan: dict[str, Any], principal: Principal) -> bool:
    """Staff, or anyone listed on the loan as officer, borrower, guarantor or referrer."""
    if principal.is_admin or principal.is_loan_officer:
        return True
    listed = {
        *normalize_id_array(loan.get("loan_officer_ids")),
        *normalize_id_array(loan.get("borrower_ids")),
        *normalize_id_array(loan.get("guarantor_ids")),
        *effective_ids(loan, TeamRole.REFERRER),
    }
    return principal.id in listed


async def _get_user_or_none(store: RecordStore, user_id: str) -> dict[str, Any] | None:
    try:
        return await store.get(RecordType.USER, user_id)
    except Exception:
        logger.warning("Could not load loan officer %s", user_id, exc_info=True)
        return None


async def get_loan_officer_team(
    store: RecordStore, principal: Principal, loan_id: str
) -> tuple[list[str], list[dict[str, Any]]]:
    """Return the loan's officer ids and the officer accounts that could be loaded."""
    loan = await get_loan_record(store, loan_id)
    if not can_view_loan_officers(loan, principal):
        logger.warning("Access denied: user=%s loan=%s", principal.id, loan_id)
        raise Forbidden("Forbidden")

    officer_ids = normalize_id_array(loan.get("loan_officer_ids"))
    officers = await asyncio.gather(*(_get_user_or_none(store, oid) for oid in officer_ids))
    return officer_ids, [officer for officer in officers if officer]


def _display_name(principal: Principal) -> str:
    return principal.name or principal.email or "Unknown User"


def _read_team(loan: dict[str, Any]) -> LoanTeam:
    return LoanTeam(**{field: normalize_id_array(loan.get(field)) for field in _TEAM_ARRAY_FIELDS})


async def update_loan_team(
    store: RecordStore,
    principal: Principal,
    loan_id: str,
    update: LoanTeamUpdate,
) -> LoanTeam:
    """Replace a loan's team and confirm the store actually kept it.

    Array fields are written as given (normalized) and each singular role
    field is set to the first id of its array. After writing, the loan is
    re-read and compared field by field as sets.

    Raises:
        NotFound: no such loan.
        VerificationFailed: the re-read team differs from what was written.
    """
    loan = await get_loan_record(store, loan_id)
    requested = LoanTeam(
        **{field: normalize_id_array(getattr(update, field)) for field in _TEAM_ARRAY_FIELDS}
    )

    history = list(loan.get("modification_history") or [])
    history.append(
        {
            "timestamp": datetime.now(UTC).isoformat(),
            "modified_by": principal.id,
            "modified_by_name": _display_name(principal),
            "description": "Loan team updated",
            "fields_changed": list(_TEAM_FIELDS_CHANGED),
        }
    )
    overridden = list(
        dict.fromkeys([*(loan.get("overridden_fields") or []), *_TEAM_FIELDS_CHANGED])
    )

    patch: dict[str, Any] = requested.model_dump()
    for role in TeamRole:
        ids = getattr(requested, role.array_field)
        patch[role.singular_field] = ids[0] if ids else None
    patch["overridden_fields"] = overridden
    patch["modification_history"] = history

    await store.update(RecordType.LOAN, loan_id, patch)

    saved = _read_team(await store.get(RecordType.LOAN, loan_id))
    verified = all(
        same_id_set(getattr(saved, field), getattr(requested, field))
        for field in _TEAM_ARRAY_FIELDS
    )
    if not verified:
        logger.error("Loan %s team update did not persist as written", loan_id)
        raise VerificationFailed(
            "Team update verification failed",
            requested=requested.model_dump(),
            saved=saved.model_dump(),
        )

    logger.info("Loan %s team updated by user %s", loan_id, principal.id)
    return saved
