# This project was developed with assistance from AI tools.
"""Identity resolution: which records is a principal also known by?

A principal's account id is only one of its identities. The same person can
be the ``Borrower`` contact an application was created against, or one or
more ``LoanPartner`` records a loan team references. Both kinds of contact
link to the account by ``user_id`` and, for contacts created before the
person signed up, only by ``email``.
"""

import asyncio
import logging

from records import Record, RecordStore, RecordType

from ..schemas.auth import Principal
from ..schemas.identity import AccessIdSet
from .ids import dedupe_ids

logger = logging.getLogger(__name__)


async def find_linked_records(
    store: RecordStore, record_type: RecordType, principal: Principal
) -> list[Record]:
    """Contacts linked to the principal: by ``user_id``, else by exact ``email``.

    The email lookup only runs when the ``user_id`` lookup finds nothing.
    Store failures propagate.
    """
    if principal.id:
        by_user_id = await store.filter(record_type, {"user_id": principal.id})
        if by_user_id:
            return by_user_id
    if principal.email:
        return await store.filter(record_type, {"email": principal.email})
    return []


def _prefer_invite_temp(records: list[Record]) -> Record | None:
    current = [r for r in records if not r.get("superseded_by")] or records
    for record in current:
        if record.get("is_invite_temp") is True:
            return record
    return current[0] if current else None


async def find_borrower_contact(store: RecordStore, principal: Principal) -> Record | None:
    """Pick the single Borrower contact to activate for a principal.

    Within whichever lookup fires, a temporary invite record wins over the
    first match, and records already superseded by another contact are
    passed over. Store failures propagate.
    """
    records = await find_linked_records(store, RecordType.BORROWER, principal)
    return _prefer_invite_temp(records)


async def _resolve_contact_ids(
    store: RecordStore, record_type: RecordType, principal: Principal
) -> list[str]:
    try:
        records = await find_linked_records(store, record_type, principal)
    except Exception:
        logger.warning(
            "Could not resolve %s ids for user %s; continuing without them",
            record_type.value,
            principal.id,
            exc_info=True,
        )
        return []
    return dedupe_ids(record.get("id") for record in records)


async def resolve_borrower_ids(store: RecordStore, principal: Principal) -> list[str]:
    """All Borrower contact ids linked to the principal. Never raises."""
    return await _resolve_contact_ids(store, RecordType.BORROWER, principal)


async def resolve_partner_ids(store: RecordStore, principal: Principal) -> list[str]:
    """All LoanPartner contact ids linked to the principal. Never raises."""
    return await _resolve_contact_ids(store, RecordType.LOAN_PARTNER, principal)


async def resolve_access_ids(store: RecordStore, principal: Principal) -> AccessIdSet:
    """Build the principal's AccessIdSet.

    Best-effort: a failed lookup contributes no ids instead of failing the
    request. The two lookups are independent and run concurrently.
    """
    borrower_ids, partner_ids = await asyncio.gather(
        resolve_borrower_ids(store, principal),
        resolve_partner_ids(store, principal),
    )
    return AccessIdSet(
        account_id=principal.id,
        borrower_ids=borrower_ids,
        partner_ids=partner_ids,
    )
