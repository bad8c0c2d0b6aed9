# This project was developed with assistance from AI tools.
"""Borrower invite activation.

An invited borrower gets a temporary ``Borrower`` contact before they have
an account, and applications may be started against that contact's id. On
login we fold the contact into the account: link it, close out its invite
request, retire duplicate copies, and point applications at the account.

Every step is idempotent so the reconciler can run on every login; a second
run over already-reconciled records performs no writes.
"""

import asyncio
import logging
from datetime import UTC, datetime

from records import InviteStatus, Record, RecordStore, RecordStoreError, RecordType

from ..core.errors import InvalidInput
from ..schemas.auth import Principal
from ..schemas.invite import ActivationResult, ActivationStatus
from .identity import find_borrower_contact
from .ids import dedupe_ids, normalize_id

logger = logging.getLogger(__name__)


async def _activate_invite_request(
    store: RecordStore, contact: Record, principal: Principal
) -> None:
    """Mark the contact's invite request activated. Failures are logged, never raised."""
    request_id = normalize_id(contact.get("invite_request_id"))
    if request_id is None:
        return
    try:
        request = await store.get(RecordType.BORROWER_INVITE_REQUEST, request_id)
        if request.get("status") == InviteStatus.ACTIVATED.value:
            return
        await store.update(
            RecordType.BORROWER_INVITE_REQUEST,
            request_id,
            {
                "status": InviteStatus.ACTIVATED.value,
                "activated_by_user_id": principal.id,
                "activated_at": datetime.now(UTC).isoformat(),
            },
        )
    except RecordStoreError:
        logger.warning(
            "Could not mark invite request %s activated for borrower %s",
            request_id,
            contact.get("id"),
            exc_info=True,
        )


async def _link_contact(store: RecordStore, contact: Record, principal: Principal) -> None:
    """Turn a temporary or unlinked contact into the principal's borrower identity."""
    if contact.get("is_invite_temp") is not True and normalize_id(contact.get("user_id")):
        return
    await store.update(
        RecordType.BORROWER,
        contact["id"],
        {
            "is_invite_temp": False,
            "invite_request_status": InviteStatus.ACTIVATED.value,
            "user_id": normalize_id(contact.get("user_id")) or principal.id,
        },
    )
    logger.info("Activated borrower contact %s for user %s", contact["id"], principal.id)


async def _find_duplicates(store: RecordStore, principal: Principal, keep_id: str) -> list[Record]:
    """Other contacts that belong to the same person as ``keep_id``.

    Anything already linked to the account, plus temporary or unlinked
    copies carrying the account's email. Contacts linked to a different
    account are never touched.
    """
    lookups = []
    if principal.id:
        lookups.append(store.filter(RecordType.BORROWER, {"user_id": principal.id}))
    if principal.email:
        lookups.append(store.filter(RecordType.BORROWER, {"email": principal.email}))
    results = await asyncio.gather(*lookups)

    duplicates: dict[str, Record] = {}
    for record in (r for batch in results for r in batch):
        record_id = normalize_id(record.get("id"))
        if record_id is None or record_id == keep_id:
            continue
        linked_to = normalize_id(record.get("user_id"))
        if linked_to is not None and linked_to != principal.id:
            continue
        duplicates.setdefault(record_id, record)
    return list(duplicates.values())


async def _supersede_duplicates(
    store: RecordStore, contact: Record, principal: Principal
) -> list[str]:
    """Point every duplicate at the kept contact; return the duplicates' ids."""
    keep_id = contact["id"]
    try:
        duplicates = await _find_duplicates(store, principal, keep_id)
    except RecordStoreError:
        logger.warning(
            "Could not look up duplicate contacts for user %s", principal.id, exc_info=True
        )
        return []

    superseded = []
    for duplicate in duplicates:
        if normalize_id(duplicate.get("superseded_by")) != keep_id:
            try:
                await store.update(
                    RecordType.BORROWER, duplicate["id"], {"superseded_by": keep_id}
                )
            except RecordStoreError:
                logger.warning(
                    "Could not supersede borrower contact %s", duplicate["id"], exc_info=True
                )
                continue
            logger.info("Borrower contact %s superseded by %s", duplicate["id"], keep_id)
        await _activate_invite_request(store, duplicate, principal)
        superseded.append(duplicate["id"])
    return superseded


async def repair_forward_references(
    store: RecordStore, contact_id: str, principal: Principal
) -> list[str]:
    """Re-point applications created against a contact id to the account id.

    Best-effort: each application is updated on its own and a failure is
    logged and skipped. Returns the ids of applications that were changed.
    """
    repaired: list[str] = []

    try:
        as_primary = await store.filter(
            RecordType.LOAN_APPLICATION, {"primary_borrower_id": contact_id}
        )
    except RecordStoreError:
        logger.warning("Could not list applications for borrower %s", contact_id, exc_info=True)
        as_primary = []
    for application in as_primary:
        try:
            await store.update(
                RecordType.LOAN_APPLICATION,
                application["id"],
                {"primary_borrower_id": principal.id},
            )
            repaired.append(application["id"])
        except RecordStoreError:
            logger.warning(
                "Could not repair primary borrower on application %s",
                application.get("id"),
                exc_info=True,
            )

    try:
        applications = await store.list(RecordType.LOAN_APPLICATION)
    except RecordStoreError:
        logger.warning("Could not scan applications for co-borrower %s", contact_id, exc_info=True)
        return dedupe_ids(repaired)

    for application in applications:
        co_borrowers = application.get("co_borrowers")
        if not isinstance(co_borrowers, list):
            continue
        changed = False
        updated_entries = []
        for entry in co_borrowers:
            if (
                isinstance(entry, dict)
                and normalize_id(entry.get("borrower_id")) == contact_id
                and normalize_id(entry.get("user_id")) != principal.id
            ):
                entry = {**entry, "user_id": principal.id}
                changed = True
            updated_entries.append(entry)
        if not changed:
            continue
        try:
            await store.update(
                RecordType.LOAN_APPLICATION,
                application["id"],
                {"co_borrowers": updated_entries},
            )
            repaired.append(application["id"])
        except RecordStoreError:
            logger.warning(
                "Could not repair co-borrowers on application %s",
                application.get("id"),
                exc_info=True,
            )

    return dedupe_ids(repaired)


async def activate_invite(store: RecordStore, principal: Principal) -> ActivationResult:
    """Reconcile an invited borrower's contact records with their account.

    Raises:
        InvalidInput: the principal has neither an id nor an email.
        RecordStoreError: the initial contact lookup or the link update failed.
    """
    if not principal.id and not principal.email:
        raise InvalidInput("Missing user identifiers")

    contact = await find_borrower_contact(store, principal)
    if contact is None:
        return ActivationResult(status=ActivationStatus.NO_BORROWER)

    await _link_contact(store, contact, principal)
    await _activate_invite_request(store, contact, principal)
    superseded = await _supersede_duplicates(store, contact, principal)

    repaired: list[str] = []
    for contact_id in [contact["id"], *superseded]:
        repaired.extend(await repair_forward_references(store, contact_id, principal))

    return ActivationResult(
        status=ActivationStatus.ACTIVATED,
        borrower_id=contact["id"],
        superseded_ids=superseded,
        repaired_applications=dedupe_ids(repaired),
    )
