# This project was developed with assistance from AI tools.
"""Loan application service.

Application records are shared by the borrower side of the portal (primary
and co-borrowers), the loan team (referrers, liaisons, brokers) and staff.
Visibility for non-staff callers is decided by ``services.team`` against
the caller's resolved ``AccessIdSet``.
"""

import logging
from typing import Any

from records import AppRole, RecordNotFoundError, RecordStore, RecordType, TeamRole

from ..core.errors import Forbidden, InvalidInput, NotFound
from ..schemas.auth import Principal
from ..schemas.identity import AccessIdSet
from .identity import resolve_access_ids
from .ids import emails_match, normalize_id
from .notification import notify_status_change
from .team import is_team_member
from .workload import pick_loan_officer

logger = logging.getLogger(__name__)

# Team identity fields a progress save must never overwrite. Values are
# carried over from the stored record whenever they are set there.
_PRESERVED_TEAM_FIELDS = (
    "broker_user_id",
    "broker_ids",
    "referrer_ids",
    "liaison_ids",
    "referral_broker",
    "loan_contacts",
)

# Singular role ids outrank the arrays in membership checks, so a progress
# save can never set them: the stored value (or its absence) always wins.
_LOCKED_ROLE_FIELDS = tuple(role.singular_field for role in TeamRole)


async def get_application_record(store: RecordStore, application_id: str) -> dict[str, Any]:
    """Fetch an application or raise NotFound."""
    try:
        return await store.get(RecordType.LOAN_APPLICATION, application_id)
    except RecordNotFoundError as exc:
        raise NotFound("Application not found") from exc


def is_assigned_officer(application: dict[str, Any], principal: Principal) -> bool:
    return normalize_id(application.get("assigned_loan_officer_id")) == principal.id


async def create_application(
    store: RecordStore,
    principal: Principal,
    application_data: dict[str, Any] | None,
) -> dict[str, Any]:
    """Create an application, assigning a loan officer when none is given.

    A Loan Officer creating an application takes it themself; anyone else
    gets the least-loaded officer from the queue (or no officer when the
    queue is empty). Brokers are recorded as broker-of-record so the
    application shows up in their own list.
    """
    if application_data is None:
        raise InvalidInput("Application data is required")

    assigned_officer_id = normalize_id(application_data.get("assigned_loan_officer_id"))
    if assigned_officer_id is None:
        if principal.is_loan_officer:
            assigned_officer_id = principal.id
        else:
            assigned_officer_id, _ = await pick_loan_officer(store)

    data = {**application_data, "assigned_loan_officer_id": assigned_officer_id}
    if principal.app_role == AppRole.BROKER.value and not data.get("broker_user_id"):
        data["broker_user_id"] = principal.id

    application = await store.create(RecordType.LOAN_APPLICATION, data)
    logger.info(
        "Application %s created by user %s (assigned_loan_officer_id=%s)",
        application.get("id"),
        principal.id,
        assigned_officer_id,
    )
    return application


async def get_application_with_access(
    store: RecordStore,
    principal: Principal,
    application_id: str,
) -> tuple[dict[str, Any], bool]:
    """Return ``(application, can_manage)`` if the caller may view it.

    Raises:
        NotFound: no such application.
        Forbidden: caller is neither staff on it nor a team member.
    """
    application = await get_application_record(store, application_id)

    if not (principal.is_admin or is_assigned_officer(application, principal)):
        access_ids = await resolve_access_ids(store, principal)
        if not is_team_member(application, principal, access_ids):
            logger.warning(
                "Access denied: user=%s application=%s", principal.id, application_id
            )
            raise Forbidden("You do not have permission to access this application")

    can_manage = principal.is_admin or principal.is_loan_officer
    return application, can_manage


async def list_my_applications(
    store: RecordStore, principal: Principal
) -> list[dict[str, Any]]:
    """Every application the caller is on the team of, newest first."""
    access_ids = await resolve_access_ids(store, principal)
    applications = await store.list(RecordType.LOAN_APPLICATION, "-created_date")
    return [app for app in applications if is_team_member(app, principal, access_ids)]


async def list_all_applications(store: RecordStore) -> list[dict[str, Any]]:
    return await store.list(RecordType.LOAN_APPLICATION, "-created_date")


def _matches_borrower_email(application: dict[str, Any], principal: Principal) -> bool:
    if emails_match(application.get("borrower_email"), principal.email):
        return True
    co_borrowers = application.get("co_borrowers")
    if not isinstance(co_borrowers, list):
        return False
    return any(
        isinstance(entry, dict) and emails_match(entry.get("email"), principal.email)
        for entry in co_borrowers
    )


def can_edit_application(
    application: dict[str, Any], principal: Principal, access_ids: AccessIdSet
) -> bool:
    """Staff, the assigned officer, any team member, or a borrower invited by email."""
    return (
        principal.is_admin
        or principal.is_loan_officer
        or is_assigned_officer(application, principal)
        or _matches_borrower_email(application, principal)
        or is_team_member(application, principal, access_ids)
    )


def preserve_team_fields(stored: dict[str, Any], data: dict[str, Any]) -> dict[str, Any]:
    """Overlay the stored record's team identity fields onto incoming form data."""
    safe = dict(data)
    for field in _PRESERVED_TEAM_FIELDS:
        value = stored.get(field)
        if value:
            safe[field] = value
    for field in _LOCKED_ROLE_FIELDS:
        if field in stored:
            safe[field] = stored[field]
        else:
            safe.pop(field, None)
    return safe


async def save_application_progress(
    store: RecordStore,
    principal: Principal,
    application_id: str,
    data: dict[str, Any] | None,
) -> None:
    """Save partial form data without letting it rewrite the loan team."""
    if data is None:
        raise InvalidInput("application_id and data are required")

    application = await get_application_record(store, application_id)
    access_ids = await resolve_access_ids(store, principal)
    if not can_edit_application(application, principal, access_ids):
        logger.warning(
            "Progress save denied: user=%s application=%s", principal.id, application_id
        )
        raise Forbidden("Access denied")

    await store.update(
        RecordType.LOAN_APPLICATION,
        application_id,
        preserve_team_fields(application, data),
    )


async def update_application_status(
    store: RecordStore,
    application_id: str,
    updates: dict[str, Any] | None,
) -> dict[str, Any]:
    """Apply staff updates; notify the borrowers when the status changes.

    Notification failures are logged inside ``notify_status_change`` and
    never undo the update.
    """
    if not updates:
        raise InvalidInput("Application ID and updates are required")

    application = await get_application_record(store, application_id)
    old_status = application.get("status")
    new_status = updates.get("status")

    updated = await store.update(RecordType.LOAN_APPLICATION, application_id, updates)

    if new_status and new_status != old_status:
        logger.info(
            "Application %s status %s -> %s", application_id, old_status, new_status
        )
        await notify_status_change(store, {**application, **updated}, new_status)

    return updated
