# This project was developed with assistance from AI tools.
"""Team membership evaluation for loan and application records.

Pure functions only: every id the decision needs is precomputed into an
``AccessIdSet`` by ``services.identity``, so these rules are testable
without a store.

Records have accumulated several ways of naming the same relationship over
their schema history (singular vs. array role fields, nested contact objects
for parties without an account, ``created_by`` as an id or an object).
``is_team_member`` checks all of them in a fixed order.
"""

from typing import Any

from records.enums import TeamRole

from ..schemas.auth import Principal
from ..schemas.identity import AccessIdSet
from .ids import effective_ids, emails_match, normalize_id, normalize_id_array, owner_id

# Nested contact objects for parties that may never have had an account.
_LEGACY_CONTACT_PATHS: tuple[tuple[str, ...], ...] = (
    ("loan_contacts", "broker"),
    ("referral_broker",),
)


def _dig(record: dict[str, Any], path: tuple[str, ...]) -> Any:
    value: Any = record
    for key in path:
        if not isinstance(value, dict):
            return None
        value = value.get(key)
    return value


def is_owner(record: dict[str, Any], principal: Principal, access_ids: AccessIdSet) -> bool:
    """Creator, primary borrower, broker-of-record, or (loans) listed borrower."""
    borrower_identities = {principal.id, *access_ids.borrower_ids}

    if owner_id(record) == principal.id:
        return True
    created_by = record.get("created_by")
    if isinstance(created_by, str) and emails_match(created_by, principal.email):
        return True
    if normalize_id(record.get("primary_borrower_id")) in borrower_identities:
        return True
    if normalize_id(record.get("broker_user_id")) == principal.id:
        return True
    return any(
        borrower_id in borrower_identities
        for borrower_id in normalize_id_array(record.get("borrower_ids"))
    )


def is_co_borrower(
    record: dict[str, Any], principal: Principal, access_ids: AccessIdSet
) -> bool:
    """Match a co-borrower entry by account id or by linked Borrower contact id."""
    co_borrowers = record.get("co_borrowers")
    if not isinstance(co_borrowers, list):
        return False
    borrower_identities = {principal.id, *access_ids.borrower_ids}
    for entry in co_borrowers:
        if not isinstance(entry, dict):
            continue
        if normalize_id(entry.get("user_id")) == principal.id:
            return True
        if normalize_id(entry.get("borrower_id")) in borrower_identities:
            return True
    return False


def has_team_role(
    record: dict[str, Any], principal: Principal, access_ids: AccessIdSet
) -> bool:
    """Referrer / liaison / broker membership via the role id fields."""
    identities = {principal.id, *access_ids.partner_ids}
    return any(
        team_id in identities for role in TeamRole for team_id in effective_ids(record, role)
    )


def matches_contact(contact: Any, principal: Principal, access_ids: AccessIdSet) -> bool:
    """Match a free-form ``{user_id, id, email}`` contact object.

    Email is only consulted when neither id matched.
    """
    if not isinstance(contact, dict):
        return False
    if normalize_id(contact.get("user_id")) == principal.id:
        return True
    contact_id = normalize_id(contact.get("id"))
    if contact_id is not None and (
        contact_id == principal.id or contact_id in access_ids.partner_ids
    ):
        return True
    return emails_match(contact.get("email"), principal.email)


def has_legacy_contact(
    record: dict[str, Any], principal: Principal, access_ids: AccessIdSet
) -> bool:
    return any(
        matches_contact(_dig(record, path), principal, access_ids)
        for path in _LEGACY_CONTACT_PATHS
    )


def is_team_member(
    record: dict[str, Any] | None,
    principal: Principal | None,
    access_ids: AccessIdSet,
) -> bool:
    """Decide whether the principal participates in a loan or application.

    Rules are evaluated in order and the first match wins: direct ownership,
    co-borrower entries, role id fields, then legacy contact objects.
    """
    if not record or principal is None or not principal.id:
        return False
    return (
        is_owner(record, principal, access_ids)
        or is_co_borrower(record, principal, access_ids)
        or has_team_role(record, principal, access_ids)
        or has_legacy_contact(record, principal, access_ids)
    )
