# This project was developed with assistance from AI tools.
"""Pure role utility functions with no FastAPI or HTTP dependencies.

Role strings arrive from account records inconsistently capitalised, spaced
and occasionally in retired vocabulary (``brokerage``, ``referrer``...).
Everything that compares roles goes through ``normalize_app_role`` first.
"""

from records.enums import PLATFORM_ADMIN_ROLE, AppRole

_LEGACY_ROLE_MAP: dict[str, str] = {
    "admin": AppRole.ADMINISTRATOR.value,
    "platform admin": AppRole.ADMINISTRATOR.value,
    "administrator": AppRole.ADMINISTRATOR.value,
    "loan officer": AppRole.LOAN_OFFICER.value,
    "borrower": AppRole.BORROWER.value,
    "liaison": AppRole.LIAISON.value,
    "broker": AppRole.BROKER.value,
    "brokerage": AppRole.BROKER.value,
    "referrer": AppRole.REFERRAL_PARTNER.value,
    "referral partner": AppRole.REFERRAL_PARTNER.value,
    "title company": AppRole.TITLE_COMPANY.value,
    "insurance provider": AppRole.INSURANCE_COMPANY.value,
    "insurance company": AppRole.INSURANCE_COMPANY.value,
    "servicer": AppRole.SERVICER.value,
    "auditor": AppRole.REFERRAL_PARTNER.value,
    "appraisal firm": AppRole.REFERRAL_PARTNER.value,
    "legal counsel": AppRole.REFERRAL_PARTNER.value,
    "other": AppRole.REFERRAL_PARTNER.value,
}


def normalize_app_role(value: object) -> str:
    """Map a raw role string to its canonical form.

    Matching is case-insensitive and treats ``_`` / runs of whitespace as a
    single space. Unknown roles are returned trimmed but otherwise untouched;
    empty input yields ``""``.
    """
    if value is None:
        return ""
    raw = str(value).strip()
    if not raw:
        return ""
    key = " ".join(raw.replace("_", " ").split()).lower()
    return _LEGACY_ROLE_MAP.get(key, raw)


def as_app_role(value: object) -> AppRole | None:
    """Return the ``AppRole`` for a raw role string, or None if unrecognised."""
    normalized = normalize_app_role(value)
    try:
        return AppRole(normalized)
    except ValueError:
        return None


def is_platform_admin(role: object) -> bool:
    """True for the coarse platform admin sentinel."""
    return str(role or "").strip().lower() == PLATFORM_ADMIN_ROLE


def is_admin(role: object, app_role: object) -> bool:
    return is_platform_admin(role) or as_app_role(app_role) == AppRole.ADMINISTRATOR


def is_loan_officer(app_role: object) -> bool:
    return as_app_role(app_role) == AppRole.LOAN_OFFICER


def is_loan_partner_role(app_role: object) -> bool:
    return as_app_role(app_role) in AppRole.loan_partner_roles()
