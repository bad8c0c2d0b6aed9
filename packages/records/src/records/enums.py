# This project was developed with assistance from AI tools.
"""
Domain enums for the loan origination record store.

Shared domain types used by both the record store clients (records package)
and the Pydantic schemas / services (api package).
"""

import enum


class RecordType(str, enum.Enum):
    """Record collections exposed by the managed backend platform."""

    USER = "User"
    BORROWER = "Borrower"
    LOAN_PARTNER = "LoanPartner"
    LOAN_APPLICATION = "LoanApplication"
    LOAN = "Loan"
    LOAN_OFFICER_QUEUE = "LoanOfficerQueue"
    BORROWER_INVITE_REQUEST = "BorrowerInviteRequest"
    NOTIFICATION = "Notification"


class AppRole(str, enum.Enum):
    ADMINISTRATOR = "Administrator"
    LOAN_OFFICER = "Loan Officer"
    BORROWER = "Borrower"
    LIAISON = "Liaison"
    BROKER = "Broker"
    REFERRAL_PARTNER = "Referral Partner"
    TITLE_COMPANY = "Title Company"
    INSURANCE_COMPANY = "Insurance Company"
    SERVICER = "Servicer"

    @classmethod
    def loan_partner_roles(cls) -> frozenset["AppRole"]:
        """External, non-borrower parties that are tracked as LoanPartner records."""
        return frozenset(
            {
                cls.BROKER,
                cls.LIAISON,
                cls.REFERRAL_PARTNER,
                cls.TITLE_COMPANY,
                cls.INSURANCE_COMPANY,
                cls.SERVICER,
            }
        )


# Coarse platform role carried on the account; only the admin sentinel matters.
PLATFORM_ADMIN_ROLE = "admin"


class ApplicationStatus(str, enum.Enum):
    DRAFT = "draft"
    SUBMITTED = "submitted"
    UNDER_REVIEW = "under_review"
    REVIEW_COMPLETED = "review_completed"
    APPROVED = "approved"
    REJECTED = "rejected"

    @classmethod
    def terminal_statuses(cls) -> frozenset["ApplicationStatus"]:
        """Statuses where an application no longer counts toward officer workload."""
        return frozenset({cls.APPROVED, cls.REJECTED})


class LoanStatus(str, enum.Enum):
    APPLICATION_SUBMITTED = "application_submitted"
    PROCESSING = "processing"
    UNDERWRITING = "underwriting"
    ON_HOLD = "on_hold"
    PRECLOSED_REVIEW = "preclosed_review"
    CLEAR_TO_CLOSE = "clear_to_close"
    CLOSING_SCHEDULED = "closing_scheduled"
    LOAN_FUNDED = "loan_funded"
    LOAN_SOLD = "loan_sold"
    ARCHIVED = "archived"
    DEAD = "dead"

    @classmethod
    def terminal_statuses(cls) -> frozenset["LoanStatus"]:
        """Statuses where a loan no longer counts toward officer workload."""
        return frozenset({cls.ARCHIVED, cls.DEAD})


class InviteStatus(str, enum.Enum):
    PENDING = "pending"
    INVITED = "invited"
    SENT = "sent"
    ACTIVATED = "activated"


class TeamRole(str, enum.Enum):
    """Loan-team roles stored in both singular and array form on records."""

    REFERRER = "referrer"
    LIAISON = "liaison"
    BROKER = "broker"

    @property
    def singular_field(self) -> str:
        return f"{self.value}_id"

    @property
    def array_field(self) -> str:
        return f"{self.value}_ids"
