# This project was developed with assistance from AI tools.
"""Shared test factory functions for principals and records.

Fixed ids make cross-test referencing readable: ``BORROWER_ID`` is always
the borrower's account, ``BORROWER_CONTACT_ID`` their ``Borrower`` record.
"""

from records import AppRole, InMemoryRecordStore, RecordType

from src.schemas.auth import Principal
from src.schemas.identity import AccessIdSet

ADMIN_ID = "admin-user"
LO_ID = "lo-james"
LO_BOB_ID = "lo-bob"
BORROWER_ID = "user-sarah"
BORROWER_CONTACT_ID = "borrower-sarah"
BROKER_ID = "user-bruce"
BROKER_PARTNER_ID = "partner-bruce"
OUTSIDER_ID = "user-mallory"


def make_principal(
    id: str = BORROWER_ID,
    email: str = "sarah@example.com",
    app_role: str = AppRole.BORROWER.value,
    role: str = "user",
    name: str = "",
) -> Principal:
    return Principal(id=id, email=email, role=role, app_role=app_role, name=name)


def admin() -> Principal:
    return make_principal(
        id=ADMIN_ID,
        email="admin@example.com",
        role="admin",
        app_role=AppRole.ADMINISTRATOR.value,
        name="Ada Admin",
    )


def loan_officer(id: str = LO_ID) -> Principal:
    return make_principal(
        id=id,
        email=f"{id}@lender.example.com",
        app_role=AppRole.LOAN_OFFICER.value,
        name="James Torres",
    )


def borrower() -> Principal:
    return make_principal()


def broker() -> Principal:
    return make_principal(
        id=BROKER_ID,
        email="bruce@brokerage.example.com",
        app_role=AppRole.BROKER.value,
        name="Bruce Broker",
    )


def outsider() -> Principal:
    return make_principal(
        id=OUTSIDER_ID,
        email="mallory@example.com",
        app_role=AppRole.BORROWER.value,
    )


def access_ids(
    principal: Principal,
    borrower_ids: list[str] | None = None,
    partner_ids: list[str] | None = None,
) -> AccessIdSet:
    return AccessIdSet(
        account_id=principal.id,
        borrower_ids=borrower_ids or [],
        partner_ids=partner_ids or [],
    )


def make_application(**fields) -> dict:
    """A minimal application record; override any field by keyword."""
    record = {
        "id": "app-1",
        "status": "submitted",
        "application_number": "A-1001",
        "created_by": "someone-else",
    }
    record.update(fields)
    return record


def make_loan(**fields) -> dict:
    record = {"id": "loan-1", "status": "processing", "loan_officer_ids": []}
    record.update(fields)
    return record


class RecordingStore(InMemoryRecordStore):
    """In-memory store that remembers every write, for idempotency checks."""

    def __init__(self, seed=None):
        super().__init__(seed)
        self.writes: list[tuple[str, str, str | None]] = []

    async def create(self, record_type, data):
        record = await super().create(record_type, data)
        self.writes.append(("create", RecordType(record_type).value, record["id"]))
        return record

    async def update(self, record_type, record_id, patch):
        self.writes.append(("update", RecordType(record_type).value, record_id))
        return await super().update(record_type, record_id, patch)
