# This project was developed with assistance from AI tools.
"""Unit tests for the application service."""

from unittest.mock import AsyncMock, patch

import pytest
from records import RecordStoreError, RecordType

from src.core.errors import Forbidden, InvalidInput, NotFound
from src.services import application as app_service
from src.services.team import is_team_member

from .factories import (
    BORROWER_CONTACT_ID,
    BORROWER_ID,
    BROKER_ID,
    LO_ID,
    access_ids,
    admin,
    borrower,
    broker,
    loan_officer,
    make_application,
    make_principal,
    outsider,
)

# ---------------------------------------------------------------------------
# create_application
# ---------------------------------------------------------------------------


class TestCreateApplication:
    @pytest.mark.asyncio
    async def test_loan_officer_assigns_themself(self, store):
        """An LO creating an application takes it without consulting the queue."""
        with patch(
            "src.services.application.pick_loan_officer", new_callable=AsyncMock
        ) as pick:
            created = await app_service.create_application(
                store, loan_officer(), {"loan_type": "dscr"}
            )

        assert created["assigned_loan_officer_id"] == LO_ID
        pick.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_borrower_gets_queue_pick(self, store):
        await store.create(
            RecordType.LOAN_OFFICER_QUEUE, {"loan_officer_id": "lo-a", "queue_position": 1}
        )
        await store.create(
            RecordType.LOAN_OFFICER_QUEUE, {"loan_officer_id": "lo-b", "queue_position": 2}
        )
        await store.create(
            RecordType.LOAN_APPLICATION,
            {"assigned_loan_officer_id": "lo-a", "status": "submitted"},
        )

        created = await app_service.create_application(store, borrower(), {})

        assert created["assigned_loan_officer_id"] == "lo-b"
        assert created["id"]

    @pytest.mark.asyncio
    async def test_explicit_assignment_is_kept(self, store):
        created = await app_service.create_application(
            store, borrower(), {"assigned_loan_officer_id": "lo-z"}
        )
        assert created["assigned_loan_officer_id"] == "lo-z"

    @pytest.mark.asyncio
    async def test_empty_queue_leaves_unassigned(self, store):
        created = await app_service.create_application(store, borrower(), {"x": 1})
        assert created["assigned_loan_officer_id"] is None

    @pytest.mark.asyncio
    async def test_broker_recorded_as_broker_of_record(self, store):
        created = await app_service.create_application(store, broker(), {})
        assert created["broker_user_id"] == BROKER_ID

    @pytest.mark.asyncio
    async def test_missing_data_rejected(self, store):
        with pytest.raises(InvalidInput):
            await app_service.create_application(store, borrower(), None)


# ---------------------------------------------------------------------------
# get_application_with_access
# ---------------------------------------------------------------------------


class TestGetApplicationWithAccess:
    @pytest.mark.asyncio
    async def test_missing_application_is_not_found(self, store):
        with pytest.raises(NotFound):
            await app_service.get_application_with_access(store, admin(), "nope")

    @pytest.mark.asyncio
    async def test_admin_can_manage(self, store):
        await store.create(RecordType.LOAN_APPLICATION, make_application())

        app, can_manage = await app_service.get_application_with_access(
            store, admin(), "app-1"
        )

        assert app["id"] == "app-1"
        assert can_manage is True

    @pytest.mark.asyncio
    async def test_assigned_officer_allowed(self, store):
        await store.create(
            RecordType.LOAN_APPLICATION, make_application(assigned_loan_officer_id=LO_ID)
        )

        _, can_manage = await app_service.get_application_with_access(
            store, loan_officer(), "app-1"
        )

        assert can_manage is True

    @pytest.mark.asyncio
    async def test_borrower_via_contact_id(self, store):
        await store.create(RecordType.BORROWER, {"id": BORROWER_CONTACT_ID, "user_id": BORROWER_ID})
        await store.create(
            RecordType.LOAN_APPLICATION,
            make_application(primary_borrower_id=BORROWER_CONTACT_ID),
        )

        _, can_manage = await app_service.get_application_with_access(
            store, borrower(), "app-1"
        )

        assert can_manage is False

    @pytest.mark.asyncio
    async def test_unassigned_officer_forbidden(self, store):
        await store.create(
            RecordType.LOAN_APPLICATION, make_application(assigned_loan_officer_id="lo-other")
        )

        with pytest.raises(Forbidden):
            await app_service.get_application_with_access(store, loan_officer(), "app-1")

    @pytest.mark.asyncio
    async def test_outsider_forbidden(self, store):
        await store.create(RecordType.LOAN_APPLICATION, make_application())

        with pytest.raises(Forbidden):
            await app_service.get_application_with_access(store, outsider(), "app-1")


# ---------------------------------------------------------------------------
# list_my_applications
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_list_my_applications_filters_to_team(store):
    await store.create(
        RecordType.LOAN_APPLICATION,
        make_application(id="mine-old", created_by=BORROWER_ID, created_date="2026-01-01"),
    )
    await store.create(
        RecordType.LOAN_APPLICATION,
        make_application(
            id="mine-new",
            co_borrowers=[{"user_id": BORROWER_ID}],
            created_date="2026-03-01",
        ),
    )
    await store.create(
        RecordType.LOAN_APPLICATION, make_application(id="theirs", created_date="2026-02-01")
    )

    apps = await app_service.list_my_applications(store, borrower())

    assert [a["id"] for a in apps] == ["mine-new", "mine-old"]


# ---------------------------------------------------------------------------
# save_application_progress
# ---------------------------------------------------------------------------


class TestSaveProgress:
    @pytest.mark.asyncio
    async def test_team_fields_preserved(self, store):
        await store.create(
            RecordType.LOAN_APPLICATION,
            make_application(
                created_by=BORROWER_ID,
                broker_user_id=BROKER_ID,
                referrer_ids=["r-1"],
                liaison_ids=[],
                loan_contacts={"broker": {"email": "b@x"}},
            ),
        )

        await app_service.save_application_progress(
            store,
            borrower(),
            "app-1",
            {
                "loan_amount": 500000,
                "broker_user_id": None,
                "referrer_ids": [],
                "liaison_ids": ["sneaky"],
                "loan_contacts": {},
            },
        )

        saved = await store.get(RecordType.LOAN_APPLICATION, "app-1")
        assert saved["loan_amount"] == 500000
        assert saved["broker_user_id"] == BROKER_ID
        assert saved["referrer_ids"] == ["r-1"]
        assert saved["liaison_ids"] == ["sneaky"]
        assert saved["loan_contacts"] == {"broker": {"email": "b@x"}}

    @pytest.mark.asyncio
    async def test_singular_role_ids_cannot_be_set(self, store):
        """A form save cannot claim a role the membership check would trust first."""
        await store.create(
            RecordType.LOAN_APPLICATION,
            make_application(created_by=BORROWER_ID, referrer_ids=["r-1"], broker_id="b-1"),
        )

        await app_service.save_application_progress(
            store,
            borrower(),
            "app-1",
            {"referrer_id": "intruder", "liaison_id": "intruder", "broker_id": None},
        )

        saved = await store.get(RecordType.LOAN_APPLICATION, "app-1")
        assert "referrer_id" not in saved
        assert "liaison_id" not in saved
        assert saved["broker_id"] == "b-1"
        referrer = make_principal(id="r-1", app_role="Referral Partner")
        assert is_team_member(saved, referrer, access_ids(referrer))
        intruder = make_principal(id="intruder", app_role="Referral Partner")
        assert not is_team_member(saved, intruder, access_ids(intruder))

    @pytest.mark.asyncio
    async def test_any_loan_officer_may_save(self, store):
        await store.create(RecordType.LOAN_APPLICATION, make_application())
        await app_service.save_application_progress(
            store, loan_officer("lo-unassigned"), "app-1", {"step": 2}
        )
        assert (await store.get(RecordType.LOAN_APPLICATION, "app-1"))["step"] == 2

    @pytest.mark.asyncio
    async def test_invited_borrower_by_email(self, store):
        await store.create(
            RecordType.LOAN_APPLICATION, make_application(borrower_email="SARAH@example.com")
        )
        await app_service.save_application_progress(store, borrower(), "app-1", {"step": 3})
        assert (await store.get(RecordType.LOAN_APPLICATION, "app-1"))["step"] == 3

    @pytest.mark.asyncio
    async def test_outsider_forbidden(self, store):
        await store.create(RecordType.LOAN_APPLICATION, make_application())
        with pytest.raises(Forbidden):
            await app_service.save_application_progress(store, outsider(), "app-1", {})


# ---------------------------------------------------------------------------
# update_application_status
# ---------------------------------------------------------------------------


class TestUpdateApplicationStatus:
    @pytest.mark.asyncio
    async def test_status_change_notifies_borrowers(self, store):
        await store.create(
            RecordType.LOAN_APPLICATION,
            make_application(
                status="under_review",
                primary_borrower_id=BORROWER_ID,
                co_borrowers=[{"user_id": "co-1"}, {"user_id": BORROWER_ID}, {"email": "x@y"}],
            ),
        )

        updated = await app_service.update_application_status(
            store, "app-1", {"status": "rejected"}
        )

        assert updated["status"] == "rejected"
        notifications = await store.list(RecordType.NOTIFICATION)
        assert sorted(n["user_id"] for n in notifications) == ["co-1", BORROWER_ID]
        assert {n["priority"] for n in notifications} == {"high"}
        assert all(n["read"] is False for n in notifications)
        assert all("A-1001" in n["message"] for n in notifications)

    @pytest.mark.asyncio
    async def test_unchanged_status_sends_nothing(self, store):
        await store.create(
            RecordType.LOAN_APPLICATION,
            make_application(status="submitted", primary_borrower_id=BORROWER_ID),
        )

        await app_service.update_application_status(
            store, "app-1", {"status": "submitted", "notes": "x"}
        )

        assert await store.list(RecordType.NOTIFICATION) == []

    @pytest.mark.asyncio
    async def test_notification_failure_keeps_update(self, store):
        await store.create(
            RecordType.LOAN_APPLICATION, make_application(primary_borrower_id=BORROWER_ID)
        )

        with patch.object(store, "create", side_effect=RecordStoreError("notify down")):
            updated = await app_service.update_application_status(
                store, "app-1", {"status": "approved"}
            )

        assert updated["status"] == "approved"
        assert (await store.get(RecordType.LOAN_APPLICATION, "app-1"))["status"] == "approved"

    @pytest.mark.asyncio
    async def test_empty_updates_rejected(self, store):
        with pytest.raises(InvalidInput):
            await app_service.update_application_status(store, "app-1", {})
