# This project was developed with assistance from AI tools.
"""In-app notifications for application status changes.

Notifications are plain ``Notification`` records; delivery (badge, inbox) is
the portal's concern. Creating them is best-effort and never fails the
operation that triggered them.
"""

import logging
from typing import Any

from records import ApplicationStatus, RecordStore, RecordStoreError, RecordType

from ..core.config import settings
from .ids import dedupe_ids

logger = logging.getLogger(__name__)

_STATUS_MESSAGES: dict[str, str] = {
    ApplicationStatus.UNDER_REVIEW.value: "Your loan application is now under review by our team.",
    ApplicationStatus.REVIEW_COMPLETED.value: "The review of your application has been completed.",
    ApplicationStatus.APPROVED.value: "Congratulations! Your loan application has been approved.",
    ApplicationStatus.REJECTED.value: "Your loan application status has been updated.",
}


def status_message(status: str) -> str:
    """Borrower-facing sentence for a new application status."""
    if status in _STATUS_MESSAGES:
        return _STATUS_MESSAGES[status]
    return f"Your loan application status has been updated to {status.replace('_', ' ')}"


def status_change_recipients(application: dict[str, Any]) -> list[str]:
    """Primary borrower plus every co-borrower with an account."""
    co_borrowers = application.get("co_borrowers")
    co_borrower_ids = [
        entry.get("user_id")
        for entry in (co_borrowers if isinstance(co_borrowers, list) else [])
        if isinstance(entry, dict)
    ]
    return dedupe_ids([application.get("primary_borrower_id"), *co_borrower_ids])


async def create_notifications(
    store: RecordStore,
    user_ids: list[str],
    *,
    message: str,
    type: str,
    entity_type: str | None = None,
    entity_id: str | None = None,
    link_url: str | None = None,
    priority: str = "normal",
) -> list[dict[str, Any]]:
    """Write one unread notification per recipient.

    A failed write is logged and skipped; the created records are returned.
    """
    created = []
    for user_id in user_ids:
        try:
            notification = await store.create(
                RecordType.NOTIFICATION,
                {
                    "user_id": user_id,
                    "message": message,
                    "type": type,
                    "entity_type": entity_type,
                    "entity_id": entity_id,
                    "link_url": link_url,
                    "priority": priority,
                    "read": False,
                },
            )
        except RecordStoreError:
            logger.warning("Could not notify user %s", user_id, exc_info=True)
            continue
        created.append(notification)
    return created


async def notify_status_change(
    store: RecordStore, application: dict[str, Any], new_status: str
) -> list[dict[str, Any]]:
    """Tell the application's borrowers its status changed."""
    recipients = status_change_recipients(application)
    if not recipients:
        return []

    application_id = application.get("id")
    number = application.get("application_number")
    message = status_message(new_status)
    if number:
        message = f"{message} (Application #{number})"

    created = await create_notifications(
        store,
        recipients,
        message=message,
        type="status_change",
        entity_type=RecordType.LOAN_APPLICATION.value,
        entity_id=application_id,
        link_url=f"{settings.APP_BASE_URL}/NewApplication?id={application_id}&action=view",
        priority="high" if new_status == ApplicationStatus.REJECTED.value else "normal",
    )
    logger.info(
        "Status change on application %s notified %d of %d recipients",
        application_id,
        len(created),
        len(recipients),
    )
    return created
