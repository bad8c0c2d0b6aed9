# This project was developed with assistance from AI tools.
"""Loan officer queue routes."""

from fastapi import APIRouter, Depends
from records import AppRole, CachedRecordStore, get_store

from ..core.errors import InvalidInput
from ..middleware.auth import CurrentUser, require_roles
from ..schemas.queue import AssignmentResponse, QueueSyncResponse, QueueWorkloadResponse
from ..services import workload as workload_service

router = APIRouter()


@router.post("/assign", response_model=AssignmentResponse)
async def assign_loan_officer(
    _user: CurrentUser,
    store: CachedRecordStore = Depends(get_store),
) -> AssignmentResponse:
    """Return the officer the next new application would be assigned to."""
    officer_id, current_workload = await workload_service.pick_loan_officer(store)
    if officer_id is None:
        raise InvalidInput("No loan officers in queue", loan_officer_id=None)
    return AssignmentResponse(loan_officer_id=officer_id, current_workload=current_workload)


@router.post(
    "/sync",
    response_model=QueueSyncResponse,
    dependencies=[Depends(require_roles(AppRole.ADMINISTRATOR))],
)
async def sync_queue(
    store: CachedRecordStore = Depends(get_store),
) -> QueueSyncResponse:
    """Add every Loan Officer account that is missing from the queue."""
    return await workload_service.sync_queue_with_officers(store)


@router.get(
    "/workload",
    response_model=QueueWorkloadResponse,
    dependencies=[Depends(require_roles(AppRole.ADMINISTRATOR, AppRole.LOAN_OFFICER))],
)
async def get_queue_workload(
    store: CachedRecordStore = Depends(get_store),
) -> QueueWorkloadResponse:
    items, next_officer_id = await workload_service.queue_workload(store)
    return QueueWorkloadResponse(queue=items, next_loan_officer_id=next_officer_id)
