# This project was developed with assistance from AI tools.
"""Loan and loan-team routes."""

from fastapi import APIRouter, Depends
from records import AppRole, CachedRecordStore, get_store

from ..middleware.auth import CurrentUser, require_roles
from ..schemas.loan import (
    LoanListResponse,
    LoanOfficersResponse,
    LoanTeamResponse,
    LoanTeamUpdate,
)
from ..services import loan as loan_service

router = APIRouter()

_STAFF_ROLES = (AppRole.ADMINISTRATOR, AppRole.LOAN_OFFICER)


@router.get(
    "/",
    response_model=LoanListResponse,
    dependencies=[Depends(require_roles(*_STAFF_ROLES))],
)
async def list_loans(
    store: CachedRecordStore = Depends(get_store),
) -> LoanListResponse:
    return LoanListResponse(loans=await loan_service.list_loans(store))


@router.get("/{loan_id}/officers", response_model=LoanOfficersResponse)
async def get_loan_officers(
    loan_id: str,
    user: CurrentUser,
    store: CachedRecordStore = Depends(get_store),
) -> LoanOfficersResponse:
    """Officer accounts on a loan; officers that fail to load are omitted."""
    officer_ids, officers = await loan_service.get_loan_officer_team(store, user, loan_id)
    return LoanOfficersResponse(loan_officer_ids=officer_ids, loan_officers=officers)


@router.put(
    "/{loan_id}/team",
    response_model=LoanTeamResponse,
    dependencies=[Depends(require_roles(*_STAFF_ROLES))],
)
async def update_loan_team(
    loan_id: str,
    body: LoanTeamUpdate,
    user: CurrentUser,
    store: CachedRecordStore = Depends(get_store),
) -> LoanTeamResponse:
    """Replace the loan team and verify the write persisted."""
    team = await loan_service.update_loan_team(store, user, loan_id, body)
    return LoanTeamResponse(loan_id=loan_id, team=team)
