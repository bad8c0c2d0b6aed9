# This project was developed with assistance from AI tools.
"""Borrower invite activation route."""

from fastapi import APIRouter, Depends
from records import CachedRecordStore, get_store

from ..middleware.auth import CurrentUser
from ..schemas.invite import ActivationResult
from ..services.invite import activate_invite

router = APIRouter()


@router.post("/activate", response_model=ActivationResult)
async def activate(
    user: CurrentUser,
    store: CachedRecordStore = Depends(get_store),
) -> ActivationResult:
    """Link the caller's invited Borrower contact to their account.

    Called by the portal after every borrower login; safe to repeat.
    """
    return await activate_invite(store, user)
