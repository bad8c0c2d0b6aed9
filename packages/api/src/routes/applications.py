# This project was developed with assistance from AI tools.
"""Loan application routes with RBAC enforcement."""

from fastapi import APIRouter, Depends
from records import AppRole, CachedRecordStore, get_store

from ..middleware.auth import CurrentUser, require_roles
from ..schemas.application import (
    ApplicationAccessResponse,
    ApplicationCreate,
    ApplicationListResponse,
    ApplicationProgress,
    ApplicationResponse,
    ApplicationStatusUpdate,
    SaveProgressResponse,
)
from ..services import application as app_service

router = APIRouter()

_STAFF_ROLES = (AppRole.ADMINISTRATOR, AppRole.LOAN_OFFICER)


@router.post(
    "/",
    response_model=ApplicationResponse,
    dependencies=[
        Depends(
            require_roles(
                AppRole.ADMINISTRATOR,
                AppRole.LOAN_OFFICER,
                AppRole.BORROWER,
                AppRole.LIAISON,
                AppRole.BROKER,
            )
        )
    ],
)
async def create_application(
    body: ApplicationCreate,
    user: CurrentUser,
    store: CachedRecordStore = Depends(get_store),
) -> ApplicationResponse:
    """Create an application and auto-assign a loan officer if none is given."""
    application = await app_service.create_application(store, user, body.application_data)
    return ApplicationResponse(application=application)


@router.get("/mine", response_model=ApplicationListResponse)
async def list_my_applications(
    user: CurrentUser,
    store: CachedRecordStore = Depends(get_store),
) -> ApplicationListResponse:
    """Applications the caller participates in, newest first."""
    applications = await app_service.list_my_applications(store, user)
    return ApplicationListResponse(applications=applications)


@router.get(
    "/",
    response_model=ApplicationListResponse,
    dependencies=[Depends(require_roles(*_STAFF_ROLES))],
)
async def list_applications(
    store: CachedRecordStore = Depends(get_store),
) -> ApplicationListResponse:
    applications = await app_service.list_all_applications(store)
    return ApplicationListResponse(applications=applications)


@router.get("/{application_id}", response_model=ApplicationAccessResponse)
async def get_application(
    application_id: str,
    user: CurrentUser,
    store: CachedRecordStore = Depends(get_store),
) -> ApplicationAccessResponse:
    """Return one application if the caller is staff on it or on its team."""
    application, can_manage = await app_service.get_application_with_access(
        store, user, application_id
    )
    return ApplicationAccessResponse(
        application=application,
        user_role=user.app_role,
        can_manage=can_manage,
    )


@router.put("/{application_id}/progress", response_model=SaveProgressResponse)
async def save_progress(
    application_id: str,
    body: ApplicationProgress,
    user: CurrentUser,
    store: CachedRecordStore = Depends(get_store),
) -> SaveProgressResponse:
    """Save in-progress form data; the stored loan team is never overwritten."""
    await app_service.save_application_progress(store, user, application_id, body.data)
    return SaveProgressResponse()


@router.patch(
    "/{application_id}/status",
    response_model=ApplicationResponse,
    dependencies=[Depends(require_roles(*_STAFF_ROLES))],
)
async def update_status(
    application_id: str,
    body: ApplicationStatusUpdate,
    store: CachedRecordStore = Depends(get_store),
) -> ApplicationResponse:
    application = await app_service.update_application_status(
        store, application_id, body.updates
    )
    return ApplicationResponse(application=application)
