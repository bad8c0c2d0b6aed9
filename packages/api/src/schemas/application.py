# This project was developed with assistance from AI tools.
"""Loan application request/response schemas.

Application records are free-form documents owned by the record store, so
they travel as plain dicts; only the envelopes are typed.
"""

from typing import Any

from pydantic import BaseModel, Field


class ApplicationCreate(BaseModel):
    """Create a new loan application."""

    application_data: dict[str, Any] | None = None


class ApplicationProgress(BaseModel):
    """Partial save of an in-progress application form."""

    data: dict[str, Any] | None = None


class ApplicationStatusUpdate(BaseModel):
    """Field updates applied by a loan officer or administrator."""

    updates: dict[str, Any] | None = None


class ApplicationResponse(BaseModel):
    application: dict[str, Any]


class ApplicationListResponse(BaseModel):
    applications: list[dict[str, Any]] = Field(default_factory=list)


class ApplicationAccessResponse(BaseModel):
    """Application plus the caller's relationship to it."""

    application: dict[str, Any]
    user_role: str = ""
    can_manage: bool = False


class SaveProgressResponse(BaseModel):
    success: bool = True
