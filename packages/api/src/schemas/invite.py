# This project was developed with assistance from AI tools.
"""Borrower invite activation schemas."""

from enum import Enum

from pydantic import BaseModel, Field


class ActivationStatus(str, Enum):
    ACTIVATED = "activated"
    NO_BORROWER = "no_borrower"


class ActivationResult(BaseModel):
    """Outcome of reconciling an invited borrower with their account."""

    status: ActivationStatus
    borrower_id: str | None = None
    superseded_ids: list[str] = Field(default_factory=list)
    repaired_applications: list[str] = Field(default_factory=list)
