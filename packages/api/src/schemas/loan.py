# This project was developed with assistance from AI tools.
"""Loan and loan-team schemas."""

from typing import Any

from pydantic import BaseModel, Field


class LoanTeam(BaseModel):
    """Team id lists on a loan. Singular role fields are derived on write."""

    borrower_ids: list[str] = Field(default_factory=list)
    loan_officer_ids: list[str] = Field(default_factory=list)
    referrer_ids: list[str] = Field(default_factory=list)
    liaison_ids: list[str] = Field(default_factory=list)
    broker_ids: list[str] = Field(default_factory=list)


class LoanTeamUpdate(BaseModel):
    """Replacement team for a loan. Ids are coerced to strings and deduplicated."""

    borrower_ids: list[Any] | None = None
    loan_officer_ids: list[Any] | None = None
    referrer_ids: list[Any] | None = None
    liaison_ids: list[Any] | None = None
    broker_ids: list[Any] | None = None


class LoanTeamResponse(BaseModel):
    success: bool = True
    loan_id: str
    team: LoanTeam


class LoanListResponse(BaseModel):
    loans: list[dict[str, Any]] = Field(default_factory=list)


class LoanOfficersResponse(BaseModel):
    loan_officer_ids: list[str] = Field(default_factory=list)
    loan_officers: list[dict[str, Any]] = Field(default_factory=list)
