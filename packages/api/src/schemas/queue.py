# This project was developed with assistance from AI tools.
"""Loan officer queue and assignment schemas."""

from pydantic import BaseModel, ConfigDict, Field


class QueueEntry(BaseModel):
    """One officer's slot in the round-robin queue."""

    model_config = ConfigDict(extra="ignore")

    loan_officer_id: str
    queue_position: int = 0
    is_active: bool = True
    active_loan_count: int = 0


class AssignmentResponse(BaseModel):
    loan_officer_id: str | None = None
    current_workload: int | None = None


class QueuedOfficer(BaseModel):
    id: str
    name: str
    position: int


class QueueSyncResponse(BaseModel):
    message: str
    added: int = 0
    officers: list[QueuedOfficer] = Field(default_factory=list)


class QueueWorkloadItem(BaseModel):
    loan_officer_id: str
    queue_position: int
    is_active: bool
    workload: int


class QueueWorkloadResponse(BaseModel):
    queue: list[QueueWorkloadItem] = Field(default_factory=list)
    next_loan_officer_id: str | None = None
