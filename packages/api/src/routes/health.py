# This project was developed with assistance from AI tools.
"""Liveness endpoint."""

from fastapi import APIRouter
from pydantic import BaseModel
from records import get_record_store

from .. import __version__

router = APIRouter()


class HealthItem(BaseModel):
    name: str
    status: str
    message: str = ""
    version: str | None = None


@router.get("/", response_model=list[HealthItem])
async def health() -> list[HealthItem]:
    """Report the API and which record store backend it is wired to."""
    try:
        backend = type(get_record_store()).__name__
        store_item = HealthItem(name="Record Store", status="healthy", message=backend)
    except RuntimeError as exc:
        store_item = HealthItem(name="Record Store", status="unhealthy", message=str(exc))
    return [
        HealthItem(name="API", status="healthy", message="API is running", version=__version__),
        store_item,
    ]
