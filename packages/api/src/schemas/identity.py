# This project was developed with assistance from AI tools.
"""Derived identity schemas."""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class AccessIdSet(BaseModel):
    """Every record id a principal may be matched against.

    Never persisted -- rebuilt on each authorization check because the
    underlying contact links can change between requests.
    """

    model_config = ConfigDict(frozen=True)

    account_id: str
    borrower_ids: list[str] = Field(default_factory=list)
    partner_ids: list[str] = Field(default_factory=list)

    @field_validator("borrower_ids", "partner_ids")
    @classmethod
    def _dedupe(cls, value: list[str]) -> list[str]:
        return list(dict.fromkeys(v for v in value if v))
