# This project was developed with assistance from AI tools.
"""Authentication schemas."""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..core.auth import is_admin, is_loan_officer, is_loan_partner_role, normalize_app_role


class Principal(BaseModel):
    """The authenticated actor, injected by auth middleware into every request."""

    model_config = ConfigDict(frozen=True)

    id: str
    email: str = ""
    role: str = ""
    app_role: str = ""
    name: str = ""

    @field_validator("app_role", mode="before")
    @classmethod
    def _normalize_app_role(cls, value: object) -> str:
        return normalize_app_role(value)

    @field_validator("email", "role", mode="before")
    @classmethod
    def _none_to_empty(cls, value: object) -> str:
        return "" if value is None else str(value).strip()

    @property
    def is_admin(self) -> bool:
        return is_admin(self.role, self.app_role)

    @property
    def is_loan_officer(self) -> bool:
        return is_loan_officer(self.app_role)

    @property
    def is_loan_partner(self) -> bool:
        return is_loan_partner_role(self.app_role)


class TokenPayload(BaseModel):
    """Decoded JWT token claims from the identity provider."""

    sub: str
    email: str = ""
    preferred_username: str = ""
    name: str = ""
    role: str = ""
    app_role: str = ""
    realm_access: dict = Field(default_factory=dict)
