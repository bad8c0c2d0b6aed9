# This project was developed with assistance from AI tools.
"""
Application configuration.

All settings read from environment variables with sensible local dev defaults.
Record store connection settings live with the store client in
``records.config``; everything the HTTP layer needs is grouped here.
"""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve project root .env regardless of CWD
_PROJECT_ROOT = Path(__file__).resolve().parents[4]
_ENV_FILE = _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    """Application settings -- single source of truth for env-driven config."""

    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # -- App --
    APP_NAME: str = "loan-portal"
    DEBUG: bool = False
    APP_BASE_URL: str = Field(
        default="http://localhost:5173",
        description="Public portal URL, used to build links in in-app notifications.",
    )

    # -- CORS --
    ALLOWED_HOSTS: list[str] = ["http://localhost:5173"]

    # -- Auth --
    AUTH_DISABLED: bool = Field(
        default=False,
        description="Bypass JWT validation. Set True for tests and local dev without an IdP.",
    )
    OIDC_ISSUER_URL: str = "http://localhost:8080/realms/loan-portal"
    JWKS_URL: str | None = Field(
        default=None,
        description="JWKS endpoint. Defaults to the issuer's openid-connect certs path.",
    )
    JWT_AUDIENCE: str | None = Field(
        default=None,
        description="Expected 'aud' claim. Audience is not verified when unset.",
    )
    JWKS_CACHE_TTL: int = Field(
        default=300,
        description="JWKS cache lifetime in seconds (default 5 minutes).",
    )


settings = Settings()
