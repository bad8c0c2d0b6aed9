# This project was developed with assistance from AI tools.
"""Tests for JWT authentication middleware."""

import json
import time
from unittest.mock import patch

import jwt
import pytest
from cryptography.hazmat.primitives.asymmetric import rsa
from fastapi import Depends, FastAPI
from fastapi.testclient import TestClient
from jwt.algorithms import RSAAlgorithm
from records import AppRole, RecordType

from src.core.config import settings
from src.middleware import auth as auth_module
from src.middleware.auth import CurrentUser, require_roles
from src.schemas.auth import TokenPayload


def _me_app() -> FastAPI:
    app = FastAPI()

    @app.get("/me")
    async def me(user: CurrentUser):
        return user.model_dump()

    return app


# ---------------------------------------------------------------------------
# AUTH_DISABLED bypass
# ---------------------------------------------------------------------------


def test_auth_disabled_returns_dev_admin(monkeypatch):
    """When AUTH_DISABLED=true, any request gets a dev admin principal."""
    monkeypatch.setattr(settings, "AUTH_DISABLED", True)

    resp = TestClient(_me_app()).get("/me")

    assert resp.status_code == 200
    body = resp.json()
    assert body["id"] == "dev-user"
    assert body["role"] == "admin"
    assert body["app_role"] == "Administrator"


# ---------------------------------------------------------------------------
# Missing / malformed token
# ---------------------------------------------------------------------------


def test_missing_token_returns_401():
    """A request with no Authorization header should get 401."""
    resp = TestClient(_me_app()).get("/me")
    assert resp.status_code == 401
    assert "Missing authentication token" in resp.json()["detail"]


def test_invalid_token_returns_401():
    with patch(
        "src.middleware.auth._decode_token", side_effect=jwt.InvalidTokenError("bad")
    ):
        resp = TestClient(_me_app()).get("/me", headers={"Authorization": "Bearer junk"})
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Invalid token"


# ---------------------------------------------------------------------------
# Principal construction
# ---------------------------------------------------------------------------


def test_user_record_is_authoritative_for_roles(use_records):
    use_records(
        {
            RecordType.USER: [
                {"id": "lo-james", "app_role": "loan_officer", "email": "james@lender.example.com"}
            ]
        }
    )
    payload = TokenPayload(sub="lo-james", email="stale@example.com", app_role="Borrower")

    with patch("src.middleware.auth._decode_token", return_value=payload):
        resp = TestClient(_me_app()).get("/me", headers={"Authorization": "Bearer t"})

    body = resp.json()
    assert body["app_role"] == "Loan Officer"
    assert body["email"] == "james@lender.example.com"


def test_token_claims_used_without_user_record():
    payload = TokenPayload(
        sub="user-new",
        email="new@example.com",
        preferred_username="newbie",
        realm_access={"roles": ["offline_access", "brokerage"]},
    )

    with patch("src.middleware.auth._decode_token", return_value=payload):
        resp = TestClient(_me_app()).get("/me", headers={"Authorization": "Bearer t"})

    body = resp.json()
    assert body["id"] == "user-new"
    assert body["app_role"] == "Broker"
    assert body["name"] == "newbie"


# ---------------------------------------------------------------------------
# Signature verification against a JWKS
# ---------------------------------------------------------------------------


@pytest.fixture
def signing_key(monkeypatch):
    """RSA key whose public half is served as the provider's JWKS."""
    private_key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    jwk = json.loads(RSAAlgorithm.to_jwk(private_key.public_key()))
    jwk.update({"kid": "test-key", "use": "sig", "alg": "RS256"})

    monkeypatch.setattr(auth_module, "_jwks_data", None)
    monkeypatch.setattr(auth_module, "_fetch_jwks", lambda: {"keys": [jwk]})
    return private_key


def _token(private_key, **claims) -> str:
    payload = {
        "sub": "user-sarah",
        "iss": settings.OIDC_ISSUER_URL,
        "exp": int(time.time()) + 300,
        "app_role": "Borrower",
        **claims,
    }
    return jwt.encode(payload, private_key, algorithm="RS256", headers={"kid": "test-key"})


def test_valid_signed_token_accepted(signing_key):
    resp = TestClient(_me_app()).get(
        "/me", headers={"Authorization": f"Bearer {_token(signing_key)}"}
    )
    assert resp.status_code == 200
    assert resp.json()["id"] == "user-sarah"


def test_expired_token_rejected(signing_key):
    token = _token(signing_key, exp=int(time.time()) - 60)
    resp = TestClient(_me_app()).get("/me", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Token has expired"


def test_wrong_issuer_rejected(signing_key):
    token = _token(signing_key, iss="https://evil.example.com")
    resp = TestClient(_me_app()).get("/me", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 401


# ---------------------------------------------------------------------------
# require_roles dependency
# ---------------------------------------------------------------------------


def _guarded_app(*roles: AppRole) -> FastAPI:
    app = FastAPI()

    @app.get("/guarded", dependencies=[Depends(require_roles(*roles))])
    async def guarded():
        return {"ok": True}

    return app


def test_require_roles_rejects_wrong_role(monkeypatch):
    """require_roles returns 403 when the app role is not in the allowed set."""
    monkeypatch.setattr(settings, "AUTH_DISABLED", True)

    resp = TestClient(_guarded_app(AppRole.LOAN_OFFICER)).get("/guarded")

    assert resp.status_code == 403
    assert "Insufficient permissions" in resp.json()["detail"]


def test_require_roles_allows_matching_role(monkeypatch):
    monkeypatch.setattr(settings, "AUTH_DISABLED", True)
    resp = TestClient(_guarded_app(AppRole.ADMINISTRATOR)).get("/guarded")
    assert resp.status_code == 200


def test_platform_admin_sentinel_counts_as_administrator(use_records):
    use_records({RecordType.USER: [{"id": "ops", "role": "admin", "app_role": "Borrower"}]})
    payload = TokenPayload(sub="ops")

    with patch("src.middleware.auth._decode_token", return_value=payload):
        client = TestClient(_guarded_app(AppRole.ADMINISTRATOR))
        resp = client.get("/guarded", headers={"Authorization": "Bearer t"})

    assert resp.status_code == 200
