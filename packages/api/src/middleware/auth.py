# This project was developed with assistance from AI tools.
"""
JWT authentication middleware for the portal's OIDC provider.

Validates Bearer tokens against the provider's JWKS endpoint, loads the
caller's ``User`` record for their portal roles, and provides FastAPI
dependencies for route-level auth.

Set AUTH_DISABLED=true to bypass validation (tests / local dev without an IdP).
"""

import logging
import time
from typing import Annotated

import httpx
import jwt
from fastapi import Depends, HTTPException, Request, status
from records import (
    AppRole,
    CachedRecordStore,
    RecordNotFoundError,
    RecordStoreError,
    RecordType,
    get_store,
)

from ..core.auth import as_app_role
from ..core.config import settings
from ..schemas.auth import Principal, TokenPayload

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# JWKS cache
# ---------------------------------------------------------------------------

_jwks_data: dict | None = None
_jwks_fetched_at: float = 0


def _jwks_url() -> str:
    return settings.JWKS_URL or f"{settings.OIDC_ISSUER_URL}/protocol/openid-connect/certs"


def _fetch_jwks() -> dict:
    """Fetch the JSON Web Key Set from the identity provider. Raises on failure."""
    response = httpx.get(_jwks_url(), timeout=5)
    response.raise_for_status()
    return response.json()


def _get_jwks(force_refresh: bool = False) -> dict:
    """Return cached JWKS, refreshing if stale or forced."""
    global _jwks_data, _jwks_fetched_at  # noqa: PLW0603

    now = time.time()
    if _jwks_data is None or force_refresh or (now - _jwks_fetched_at) > settings.JWKS_CACHE_TTL:
        _jwks_data = _fetch_jwks()
        _jwks_fetched_at = now

    return _jwks_data


def _get_signing_key(token: str) -> jwt.PyJWK:
    """Find the signing key for the given token from the JWKS."""
    try:
        header = jwt.get_unverified_header(token)
        kid = header.get("kid")

        for force_refresh in (False, True):
            # kid not found on the first pass -- cache-bust and retry once (key rotation)
            jwk_set = jwt.PyJWKSet.from_dict(_get_jwks(force_refresh=force_refresh))
            for key in jwk_set.keys:
                if key.key_id == kid:
                    return key

        raise jwt.InvalidTokenError(f"No matching key found for kid={kid}")

    except httpx.HTTPError as exc:
        logger.error("Failed to fetch JWKS from identity provider: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Authentication service unavailable",
        ) from exc


# ---------------------------------------------------------------------------
# Token validation
# ---------------------------------------------------------------------------

def _extract_token(request: Request) -> str | None:
    """Extract Bearer token from Authorization header."""
    auth = request.headers.get("Authorization")
    if auth and auth.startswith("Bearer "):
        return auth[7:]
    return None


def _decode_token(token: str) -> TokenPayload:
    """Validate and decode a JWT against the provider's JWKS."""
    signing_key = _get_signing_key(token)

    payload = jwt.decode(
        token,
        signing_key.key,
        algorithms=["RS256"],
        issuer=settings.OIDC_ISSUER_URL,
        audience=settings.JWT_AUDIENCE,
        options={"verify_aud": settings.JWT_AUDIENCE is not None},
    )
    return TokenPayload(**payload)


def _claimed_app_role(payload: TokenPayload) -> str:
    """App role from the token: explicit claim first, then realm roles."""
    if payload.app_role:
        return payload.app_role
    for role in payload.realm_access.get("roles", []):
        if as_app_role(role) is not None:
            return role
    return ""


async def _load_principal(payload: TokenPayload, store: CachedRecordStore) -> Principal:
    """Merge token claims with the caller's ``User`` record.

    The account record is authoritative for roles; when it cannot be read
    the token claims are used on their own.
    """
    account: dict = {}
    try:
        account = await store.get(RecordType.USER, payload.sub)
    except RecordNotFoundError:
        logger.info("No User record for subject %s; using token claims", payload.sub)
    except RecordStoreError:
        logger.warning("Could not load User %s; using token claims", payload.sub, exc_info=True)

    return Principal(
        id=payload.sub,
        email=account.get("email") or payload.email,
        role=account.get("role") or payload.role,
        app_role=account.get("app_role") or _claimed_app_role(payload),
        name=account.get("full_name") or payload.name or payload.preferred_username,
    )


# ---------------------------------------------------------------------------
# FastAPI dependencies
# ---------------------------------------------------------------------------

_DISABLED_USER = Principal(
    id="dev-user",
    email="dev@loan-portal.local",
    role="admin",
    app_role=AppRole.ADMINISTRATOR.value,
    name="Dev User",
)


async def get_current_user(
    request: Request,
    store: CachedRecordStore = Depends(get_store),
) -> Principal:
    """FastAPI dependency: validate JWT and return the Principal.

    When AUTH_DISABLED=true, returns a dev admin principal without token validation.
    """
    if settings.AUTH_DISABLED:
        return _DISABLED_USER

    token = _extract_token(request)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing authentication token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        payload = _decode_token(token)
    except jwt.ExpiredSignatureError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token has expired",
            headers={"WWW-Authenticate": "Bearer"},
        ) from exc
    except jwt.InvalidTokenError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
            headers={"WWW-Authenticate": "Bearer"},
        ) from exc

    return await _load_principal(payload, store)


# Type alias for use in route signatures
CurrentUser = Annotated[Principal, Depends(get_current_user)]


def require_roles(*allowed_roles: AppRole):
    """Dependency factory: restrict a route to specific app roles.

    The platform admin sentinel counts as ``AppRole.ADMINISTRATOR``.

    Usage:
        @router.get("/admin-only", dependencies=[Depends(require_roles(AppRole.ADMINISTRATOR))])
    """

    async def _check(user: CurrentUser) -> Principal:
        if user.is_admin and AppRole.ADMINISTRATOR in allowed_roles:
            return user
        if as_app_role(user.app_role) not in allowed_roles:
            logger.warning(
                "RBAC denied: user=%s app_role=%s attempted route requiring %s",
                user.id,
                user.app_role,
                [r.value for r in allowed_roles],
            )
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Insufficient permissions",
            )
        return user

    return _check
