# =============================================================================
# app/auth/dependencies.py - FastAPI Auth Dependencies
# =============================================================================
# The access guard: every task route depends on get_current_user, so a
# request without a valid bearer token is rejected with 401 before any
# task, import or export code runs.
#
# Supports both:
# - HS256 tokens signed with SUPABASE_JWT_SECRET
# - Asymmetric tokens (ES256/RS256) verified against the project JWKS
#
# Usage:
#   from app.auth import get_current_user, AuthUser
#
#   @router.get("/protected")
#   async def protected(user: AuthUser = Depends(get_current_user)):
#       return {"user_id": user.id}
# =============================================================================

import logging
import time
from typing import Any, Optional

import httpx
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError, ExpiredSignatureError
from pydantic import ValidationError

from app.config import settings
from app.auth.models import AuthUser, TokenPayload
from app.exceptions import AuthError

logger = logging.getLogger(__name__)

# HTTP Bearer token extractor. Missing headers are reported by
# get_current_user so every auth failure has the same 401 shape.
security = HTTPBearer(auto_error=False)

# Cache for JWKS keys
_jwks_cache: dict = {}
_jwks_cache_time: float = 0
JWKS_CACHE_TTL = 3600  # 1 hour


def _fetch_jwks() -> dict:
    """Fetch the JWKS document with caching."""
    global _jwks_cache, _jwks_cache_time

    current_time = time.time()

    # Return cached if valid
    if _jwks_cache and (current_time - _jwks_cache_time) < JWKS_CACHE_TTL:
        return _jwks_cache

    try:
        response = httpx.get(settings.jwks_url, timeout=10)
        response.raise_for_status()
        _jwks_cache = response.json()
        _jwks_cache_time = current_time
        logger.debug(f"Fetched JWKS from {settings.jwks_url}")
        return _jwks_cache
    except (httpx.HTTPError, ValueError) as e:
        logger.warning(f"Failed to fetch JWKS: {e}")
        # Serve a stale copy rather than locking everyone out
        if _jwks_cache:
            return _jwks_cache
        return {"keys": []}


def _get_signing_key(token: str) -> tuple[Any, str]:
    """
    Get the key and algorithm to verify a token with.

    Returns:
        Tuple of (key, algorithm)

    Raises:
        JWTError: If the header is unreadable or no JWKS key matches
    """
    unverified_header = jwt.get_unverified_header(token)

    alg = unverified_header.get("alg", "HS256")
    kid = unverified_header.get("kid")

    if alg == "HS256":
        return settings.SUPABASE_JWT_SECRET, "HS256"

    if kid:
        for key in _fetch_jwks().get("keys", []):
            if key.get("kid") == kid:
                return key, alg

    raise JWTError(f"No signing key found for alg={alg}, kid={kid}")


def decode_token(token: str) -> AuthUser:
    """
    Verify a bearer token and return the identity it carries.

    Raises:
        AuthError: If the token is expired, forged, for another audience,
            or has no 'sub' claim
    """
    try:
        signing_key, algorithm = _get_signing_key(token)

        payload = jwt.decode(
            token,
            signing_key,
            algorithms=[algorithm],
            audience=settings.JWT_AUDIENCE,
        )

    except ExpiredSignatureError:
        logger.warning("JWT token has expired")
        raise AuthError("Token has expired")

    except JWTError as e:
        logger.warning(f"JWT validation failed: {e}")
        raise AuthError(f"Invalid token: {e}")

    try:
        claims = TokenPayload.model_validate(payload)
    except ValidationError:
        logger.warning("JWT token missing 'sub' claim")
        raise AuthError("Invalid token: missing user ID")

    if not claims.sub:
        raise AuthError("Invalid token: missing user ID")

    logger.debug(f"Authenticated user: {claims.sub}")
    return AuthUser(id=claims.sub, email=claims.email)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> AuthUser:
    """
    Extract and validate the user from the Authorization header.

    A plain def, so FastAPI runs it in the threadpool: a JWKS fetch on a
    cache miss blocks a worker thread, not the event loop.

    This dependency:
    1. Extracts the Bearer token from the Authorization header
    2. Verifies the JWT signature (HS256 or JWKS-backed algorithms)
    3. Validates expiry and audience
    4. Returns an AuthUser whose id becomes the task owner

    Raises:
        AuthError: 401 if the header is missing or the token is invalid
    """
    if credentials is None:
        raise AuthError("Not authenticated")

    return decode_token(credentials.credentials)
