# =============================================================================
# app/auth/models.py - Authentication Models
# =============================================================================
# Pydantic models for authentication data.
# =============================================================================

from typing import Optional

from pydantic import BaseModel, ConfigDict


class AuthUser(BaseModel):
    """
    Authenticated user extracted from the access token.

    The id is the token's 'sub' claim and is used as the owner of every
    task the user creates. It is treated as an opaque string.
    """
    model_config = ConfigDict(frozen=True)

    id: str
    email: Optional[str] = None


class TokenPayload(BaseModel):
    """
    Decoded access token claims this service relies on.

    Expiry and audience are checked by jose during decoding.
    """
    sub: str  # User ID
    email: Optional[str] = None


class VerifyResponse(BaseModel):
    """Response for GET /auth/verify."""
    valid: bool
    user_id: str
    email: Optional[str] = None
