# =============================================================================
# app/auth/__init__.py - Authentication Module
# =============================================================================
# Provides JWT-based bearer authentication.
#
# Usage:
#   from app.auth import get_current_user, AuthUser
#
#   @router.get("/protected")
#   async def protected(user: AuthUser = Depends(get_current_user)):
#       return {"user_id": user.id}
# =============================================================================

from app.auth.dependencies import decode_token, get_current_user
from app.auth.models import AuthUser, VerifyResponse

__all__ = [
    "decode_token",
    "get_current_user",
    "AuthUser",
    "VerifyResponse",
]
