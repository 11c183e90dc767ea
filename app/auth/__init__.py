# =============================================================================
# app/auth/__init__.py - Authentication Module
# =============================================================================
# Provides cookie-based sessions backed by signed tokens.
#
# Usage:
#   from app.auth import get_current_identity, Identity
#
#   @router.get("/protected")
#   async def protected(identity: Identity = Depends(get_current_identity)):
#       return {"user_id": identity.id}
# =============================================================================

from app.auth.dependencies import get_current_identity, get_current_identity_optional
from app.auth.middleware import SessionGateMiddleware
from app.auth.tokens import create_session_token, decode_session_token
from core.models.user import Identity

__all__ = [
    "get_current_identity",
    "get_current_identity_optional",
    "SessionGateMiddleware",
    "create_session_token",
    "decode_session_token",
    "Identity",
]
