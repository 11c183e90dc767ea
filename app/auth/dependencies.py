# =============================================================================
# app/auth/dependencies.py - FastAPI Auth Dependencies
# =============================================================================
# Session gate: resolves the acting identity once per request.
#
# The token is read from either session cookie name, or from an
# Authorization: Bearer header for API clients.
#
# Usage:
#   from app.auth import get_current_identity, Identity
#
#   @router.get("/protected")
#   async def protected(identity: Identity = Depends(get_current_identity)):
#       return {"user_id": identity.id}
# =============================================================================

import logging
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from app.config import settings
from app.exceptions import UnauthenticatedError
from app.auth.tokens import decode_session_token
from core.models.user import Identity

logger = logging.getLogger(__name__)

# Bearer tokens are optional; the cookie is the primary carrier
security_optional = HTTPBearer(auto_error=False)


def session_token_from_request(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = None,
) -> Optional[str]:
    """Return the raw session token carried by the request, if any."""
    for name in settings.session_cookie_names:
        token = request.cookies.get(name)
        if token:
            return token
    if credentials is not None:
        return credentials.credentials
    return None


async def get_current_identity_optional(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security_optional),
) -> Optional[Identity]:
    """
    Resolve the acting identity, or None when there is no valid session.

    Invalid or expired tokens are treated as no session rather than an
    error. Used by read paths that degrade to an empty result.
    """
    token = session_token_from_request(request, credentials)
    if not token:
        return None
    return decode_session_token(token)


async def get_current_identity(
    identity: Optional[Identity] = Depends(get_current_identity_optional),
) -> Identity:
    """
    Resolve the acting identity or fail.

    Raises:
        UnauthenticatedError: If there is no valid session (handled as a
            redirect to the login surface)
    """
    if identity is None:
        raise UnauthenticatedError()
    logger.debug(f"Authenticated user: {identity.id}")
    return identity
