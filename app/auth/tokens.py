# =============================================================================
# app/auth/tokens.py - Session Tokens
# =============================================================================
# Issues and verifies the signed session tokens carried in the session
# cookie (or an Authorization: Bearer header).
#
# Tokens are HS256 JWTs signed with settings.SECRET_KEY. They hold the
# minimal identity so that requests don't need a database round trip.
# =============================================================================

import logging
import time

from fastapi import Response
from jose import jwt, JWTError, ExpiredSignatureError

from app.config import settings
from core.models.user import Identity

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"


def create_session_token(identity: Identity, now: int | None = None) -> str:
    """
    Sign a session token for an identity.

    Args:
        identity: The authenticated user
        now: Issue time as a unix timestamp (defaults to current time)

    Returns:
        Encoded JWT
    """
    issued_at = int(now if now is not None else time.time())
    payload = {
        "sub": identity.id,
        "name": identity.name,
        "email": identity.email,
        "picture": identity.image,
        "iat": issued_at,
        "exp": issued_at + settings.SESSION_MAX_AGE_SECONDS,
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=ALGORITHM)


def decode_session_token(token: str) -> Identity | None:
    """
    Verify a session token and return its identity.

    Returns None for expired, tampered or malformed tokens.
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
    except ExpiredSignatureError:
        logger.info("Session token has expired")
        return None
    except JWTError as e:
        logger.warning(f"Session token validation failed: {e}")
        return None

    user_id = payload.get("sub")
    if not user_id:
        logger.warning("Session token missing 'sub' claim")
        return None

    return Identity(
        id=str(user_id),
        name=payload.get("name"),
        email=payload.get("email"),
        image=payload.get("picture"),
    )


def set_session_cookie(response: Response, token: str) -> None:
    """
    Attach the session cookie to a response.

    Production uses the __Secure- prefixed name, which browsers only accept
    together with the Secure flag.
    """
    name = (
        settings.secure_session_cookie_name
        if settings.is_production
        else settings.SESSION_COOKIE_NAME
    )
    response.set_cookie(
        name,
        token,
        max_age=settings.SESSION_MAX_AGE_SECONDS,
        httponly=True,
        samesite="lax",
        secure=settings.is_production,
        path="/",
    )


def clear_session_cookies(response: Response) -> None:
    for name in settings.session_cookie_names:
        response.delete_cookie(name, path="/")
