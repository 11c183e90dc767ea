# =============================================================================
# app/auth/middleware.py - Route Gate
# =============================================================================
# Coarse session-presence check applied to every request before routing:
# - authenticated visitors of /login or /register are sent home
# - unauthenticated visitors of a protected path are sent to /login
#
# Only the presence of a session cookie or Bearer header is checked here.
# Signature and expiry are verified downstream by the session gate
# dependencies.
# =============================================================================

import logging

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import RedirectResponse

from app.config import settings
from app.exceptions import LOGIN_PATH, login_redirect

logger = logging.getLogger(__name__)

HOME_PATH = "/"
REGISTER_PATH = "/register"

AUTH_PAGES = (LOGIN_PATH, REGISTER_PATH)

PUBLIC_PREFIXES = (
    LOGIN_PATH,
    REGISTER_PATH,
    "/api/v1/auth",
    "/api/v1/health",
    "/static",
    "/docs",
    "/redoc",
)

PUBLIC_PATHS = (
    "/favicon.ico",
    "/openapi.json",
)


def is_public_path(path: str) -> bool:
    """True for auth pages, identity-provider callbacks, health and assets."""
    return path in PUBLIC_PATHS or path.startswith(PUBLIC_PREFIXES)


def has_session_cookie(request: Request) -> bool:
    return any(request.cookies.get(name) for name in settings.session_cookie_names)


def has_bearer_token(request: Request) -> bool:
    scheme, _, token = request.headers.get("authorization", "").partition(" ")
    return scheme.lower() == "bearer" and bool(token.strip())


class SessionGateMiddleware(BaseHTTPMiddleware):
    """Redirects requests according to session presence."""

    async def dispatch(self, request, call_next):
        path = request.url.path
        has_cookie = has_session_cookie(request)

        if has_cookie and path in AUTH_PAGES and request.method == "GET":
            return RedirectResponse(url=HOME_PATH, status_code=303)

        # API clients carry the session token as a Bearer header instead
        authenticated = has_cookie or has_bearer_token(request)

        if not authenticated and not is_public_path(path):
            logger.debug(f"Redirecting unauthenticated request for {path} to login")
            return login_redirect(request)

        return await call_next(request)
