# =============================================================================
# app/auth/routes.py - Authentication Routes
# =============================================================================
# Registration, login and logout.
#
# Login verifies the credentials and issues the session cookie. The
# GET /login and GET /register routes describe the forms for clients;
# rendering them is left to the frontend.
# =============================================================================

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from app.auth.dependencies import get_current_identity
from app.auth.tokens import clear_session_cookies, create_session_token, set_session_cookie
from app.exceptions import InvalidCredentialsError
from core.models.user import Identity, LoginRequest, RegisterRequest, UserResponse
from core.services.auth_service import CredentialVerifier
from core.services.registration_service import RegistrationService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/login")
async def login_page() -> dict:
    """Describe the login form."""
    return {
        "page": "login",
        "action": "/login",
        "fields": ["email", "password"],
        "register": "/register",
    }


@router.post("/login", response_model=UserResponse)
async def login(request: LoginRequest):
    """
    Log in with email and password.

    On success the session cookie is set and the identity returned.

    Raises:
        401: If the credentials don't match
    """
    identity = CredentialVerifier.verify(request.email, request.password)
    if identity is None:
        raise InvalidCredentialsError()

    response = JSONResponse(
        content=UserResponse.from_identity(identity).model_dump()
    )
    set_session_cookie(response, create_session_token(identity))
    logger.info(f"User logged in: {identity.id}")
    return response


@router.get("/register")
async def register_page() -> dict:
    """Describe the registration form."""
    return {
        "page": "register",
        "action": "/register",
        "fields": ["name", "email", "password"],
        "login": "/login",
    }


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(request: RegisterRequest) -> dict:
    """
    Register a new account.

    Does not log the user in; clients follow up with POST /login.

    Raises:
        409: If the email is already registered
    """
    RegistrationService.register(
        name=request.name,
        email=request.email,
        password=request.password,
    )
    return {"success": True, "login": "/login"}


@router.post("/logout")
async def logout() -> JSONResponse:
    """Clear the session cookies."""
    response = JSONResponse(content={"success": True})
    clear_session_cookies(response)
    return response


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(
    identity: Identity = Depends(get_current_identity)
) -> UserResponse:
    """
    Get the current authenticated user.

    Raises:
        401: If not authenticated
    """
    return UserResponse.from_identity(identity)
